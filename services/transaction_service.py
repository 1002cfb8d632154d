"""
Transaction processing service.
Encapsulates the dashboard and export pipelines over raw export rows.
"""
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from core.config import get_settings
from core.exporters import (
    build_txf_export,
    create_output_filename,
    filter_export_rows,
    write_txf_file,
)
from core.logger import setup_logger
from core.normalize import normalize_rows
from core.parsing import parse_csv_file, validate_rows
from core.schema import ExportResult, RawRow, TransactionFilter
from core.summary import (
    available_years,
    calculate_expense_breakdown,
    calculate_financial_summary,
    calculate_monthly_breakdown,
    filter_transactions,
)

logger = setup_logger(__name__)


class TransactionService:
    """Service for turning accounting export rows into dashboards and TXF files."""
    
    def __init__(self):
        """Initialize transaction service."""
        self.settings = get_settings()
    
    def build_dashboard(
        self,
        rows: List[RawRow],
        flt: Optional[TransactionFilter] = None,
        now: Optional[datetime] = None
    ) -> Dict[str, Any]:
        """
        Normalize rows and compute every dashboard figure.
        
        Args:
            rows: Raw export rows
            flt: Optional year / month / category selection
            now: Processing time used for rows without a date
        
        Returns:
            Dictionary with summary, breakdowns, available years and row tallies
        """
        result = normalize_rows(rows, now=now)
        selected = filter_transactions(result.transactions, flt)
        
        logger.info(
            f"Dashboard: {result.accepted_count} accepted, {result.skipped_count} skipped, "
            f"{len(selected)} selected"
        )
        
        return {
            "summary": calculate_financial_summary(selected),
            "monthly": calculate_monthly_breakdown(selected),
            "expenses_by_category": calculate_expense_breakdown(selected),
            "available_years": available_years(result.transactions),
            "accepted_count": result.accepted_count,
            "skipped_count": result.skipped_count,
        }
    
    def build_export(
        self,
        rows: List[RawRow],
        company_name: Optional[str] = None,
        year: Optional[int] = None,
        today: Optional[date] = None
    ) -> ExportResult:
        """
        Filter rows for export and convert them to TXF.
        
        Args:
            rows: Raw export rows
            company_name: A header line (defaults to the configured company)
            year: Optional transaction year to export
            today: Export date (defaults to the current date)
        
        Returns:
            ExportResult with document text and tallies
        """
        selected = filter_export_rows(rows, self.settings.excluded_export_accounts, year)
        return build_txf_export(selected, company_name or self.settings.company_name, today)
    
    def export_to_file(
        self,
        file_path: str,
        company_name: Optional[str] = None,
        year: Optional[int] = None,
        output_path: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Convert a CSV export file to a TXF file in the storage directory.
        
        Args:
            file_path: Path to CSV export
            company_name: A header line (defaults to the configured company)
            year: Optional transaction year to export
            output_path: Destination (defaults to a timestamped file)
        
        Returns:
            Dictionary with output_path and statistics
        
        Raises:
            DataNotFoundError: If the CSV file doesn't exist
            ParsingError: If the CSV cannot be parsed
            ExportError: If the TXF file cannot be written
        """
        logger.info(f"Processing export file: {file_path}")
        
        rows = parse_csv_file(file_path)
        stats = validate_rows(rows)
        
        export = self.build_export(rows, company_name=company_name, year=year)
        
        output_path = output_path or create_output_filename(self.settings.temp_storage_path)
        write_txf_file(export.content, output_path)
        
        return {
            "output_path": output_path,
            "stats": {
                **stats,
                "converted_count": export.converted_count,
                "unmapped_count": export.unmapped_count,
                "failed_count": export.failed_count,
            }
        }
