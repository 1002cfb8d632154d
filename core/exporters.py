"""
TXF (Tax eXchange Format, V041) export.

Builds the flat import file directly from raw export rows. Rows are parsed
here independently of core.normalize: the field priorities are the same, but
an unparseable date falls back to today instead of rejecting the row.
"""
from datetime import date, datetime
from pathlib import Path
from typing import Collection, Iterable, List, Optional

from core.categories import get_txf_code
from core.config import get_settings
from core.exceptions import ExportError
from core.logger import setup_logger
from core.normalize import (
    AMOUNT_FIELDS,
    CATEGORY_FIELDS,
    DATE_FIELDS,
    DEFAULT_AMOUNT,
    DEFAULT_CATEGORY,
    DEFAULT_DESCRIPTION,
    DESCRIPTION_FIELDS,
    clean_amount,
    first_present,
    parse_date,
)
from core.schema import ExportResult, RawRow

logger = setup_logger(__name__)

TXF_VERSION = "V041"
RECORD_SEPARATOR = "^"

ACCOUNT_NAME_FIELD = "Account Name"
TRANSACTION_DATE_FIELD = "Transaction Date"


def format_txf_date(value: date) -> str:
    """Format a date as en-US M/D/YYYY without zero padding."""
    return f"{value.month}/{value.day}/{value.year}"


def format_txf_record(code: int, description: str, date_str: str, amount: float) -> List[str]:
    """
    Build the lines of one TXF transaction record.
    
    Args:
        code: TXF line-item code
        description: Payee / description text
        date_str: Already formatted transaction date
        amount: Signed amount; the record carries its absolute value
    
    Returns:
        Record lines, opening and closing separator included
    """
    # Line breaks inside a field would start a new TXF field
    description = " ".join(description.splitlines())
    return [
        RECORD_SEPARATOR,
        f"C{code}",
        f"P{description}",
        f"D{date_str}",
        f"${abs(amount):.2f}",
        RECORD_SEPARATOR,
    ]


def _row_date(row: RawRow, today_str: str) -> str:
    date_value = first_present(row, DATE_FIELDS)
    if not date_value:
        return today_str
    parsed = parse_date(date_value)
    if parsed is None:
        logger.debug(f"Unparseable date '{date_value}', using today")
        return today_str
    return format_txf_date(parsed)


def build_txf_export(
    rows: Iterable[RawRow],
    company_name: str,
    today: Optional[date] = None
) -> ExportResult:
    """
    Convert raw export rows to a TXF document.
    
    Rows whose category has no TXF code are skipped, as are rows whose
    amount cannot be parsed. Neither stops the conversion.
    
    Args:
        rows: Raw export rows in file order
        company_name: Written to the A header line
        today: Export date (defaults to the current date)
    
    Returns:
        ExportResult with the document text and conversion tallies
    """
    today_str = format_txf_date(today or datetime.now().date())
    rows = list(rows)
    
    logger.info(f"TXF conversion - total rows: {len(rows)}")
    
    output = [TXF_VERSION, f"A{company_name}", f"D{today_str}", RECORD_SEPARATOR]
    
    converted_count = 0
    unmapped_count = 0
    failed_count = 0
    
    for index, row in enumerate(rows):
        raw_amount = first_present(row, AMOUNT_FIELDS, DEFAULT_AMOUNT)
        amount = clean_amount(raw_amount)
        if amount is None:
            logger.warning(f"TXF conversion - row {index} skipped: invalid amount '{raw_amount}'")
            failed_count += 1
            continue

        category = str(first_present(row, CATEGORY_FIELDS, DEFAULT_CATEGORY))
        description = str(first_present(row, DESCRIPTION_FIELDS, DEFAULT_DESCRIPTION))
        date_str = _row_date(row, today_str)

        code = get_txf_code(category)
        if code is None:
            unmapped_count += 1
            continue
        
        output.extend(format_txf_record(code, description, date_str, amount))
        converted_count += 1
    
    if unmapped_count > 0:
        logger.warning(f"TXF conversion: {unmapped_count} transactions skipped (unmapped categories)")
    
    logger.info(
        f"TXF conversion - converted {converted_count}, unmapped {unmapped_count}, "
        f"failed {failed_count}"
    )
    
    return ExportResult(
        content="\n".join(output),
        converted_count=converted_count,
        unmapped_count=unmapped_count,
        failed_count=failed_count,
    )


def convert_to_txf(
    rows: Iterable[RawRow],
    company_name: Optional[str] = None,
    today: Optional[date] = None
) -> str:
    """
    Convert raw export rows to TXF text.
    
    Args:
        rows: Raw export rows in file order
        company_name: A header line (defaults to the configured company)
        today: Export date (defaults to the current date)
    
    Returns:
        TXF document
    """
    if company_name is None:
        company_name = get_settings().company_name
    return build_txf_export(rows, company_name, today).content


def filter_export_rows(
    rows: Iterable[RawRow],
    excluded_accounts: Optional[Collection[str]] = None,
    year: Optional[int] = None
) -> List[RawRow]:
    """
    Select the rows that go into an export.
    
    Args:
        rows: Raw export rows
        excluded_accounts: Account names left out (defaults to configured list)
        year: Keep only rows whose Transaction Date starts with this year
    
    Returns:
        Selected rows in input order
    """
    if excluded_accounts is None:
        excluded_accounts = get_settings().excluded_export_accounts
    excluded = set(excluded_accounts)
    
    selected = []
    for row in rows:
        if row.get(ACCOUNT_NAME_FIELD) in excluded:
            continue
        if year is not None and not (row.get(TRANSACTION_DATE_FIELD) or "").startswith(str(year)):
            continue
        selected.append(row)
    
    logger.debug(f"Export filter kept {len(selected)} rows (year={year})")
    return selected


def create_output_filename(base_path: Optional[str] = None, now: Optional[datetime] = None) -> str:
    """
    Create timestamped output filename.
    
    Args:
        base_path: Base directory path (defaults to configured storage)
        now: Timestamp for the name (defaults to now)
    
    Returns:
        Full output file path
    """
    if base_path is None:
        base_path = get_settings().temp_storage_path
    
    Path(base_path).mkdir(parents=True, exist_ok=True)
    
    timestamp = (now or datetime.now()).strftime("%Y-%m-%dT%H-%M-%S")
    filename = f"tax_import_{timestamp}.txf"
    
    return str(Path(base_path) / filename)


def write_txf_file(content: str, output_path: str) -> str:
    """
    Write a TXF document to disk.
    
    Args:
        content: TXF text
        output_path: Destination file
    
    Returns:
        Path to created file
    
    Raises:
        ExportError: If the file cannot be written
    """
    output_file = Path(output_path)
    try:
        output_file.parent.mkdir(parents=True, exist_ok=True)
        output_file.write_text(content, encoding="utf-8")
    except OSError as e:
        logger.error(f"Failed to write TXF file: {e}")
        raise ExportError(
            "Failed to write TXF file",
            details={"output_path": output_path, "error": str(e)}
        )
    
    logger.info(f"Successfully exported to {output_path}")
    return output_path
