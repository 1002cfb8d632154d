"""
CSV parsing for accounting exports.
Produces raw rows (column name -> cell text) for the normalizer and exporter.
"""
import io
from pathlib import Path
from typing import Any, Dict, List, Set

import pandas as pd

from core.exceptions import DataNotFoundError, ParsingError
from core.logger import setup_logger
from core.normalize import AMOUNT_FIELDS, CATEGORY_FIELDS, DATE_FIELDS, DESCRIPTION_FIELDS
from core.schema import RawRow

logger = setup_logger(__name__)

LOGICAL_FIELDS = {
    "amount": AMOUNT_FIELDS,
    "category": CATEGORY_FIELDS,
    "date": DATE_FIELDS,
    "description": DESCRIPTION_FIELDS,
}

# Every column the converter reads
KNOWN_COLUMNS: Set[str] = {
    *AMOUNT_FIELDS,
    *CATEGORY_FIELDS,
    *DATE_FIELDS,
    *DESCRIPTION_FIELDS,
    "Account Type",
    "Account Group",
}


def _frame_to_rows(df: pd.DataFrame) -> List[RawRow]:
    # Short lines leave NaN in their missing trailing cells
    df = df.fillna("")
    # Lines made only of separators
    df = df.loc[~(df == "").all(axis=1)] if len(df.columns) else df
    return df.to_dict(orient="records")


def _keep_leading_fields(bad_line: List[str]) -> List[str]:
    # Unquoted commas give some lines extra trailing cells; the cells that
    # line up with the header are kept and the rest dropped
    logger.debug(f"Row with {len(bad_line)} fields truncated to header width")
    return bad_line


def _read_csv(source: Any, label: str) -> List[RawRow]:
    try:
        # index_col=False: a long first line must not turn column one into the index
        df = pd.read_csv(
            source,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
            index_col=False,
            engine="python",
            on_bad_lines=_keep_leading_fields,
        )
    except pd.errors.EmptyDataError:
        logger.warning(f"{label} contains no data")
        return []
    except (pd.errors.ParserError, UnicodeDecodeError, ValueError) as e:
        logger.error(f"Failed to parse {label}: {e}")
        raise ParsingError(
            "Invalid CSV format",
            details={"source": label, "error": str(e)}
        )
    
    rows = _frame_to_rows(df)
    logger.info(f"Successfully parsed {len(rows)} rows from {label}")
    return rows


def parse_csv_text(text: str, label: str = "uploaded CSV") -> List[RawRow]:
    """
    Parse CSV text with a header row.
    
    Empty cells are kept as empty strings; blank lines are dropped.
    
    Args:
        text: CSV content
        label: Name used in log lines and error details
    
    Returns:
        List of raw rows
    
    Raises:
        ParsingError: If the text is not valid CSV
    """
    return _read_csv(io.StringIO(text), label)


def parse_csv_file(file_path: str) -> List[RawRow]:
    """
    Parse a CSV export file.
    
    Args:
        file_path: Path to CSV file
    
    Returns:
        List of raw rows
    
    Raises:
        DataNotFoundError: If file doesn't exist
        ParsingError: If file format is invalid
    """
    path = Path(file_path)
    if not path.exists():
        raise DataNotFoundError(
            f"File not found: {file_path}",
            details={"file_path": file_path}
        )
    
    logger.info(f"Parsing transactions from {path.name}")
    
    # utf-8-sig drops the byte-order mark some accounting exports start with
    try:
        text = path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as e:
        raise ParsingError(
            "Unable to read CSV file",
            details={"file_path": file_path, "error": str(e)}
        )
    return parse_csv_text(text, label=path.name)


def validate_rows(rows: List[RawRow]) -> Dict[str, Any]:
    """
    Report which known columns a batch of rows carries.
    
    Args:
        rows: Raw rows
    
    Returns:
        Dictionary with row count, recognized columns and logical fields
        that have no source column
    """
    columns: Set[str] = set()
    for row in rows:
        columns.update(row.keys())
    
    stats = {
        "total_rows": len(rows),
        "columns_found": len(columns),
        "known_columns": sorted(columns & KNOWN_COLUMNS),
        "missing_fields": sorted(
            name for name, keys in LOGICAL_FIELDS.items()
            if not any(key in columns for key in keys)
        ),
    }
    
    if stats["missing_fields"]:
        logger.warning(f"No source column for: {stats['missing_fields']}")
    logger.info(f"Validation stats: {stats}")
    
    return stats
