"""
Row normalization.
Turns loosely typed export rows into CanonicalTransaction records.
"""
import math
import re
import warnings
from datetime import datetime
from typing import Any, Iterable, Optional, Sequence, Tuple

import pandas as pd

from core.categories import get_standard_category
from core.logger import setup_logger
from core.schema import CanonicalTransaction, NormalizationResult, RawRow, SkippedRow

logger = setup_logger(__name__)

# Field-priority lists: the first present key wins
AMOUNT_FIELDS: Tuple[str, ...] = ("Amount", "Amount (One column)")
CATEGORY_FIELDS: Tuple[str, ...] = ("Category", "Account Name")
DESCRIPTION_FIELDS: Tuple[str, ...] = (
    "Description",
    "Transaction Description",
    "Transaction Line Description",
)
DATE_FIELDS: Tuple[str, ...] = ("Date", "Transaction Date")
MIN_YEAR = 1900
ACCOUNT_TYPE_FIELD = "Account Type"
ACCOUNT_GROUP_FIELD = "Account Group"

DEFAULT_AMOUNT = "0"
DEFAULT_CATEGORY = "Uncategorized"
DEFAULT_DESCRIPTION = "No Description"

# Thousands separators, currency symbols and any whitespace
_AMOUNT_NOISE = re.compile(r"[,\s$€£¥]")


def first_present(row: RawRow, keys: Sequence[str], default: Any = None) -> Any:
    """
    Return the value of the first key present in the row.
    
    A key counts as present when it exists and its value is not None;
    empty strings are present.
    
    Args:
        row: Raw export row
        keys: Candidate column names in priority order
        default: Value returned when none of the keys is present
    
    Returns:
        Cell value or default
    """
    for key in keys:
        value = row.get(key)
        if value is not None:
            return value
    return default


def clean_amount(value: Any) -> Optional[float]:
    """
    Parse an amount cell into a signed float.
    Strips thousands separators, currency symbols and spaces.
    
    Args:
        value: Raw amount value (string or number)
    
    Returns:
        Parsed amount or None if it is not a finite number
    """
    if value is None:
        return None
    
    cleaned = _AMOUNT_NOISE.sub("", str(value))
    if not cleaned:
        return None
    
    try:
        result = float(cleaned)
    except ValueError:
        return None
    
    if not math.isfinite(result):
        return None
    return result


def parse_date(value: Any) -> Optional[datetime]:
    """
    Parse a date cell into a naive datetime.
    Timezone-aware values are converted to UTC first.
    
    Slash dates are read month first. A value that only parses day first,
    or that lands before 1900 (a date with no year), is rejected.
    
    Args:
        value: Raw date value
    
    Returns:
        Parsed datetime or None if unparseable
    """
    if value is None or str(value).strip() == "":
        return None
    
    try:
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", UserWarning)
            warnings.filterwarnings("error", message=".*dayfirst.*", category=UserWarning)
            parsed = pd.to_datetime(str(value).strip(), errors="coerce", dayfirst=False)
    except (ValueError, TypeError, OverflowError, UserWarning):
        return None
    
    if pd.isna(parsed):
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.tz_convert("UTC").tz_localize(None)
    if parsed.year < MIN_YEAR:
        return None
    return parsed.to_pydatetime()


def _optional_string(row: RawRow, key: str) -> Optional[str]:
    value = row.get(key)
    if value is None:
        return None
    return str(value)


def _normalize(
    row: RawRow,
    index: int,
    now: datetime
) -> Tuple[Optional[CanonicalTransaction], Optional[str]]:
    raw_amount = first_present(row, AMOUNT_FIELDS, DEFAULT_AMOUNT)
    amount = clean_amount(raw_amount)
    if amount is None:
        return None, f"invalid amount '{raw_amount}'"
    
    raw_category = str(first_present(row, CATEGORY_FIELDS, DEFAULT_CATEGORY))
    description = str(first_present(row, DESCRIPTION_FIELDS, DEFAULT_DESCRIPTION))
    
    date_value = first_present(row, DATE_FIELDS)
    if date_value is None or str(date_value).strip() == "":
        date = now
    else:
        date = parse_date(date_value)
        if date is None:
            return None, f"invalid date '{date_value}'"
    
    transaction = CanonicalTransaction(
        id=f"tx_{index}",
        date=date,
        description=description,
        amount=amount,
        category=get_standard_category(raw_category),
        raw_category=raw_category,
        account_type=_optional_string(row, ACCOUNT_TYPE_FIELD),
        account_group=_optional_string(row, ACCOUNT_GROUP_FIELD),
    )
    return transaction, None


def normalize_row(
    row: RawRow,
    index: int,
    now: Optional[datetime] = None
) -> Optional[CanonicalTransaction]:
    """
    Normalize a single export row.
    
    Rows with an unparseable amount or date are rejected. Rejection is
    signaled by returning None; nothing is raised.
    
    Args:
        row: Raw export row
        index: Position of the row in its batch, used for the synthetic id
        now: Processing time substituted for a missing date (defaults to now)
    
    Returns:
        CanonicalTransaction or None if the row was rejected
    """
    transaction, reason = _normalize(row, index, now or datetime.now())
    if transaction is None:
        logger.warning(f"normalize_row[{index}] - skipped: {reason}")
    return transaction


def normalize_rows(
    rows: Iterable[RawRow],
    now: Optional[datetime] = None
) -> NormalizationResult:
    """
    Normalize a batch of export rows, dropping rejected ones.
    
    Args:
        rows: Raw export rows in file order
        now: Processing time substituted for missing dates (defaults to now)
    
    Returns:
        NormalizationResult with accepted transactions and skip tallies
    """
    processing_time = now or datetime.now()
    transactions = []
    skipped = []
    
    for index, row in enumerate(rows):
        transaction, reason = _normalize(row, index, processing_time)
        if transaction is None:
            logger.warning(f"normalize_rows[{index}] - skipped: {reason}")
            skipped.append(SkippedRow(index=index, reason=reason))
        else:
            transactions.append(transaction)
    
    logger.info(
        f"Normalized transactions: {len(transactions) + len(skipped)} -> {len(transactions)} "
        f"(skipped {len(skipped)})"
    )
    
    return NormalizationResult(
        transactions=transactions,
        accepted_count=len(transactions),
        skipped_count=len(skipped),
        skipped_rows=skipped,
    )
