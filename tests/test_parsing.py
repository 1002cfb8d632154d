"""
Unit tests for CSV parsing.
"""
import textwrap

import pytest

from core.exceptions import DataNotFoundError
from core.parsing import parse_csv_file, parse_csv_text, validate_rows


def _dedent(s: str) -> str:
    return textwrap.dedent(s).lstrip("\n")


ACCOUNTING_CSV = _dedent(
    """
    Transaction ID,Transaction Date,Account Name,Transaction Description,Transaction Line Description,Amount (One column),Account Group,Account Type
    2403037444485185830,2025-10-24,Computer – Hosting,Netcup pnode2 server,,6.68,Expense,Operating Expense
    2400180417090060948,2025-10-26,Education & Training,Innovating with AI - AI Training,Bill payment to Innovating with AI,"2,997.00",Expense,Operating Expense

    2428516292186112458,2025-11-09,Connecticut,CT Business Taxes Registration,,-100.00,Liability,Sales Tax on Sales and Purchases
    """
)


def test_parse_csv_text():
    """Rows keep every column as text; empty cells stay empty strings."""
    rows = parse_csv_text(ACCOUNTING_CSV)
    
    assert len(rows) == 3
    assert rows[0]["Transaction ID"] == "2403037444485185830"
    assert rows[0]["Account Name"] == "Computer – Hosting"
    assert rows[0]["Transaction Line Description"] == ""
    assert rows[1]["Amount (One column)"] == "2,997.00"
    assert rows[2]["Amount (One column)"] == "-100.00"
    assert rows[2]["Account Group"] == "Liability"


def test_parse_csv_text_drops_empty_rows():
    """Lines made only of separators carry no data."""
    rows = parse_csv_text("Date,Amount\n,\n2025-01-01,5\n")
    assert rows == [{"Date": "2025-01-01", "Amount": "5"}]


def test_parse_csv_text_empty():
    """Empty input is not an error."""
    assert parse_csv_text("") == []
    assert parse_csv_text("Date,Amount\n") == []


def test_parse_csv_text_long_first_line():
    """An unquoted comma in the first data line does not shift later rows."""
    text = _dedent(
        """
        Transaction ID,Transaction Date,Account Name,Transaction Description,Amount (One column),Transaction Line Description,Account Group
        1,2025-11-17,Dues & Subscriptions,HubSpot,108.00,Connecticut, Dues & Subscriptions,Expense
        2,2025-11-18,Rent,November rent,-500.00,,Expense
        """
    )
    rows = parse_csv_text(text)
    
    assert len(rows) == 2
    assert rows[0]["Transaction ID"] == "1"
    assert rows[0]["Amount (One column)"] == "108.00"
    assert rows[1]["Transaction ID"] == "2"
    assert rows[1]["Account Name"] == "Rent"
    assert rows[1]["Amount (One column)"] == "-500.00"


def test_parse_csv_file(tmp_path):
    """Files with a byte-order mark parse with a clean first header."""
    path = tmp_path / "export.csv"
    path.write_text(ACCOUNTING_CSV, encoding="utf-8-sig")
    
    rows = parse_csv_file(str(path))
    assert len(rows) == 3
    assert "Transaction ID" in rows[0]


def test_parse_csv_file_missing(tmp_path):
    """Missing files raise DataNotFoundError."""
    with pytest.raises(DataNotFoundError) as exc_info:
        parse_csv_file(str(tmp_path / "missing.csv"))
    assert exc_info.value.details["file_path"].endswith("missing.csv")


def test_validate_rows():
    """Known columns and uncovered logical fields are reported."""
    stats = validate_rows(parse_csv_text(ACCOUNTING_CSV))
    
    assert stats["total_rows"] == 3
    assert stats["columns_found"] == 8
    assert "Account Name" in stats["known_columns"]
    assert "Transaction ID" not in stats["known_columns"]
    assert stats["missing_fields"] == []


def test_validate_rows_missing_fields():
    stats = validate_rows([{"Memo": "x"}])
    assert stats["missing_fields"] == ["amount", "category", "date", "description"]
    assert validate_rows([])["total_rows"] == 0
