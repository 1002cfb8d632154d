"""
Unit tests for the transaction service.
"""
from datetime import date, datetime

import pytest

from core.categories import StandardCategory
from core.schema import TransactionFilter
from services.transaction_service import TransactionService

ROWS = [
    {"Transaction Date": "2025-10-24", "Account Name": "Owner Investment / Drawings",
     "Transaction Description": "Netcup pnode2 server", "Amount (One column)": "6.68",
     "Account Group": "Equity"},
    {"Transaction Date": "2025-10-24", "Account Name": "Computer – Hosting",
     "Transaction Description": "Netcup pnode2 server", "Amount (One column)": "-6.68",
     "Account Group": "Expense"},
    {"Transaction Date": "2025-11-09", "Account Name": "Connecticut",
     "Transaction Description": "CT Business Taxes Registration", "Amount (One column)": "-100.00",
     "Account Group": "Liability"},
    {"Transaction Date": "2025-11-20", "Account Name": "Consulting Income",
     "Transaction Description": "Invoice 12", "Amount (One column)": "1,500.00",
     "Account Group": "Income"},
    {"Transaction Date": "2024-12-30", "Account Name": "Rent",
     "Transaction Description": "December rent", "Amount (One column)": "-800.00",
     "Account Group": "Expense"},
    {"Transaction Date": "2025-11-21", "Account Name": "Rent",
     "Transaction Description": "broken", "Amount (One column)": "???"},
]


def test_build_dashboard():
    """Dashboard combines summary, series and tallies."""
    dashboard = TransactionService().build_dashboard(ROWS, now=datetime(2025, 12, 1))
    summary = dashboard["summary"]
    
    assert dashboard["accepted_count"] == 5
    assert dashboard["skipped_count"] == 1
    assert summary.transaction_count == 5
    assert summary.total_income == 1500.0
    assert summary.total_expenses == pytest.approx(806.68)
    assert summary.top_expense_category == StandardCategory.RENT_UTILITIES
    assert summary.txf_ready_count == 3
    assert [m.month for m in dashboard["monthly"]] == ["2024-12", "2025-10", "2025-11"]
    assert dashboard["available_years"] == [2025, 2024]


def test_build_dashboard_with_filter():
    """Filters narrow the figures but not the available years."""
    dashboard = TransactionService().build_dashboard(ROWS, TransactionFilter(year=2025))
    
    assert dashboard["summary"].transaction_count == 4
    assert dashboard["summary"].total_expenses == pytest.approx(6.68)
    assert dashboard["available_years"] == [2025, 2024]


def test_build_export():
    """Excluded accounts and other years are left out of the file."""
    result = TransactionService().build_export(ROWS, year=2025, today=date(2026, 1, 15))
    
    assert result.content.startswith("V041\nANeuralSec Advisory\nD1/15/2026\n^")
    assert result.converted_count == 2
    assert result.unmapped_count == 1
    assert result.failed_count == 1
    assert "C271" in result.content
    assert "C266" in result.content
    assert "C281" not in result.content


def test_build_export_company_override():
    result = TransactionService().build_export([], company_name="Acme LLC", today=date(2026, 1, 15))
    assert result.content == "V041\nAAcme LLC\nD1/15/2026\n^"


def test_export_to_file(tmp_path):
    """A CSV file on disk becomes a TXF file on disk."""
    csv_path = tmp_path / "export.csv"
    csv_path.write_text(
        "Date,Category,Description,Amount\n"
        "2025-02-01,Rent,February rent,-500.00\n"
        "2025-02-03,Transfer,To savings,-100.00\n",
        encoding="utf-8",
    )
    output_path = tmp_path / "out" / "tax_import.txf"
    
    result = TransactionService().export_to_file(str(csv_path), output_path=str(output_path))
    
    assert result["output_path"] == str(output_path)
    assert result["stats"]["total_rows"] == 2
    assert result["stats"]["converted_count"] == 1
    assert result["stats"]["unmapped_count"] == 1
    content = output_path.read_text(encoding="utf-8")
    assert content.startswith("V041\nANeuralSec Advisory\nD")
    assert content.endswith("^\nC281\nPFebruary rent\nD2/1/2025\n$500.00\n^")
