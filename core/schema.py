"""
Pydantic models for transactions, summaries and export results.
Field aliases keep the camelCase names the dashboard consumes.
"""
import re
from datetime import datetime
from typing import List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from core.categories import StandardCategory

# One row of the accounting export: column name -> cell text (None when absent)
RawRow = Mapping[str, Optional[str]]

_MONTH_PATTERN = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")


class CanonicalTransaction(BaseModel):
    """Normalized transaction built from one raw export row."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)
    
    id: str = Field(..., description="Synthetic id tx_<row index>, unique within one run")
    date: datetime
    description: str
    amount: float = Field(..., description="Signed amount, negative for expenses")
    category: StandardCategory
    raw_category: str = Field(..., alias="rawCategory")
    account_type: Optional[str] = Field(None, alias="accountType")
    account_group: Optional[str] = Field(None, alias="accountGroup")


class SkippedRow(BaseModel):
    """A row the normalizer rejected."""
    index: int
    reason: str


class NormalizationResult(BaseModel):
    """Accepted transactions plus accept/skip tallies for one batch."""
    transactions: List[CanonicalTransaction] = Field(default_factory=list)
    accepted_count: int = 0
    skipped_count: int = 0
    skipped_rows: List[SkippedRow] = Field(default_factory=list)


class FinancialSummary(BaseModel):
    """Headline figures for the dashboard."""
    model_config = ConfigDict(populate_by_name=True)
    
    total_income: float = Field(0.0, alias="totalIncome")
    total_expenses: float = Field(0.0, alias="totalExpenses")
    net_income: float = Field(0.0, alias="netIncome")
    transaction_count: int = Field(0, alias="transactionCount")
    txf_ready_count: int = Field(0, alias="txfReadyCount")
    top_expense_category: Optional[StandardCategory] = Field(None, alias="topExpenseCategory")
    top_expense_amount: float = Field(0.0, alias="topExpenseAmount")


class MonthlyBreakdownEntry(BaseModel):
    month: str = Field(..., description="Calendar month as YYYY-MM")
    income: float = 0.0
    expenses: float = 0.0


class CategoryAmount(BaseModel):
    name: StandardCategory
    value: float


class TransactionFilter(BaseModel):
    """
    Dashboard selection passed explicitly into aggregation calls.
    Unset fields do not filter.
    """
    year: Optional[int] = Field(None, ge=1900, le=9999)
    month: Optional[str] = Field(None, description="Calendar month as YYYY-MM")
    category: Optional[str] = Field(None, description="Raw category (account name)")
    
    @field_validator("month")
    @classmethod
    def validate_month(cls, v):
        """Month must be an ISO year-month."""
        if v is None or v == "":
            return None
        if not _MONTH_PATTERN.match(v):
            raise ValueError("Month must be formatted as YYYY-MM")
        return v
    
    @field_validator("category")
    @classmethod
    def empty_category_is_unset(cls, v):
        return v or None


class ExportResult(BaseModel):
    """TXF document plus conversion tallies."""
    content: str
    converted_count: int = 0
    unmapped_count: int = 0
    failed_count: int = 0
