"""
Aggregation of canonical transactions into dashboard figures.
All functions are pure and accept empty input.
"""
from typing import Dict, Iterable, List, Optional, Sequence

from core.categories import NON_BUSINESS_CATEGORIES, StandardCategory, has_txf_code
from core.logger import setup_logger
from core.schema import (
    CanonicalTransaction,
    CategoryAmount,
    FinancialSummary,
    MonthlyBreakdownEntry,
    TransactionFilter,
)

logger = setup_logger(__name__)

LIABILITY_GROUP = "Liability"


def is_business_transaction(transaction: CanonicalTransaction) -> bool:
    """False for transfers, payments, owner equity and liability accounts."""
    return (
        transaction.category not in NON_BUSINESS_CATEGORIES
        and transaction.account_group != LIABILITY_GROUP
    )


def calculate_financial_summary(transactions: Sequence[CanonicalTransaction]) -> FinancialSummary:
    """
    Compute headline income/expense figures.
    
    Income and expenses only count business transactions. The transaction
    count and the TXF-ready count cover the whole input.
    
    Args:
        transactions: Canonical transactions
    
    Returns:
        FinancialSummary (zero-valued for empty input)
    """
    business = [t for t in transactions if is_business_transaction(t)]
    
    total_income = 0.0
    total_expenses = 0.0
    expense_by_category: Dict[StandardCategory, float] = {}
    
    for transaction in business:
        if transaction.amount > 0:
            total_income += transaction.amount
        elif transaction.amount < 0:
            expense = abs(transaction.amount)
            total_expenses += expense
            expense_by_category[transaction.category] = (
                expense_by_category.get(transaction.category, 0.0) + expense
            )
    
    # Strict comparison keeps the first category reached on ties
    top_category: Optional[StandardCategory] = None
    top_amount = 0.0
    for category, amount in expense_by_category.items():
        if top_category is None or amount > top_amount:
            top_category = category
            top_amount = amount
    
    summary = FinancialSummary(
        total_income=total_income,
        total_expenses=total_expenses,
        net_income=total_income - total_expenses,
        transaction_count=len(transactions),
        txf_ready_count=sum(1 for t in transactions if has_txf_code(t.raw_category)),
        top_expense_category=top_category,
        top_expense_amount=top_amount,
    )
    
    logger.debug(f"Financial summary for {len(transactions)} transactions: {summary}")
    
    return summary


def calculate_monthly_breakdown(transactions: Iterable[CanonicalTransaction]) -> List[MonthlyBreakdownEntry]:
    """
    Sum income and expenses per calendar month.
    
    Args:
        transactions: Canonical transactions
    
    Returns:
        One entry per YYYY-MM, ascending by month
    """
    monthly: Dict[str, MonthlyBreakdownEntry] = {}
    
    for transaction in transactions:
        month_key = transaction.date.strftime("%Y-%m")
        entry = monthly.get(month_key)
        if entry is None:
            entry = monthly[month_key] = MonthlyBreakdownEntry(month=month_key)
        
        if transaction.amount > 0:
            entry.income += transaction.amount
        else:
            entry.expenses += abs(transaction.amount)
    
    return [monthly[key] for key in sorted(monthly)]


def calculate_expense_breakdown(transactions: Iterable[CanonicalTransaction]) -> List[CategoryAmount]:
    """
    Total negative amounts per standardized category.
    
    Args:
        transactions: Canonical transactions
    
    Returns:
        (category, amount) pairs, largest first
    """
    breakdown: Dict[StandardCategory, float] = {}
    
    for transaction in transactions:
        if transaction.amount < 0:
            breakdown[transaction.category] = (
                breakdown.get(transaction.category, 0.0) + abs(transaction.amount)
            )
    
    # sorted() is stable, so equal totals keep first-seen order
    ordered = sorted(breakdown.items(), key=lambda item: item[1], reverse=True)
    return [CategoryAmount(name=name, value=value) for name, value in ordered]


def filter_transactions(
    transactions: Iterable[CanonicalTransaction],
    flt: Optional[TransactionFilter] = None
) -> List[CanonicalTransaction]:
    """
    Apply a dashboard selection.
    
    Args:
        transactions: Canonical transactions
        flt: Year / month / raw category selection; None keeps everything
    
    Returns:
        Transactions matching every set criterion, in input order
    """
    if flt is None:
        return list(transactions)
    
    selected = []
    for transaction in transactions:
        if flt.year is not None and transaction.date.year != flt.year:
            continue
        if flt.month is not None and transaction.date.strftime("%Y-%m") != flt.month:
            continue
        if flt.category is not None and transaction.raw_category != flt.category:
            continue
        selected.append(transaction)
    return selected


def available_years(transactions: Iterable[CanonicalTransaction]) -> List[int]:
    """Distinct transaction years, most recent first."""
    return sorted({t.date.year for t in transactions}, reverse=True)
