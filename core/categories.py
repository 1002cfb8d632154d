"""
Category lookup tables.

Two independent, hand-maintained tables keyed by the raw category string of
the accounting export (exact, case-sensitive match):

- CATEGORY_MAPPING: raw category -> standardized tax category
- TXF_MAPPING: raw category -> TXF line-item code

A raw category missing from CATEGORY_MAPPING is Uncategorized. A raw category
missing from TXF_MAPPING has no export line and is left out of the TXF file.
Bump MAPPING_VERSION whenever either table changes.
"""
from enum import Enum
from typing import Dict, FrozenSet, Optional

from core.logger import setup_logger

logger = setup_logger(__name__)

MAPPING_VERSION = "2025.1"


class StandardCategory(str, Enum):
    """Standardized tax categories shown on the dashboard."""
    INCOME = "Income"
    ADVERTISING = "Advertising"
    CONTRACTORS = "Contractors"
    INSURANCE = "Insurance"
    LEGAL_PROFESSIONAL = "Legal & Professional"
    OFFICE_EXPENSES = "Office Expenses"
    RENT_UTILITIES = "Rent & Utilities"
    TRAVEL_MEALS = "Travel & Meals"
    OTHER_EXPENSES = "Other Expenses"
    UNCATEGORIZED = "Uncategorized"
    TRANSFER = "Transfer"
    PAYMENT = "Payment"
    EQUITY = "Equity"


# Internal movements and owner transactions, never business income/expense
NON_BUSINESS_CATEGORIES: FrozenSet[StandardCategory] = frozenset({
    StandardCategory.TRANSFER,
    StandardCategory.PAYMENT,
    StandardCategory.EQUITY,
})

CATEGORY_MAPPING: Dict[str, StandardCategory] = {
    "Sales": StandardCategory.INCOME,
    "Service Income": StandardCategory.INCOME,
    "Consulting Income": StandardCategory.INCOME,
    "Revenue": StandardCategory.INCOME,
    "Advertising & Promotion": StandardCategory.ADVERTISING,
    "Marketing": StandardCategory.ADVERTISING,
    "Web Hosting": StandardCategory.ADVERTISING,
    "Computer – Hosting": StandardCategory.OFFICE_EXPENSES,
    "Contractors": StandardCategory.CONTRACTORS,
    "Subcontractors": StandardCategory.CONTRACTORS,
    "Insurance": StandardCategory.INSURANCE,
    "Business Insurance": StandardCategory.INSURANCE,
    "Legal & Professional Services": StandardCategory.LEGAL_PROFESSIONAL,
    "Legal Fees": StandardCategory.LEGAL_PROFESSIONAL,
    "Accounting Fees": StandardCategory.LEGAL_PROFESSIONAL,
    "Office Expenses": StandardCategory.OFFICE_EXPENSES,
    "Office Supplies": StandardCategory.OFFICE_EXPENSES,
    "Software": StandardCategory.OFFICE_EXPENSES,
    "Computer – Hardware": StandardCategory.OFFICE_EXPENSES,
    "Computer – Software": StandardCategory.OFFICE_EXPENSES,
    "Rent": StandardCategory.RENT_UTILITIES,
    "Utilities": StandardCategory.RENT_UTILITIES,
    "Telephone": StandardCategory.RENT_UTILITIES,
    "Internet": StandardCategory.RENT_UTILITIES,
    "Computer – Internet": StandardCategory.RENT_UTILITIES,
    "Telephone – Wireless": StandardCategory.RENT_UTILITIES,
    "Travel": StandardCategory.TRAVEL_MEALS,
    "Airfare": StandardCategory.TRAVEL_MEALS,
    "Meals": StandardCategory.TRAVEL_MEALS,
    "Client Meals": StandardCategory.TRAVEL_MEALS,
    "Dues & Subscriptions": StandardCategory.OTHER_EXPENSES,
    "Education & Training": StandardCategory.OTHER_EXPENSES,
    "Bank Service Charges": StandardCategory.OTHER_EXPENSES,
    # Non-taxable
    "Transfer": StandardCategory.TRANSFER,
    "Payment": StandardCategory.PAYMENT,
    "Credit Card Payment": StandardCategory.PAYMENT,
    "Owner Investment": StandardCategory.EQUITY,
    "Owner Investment / Drawings": StandardCategory.EQUITY,
    "Owner's Draw": StandardCategory.EQUITY,
    "Owner Draw": StandardCategory.EQUITY,
    "Personal Expense": StandardCategory.EQUITY,
}

# TXF 041 line-item codes (Schedule C reference numbers)
TXF_MAPPING: Dict[str, int] = {
    "Sales": 266,
    "Service Income": 266,
    "Consulting Income": 266,
    "Revenue": 266,
    "Gross Receipts": 266,
    "Uncategorized Income": 266,
    "Advertising & Promotion": 271,
    "Marketing": 271,
    "Web Hosting": 271,
    "Computer – Hosting": 271,
    "Vehicle Expenses": 270,
    "Gas & Fuel": 270,
    "Commissions": 272,
    "Contractors": 367,
    "Subcontractors": 367,
    "Insurance": 275,
    "Business Insurance": 275,
    "Liability Insurance": 275,
    "Interest Expense": 276,
    "Credit Card Interest": 276,
    "Legal & Professional Services": 277,
    "Legal Fees": 277,
    "Accounting Fees": 277,
    "Consulting Fees": 277,
    "Office Expenses": 278,
    "Office Supplies": 278,
    "Postage": 278,
    "Shipping": 278,
    "Software": 278,
    "Computer – Hardware": 278,
    "Computer – Software": 278,
    "Small Tools & Equipment": 278,
    "Rent": 281,
    "Equipment Rental": 280,
    "Repairs & Maintenance": 282,
    "Taxes & Licenses": 286,
    "State Taxes": 286,
    "Permits": 286,
    "Travel": 283,
    "Airfare": 283,
    "Hotel": 283,
    "Taxi & Rideshare": 283,
    "Meals": 284,
    "Meals & Entertainment": 284,
    "Client Meals": 284,
    "Utilities": 287,
    "Telephone": 287,
    "Mobile Phone": 287,
    "Internet": 287,
    "Computer – Internet": 287,
    "Telephone – Wireless": 287,
    "Dues & Subscriptions": 298,
    "Education & Training": 298,
    "Conferences": 298,
    "Bank Service Charges": 298,
    "Merchant Fees": 298,
    "Uniforms": 298,
    "Gifts": 298,
}


def get_standard_category(raw_category: str) -> StandardCategory:
    """
    Map a raw export category to its standardized tax category.
    
    Args:
        raw_category: Category string exactly as it appears in the export
    
    Returns:
        Standardized category, Uncategorized when the string is not mapped
    """
    category = CATEGORY_MAPPING.get(raw_category)
    if category is None:
        logger.debug(f"No standard category for '{raw_category}', using Uncategorized")
        return StandardCategory.UNCATEGORIZED
    return category


def get_txf_code(raw_category: str) -> Optional[int]:
    """Return the TXF code for a raw category, or None if it has no export line."""
    return TXF_MAPPING.get(raw_category)


def has_txf_code(raw_category: str) -> bool:
    return raw_category in TXF_MAPPING
