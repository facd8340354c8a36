"""Category aggregators for the income statement sections.

Each aggregator sums one section's declared fields and rounds to cents.
Line items are rounded before summing, so a section total always equals
the sum of the line items shown beside it. Sections are independent of
one another; a missing form field is already zero by the time it gets here.
"""

from decimal import Decimal
from typing import Any, TypeVar

from .models.inputs import SectionInput, StatementInput
from .models.statement import MonetaryAmount
from .money import ZERO, round_to_two

TotalsT = TypeVar("TotalsT")


def section_total(section: SectionInput) -> Decimal:
    """Sum a section's line items (each rounded to cents) and round the result."""
    return round_to_two(
        sum((round_to_two(amount) for _, amount in section.line_items()), ZERO)
    )


def total_income(inputs: StatementInput) -> Decimal:
    """Gross revenue: every income source."""
    return section_total(inputs.income)


def total_pre_tax_deductions(inputs: StatementInput) -> Decimal:
    """Taxes and payroll deductions taken before take-home pay."""
    return section_total(inputs.pre_tax_deductions)


def total_needs(inputs: StatementInput) -> Decimal:
    """Essential needs, including any portion later allocated to cost to earn."""
    return section_total(inputs.essential_needs)


def total_savings(inputs: StatementInput) -> Decimal:
    """Savings and investment contributions."""
    return section_total(inputs.savings_investments)


def total_wants(inputs: StatementInput) -> Decimal:
    """Discretionary (lifestyle dividend) spending."""
    return section_total(inputs.discretionary_expenses)


def total_annual(inputs: StatementInput) -> Decimal:
    """Monthly set-asides for annual and irregular expenses.

    Amounts are entered per month already, so no division by 12 happens here.
    """
    return section_total(inputs.annual_expenses)


def build_line_items(section: SectionInput) -> dict[str, MonetaryAmount]:
    """Wrap each line item of a section as a MonetaryAmount, keyed by field name."""
    return {name: MonetaryAmount.from_amount(amount) for name, amount in section.line_items()}


def build_category(
    section: SectionInput,
    totals_model: type[TotalsT],
    total_field: str,
    **extra: Any,
) -> TotalsT:
    """Build a section's totals model: its line items plus the rounded total.

    Args:
        section: The typed input section.
        totals_model: The statement model for the section (e.g. IncomeTotals).
        total_field: Name of the total attribute (e.g. "gross_revenue").
        **extra: Additional attributes such as ``percent_of_income``.
    """
    items = build_line_items(section)
    items[total_field] = MonetaryAmount.from_amount(section_total(section))
    return totals_model(**items, **extra)
