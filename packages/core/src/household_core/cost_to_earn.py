"""Cost-to-earn (C2E) allocation.

Cost to earn is the personal equivalent of a business's cost of goods sold:
the part of household spending that exists only because someone works.
It comes from two places:

1. A percentage of six eligible expense lines (housing, utilities,
   transportation, childcare, professional development, annual licenses),
   counted only when the user toggles that line as C2E.
2. Nine dedicated entries (commuting, work technology, dependent care, ...)
   that the user enters as cost to earn directly and that count in full.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from decimal import Decimal
from typing import NamedTuple

import structlog

from .models.inputs import C2ESetting, C2ESettings, StatementInput
from .models.statement import CostToEarnTotals, MonetaryAmount
from .money import HUNDRED, ZERO, Number, percent_of_income, round_to_two, safe_percentage

logger = structlog.get_logger()


class ToggleLine(NamedTuple):
    """An expense line that can be partly allocated to cost to earn."""
    output_field: str
    amount: Callable[[StatementInput], Decimal]
    setting_field: str

    def setting(self, settings: C2ESettings) -> C2ESetting:
        return getattr(settings, self.setting_field)


TOGGLE_LINES: tuple[ToggleLine, ...] = (
    ToggleLine(
        "housing_c2e",
        lambda i: i.essential_needs.housing_expenses,
        "housing_expenses",
    ),
    ToggleLine(
        "utilities_c2e",
        lambda i: i.essential_needs.utilities,
        "utilities",
    ),
    ToggleLine(
        "transportation_c2e",
        lambda i: i.essential_needs.transportation,
        "transportation",
    ),
    ToggleLine(
        "childcare_c2e",
        lambda i: i.essential_needs.childcare_education,
        "childcare_education",
    ),
    ToggleLine(
        "professional_dev_c2e",
        lambda i: i.annual_expenses.professional_development,
        "professional_development",
    ),
    ToggleLine(
        "licenses_c2e",
        lambda i: i.annual_expenses.annual_licenses,
        "annual_licenses",
    ),
)

# Share of net revenue above which work-related costs are called out
C2E_BURDEN_THRESHOLD = Decimal("20")


def toggle_amount(amount: Number, setting: C2ESetting) -> Decimal:
    """The C2E share of one expense line: ``amount * percentage / 100`` when toggled on."""
    if not setting.is_c2e:
        return ZERO
    return round_to_two(round_to_two(amount) * setting.percentage / HUNDRED)


@dataclass(frozen=True)
class CostToEarnAllocation:
    """Result of allocating cost to earn for one statement."""
    toggle_amounts: dict[str, Decimal] = field(default_factory=dict)
    dedicated_amounts: dict[str, Decimal] = field(default_factory=dict)
    total: Decimal = ZERO
    net_revenue: Decimal = ZERO

    @property
    def share_of_net_revenue(self) -> Decimal:
        """Total C2E as a percentage of net revenue (0 when there is none)."""
        return safe_percentage(self.total, self.net_revenue)

    @property
    def percent_of_income(self) -> str:
        """One-decimal percentage string, ``"0%"`` when net revenue is zero."""
        return percent_of_income(self.total, self.net_revenue)

    @property
    def is_burdensome(self) -> bool:
        """True when C2E exceeds 20% of net revenue."""
        return self.share_of_net_revenue > C2E_BURDEN_THRESHOLD

    def to_totals(self) -> CostToEarnTotals:
        """Build the statement's ``costToEarn`` section."""
        items = {
            name: MonetaryAmount.from_amount(amount)
            for name, amount in {**self.toggle_amounts, **self.dedicated_amounts}.items()
        }
        return CostToEarnTotals(
            **items,
            total_c2e=MonetaryAmount.from_amount(self.total),
            percent_of_income=self.percent_of_income,
        )


def allocate_cost_to_earn(inputs: StatementInput, net_revenue: Number) -> CostToEarnAllocation:
    """Compute toggled and dedicated cost to earn for a statement.

    Args:
        inputs: The parsed form input, including its C2E settings.
        net_revenue: Gross revenue less pre-tax deductions.

    Returns:
        CostToEarnAllocation with per-line amounts and the rounded total.
    """
    settings = inputs.c2e_settings

    toggle_amounts = {
        line.output_field: toggle_amount(line.amount(inputs), line.setting(settings))
        for line in TOGGLE_LINES
    }
    dedicated_amounts = {
        name: round_to_two(amount) for name, amount in inputs.cost_to_earn.line_items()
    }

    total = round_to_two(
        sum(toggle_amounts.values(), ZERO) + sum(dedicated_amounts.values(), ZERO)
    )

    allocation = CostToEarnAllocation(
        toggle_amounts=toggle_amounts,
        dedicated_amounts=dedicated_amounts,
        total=total,
        net_revenue=round_to_two(net_revenue),
    )

    logger.debug(
        "cost_to_earn_allocated",
        toggled=str(round_to_two(sum(toggle_amounts.values(), ZERO))),
        dedicated=str(round_to_two(sum(dedicated_amounts.values(), ZERO))),
        total=str(total),
        percent_of_income=allocation.percent_of_income,
    )

    return allocation
