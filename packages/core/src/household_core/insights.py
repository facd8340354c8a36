"""Rule-based narrative insights for an income statement.

Insights are produced by an ordered tuple of independent rules evaluated
against a read-only ``InsightContext`` snapshot. Each rule has a condition
and a renderer; a rule marked ``halts`` stops evaluation after it fires.
Order matters: the no-income rule must fire alone, and the deficit
warning must lead when the household is in the red.

A second rule set covers the cost-to-earn adjusted figures. Its output is
appended after the main batch and is empty when there is no income or no
cost to earn.

Example:
    >>> context = InsightContext.from_inputs(inputs, gross_revenue=..., ...)
    >>> generate_insights(context) + generate_c2e_insights(context)
"""

from collections.abc import Callable
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

import structlog

from .models.inputs import StatementInput
from .money import ZERO, Number, format_percent, round_to_two, round_to_whole, safe_percentage
from .recommendations import recommended_amounts

logger = structlog.get_logger()

# Thresholds, as a percentage of net revenue unless noted
NEEDS_THRESHOLD = Decimal("50")
WANTS_THRESHOLD = Decimal("30")
SAVINGS_THRESHOLD = Decimal("20")
HOUSING_THRESHOLD = Decimal("30")
TRANSPORTATION_THRESHOLD = Decimal("15")
ENTERTAINMENT_THRESHOLD = Decimal("10")
DEBT_THRESHOLD = Decimal("15")
C2E_THRESHOLD = Decimal("20")
ANNUAL_THRESHOLD = Decimal("10")
# Share of gross revenue
PROFIT_MARGIN_TARGET = 10

NO_INCOME_MESSAGE = "Please enter your income details to generate personalized insights."
DEFICIT_MESSAGE = (
    "Your household is operating at a deficit. Focus on increasing revenue "
    "or reducing expenses to achieve profitability."
)
NON_POSITIVE_NET_REVENUE_MESSAGE = (
    "Your net revenue is zero or negative. Review your income and pre-tax "
    "deductions to ensure accuracy."
)
VALUES_MESSAGE = (
    "Consider mapping your expenses to your core values. Are you investing "
    "adequately in what matters most to you?"
)


class InsightType(str, Enum):
    """Display category of an insight."""
    ALERT = "alert"
    WARNING = "warning"
    POSITIVE = "positive"
    RECOMMENDATION = "recommendation"
    INFORMATION = "information"


@dataclass(frozen=True)
class InsightContext:
    """Read-only snapshot of the figures insight rules look at.

    All amounts are rounded to cents. Derived shares are percentages of net
    revenue and are 0 when net revenue is not positive.
    """
    gross_revenue: Decimal = ZERO
    net_revenue: Decimal = ZERO
    needs: Decimal = ZERO
    wants: Decimal = ZERO
    savings: Decimal = ZERO
    annual: Decimal = ZERO
    final_net_income: Decimal = ZERO
    total_c2e: Decimal = ZERO
    housing: Decimal = ZERO
    transportation: Decimal = ZERO
    debt_payments: Decimal = ZERO
    food_entertainment: Decimal = ZERO
    short_term_savings: Decimal = ZERO
    retirement_savings: Decimal = ZERO
    retirement_contributions: Decimal = ZERO

    @classmethod
    def from_inputs(
        cls,
        inputs: StatementInput,
        *,
        gross_revenue: Number,
        net_revenue: Number,
        needs: Number,
        wants: Number,
        savings: Number,
        annual: Number,
        final_net_income: Number,
        total_c2e: Number,
    ) -> "InsightContext":
        """Combine computed totals with the individual lines some rules inspect."""
        return cls(
            gross_revenue=round_to_two(gross_revenue),
            net_revenue=round_to_two(net_revenue),
            needs=round_to_two(needs),
            wants=round_to_two(wants),
            savings=round_to_two(savings),
            annual=round_to_two(annual),
            final_net_income=round_to_two(final_net_income),
            total_c2e=round_to_two(total_c2e),
            housing=round_to_two(inputs.essential_needs.housing_expenses),
            transportation=round_to_two(inputs.essential_needs.transportation),
            debt_payments=round_to_two(inputs.essential_needs.debt_payments),
            food_entertainment=round_to_two(inputs.discretionary_expenses.food_entertainment),
            short_term_savings=round_to_two(inputs.savings_investments.short_term_savings),
            retirement_savings=round_to_two(inputs.savings_investments.retirement_savings),
            retirement_contributions=round_to_two(
                inputs.pre_tax_deductions.retirement_contributions
            ),
        )

    def share(self, amount: Number) -> Decimal:
        """``amount`` as a percentage of net revenue."""
        return safe_percentage(amount, self.net_revenue)

    @property
    def in_deficit(self) -> bool:
        return self.final_net_income < 0

    @property
    def recommended_wants(self) -> Decimal:
        return recommended_amounts(self.net_revenue)[1]

    @property
    def adjusted_net_revenue(self) -> Decimal:
        return self.net_revenue - self.total_c2e

    @property
    def final_net_income_after_c2e(self) -> Decimal:
        return self.final_net_income - self.total_c2e

    def adjusted_share(self, amount: Number) -> Decimal:
        """``amount`` as a percentage of net revenue after cost to earn."""
        return safe_percentage(amount, self.adjusted_net_revenue)


@dataclass(frozen=True)
class InsightRule:
    """One predicate → message rule.

    Attributes:
        name: Identifier used in logs and tests
        condition: Whether the rule fires for a context
        render: Messages the rule contributes when it fires
        halts: Stop evaluating later rules after this one fires
    """
    name: str
    condition: Callable[[InsightContext], bool]
    render: Callable[[InsightContext], list[str]]
    halts: bool = False

    def evaluate(self, context: InsightContext) -> list[str]:
        """Messages for ``context``, or an empty list when the rule does not fire."""
        if not self.condition(context):
            return []
        return self.render(context)


# =============================================================================
# MAIN RULES
# =============================================================================

def _render_deficit(ctx: InsightContext) -> list[str]:
    messages = [DEFICIT_MESSAGE]

    excess_wants = ctx.wants - ctx.recommended_wants
    if excess_wants > 0:
        messages.append(
            f"Consider reducing discretionary spending by ${round_to_whole(excess_wants):,} "
            "to bring lifestyle expenses in line with the recommended 30% of net revenue."
        )

    if ctx.share(ctx.total_c2e) > C2E_THRESHOLD:
        messages.append(
            f"Your cost to earn consumes {format_percent(ctx.share(ctx.total_c2e))} of your "
            "net revenue. Reducing work-related expenses would help close the deficit."
        )
    return messages


def _render_profit_margin(ctx: InsightContext) -> list[str]:
    margin = round_to_whole(safe_percentage(ctx.final_net_income, ctx.gross_revenue))
    if margin < PROFIT_MARGIN_TARGET:
        return [
            f"Your household profit margin is {margin}%. Aim for at least 10-20% "
            "for long-term financial resilience."
        ]
    return [
        f"Your household profit margin is a healthy {margin}%. This gives you "
        "flexibility for future financial goals."
    ]


def _render_needs(ctx: InsightContext) -> list[str]:
    needs_share = ctx.share(ctx.needs)
    if needs_share <= NEEDS_THRESHOLD:
        return [
            f"Your essential needs are well managed at {format_percent(needs_share)} "
            "of your net income, within the recommended 50%."
        ]

    messages = [
        f"Essential needs make up {format_percent(needs_share)} of your net income, "
        "above the recommended 50%. Consider areas where you can reduce fixed costs."
    ]
    housing_share = ctx.share(ctx.housing)
    if housing_share > HOUSING_THRESHOLD:
        messages.append(
            f"Housing costs represent {format_percent(housing_share)} of your net income, "
            "above the recommended 30%. This may limit flexibility in other areas."
        )
    transportation_share = ctx.share(ctx.transportation)
    if transportation_share > TRANSPORTATION_THRESHOLD:
        messages.append(
            f"Transportation costs represent {format_percent(transportation_share)} of your "
            "net income, above the recommended 15%. Carpooling, transit or a less costly "
            "vehicle could free up cash."
        )
    return messages


def _render_wants(ctx: InsightContext) -> list[str]:
    wants_share = ctx.share(ctx.wants)
    if wants_share <= WANTS_THRESHOLD:
        return [
            f"Your discretionary spending is well managed at {format_percent(wants_share)} "
            "of your net income, within the recommended 30%."
        ]

    messages = [
        f"Discretionary spending accounts for {format_percent(wants_share)} of your net "
        "income, above the recommended 30%. This could be an area to trim expenses."
    ]
    entertainment_share = ctx.share(ctx.food_entertainment)
    if entertainment_share > ENTERTAINMENT_THRESHOLD:
        messages.append(
            f"Dining out and entertainment account for {format_percent(entertainment_share)} "
            "of your net income. Cooking at home more often is an easy place to start."
        )
    return messages


def _render_savings(ctx: InsightContext) -> list[str]:
    savings_share = ctx.share(ctx.savings)
    if savings_share >= SAVINGS_THRESHOLD:
        return [
            f"Your savings rate of {format_percent(savings_share)} exceeds the recommended "
            "20%. You're effectively investing in future growth."
        ]

    messages = [
        f"Your savings rate is {format_percent(savings_share)}, below the recommended 20%. "
        "Increasing this will strengthen your financial position."
    ]
    if ctx.short_term_savings == 0:
        messages.append(
            "You are not setting anything aside in short-term savings. Start building an "
            "emergency fund that covers 3-6 months of essential expenses."
        )
    if ctx.retirement_savings + ctx.retirement_contributions == 0:
        messages.append(
            "You have no retirement contributions recorded. Even a small regular "
            "contribution compounds significantly over time."
        )
    return messages


def _render_debt(ctx: InsightContext) -> list[str]:
    return [
        f"Debt payments consume {format_percent(ctx.share(ctx.debt_payments))} of your net "
        "income. Prioritizing debt reduction could increase your profit margin."
    ]


def _render_c2e(ctx: InsightContext) -> list[str]:
    return [
        f"Your cost to earn is {format_percent(ctx.share(ctx.total_c2e))} of your net "
        "revenue. Look for ways to reduce work-related expenses such as commuting, "
        "work meals or childcare."
    ]


def _render_annual(ctx: InsightContext) -> list[str]:
    return [
        f"Annual and irregular expenses average {format_percent(ctx.share(ctx.annual))} of "
        "your net income each month. Spread out periodic expenses with dedicated sinking "
        "funds so they don't disrupt your monthly budget."
    ]


INSIGHT_RULES: tuple[InsightRule, ...] = (
    InsightRule(
        name="no_income",
        condition=lambda ctx: ctx.gross_revenue == 0,
        render=lambda ctx: [NO_INCOME_MESSAGE],
        halts=True,
    ),
    InsightRule(
        name="deficit",
        condition=lambda ctx: ctx.in_deficit,
        render=_render_deficit,
    ),
    InsightRule(
        name="profit_margin",
        condition=lambda ctx: not ctx.in_deficit,
        render=_render_profit_margin,
    ),
    InsightRule(
        name="non_positive_net_revenue",
        condition=lambda ctx: ctx.net_revenue <= 0,
        render=lambda ctx: [NON_POSITIVE_NET_REVENUE_MESSAGE],
        halts=True,
    ),
    InsightRule(name="needs", condition=lambda ctx: True, render=_render_needs),
    InsightRule(name="wants", condition=lambda ctx: True, render=_render_wants),
    InsightRule(name="savings", condition=lambda ctx: True, render=_render_savings),
    InsightRule(
        name="debt",
        condition=lambda ctx: ctx.share(ctx.debt_payments) > DEBT_THRESHOLD,
        render=_render_debt,
    ),
    InsightRule(
        name="cost_to_earn",
        condition=lambda ctx: not ctx.in_deficit and ctx.share(ctx.total_c2e) > C2E_THRESHOLD,
        render=_render_c2e,
    ),
    InsightRule(
        name="annual_planning",
        condition=lambda ctx: ctx.share(ctx.annual) > ANNUAL_THRESHOLD,
        render=_render_annual,
    ),
    InsightRule(
        name="values_alignment",
        condition=lambda ctx: ctx.net_revenue > 0 and (ctx.needs > 0 or ctx.wants > 0),
        render=lambda ctx: [VALUES_MESSAGE],
    ),
)


# =============================================================================
# COST-TO-EARN ADJUSTED RULES
# =============================================================================

def _render_adjusted_revenue(ctx: InsightContext) -> list[str]:
    adjusted = round_to_whole(ctx.adjusted_net_revenue)
    return [
        f"After ${round_to_whole(ctx.total_c2e):,} in costs to earn your income, your "
        f"adjusted net revenue is {'-' if adjusted < 0 else ''}${abs(adjusted):,}."
    ]


def _render_adjusted_profit(ctx: InsightContext) -> list[str]:
    final_after = ctx.final_net_income_after_c2e
    if final_after < 0:
        return [
            f"Once cost to earn is counted, your household runs a deficit of "
            f"${round_to_whole(-final_after):,} a month. Your real take-home "
            "profit is lower than it appears."
        ]
    margin = round_to_whole(safe_percentage(final_after, ctx.gross_revenue))
    return [f"Your profit margin after cost to earn is {margin}%."]


def _render_adjusted_needs(ctx: InsightContext) -> list[str]:
    return [
        f"Essential needs make up {format_percent(ctx.adjusted_share(ctx.needs))} of your "
        "net revenue after cost to earn, above the recommended 50%."
    ]


C2E_INSIGHT_RULES: tuple[InsightRule, ...] = (
    InsightRule(
        name="no_cost_to_earn",
        condition=lambda ctx: ctx.gross_revenue == 0 or ctx.total_c2e == 0,
        render=lambda ctx: [],
        halts=True,
    ),
    InsightRule(name="adjusted_revenue", condition=lambda ctx: True, render=_render_adjusted_revenue),
    InsightRule(name="adjusted_profit", condition=lambda ctx: True, render=_render_adjusted_profit),
    InsightRule(
        name="adjusted_needs",
        condition=lambda ctx: ctx.adjusted_share(ctx.needs) > NEEDS_THRESHOLD,
        render=_render_adjusted_needs,
    ),
)


# =============================================================================
# EVALUATION
# =============================================================================

def evaluate_rules(rules: tuple[InsightRule, ...], context: InsightContext) -> list[str]:
    """Run ``rules`` in order, stopping after the first halting rule that fires."""
    insights: list[str] = []
    for rule in rules:
        if not rule.condition(context):
            continue
        messages = rule.render(context)
        insights.extend(messages)
        logger.debug("insight_rule_fired", rule=rule.name, messages=len(messages))
        if rule.halts:
            break
    return insights


def generate_insights(context: InsightContext) -> list[str]:
    """Main insight batch for a statement."""
    return evaluate_rules(INSIGHT_RULES, context)


def generate_c2e_insights(context: InsightContext) -> list[str]:
    """Insights on the cost-to-earn adjusted figures (empty without income or C2E)."""
    return evaluate_rules(C2E_INSIGHT_RULES, context)


_ALERT_KEYWORDS = ("deficit", "zero or negative")
_POSITIVE_KEYWORDS = ("healthy", "well managed", "exceeds the recommended")
_WARNING_KEYWORDS = ("above the recommended", "below the recommended", "consume", "Aim for")
_RECOMMENDATION_KEYWORDS = ("Consider", "Look for", "Spread out", "Start building", "Please enter")


def classify_insight(text: str) -> InsightType:
    """Classify an insight string for display (alert, warning, positive, ...)."""
    if any(keyword in text for keyword in _ALERT_KEYWORDS):
        return InsightType.ALERT
    if any(keyword in text for keyword in _POSITIVE_KEYWORDS):
        return InsightType.POSITIVE
    if any(keyword in text for keyword in _WARNING_KEYWORDS):
        return InsightType.WARNING
    if any(keyword in text for keyword in _RECOMMENDATION_KEYWORDS):
        return InsightType.RECOMMENDATION
    return InsightType.INFORMATION
