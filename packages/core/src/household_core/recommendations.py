"""50/30/20 budget recommendations.

Net revenue is split 50% needs, 30% wants, 20% savings. Each bucket's actual
spending is compared against its target; needs and wants are "good" at or
under target, savings is "good" at or over target.
"""

from decimal import Decimal

from .models.statement import Recommendation, Recommendations, RecommendationStatus
from .money import ZERO, Number, format_currency, round_to_two

NEEDS_SHARE = Decimal("0.5")
WANTS_SHARE = Decimal("0.3")
SAVINGS_SHARE = Decimal("0.2")


def recommended_amounts(net_revenue: Number) -> tuple[Decimal, Decimal, Decimal]:
    """Return the (needs, wants, savings) targets, all 0 when net revenue is not positive."""
    revenue = round_to_two(net_revenue)
    if revenue <= 0:
        return ZERO, ZERO, ZERO
    return (
        round_to_two(revenue * NEEDS_SHARE),
        round_to_two(revenue * WANTS_SHARE),
        round_to_two(revenue * SAVINGS_SHARE),
    )


def _compare(recommended: Decimal, actual: Number, *, minimum: bool) -> Recommendation:
    actual = round_to_two(actual)
    if minimum:
        status = RecommendationStatus.GOOD if actual >= recommended else RecommendationStatus.LOW
    else:
        status = RecommendationStatus.GOOD if actual <= recommended else RecommendationStatus.HIGH

    return Recommendation(
        recommended=format_currency(recommended),
        actual=format_currency(actual),
        difference=format_currency(recommended - actual),
        status=status,
    )


def build_recommendations(
    net_revenue: Number,
    needs: Number,
    wants: Number,
    savings: Number,
) -> Recommendations:
    """Compare actual needs, wants and savings against the 50/30/20 targets.

    Args:
        net_revenue: Revenue the targets are taken from (net or C2E-adjusted).
        needs: Total essential needs.
        wants: Total discretionary spending.
        savings: Total savings and investments.

    Returns:
        Recommendations with formatted target, actual and difference
        (target minus actual, negative when over) per bucket.
    """
    needs_target, wants_target, savings_target = recommended_amounts(net_revenue)
    return Recommendations(
        needs=_compare(needs_target, needs, minimum=False),
        wants=_compare(wants_target, wants, minimum=False),
        savings=_compare(savings_target, savings, minimum=True),
    )
