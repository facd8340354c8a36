"""Group household spending by the core value it serves."""

from collections.abc import Callable
from decimal import Decimal
from typing import NamedTuple

from .models.inputs import StatementInput
from .models.statement import MonetaryAmount, ValueChainOpportunity
from .money import ZERO, round_to_two


class ValueCategory(NamedTuple):
    name: str
    lines: tuple[Callable[[StatementInput], Decimal], ...]
    recommendations: tuple[str, ...]


VALUE_CATEGORIES: tuple[ValueCategory, ...] = (
    ValueCategory(
        name="Security & Peace of Mind",
        lines=(
            lambda i: i.savings_investments.short_term_savings,
            lambda i: i.essential_needs.insurance,
            lambda i: i.pre_tax_deductions.health_insurance_premiums,
            lambda i: i.annual_expenses.home_repairs,
        ),
        recommendations=(
            "Emergency funds provide security against unexpected events",
            "Adequate insurance protects what you value most",
        ),
    ),
    ValueCategory(
        name="Family & Relationships",
        lines=(
            lambda i: i.essential_needs.childcare_education,
            lambda i: i.discretionary_expenses.gifts_celebrations,
            lambda i: i.annual_expenses.family_events,
            lambda i: i.annual_expenses.holiday_gifts,
        ),
        recommendations=(
            "Investing in family experiences creates lasting memories",
            "Supporting family education provides long-term benefits",
        ),
    ),
    ValueCategory(
        name="Health & Wellbeing",
        lines=(
            lambda i: i.essential_needs.healthcare,
            lambda i: i.discretionary_expenses.fitness_wellness,
            lambda i: i.essential_needs.personal_care_medical,
            lambda i: i.essential_needs.food_groceries,
        ),
        recommendations=(
            "Preventative health spending reduces long-term costs",
            "Wellness investments improve quality of life",
        ),
    ),
    ValueCategory(
        name="Growth & Freedom",
        lines=(
            lambda i: i.discretionary_expenses.travel_experiences,
            lambda i: i.annual_expenses.professional_development,
            lambda i: i.savings_investments.education_savings,
            lambda i: i.discretionary_expenses.hobbies_recreation,
        ),
        recommendations=(
            "Personal development creates future earning potential",
            "New experiences broaden perspectives",
        ),
    ),
    ValueCategory(
        name="Legacy & Impact",
        lines=(
            lambda i: i.savings_investments.charitable_giving,
            lambda i: i.savings_investments.long_term_investments,
            lambda i: i.savings_investments.retirement_savings,
        ),
        recommendations=(
            "Charitable giving aligns spending with personal values",
            "Long-term investments build generational impact",
        ),
    ),
)


def identify_value_chain_opportunities(inputs: StatementInput) -> list[ValueChainOpportunity]:
    """Sum spending under each core value, in a fixed category order."""
    opportunities = []
    for category in VALUE_CATEGORIES:
        spending = round_to_two(
            sum((round_to_two(line(inputs)) for line in category.lines), ZERO)
        )
        opportunities.append(
            ValueChainOpportunity(
                name=category.name,
                spending=MonetaryAmount.from_amount(spending),
                recommendations=list(category.recommendations),
            )
        )
    return opportunities
