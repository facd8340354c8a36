"""Income statement result models.

These models define the persisted statement document. Attribute names are
snake_case in Python; the serialized document uses the camelCase keys that
the history and detail views read, so ``Statement.to_json_dict()`` must keep
every key stable. Each monetary leaf serializes as
``{"value": <number>, "formatted": "<USD string>"}``.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..money import Number, format_currency, round_to_two


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MonetaryAmount(BaseModel):
    """A rounded dollar figure together with its display string."""

    value: float
    formatted: str

    @classmethod
    def from_amount(cls, amount: Number) -> "MonetaryAmount":
        """Round to cents and format as USD."""
        rounded = round_to_two(amount)
        if rounded == 0:
            rounded = abs(rounded)
        return cls(value=float(rounded), formatted=format_currency(rounded))


# =============================================================================
# CATEGORY TOTALS
# =============================================================================

class IncomeTotals(CamelModel):
    """Income line items and gross revenue."""
    primary_income: MonetaryAmount
    secondary_income: MonetaryAmount
    investment_income: MonetaryAmount
    government_benefits: MonetaryAmount
    alimony_child_support: MonetaryAmount
    other_income: MonetaryAmount
    gross_revenue: MonetaryAmount


class PreTaxDeductionTotals(CamelModel):
    """Payroll deduction line items and their total."""
    federal_income_tax: MonetaryAmount
    state_income_tax: MonetaryAmount
    fica_tax: MonetaryAmount
    retirement_contributions: MonetaryAmount
    health_insurance_premiums: MonetaryAmount
    hsa_fsa_contributions: MonetaryAmount
    union_dues: MonetaryAmount
    other_payroll_deductions: MonetaryAmount
    total_pre_tax_deductions: MonetaryAmount


class CostToEarnTotals(CamelModel):
    """Cost-to-earn allocation: toggled shares of needs plus dedicated entries."""
    # Percentage-toggled shares of needs and annual expenses
    housing_c2e: MonetaryAmount = Field(alias="housingC2E")
    utilities_c2e: MonetaryAmount = Field(alias="utilitiesC2E")
    transportation_c2e: MonetaryAmount = Field(alias="transportationC2E")
    childcare_c2e: MonetaryAmount = Field(alias="childcareC2E")
    professional_dev_c2e: MonetaryAmount = Field(alias="professionalDevC2E")
    licenses_c2e: MonetaryAmount = Field(alias="licensesC2E")

    # Dedicated entries, counted in full
    commuting_transportation: MonetaryAmount
    work_technology: MonetaryAmount
    dependent_care: MonetaryAmount
    work_shelter_utilities: MonetaryAmount
    work_attire: MonetaryAmount
    work_meals: MonetaryAmount
    licensing_education: MonetaryAmount
    work_health_wellness: MonetaryAmount
    work_debt_obligations: MonetaryAmount

    total_c2e: MonetaryAmount = Field(alias="totalC2E")
    percent_of_income: str = "0%"


class EssentialNeedsTotals(CamelModel):
    """Essential needs line items and their total."""
    housing_expenses: MonetaryAmount
    utilities: MonetaryAmount
    food_groceries: MonetaryAmount
    transportation: MonetaryAmount
    healthcare: MonetaryAmount
    childcare_education: MonetaryAmount
    insurance: MonetaryAmount
    debt_payments: MonetaryAmount
    personal_care_medical: MonetaryAmount
    total_needs_expenses: MonetaryAmount
    percent_of_income: str = "0%"


class SavingsInvestmentTotals(CamelModel):
    """Savings and investment line items and their total."""
    short_term_savings: MonetaryAmount
    long_term_investments: MonetaryAmount
    education_savings: MonetaryAmount
    charitable_giving: MonetaryAmount
    retirement_savings: MonetaryAmount
    total_savings_investments: MonetaryAmount
    percent_of_income: str = "0%"


class DiscretionaryExpenseTotals(CamelModel):
    """Lifestyle dividend line items and their total."""
    food_entertainment: MonetaryAmount
    travel_experiences: MonetaryAmount
    subscriptions_memberships: MonetaryAmount
    home_living_decor: MonetaryAmount
    clothing_style: MonetaryAmount
    fitness_wellness: MonetaryAmount
    gifts_celebrations: MonetaryAmount
    hobbies_recreation: MonetaryAmount
    beauty_self_care: MonetaryAmount
    convenience_time_savers: MonetaryAmount
    pet_care: MonetaryAmount
    kids_schooling: MonetaryAmount
    philanthropy_family_support: MonetaryAmount
    total_wants_expenses: MonetaryAmount
    percent_of_income: str = "0%"


class AnnualExpenseTotals(CamelModel):
    """Monthly set-asides for annual or irregular expenses."""
    annual_licenses: MonetaryAmount
    home_repairs: MonetaryAmount
    holiday_gifts: MonetaryAmount
    personal_celebrations: MonetaryAmount
    family_events: MonetaryAmount
    vehicle_maintenance: MonetaryAmount
    professional_development: MonetaryAmount
    total_annual_expenses: MonetaryAmount


# =============================================================================
# RECOMMENDATIONS
# =============================================================================

class RecommendationStatus(str, Enum):
    """How actual spending compares with the 50/30/20 target."""
    GOOD = "good"
    HIGH = "high"
    LOW = "low"


class Recommendation(BaseModel):
    """Recommended versus actual spending for one budget bucket."""
    recommended: str
    actual: str
    difference: str
    status: RecommendationStatus


class Recommendations(BaseModel):
    """50/30/20 comparison for needs, wants and savings."""
    needs: Recommendation
    wants: Recommendation
    savings: Recommendation


class ValueChainOpportunity(BaseModel):
    """Spending grouped under one core value."""
    name: str
    spending: MonetaryAmount
    recommendations: list[str] = Field(default_factory=list)


# =============================================================================
# STATEMENT
# =============================================================================

class Statement(CamelModel):
    """A complete household income statement.

    Built fresh on every form submission and stored as an opaque JSON
    document. Invariant: ``final_net_income`` equals net revenue minus
    needs, savings, wants and annual set-asides.
    """

    income: IncomeTotals
    pre_tax_deductions: PreTaxDeductionTotals
    net_revenue: MonetaryAmount
    cost_to_earn: CostToEarnTotals
    adjusted_net_revenue: MonetaryAmount
    essential_needs: EssentialNeedsTotals
    savings_investments: SavingsInvestmentTotals
    gross_profit: MonetaryAmount
    gross_profit_after_c2e: MonetaryAmount = Field(alias="grossProfitAfterC2E")
    discretionary_expenses: DiscretionaryExpenseTotals
    net_profit: MonetaryAmount
    net_profit_after_c2e: MonetaryAmount = Field(alias="netProfitAfterC2E")
    annual_expenses: AnnualExpenseTotals
    final_net_income: MonetaryAmount
    final_net_income_after_c2e: MonetaryAmount = Field(alias="finalNetIncomeAfterC2E")
    recommendations: Recommendations
    recommendations_after_c2e: Recommendations = Field(alias="recommendationsAfterC2E")
    value_chain_opportunities: list[ValueChainOpportunity] = Field(default_factory=list)
    insights: list[str] = Field(default_factory=list)

    def to_json_dict(self) -> dict[str, Any]:
        """Serialize to the stored document shape (camelCase keys)."""
        return self.model_dump(mode="json", by_alias=True)
