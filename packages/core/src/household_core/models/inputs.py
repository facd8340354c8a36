"""Typed input models for the household income statement form.

The form submits a flat mapping of camelCase field names to numeric strings.
Each statement section gets its own frozen model so aggregators work over
declared fields instead of string lookups. Every amount is coerced on
construction: blanks, junk and negatives become zero, missing fields default
to zero, and nothing is ever rejected.

Cost-to-earn toggles travel separately as a ``C2ESettings`` map rather than
riding along on the form object.
"""

from collections.abc import Iterator, Mapping
from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from ..money import HUNDRED, to_safe_number

# Spellings of "on" a toggle accepts; anything else reads as off
_TRUE_STRINGS = frozenset({"true", "t", "yes", "y", "on", "1"})


class SectionInput(BaseModel):
    """Base for one form section: every declared field is a monthly amount."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )

    @field_validator("*", mode="before")
    @classmethod
    def coerce_amount(cls, v: Any) -> Decimal:
        """Coerce raw form values to non-negative Decimals."""
        return to_safe_number(v)

    def line_items(self) -> Iterator[tuple[str, Decimal]]:
        """Yield ``(field_name, amount)`` in declaration order."""
        for name in type(self).model_fields:
            yield name, getattr(self, name)

    @property
    def total(self) -> Decimal:
        """Unrounded sum of every line item."""
        return sum((amount for _, amount in self.line_items()), Decimal("0"))


# =============================================================================
# STATEMENT SECTIONS
# =============================================================================

class IncomeInput(SectionInput):
    """Monthly income sources (gross revenue)."""
    primary_income: Decimal = Decimal("0")
    secondary_income: Decimal = Decimal("0")
    investment_income: Decimal = Decimal("0")
    government_benefits: Decimal = Decimal("0")
    alimony_child_support: Decimal = Decimal("0")
    other_income: Decimal = Decimal("0")


class PreTaxDeductionsInput(SectionInput):
    """Payroll deductions taken before take-home pay."""
    federal_income_tax: Decimal = Decimal("0")
    state_income_tax: Decimal = Decimal("0")
    fica_tax: Decimal = Decimal("0")
    retirement_contributions: Decimal = Decimal("0")
    health_insurance_premiums: Decimal = Decimal("0")
    hsa_fsa_contributions: Decimal = Decimal("0")
    union_dues: Decimal = Decimal("0")
    other_payroll_deductions: Decimal = Decimal("0")


class EssentialNeedsInput(SectionInput):
    """Fixed monthly expenses (the 50% "needs" bucket)."""
    housing_expenses: Decimal = Decimal("0")
    utilities: Decimal = Decimal("0")
    food_groceries: Decimal = Decimal("0")
    transportation: Decimal = Decimal("0")
    healthcare: Decimal = Decimal("0")
    childcare_education: Decimal = Decimal("0")
    insurance: Decimal = Decimal("0")
    debt_payments: Decimal = Decimal("0")
    personal_care_medical: Decimal = Decimal("0")


class CostToEarnInput(SectionInput):
    """Expenses entered directly as cost to earn (always counted at 100%)."""
    commuting_transportation: Decimal = Decimal("0")
    work_technology: Decimal = Decimal("0")
    dependent_care: Decimal = Decimal("0")
    work_shelter_utilities: Decimal = Decimal("0")
    work_attire: Decimal = Decimal("0")
    work_meals: Decimal = Decimal("0")
    licensing_education: Decimal = Decimal("0")
    work_health_wellness: Decimal = Decimal("0")
    work_debt_obligations: Decimal = Decimal("0")


class SavingsInvestmentsInput(SectionInput):
    """Monthly savings and investment contributions (the 20% bucket)."""
    short_term_savings: Decimal = Decimal("0")
    long_term_investments: Decimal = Decimal("0")
    education_savings: Decimal = Decimal("0")
    charitable_giving: Decimal = Decimal("0")
    retirement_savings: Decimal = Decimal("0")


class DiscretionaryExpensesInput(SectionInput):
    """Lifestyle dividends (the 30% "wants" bucket)."""
    food_entertainment: Decimal = Decimal("0")  # Dining out, takeout, movies, events
    travel_experiences: Decimal = Decimal("0")
    subscriptions_memberships: Decimal = Decimal("0")
    home_living_decor: Decimal = Decimal("0")
    clothing_style: Decimal = Decimal("0")
    fitness_wellness: Decimal = Decimal("0")
    gifts_celebrations: Decimal = Decimal("0")
    hobbies_recreation: Decimal = Decimal("0")
    beauty_self_care: Decimal = Decimal("0")
    convenience_time_savers: Decimal = Decimal("0")
    pet_care: Decimal = Decimal("0")
    kids_schooling: Decimal = Decimal("0")
    philanthropy_family_support: Decimal = Decimal("0")


class AnnualExpensesInput(SectionInput):
    """Annual or irregular expenses.

    Users enter the monthly amount they set aside (an expense costing
    $1,200 a year is entered as $100), so these are already monthly.
    """
    annual_licenses: Decimal = Decimal("0")
    home_repairs: Decimal = Decimal("0")
    holiday_gifts: Decimal = Decimal("0")
    personal_celebrations: Decimal = Decimal("0")
    family_events: Decimal = Decimal("0")
    vehicle_maintenance: Decimal = Decimal("0")
    professional_development: Decimal = Decimal("0")


# =============================================================================
# COST-TO-EARN SETTINGS
# =============================================================================

class C2ESetting(BaseModel):
    """Whether part of an expense is a cost of earning income, and how much."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    is_c2e: bool = Field(default=False, alias="isC2E")
    percentage: Decimal = Field(default=HUNDRED)

    @field_validator("is_c2e", mode="before")
    @classmethod
    def coerce_toggle(cls, v: Any) -> bool:
        """Read the usual true/false spellings; unknown values are off."""
        if isinstance(v, bool):
            return v
        if isinstance(v, str):
            return v.strip().lower() in _TRUE_STRINGS
        if isinstance(v, (int, float, Decimal)):
            return v == 1
        return False

    @field_validator("percentage", mode="before")
    @classmethod
    def clamp_percentage(cls, v: Any) -> Decimal:
        """Clamp the share into [0, 100]."""
        return min(to_safe_number(v), HUNDRED)


class C2ESettings(BaseModel):
    """Per-field cost-to-earn toggles for the eligible expense lines.

    Keys follow the form's field names (``housingExpenses``,
    ``annualLicenses``, ...). Unknown keys are ignored and a missing entry
    means the field is not a cost to earn.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )

    housing_expenses: C2ESetting = Field(default_factory=C2ESetting)
    utilities: C2ESetting = Field(default_factory=C2ESetting)
    transportation: C2ESetting = Field(default_factory=C2ESetting)
    childcare_education: C2ESetting = Field(default_factory=C2ESetting)
    professional_development: C2ESetting = Field(default_factory=C2ESetting)
    annual_licenses: C2ESetting = Field(default_factory=C2ESetting)

    @field_validator("*", mode="before")
    @classmethod
    def default_unusable_setting(cls, v: Any) -> Any:
        """Treat anything that is not a setting-shaped mapping as "off"."""
        if isinstance(v, (C2ESetting, Mapping)):
            return v
        return C2ESetting()

    @classmethod
    def from_mapping(cls, settings: Optional[Mapping[str, Any]]) -> "C2ESettings":
        """Build settings from the form's ``costToEarnSettings`` mapping."""
        if not settings:
            return cls()
        return cls.model_validate(dict(settings))


# =============================================================================
# COMPLETE INPUT
# =============================================================================

class StatementInput(BaseModel):
    """Everything the engine needs to build one income statement."""

    model_config = ConfigDict(frozen=True)

    income: IncomeInput = Field(default_factory=IncomeInput)
    pre_tax_deductions: PreTaxDeductionsInput = Field(default_factory=PreTaxDeductionsInput)
    essential_needs: EssentialNeedsInput = Field(default_factory=EssentialNeedsInput)
    cost_to_earn: CostToEarnInput = Field(default_factory=CostToEarnInput)
    savings_investments: SavingsInvestmentsInput = Field(default_factory=SavingsInvestmentsInput)
    discretionary_expenses: DiscretionaryExpensesInput = Field(
        default_factory=DiscretionaryExpensesInput
    )
    annual_expenses: AnnualExpensesInput = Field(default_factory=AnnualExpensesInput)
    c2e_settings: C2ESettings = Field(default_factory=C2ESettings)

    @classmethod
    def from_form_data(
        cls,
        form_data: Mapping[str, Any],
        cost_to_earn_settings: Optional[Mapping[str, Any]] = None,
    ) -> "StatementInput":
        """Parse the flat form mapping into typed sections.

        Args:
            form_data: camelCase field name to raw value, as submitted.
            cost_to_earn_settings: Explicit C2E toggles. When omitted, a nested
                ``costToEarnSettings`` entry in ``form_data`` is used.

        Returns:
            A frozen StatementInput. ``form_data`` is not modified.
        """
        data = dict(form_data)
        if cost_to_earn_settings is None:
            nested = data.get("costToEarnSettings")
            cost_to_earn_settings = nested if isinstance(nested, Mapping) else None

        return cls(
            income=IncomeInput.model_validate(data),
            pre_tax_deductions=PreTaxDeductionsInput.model_validate(data),
            essential_needs=EssentialNeedsInput.model_validate(data),
            cost_to_earn=CostToEarnInput.model_validate(data),
            savings_investments=SavingsInvestmentsInput.model_validate(data),
            discretionary_expenses=DiscretionaryExpensesInput.model_validate(data),
            annual_expenses=AnnualExpensesInput.model_validate(data),
            c2e_settings=C2ESettings.from_mapping(cost_to_earn_settings),
        )
