"""Legacy single-page quick report.

An older, smaller variant of the income statement: a single form with fewer
expense lines, a handful of financial ratios and typed insights. It does not
know about cost to earn or value chains, and its thresholds differ from the
main insight rules. New callers should use ``calculator.compute_statement``.
"""

from collections.abc import Mapping
from decimal import Decimal
from typing import Any

import structlog
from pydantic import BaseModel, ConfigDict, Field

from .aggregators import build_category, section_total
from .insights import InsightType
from .models.inputs import IncomeInput, PreTaxDeductionsInput, SectionInput
from .models.statement import (
    CamelModel,
    IncomeTotals,
    MonetaryAmount,
    PreTaxDeductionTotals,
    Recommendations,
)
from .money import (
    Number,
    format_currency,
    format_percent,
    percent_of_income,
    round_to_two,
    safe_percentage,
)
from .recommendations import build_recommendations

logger = structlog.get_logger()

NOT_AVAILABLE = "N/A"


# =============================================================================
# INPUT
# =============================================================================

class QuickNeedsInput(SectionInput):
    housing_expenses: Decimal = Decimal("0")
    utilities: Decimal = Decimal("0")
    food_groceries: Decimal = Decimal("0")
    transportation: Decimal = Decimal("0")
    healthcare: Decimal = Decimal("0")
    childcare_education: Decimal = Decimal("0")
    insurance: Decimal = Decimal("0")


class QuickSavingsInput(SectionInput):
    short_term_savings: Decimal = Decimal("0")
    long_term_investments: Decimal = Decimal("0")
    education_savings: Decimal = Decimal("0")
    charitable_giving: Decimal = Decimal("0")


class QuickWantsInput(SectionInput):
    entertainment_leisure: Decimal = Decimal("0")
    dining_out: Decimal = Decimal("0")
    shopping_personal: Decimal = Decimal("0")
    fitness_wellness: Decimal = Decimal("0")
    travel_vacations: Decimal = Decimal("0")


class QuickAnnualInput(SectionInput):
    annual_licenses: Decimal = Decimal("0")
    home_repairs: Decimal = Decimal("0")
    holiday_gifts: Decimal = Decimal("0")
    personal_celebrations: Decimal = Decimal("0")
    family_events: Decimal = Decimal("0")


class RatioInput(SectionInput):
    """Balance-sheet style figures used only for ratios."""
    liquid_assets: Decimal = Decimal("0")
    current_liabilities: Decimal = Decimal("0")
    debt_payments: Decimal = Decimal("0")
    insurance_coverage: Decimal = Decimal("0")
    necessary_expenses: Decimal = Decimal("0")
    enjoyment_spend: Decimal = Decimal("0")
    total_assets: Decimal = Decimal("0")


class QuickReportInput(BaseModel):
    """Parsed quick-report form."""

    model_config = ConfigDict(frozen=True)

    name: str = ""
    income: IncomeInput = Field(default_factory=IncomeInput)
    pre_tax_deductions: PreTaxDeductionsInput = Field(default_factory=PreTaxDeductionsInput)
    needs: QuickNeedsInput = Field(default_factory=QuickNeedsInput)
    savings: QuickSavingsInput = Field(default_factory=QuickSavingsInput)
    wants: QuickWantsInput = Field(default_factory=QuickWantsInput)
    annual: QuickAnnualInput = Field(default_factory=QuickAnnualInput)
    ratios: RatioInput = Field(default_factory=RatioInput)

    @classmethod
    def from_form_data(cls, form_data: Mapping[str, Any]) -> "QuickReportInput":
        data = dict(form_data)
        name = data.get("name")
        return cls(
            name=name.strip() if isinstance(name, str) else "",
            income=IncomeInput.model_validate(data),
            pre_tax_deductions=PreTaxDeductionsInput.model_validate(data),
            needs=QuickNeedsInput.model_validate(data),
            savings=QuickSavingsInput.model_validate(data),
            wants=QuickWantsInput.model_validate(data),
            annual=QuickAnnualInput.model_validate(data),
            ratios=RatioInput.model_validate(data),
        )


# =============================================================================
# OUTPUT
# =============================================================================

class PersonalInfo(BaseModel):
    name: str = ""


class QuickNeedsTotals(CamelModel):
    housing_expenses: MonetaryAmount
    utilities: MonetaryAmount
    food_groceries: MonetaryAmount
    transportation: MonetaryAmount
    healthcare: MonetaryAmount
    childcare_education: MonetaryAmount
    insurance: MonetaryAmount
    total_needs_expenses: MonetaryAmount
    percent_of_income: str = "0%"


class QuickSavingsTotals(CamelModel):
    short_term_savings: MonetaryAmount
    long_term_investments: MonetaryAmount
    education_savings: MonetaryAmount
    charitable_giving: MonetaryAmount
    total_savings_investments: MonetaryAmount
    percent_of_income: str = "0%"


class QuickWantsTotals(CamelModel):
    entertainment_leisure: MonetaryAmount
    dining_out: MonetaryAmount
    shopping_personal: MonetaryAmount
    fitness_wellness: MonetaryAmount
    travel_vacations: MonetaryAmount
    total_wants_expenses: MonetaryAmount
    percent_of_income: str = "0%"


class QuickAnnualTotals(CamelModel):
    annual_licenses: MonetaryAmount
    home_repairs: MonetaryAmount
    holiday_gifts: MonetaryAmount
    personal_celebrations: MonetaryAmount
    family_events: MonetaryAmount
    total_annual_expenses: MonetaryAmount


class FinancialRatios(CamelModel):
    """Ratios as two-decimal strings, ``"N/A"`` when either side is zero."""
    liquidity_ratio: str = NOT_AVAILABLE
    debt_coverage_ratio: str = NOT_AVAILABLE
    protection_ratio: str = NOT_AVAILABLE
    return_on_assets: str = NOT_AVAILABLE
    return_on_enjoyment: str = NOT_AVAILABLE
    savings_rate: str = NOT_AVAILABLE
    housing_to_income_ratio: str = NOT_AVAILABLE
    debt_to_income_ratio: str = NOT_AVAILABLE


class QuickInsight(BaseModel):
    type: InsightType
    text: str


class QuickReport(CamelModel):
    """The legacy report document."""
    personal_info: PersonalInfo
    income: IncomeTotals
    pre_tax_deductions: PreTaxDeductionTotals
    net_revenue: MonetaryAmount
    essential_needs: QuickNeedsTotals
    savings_investments: QuickSavingsTotals
    gross_profit: MonetaryAmount
    discretionary_expenses: QuickWantsTotals
    net_profit: MonetaryAmount
    annual_expenses: QuickAnnualTotals
    final_net_income: MonetaryAmount
    financial_ratios: FinancialRatios
    recommendations: Recommendations
    insights: list[QuickInsight] = Field(default_factory=list)

    def to_json_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


# =============================================================================
# CALCULATION
# =============================================================================

def calculate_ratio(numerator: Number, denominator: Number) -> str:
    """``numerator / denominator`` to two decimals, or "N/A" when either is zero."""
    top = Decimal(str(numerator))
    bottom = Decimal(str(denominator))
    if top == 0 or bottom == 0:
        return NOT_AVAILABLE
    return str(round_to_two(top / bottom))


def build_quick_insights(
    final_net_income: Decimal,
    net_revenue: Decimal,
    ratios: FinancialRatios,
    needs: Decimal,
    wants: Decimal,
    savings: Decimal,
) -> list[QuickInsight]:
    """Typed insights for the quick report, in display order."""
    insights: list[QuickInsight] = []

    if final_net_income <= 0:
        insights.append(QuickInsight(
            type=InsightType.ALERT,
            text="Your expenses exceed your income. This is unsustainable long-term.",
        ))
        insights.append(QuickInsight(
            type=InsightType.RECOMMENDATION,
            text="Review your budget to reduce expenses or find ways to increase income.",
        ))
    elif final_net_income < net_revenue * Decimal("0.1"):
        insights.append(QuickInsight(
            type=InsightType.WARNING,
            text=("Your net income is less than 10% of your net revenue, leaving little "
                  "margin for unexpected expenses."),
        ))
    else:
        insights.append(QuickInsight(
            type=InsightType.POSITIVE,
            text=f"You have a positive monthly net income of {format_currency(final_net_income)}.",
        ))

    needs_percent = safe_percentage(needs, net_revenue)
    wants_percent = safe_percentage(wants, net_revenue)
    savings_percent = safe_percentage(savings, net_revenue)

    if needs_percent > 50:
        insights.append(QuickInsight(
            type=InsightType.WARNING,
            text=(f"Your essential needs ({format_percent(needs_percent)}) exceed the "
                  "recommended 50% of net income."),
        ))
    if wants_percent > 30:
        insights.append(QuickInsight(
            type=InsightType.WARNING,
            text=(f"Your discretionary spending ({format_percent(wants_percent)}) exceeds "
                  "the recommended 30% of net income."),
        ))
    if savings_percent < 20:
        insights.append(QuickInsight(
            type=InsightType.WARNING,
            text=(f"Your savings rate ({format_percent(savings_percent)}) is below the "
                  "recommended 20% of net income."),
        ))
    else:
        insights.append(QuickInsight(
            type=InsightType.POSITIVE,
            text=(f"Your savings rate of {format_percent(savings_percent)} meets or exceeds "
                  "the recommended 20%."),
        ))

    if ratios.liquidity_ratio != NOT_AVAILABLE:
        liquidity = Decimal(ratios.liquidity_ratio)
        if liquidity < 1:
            insights.append(QuickInsight(
                type=InsightType.WARNING,
                text=(f"Your liquidity ratio ({ratios.liquidity_ratio}) is below 1, indicating "
                      "potential short-term financial pressure."),
            ))
        elif liquidity > 3:
            insights.append(QuickInsight(
                type=InsightType.INFORMATION,
                text=(f"Your liquidity ratio ({ratios.liquidity_ratio}) is above 3. Consider "
                      "putting some of these liquid assets to work in investments."),
            ))

    if ratios.debt_coverage_ratio != NOT_AVAILABLE:
        if Decimal(ratios.debt_coverage_ratio) > Decimal("0.36"):
            insights.append(QuickInsight(
                type=InsightType.WARNING,
                text=(f"Your debt coverage ratio ({ratios.debt_coverage_ratio}) is high. "
                      "Lenders typically prefer this ratio to be below 0.36."),
            ))

    if ratios.housing_to_income_ratio != NOT_AVAILABLE:
        housing = Decimal(ratios.housing_to_income_ratio)
        if housing > Decimal("0.28"):
            insights.append(QuickInsight(
                type=InsightType.WARNING,
                text=(f"Your housing costs are {format_percent(housing * 100)} of your net "
                      "income, which exceeds the recommended 28%."),
            ))

    insights.append(QuickInsight(
        type=InsightType.RECOMMENDATION,
        text=("Follow the 50/30/20 rule: 50% for needs, 30% for wants, and 20% for "
              "savings/debt repayment."),
    ))
    if savings < net_revenue * Decimal("0.2"):
        insights.append(QuickInsight(
            type=InsightType.RECOMMENDATION,
            text="Try to increase your savings rate gradually to at least 20% of your net income.",
        ))
    insights.append(QuickInsight(
        type=InsightType.RECOMMENDATION,
        text="Build an emergency fund that covers 3-6 months of essential expenses.",
    ))

    return insights


def generate_quick_report(form_data: Mapping[str, Any]) -> QuickReport:
    """
    Build the legacy quick report from its single-page form.

    Args:
        form_data: Flat camelCase mapping including ``name`` and ratio inputs

    Returns:
        QuickReport with statement figures, ratios and typed insights
    """
    inputs = QuickReportInput.from_form_data(form_data)

    gross_revenue = section_total(inputs.income)
    deductions = section_total(inputs.pre_tax_deductions)
    net_revenue = round_to_two(gross_revenue - deductions)

    needs = section_total(inputs.needs)
    savings = section_total(inputs.savings)
    wants = section_total(inputs.wants)
    annual = section_total(inputs.annual)

    gross_profit = round_to_two(net_revenue - needs - savings)
    net_profit = round_to_two(gross_profit - wants)
    final_net_income = round_to_two(net_profit - annual)

    r = inputs.ratios
    ratios = FinancialRatios(
        liquidity_ratio=calculate_ratio(r.liquid_assets, r.current_liabilities),
        debt_coverage_ratio=calculate_ratio(r.debt_payments, gross_revenue),
        protection_ratio=calculate_ratio(r.insurance_coverage, r.necessary_expenses),
        # Annualized net income
        return_on_assets=calculate_ratio(final_net_income * 12, r.total_assets),
        return_on_enjoyment=calculate_ratio(r.enjoyment_spend, gross_revenue),
        savings_rate=calculate_ratio(savings, net_revenue),
        housing_to_income_ratio=calculate_ratio(inputs.needs.housing_expenses, net_revenue),
        debt_to_income_ratio=calculate_ratio(r.debt_payments, net_revenue),
    )

    report = QuickReport(
        personal_info=PersonalInfo(name=inputs.name),
        income=build_category(inputs.income, IncomeTotals, "gross_revenue"),
        pre_tax_deductions=build_category(
            inputs.pre_tax_deductions, PreTaxDeductionTotals, "total_pre_tax_deductions"
        ),
        net_revenue=MonetaryAmount.from_amount(net_revenue),
        essential_needs=build_category(
            inputs.needs, QuickNeedsTotals, "total_needs_expenses",
            percent_of_income=percent_of_income(needs, net_revenue),
        ),
        savings_investments=build_category(
            inputs.savings, QuickSavingsTotals, "total_savings_investments",
            percent_of_income=percent_of_income(savings, net_revenue),
        ),
        gross_profit=MonetaryAmount.from_amount(gross_profit),
        discretionary_expenses=build_category(
            inputs.wants, QuickWantsTotals, "total_wants_expenses",
            percent_of_income=percent_of_income(wants, net_revenue),
        ),
        net_profit=MonetaryAmount.from_amount(net_profit),
        annual_expenses=build_category(inputs.annual, QuickAnnualTotals, "total_annual_expenses"),
        final_net_income=MonetaryAmount.from_amount(final_net_income),
        financial_ratios=ratios,
        recommendations=build_recommendations(net_revenue, needs, wants, savings),
        insights=build_quick_insights(final_net_income, net_revenue, ratios, needs, wants, savings),
    )

    logger.info(
        "quick_report_generated",
        net_revenue=str(net_revenue),
        final_net_income=str(final_net_income),
        insights=len(report.insights),
    )
    return report
