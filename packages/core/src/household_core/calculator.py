"""Household income statement calculation.

The household is treated like a small business: income is revenue, payroll
deductions come off the top, essential needs and savings are the cost of
running the household, discretionary spending is a lifestyle dividend and
annual set-asides are the last line before final net income. A second chain
runs in parallel with cost to earn (C2E) subtracted from net revenue.

Calculation order is fixed; each step depends on the ones before it:

    gross revenue - pre-tax deductions           = net revenue
    net revenue - needs - savings                = gross profit
    gross profit - wants                         = net profit
    net profit - annual set-asides               = final net income

    net revenue - C2E                            = adjusted net revenue
    (same chain on adjusted net revenue)         = ... after C2E
"""

from collections.abc import Mapping
from typing import Any, Optional

import structlog

from .aggregators import (
    build_category,
    total_annual,
    total_income,
    total_needs,
    total_pre_tax_deductions,
    total_savings,
    total_wants,
)
from .cost_to_earn import allocate_cost_to_earn
from .insights import InsightContext, generate_c2e_insights, generate_insights
from .models import (
    AnnualExpenseTotals,
    AuditEntry,
    DiscretionaryExpenseTotals,
    EssentialNeedsTotals,
    IncomeTotals,
    MonetaryAmount,
    PreTaxDeductionTotals,
    SavingsInvestmentTotals,
    Statement,
    StatementInput,
)
from .money import percent_of_income, round_to_two
from .recommendations import build_recommendations
from .value_chain import identify_value_chain_opportunities

logger = structlog.get_logger()

USER_INPUT = "User input"
STATEMENT_RULE = "Income statement"
BUDGET_RULE = "50/30/20 rule"


class StatementCalculator:
    """
    Build a complete income statement from typed form input.

    Every derived figure is recorded as an audit step and logged, so a
    statement can be explained line by line. The audit log is reset on each
    call to ``calculate``; create one calculator per request.
    """

    def __init__(self) -> None:
        self._audit_log: list[AuditEntry] = []

    @property
    def audit_log(self) -> list[AuditEntry]:
        """Steps recorded by the most recent ``calculate`` call."""
        return list(self._audit_log)

    def _log_step(
        self,
        step: str,
        input_value: str,
        output_value: str,
        source: str,
        notes: Optional[str] = None
    ) -> None:
        """Add an entry to the audit log."""
        entry = AuditEntry(
            step=step,
            input_value=input_value,
            output_value=output_value,
            source=source,
            notes=notes,
        )
        self._audit_log.append(entry)
        logger.info(
            "calculation_step",
            step=step,
            input=input_value,
            output=output_value,
            source=source,
        )

    def calculate(self, inputs: StatementInput) -> Statement:
        """
        Calculate the income statement, recommendations and insights.

        Args:
            inputs: Parsed form input with its cost-to-earn settings

        Returns:
            Statement ready to be serialized and stored
        """
        self._audit_log = []  # Reset audit log

        # Step 1-3: Revenue
        gross_revenue = total_income(inputs)
        self._log_step(
            step="gross_revenue",
            input_value="sum of income sources",
            output_value=str(gross_revenue),
            source=USER_INPUT,
        )

        deductions = total_pre_tax_deductions(inputs)
        self._log_step(
            step="pre_tax_deductions",
            input_value="sum of payroll deductions",
            output_value=str(deductions),
            source=USER_INPUT,
        )

        net_revenue = round_to_two(gross_revenue - deductions)
        self._log_step(
            step="net_revenue",
            input_value=f"{gross_revenue} - {deductions}",
            output_value=str(net_revenue),
            source=STATEMENT_RULE,
        )

        # Step 4: Category totals (annual amounts are already monthly)
        needs = total_needs(inputs)
        savings = total_savings(inputs)
        wants = total_wants(inputs)
        annual = total_annual(inputs)
        self._log_step(
            step="category_totals",
            input_value="needs, savings, wants, annual",
            output_value=f"{needs}, {savings}, {wants}, {annual}",
            source=USER_INPUT,
            notes="Annual expenses are entered as a monthly set-aside",
        )

        # Step 5-7: Profit chain
        gross_profit = round_to_two(net_revenue - needs - savings)
        net_profit = round_to_two(gross_profit - wants)
        final_net_income = round_to_two(net_profit - annual)
        self._log_step(
            step="final_net_income",
            input_value=f"{net_revenue} - {needs} - {savings} - {wants} - {annual}",
            output_value=str(final_net_income),
            source=STATEMENT_RULE,
            notes=f"gross_profit={gross_profit}, net_profit={net_profit}",
        )

        # Step 8: Cost-to-earn adjusted chain
        allocation = allocate_cost_to_earn(inputs, net_revenue)
        adjusted_net_revenue = round_to_two(net_revenue - allocation.total)
        gross_profit_after_c2e = round_to_two(adjusted_net_revenue - needs - savings)
        net_profit_after_c2e = round_to_two(gross_profit_after_c2e - wants)
        final_net_income_after_c2e = round_to_two(net_profit_after_c2e - annual)
        self._log_step(
            step="adjusted_net_revenue",
            input_value=f"{net_revenue} - {allocation.total}",
            output_value=str(adjusted_net_revenue),
            source="Cost to earn",
            notes=f"C2E is {allocation.percent_of_income} of net revenue",
        )
        self._log_step(
            step="final_net_income_after_c2e",
            input_value=f"{adjusted_net_revenue} - {needs} - {savings} - {wants} - {annual}",
            output_value=str(final_net_income_after_c2e),
            source=STATEMENT_RULE,
        )

        # Recommendations on both revenue figures
        recommendations = build_recommendations(net_revenue, needs, wants, savings)
        recommendations_after_c2e = build_recommendations(
            adjusted_net_revenue, needs, wants, savings
        )
        self._log_step(
            step="recommendations",
            input_value=str(net_revenue),
            output_value=(
                f"needs={recommendations.needs.status.value}, "
                f"wants={recommendations.wants.status.value}, "
                f"savings={recommendations.savings.status.value}"
            ),
            source=BUDGET_RULE,
        )

        # Insights: main batch, then the C2E-adjusted batch
        context = InsightContext.from_inputs(
            inputs,
            gross_revenue=gross_revenue,
            net_revenue=net_revenue,
            needs=needs,
            wants=wants,
            savings=savings,
            annual=annual,
            final_net_income=final_net_income,
            total_c2e=allocation.total,
        )
        insights = generate_insights(context) + generate_c2e_insights(context)
        self._log_step(
            step="insights",
            input_value="statement figures",
            output_value=f"{len(insights)} insights",
            source="Insight rules",
        )

        statement = Statement(
            income=build_category(inputs.income, IncomeTotals, "gross_revenue"),
            pre_tax_deductions=build_category(
                inputs.pre_tax_deductions, PreTaxDeductionTotals, "total_pre_tax_deductions"
            ),
            net_revenue=MonetaryAmount.from_amount(net_revenue),
            cost_to_earn=allocation.to_totals(),
            adjusted_net_revenue=MonetaryAmount.from_amount(adjusted_net_revenue),
            essential_needs=build_category(
                inputs.essential_needs,
                EssentialNeedsTotals,
                "total_needs_expenses",
                percent_of_income=percent_of_income(needs, net_revenue),
            ),
            savings_investments=build_category(
                inputs.savings_investments,
                SavingsInvestmentTotals,
                "total_savings_investments",
                percent_of_income=percent_of_income(savings, net_revenue),
            ),
            gross_profit=MonetaryAmount.from_amount(gross_profit),
            gross_profit_after_c2e=MonetaryAmount.from_amount(gross_profit_after_c2e),
            discretionary_expenses=build_category(
                inputs.discretionary_expenses,
                DiscretionaryExpenseTotals,
                "total_wants_expenses",
                percent_of_income=percent_of_income(wants, net_revenue),
            ),
            net_profit=MonetaryAmount.from_amount(net_profit),
            net_profit_after_c2e=MonetaryAmount.from_amount(net_profit_after_c2e),
            annual_expenses=build_category(
                inputs.annual_expenses, AnnualExpenseTotals, "total_annual_expenses"
            ),
            final_net_income=MonetaryAmount.from_amount(final_net_income),
            final_net_income_after_c2e=MonetaryAmount.from_amount(final_net_income_after_c2e),
            recommendations=recommendations,
            recommendations_after_c2e=recommendations_after_c2e,
            value_chain_opportunities=identify_value_chain_opportunities(inputs),
            insights=insights,
        )

        logger.info(
            "statement_calculated",
            gross_revenue=str(gross_revenue),
            net_revenue=str(net_revenue),
            final_net_income=str(final_net_income),
            total_c2e=str(allocation.total),
            insights=len(insights),
        )

        return statement


def compute_statement(
    form_data: Mapping[str, Any],
    cost_to_earn_settings: Optional[Mapping[str, Any]] = None,
) -> Statement:
    """
    Compute a statement straight from submitted form data.

    Args:
        form_data: Flat camelCase form mapping; values may be strings, numbers or blank
        cost_to_earn_settings: Per-field C2E toggles (defaults to ``form_data["costToEarnSettings"]``)

    Returns:
        The computed Statement. ``form_data`` is left untouched.
    """
    inputs = StatementInput.from_form_data(form_data, cost_to_earn_settings)
    return StatementCalculator().calculate(inputs)
