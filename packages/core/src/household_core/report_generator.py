"""Report generation for household income statements.

Renders a computed Statement as plain text, Markdown or HTML. The HTML form
is the body of the emailed report.
"""

import html
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

import structlog

from .config import ReportConfig, ReportFormat
from .exceptions import ConfigurationError
from .models import MonetaryAmount, Recommendation, Statement

logger = structlog.get_logger()

DISCLAIMER = (
    "This statement is for informational purposes only and does not "
    "constitute financial advice."
)


@dataclass
class ReportSection:
    """A section of the report."""
    title: str
    content: str


def _row(label: str, amount: MonetaryAmount, width: int = 34) -> str:
    return f"{label:<{width}} {amount.formatted:>14}"


class StatementReportGenerator:
    """
    Generate readable reports from a household income statement.

    Reports include:
    - Header
    - Income summary (revenue through final net income)
    - Cost to earn and the adjusted chain
    - Budget allocation against 50/30/20
    - Value chain
    - Insights
    """

    def __init__(self, config: Optional[ReportConfig] = None):
        self.config = config or ReportConfig()

    def generate(
        self,
        statement: Statement,
        name: Optional[str] = None,
        format: Optional[str] = None,
    ) -> str:
        """
        Generate a complete statement report.

        Args:
            statement: The computed statement
            name: Who the report is prepared for
            format: Output format ("text", "markdown", "html"); defaults to config

        Returns:
            Formatted report string

        Raises:
            ConfigurationError: If the format is not supported
        """
        try:
            report_format = ReportFormat(format or self.config.default_format)
        except ValueError as e:
            raise ConfigurationError(
                f"Unsupported report format: {format}",
                config_key="format",
                expected="text, markdown or html",
                actual=format,
            ) from e

        sections: list[ReportSection] = []

        self._add_header(sections, name)
        self._add_income_summary(sections, statement)
        self._add_cost_to_earn(sections, statement)
        self._add_budget_allocation(sections, statement)
        self._add_value_chain(sections, statement)
        self._add_insights(sections, statement)

        logger.debug("report_generated", format=report_format.value, sections=len(sections))

        if report_format == ReportFormat.MARKDOWN:
            return self._format_markdown(sections)
        elif report_format == ReportFormat.HTML:
            return self._format_html(sections)
        else:
            return self._format_text(sections)

    def _add_header(self, sections: list[ReportSection], name: Optional[str]) -> None:
        """Add report header."""
        title = self.config.site_name.upper()
        lines = [title, "=" * len(title), ""]
        if name:
            lines.append(f"Prepared for: {name}")
        lines.append(f"Report Date: {datetime.now().strftime('%B %d, %Y')}")

        sections.append(ReportSection(title="Header", content="\n".join(lines)))

    def _add_income_summary(self, sections: list[ReportSection], s: Statement) -> None:
        """Add the income statement chain."""
        lines = [
            _row("Gross Revenue", s.income.gross_revenue),
            _row("Less: Pre-Tax Deductions", s.pre_tax_deductions.total_pre_tax_deductions),
            "-" * 49,
            _row("Net Revenue", s.net_revenue),
            _row("Less: Essential Needs", s.essential_needs.total_needs_expenses),
            _row("Less: Savings & Investments", s.savings_investments.total_savings_investments),
            "-" * 49,
            _row("Gross Profit", s.gross_profit),
            _row("Less: Lifestyle Dividends", s.discretionary_expenses.total_wants_expenses),
            "-" * 49,
            _row("Net Profit", s.net_profit),
            _row("Less: Annual Expenses (monthly)", s.annual_expenses.total_annual_expenses),
            "=" * 49,
            _row("FINAL NET INCOME", s.final_net_income),
        ]
        sections.append(ReportSection(title="Income Statement", content="\n".join(lines)))

    def _add_cost_to_earn(self, sections: list[ReportSection], s: Statement) -> None:
        """Add cost to earn and the adjusted chain."""
        c2e = s.cost_to_earn
        lines = [
            _row("Total Cost to Earn", c2e.total_c2e),
            f"{'Share of Net Revenue':<34} {c2e.percent_of_income:>14}",
            "",
            _row("Adjusted Net Revenue", s.adjusted_net_revenue),
            _row("Gross Profit after C2E", s.gross_profit_after_c2e),
            _row("Net Profit after C2E", s.net_profit_after_c2e),
            _row("Final Net Income after C2E", s.final_net_income_after_c2e),
        ]
        sections.append(ReportSection(title="Cost to Earn", content="\n".join(lines)))

    def _add_budget_allocation(self, sections: list[ReportSection], s: Statement) -> None:
        """Add 50/30/20 comparison."""
        lines = [
            f"{'Bucket':<14} {'Recommended':>14} {'Actual':>14} {'Difference':>14}  Status",
            "-" * 66,
        ]
        buckets: list[tuple[str, Recommendation]] = [
            ("Needs (50%)", s.recommendations.needs),
            ("Wants (30%)", s.recommendations.wants),
            ("Savings (20%)", s.recommendations.savings),
        ]
        for label, rec in buckets:
            lines.append(
                f"{label:<14} {rec.recommended:>14} {rec.actual:>14} "
                f"{rec.difference:>14}  {rec.status.value.upper()}"
            )

        lines.append("")
        lines.append(f"Needs are {s.essential_needs.percent_of_income} of net revenue, "
                     f"wants {s.discretionary_expenses.percent_of_income}, "
                     f"savings {s.savings_investments.percent_of_income}.")

        sections.append(ReportSection(title="Budget Allocation", content="\n".join(lines)))

    def _add_value_chain(self, sections: list[ReportSection], s: Statement) -> None:
        """Add spending grouped by core value."""
        if not s.value_chain_opportunities:
            return

        lines = []
        for opportunity in s.value_chain_opportunities:
            lines.append(_row(opportunity.name, opportunity.spending))
            for rec in opportunity.recommendations:
                lines.append(f"  • {rec}")

        sections.append(ReportSection(title="Value Chain", content="\n".join(lines)))

    def _add_insights(self, sections: list[ReportSection], s: Statement) -> None:
        """Add narrative insights."""
        if s.insights:
            lines = [f"{i}. {insight}" for i, insight in enumerate(s.insights, 1)]
        else:
            lines = ["No specific insights at this time."]

        sections.append(ReportSection(title="Insights", content="\n".join(lines)))

    def _format_text(self, sections: list[ReportSection]) -> str:
        """Format report as plain text."""
        output = []

        for section in sections:
            if section.title != "Header":
                output.append("")
                output.append("=" * 60)
                output.append(section.title.upper())
                output.append("=" * 60)

            output.append(section.content)

        output.append("")
        output.append(DISCLAIMER)

        return "\n".join(output)

    def _format_markdown(self, sections: list[ReportSection]) -> str:
        """Format report as Markdown."""
        output = []

        for section in sections:
            if section.title == "Header":
                output.append(section.content)
            else:
                output.append(f"\n## {section.title}\n")
                output.append("```")
                output.append(section.content)
                output.append("```")

        output.append("\n---\n")
        output.append(f"*{DISCLAIMER}*")

        return "\n".join(output)

    def _format_html(self, sections: list[ReportSection]) -> str:
        """Format report as HTML (email body)."""
        lines = [
            "<!DOCTYPE html>",
            "<html>",
            "<head>",
            '<meta charset="UTF-8">',
            f"<title>{html.escape(self.config.site_name)}</title>",
            "<style>",
            "body { font-family: 'Segoe UI', Tahoma, sans-serif; margin: 40px; }",
            "h2 { color: #555; border-bottom: 2px solid #333; padding-bottom: 5px; }",
            "pre { background: #f5f5f5; padding: 15px; overflow-x: auto; }",
            ".disclaimer { font-size: 0.9em; color: #666; margin-top: 30px; }",
            "</style>",
            "</head>",
            "<body>",
        ]

        for section in sections:
            if section.title != "Header":
                lines.append(f"<h2>{html.escape(section.title)}</h2>")
            lines.append(f"<pre>{html.escape(section.content)}</pre>")

        lines.append(f'<div class="disclaimer"><p>{DISCLAIMER}</p></div>')
        lines.append("</body>")
        lines.append("</html>")

        return "\n".join(lines)
