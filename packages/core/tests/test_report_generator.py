"""Tests for statement report rendering."""

from concurrent.futures import ThreadPoolExecutor

import pytest

from household_core import compute_statement
from household_core.config import ReportConfig, ReportFormat
from household_core.exceptions import ConfigurationError
from household_core.report_generator import DISCLAIMER, StatementReportGenerator


@pytest.fixture
def statement(household_form, c2e_settings):
    return compute_statement(household_form, c2e_settings)


@pytest.fixture
def generator() -> StatementReportGenerator:
    return StatementReportGenerator(ReportConfig(default_format=ReportFormat.TEXT))


class TestStatementReportGenerator:
    """Tests for StatementReportGenerator."""

    def test_text_report(self, generator, statement):
        """The text report walks the statement chain."""
        report = generator.generate(statement, name="Ada")

        assert report.startswith("HOUSEHOLD FINANCIAL STATEMENT")
        assert "Prepared for: Ada" in report
        assert "FINAL NET INCOME" in report
        assert "$950.00" in report
        assert "Adjusted Net Revenue" in report
        assert "$4,450.00" in report
        assert report.rstrip().endswith(DISCLAIMER)

    def test_budget_allocation(self, generator, statement):
        """Each 50/30/20 bucket shows its status."""
        report = generator.generate(statement)
        assert "BUDGET ALLOCATION" in report
        assert "HIGH" in report
        assert "LOW" in report
        assert "Needs are 52.0% of net revenue" in report

    def test_insights_are_numbered(self, generator, statement):
        """Insights are listed in order with numbers."""
        report = generator.generate(statement)
        assert f"1. {statement.insights[0]}" in report
        assert f"{len(statement.insights)}. {statement.insights[-1]}" in report

    def test_value_chain(self, generator, statement):
        """Value categories appear with their spending."""
        report = generator.generate(statement)
        assert "Security & Peace of Mind" in report
        assert "Emergency funds provide security against unexpected events" in report

    def test_markdown_report(self, generator, statement):
        """Markdown uses headings and fenced blocks."""
        report = generator.generate(statement, format="markdown")
        assert "## Income Statement" in report
        assert "```" in report
        assert f"*{DISCLAIMER}*" in report

    def test_html_report_escapes_content(self, statement):
        """HTML output escapes text taken from the statement."""
        report = StatementReportGenerator().generate(statement, name="<Ada & Bob>")

        assert report.startswith("<!DOCTYPE html>")
        assert "&lt;Ada &amp; Bob&gt;" in report
        assert "<Ada & Bob>" not in report
        assert "Security &amp; Peace of Mind" in report

    def test_default_format_from_config(self, statement):
        """The configured format applies when none is requested."""
        generator = StatementReportGenerator(ReportConfig(default_format=ReportFormat.MARKDOWN))
        assert "## Insights" in generator.generate(statement)

    def test_custom_site_name(self, statement):
        """The configured site name heads the report."""
        generator = StatementReportGenerator(
            ReportConfig(default_format=ReportFormat.TEXT, site_name="Family Books")
        )
        assert generator.generate(statement).startswith("FAMILY BOOKS")

    def test_unsupported_format(self, generator, statement):
        """Unknown formats raise ConfigurationError."""
        with pytest.raises(ConfigurationError) as exc_info:
            generator.generate(statement, format="pdf")
        assert exc_info.value.actual == "pdf"

    def test_repeated_generation_does_not_accumulate(self, generator, statement):
        """Each call starts from an empty set of sections."""
        first = generator.generate(statement, name="Ada")
        second = generator.generate(statement, name="Ada")
        assert first.count("FINAL NET INCOME") == second.count("FINAL NET INCOME") == 1

    def test_concurrent_reports_stay_separate(self, generator, statement):
        """A shared generator renders each caller's own statement."""
        other = compute_statement({"primaryIncome": "1234"})

        def render(i: int) -> tuple[int, str]:
            if i % 2:
                return i, generator.generate(other, name="Bob")
            return i, generator.generate(statement, name="Ada")

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(render, range(200)))

        for i, report in results:
            if i % 2:
                assert "Prepared for: Bob" in report
                assert "Ada" not in report
                assert "$1,234.00" in report
            else:
                assert "Prepared for: Ada" in report
                assert "Bob" not in report
            assert report.count("FINAL NET INCOME") == 1
