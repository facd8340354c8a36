"""Statement service: the form-submission and history entry points.

Ties the pure calculation engine to its collaborators. A submission is
computed, then either stored as a new statement or used to fully replace an
existing one (edit mode). History reads are paginated newest first.
"""

from collections.abc import Mapping
from typing import Any, Optional

import structlog
from pydantic.alias_generators import to_camel

from .calculator import StatementCalculator
from .config import HouseholdConfig
from .cost_to_earn import TOGGLE_LINES
from .exceptions import ConfigurationError, StatementNotFoundError, ValidationError
from .models import CostToEarnInput, Statement, StatementInput
from .money import HUNDRED, round_to_two
from .notifications import ReportDelivery, ReportNotifier, TokenBucketRateLimiter
from .report_generator import StatementReportGenerator
from .storage import StatementPage, StatementRecord, StatementRepository

logger = structlog.get_logger()

# Statement sections whose line items map straight back to form fields
_FORM_SECTIONS = (
    "income",
    "pre_tax_deductions",
    "essential_needs",
    "savings_investments",
    "discretionary_expenses",
    "annual_expenses",
)


def _require_user(user_id: str) -> str:
    if not user_id or not str(user_id).strip():
        raise ValidationError(
            "User id is required",
            field="user_id",
            constraint="Must not be blank",
        )
    return str(user_id).strip()


class StatementService:
    """
    Compute, store, read and deliver household statements.

    Example:
        >>> service = StatementService(InMemoryStatementRepository())
        >>> statement_id = service.submit("user-1", {"primaryIncome": "5000"})
        >>> service.get_statement(statement_id, "user-1").statement.net_revenue.formatted
        '$5,000.00'
    """

    def __init__(
        self,
        repository: StatementRepository,
        notifier: Optional[ReportNotifier] = None,
        config: Optional[HouseholdConfig] = None,
    ):
        self.repository = repository
        self.config = config or HouseholdConfig()
        self.delivery: Optional[ReportDelivery] = None
        if notifier is not None:
            self.delivery = ReportDelivery(
                notifier,
                generator=StatementReportGenerator(self.config.report),
                rate_limiter=TokenBucketRateLimiter.from_config(self.config.rate_limit),
            )

    def compute(
        self,
        form_data: Mapping[str, Any],
        cost_to_earn_settings: Optional[Mapping[str, Any]] = None,
    ) -> Statement:
        """Compute a statement without storing it (preview)."""
        inputs = StatementInput.from_form_data(form_data, cost_to_earn_settings)
        return StatementCalculator().calculate(inputs)

    def submit(
        self,
        user_id: str,
        form_data: Mapping[str, Any],
        statement_id: Optional[str] = None,
        cost_to_earn_settings: Optional[Mapping[str, Any]] = None,
    ) -> str:
        """
        Compute a statement and store it.

        Args:
            user_id: Owner of the statement
            form_data: Flat camelCase form mapping
            statement_id: Existing statement to replace (edit mode)
            cost_to_earn_settings: Per-field C2E toggles

        Returns:
            The statement id

        Raises:
            ValidationError: If user_id is blank
            StatementNotFoundError: If editing a statement the user does not own
        """
        user_id = _require_user(user_id)
        statement = self.compute(form_data, cost_to_earn_settings)

        if statement_id:
            stored_id = self.repository.update(statement_id, user_id, statement)
        else:
            stored_id = self.repository.create(user_id, statement)

        logger.info(
            "statement_submitted",
            statement_id=stored_id,
            user_id=user_id,
            mode="edit" if statement_id else "create",
        )
        return stored_id

    def get_statement(self, statement_id: str, user_id: str) -> StatementRecord:
        """Fetch one statement; raises StatementNotFoundError when missing."""
        user_id = _require_user(user_id)
        record = self.repository.get_by_id(statement_id, user_id)
        if record is None:
            raise StatementNotFoundError(
                f"Statement {statement_id} not found",
                operation="get",
                statement_id=statement_id,
            )
        return record

    def list_statements(
        self,
        user_id: str,
        page: int = 1,
        limit: Optional[int] = None,
    ) -> StatementPage:
        """One page of the user's history, newest first."""
        user_id = _require_user(user_id)
        limit = min(limit or self.config.default_page_size, self.config.max_page_size)
        items, total_count = self.repository.list(user_id, page=page, limit=limit)
        return StatementPage(items=items, total_count=total_count, page=page, limit=limit)

    def delete_statement(self, statement_id: str, user_id: str) -> None:
        user_id = _require_user(user_id)
        self.repository.delete(statement_id, user_id)

    @staticmethod
    def to_form_data(statement: Statement) -> dict[str, Any]:
        """
        Rebuild the flat form mapping from a stored statement.

        Used to prefill the form in edit mode. Section totals and percentages
        are skipped; only line items that correspond to form fields are kept.
        Toggled cost-to-earn lines come back under ``costToEarnSettings``
        with the percentage that reproduces their stored amount.
        """
        form_data: dict[str, Any] = {}
        for section_name in _FORM_SECTIONS:
            section = getattr(statement, section_name)
            dumped = section.model_dump(by_alias=True)
            for key, item in dumped.items():
                if not isinstance(item, dict) or key.startswith("total") or key == "grossRevenue":
                    continue
                form_data[key] = str(round_to_two(item["value"]))

        c2e = statement.cost_to_earn.model_dump(by_alias=True)
        for key in CostToEarnInput.model_fields:
            alias = to_camel(key)
            form_data[alias] = str(round_to_two(c2e[alias]["value"]))

        inputs = StatementInput.from_form_data(form_data)
        settings: dict[str, dict[str, Any]] = {}
        for line in TOGGLE_LINES:
            amount = round_to_two(line.amount(inputs))
            allocated = round_to_two(getattr(statement.cost_to_earn, line.output_field).value)
            if amount > 0 and allocated > 0:
                settings[to_camel(line.setting_field)] = {
                    "isC2E": True,
                    "percentage": str(allocated / amount * HUNDRED),
                }
        form_data["costToEarnSettings"] = settings
        return form_data

    def send_report(
        self,
        statement_id: str,
        user_id: str,
        name: str,
        email: str,
        format: Optional[str] = None,
    ) -> bool:
        """
        Render a stored statement and send it to ``email``.

        Returns:
            True if the notifier accepted the report

        Raises:
            StatementNotFoundError: If the statement does not exist
            ValidationError: If name or email is invalid
            RateLimitError: If the recipient is over the delivery limit
            ConfigurationError: If the service was built without a notifier
        """
        if self.delivery is None:
            raise ConfigurationError(
                "Report delivery is not configured",
                config_key="notifier",
                expected="a ReportNotifier",
            )
        record = self.get_statement(statement_id, user_id)
        return self.delivery.deliver(record.statement, name=name, email=email, format=format)

