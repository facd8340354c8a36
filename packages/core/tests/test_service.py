"""Tests for the statement service."""

from decimal import Decimal

import pytest

from household_core import InMemoryStatementRepository, StatementService, compute_statement
from household_core.config import HouseholdConfig, RateLimitConfig
from household_core.exceptions import (
    ConfigurationError,
    RateLimitError,
    StatementNotFoundError,
    ValidationError,
)


class RecordingNotifier:
    """Notifier that records every report it is given."""

    def __init__(self):
        self.sent: list[tuple[str, str, str]] = []

    def send(self, name: str, email: str, rendered_report: str) -> bool:
        self.sent.append((name, email, rendered_report))
        return True


@pytest.fixture
def repository() -> InMemoryStatementRepository:
    return InMemoryStatementRepository()


@pytest.fixture
def service(repository) -> StatementService:
    return StatementService(repository)


class TestSubmit:
    """Tests for StatementService.submit."""

    def test_creates_statement(self, service, household_form):
        """A new submission is computed and stored."""
        statement_id = service.submit("user-1", household_form)
        record = service.get_statement(statement_id, "user-1")
        assert record.statement.final_net_income.formatted == "$950.00"

    def test_edit_replaces_statement(self, service, repository, household_form, c2e_settings):
        """Submitting with an id fully replaces that statement."""
        statement_id = service.submit("user-1", household_form)
        edited_id = service.submit(
            "user-1", household_form, statement_id=statement_id, cost_to_earn_settings=c2e_settings
        )

        assert edited_id == statement_id
        assert len(repository) == 1
        record = service.get_statement(statement_id, "user-1")
        assert record.statement.cost_to_earn.total_c2e.value == 550.0

    def test_edit_of_foreign_statement_fails(self, service, household_form):
        """A user cannot edit someone else's statement."""
        statement_id = service.submit("user-1", household_form)
        with pytest.raises(StatementNotFoundError):
            service.submit("user-2", household_form, statement_id=statement_id)

    @pytest.mark.parametrize("user_id", ["", "   "])
    def test_blank_user_rejected(self, service, household_form, user_id):
        """A user id is required."""
        with pytest.raises(ValidationError):
            service.submit(user_id, household_form)

    def test_compute_does_not_store(self, service, repository, household_form):
        """Previewing a statement leaves the store untouched."""
        statement = service.compute(household_form)
        assert statement.net_revenue.value == 5000.0
        assert len(repository) == 0


class TestHistory:
    """Tests for reading and deleting stored statements."""

    def test_get_missing_raises(self, service):
        """Missing statements raise StatementNotFoundError."""
        with pytest.raises(StatementNotFoundError) as exc_info:
            service.get_statement("missing", "user-1")
        assert exc_info.value.operation == "get"

    def test_list_statements(self, service, household_form):
        """History is paginated newest first."""
        ids = [service.submit("user-1", household_form) for _ in range(3)]
        page = service.list_statements("user-1", page=1, limit=2)

        assert page.total_count == 3
        assert page.total_pages == 2
        assert [r.id for r in page.items] == [ids[2], ids[1]]

    def test_list_uses_default_page_size(self, repository, household_form):
        """Without a limit the configured default applies."""
        service = StatementService(repository, config=HouseholdConfig(default_page_size=2))
        for _ in range(3):
            service.submit("user-1", household_form)
        assert service.list_statements("user-1").limit == 2

    def test_list_caps_page_size(self, repository):
        """Requested limits are capped at max_page_size."""
        service = StatementService(repository, config=HouseholdConfig(max_page_size=5))
        assert service.list_statements("user-1", limit=500).limit == 5

    def test_delete(self, service, household_form):
        """Deleted statements can no longer be read."""
        statement_id = service.submit("user-1", household_form)
        service.delete_statement(statement_id, "user-1")
        with pytest.raises(StatementNotFoundError):
            service.get_statement(statement_id, "user-1")


class TestToFormData:
    """Tests for rebuilding the form from a stored statement."""

    def test_round_trips_form_values(self, household_form):
        """Recomputing from the rebuilt form gives the same statement."""
        statement = compute_statement(household_form)
        form = StatementService.to_form_data(statement)

        assert form["primaryIncome"] == "5000.00"
        assert form["commutingTransportation"] == "100.00"
        assert compute_statement(form) == statement

    def test_rebuilds_cost_to_earn_settings(self, household_form, c2e_settings):
        """Toggled lines come back with the percentage that produced them."""
        form = StatementService.to_form_data(compute_statement(household_form, c2e_settings))
        settings = form["costToEarnSettings"]

        assert set(settings) == {"housingExpenses", "transportation"}
        assert settings["housingExpenses"]["isC2E"] is True
        assert Decimal(settings["housingExpenses"]["percentage"]) == 20
        assert Decimal(settings["transportation"]["percentage"]) == 50

    def test_resubmitting_prefill_keeps_toggles(self, service, household_form, c2e_settings):
        """Editing a statement without touching toggles leaves cost to earn intact."""
        statement_id = service.submit("user-1", household_form, cost_to_earn_settings=c2e_settings)
        original = service.get_statement(statement_id, "user-1").statement

        prefill = StatementService.to_form_data(original)
        service.submit("user-1", prefill, statement_id=statement_id)

        edited = service.get_statement(statement_id, "user-1").statement
        assert edited.cost_to_earn.total_c2e.formatted == "$550.00"
        assert edited == original

    def test_uneven_percentage_round_trips(self):
        """A toggle whose share is not a whole percent reproduces the same cents."""
        statement = compute_statement(
            {"utilities": "333.33"},
            {"utilities": {"isC2E": True, "percentage": "33.3"}},
        )
        rebuilt = compute_statement(StatementService.to_form_data(statement))
        assert rebuilt.cost_to_earn.utilities_c2e == statement.cost_to_earn.utilities_c2e

    def test_skips_totals(self, household_form):
        """Totals are derived, not form fields."""
        form = StatementService.to_form_data(compute_statement(household_form))
        assert "grossRevenue" not in form
        assert "totalNeedsExpenses" not in form
        assert "percentOfIncome" not in form
        assert "totalC2E" not in form
        assert "housingC2E" not in form


class TestSendReport:
    """Tests for report delivery through the service."""

    def test_sends_stored_statement(self, repository, household_form):
        """A stored statement is rendered and handed to the notifier."""
        notifier = RecordingNotifier()
        service = StatementService(repository, notifier=notifier)
        statement_id = service.submit("user-1", household_form)

        assert service.send_report(statement_id, "user-1", "Ada", "ada@example.com") is True
        assert "Prepared for: Ada" in notifier.sent[0][2]

    def test_without_notifier(self, service, household_form):
        """Sending requires a configured notifier."""
        statement_id = service.submit("user-1", household_form)
        with pytest.raises(ConfigurationError):
            service.send_report(statement_id, "user-1", "Ada", "ada@example.com")

    def test_rate_limit_from_config(self, repository, household_form):
        """The configured bucket capacity limits deliveries."""
        config = HouseholdConfig(rate_limit=RateLimitConfig(bucket_capacity=1))
        service = StatementService(repository, notifier=RecordingNotifier(), config=config)
        statement_id = service.submit("user-1", household_form)

        service.send_report(statement_id, "user-1", "Ada", "ada@example.com")
        with pytest.raises(RateLimitError):
            service.send_report(statement_id, "user-1", "Ada", "ada@example.com")

    def test_missing_statement(self, repository):
        """Reports can only be sent for stored statements."""
        service = StatementService(repository, notifier=RecordingNotifier())
        with pytest.raises(StatementNotFoundError):
            service.send_report("missing", "user-1", "Ada", "ada@example.com")
