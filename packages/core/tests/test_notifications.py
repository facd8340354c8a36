"""Tests for report delivery and rate limiting."""

import pytest

from household_core import compute_statement
from household_core.config import RateLimitConfig
from household_core.exceptions import NotificationError, RateLimitError, ValidationError
from household_core.notifications import (
    ReportDelivery,
    ReportNotifier,
    TokenBucketRateLimiter,
)


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingNotifier:
    """Notifier that records what it was asked to send."""

    def __init__(self, result: bool = True, error: Exception = None):
        self.result = result
        self.error = error
        self.sent: list[tuple[str, str, str]] = []

    def send(self, name: str, email: str, rendered_report: str) -> bool:
        if self.error is not None:
            raise self.error
        self.sent.append((name, email, rendered_report))
        return self.result


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def statement(household_form):
    return compute_statement(household_form)


class TestTokenBucketRateLimiter:
    """Tests for TokenBucketRateLimiter."""

    def test_allows_capacity_requests(self, clock):
        """A fresh bucket allows exactly ``capacity`` requests."""
        limiter = TokenBucketRateLimiter(capacity=5, refill_seconds=60, clock=clock)
        assert all(limiter.acquire("a@b.co") for _ in range(5))
        assert limiter.acquire("a@b.co") is False

    def test_refills_one_token_per_period(self, clock):
        """One token comes back every refill period."""
        limiter = TokenBucketRateLimiter(capacity=2, refill_seconds=60, clock=clock)
        limiter.acquire("a@b.co")
        limiter.acquire("a@b.co")

        clock.advance(59)
        assert limiter.acquire("a@b.co") is False
        clock.advance(1)
        assert limiter.acquire("a@b.co") is True
        assert limiter.acquire("a@b.co") is False

    def test_refill_capped_at_capacity(self, clock):
        """Idle time never stores more than capacity."""
        limiter = TokenBucketRateLimiter(capacity=2, refill_seconds=60, clock=clock)
        limiter.acquire("a@b.co")
        clock.advance(3600)
        assert limiter.acquire("a@b.co") is True
        assert limiter.acquire("a@b.co") is True
        assert limiter.acquire("a@b.co") is False

    def test_identifiers_are_independent(self, clock):
        """Each identifier has its own bucket."""
        limiter = TokenBucketRateLimiter(capacity=1, refill_seconds=60, clock=clock)
        assert limiter.acquire("a@b.co") is True
        assert limiter.acquire("c@d.co") is True
        assert limiter.acquire("a@b.co") is False

    def test_retry_after(self, clock):
        """retry_after counts down to the next refill."""
        limiter = TokenBucketRateLimiter(capacity=1, refill_seconds=60, clock=clock)
        assert limiter.retry_after("a@b.co") == 0.0
        limiter.acquire("a@b.co")
        clock.advance(10)
        assert limiter.acquire("a@b.co") is False
        assert limiter.retry_after("a@b.co") == pytest.approx(50.0)

    def test_prune_drops_idle_buckets(self, clock):
        """Buckets idle for more than ten periods are dropped."""
        limiter = TokenBucketRateLimiter(capacity=1, refill_seconds=60, clock=clock)
        limiter.acquire("a@b.co")
        clock.advance(601)
        limiter.acquire("c@d.co")
        assert limiter.prune() == 1
        assert limiter.prune(idle_seconds=0) == 0

    def test_acquire_sweeps_idle_buckets(self, clock):
        """Idle buckets are dropped every ``prune_interval`` requests."""
        limiter = TokenBucketRateLimiter(
            capacity=1, refill_seconds=60, clock=clock, prune_interval=2
        )
        limiter.acquire("a@b.co")
        clock.advance(601)
        limiter.acquire("c@d.co")

        assert len(limiter) == 1
        assert limiter.prune(idle_seconds=0) == 0

    def test_sweep_keeps_buckets_that_are_still_refilling(self, clock):
        """Large buckets survive until they could have refilled completely."""
        limiter = TokenBucketRateLimiter(
            capacity=20, refill_seconds=60, clock=clock, prune_interval=1
        )
        assert limiter.default_idle_seconds == 1200
        for _ in range(20):
            limiter.acquire("a@b.co")
        clock.advance(601)
        limiter.acquire("c@d.co")
        assert len(limiter) == 2

    def test_many_recipients_do_not_accumulate(self, clock):
        """A long-running limiter only keeps recently active recipients."""
        limiter = TokenBucketRateLimiter(
            capacity=1, refill_seconds=1, clock=clock, prune_interval=10
        )
        for i in range(1000):
            limiter.acquire(f"user{i}@example.com")
            clock.advance(1)
        assert len(limiter) <= 20

    def test_from_config(self, clock):
        """Capacity, refill and sweep interval come from RateLimitConfig."""
        limiter = TokenBucketRateLimiter.from_config(
            RateLimitConfig(bucket_capacity=3, refill_seconds=10, prune_interval=7), clock
        )
        assert limiter.capacity == 3
        assert limiter.refill_seconds == 10
        assert limiter.prune_interval == 7


class TestReportDelivery:
    """Tests for ReportDelivery."""

    def test_notifier_protocol(self):
        """Any object with a matching send method is a notifier."""
        assert isinstance(RecordingNotifier(), ReportNotifier)

    def test_delivers_rendered_report(self, statement):
        """The notifier receives the rendered HTML report."""
        notifier = RecordingNotifier()
        delivery = ReportDelivery(notifier)

        assert delivery.deliver(statement, name="Ada", email=" ada@example.com ") is True
        name, email, rendered = notifier.sent[0]
        assert name == "Ada"
        assert email == "ada@example.com"
        assert rendered.startswith("<!DOCTYPE html>")
        assert "Prepared for: Ada" in rendered

    def test_requested_format(self, statement):
        """A requested format overrides the configured default."""
        notifier = RecordingNotifier()
        ReportDelivery(notifier).deliver(statement, name="Ada", email="ada@example.com", format="text")
        assert "FINAL NET INCOME" in notifier.sent[0][2]
        assert not notifier.sent[0][2].startswith("<!DOCTYPE html>")

    @pytest.mark.parametrize("name", ["", "   "])
    def test_blank_name_rejected(self, statement, name):
        """A name is required."""
        with pytest.raises(ValidationError) as exc_info:
            ReportDelivery(RecordingNotifier()).deliver(statement, name=name, email="a@b.co")
        assert exc_info.value.field == "name"

    @pytest.mark.parametrize("email", ["", "ada", "ada@example", "ada @example.com", "@example.com"])
    def test_invalid_email_rejected(self, statement, email):
        """Malformed addresses are rejected before anything is sent."""
        notifier = RecordingNotifier()
        with pytest.raises(ValidationError) as exc_info:
            ReportDelivery(notifier).deliver(statement, name="Ada", email=email)
        assert exc_info.value.field == "email"
        assert notifier.sent == []

    def test_rate_limited(self, statement, clock):
        """Exhausting the bucket raises RateLimitError with a retry hint."""
        notifier = RecordingNotifier()
        delivery = ReportDelivery(
            notifier,
            rate_limiter=TokenBucketRateLimiter(capacity=1, refill_seconds=60, clock=clock),
        )
        delivery.deliver(statement, name="Ada", email="ada@example.com")
        clock.advance(15)

        with pytest.raises(RateLimitError) as exc_info:
            delivery.deliver(statement, name="Ada", email="ada@example.com")

        assert exc_info.value.retry_after == pytest.approx(45.0)
        assert len(notifier.sent) == 1

    def test_notifier_failure_returns_false(self, statement):
        """A notifier that reports failure yields False."""
        delivery = ReportDelivery(RecordingNotifier(result=False))
        assert delivery.deliver(statement, name="Ada", email="ada@example.com") is False

    def test_notification_error_returns_false(self, statement):
        """A NotificationError from the notifier is logged and yields False."""
        notifier = RecordingNotifier(error=NotificationError("SMTP down", recipient="ada@example.com"))
        delivery = ReportDelivery(notifier)
        assert delivery.deliver(statement, name="Ada", email="ada@example.com") is False

    def test_unexpected_errors_propagate(self, statement):
        """Errors other than NotificationError are not swallowed."""
        delivery = ReportDelivery(RecordingNotifier(error=RuntimeError("bug")))
        with pytest.raises(RuntimeError):
            delivery.deliver(statement, name="Ada", email="ada@example.com")
