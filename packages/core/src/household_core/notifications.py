"""Report delivery.

A rendered statement report is handed to a notifier (email in production).
Delivery validates the recipient address and rate-limits each recipient
with a token bucket so a single address cannot be flooded.
"""

import re
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Optional, Protocol, runtime_checkable

import structlog

from .config import RateLimitConfig, ReportConfig
from .exceptions import NotificationError, RateLimitError, ValidationError
from .models import Statement
from .report_generator import StatementReportGenerator

logger = structlog.get_logger()

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


@runtime_checkable
class ReportNotifier(Protocol):
    """Anything that can deliver a rendered report to a person."""

    def send(self, name: str, email: str, rendered_report: str) -> bool:
        """Deliver the report; return False when delivery failed."""
        ...


@dataclass
class _Bucket:
    tokens: int
    last_refill: float


class TokenBucketRateLimiter:
    """
    Per-identifier token bucket.

    Each identifier starts with ``capacity`` tokens. One token is restored
    every ``refill_seconds``, up to capacity; each allowed request spends one.
    Every ``prune_interval`` requests, buckets idle long enough to have
    refilled completely are dropped.
    """

    def __init__(
        self,
        capacity: int = 5,
        refill_seconds: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
        prune_interval: int = 1000,
    ):
        self.capacity = capacity
        self.refill_seconds = refill_seconds
        self.prune_interval = prune_interval
        self._clock = clock
        self._buckets: dict[str, _Bucket] = {}
        self._requests = 0
        self._lock = threading.Lock()

    @classmethod
    def from_config(
        cls,
        config: RateLimitConfig,
        clock: Callable[[], float] = time.monotonic,
    ) -> "TokenBucketRateLimiter":
        return cls(config.bucket_capacity, config.refill_seconds, clock, config.prune_interval)

    def __len__(self) -> int:
        return len(self._buckets)

    @property
    def default_idle_seconds(self) -> float:
        """Ten refill periods, or a full refill when that takes longer."""
        return self.refill_seconds * max(10, self.capacity)

    def _refill(self, bucket: _Bucket, now: float) -> None:
        tokens_to_add = int((now - bucket.last_refill) // self.refill_seconds)
        if tokens_to_add > 0:
            bucket.tokens = min(self.capacity, bucket.tokens + tokens_to_add)
            bucket.last_refill += tokens_to_add * self.refill_seconds

    def _drop_idle(self, now: float, idle: float) -> int:
        stale = [key for key, b in self._buckets.items() if now - b.last_refill > idle]
        for key in stale:
            del self._buckets[key]
        return len(stale)

    def acquire(self, identifier: str) -> bool:
        """Spend a token for ``identifier``; False when the bucket is empty."""
        with self._lock:
            now = self._clock()
            self._requests += 1
            if self._requests % self.prune_interval == 0:
                removed = self._drop_idle(now, self.default_idle_seconds)
                if removed:
                    logger.debug("rate_limit_buckets_pruned", removed=removed)

            bucket = self._buckets.setdefault(identifier, _Bucket(self.capacity, now))
            self._refill(bucket, now)
            if bucket.tokens > 0:
                bucket.tokens -= 1
                return True
            return False

    def retry_after(self, identifier: str) -> float:
        """Seconds until ``identifier`` has a token again (0 if it has one now)."""
        with self._lock:
            bucket = self._buckets.get(identifier)
            if bucket is None:
                return 0.0
            now = self._clock()
            self._refill(bucket, now)
            if bucket.tokens > 0:
                return 0.0
            return max(0.0, bucket.last_refill + self.refill_seconds - now)

    def prune(self, idle_seconds: Optional[float] = None) -> int:
        """Drop buckets untouched for ``idle_seconds`` (default ``default_idle_seconds``)."""
        idle = idle_seconds if idle_seconds is not None else self.default_idle_seconds
        with self._lock:
            return self._drop_idle(self._clock(), idle)


class ReportDelivery:
    """Validate, rate-limit, render and send statement reports."""

    def __init__(
        self,
        notifier: ReportNotifier,
        generator: Optional[StatementReportGenerator] = None,
        rate_limiter: Optional[TokenBucketRateLimiter] = None,
        report_config: Optional[ReportConfig] = None,
    ):
        self.notifier = notifier
        self.generator = generator or StatementReportGenerator(report_config)
        self.rate_limiter = rate_limiter or TokenBucketRateLimiter()

    def deliver(
        self,
        statement: Statement,
        name: str,
        email: str,
        format: Optional[str] = None,
    ) -> bool:
        """
        Send a rendered statement report.

        Args:
            statement: The statement to report on
            name: Recipient's name, shown in the report header
            email: Recipient's address
            format: Report format; defaults to the configured format

        Returns:
            True when the notifier accepted the report, False when it failed

        Raises:
            ValidationError: If name or email is missing or malformed
            RateLimitError: If the recipient has exhausted their bucket
        """
        if not name or not name.strip():
            raise ValidationError("Name is required", field="name", constraint="Must not be blank")

        email = (email or "").strip()
        if not EMAIL_PATTERN.match(email):
            raise ValidationError(
                "Invalid email address",
                field="email",
                value=email,
                constraint="Must look like name@domain.tld",
            )

        if not self.rate_limiter.acquire(email):
            retry_after = self.rate_limiter.retry_after(email)
            logger.warning("report_rate_limited", recipient=email, retry_after=retry_after)
            raise RateLimitError(
                "Too many reports requested. Please try again later.",
                identifier=email,
                retry_after=retry_after,
            )

        rendered = self.generator.generate(statement, name=name, format=format)

        try:
            sent = self.notifier.send(name, email, rendered)
        except NotificationError as e:
            logger.error("report_delivery_failed", recipient=email, error=str(e))
            return False

        if sent:
            logger.info("report_delivered", recipient=email)
        else:
            logger.error("report_delivery_failed", recipient=email)
        return bool(sent)
