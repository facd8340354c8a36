"""Tests for configuration and logging setup."""

import pytest
import structlog
from pydantic import ValidationError as PydanticValidationError

from household_core.config import (
    HouseholdConfig,
    RateLimitConfig,
    ReportConfig,
    ReportFormat,
    configure_logging,
)


@pytest.fixture(autouse=True)
def reset_structlog():
    yield
    structlog.reset_defaults()


class TestHouseholdConfig:
    """Tests for HouseholdConfig."""

    def test_defaults(self):
        """Defaults suit local development."""
        config = HouseholdConfig()
        assert config.env == "development"
        assert config.log_level == "INFO"
        assert config.default_page_size == 10
        assert config.max_page_size == 100
        assert config.report.default_format == ReportFormat.HTML
        assert config.rate_limit.bucket_capacity == 5
        assert config.is_development
        assert not config.is_debug

    def test_reads_environment(self, monkeypatch):
        """Settings come from HOUSEHOLD_ variables."""
        monkeypatch.setenv("HOUSEHOLD_ENV", "Production")
        monkeypatch.setenv("HOUSEHOLD_LOG_LEVEL", "warning")
        monkeypatch.setenv("HOUSEHOLD_DEFAULT_PAGE_SIZE", "25")

        config = HouseholdConfig()
        assert config.env == "production"
        assert config.is_production
        assert config.log_level == "WARNING"
        assert config.default_page_size == 25

    def test_nested_sections_read_their_prefix(self, monkeypatch):
        """Report and rate limit settings use their own prefixes."""
        monkeypatch.setenv("HOUSEHOLD_REPORT_DEFAULT_FORMAT", "markdown")
        monkeypatch.setenv("HOUSEHOLD_RATE_LIMIT_BUCKET_CAPACITY", "2")

        config = HouseholdConfig()
        assert config.report.default_format == ReportFormat.MARKDOWN
        assert config.rate_limit.bucket_capacity == 2

    def test_invalid_env(self):
        """Unknown environments are rejected."""
        with pytest.raises(PydanticValidationError):
            HouseholdConfig(env="moon")

    def test_invalid_log_level(self):
        """Unknown log levels are rejected."""
        with pytest.raises(PydanticValidationError):
            HouseholdConfig(log_level="LOUD")

    def test_debug_via_log_level(self):
        """DEBUG log level implies debug mode."""
        assert HouseholdConfig(log_level="debug").is_debug


class TestSectionConfigs:
    """Tests for report and rate limit settings."""

    def test_blank_site_name(self):
        """The report title cannot be blank."""
        with pytest.raises(PydanticValidationError):
            ReportConfig(site_name="   ")

    @pytest.mark.parametrize("capacity", [0, -1, 1001])
    def test_capacity_bounds(self, capacity):
        """Bucket capacity must be between 1 and 1000."""
        with pytest.raises(PydanticValidationError):
            RateLimitConfig(bucket_capacity=capacity)

    def test_refill_must_be_positive(self):
        """A zero refill period is rejected."""
        with pytest.raises(PydanticValidationError):
            RateLimitConfig(refill_seconds=0)


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_filters_below_level(self):
        """Events below the configured level are dropped."""
        configure_logging(HouseholdConfig(log_level="WARNING"))
        logger = structlog.get_logger()
        assert logger.bind().info("ignored") is None

    def test_production_uses_json(self):
        """Production renders JSON lines."""
        configure_logging(HouseholdConfig(env="production"))
        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.processors.JSONRenderer)

    def test_development_uses_console(self):
        """Other environments use the console renderer."""
        configure_logging(HouseholdConfig(env="development"))
        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)
