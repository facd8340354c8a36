"""Configuration system for household-core.

This module provides Pydantic Settings-based configuration with environment
variable support and sensible defaults for the statement service, report
rendering and report delivery.

Usage:
    from household_core.config import HouseholdConfig, configure_logging

    # Load from environment variables and .env file
    config = HouseholdConfig()
    configure_logging(config)

    # Access report settings
    print(config.report.default_format)

    # Access pagination settings
    print(config.default_page_size)
"""

import logging
from enum import Enum

import structlog
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ReportFormat(str, Enum):
    """Supported rendered report formats."""

    TEXT = "text"
    MARKDOWN = "markdown"
    HTML = "html"


class ReportConfig(BaseSettings):
    """Report rendering settings.

    Environment Variables:
        HOUSEHOLD_REPORT_DEFAULT_FORMAT: Format used when none is requested
        HOUSEHOLD_REPORT_SITE_NAME: Name shown in report headers
    """

    model_config = SettingsConfigDict(
        env_prefix="HOUSEHOLD_REPORT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    default_format: ReportFormat = Field(
        default=ReportFormat.HTML,
        description="Format used for rendered reports",
    )
    site_name: str = Field(
        default="Household Financial Statement",
        description="Title shown at the top of every report",
    )

    @field_validator("site_name")
    @classmethod
    def validate_site_name(cls, v: str) -> str:
        """Ensure the report title is not empty."""
        if not v or not v.strip():
            raise ValueError("Site name cannot be empty")
        return v.strip()


class RateLimitConfig(BaseSettings):
    """Report delivery rate limiting.

    A token bucket per recipient: ``bucket_capacity`` reports can go out at
    once, and one token is restored every ``refill_seconds``.

    Environment Variables:
        HOUSEHOLD_RATE_LIMIT_BUCKET_CAPACITY: Maximum burst of reports
        HOUSEHOLD_RATE_LIMIT_REFILL_SECONDS: Seconds to restore one token
        HOUSEHOLD_RATE_LIMIT_PRUNE_INTERVAL: Requests between sweeps of idle buckets
    """

    model_config = SettingsConfigDict(
        env_prefix="HOUSEHOLD_RATE_LIMIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    bucket_capacity: int = Field(
        default=5,
        gt=0,
        le=1000,
        description="Maximum number of reports per burst",
    )
    refill_seconds: float = Field(
        default=60.0,
        gt=0,
        description="Seconds needed to restore one token",
    )
    prune_interval: int = Field(
        default=1000,
        gt=0,
        description="Requests between sweeps that drop idle buckets",
    )


class HouseholdConfig(BaseSettings):
    """Root configuration for household-core.

    Environment Variables:
        HOUSEHOLD_ENV: Environment name (development, staging, production, test)
        HOUSEHOLD_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR)
        HOUSEHOLD_DEBUG_MODE: Enable verbose debug logging
        HOUSEHOLD_DEFAULT_PAGE_SIZE: Statements per history page
        HOUSEHOLD_MAX_PAGE_SIZE: Upper bound for a requested page size

    Example:
        # Override specific settings
        config = HouseholdConfig(
            report=ReportConfig(default_format="markdown"),
            rate_limit=RateLimitConfig(bucket_capacity=2),
        )
    """

    model_config = SettingsConfigDict(
        env_prefix="HOUSEHOLD_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Environment settings
    env: str = Field(
        default="development",
        description="Environment name (development, staging, production)",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable verbose debug logging for development",
    )

    # History pagination
    default_page_size: int = Field(
        default=10,
        gt=0,
        description="Statements returned per page when no limit is given",
    )
    max_page_size: int = Field(
        default=100,
        gt=0,
        description="Largest page size a caller may request",
    )

    # Nested configuration
    report: ReportConfig = Field(default_factory=ReportConfig)
    rate_limit: RateLimitConfig = Field(default_factory=RateLimitConfig)

    @field_validator("env")
    @classmethod
    def validate_env(cls, v: str) -> str:
        """Validate environment name."""
        valid_envs = {"development", "staging", "production", "test"}
        v_lower = v.lower().strip()
        if v_lower not in valid_envs:
            raise ValueError(f"Invalid environment: {v}. Must be one of: {valid_envs}")
        return v_lower

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate and normalize log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper().strip()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of: {valid_levels}")
        return v_upper

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.env == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.env == "development"

    @property
    def is_debug(self) -> bool:
        """Check if debug mode is enabled (via flag or log level)."""
        return self.debug_mode or self.log_level == "DEBUG"


def configure_logging(config: HouseholdConfig) -> None:
    """Configure structlog for the given settings.

    Production renders JSON lines; other environments use the console renderer.
    Events below the configured level are dropped.
    """
    level = logging.DEBUG if config.is_debug else getattr(logging, config.log_level)
    renderer = (
        structlog.processors.JSONRenderer()
        if config.is_production
        else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=False,
    )
