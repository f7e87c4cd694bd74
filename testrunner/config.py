"""Configuration loading for the test-runner report generator.

This module provides centralized configuration management:
- Load settings from TEST_RUNNER_* environment variables and .env files
- Validate configuration using pydantic
- Provide typed access to all settings
- Let command-line flags override any value
"""

from typing import Any, Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment.

    Uses pydantic-settings for environment variable handling with
    .env file support via python-dotenv.
    """

    model_config = SettingsConfigDict(
        env_prefix="TEST_RUNNER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Report viewer presentation
    title: str = Field(
        default="test-runner",
        description="The title text shown in the test report",
    )
    indicator_size: int = Field(
        default=24,
        description="The size (in pixels) of the clickable indicator for test result groups",
    )
    group_size: int = Field(
        default=20,
        description="The number of tests per test group indicator",
    )

    # Report destinations
    exec_report: str = Field(
        default="exec.report.json",
        description="The execution report file",
    )
    discovery_report: str = Field(
        default="discovery.report.json",
        description="The discovery report file",
    )

    # Package metadata
    list_file: str = Field(
        default="",
        description="Pre-generated `go list -json` listing; when set, go is never run",
    )
    go_binary: str = Field(
        default="go",
        description="Go executable used to describe packages",
    )
    query_timeout_seconds: float | None = Field(
        default=None,
        description="Limit for each `go list` invocation (None waits indefinitely)",
    )

    # Output
    verbose: bool = Field(
        default=False,
        description="Echo every input line to stdout",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="WARNING",
        description="Log level",
    )
    log_format: Literal["json", "text"] = Field(
        default="text",
        description="Log format",
    )

    @field_validator("indicator_size", "group_size")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        """Ensure presentation sizes are positive."""
        if v <= 0:
            raise ValueError("must be positive")
        return v

    @field_validator("query_timeout_seconds")
    @classmethod
    def validate_timeout(cls, v: float | None) -> float | None:
        """Ensure the query timeout is positive when set."""
        if v is not None and v <= 0:
            raise ValueError("query_timeout_seconds must be positive")
        return v

    @field_validator("exec_report", "discovery_report")
    @classmethod
    def validate_report_path(cls, v: str) -> str:
        """Ensure report paths are non-empty."""
        if not v.strip():
            raise ValueError("report path must not be empty")
        return v

    @model_validator(mode="after")
    def validate_distinct_reports(self) -> "Settings":
        """Ensure the two reports are written to different files."""
        if self.exec_report == self.discovery_report:
            raise ValueError("exec_report and discovery_report must differ")
        return self


def load_settings(env_file: str | None = None, **overrides: Any) -> Settings:
    """Load application settings from environment.

    Args:
        env_file: Optional path to .env file. If not provided,
                 uses the default .env in the current directory.
        **overrides: Values that take precedence over the environment,
                 typically parsed command-line flags. None values are ignored.

    Returns:
        Validated Settings instance.

    Raises:
        ValidationError: If settings validation fails.
    """
    values = {key: value for key, value in overrides.items() if value is not None}
    if env_file:
        return Settings(_env_file=env_file, **values)  # type: ignore[call-arg]
    return Settings(**values)


__all__ = ["Settings", "load_settings"]
