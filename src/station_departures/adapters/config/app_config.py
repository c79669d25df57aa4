"""12-factor configuration adapter using environment variables and TOML config."""

import tomllib
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppConfig(BaseSettings):
    """Application configuration following 12-factor principles."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        validate_assignment=True,
    )

    # Schedule API configuration
    api_scheme: str = Field(default="http", description="URL scheme of the schedule API")
    api_host: str = Field(default="localhost", description="Host of the schedule API")
    api_port: int = Field(default=3000, description="Port of the schedule API")
    api_base_path: str = Field(default="/api", description="Path prefix of the API endpoints")
    api_timeout: int = Field(default=10, description="Timeout for API requests in seconds")

    # Refresh configuration
    refresh_interval_seconds: float = Field(
        default=300, description="Interval between automatic board refreshes in seconds"
    )

    # Display configuration
    search_display_limit: int = Field(
        default=20, description="Maximum number of stations shown for a search query"
    )
    board_display_limit: int = Field(
        default=20, description="Maximum number of departures shown on a board"
    )
    timezone: str | None = Field(
        default=None,
        description="IANA timezone for displayed times (system local time if unset)",
    )

    # If not set, only environment variables are used
    config_file: str | None = Field(
        default=None,
        description="Path to TOML configuration file with [api] and [display] sections",
    )

    @classmethod
    def for_testing(cls, **overrides: Any) -> "AppConfig":
        """Build a config that ignores .env files and TOML configuration."""
        overrides.setdefault("config_file", None)
        return cls(_env_file=None, **overrides)  # type: ignore[call-arg]

    @field_validator("api_scheme")
    @classmethod
    def validate_api_scheme(cls, v: str) -> str:
        """Validate scheme is either 'http' or 'https'."""
        if v.lower() not in ("http", "https"):
            raise ValueError("api_scheme must be either 'http' or 'https'")
        return v.lower()

    @field_validator("refresh_interval_seconds")
    @classmethod
    def validate_refresh_interval(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("refresh_interval_seconds must be positive")
        return v

    @field_validator("search_display_limit", "board_display_limit")
    @classmethod
    def validate_display_limit(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("display limits must be positive")
        return v

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: str | None) -> str | None:
        """Validate timezone is a known IANA name."""
        if v is None or v == "":
            return None
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone: {v}") from e
        return v

    @property
    def api_base_url(self) -> str:
        """Base URL of the schedule API, without trailing slash."""
        base_path = "/" + self.api_base_path.strip("/") if self.api_base_path.strip("/") else ""
        return f"{self.api_scheme}://{self.api_host}:{self.api_port}{base_path}"

    def load_toml(self) -> dict[str, Any]:
        """Load the TOML file and apply its [api] and [display] sections.

        Returns:
            The parsed TOML data (empty if no config file is set).
        """
        if not self.config_file:
            return {}

        config_path = Path(self.config_file)
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, "rb") as f:
            toml_data = tomllib.load(f)

        api = toml_data.get("api", {})
        for key in ("scheme", "host", "port", "base_path", "timeout"):
            if key in api:
                setattr(self, f"api_{key}", api[key])

        display = toml_data.get("display", {})
        for key in (
            "refresh_interval_seconds",
            "search_display_limit",
            "board_display_limit",
            "timezone",
        ):
            if key in display:
                setattr(self, key, display[key])

        return toml_data
