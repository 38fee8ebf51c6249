"""Centralized configuration for content-discovery-mcp using Pydantic Settings."""

from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from content_discovery.search.locales import LocaleConfig


def _split_csv(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings(BaseSettings):
    """Strictly typed configuration loaded from environment variables.

    All environment variables are validated at startup with proper types.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
        extra="ignore",  # Ignore extra env vars not defined in model
    )

    # Repository access
    operation_mode: Literal["online", "offline"] = Field(
        default="online", description="online: query the repository over HTTP; offline: serve a JSON snapshot"
    )
    repository_url: str = Field(default="", description="Base URL of the content repository (e.g. http://localhost:4502)")
    snapshot_path: str = Field(default="", description="Path to a JSON node snapshot used in offline mode")
    http_timeout: float = Field(default=10.0, gt=0, description="HTTP client timeout in seconds")
    request_timeout: float = Field(
        default=5.0, gt=0, description="Timeout applied to each individual repository call during a search"
    )
    max_concurrency: int = Field(default=8, ge=1, description="Maximum concurrent repository calls per search")

    # Query defaults
    default_limit: int = Field(default=5, ge=1, description="Default maximum number of results")
    default_fuzzy_threshold: float = Field(default=0.75, ge=0.0, le=1.0, description="Default acceptance threshold")
    default_search_depth: int = Field(default=2, ge=1, description="Default listing depth below each path")

    # Locale structure
    language_masters_segment: str = Field(default="language-masters", description="Segment holding language masters")
    locale_default_locales: str = Field(
        default="en,de,fr,es,it,ja,zh",
        description="Comma-separated locales assumed under language masters when the repository cannot list them",
    )
    locale_countries: str = Field(default="us,gb,ca,de,fr,ch", description="Comma-separated country codes")
    locale_languages: str = Field(default="en,de,fr", description="Comma-separated language codes")
    locale_direct_locales: str = Field(
        default="en,de,fr,es,it,ja,zh", description="Comma-separated locales probed directly below the base path"
    )

    # Server settings
    mcp_host: str = Field(default="127.0.0.1", description="MCP server host")
    mcp_port: int = Field(default=15010, ge=1, le=65535, description="MCP server port")

    # Logging
    log_level: str = Field(default="info", description="Logging level")
    log_json: bool = Field(default=True, description="Emit structured JSON logs")

    @model_validator(mode="after")
    def _check_repository_source(self) -> "Settings":
        if self.operation_mode == "offline" and not self.snapshot_path:
            raise ValueError("SNAPSHOT_PATH must be set when OPERATION_MODE is 'offline'.")
        if self.operation_mode == "online" and not self.repository_url:
            raise ValueError("REPOSITORY_URL must be set when OPERATION_MODE is 'online'.")
        return self

    def is_offline_mode(self) -> bool:
        """Check if running in offline mode."""
        return self.operation_mode == "offline"

    def get_locale_config(self) -> LocaleConfig:
        """Build the locale structure used by the path candidate generator."""
        return LocaleConfig(
            language_masters_segment=self.language_masters_segment,
            default_locales=_split_csv(self.locale_default_locales),
            countries=_split_csv(self.locale_countries),
            languages=_split_csv(self.locale_languages),
            direct_locales=_split_csv(self.locale_direct_locales),
        )
