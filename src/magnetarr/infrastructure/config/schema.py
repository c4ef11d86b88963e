"""Pydantic configuration models with validation."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import (
    AliasChoices,
    AliasPath,
    BaseModel,
    Field,
    field_validator,
    model_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

Environment = Literal["dev", "test", "prod"]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]
LogFormat = Literal["json", "console"]


def _section(flat: str, section: str, key: str) -> AliasChoices:
    return AliasChoices(flat, AliasPath(section, key))


class AppConfig(BaseModel):
    """
    Canonical application configuration (validated, final).

    Note:
    - YAML is expected to be sectioned (http/logging/search/metadata/fallback/stremio).
    - Environment variables are handled by EnvOverrides(BaseSettings) to allow strict
      precedence control (defaults < YAML < ENV < CLI) in load.py.
    - Built once at startup and passed into the composition root; read-only after.
    """

    # General
    app_name: str = Field(default="magnetarr", description="Application name.")
    environment: Environment = Field(
        default="dev",
        description="Runtime environment (affects defaults like log format).",
    )

    # HTTP (YAML section: http.*)
    http_timeout_seconds: float = Field(
        default=10.0,
        validation_alias=_section("http_timeout_seconds", "http", "timeout_seconds"),
        description="Per-request timeout in seconds for every outbound call.",
    )
    http_follow_redirects: bool = Field(
        default=True,
        validation_alias=_section(
            "http_follow_redirects", "http", "follow_redirects"
        ),
        description="Whether HTTP client follows redirects.",
    )
    http_user_agent: str = Field(
        default="Magnetarr/0.1.0",
        validation_alias=_section("http_user_agent", "http", "user_agent"),
        description="User-Agent for outgoing HTTP requests.",
    )

    # Logging (YAML section: logging.*)
    log_level: LogLevel = Field(
        default="INFO",
        validation_alias=_section("log_level", "logging", "level"),
        description="Log level.",
    )
    log_format: Optional[LogFormat] = Field(
        default=None,
        validation_alias=_section("log_format", "logging", "format"),
        description=(
            "Log renderer format (console/json). If unset, derived from environment."
        ),
    )

    # Search surface (YAML section: search.*)
    search_base_url: str = Field(
        default="https://ext.to",
        validation_alias=_section("search_base_url", "search", "base_url"),
        description="Base URL of the HTML search surface (or a proxy in front of it).",
    )
    proxy_key: Optional[str] = Field(
        default=None,
        validation_alias=_section("proxy_key", "search", "proxy_key"),
        description="Sent as X-Proxy-Key header on search-surface requests.",
    )
    detail_page_limit: int = Field(
        default=5,
        validation_alias=_section(
            "detail_page_limit", "search", "detail_page_limit"
        ),
        description="Max detail pages visited per listing without magnets.",
    )
    search_max_retries: int = Field(
        default=2,
        validation_alias=_section("search_max_retries", "search", "max_retries"),
        description="Retries per search-surface request after the first attempt.",
    )
    search_retry_base_delay_seconds: float = Field(
        default=0.5,
        validation_alias=_section(
            "search_retry_base_delay_seconds", "search", "retry_base_delay_seconds"
        ),
        description="Base delay for exponential backoff (delay * 2**attempt).",
    )

    # Metadata service (YAML section: metadata.*)
    metadata_base_url: str = Field(
        default="https://v3-cinemeta.strem.io",
        validation_alias=_section("metadata_base_url", "metadata", "base_url"),
        description="Base URL of the Cinemeta-compatible metadata service.",
    )

    # Fallback provider (YAML section: fallback.*)
    fallback_enabled: bool = Field(
        default=True,
        validation_alias=_section("fallback_enabled", "fallback", "enabled"),
        description="Query the fallback stream API when scraping finds nothing.",
    )
    fallback_base_url: str = Field(
        default="https://torrentio.strem.fun",
        validation_alias=_section("fallback_base_url", "fallback", "base_url"),
        description="Base URL of the Torrentio-compatible fallback provider.",
    )

    # Stremio output (YAML section: stremio.*)
    max_streams: int = Field(
        default=20,
        validation_alias=_section("max_streams", "stremio", "max_streams"),
        description="Max stream records returned from scraped magnets.",
    )

    @field_validator(
        "search_base_url", "metadata_base_url", "fallback_base_url", mode="before"
    )
    @classmethod
    def _strip_trailing_slash(cls, v: object) -> object:
        if isinstance(v, str):
            v = v.strip().rstrip("/")
            if not v:
                raise ValueError("base URL must not be empty")
        return v

    @field_validator("http_timeout_seconds")
    @classmethod
    def _validate_http_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("http_timeout_seconds must be > 0")
        return v

    @field_validator("search_max_retries", "detail_page_limit")
    @classmethod
    def _validate_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("value must be >= 0")
        return v

    @field_validator("search_retry_base_delay_seconds")
    @classmethod
    def _validate_retry_delay(cls, v: float) -> float:
        if v < 0:
            raise ValueError("search_retry_base_delay_seconds must be >= 0")
        return v

    @field_validator("max_streams")
    @classmethod
    def _validate_max_streams(cls, v: int) -> int:
        if v < 1:
            raise ValueError("max_streams must be >= 1")
        return v

    @model_validator(mode="after")
    def _derive_defaults(self) -> "AppConfig":
        # Default log format: console in dev/test, json in prod.
        if self.log_format is None:
            self.log_format = "json" if self.environment == "prod" else "console"
        if self.proxy_key is not None and not self.proxy_key.strip():
            self.proxy_key = None
        return self


class EnvOverrides(BaseSettings):
    """
    Environment-variable overrides (all optional).

    Intended usage:
    - load.py creates EnvOverrides() to read MAGNETARR_* variables,
      converts to dict of set values, merges into YAML/defaults,
      then validates AppConfig.

    Supported env var examples (flat, explicit):
    - MAGNETARR_SEARCH_BASE_URL
    - MAGNETARR_PROXY_KEY
    - MAGNETARR_FALLBACK_ENABLED
    - MAGNETARR_LOG_LEVEL
    """

    model_config = SettingsConfigDict(
        env_prefix="MAGNETARR_",
        extra="ignore",
        case_sensitive=False,
    )

    app_name: Optional[str] = None
    environment: Optional[Environment] = None

    http_timeout_seconds: Optional[float] = None
    http_follow_redirects: Optional[bool] = None
    http_user_agent: Optional[str] = None

    log_level: Optional[LogLevel] = None
    log_format: Optional[LogFormat] = None

    search_base_url: Optional[str] = None
    proxy_key: Optional[str] = None
    detail_page_limit: Optional[int] = None
    search_max_retries: Optional[int] = None
    search_retry_base_delay_seconds: Optional[float] = None

    metadata_base_url: Optional[str] = None

    fallback_enabled: Optional[bool] = None
    fallback_base_url: Optional[str] = None

    max_streams: Optional[int] = None

    def to_update_dict(self) -> dict[str, object]:
        """
        Return only values that were actually provided (non-None), for merging.
        """
        return self.model_dump(exclude_none=True)
