"""Pydantic configuration models with validation."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal, Optional

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
ProxyEncoding = Literal["raw", "quoted"]

_CHROME_UA = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
_CHROME_MAC_UA = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
_FIREFOX_UA = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:121.0) Gecko/20100101 Firefox/121.0"
)


def _normalize_path(value: Any) -> Path:
    """
    Normalize a path-like value without causing filesystem side-effects.

    This function MUST NOT create directories or files.
    """
    if isinstance(value, Path):
        return value.expanduser()
    if isinstance(value, str):
        return Path(value).expanduser()
    raise TypeError(f"Expected path-like value, got: {type(value)!r}")


class HeaderProfile(BaseModel):
    """One browser identity used by the direct fetch strategy."""

    name: str
    user_agent: str
    chromium: bool = Field(
        default=True,
        description="Send Sec-Ch-Ua client hints (Chromium browsers only).",
    )
    headers: dict[str, str] = Field(
        default_factory=dict,
        description="Extra headers, applied last.",
    )


class ProxyEndpoint(BaseModel):
    """A public CORS relay: the target URL is appended to ``prefix``."""

    name: str
    prefix: str
    encoding: ProxyEncoding = "quoted"


class FetchConfig(BaseModel):
    """Fetch strategy chain settings (YAML section: fetch.*)."""

    header_profiles: list[HeaderProfile] = Field(
        default_factory=lambda: [
            HeaderProfile(name="chrome-win", user_agent=_CHROME_UA),
            HeaderProfile(name="chrome-mac", user_agent=_CHROME_MAC_UA),
            HeaderProfile(name="firefox-win", user_agent=_FIREFOX_UA, chromium=False),
        ],
        description="Direct-fetch header profiles, tried in order.",
    )
    proxies: list[ProxyEndpoint] = Field(
        default_factory=lambda: [
            ProxyEndpoint(
                name="thingproxy",
                prefix="https://thingproxy.freeboard.io/fetch/",
                encoding="raw",
            ),
            ProxyEndpoint(name="codetabs", prefix="https://api.codetabs.com/v1/proxy?quest="),
            ProxyEndpoint(name="allorigins", prefix="https://api.allorigins.win/raw?url="),
            ProxyEndpoint(name="corsproxy", prefix="https://corsproxy.io/?"),
        ],
        description="CORS proxies, tried in priority order after direct fetches.",
    )
    external_url: Optional[str] = Field(
        default="https://vlyx-scrapping.vercel.app/api/index",
        description="External scraping service endpoint (None disables it).",
    )
    external_first_hosts: list[str] = Field(
        default_factory=lambda: ["nexdrive.ink"],
        description="Host suffixes for which 'first' placement applies.",
    )
    direct_timeout_seconds: float = 15.0
    proxy_timeout_seconds: float = 30.0
    external_timeout_seconds: float = 30.0
    overall_deadline_seconds: Optional[float] = Field(
        default=None,
        description="Upper bound for the whole chain; no strategy starts after it.",
    )
    max_redirects: int = 5
    min_external_length: int = Field(
        default=200,
        description="External responses shorter than this are rejected.",
    )

    @field_validator(
        "direct_timeout_seconds",
        "proxy_timeout_seconds",
        "external_timeout_seconds",
    )
    @classmethod
    def _validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("fetch timeouts must be > 0")
        return v

    @field_validator("overall_deadline_seconds")
    @classmethod
    def _validate_deadline(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and v <= 0:
            raise ValueError("overall_deadline_seconds must be > 0")
        return v

    @field_validator("max_redirects")
    @classmethod
    def _validate_redirects(cls, v: int) -> int:
        if v < 0:
            raise ValueError("max_redirects must be >= 0")
        return v


class AppConfig(BaseModel):
    """
    Canonical application configuration (validated, final).

    Note:
    - YAML is expected to be sectioned (templates/api/logging/fetch/drive).
    - Environment variables are handled by EnvOverrides(BaseSettings) to allow strict
      precedence control (defaults < YAML < ENV < CLI) in load.py.
    """

    # General
    app_name: str = Field(default="netvlyx", description="Application name.")
    environment: Environment = Field(
        default="dev",
        description="Runtime environment (affects log format and the origin guard).",
    )

    # Templates (YAML section: templates.*)
    template_dir: Optional[Path] = Field(
        default=None,
        validation_alias=AliasChoices(
            "template_dir",
            AliasPath("templates", "template_dir"),
        ),
        description="Directory of YAML templates (None = bundled templates).",
    )
    default_template: str = Field(
        default="vega",
        validation_alias=AliasChoices(
            "default_template",
            AliasPath("templates", "default"),
        ),
        description="Template used when no template matches the URL host.",
    )

    # HTTP API (YAML section: api.*)
    api_rate_limit_rpm: int = Field(
        default=120,
        validation_alias=AliasChoices(
            "api_rate_limit_rpm",
            AliasPath("api", "rate_limit_rpm"),
        ),
        description="Max requests per minute per client IP (0 = disabled).",
    )
    origin_guard_enabled: bool = Field(
        default=True,
        validation_alias=AliasChoices(
            "origin_guard_enabled",
            AliasPath("api", "origin_guard_enabled"),
        ),
        description="Reject cross-origin calls to the protected API routes.",
    )
    allowed_origins: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices(
            "allowed_origins",
            AliasPath("api", "allowed_origins"),
        ),
        description="Additional origins accepted by the origin guard.",
    )

    # Drive shortcut (YAML section: drive.*)
    drive_hosts: list[str] = Field(
        default_factory=lambda: ["nexdrive.pro", "nexdrive.biz", "nexdrive.ink"],
        validation_alias=AliasChoices(
            "drive_hosts",
            AliasPath("drive", "hosts"),
        ),
        description="Hosts tried in order for /drive?driveid=...",
    )

    # Download resolution (YAML section: resolve.*)
    hubdrive_host: str = Field(
        default="hubdrive.wales",
        validation_alias=AliasChoices(
            "hubdrive_host",
            AliasPath("resolve", "hubdrive_host"),
        ),
        description="Host used to expand /resolve?id=... into a HubDrive file URL.",
    )
    mirror_host: str = Field(
        default="90fpsconfig.in",
        validation_alias=AliasChoices(
            "mirror_host",
            AliasPath("resolve", "mirror_host"),
        ),
        description="Host retried when a generated page lacks the PixelServer button.",
    )

    # Logging (YAML section: logging.*)
    log_level: LogLevel = Field(
        default="INFO",
        validation_alias=AliasChoices(
            "log_level",
            AliasPath("logging", "level"),
        ),
        description="Log level.",
    )
    log_format: Optional[LogFormat] = Field(
        default=None,
        validation_alias=AliasChoices(
            "log_format",
            AliasPath("logging", "format"),
        ),
        description=(
            "Log renderer format (console/json). If unset, derived from environment."
        ),
    )

    # TMDB API key (required for /metadata)
    tmdb_api_key: str | None = Field(
        default=None,
        description="TMDB API key for metadata lookup.",
    )

    # Fetch chain (YAML section: fetch.*)
    fetch: FetchConfig = Field(default_factory=FetchConfig)

    @field_validator("template_dir", mode="before")
    @classmethod
    def _validate_paths(cls, v: Any) -> Path | None:
        if v is None:
            return None
        return _normalize_path(v)

    @field_validator("api_rate_limit_rpm")
    @classmethod
    def _validate_rate_limit(cls, v: int) -> int:
        if v < 0:
            raise ValueError("api_rate_limit_rpm must be >= 0")
        return v

    @model_validator(mode="after")
    def _derive_defaults(self) -> "AppConfig":
        # Default log format: console in dev/test, json in prod.
        if self.log_format is None:
            self.log_format = "json" if self.environment == "prod" else "console"
        return self

    def to_sectioned_dict(self) -> dict[str, Any]:
        """
        Dump configuration in the sectioned shape used by config.yaml/docs.
        """
        return {
            "app_name": self.app_name,
            "environment": self.environment,
            "templates": {
                "template_dir": str(self.template_dir) if self.template_dir else None,
                "default": self.default_template,
            },
            "api": {
                "rate_limit_rpm": self.api_rate_limit_rpm,
                "origin_guard_enabled": self.origin_guard_enabled,
                "allowed_origins": list(self.allowed_origins),
            },
            "drive": {"hosts": list(self.drive_hosts)},
            "resolve": {
                "hubdrive_host": self.hubdrive_host,
                "mirror_host": self.mirror_host,
            },
            "logging": {"level": self.log_level, "format": self.log_format},
            "fetch": self.fetch.model_dump(),
        }


class EnvOverrides(BaseSettings):
    """
    Environment-variable overrides (all optional).

    Intended usage:
    - load.py creates EnvOverrides() to read NETVLYX_* variables,
      converts to dict of set values, merges into YAML/defaults,
      then validates AppConfig.

    Supported env var examples (flat, explicit):
    - NETVLYX_TEMPLATE_DIR
    - NETVLYX_API_RATE_LIMIT_RPM
    - NETVLYX_EXTERNAL_URL
    - NETVLYX_LOG_LEVEL
    """

    model_config = SettingsConfigDict(
        env_prefix="NETVLYX_",
        extra="ignore",
        case_sensitive=False,
    )

    app_name: Optional[str] = None
    environment: Optional[Environment] = None

    template_dir: Optional[Path] = None
    default_template: Optional[str] = None

    api_rate_limit_rpm: Optional[int] = None
    origin_guard_enabled: Optional[bool] = None

    log_level: Optional[LogLevel] = None
    log_format: Optional[LogFormat] = None

    tmdb_api_key: Optional[str] = None

    hubdrive_host: Optional[str] = None
    mirror_host: Optional[str] = None

    external_url: Optional[str] = None
    direct_timeout_seconds: Optional[float] = None
    proxy_timeout_seconds: Optional[float] = None
    external_timeout_seconds: Optional[float] = None
    overall_deadline_seconds: Optional[float] = None

    @field_validator("template_dir", mode="before")
    @classmethod
    def _validate_paths(cls, v: Any) -> Any:
        if v is None:
            return None
        return _normalize_path(v)

    def to_update_dict(self) -> dict[str, Any]:
        """
        Return only values that were actually provided (non-None), for merging.
        """
        return self.model_dump(exclude_none=True)
