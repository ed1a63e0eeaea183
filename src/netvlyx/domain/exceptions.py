"""Domain exceptions."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from netvlyx.domain.entities import FetchAttempt


class NetvlyxError(Exception):
    """Base class for all NetVlyx errors."""


class InvalidInputUrl(NetvlyxError):
    """Raised when the requested URL is not an absolute http(s) URL."""


class FetchExhausted(NetvlyxError):
    """Raised when every fetch strategy failed for a URL."""

    def __init__(self, message: str, attempts: list[FetchAttempt] | None = None) -> None:
        super().__init__(message)
        self.attempts: list[FetchAttempt] = list(attempts or [])


class TemplateError(NetvlyxError):
    """Base class for all template-related errors."""


class TemplateValidationError(TemplateError):
    """Raised when a YAML template fails schema validation."""


class TemplateLoadError(TemplateError):
    """Raised when a template file cannot be read."""


class TemplateNotFoundError(TemplateError):
    """Raised when a template name is not known to the registry."""


class DuplicateTemplateError(TemplateError):
    """Raised when two template files resolve to the same name."""


class DownloadResolutionError(NetvlyxError):
    """Raised when a hoster page chain does not yield a download URL."""
