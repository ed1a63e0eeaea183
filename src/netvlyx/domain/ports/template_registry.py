"""Port for template discovery and access."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from netvlyx.domain.templates import TemplateDefinition


@runtime_checkable
class TemplateRegistryPort(Protocol):
    """Synchronous interface for template discovery, listing, and retrieval."""

    def discover(self) -> None: ...
    def list_names(self) -> list[str]: ...
    def get(self, name: str) -> TemplateDefinition: ...
    def for_url(self, url: str) -> TemplateDefinition | None: ...
    def load_all(self) -> list[TemplateDefinition]: ...
