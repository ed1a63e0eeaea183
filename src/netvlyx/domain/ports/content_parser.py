"""Port for turning fetched HTML into structured records."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from netvlyx.domain.entities import DebugReport, ParsedRecord, SourceDocument
from netvlyx.domain.templates import TemplateDefinition


@runtime_checkable
class ContentParserPort(Protocol):
    """Synchronous, side-effect free page parser."""

    def parse(
        self,
        source: SourceDocument,
        template: TemplateDefinition,
        *,
        debug: bool = False,
    ) -> tuple[ParsedRecord, DebugReport | None]: ...
