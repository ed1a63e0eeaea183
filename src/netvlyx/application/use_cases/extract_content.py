"""Extraction use case: validate, resolve template, fetch, parse."""

from __future__ import annotations

from collections.abc import Sequence
from urllib.parse import urlsplit

import structlog

from netvlyx.domain.entities import ExtractionResult, FetchAttempt
from netvlyx.domain.exceptions import FetchExhausted, InvalidInputUrl
from netvlyx.domain.ports import (
    ContentParserPort,
    PageFetcherPort,
    TemplateRegistryPort,
)
from netvlyx.domain.templates import TemplateDefinition

log = structlog.get_logger(__name__)

DRIVE_TEMPLATE = "nextdrive"


def validate_url(url: str | None) -> str:
    """Return the stripped URL or raise :class:`InvalidInputUrl`."""
    candidate = (url or "").strip()
    if not candidate:
        raise InvalidInputUrl("URL is required")
    parts = urlsplit(candidate)
    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise InvalidInputUrl(f"Not an absolute http(s) URL: {candidate}")
    return candidate


class ExtractContentUseCase:
    """Runs one extraction request end to end.

    Holds only collaborators; every call builds its own document and
    record, so concurrent calls share nothing.
    """

    def __init__(
        self,
        *,
        fetcher: PageFetcherPort,
        templates: TemplateRegistryPort,
        parser: ContentParserPort,
        default_template: str,
    ) -> None:
        self._fetcher = fetcher
        self._templates = templates
        self._parser = parser
        self._default_template = default_template

    def resolve_template(self, url: str, name: str | None = None) -> TemplateDefinition:
        """Explicit name, else host match, else the configured default.

        Raises:
            TemplateNotFoundError: the explicit or default name is unknown.
        """
        if name:
            return self._templates.get(name)
        matched = self._templates.for_url(url)
        if matched is not None:
            return matched
        return self._templates.get(self._default_template)

    async def execute(
        self,
        url: str | None,
        *,
        template: str | None = None,
        debug: bool = False,
    ) -> ExtractionResult:
        """Extract one page.

        Raises:
            InvalidInputUrl: *url* is not an absolute http(s) URL.
            TemplateNotFoundError: unknown template name.
            FetchExhausted: no fetch strategy produced acceptable HTML.
        """
        target = validate_url(url)
        definition = self.resolve_template(target, template)
        log.info("extract_started", url=target, template=definition.name, debug=debug)

        source = await self._fetcher.fetch(
            target,
            external=definition.fetch.external,
            external_first_hosts=definition.fetch.external_first_hosts,
            min_html_length=definition.fetch.min_html_length,
            trailing_slash=definition.fetch.trailing_slash,
        )
        record, report = self._parser.parse(source, definition, debug=debug)
        if report is not None:
            report.requested_url = target

        log.info(
            "extract_completed",
            url=target,
            template=definition.name,
            strategy=source.strategy,
            links=record.link_count,
        )
        return ExtractionResult(
            template=definition.name,
            family=definition.family,
            record=record,
            source=source,
            debug=report,
        )

    async def execute_drive_id(
        self,
        drive_id: str,
        hosts: Sequence[str],
        *,
        debug: bool = False,
    ) -> ExtractionResult:
        """Try ``https://<host>/<drive_id>/`` for each host until one fetch succeeds."""
        drive_id = drive_id.strip().strip("/")
        if not drive_id:
            raise InvalidInputUrl("Either 'driveid' or 'link' is required")

        attempts: list[FetchAttempt] = []
        for host in hosts:
            url = f"https://{host}/{drive_id}/"
            try:
                return await self.execute(url, template=DRIVE_TEMPLATE, debug=debug)
            except FetchExhausted as e:
                attempts.extend(e.attempts)
                log.warning("drive_host_failed", host=host, drive_id=drive_id)

        raise FetchExhausted(
            f"All drive hosts failed for '{drive_id}' (tried: {', '.join(hosts)})",
            attempts,
        )
