"""Strategy-chain page fetcher.

One URL is tried through an ordered list of strategies: direct requests
with each browser header profile, the configured CORS proxies, and the
external scraping service. Strategies run strictly one after another and
the first acceptable response wins. Every network round-trip is recorded
as a :class:`FetchAttempt`.
"""

from __future__ import annotations

import time
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Literal
from urllib.parse import quote, urljoin, urlsplit, urlunsplit

import httpx
import structlog

from netvlyx.domain.entities import FetchAttempt, SourceDocument
from netvlyx.domain.exceptions import FetchExhausted
from netvlyx.domain.templates import ExternalPlacement
from netvlyx.infrastructure.config.schema import FetchConfig
from netvlyx.infrastructure.fetch.challenge import is_bot_challenge, looks_like_html
from netvlyx.infrastructure.fetch.headers import build_headers

log = structlog.get_logger(__name__)

StrategyKind = Literal["direct", "proxy", "external"]

_EXTERNAL_ACCEPT = "text/html,application/xhtml+xml;q=0.9,*/*;q=0.1"
# encodeURIComponent leaves these unescaped.
_URI_COMPONENT_SAFE = "-_.!~*'()"


def encode_component(value: str) -> str:
    return quote(value, safe=_URI_COMPONENT_SAFE)


def toggle_trailing_slash(url: str) -> str:
    """``/a/b`` <-> ``/a/b/``; the root path is left alone."""
    parts = urlsplit(url)
    path = parts.path
    if path.endswith("/") and path != "/":
        path = path[:-1]
    elif not path.endswith("/"):
        path = f"{path}/"
    return urlunsplit(parts._replace(path=path))


def ensure_trailing_slash(url: str) -> str:
    parts = urlsplit(url)
    if parts.path.endswith("/"):
        return url
    return urlunsplit(parts._replace(path=f"{parts.path}/"))


def host_of(url: str) -> str:
    return (urlsplit(url).hostname or "").lower()


@dataclass(frozen=True)
class Strategy:
    """One step of the chain."""

    name: str
    kind: StrategyKind
    timeout: float
    headers: dict[str, str] = field(default_factory=dict, hash=False)
    prefix: str = ""
    encoding: Literal["raw", "quoted"] = "quoted"

    def request_url(self, target: str) -> str:
        if self.kind == "direct":
            return target
        if self.kind == "proxy":
            encoded = target if self.encoding == "raw" else encode_component(target)
            return f"{self.prefix}{encoded}"
        sep = "&" if "?" in self.prefix else "?"
        return f"{self.prefix}{sep}url={encode_component(target)}"


class StrategyFetcher:
    """Fetch HTML through direct, proxy and external strategies.

    The shared ``httpx.AsyncClient`` must not follow redirects itself;
    redirects are followed here so that a 3xx without ``Location`` can be
    retried with the trailing slash toggled.
    """

    def __init__(
        self,
        config: FetchConfig,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._config = config
        self._client = http_client
        self._owns_client = http_client is None

    async def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(follow_redirects=False)
        return self._client

    async def aclose(self) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    # ------------------------------------------------------------------
    # Strategy planning
    # ------------------------------------------------------------------

    def _direct_and_proxy(self) -> list[Strategy]:
        cfg = self._config
        plan = [
            Strategy(
                name=f"direct:{profile.name}",
                kind="direct",
                timeout=cfg.direct_timeout_seconds,
                headers=build_headers(profile),
            )
            for profile in cfg.header_profiles
        ]
        proxy_headers = build_headers(cfg.header_profiles[0]) if cfg.header_profiles else {}
        plan.extend(
            Strategy(
                name=f"proxy:{proxy.name}",
                kind="proxy",
                timeout=cfg.proxy_timeout_seconds,
                headers=proxy_headers,
                prefix=proxy.prefix,
                encoding=proxy.encoding,
            )
            for proxy in cfg.proxies
        )
        return plan

    def _external(self) -> Strategy | None:
        if not self._config.external_url:
            return None
        return Strategy(
            name="external",
            kind="external",
            timeout=self._config.external_timeout_seconds,
            headers={"Accept": _EXTERNAL_ACCEPT},
            prefix=self._config.external_url,
        )

    def plan(
        self,
        url: str,
        *,
        external: ExternalPlacement = "fallback",
        external_first_hosts: Sequence[str] = (),
    ) -> list[Strategy]:
        """Ordered strategies for *url* under the given external placement."""
        ext = self._external()
        if external == "only":
            return [ext] if ext else []
        base = self._direct_and_proxy()
        if ext is None or external == "never":
            return base
        if external == "first":
            host = host_of(url)
            suffixes = [*self._config.external_first_hosts, *external_first_hosts]
            if any(host.endswith(suffix) for suffix in suffixes):
                return [ext, *base]
        return [*base, ext]

    # ------------------------------------------------------------------
    # Fetching
    # ------------------------------------------------------------------

    async def fetch(
        self,
        url: str,
        *,
        external: ExternalPlacement = "fallback",
        external_first_hosts: Sequence[str] = (),
        min_html_length: int = 0,
        trailing_slash: bool = False,
    ) -> SourceDocument:
        """Return the first acceptable HTML for *url*.

        Raises:
            FetchExhausted: every strategy failed (or the deadline passed).
        """
        if trailing_slash:
            url = ensure_trailing_slash(url)
        strategies = self.plan(
            url, external=external, external_first_hosts=external_first_hosts
        )
        attempts: list[FetchAttempt] = []
        deadline = self._config.overall_deadline_seconds
        started = time.monotonic()
        tried: list[str] = []
        last_error = "no strategy available"

        for strategy in strategies:
            timeout = strategy.timeout
            if deadline is not None:
                remaining = deadline - (time.monotonic() - started)
                if remaining <= 0:
                    last_error = f"deadline of {deadline}s exceeded"
                    log.warning("fetch_deadline_exceeded", url=url, deadline=deadline)
                    break
                timeout = min(timeout, remaining)

            tried.append(strategy.name)
            result = await self._run(strategy, url, timeout, attempts, min_html_length)
            if isinstance(result, SourceDocument):
                result.attempts = attempts
                log.info(
                    "fetch_succeeded",
                    url=url,
                    strategy=strategy.name,
                    bytes=len(result.html),
                    attempts=len(attempts),
                )
                return result
            last_error = result
            log.warning(
                "fetch_strategy_failed",
                url=url,
                strategy=strategy.name,
                error=result,
            )

        log.warning("fetch_exhausted", url=url, tried=tried, last_error=last_error)
        raise FetchExhausted(
            f"All fetch strategies failed for {url} "
            f"(tried: {', '.join(tried) or 'none'}). Last error: {last_error}",
            attempts,
        )

    async def _run(
        self,
        strategy: Strategy,
        url: str,
        timeout: float,
        attempts: list[FetchAttempt],
        min_html_length: int,
    ) -> SourceDocument | str:
        """Run one strategy, following redirects; return the document or an error."""
        client = await self._ensure_client()
        target = url
        redirects = 0
        toggled = False

        while True:
            attempt = FetchAttempt(strategy=strategy.name, fetch_url=strategy.request_url(target))
            attempts.append(attempt)
            try:
                resp = await client.get(
                    attempt.fetch_url,
                    headers=strategy.headers,
                    timeout=timeout,
                    follow_redirects=False,
                )
            except httpx.TimeoutException:
                attempt.error = f"timeout after {timeout:g}s"
                return attempt.error
            except httpx.HTTPError as exc:
                attempt.error = f"{type(exc).__name__}: {exc}"
                return attempt.error

            text = resp.text
            attempt.status = resp.status_code
            attempt.final_url = str(resp.url)
            attempt.bytes = len(text)
            if strategy.kind == "external":
                attempt.external_method = resp.headers.get("X-Scraper-Method")
                attempt.title_header = resp.headers.get("X-Page-Title")

            if 300 <= resp.status_code < 400 and strategy.kind != "external":
                location = resp.headers.get("location")
                if location:
                    if redirects >= self._config.max_redirects:
                        attempt.error = f"too many redirects ({redirects})"
                        return attempt.error
                    redirects += 1
                    attempt.redirected = True
                    target = urljoin(target, location)
                    continue
                if not toggled:
                    toggled = True
                    attempt.error = f"HTTP {resp.status_code} without Location"
                    target = toggle_trailing_slash(target)
                    continue

            error = self._reject_reason(strategy, resp, text, min_html_length)
            if error:
                attempt.error = error
                return error

            attempt.ok = True
            return SourceDocument(
                url=url,
                html=text,
                strategy=strategy.name,
                final_url=target,
            )

    def _reject_reason(
        self,
        strategy: Strategy,
        resp: httpx.Response,
        text: str,
        min_html_length: int,
    ) -> str | None:
        if not resp.is_success:
            return f"HTTP {resp.status_code}"
        if strategy.kind == "external" and len(text) < self._config.min_external_length:
            return (
                "external scraper returned invalid response "
                f"(status {resp.status_code}, len {len(text)})"
            )
        if not looks_like_html(text):
            return "response is not HTML"
        if is_bot_challenge(text):
            return "bot challenge page"
        if len(text) < min_html_length:
            return f"response too short ({len(text)} < {min_html_length})"
        return None
