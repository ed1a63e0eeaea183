"""TMDB API client: async httpx implementation of the metadata lookup port."""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from netvlyx.domain.entities import CastMember, TitleMetadata

log = structlog.get_logger(__name__)

_BASE_URL = "https://api.themoviedb.org/3"
_POSTER_BASE = "https://image.tmdb.org/t/p/w500"
_PROFILE_BASE = "https://image.tmdb.org/t/p/w185"
_MAX_CAST = 10


class HttpxTmdbClient:
    """Async TMDB client using httpx.

    Implements ``MetadataLookupPort`` from domain.ports.metadata.
    """

    def __init__(
        self,
        *,
        api_key: str,
        http_client: httpx.AsyncClient,
        timeout_seconds: float = 10.0,
    ) -> None:
        self._api_key = api_key
        self._http = http_client
        self._timeout = timeout_seconds

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _params(self, **extra: Any) -> dict[str, Any]:
        return {"api_key": self._api_key, "language": "en-US", **extra}

    async def _get(self, path: str, **extra: Any) -> dict[str, Any] | None:
        """GET request with error handling. Returns parsed JSON or None."""
        url = f"{_BASE_URL}{path}"
        try:
            resp = await self._http.get(
                url,
                params=self._params(**extra),
                timeout=self._timeout,
                follow_redirects=True,
            )
            if resp.status_code == 401:
                log.error("tmdb_api_key_invalid", status=401)
                return None
            if resp.status_code == 404:
                log.debug("tmdb_resource_not_found", path=path)
                return None
            resp.raise_for_status()
            return resp.json()
        except httpx.HTTPStatusError:
            log.warning("tmdb_http_error", path=path, exc_info=True)
            return None
        except httpx.HTTPError:
            log.warning("tmdb_network_error", path=path, exc_info=True)
            return None

    @staticmethod
    def _image_url(base: str, path: str | None) -> str | None:
        if not path:
            return None
        return f"{base}{path}"

    @staticmethod
    def _trailer_key(details: dict[str, Any]) -> str | None:
        videos = details.get("videos", {}).get("results", [])
        youtube = [v for v in videos if v.get("site") == "YouTube" and v.get("key")]
        for video in youtube:
            if video.get("type") == "Trailer":
                return video["key"]
        return youtube[0]["key"] if youtube else None

    def _cast(self, details: dict[str, Any]) -> list[CastMember]:
        people = details.get("credits", {}).get("cast", [])[:_MAX_CAST]
        return [
            CastMember(
                name=person.get("name", ""),
                character=person.get("character", ""),
                profile_image=self._image_url(_PROFILE_BASE, person.get("profile_path")),
            )
            for person in people
            if person.get("name")
        ]

    # ------------------------------------------------------------------
    # Public API (MetadataLookupPort)
    # ------------------------------------------------------------------

    async def lookup(self, imdb_id: str) -> TitleMetadata | None:
        """Resolve an IMDb ID via ``/find`` then fetch details with credits and videos."""
        found = await self._get(f"/find/{imdb_id}", external_source="imdb_id")
        if found is None:
            return None

        for key, content_type in (("movie_results", "movie"), ("tv_results", "tv")):
            results = found.get(key) or []
            if results:
                tmdb_id = results[0].get("id")
                break
        else:
            log.debug("tmdb_imdb_id_not_found", imdb_id=imdb_id)
            return None

        details = await self._get(
            f"/{content_type}/{tmdb_id}",
            append_to_response="credits,videos",
        )
        if details is None:
            return None

        vote = details.get("vote_average")
        return TitleMetadata(
            title=details.get("title") or details.get("name") or "",
            rating=f"{vote:.1f}" if isinstance(vote, (int, float)) and vote else None,
            poster=self._image_url(_POSTER_BASE, details.get("poster_path")),
            overview=details.get("overview", ""),
            cast=self._cast(details),
            trailer_key=self._trailer_key(details),
            content_type=content_type,
        )
