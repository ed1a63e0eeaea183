"""JSON presenter for extraction results.

Turns domain records into plain dicts with the camelCase keys the
frontend consumes. Debug output is always a sibling ``debug`` key and
never changes the shape of the primary payload.
"""

from __future__ import annotations

from typing import Any

from netvlyx.domain.entities import (
    ContentMetadata,
    ContentRecord,
    DebugReport,
    DownloadGroup,
    DownloadLink,
    DriveRecord,
    DriveServer,
    EpisodeRecord,
    FetchAttempt,
    HosterChoice,
    LinkPageRecord,
    ParsedRecord,
    ResolvedDownload,
    TitleMetadata,
    Trailer,
    VlyxRecord,
)


def _link(link: DownloadLink) -> dict[str, Any]:
    out: dict[str, Any] = {
        "label": link.label,
        "url": link.url,
        "server": link.server,
        "season": link.season,
        "isStreaming": link.is_streaming,
        "status": link.status.value,
        "speed": link.speed,
    }
    if link.style:
        out["style"] = link.style
    return out


def _group(group: DownloadGroup) -> dict[str, Any]:
    return {
        "title": group.title,
        "season": group.season,
        "qualityVariants": [
            {
                "quality": v.quality,
                "size": v.size,
                "codec": v.codec,
                "links": [_link(link) for link in v.links],
            }
            for v in group.quality_variants
        ],
    }


def _episode(episode: EpisodeRecord) -> dict[str, Any]:
    return {
        "episodeNumber": episode.episode_number,
        "title": episode.title,
        "description": episode.description,
        "duration": episode.duration,
        "downloadLinks": [_link(link) for link in episode.download_links],
    }


def _metadata(meta: ContentMetadata) -> dict[str, str | None]:
    return {
        "movieName": meta.movie_name,
        "seriesName": meta.series_name,
        "season": meta.season,
        "episode": meta.episode,
        "language": meta.language,
        "releaseYear": meta.release_year,
        "quality": meta.quality,
        "size": meta.size,
        "format": meta.format,
        "subtitle": meta.subtitle,
    }


def _trailer(trailer: Trailer | None) -> dict[str, str] | None:
    if trailer is None:
        return None
    return {
        "videoId": trailer.video_id,
        "embedUrl": trailer.embed_url,
        "thumbnail": trailer.thumbnail,
    }


def present_content(record: ContentRecord) -> dict[str, Any]:
    """Render a page-family record. Empty groups render as ``[]``, never null."""
    return {
        "title": record.title,
        "posterUrl": record.poster_url,
        "externalRating": record.external_rating,
        "externalRatingLink": record.external_rating_link,
        "metadata": _metadata(record.metadata),
        "synopsis": record.synopsis,
        "images": list(record.images),
        "hasTrustedImages": record.has_trusted_images,
        "downloadGroups": [_group(g) for g in record.download_groups],
        "episodes": [_episode(e) for e in record.episodes],
        "trailer": _trailer(record.trailer),
        "watchOnlineUrl": record.watch_online_url,
    }


def _server(server: DriveServer) -> dict[str, str]:
    out = {"name": server.name, "url": server.url}
    if server.style:
        out["style"] = server.style
    return out


def present_drive(record: DriveRecord) -> dict[str, Any]:
    if record.kind == "episode":
        return {
            "title": record.title,
            "type": "episode",
            "episodes": [
                {
                    "episodeNumber": e.episode_number,
                    "servers": [_server(s) for s in e.servers],
                }
                for e in record.episodes
            ],
        }
    return {
        "title": record.title,
        "type": "movie",
        "movie": {
            "servers": [_server(s) for s in record.servers],
            "alternatives": [_server(s) for s in record.alternatives],
        },
    }


def present_link_page(record: LinkPageRecord) -> dict[str, Any]:
    return {
        "linkData": [
            {
                "title": s.title,
                "episodeNumber": s.episode_number,
                "quality": s.quality,
                "links": [
                    {
                        "name": b.name,
                        "url": b.url,
                        "isVCloud": b.is_vcloud,
                        "isHubCloud": b.is_hubcloud,
                    }
                    for b in s.links
                ],
            }
            for s in record.sections
        ],
        "type": record.kind,
        "totalEpisodes": record.total_episodes,
    }


def _choice(choice: HosterChoice) -> dict[str, Any]:
    out: dict[str, Any] = {"quality": choice.quality}
    for kind, url in choice.links.items():
        out[f"{kind}Link"] = url
    out["preferredLink"] = choice.preferred_url
    out["linkType"] = choice.link_type
    return out


def present_vlyx(record: VlyxRecord) -> dict[str, Any]:
    """Hoster pick result; a page without known hosters renders ``success: false``."""
    if record.kind == "none":
        return {
            "success": False,
            "error": "No supported download links found on the page",
            "originalUrl": record.original_url,
        }
    out: dict[str, Any] = {
        "success": True,
        "type": record.kind,
        "qualities": [_choice(c) for c in record.choices],
        "originalUrl": record.original_url,
    }
    direct = record.direct
    if direct is not None:
        out["directLink"] = direct.preferred_url
        out["linkType"] = direct.link_type
    return out


def present_record(record: ParsedRecord) -> dict[str, Any]:
    if isinstance(record, DriveRecord):
        return present_drive(record)
    if isinstance(record, LinkPageRecord):
        return present_link_page(record)
    if isinstance(record, VlyxRecord):
        return present_vlyx(record)
    return present_content(record)


def _attempt(attempt: FetchAttempt) -> dict[str, Any]:
    return {
        "strategy": attempt.strategy,
        "fetchUrl": attempt.fetch_url,
        "status": attempt.status,
        "ok": attempt.ok,
        "error": attempt.error,
        "finalUrl": attempt.final_url,
        "redirected": attempt.redirected,
        "bytes": attempt.bytes,
        "externalMethod": attempt.external_method,
        "titleHeader": attempt.title_header,
    }


def present_debug(report: DebugReport) -> dict[str, Any]:
    out: dict[str, Any] = {
        "requestedUrl": report.requested_url,
        "finalUrl": report.final_url,
        "strategy": report.strategy,
        "attempts": [_attempt(a) for a in report.attempts],
        "htmlLength": report.html_length,
        "selectorCounts": report.selector_counts,
        "parsedSectionsCount": report.parsed_sections_count,
        "totalParsedLinks": report.total_parsed_links,
        "sampleHeaders": list(report.sample_headers),
        "sampleLinks": [{"text": s.text, "href": s.href} for s in report.sample_links],
        "htmlPreview": report.html_preview,
    }
    if report.note:
        out["note"] = report.note
    return out


def present_failure(message: str, family: str) -> dict[str, Any]:
    """Error body for a failed fetch; drive pages keep their movie shape."""
    if family == "drive":
        return {
            "error": message,
            "type": "movie",
            "title": "Unknown",
            "movie": {"servers": []},
        }
    return {"error": message}


def present_metadata(meta: TitleMetadata) -> dict[str, Any]:
    return {
        "title": meta.title,
        "rating": meta.rating,
        "poster": meta.poster,
        "overview": meta.overview,
        "cast": [
            {
                "name": c.name,
                "character": c.character,
                "profileImage": c.profile_image,
            }
            for c in meta.cast
        ],
        "trailerKey": meta.trailer_key,
        "contentType": meta.content_type,
    }


def present_download(resolved: ResolvedDownload) -> dict[str, Any]:
    return {
        "downloadUrl": resolved.download_url,
        "sourceUrl": resolved.source_url,
        "method": resolved.method,
        "steps": list(resolved.steps),
    }
