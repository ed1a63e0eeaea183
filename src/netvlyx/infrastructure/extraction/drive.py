"""Parser for drive pages: hoster buttons per episode, or one movie list."""

from __future__ import annotations

import re

import structlog
from bs4 import BeautifulSoup, Tag

from netvlyx.domain.entities import DriveEpisode, DriveRecord, DriveServer
from netvlyx.domain.templates import DriveRules, FieldRules
from netvlyx.infrastructure.extraction.fields import extract_title
from netvlyx.infrastructure.extraction.links import is_placeholder_url
from netvlyx.infrastructure.html.selectors import (
    attr,
    collapse_ws,
    element_text,
    is_tag,
    matches,
    next_tags,
    select_items,
)

log = structlog.get_logger(__name__)

DRIVE_EPISODE_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"Episodes?:?\s*(\d+)", re.IGNORECASE),
    re.compile(r"-:Episode:\s*(\d+):-", re.IGNORECASE),
    re.compile(r"Episode\s*(\d+)", re.IGNORECASE),
)

# Button text -> canonical server name, first match wins.
_SERVER_NAME_RULES: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"\bHub[\s-]?Cloud\b", re.IGNORECASE), "Hub-Cloud"),
    (re.compile(r"V-Cloud"), "V-Cloud"),
    (re.compile(r"GDToT"), "GDToT"),
    (re.compile(r"\bGDFlix\b", re.IGNORECASE), "GDFlix"),
    (re.compile(r"\bG[\s-]?Direct\b|\bInstant\b", re.IGNORECASE), "G-Direct"),
    (re.compile(r"\bFilePress\b", re.IGNORECASE), "Filepress"),
    (re.compile(r"DropGalaxy"), "DropGalaxy"),
    (re.compile(r"\bG[\s-]?Drive\b", re.IGNORECASE), "G-Drive"),
)

_MEANINGFUL_RE = re.compile(
    r"G-Direct|V-Cloud|Hub-Cloud|HubCloud|GDFlix|GDToT|Filepress|DropGalaxy|G-Drive|Download",
    re.IGNORECASE,
)

ALTERNATIVE_HOSTS: tuple[tuple[str, str], ...] = (
    ("gofile.io", "GoFile"),
    ("1fichier.com", "1Fichier"),
    ("vikingfile.com", "VikingFile"),
    ("megaup.net", "MegaUp"),
    ("mediafire.com", "MediaFire"),
    ("dropbox.com", "Dropbox"),
)

_EMOJI_RE = re.compile(r"[⚡\U0001F680]")


def extract_server_name(button_text: str) -> str:
    """Canonical hoster name for a button label (``"⚡ V-Cloud [Resumable]"`` -> ``"V-Cloud"``)."""
    text = collapse_ws(_EMOJI_RE.sub("", button_text))
    for pattern, name in _SERVER_NAME_RULES:
        if pattern.search(text):
            return name
    bracket = re.search(r"\[(.*?)\]", text)
    if bracket and bracket.group(1).strip():
        return bracket.group(1).strip()
    paren = re.search(r"\((.*?)\)", text)
    if paren and paren.group(1).strip():
        return paren.group(1).strip()
    cleaned = re.sub(r"\[.*?\]|\(.*?\)", "", text).strip()
    return cleaned or "Download"


def drive_episode_number(text: str) -> int | None:
    for pattern in DRIVE_EPISODE_PATTERNS:
        m = pattern.search(text)
        if m:
            number = int(m.group(1))
            return number if number > 0 else None
    return None


def _button_text(anchor: Tag) -> str:
    text = element_text(anchor)
    if not text:
        button = anchor.find("button")
        text = element_text(button) if button is not None else ""
    return text


def _server(anchor: Tag) -> DriveServer | None:
    url = attr(anchor, "href")
    text = _button_text(anchor)
    if is_placeholder_url(url) or not text:
        return None
    button = anchor.find("button")
    return DriveServer(
        name=extract_server_name(text),
        url=url,
        style=attr(button, "style") if button is not None else "",
    )


def _append_unique(servers: list[DriveServer], server: DriveServer | None) -> None:
    if server is not None and all(s.url != server.url for s in servers):
        servers.append(server)


class DriveParser:
    """Turn a drive page into a :class:`DriveRecord`."""

    def __init__(self, rules: DriveRules, fields: FieldRules) -> None:
        self._rules = rules
        self._fields = fields

    def parse(self, doc: BeautifulSoup) -> DriveRecord:
        title = extract_title(doc, self._fields)

        episodes = self._episodes(doc)
        if episodes:
            return DriveRecord(title=title, kind="episode", episodes=episodes)

        servers = self._movie_servers(doc)
        alternatives = self._alternatives(doc)
        if not servers:
            servers = self._fallback_servers(doc)
            if servers:
                log.debug("drive_fallback_servers", count=len(servers))
        return DriveRecord(
            title=title,
            kind="movie",
            servers=servers,
            alternatives=alternatives,
        )

    def _episodes(self, doc: BeautifulSoup) -> list[DriveEpisode]:
        by_number: dict[int, DriveEpisode] = {}
        for header in doc.select(self._rules.episode_heading):
            number = drive_episode_number(element_text(header))
            if number is None:
                continue
            servers: list[DriveServer] = []
            for anchor in header.select("a[href]"):
                _append_unique(servers, _server(anchor))
            walked = 0
            for sibling in next_tags(header):
                if walked >= self._rules.sibling_window:
                    break
                if matches(sibling, self._rules.episode_heading):
                    break
                walked += 1
                if sibling.name == "hr":
                    continue
                if is_tag(sibling, "a") and sibling.get("href"):
                    _append_unique(servers, _server(sibling))
                for anchor in sibling.select("a[href]"):
                    _append_unique(servers, _server(anchor))
            if not servers:
                continue
            episode = by_number.setdefault(number, DriveEpisode(episode_number=number))
            for server in servers:
                _append_unique(episode.servers, server)
        return [by_number[n] for n in sorted(by_number)]

    def _movie_servers(self, doc: BeautifulSoup) -> list[DriveServer]:
        servers: list[DriveServer] = []
        for anchor in select_items(doc, ", ".join(self._rules.content_links)):
            text = _button_text(anchor)
            if text and (_MEANINGFUL_RE.search(text) or anchor.find("button") is not None):
                _append_unique(servers, _server(anchor))
        return servers

    def _alternatives(self, doc: BeautifulSoup) -> list[DriveServer]:
        alternatives: list[DriveServer] = []
        for anchor in select_items(doc, ", ".join(self._rules.alternative_links)):
            url = attr(anchor, "href")
            text = element_text(anchor)
            if is_placeholder_url(url) or not text:
                continue
            for host, name in ALTERNATIVE_HOSTS:
                if host in url:
                    _append_unique(alternatives, DriveServer(name=name, url=url))
                    break
        return alternatives

    def _fallback_servers(self, doc: BeautifulSoup) -> list[DriveServer]:
        servers: list[DriveServer] = []
        for anchor in doc.select("a[href]"):
            text = _button_text(anchor)
            if text and (_MEANINGFUL_RE.search(text) or anchor.find("button") is not None):
                _append_unique(servers, _server(anchor))
        return servers
