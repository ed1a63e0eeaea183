"""Tests for scalar field extractors (title, poster, labels, synopsis, images)."""

from __future__ import annotations

from netvlyx.domain.templates import FieldRules, LabelRule, ScreenshotRules
from netvlyx.infrastructure.extraction.fields import (
    DEFAULT_TITLE,
    extract_fields,
    extract_metadata,
    extract_poster,
    extract_rating,
    extract_screenshots,
    extract_synopsis,
    extract_title,
    extract_trailer,
    extract_watch_online,
    image_src,
)
from netvlyx.infrastructure.html.selectors import page_text, parse_html

_LABELS = (
    LabelRule(label="Movie Name", field="movie_name"),
    LabelRule(label="Language", field="language"),
    LabelRule(label="Released? Year", field="release_year"),
    LabelRule(label="Size", field="size"),
)

_PAGE = """
<html><body>
<h1 class="entry-title">Iron Man (2008)</h1>
<div class="entry-content">
  <img src="data:image/gif;base64,AAAA" data-src="https://img.test/poster.jpg"/>
  <p><a href="https://www.imdb.com/title/tt0371746/">IMDb Rating: 7.9/10</a></p>
  <p>Movie Name: Iron Man</p>
  <p>Language: <strong>Hindi-English</strong></p>
  <p>Release Year: 2008</p>
  <p>Size: 400MB || 1.2GB</p>
  <h3>Movie-SYNOPSIS/PLOT:</h3>
  <p>Tony Stark   builds a suit.</p>
  <h3>Screenshots:</h3>
  <p><img src="https://blogger.googleusercontent.com/img/a.png"/></p>
  <p><img src="https://imgbb.top/b.png"/></p>
  <iframe src="https://www.youtube.com/embed/8ugaeA-nMTc"></iframe>
  <a class="watch" href="https://stream.test/w/1">Watch Online</a>
</div>
</body></html>
"""


def _rules(**overrides: object) -> FieldRules:
    base = dict(
        content_scope=(".entry-content",),
        poster=(".entry-content img",),
        labels=_LABELS,
        synopsis_markers=("Movie-SYNOPSIS/PLOT:",),
        synopsis_stops=("Screenshots:",),
        screenshots=ScreenshotRules(
            selectors=(".entry-content img",),
            other_markers=("imgbb.top",),
        ),
        watch_online=("a.watch",),
    )
    base.update(overrides)
    return FieldRules(**base)  # type: ignore[arg-type]


# ---------------------------------------------------------------------------
# Individual extractors
# ---------------------------------------------------------------------------


class TestTitleAndPoster:
    def test_title(self) -> None:
        assert extract_title(parse_html(_PAGE), _rules()) == "Iron Man (2008)"

    def test_title_default(self) -> None:
        doc = parse_html("<p>nothing</p>")
        assert extract_title(doc, _rules(title=(".missing",))) == DEFAULT_TITLE

    def test_poster_skips_data_uri(self) -> None:
        assert extract_poster(parse_html(_PAGE), _rules()) == "https://img.test/poster.jpg"

    def test_poster_exclusion_moves_to_next_selector(self) -> None:
        doc = parse_html(
            '<img class="a" src="https://imgbb.top/shot.png"/>'
            '<img class="b" src="https://img.test/p.jpg"/>'
        )
        rules = _rules(poster=("img.a", "img.b"), poster_exclude=("imgbb.top",))
        assert extract_poster(doc, rules) == "https://img.test/p.jpg"

    def test_image_src_srcset(self) -> None:
        doc = parse_html('<img srcset="https://i.test/1.jpg 1x, https://i.test/2.jpg 2x"/>')
        img = doc.select_one("img")
        assert img is not None
        assert image_src(img) == "https://i.test/1.jpg"


class TestRating:
    def test_rating_from_imdb_anchor(self) -> None:
        rating, link = extract_rating(parse_html(_PAGE))
        assert rating == "7.9/10"
        assert link == "https://www.imdb.com/title/tt0371746/"

    def test_rating_from_page_text(self) -> None:
        doc = parse_html('<p>Rating: 6.5/10</p><a href="https://imdb.com/title/tt1/">IMDb</a>')
        assert extract_rating(doc) == ("6.5/10", "https://imdb.com/title/tt1/")

    def test_no_imdb_anchor(self) -> None:
        assert extract_rating(parse_html("<p>7/10</p>")) == (None, None)


class TestMetadataLabels:
    def test_label_table(self) -> None:
        text = page_text(parse_html(_PAGE))
        meta = extract_metadata(text, _LABELS)
        assert meta.movie_name == "Iron Man"
        assert meta.language == "Hindi-English"
        assert meta.release_year == "2008"
        assert meta.size == "400MB || 1.2GB"
        assert meta.subtitle is None

    def test_first_matching_label_wins(self) -> None:
        labels = (
            LabelRule(label="Audio", field="language"),
            LabelRule(label="Language", field="language"),
        )
        meta = extract_metadata("Language: Tamil\nAudio: Hindi", labels)
        assert meta.language == "Hindi"


class TestSynopsis:
    def test_between_marker_and_stop(self) -> None:
        text = page_text(parse_html(_PAGE))
        synopsis = extract_synopsis(text, ("Movie-SYNOPSIS/PLOT:",), ("Screenshots:",))
        assert synopsis == "Tony Stark builds a suit."

    def test_no_marker(self) -> None:
        assert extract_synopsis("plain text", (), ()) == ""
        assert extract_synopsis("plain text", ("PLOT:",), ()) == ""


class TestScreenshots:
    def test_trusted_host_wins(self) -> None:
        doc = parse_html(_PAGE)
        scope = doc.select_one(".entry-content")
        assert scope is not None
        rules = _rules()
        images, trusted = extract_screenshots(
            doc, scope, rules.screenshots, "https://img.test/poster.jpg"
        )
        assert trusted is True
        assert images == ["https://blogger.googleusercontent.com/img/a.png"]

    def test_other_markers_without_trusted(self) -> None:
        doc = parse_html('<div><img src="https://imgbb.top/1.png"/><img src="https://x.test/2.png"/></div>')
        rules = ScreenshotRules(selectors=("img",), other_markers=("imgbb.top",))
        images, trusted = extract_screenshots(doc, doc, rules, None)
        assert images == ["https://imgbb.top/1.png"]
        assert trusted is False

    def test_keep_all(self) -> None:
        doc = parse_html(
            '<div class="ss-img"><img src="https://a.test/1.png"/>'
            '<img src="https://a.test/1.png"/><img src="https://a.test/2.png"/></div>'
        )
        rules = ScreenshotRules(selectors=("div.ss-img img",), keep_all=True)
        images, trusted = extract_screenshots(doc, doc, rules, None)
        assert images == ["https://a.test/1.png", "https://a.test/2.png"]
        assert trusted is False


class TestTrailerAndWatchOnline:
    def test_trailer_from_iframe(self) -> None:
        trailer = extract_trailer(parse_html(_PAGE))
        assert trailer is not None
        assert trailer.video_id == "8ugaeA-nMTc"
        assert trailer.embed_url == "https://www.youtube.com/embed/8ugaeA-nMTc"
        assert trailer.thumbnail.endswith("/8ugaeA-nMTc/maxresdefault.jpg")

    def test_no_trailer(self) -> None:
        assert extract_trailer(parse_html("<p>none</p>")) is None

    def test_watch_online(self) -> None:
        assert extract_watch_online(parse_html(_PAGE), ("a.watch",)) == "https://stream.test/w/1"
        assert extract_watch_online(parse_html(_PAGE), ()) is None


# ---------------------------------------------------------------------------
# Combined
# ---------------------------------------------------------------------------


class TestExtractFields:
    def test_record_populated(self) -> None:
        record = extract_fields(parse_html(_PAGE), _rules())
        assert record.title == "Iron Man (2008)"
        assert record.external_rating == "7.9/10"
        assert record.metadata.language == "Hindi-English"
        assert record.synopsis == "Tony Stark builds a suit."
        assert record.has_trusted_images is True
        assert record.download_groups == []
        assert record.episodes == []

    def test_empty_page_does_not_raise(self) -> None:
        record = extract_fields(parse_html(""), _rules())
        assert record.title == DEFAULT_TITLE
        assert record.images == []
        assert record.synopsis == ""
