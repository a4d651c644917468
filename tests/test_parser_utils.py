"""
Parser Utility Tests

Tests for URL normalization, video URL recognition, label cleanup and
media/link extraction.
"""

import pytest

from media_ingest.utils.parser import (
    canonical_video_url,
    clean_label,
    extract,
    extract_links,
)
from media_ingest.utils.urls import is_http_url, normalize_url


# ==========================================
# Tests for normalize_url
# ==========================================


def test_normalize_url_basic():
    assert normalize_url("http://example.com/page1", "page2.html") == (
        "http://example.com/page2.html"
    )


def test_normalize_url_remove_fragment_and_tracking():
    normalized = normalize_url(
        "http://example.com", "http://example.com/item?id=123&utm_source=x#frag"
    )
    assert normalized == "http://example.com/item?id=123"


def test_normalize_url_lowercase_host_and_root_path():
    assert normalize_url("http://EXAMPLE.COM", "http://EXAMPLE.COM") == (
        "http://example.com/"
    )


@pytest.mark.parametrize("link", ["mailto:a@example.com", "javascript:void(0)", "", None])
def test_normalize_url_rejects_non_http(link):
    assert normalize_url("http://example.com", link) is None


def test_normalize_url_too_long():
    assert normalize_url("http://example.com", "/" + "a" * 3000) is None


def test_is_http_url():
    assert is_http_url("https://www.youtube.com/embed/abc123")
    assert not is_http_url("/relative/path")
    assert not is_http_url("")
    assert not is_http_url(None)


# ==========================================
# Tests for canonical_video_url
# ==========================================


@pytest.mark.parametrize(
    "raw",
    [
        "https://www.youtube.com/embed/dQw4w9WgXcQ",
        "https://www.youtube.com/watch?v=dQw4w9WgXcQ&t=10",
        "https://youtu.be/dQw4w9WgXcQ",
        "//www.youtube.com/embed/dQw4w9WgXcQ?rel=0",
        "https://m.youtube.com/shorts/dQw4w9WgXcQ",
        "https://www.youtube-nocookie.com/embed/dQw4w9WgXcQ",
    ],
)
def test_youtube_variants_collapse_to_embed(raw):
    assert canonical_video_url("https://site.com/page", raw) == (
        "https://www.youtube.com/embed/dQw4w9WgXcQ"
    )


def test_vimeo_urls():
    assert canonical_video_url("https://a.com", "https://vimeo.com/123456") == (
        "https://player.vimeo.com/video/123456"
    )
    assert canonical_video_url(
        "https://a.com", "https://player.vimeo.com/video/987654?h=abc"
    ) == "https://player.vimeo.com/video/987654"


def test_direct_video_file_resolved():
    assert canonical_video_url("https://a.com/exercises/", "media/squat.mp4") == (
        "https://a.com/exercises/media/squat.mp4"
    )


@pytest.mark.parametrize(
    "raw",
    [
        "https://www.youtube.com/channel/UC123",
        "https://www.youtube.com/watch?v=ab",
        "https://example.com/page.html",
        "javascript:play()",
        None,
    ],
)
def test_non_video_urls(raw):
    assert canonical_video_url("https://a.com", raw) is None


# ==========================================
# Tests for clean_label
# ==========================================


def test_clean_label_strips_site_suffix():
    assert clean_label("Dumbbell Bench Press | Muscle & Strength") == (
        "Dumbbell Bench Press"
    )
    assert clean_label("Barbell Back Squat - Video Guide") == "Barbell Back Squat"


def test_clean_label_hyphens_and_whitespace():
    assert clean_label("  Push-Up \n  Variation ") == "Push Up Variation"


@pytest.mark.parametrize(
    "text", ["YouTube video player", "Watch Video", "", "   ", "42", "https://x.com"]
)
def test_clean_label_rejects_implausible(text):
    assert clean_label(text) is None


# ==========================================
# Tests for extract
# ==========================================


def test_extract_pairs_video_with_block_heading():
    html = """
    <html><head><title>Leg Exercises | Site</title></head><body>
      <article>
        <h2>Goblet Squat</h2>
        <iframe src="https://www.youtube.com/embed/AAAAA11111" title="YouTube video player"></iframe>
      </article>
      <article>
        <h2>Walking Lunge</h2>
        <iframe src="https://www.youtube.com/embed/BBBBB22222"></iframe>
      </article>
    </body></html>
    """
    result = extract(html, "https://site.com/legs")
    pairs = {(c.name, c.video_url) for c in result.candidates}
    assert pairs == {
        ("Goblet Squat", "https://www.youtube.com/embed/AAAAA11111"),
        ("Walking Lunge", "https://www.youtube.com/embed/BBBBB22222"),
    }
    assert all(c.source_url == "https://site.com/legs" for c in result.candidates)


def test_extract_figcaption_and_data_attribute():
    html = """
    <section>
      <figure>
        <video><source src="/clips/deadlift.mp4" type="video/mp4"></video>
        <figcaption>Romanian Deadlift</figcaption>
      </figure>
      <div data-exercise="Plank">
        <iframe data-src="https://player.vimeo.com/video/555555"></iframe>
      </div>
    </section>
    """
    result = extract(html, "https://site.com/core/")
    pairs = {(c.name, c.video_url) for c in result.candidates}
    assert ("Romanian Deadlift", "https://site.com/clips/deadlift.mp4") in pairs
    assert ("Plank", "https://player.vimeo.com/video/555555") in pairs


def test_extract_anchor_text_labels_video_link():
    html = '<ul><li><a href="https://www.youtube.com/watch?v=CCCCC33333">Kettlebell Swing</a></li></ul>'
    result = extract(html, "https://site.com/")
    assert [(c.name, c.video_url) for c in result.candidates] == [
        ("Kettlebell Swing", "https://www.youtube.com/embed/CCCCC33333")
    ]


def test_single_video_page_uses_page_title():
    html = """
    <html><head><title>Bulgarian Split Squat | Muscle & Strength</title></head>
    <body><div class="player">
      <iframe src="https://www.youtube.com/embed/DDDDD44444" title="YouTube video player"></iframe>
    </div></body></html>
    """
    result = extract(html, "https://site.com/exercises/bss")
    assert [(c.name, c.video_url) for c in result.candidates] == [
        ("Bulgarian Split Squat", "https://www.youtube.com/embed/DDDDD44444")
    ]


def test_unlabelled_videos_on_multi_video_page_discarded():
    html = """
    <html><head><title>Videos</title></head><body><div>
      <iframe src="https://www.youtube.com/embed/EEEEE55555"></iframe>
      <iframe src="https://www.youtube.com/embed/FFFFF66666"></iframe>
    </div></body></html>
    """
    result = extract(html, "https://site.com/videos")
    assert result.candidates == []


def test_isolated_names_produce_nothing():
    html = "<article><h2>Barbell Row</h2><p>No video here.</p></article>"
    assert extract(html, "https://site.com/").candidates == []


def test_extract_links_resolved_and_deduplicated():
    html = """
    <a href="/one">One</a>
    <a href="/one#again">One again</a>
    <a href="http://other.com/x">Other</a>
    <a href="mailto:test@example.com">Email</a>
    <a href="javascript:void(0)">JS</a>
    """
    result = extract(html, "http://example.com/dir/")
    assert result.links == ["http://example.com/one", "http://other.com/x"]


def test_extract_links_limit():
    html = "".join(f'<a href="/page{i}">Link {i}</a>' for i in range(20))
    assert len(extract_links("http://example.com", html, limit=5)) == 5


def test_extract_links_host_filter_applies_before_limit():
    offsite = "".join(f'<a href="https://social{i}.com/">s{i}</a>' for i in range(100))
    html = offsite + '<a href="/b">B</a><a href="/c">C</a>'

    links = extract_links("http://site.com/a", html, limit=1, host="site.com")

    assert links == ["http://site.com/b"]


@pytest.mark.parametrize("content", ["", "   ", "\x00\x00", "{\"json\": true}"])
def test_unparseable_or_empty_content_yields_nothing(content):
    result = extract(content, "http://example.com/")
    assert result.candidates == []
    assert result.links == []
