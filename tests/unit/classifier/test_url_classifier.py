# tests/unit/classifier/test_url_classifier.py — v1
"""Tests for classifier/url_classifier.py."""

from __future__ import annotations

import pytest

from linkpreview.classifier.url_classifier import classify, is_url, youtube_thumbnail_url
from linkpreview.core.errors import InvalidLinkError
from linkpreview.core.models import ResolutionKind


class TestYouTube:
    def test_short_form(self):
        found = classify("check this out https://youtu.be/abc123 nice")
        assert found.kind is ResolutionKind.YOUTUBE_THUMBNAIL
        assert found.url == "https://www.youtube.com/watch?v=abc123"
        assert found.video_id == "abc123"

    def test_long_form(self):
        found = classify("https://www.youtube.com/watch?v=dQw4w9WgXcQ is great")
        assert found.kind is ResolutionKind.YOUTUBE_THUMBNAIL
        assert found.url == "https://www.youtube.com/watch?v=dQw4w9WgXcQ"

    def test_id_stops_at_any_whitespace(self):
        found = classify("https://youtu.be/xyz\nnext line")
        assert found.video_id == "xyz"

    def test_youtube_wins_over_other_links(self):
        found = classify("https://example.com/a https://youtu.be/abc123")
        assert found.kind is ResolutionKind.YOUTUBE_THUMBNAIL

    def test_empty_id_is_not_found(self):
        assert classify("youtu.be/ nothing here") is None


class TestGenericArticle:
    def test_single_url(self):
        found = classify("see https://example.com/page?x=1 and more")
        assert found.kind is ResolutionKind.GENERIC_ARTICLE
        assert found.url == "https://example.com/page?x=1"

    def test_last_match_wins(self):
        found = classify("first https://example.com/one then http://www.other.org/two")
        assert found.url == "http://www.other.org/two"

    def test_non_matching_tokens_are_skipped(self):
        found = classify("https://example.com/ok and http://broken trailing")
        assert found.url == "https://example.com/ok"

    def test_http_without_valid_url(self):
        assert classify("http is a protocol") is None


class TestNotFound:
    def test_plain_text(self):
        assert classify("no links here") is None

    def test_empty(self):
        assert classify("") is None


class TestStrict:
    def test_valid_article(self):
        found = classify("https://example.com/story", strict=True)
        assert found.kind is ResolutionKind.GENERIC_ARTICLE
        assert found.url == "https://example.com/story"

    def test_valid_youtube(self):
        found = classify("https://youtu.be/abc123", strict=True)
        assert found.kind is ResolutionKind.YOUTUBE_THUMBNAIL

    def test_rejects_text(self):
        with pytest.raises(InvalidLinkError):
            classify("not a url", strict=True)

    def test_rejects_embedded_url(self):
        with pytest.raises(InvalidLinkError):
            classify("see https://example.com", strict=True)

    def test_invalid_link_is_value_error(self):
        with pytest.raises(ValueError):
            classify("ftp://example.com/file", strict=True)


class TestIsUrl:
    @pytest.mark.parametrize("url", [
        "https://example.com",
        "http://www.example.co.uk/path?q=1#frag",
        "http://127.0.0.1:8080/x",
        "http://localhost:8000",
    ])
    def test_valid(self, url):
        assert is_url(url) is True

    @pytest.mark.parametrize("url", [
        "", "not a url", "example.com", "mailto:a@b.com",
        "https://", "https://exa mple.com", "http://nodot",
    ])
    def test_invalid(self, url):
        assert is_url(url) is False


def test_thumbnail_url():
    assert youtube_thumbnail_url("abc123") == "https://img.youtube.com/vi/abc123/hqdefault.jpg"
