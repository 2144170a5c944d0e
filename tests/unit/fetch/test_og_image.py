# tests/unit/fetch/test_og_image.py — v1
"""Tests for fetch/og_image.py."""

from __future__ import annotations

import pytest

from linkpreview.core.errors import NoImageFound
from linkpreview.fetch.og_image import extract_og_image


class TestExtractOgImage:
    def test_found(self):
        html = '<html><head><meta property="og:image" content="https://img/x.jpg"></head></html>'
        assert extract_og_image(html) == "https://img/x.jpg"

    def test_first_tag_wins(self):
        html = (
            '<meta property="og:image" content="https://img/1.jpg">'
            '<meta property="og:image" content="https://img/2.jpg">'
        )
        assert extract_og_image(html) == "https://img/1.jpg"

    def test_name_attribute_is_not_property(self):
        html = '<meta name="og:image" content="https://img/x.jpg">'
        with pytest.raises(NoImageFound):
            extract_og_image(html, "https://example.com")

    def test_missing(self):
        with pytest.raises(NoImageFound, match="no og:image"):
            extract_og_image("<html><head><title>x</title></head></html>", "https://example.com")

    def test_empty_content(self):
        with pytest.raises(NoImageFound, match="no content"):
            extract_og_image('<meta property="og:image" content="  ">')

    def test_other_og_tags_ignored(self):
        html = (
            '<meta property="og:title" content="Title">'
            '<meta property="og:image" content="/relative.png">'
        )
        assert extract_og_image(html) == "/relative.png"

    def test_malformed_html_still_parses(self):
        html = '<html><head><meta property="og:image" content="https://img/x.jpg"><body><div>'
        assert extract_og_image(html) == "https://img/x.jpg"
