"""Tests for channelkit.packaging.filenames."""

import pytest

from channelkit.packaging.filenames import (
    image_archive_name,
    image_extension,
    sanitize_filename,
)


class TestSanitizeFilename:
    def test_replaces_and_collapses(self):
        assert sanitize_filename("Hand-Thrown  Mug (12 oz)!") == "hand_thrown_mug_12_oz_"

    def test_caps_length(self):
        assert len(sanitize_filename("a" * 80)) == 50

    @pytest.mark.parametrize(
        "name",
        [
            "Hand-Thrown Ceramic Coffee Mug",
            "  ___weird///name***  ",
            "Ünïcödé Tïtle — with dash",
            "x" * 49 + "__y",
            "",
        ],
    )
    def test_idempotent(self, name):
        once = sanitize_filename(name)
        assert sanitize_filename(once) == once

    def test_none_safe(self):
        assert sanitize_filename(None) == ""


class TestImageExtension:
    @pytest.mark.parametrize(
        "url,expected",
        [
            ("https://cdn.example.com/a.png", "png"),
            ("https://cdn.example.com/a.JPEG", "jpeg"),
            ("https://cdn.example.com/a.webp?w=1200", "webp"),
            ("https://cdn.example.com/a.gif#frag", "gif"),
            ("https://cdn.example.com/image", "jpg"),
            ("https://cdn.example.com/a.png.html", "jpg"),
        ],
    )
    def test_sniffed_from_url(self, url, expected):
        assert image_extension(url) == expected

    def test_archive_name(self):
        assert image_archive_name(3, "png") == "images/image_3.png"
