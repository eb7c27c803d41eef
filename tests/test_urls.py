"""
Unit tests for URL helpers.
"""

import pytest

from carddav_sync.dav.urls import fuzzy_url_equals, resolve_url


class TestResolveUrl:
    def test_server_relative_href(self):
        assert (
            resolve_url("https://dav.example.com/", "/books/a.vcf")
            == "https://dav.example.com/books/a.vcf"
        )

    def test_absolute_href_unchanged(self):
        href = "https://other.example.com/books/a.vcf"
        assert resolve_url("https://dav.example.com/", href) == href


class TestFuzzyUrlEquals:
    @pytest.mark.parametrize(
        "a, b",
        [
            ("https://dav.example.com/books/", "https://dav.example.com/books"),
            ("http://dav.example.com/books/", "https://dav.example.com/books/"),
            ("https://DAV.example.com/books/", "https://dav.example.com/books/"),
            ("https://dav.example.com:443/books/", "https://dav.example.com/books/"),
            ("https://dav.example.com/my%20books/", "https://dav.example.com/my books"),
            ("https://dav.example.com/books/", "/books"),
        ],
    )
    def test_equivalent(self, a, b):
        assert fuzzy_url_equals(a, b)

    @pytest.mark.parametrize(
        "a, b",
        [
            ("https://dav.example.com/books/", "https://dav.example.com/other/"),
            ("https://dav.example.com/books/", "https://evil.example.com/books/"),
            ("https://dav.example.com:8443/books/", "https://dav.example.com/books/"),
        ],
    )
    def test_different(self, a, b):
        assert not fuzzy_url_equals(a, b)
