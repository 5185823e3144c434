"""
Tests for URL resolution against a document base.
"""

import pytest

from structured_markup.urls import has_scheme, resolve

BASE = "https://ex.com/a/b/page.html?q=1"


@pytest.mark.parametrize("candidate", [
    "https://other.org/x",
    "http://ex.com/",
    "mailto:jane@example.com",
    "tel:+15551234",
    "urn:isbn:0451450523",
])
def test_absolute_urls_are_unchanged(candidate):
    """Resolving something that already has a scheme is a no-op, whatever the base."""
    assert resolve(candidate, BASE) == candidate
    assert resolve(candidate, "https://elsewhere.net/") == candidate
    assert resolve(resolve(candidate, BASE), BASE) == candidate


@pytest.mark.parametrize("candidate, expected", [
    ("/x", "https://ex.com/x"),
    ("x", "https://ex.com/a/b/x"),
    ("../up", "https://ex.com/a/up"),
    ("//cdn.ex.com/img.png", "https://cdn.ex.com/img.png"),
    ("?page=2", "https://ex.com/a/b/page.html?page=2"),
    ("#top", "https://ex.com/a/b/page.html?q=1#top"),
])
def test_relative_forms(candidate, expected):
    assert resolve(candidate, BASE) == expected


def test_resolution_is_idempotent():
    once = resolve("../img/logo.png", BASE)
    assert resolve(once, BASE) == once


def test_no_base_returns_candidate():
    assert resolve("/x") == "/x"
    assert resolve("/x", None) == "/x"
    assert resolve("/x", "   ") == "/x"


def test_candidate_whitespace_only_trimmed_when_joined():
    assert resolve("  /x \n", "https://ex.com/") == "https://ex.com/x"
    assert resolve("  /x ", None) == "  /x "
    assert resolve(" https://other.org/ ", "https://ex.com/") == " https://other.org/ "


def test_bad_base_falls_back_to_candidate():
    """Resolution is best-effort and never raises."""
    assert resolve("/x", "not a url") == "/x"
    assert resolve("/x", "https://[::1/") == "/x"


def test_has_scheme():
    assert has_scheme("https://ex.com")
    assert has_scheme("mailto:a@b.c")
    assert not has_scheme("/relative")
    assert not has_scheme("//ex.com/x")
    assert not has_scheme("1abc:foo")
