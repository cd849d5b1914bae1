"""
Unit tests for URL/path resolution helpers shared by the crawler and
the archive streamer.
"""

from package_explorer.services.path_resolver import (
    resolve_url,
    extract_name,
    to_relative_path,
    parent_directories,
    join_content_url,
)

BASE = "http://h:19071/app/content/"


# -----------------------------------------------------------------------------
# resolve_url
# -----------------------------------------------------------------------------

def test_resolve_url_keeps_absolute_urls() -> None:
    assert resolve_url(BASE, "https://other/x.txt") == "https://other/x.txt"


def test_resolve_url_joins_relative_names() -> None:
    assert resolve_url(BASE, "schemas/") == "http://h:19071/app/content/schemas/"


def test_resolve_url_absolute_path_replaces_path() -> None:
    assert resolve_url(BASE, "/other/x.txt") == "http://h:19071/other/x.txt"


# -----------------------------------------------------------------------------
# extract_name
# -----------------------------------------------------------------------------

def test_extract_name_file_and_directory() -> None:
    assert extract_name(f"{BASE}schemas/music.sd") == "music.sd"
    assert extract_name(f"{BASE}schemas/") == "schemas"
    assert extract_name("plain") == "plain"


def test_extract_name_is_idempotent() -> None:
    for ref in [f"{BASE}a/b/", f"{BASE}a/b.txt", "x/", "x"]:
        once = extract_name(ref)
        assert extract_name(once) == once


# -----------------------------------------------------------------------------
# to_relative_path
# -----------------------------------------------------------------------------

def test_to_relative_path_strips_base() -> None:
    assert to_relative_path(BASE, f"{BASE}schemas/music.sd", False) == "schemas/music.sd"


def test_to_relative_path_directories_end_with_slash() -> None:
    assert to_relative_path(BASE, f"{BASE}schemas", True) == "schemas/"
    assert to_relative_path(BASE, f"{BASE}schemas/", True) == "schemas/"


def test_to_relative_path_outside_base_uses_url_path() -> None:
    assert to_relative_path(BASE, "http://h:19071/other/x.txt", False) == "other/x.txt"


# -----------------------------------------------------------------------------
# parent_directories / join_content_url
# -----------------------------------------------------------------------------

def test_parent_directories_outermost_first() -> None:
    assert parent_directories("a/b/c.txt") == ["a/", "a/b/"]
    assert parent_directories("top.txt") == []


def test_join_content_url_normalizes_slashes() -> None:
    assert join_content_url(BASE, "/schemas/music.sd") == f"{BASE}schemas/music.sd"
    assert join_content_url(BASE.rstrip("/"), "services.xml") == f"{BASE}services.xml"
