"""
Tests for the components JAR filesystem: entry classification, tree
folding and degradation when the archive cannot be read.
"""

import zipfile

from conftest import BASE_URL, FakeRemoteClient, build_jar

from package_explorer.core.constants import CLASS_FILE_PLACEHOLDER, ARCHIVE_BINARY_PLACEHOLDER
from package_explorer.services.archive_filesystem import (
    build_from_archive,
    build_tree_from_entries,
    classify_entry,
    get_components_archive_name,
    get_components_filesystem,
)

COMPONENTS_URL = f"{BASE_URL}/content/components/"
JAR_URL = f"{COMPONENTS_URL}app.jar"


# -----------------------------------------------------------------------------
# Classification
# -----------------------------------------------------------------------------

def test_classify_text_entries_decode_utf8() -> None:
    assert classify_entry("a/B.JAVA", "class B {}".encode("utf-8")) == "class B {}"
    assert classify_entry("META-INF/MANIFEST", b"Main-Class: X") == "Main-Class: X"
    assert classify_entry("bad.txt", b"\xff\xfeok") == "\ufffd\ufffdok"


def test_classify_class_and_binary_placeholders() -> None:
    assert classify_entry("a/c.class", b"\xca\xfe\xba\xbe") == CLASS_FILE_PLACEHOLDER.format(path="a/c.class")
    assert classify_entry("x.bin", b"\x00") == "// Binary file: x.bin\n// Content not displayable as text"


def test_build_tree_creates_intermediate_directories_once() -> None:
    root = build_tree_from_entries({"a/b/one.txt": "1", "a/b/two.txt": "2", "top.md": "t"})

    assert root.name == "root" and root.path == "/"
    directory_b = root.children["a"].children["b"]
    assert directory_b.path == "a/b"
    assert set(directory_b.children) == {"one.txt", "two.txt"}
    assert root.children["top.md"].content == "t"


# -----------------------------------------------------------------------------
# Archive download
# -----------------------------------------------------------------------------

def test_jar_scenario_classifies_every_entry() -> None:
    jar = build_jar({
        "a/": b"",
        "a/b.java": b"class B {}",
        "a/c.class": b"\xca\xfe\xba\xbe",
        "x.bin": b"\x00\x01",
    })
    client = FakeRemoteClient(streams={JAR_URL: (200, jar)})

    filesystem = build_from_archive(client, JAR_URL, "app.jar")

    assert filesystem.component_archive_name == "app.jar"
    assert filesystem.total_files == 3
    folder = filesystem.root.children["a"]
    assert folder.path == "a" and not folder.is_leaf
    assert folder.children["b.java"].content == "class B {}"
    assert folder.children["c.class"].content == CLASS_FILE_PLACEHOLDER.format(path="a/c.class")
    assert filesystem.root.children["x.bin"].content == ARCHIVE_BINARY_PLACEHOLDER.format(path="x.bin")


def test_streamed_jar_with_data_descriptors() -> None:
    jar = build_jar({"com/acme/App.java": b"package com.acme;"}, streamed=True)
    client = FakeRemoteClient(streams={JAR_URL: (200, jar)})

    filesystem = build_from_archive(client, JAR_URL, "app.jar")

    leaf = filesystem.root.children["com"].children["acme"].children["App.java"]
    assert leaf.content == "package com.acme;"


def test_non_ok_status_degrades_to_null_root() -> None:
    client = FakeRemoteClient(streams={JAR_URL: (404, b"not found")})

    filesystem = build_from_archive(client, JAR_URL, "app.jar")

    assert filesystem.root is None
    assert filesystem.total_files == 0
    assert filesystem.component_archive_name == "app.jar"


def test_corrupt_archive_degrades_to_null_root() -> None:
    jar = build_jar({"a.txt": b"x" * 500}, compression=zipfile.ZIP_STORED)
    client = FakeRemoteClient(streams={JAR_URL: (200, jar[:50])})

    filesystem = build_from_archive(client, JAR_URL, "app.jar")

    assert filesystem.root is None
    assert filesystem.total_files == 0


# -----------------------------------------------------------------------------
# Components discovery
# -----------------------------------------------------------------------------

def test_components_archive_name_is_last_segment_of_first_entry() -> None:
    client = FakeRemoteClient(listings={COMPONENTS_URL: [JAR_URL, f"{COMPONENTS_URL}other.jar"]})

    assert get_components_archive_name(client, BASE_URL) == "app.jar"


def test_components_filesystem_end_to_end() -> None:
    client = FakeRemoteClient(
        listings={COMPONENTS_URL: [JAR_URL]},
        streams={JAR_URL: (200, build_jar({"README.md": b"# app"}))}
    )

    filesystem = get_components_filesystem(client, BASE_URL)

    assert filesystem.total_files == 1
    assert filesystem.root.children["README.md"].content == "# app"


def test_no_components_gives_empty_result() -> None:
    filesystem = get_components_filesystem(FakeRemoteClient(), BASE_URL)

    assert filesystem.component_archive_name == ""
    assert filesystem.root is None
    assert filesystem.total_files == 0
