"""
Tests for sequential archive reading from a non-seekable stream.
"""

import io
import zipfile

import pytest

from conftest import build_jar

from package_explorer.services.jar_stream_reader import JarFormatError, JarStreamReader


class _TrickleStream:
    """Returns at most 7 bytes per read, like a slow socket."""

    def __init__(self, payload: bytes):
        self._inner = io.BytesIO(payload)

    def read(self, size: int = -1) -> bytes:
        return self._inner.read(min(size, 7) if size and size > 0 else 7)


def _read_all(payload: bytes, chunk_size: int = 8192):
    return list(JarStreamReader(io.BytesIO(payload), chunk_size=chunk_size).entries())


def test_reads_deflated_and_stored_entries() -> None:
    payload = build_jar({"META-INF/": b"", "META-INF/MANIFEST.MF": b"Manifest-Version: 1.0\n"})

    entries = _read_all(payload)

    assert [(e.name, e.is_directory) for e in entries] == [
        ("META-INF/", True),
        ("META-INF/MANIFEST.MF", False),
    ]
    assert entries[1].data == b"Manifest-Version: 1.0\n"


def test_reads_stored_compression() -> None:
    payload = build_jar({"a.txt": b"plain", "b.txt": b"text"}, compression=zipfile.ZIP_STORED)

    entries = _read_all(payload)

    assert [(e.name, e.data) for e in entries] == [("a.txt", b"plain"), ("b.txt", b"text")]


def test_reads_entries_with_data_descriptors() -> None:
    body = b"class A {}\n" * 200
    payload = build_jar({"A.java": body, "B.java": b"class B {}"}, streamed=True)

    entries = list(JarStreamReader(_TrickleStream(payload)).entries())

    assert [e.name for e in entries] == ["A.java", "B.java"]
    assert entries[0].data == body
    assert entries[1].data == b"class B {}"


def test_small_chunks_do_not_change_results() -> None:
    payload = build_jar({"x/y.txt": b"hello", "x/z.bin": bytes(range(256))})

    assert _read_all(payload, chunk_size=3) == _read_all(payload)


def test_empty_stream_has_no_entries() -> None:
    assert _read_all(b"") == []


def test_truncated_stream_raises_format_error() -> None:
    payload = build_jar({"a.txt": b"some content that is long enough" * 10}, compression=zipfile.ZIP_STORED)

    with pytest.raises(JarFormatError):
        _read_all(payload[:60])
