"""
Tests for the package ZIP: entry layout, deduplication, failed downloads
and finalization errors.
"""

import io
import zipfile

import pytest

from conftest import CONTENT_URL, FakeRemoteClient, UnseekableSink

from package_explorer.core.exceptions import ArchiveError
from package_explorer.services.archive_streamer import build_archive_bytes, stream_archive


def _names(archive: bytes):
    with zipfile.ZipFile(io.BytesIO(archive)) as zf:
        return zf.namelist()


# -----------------------------------------------------------------------------
# Layout
# -----------------------------------------------------------------------------

def test_archive_contains_files_and_directory_entries(simple_package_client: FakeRemoteClient) -> None:
    archive = build_archive_bytes(simple_package_client, CONTENT_URL)

    with zipfile.ZipFile(io.BytesIO(archive)) as zf:
        assert zf.testzip() is None
        assert sorted(zf.namelist()) == ["models/", "schemas/", "schemas/music.sd", "services.xml"]
        assert zf.read("schemas/music.sd") == b"schema music { }"
        assert zf.getinfo("models/").is_dir()


def test_every_file_has_its_ancestor_directories() -> None:
    client = FakeRemoteClient(
        listings={CONTENT_URL: [f"{CONTENT_URL}a/b/c.txt"]},
        files={f"{CONTENT_URL}a/b/c.txt": b"deep"}
    )

    names = _names(build_archive_bytes(client, CONTENT_URL))

    assert names == ["a/", "a/b/", "a/b/c.txt"]


def test_duplicate_entries_are_written_once() -> None:
    client = FakeRemoteClient(
        listings={
            CONTENT_URL: ["hosts.xml", f"{CONTENT_URL}hosts.xml", "conf/", f"{CONTENT_URL}conf/"],
            f"{CONTENT_URL}conf/": ["x.cfg"],
        },
        files={
            f"{CONTENT_URL}hosts.xml": b"<hosts/>",
            f"{CONTENT_URL}conf/x.cfg": b"k=v",
        }
    )

    names = _names(build_archive_bytes(client, CONTENT_URL))

    assert sorted(names) == ["conf/", "conf/x.cfg", "hosts.xml"]
    assert client.requested.count(f"{CONTENT_URL}hosts.xml") == 1
    assert client.requested.count(f"{CONTENT_URL}conf/") == 1


# -----------------------------------------------------------------------------
# Failures
# -----------------------------------------------------------------------------

def test_failed_file_download_still_yields_valid_zip() -> None:
    client = FakeRemoteClient(
        listings={CONTENT_URL: ["ok.txt", "broken.txt", "dir/"], f"{CONTENT_URL}dir/": ["x.txt"]},
        files={
            f"{CONTENT_URL}ok.txt": b"fine",
            f"{CONTENT_URL}broken.txt": b"never served",
            f"{CONTENT_URL}dir/x.txt": b"x",
        },
        failing=[f"{CONTENT_URL}broken.txt"]
    )

    sink = io.BytesIO()
    stats = stream_archive(client, CONTENT_URL, sink)

    assert stats.files == 2
    assert stats.skipped_files == 1
    assert stats.directories == 1
    with zipfile.ZipFile(io.BytesIO(sink.getvalue())) as zf:
        assert zf.testzip() is None
        assert "broken.txt" not in zf.namelist()
        assert zf.read("ok.txt") == b"fine"


def test_unreachable_host_yields_empty_but_valid_zip() -> None:
    archive = build_archive_bytes(FakeRemoteClient(), CONTENT_URL)

    assert _names(archive) == []


def test_listing_exception_is_treated_as_empty_directory() -> None:
    archive = build_archive_bytes(FakeRemoteClient(broken=True), CONTENT_URL)

    assert _names(archive) == []


def test_unseekable_sink_receives_readable_zip(simple_package_client: FakeRemoteClient) -> None:
    sink = UnseekableSink()

    stream_archive(simple_package_client, CONTENT_URL, sink)

    with zipfile.ZipFile(io.BytesIO(sink.getvalue())) as zf:
        assert zf.read("services.xml") == b"<services version='1.0'/>"


class _BrokenSink:
    def write(self, data: bytes) -> int:
        raise OSError("disk full")

    def flush(self) -> None:
        pass


def test_sink_failure_raises_archive_error(simple_package_client: FakeRemoteClient) -> None:
    with pytest.raises(ArchiveError) as exc_info:
        stream_archive(simple_package_client, CONTENT_URL, _BrokenSink())

    assert exc_info.value.http_status == 500
    assert exc_info.value.error_code == "ARCHIVE_FAILED"
