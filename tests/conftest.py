"""
Global Pytest Configuration and Fixtures.

Sets up the testing environment:
1. Puts the repository root on sys.path so 'package_explorer' and the
   root modules import without installation.
2. Provides an in-memory remote client and helpers to build JAR bytes.
"""

import io
import os
import sys
import zipfile
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Tuple

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_ROOT_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if _ROOT_PATH not in sys.path:
    sys.path.insert(0, _ROOT_PATH)

from package_explorer.core.exceptions import RemoteFetchError  # noqa: E402
from package_explorer.interfaces.remote_client_interface import IRemoteClient, RemoteStream  # noqa: E402

BASE_URL = "http://cfg:19071/application/v2/tenant/default/application/default/environment/prod/region/default/instance/default"
CONTENT_URL = f"{BASE_URL}/content/"


# -----------------------------------------------------------------------------
# In-memory remote client
# -----------------------------------------------------------------------------
class FakeRemoteClient(IRemoteClient):
    """
    Dict-backed client honouring the default-on-failure contract.

    listings: url -> list of child refs
    files:    url -> bytes
    objects:  url -> JSON object (dict)
    streams:  url -> (status_code, payload)
    failing:  urls whose strict download raises
    broken:   every request raises (simulates a client bug)
    """

    def __init__(
        self,
        listings: Optional[Dict[str, List[Any]]] = None,
        files: Optional[Dict[str, bytes]] = None,
        objects: Optional[Dict[str, Dict[str, Any]]] = None,
        streams: Optional[Dict[str, Tuple[int, bytes]]] = None,
        failing: Optional[List[str]] = None,
        broken: bool = False
    ):
        self.listings = listings or {}
        self.files = files or {}
        self.objects = objects or {}
        self.streams = streams or {}
        self.failing = set(failing or [])
        self.broken = broken
        self.requested: List[str] = []
        self.closed = False

    def request_get_with_default(self, url, expected_type, default):
        self.requested.append(url)
        if self.broken:
            raise RuntimeError("connection refused")

        if expected_type is list:
            value = self.listings.get(url)
        elif expected_type is dict:
            value = self.objects.get(url)
        elif expected_type is bytes:
            value = self.files.get(url)
        else:
            raw = self.files.get(url)
            value = raw.decode("utf-8") if raw is not None else None

        if value is None or not isinstance(value, expected_type) or not value:
            return default
        return value

    def download_bytes(self, url: str) -> bytes:
        self.requested.append(url)
        if url in self.failing or url not in self.files:
            raise RemoteFetchError("download failed", url=url)
        return self.files[url]

    @contextmanager
    def open_stream(self, url: str) -> Iterator[RemoteStream]:
        self.requested.append(url)
        status_code, payload = self.streams.get(url, (404, b""))
        yield RemoteStream(status_code=status_code, body=io.BytesIO(payload))

    def close(self) -> None:
        self.closed = True


class UnseekableSink:
    """Write-only sink without tell/seek, like a socket or a pipe."""

    def __init__(self):
        self._buffer = io.BytesIO()

    def write(self, data: bytes) -> int:
        return self._buffer.write(data)

    def flush(self) -> None:
        pass

    def getvalue(self) -> bytes:
        return self._buffer.getvalue()


def build_jar(entries: Dict[str, bytes], streamed: bool = False,
              compression: int = zipfile.ZIP_DEFLATED) -> bytes:
    """
    Build archive bytes from name -> data. Names ending in '/' become
    directory entries. streamed=True writes through an unseekable sink so
    that file entries carry data descriptors.
    """
    sink = UnseekableSink() if streamed else io.BytesIO()
    with zipfile.ZipFile(sink, "w", compression=compression) as archive:
        for name, data in entries.items():
            archive.writestr(name, data)
    return sink.getvalue()


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def simple_package_client() -> FakeRemoteClient:
    """
    Package with services.xml, schemas/music.sd and an empty models/ dir.
    """
    return FakeRemoteClient(
        listings={
            CONTENT_URL: [
                f"{CONTENT_URL}services.xml",
                f"{CONTENT_URL}schemas/",
                f"{CONTENT_URL}models/",
            ],
            f"{CONTENT_URL}schemas/": [f"{CONTENT_URL}schemas/music.sd"],
        },
        files={
            f"{CONTENT_URL}services.xml": b"<services version='1.0'/>",
            f"{CONTENT_URL}schemas/music.sd": b"schema music { }",
        }
    )
