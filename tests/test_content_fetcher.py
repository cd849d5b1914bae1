"""
Tests for on-demand file content retrieval and the binary policy.
"""

import pytest

from conftest import CONTENT_URL, FakeRemoteClient

from package_explorer.core.constants import (
    BINARY_FILE_PLACEHOLDER,
    EMPTY_FILE_PLACEHOLDER,
)
from package_explorer.services.content_fetcher import fetch_content, is_binary_path


@pytest.mark.parametrize("path", [
    "components/app.jar",
    "bundle.ZIP",
    "com/acme/A.class",
    "models/ranker.onnx",
    "a/models/x.bin",
])
def test_binary_paths_are_never_fetched(path: str) -> None:
    client = FakeRemoteClient(files={f"{CONTENT_URL}{path}": b"data"})

    result = fetch_content(client, CONTENT_URL, path)

    assert result.content == BINARY_FILE_PLACEHOLDER
    assert result.url == f"{CONTENT_URL}{path}"
    assert client.requested == []


def test_text_file_returns_content(simple_package_client: FakeRemoteClient) -> None:
    result = fetch_content(simple_package_client, CONTENT_URL, "schemas/music.sd")

    assert result.url == f"{CONTENT_URL}schemas/music.sd"
    assert result.content == "schema music { }"


def test_missing_file_returns_empty_placeholder() -> None:
    result = fetch_content(FakeRemoteClient(), CONTENT_URL, "services.xml")

    assert result.content == EMPTY_FILE_PLACEHOLDER


def test_client_error_returns_error_placeholder() -> None:
    result = fetch_content(FakeRemoteClient(broken=True), CONTENT_URL, "services.xml")

    assert result.content.startswith("// Error reading file: ")
    assert "connection refused" in result.content


def test_is_binary_path_policy() -> None:
    assert is_binary_path("x.jar")
    assert is_binary_path("deep/models/file.txt")
    assert is_binary_path("models/notes.txt")
    assert not is_binary_path("mymodels/notes.txt")
    assert not is_binary_path("models.xml")
    assert not is_binary_path("services.xml")
    assert not is_binary_path("README")
