"""
End-to-end routing tests through lambda_handler with an in-memory remote
client and a mocked S3 client.
"""

import io
import json
import zipfile
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

from conftest import BASE_URL, CONTENT_URL, FakeRemoteClient, build_jar

from lambda_handler import lambda_handler
from package_explorer.handlers.package_download_handler import handle_download_package_local
from package_explorer.managers.application_url_resolver import ApplicationUrlResolver

CONTEXT = SimpleNamespace(aws_request_id="req-42")
CONFIG = {"config_host": "cfg"}


def _invoke(client: FakeRemoteClient, body: dict) -> dict:
    with patch("package_explorer.utils.request_parser.RequestsRemoteClient", return_value=client):
        return lambda_handler({"body": json.dumps(body)}, CONTEXT)


def _body(response: dict) -> dict:
    return json.loads(response["body"])


# -----------------------------------------------------------------------------
# Read operations
# -----------------------------------------------------------------------------

def test_get_tree_returns_tree_markdown_and_files(simple_package_client: FakeRemoteClient) -> None:
    response = _invoke(simple_package_client, {"operation": "GET_TREE", "config": CONFIG})

    assert response["statusCode"] == 200
    data = _body(response)
    assert data["totalFiles"] == 2
    assert data["totalDirectories"] == 2
    assert data["root"]["name"] == "content"
    assert data["root"]["children"]["schemas"]["isLeaf"] is False
    assert "children" not in data["root"]["children"]["services.xml"]
    assert sorted(data["files"]) == ["schemas/music.sd", "services.xml"]
    assert "/schemas/music.sd" in data["markdown"]
    assert simple_package_client.closed


def test_get_file_returns_url_and_content(simple_package_client: FakeRemoteClient) -> None:
    response = _invoke(simple_package_client, {
        "operation": "GET_FILE", "config": CONFIG, "path": "/schemas/music.sd"
    })

    data = _body(response)
    assert response["statusCode"] == 200
    assert data["url"] == f"{CONTENT_URL}schemas/music.sd"
    assert data["content"] == "schema music { }"


def test_get_components_returns_archive_filesystem() -> None:
    jar_url = f"{BASE_URL}/content/components/app.jar"
    client = FakeRemoteClient(
        listings={f"{BASE_URL}/content/components/": [jar_url]},
        streams={jar_url: (200, build_jar({"a/b.java": b"class B {}"}))}
    )

    data = _body(_invoke(client, {"operation": "GET_COMPONENTS", "config": CONFIG}))

    assert data["componentArchiveName"] == "app.jar"
    assert data["totalFiles"] == 1
    assert data["root"]["children"]["a"]["children"]["b.java"]["content"] == "class B {}"


def test_get_overview() -> None:
    client = FakeRemoteClient(
        objects={BASE_URL: {"generation": 7}},
        files={f"{BASE_URL}/content/services.xml": b"<services/>"}
    )

    data = _body(_invoke(client, {"operation": "GET_OVERVIEW", "config": CONFIG}))

    assert data["generation"] == "7"
    assert data["servicesContent"] == "<services/>"
    assert data["hostsContent"] == ""


# -----------------------------------------------------------------------------
# Package download
# -----------------------------------------------------------------------------

def test_download_package_uploads_zip_to_s3(simple_package_client: FakeRemoteClient) -> None:
    s3_client = MagicMock()
    s3_client.put_object.return_value = {"ResponseMetadata": {"HTTPStatusCode": 200}}

    with patch("package_explorer.handlers.package_download_handler.BUCKET_NAME", "packages-bucket"), \
            patch("package_explorer.handlers.package_download_handler.boto3.client", return_value=s3_client):
        response = _invoke(simple_package_client, {"operation": "DOWNLOAD_PACKAGE", "config": CONFIG})

    assert response["statusCode"] == 200
    data = _body(response)
    assert data["bucket_name"] == "packages-bucket"
    assert data["s3_path"].startswith("app-packages/vespa-app-package-")

    kwargs = s3_client.put_object.call_args.kwargs
    assert kwargs["Bucket"] == "packages-bucket"
    with zipfile.ZipFile(io.BytesIO(kwargs["Body"])) as zf:
        assert "schemas/music.sd" in zf.namelist()


def test_download_package_without_bucket_fails(simple_package_client: FakeRemoteClient) -> None:
    with patch("package_explorer.handlers.package_download_handler.BUCKET_NAME", None):
        response = _invoke(simple_package_client, {"operation": "DOWNLOAD_PACKAGE", "config": CONFIG})

    assert response["statusCode"] == 500
    assert _body(response)["error_code"] == "UPLOAD_FAILED"


# -----------------------------------------------------------------------------
# Errors
# -----------------------------------------------------------------------------

@pytest.mark.parametrize("body, error_code", [
    ({"operation": "RENAME", "config": CONFIG}, "UNSUPPORTED_OPERATION"),
    ({"operation": "GET_TREE"}, "MISSING_CONFIG"),
    ({"operation": "GET_FILE", "config": CONFIG, "path": "../secret"}, "PATH_TRAVERSAL_DETECTED"),
])
def test_invalid_requests_return_400(body: dict, error_code: str) -> None:
    response = _invoke(FakeRemoteClient(), body)

    assert response["statusCode"] == 400
    data = _body(response)
    assert data["success"] is False
    assert data["error_code"] == error_code


def test_options_preflight_returns_cors_headers() -> None:
    response = lambda_handler({"httpMethod": "OPTIONS"}, CONTEXT)

    assert response["statusCode"] == 200
    assert response["body"] == ""
    assert "Access-Control-Allow-Origin" in response["headers"]


# -----------------------------------------------------------------------------
# Local execution
# -----------------------------------------------------------------------------

def test_local_download_writes_zip_to_disk(simple_package_client: FakeRemoteClient, tmp_path, capsys) -> None:
    output = tmp_path / "package.zip"

    handle_download_package_local(simple_package_client, ApplicationUrlResolver(CONFIG), str(output))

    with zipfile.ZipFile(output) as zf:
        assert "services.xml" in zf.namelist()
    assert "DOWNLOAD_PACKAGE completado" in capsys.readouterr().out


def test_local_download_to_unwritable_path_prints_error(simple_package_client: FakeRemoteClient,
                                                        tmp_path, capsys) -> None:
    output = tmp_path / "missing-dir" / "package.zip"

    handle_download_package_local(simple_package_client, ApplicationUrlResolver(CONFIG), str(output))

    assert "❌ Error" in capsys.readouterr().out
    assert not output.exists()
