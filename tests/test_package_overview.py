"""
Tests for the package overview (generation, services, hosts, models).
"""

from conftest import BASE_URL, FakeRemoteClient

from package_explorer.services.package_overview import assemble_overview, parse_model_names


def test_overview_collects_all_parts() -> None:
    client = FakeRemoteClient(
        objects={BASE_URL: {"generation": 42}},
        files={
            f"{BASE_URL}/content/services.xml": b"<services/>",
            f"{BASE_URL}/content/hosts.xml": b"<hosts/>",
            f"{BASE_URL}/content/models/": b'["http://h/content/models/a.onnx", "http://h/content/models/b.onnx"]',
        }
    )

    overview = assemble_overview(client, BASE_URL)

    assert overview.generation == "42"
    assert overview.services_content == "<services/>"
    assert overview.hosts_content == "<hosts/>"
    assert overview.models_content == "a.onnx\nb.onnx"


def test_overview_degrades_each_part_independently() -> None:
    overview = assemble_overview(FakeRemoteClient(), BASE_URL)

    assert overview.generation == ""
    assert overview.services_content == ""
    assert overview.hosts_content == ""
    assert overview.models_content == ""


def test_parse_model_names_handles_malformed_listing() -> None:
    assert parse_model_names("not json") == "Error parsing models"
    assert parse_model_names('{"a": 1}') == "Error parsing models"
    assert parse_model_names("") == ""
