"""
Tests for deriving the deployed application URL from request config.
"""

from package_explorer.managers.application_url_resolver import ApplicationUrlResolver


def test_config_host_without_port_uses_config_server_port() -> None:
    resolver = ApplicationUrlResolver({"config_host": "cfg.example.com"})

    assert resolver.application_url() == (
        "http://cfg.example.com:19071/application/v2/tenant/default/application/default"
        "/environment/prod/region/default/instance/default"
    )


def test_config_host_with_scheme_port_and_custom_ids() -> None:
    resolver = ApplicationUrlResolver({
        "config_host": "https://cfg:8443",
        "tenant": "acme",
        "application": "music",
        "environment": "dev",
        "region": "eu",
        "instance": "blue",
    })

    assert resolver.application_url() == (
        "https://cfg:8443/application/v2/tenant/acme/application/music"
        "/environment/dev/region/eu/instance/blue"
    )


def test_explicit_application_url_wins() -> None:
    resolver = ApplicationUrlResolver({
        "application_url": "http://h:19071/application/v2/tenant/t/application/a/",
        "config_host": "ignored",
    })

    assert resolver.application_url() == "http://h:19071/application/v2/tenant/t/application/a"
    assert resolver.content_url() == "http://h:19071/application/v2/tenant/t/application/a/content/"
