from ris_search.config.settings import Settings
from ris_search.pipeline.collectors.ris_collector import RISClient


def test_defaults():
    settings = Settings(_env_file=None)
    assert settings.ris_api_base_url == "https://data.bka.gv.at/ris/api/v2.6/"
    assert settings.ris_timeout_ms == 30000
    assert "ris.bka.gv.at" in settings.ris_allowed_document_hosts


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("RIS_TIMEOUT_MS", "5000")
    monkeypatch.setenv("RIS_ALLOWED_DOCUMENT_HOSTS", '["example.org"]')
    settings = Settings(_env_file=None)
    assert settings.ris_timeout_ms == 5000
    assert settings.ris_allowed_document_hosts == ["example.org"]


def test_client_base_url_gets_trailing_slash():
    client = RISClient(base_url="https://data.bka.gv.at/ris/api/v2.6", default_timeout_ms=1000)
    assert client.base_url == "https://data.bka.gv.at/ris/api/v2.6/"
    assert client.default_timeout_ms == 1000


def test_client_keeps_explicit_zero_values():
    client = RISClient(default_timeout_ms=0, error_body_limit=0)
    assert client.default_timeout_ms == 0
    assert client.error_body_limit == 0
