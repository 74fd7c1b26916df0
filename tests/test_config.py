import pytest

from gmaps_enricher.core import config


def setup_function(function):
    config.get_settings.cache_clear()


def teardown_function(function):
    config.get_settings.cache_clear()


@pytest.fixture(autouse=True)
def no_dotenv(monkeypatch):
    monkeypatch.setattr(config, "load_dotenv", lambda: None)


def test_get_settings_reads_env(monkeypatch):
    monkeypatch.setenv("REGISTRY_PROVIDER", "CEIDG")
    monkeypatch.setenv("CEIDG_API_TOKEN", "secret")
    monkeypatch.setenv("WORKER_CONCURRENCY", "6")
    monkeypatch.setenv("WORKER_LANG", "pl")
    monkeypatch.setenv("EXTRACT_EMAILS", "yes")
    monkeypatch.setenv("WORKER_PORT", "9100")

    settings = config.get_settings()

    assert settings.registry_provider == "ceidg"
    assert settings.ceidg_api_token == "secret"
    assert settings.concurrency == 6
    assert settings.lang == "pl"
    assert settings.extract_emails is True
    assert settings.worker_port == 9100


def test_get_settings_defaults(monkeypatch):
    for name in ("REGISTRY_PROVIDER", "CEIDG_API_TOKEN", "WORKER_CONCURRENCY", "EXTRACT_EMAILS", "WORKER_PORT"):
        monkeypatch.delenv(name, raising=False)

    settings = config.get_settings()

    assert settings.registry_provider == "mf"
    assert settings.extract_emails is False
    assert settings.concurrency >= 1
    assert settings.worker_port == 8015


def test_get_settings_warns_without_ceidg_token(monkeypatch, caplog):
    monkeypatch.setenv("REGISTRY_PROVIDER", "ceidg")
    monkeypatch.delenv("CEIDG_API_TOKEN", raising=False)

    with caplog.at_level("WARNING"):
        config.get_settings()

    assert "CEIDG_API_TOKEN is not configured" in " ".join(caplog.messages)


def test_get_settings_rejects_unknown_provider(monkeypatch):
    monkeypatch.setenv("REGISTRY_PROVIDER", "krs")

    with pytest.raises(config.ConfigError):
        config.get_settings()
