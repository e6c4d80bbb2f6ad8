# pylint: disable=missing-module-docstring,missing-function-docstring

import pytest

from config import AppConfig

_ENV_VARS = (
    "ENV",
    "LOG_LEVEL",
    "ENABLE_JSON_LOGS",
    "DEFAULT_APP_LOCALE",
    "CATALOG_PATH",
    "NAVIGATION_RULES_PATH",
    "HOST",
    "PORT",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults_when_environment_is_empty() -> None:
    assert AppConfig.load_from_env() == AppConfig()

    config = AppConfig()
    assert config.default_app_locale == "en"
    assert config.enable_json_logs is True
    assert config.catalog_path is None
    assert config.port == 8000


def test_values_are_read_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ENV", "prod")
    monkeypatch.setenv("ENABLE_JSON_LOGS", "0")
    monkeypatch.setenv("DEFAULT_APP_LOCALE", "hi")
    monkeypatch.setenv("CATALOG_PATH", "/data/catalog.json")
    monkeypatch.setenv("NAVIGATION_RULES_PATH", "/data/rules.json")
    monkeypatch.setenv("PORT", "9001")

    config = AppConfig.load_from_env()

    assert config.env == "prod"
    assert config.enable_json_logs is False
    assert config.default_app_locale == "hi"
    assert config.catalog_path == "/data/catalog.json"
    assert config.navigation_rules_path == "/data/rules.json"
    assert config.port == 9001


def test_empty_paths_mean_unset(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CATALOG_PATH", "")
    assert AppConfig.load_from_env().catalog_path is None


def test_invalid_port_raises(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PORT", "eighty")
    with pytest.raises(ValueError):
        AppConfig.load_from_env()


def test_config_is_frozen() -> None:
    config = AppConfig()
    with pytest.raises(AttributeError):
        config.port = 1  # type: ignore[misc]
