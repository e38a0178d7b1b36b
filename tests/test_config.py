import pytest

from gemini_search.config import (
    SearchSettings,
    get_search_settings,
    normalize_base_url,
    reset_search_settings_cache,
)
from gemini_search.errors import ConfigurationError, ErrorCode


def test_base_url_normalization_is_idempotent():
    with_slash = SearchSettings(base_url="https://host/", api_key="k")
    without_slash = SearchSettings(base_url="https://host", api_key="k")

    assert with_slash.base_url == without_slash.base_url == "https://host"
    assert with_slash.completions_url == "https://host/v1/chat/completions"
    assert normalize_base_url(normalize_base_url("https://host//")) == "https://host"


@pytest.mark.parametrize("base_url", ["", "   ", "ftp://host", "host-without-scheme", "https://"])
def test_invalid_base_url_fails_construction(base_url):
    with pytest.raises(ConfigurationError) as exc:
        SearchSettings(base_url=base_url, api_key="k")
    assert exc.value.error_code == ErrorCode.CONFIGURATION_ERROR
    assert exc.value.context["setting"] == "GEMINI_BASE_URL"


def test_missing_api_key_fails_construction():
    with pytest.raises(ConfigurationError) as exc:
        SearchSettings(base_url="https://host", api_key="  ")
    assert "GEMINI_API_KEY" in exc.value.message


@pytest.mark.parametrize(
    "overrides",
    [{"timeout": 0}, {"max_retries": 0}, {"retry_delay": -1.0}, {"model": ""}],
)
def test_invalid_tuning_values_fail_construction(overrides):
    with pytest.raises(ConfigurationError):
        SearchSettings(base_url="https://host", api_key="k", **overrides)


def test_settings_are_immutable():
    settings = SearchSettings(base_url="https://host", api_key="k")
    with pytest.raises(AttributeError):
        settings.model = "other"  # type: ignore[misc]


def test_defaults():
    settings = SearchSettings(base_url="http://localhost:8080", api_key="k")
    assert settings.model == "gemini-2.5-flash-lite"
    assert settings.timeout == 30.0
    assert settings.max_retries == 3
    assert settings.retry_delay == 1.0


def test_describe_hides_api_key():
    info = SearchSettings(base_url="https://host", api_key="secret").describe()
    assert info["has_api_key"] is True
    assert "secret" not in str(info)
    assert info["url"] == "https://host/v1/chat/completions"


def test_get_search_settings_reads_environment(monkeypatch):
    monkeypatch.setenv("GEMINI_BASE_URL", "https://proxy.example.com/")
    monkeypatch.setenv("GEMINI_API_KEY", "env-key")
    monkeypatch.setenv("GEMINI_MODEL", "gemini-2.5-pro")
    monkeypatch.setenv("GEMINI_TIMEOUT", "12.5")
    monkeypatch.setenv("GEMINI_MAX_RETRIES", "5")
    monkeypatch.setenv("GEMINI_RETRY_DELAY", "0.25")
    reset_search_settings_cache()

    settings = get_search_settings()

    assert settings.base_url == "https://proxy.example.com"
    assert settings.api_key == "env-key"
    assert settings.model == "gemini-2.5-pro"
    assert settings.timeout == 12.5
    assert settings.max_retries == 5
    assert settings.retry_delay == 0.25
    assert get_search_settings() is settings


def test_get_search_settings_requires_base_url(monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "env-key")
    reset_search_settings_cache()

    with pytest.raises(ConfigurationError):
        get_search_settings()


def test_get_search_settings_rejects_malformed_numbers(monkeypatch):
    monkeypatch.setenv("GEMINI_BASE_URL", "https://host")
    monkeypatch.setenv("GEMINI_API_KEY", "env-key")
    monkeypatch.setenv("GEMINI_TIMEOUT", "soon")
    reset_search_settings_cache()

    with pytest.raises(ConfigurationError) as exc:
        get_search_settings()
    assert "Invalid configuration" in exc.value.message
