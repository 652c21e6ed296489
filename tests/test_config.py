"""Unit tests for configuration module."""

import pydantic
import pytest
import pytz

from tidewaves import config


def test_defaults() -> None:
    settings = config.Settings()
    assert settings.application == "timewaves"
    assert settings.user_agent == "TimeWaves/1.0"
    assert settings.timezone is pytz.timezone("US/Eastern")
    assert settings.max_retries == 3
    assert settings.search_limit == 5


def test_from_env() -> None:
    settings = config.Settings.from_env(
        {
            "TIDEWAVES_TIMEZONE": "US/Pacific",
            "TIDEWAVES_MAX_RETRIES": "5",
            "TIDEWAVES_REQUEST_TIMEOUT": "2.5",
            "TIDEWAVES_USER_AGENT": "TimeWaves/2.0 (ops@example.com)",
            "UNRELATED": "ignored",
        }
    )
    assert settings.timezone is pytz.timezone("US/Pacific")
    assert settings.max_retries == 5
    assert settings.request_timeout == 2.5
    assert settings.user_agent == "TimeWaves/2.0 (ops@example.com)"


def test_from_env_empty() -> None:
    assert config.Settings.from_env({}) == config.Settings()


def test_from_env_invalid_timezone() -> None:
    with pytest.raises(pytz.UnknownTimeZoneError):
        config.Settings.from_env({"TIDEWAVES_TIMEZONE": "Mars/Olympus_Mons"})


@pytest.mark.parametrize(
    "name,value",
    [
        ("TIDEWAVES_MAX_RETRIES", "0"),
        ("TIDEWAVES_REQUEST_TIMEOUT", "-1"),
        ("TIDEWAVES_SEARCH_LIMIT", "many"),
    ],
)
def test_from_env_invalid_values(name: str, value: str) -> None:
    with pytest.raises(pydantic.ValidationError):
        config.Settings.from_env({name: value})


def test_timezone_must_be_tzinfo() -> None:
    with pytest.raises(pydantic.ValidationError):
        config.Settings(timezone="US/Eastern")  # type: ignore[arg-type]


def test_settings_frozen() -> None:
    settings = config.Settings()
    with pytest.raises(pydantic.ValidationError):
        settings.max_retries = 10  # type: ignore[misc]


def test_get_is_cached(monkeypatch: pytest.MonkeyPatch) -> None:
    config.get.cache_clear()
    monkeypatch.setenv("TIDEWAVES_SEARCH_LIMIT", "7")
    try:
        first = config.get()
        assert first.search_limit == 7
        assert config.get() is first
    finally:
        config.get.cache_clear()
