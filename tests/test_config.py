from __future__ import annotations

from typing import Any

from identifier_lookup.config import (
    API_BASE_ENV,
    DEFAULT_API_BASE,
    DEFAULT_TIMEOUT_S,
    TIMEOUT_ENV,
    LookupSettings,
)


def test_defaults_without_env(monkeypatch: Any) -> None:
    monkeypatch.delenv(API_BASE_ENV, raising=False)
    monkeypatch.delenv(TIMEOUT_ENV, raising=False)

    settings = LookupSettings.from_options()

    assert settings.api_base == DEFAULT_API_BASE
    assert settings.timeout_s == DEFAULT_TIMEOUT_S == 10.0


def test_env_overrides_defaults(monkeypatch: Any) -> None:
    monkeypatch.setenv(API_BASE_ENV, "https://mirror.test/")
    monkeypatch.setenv(TIMEOUT_ENV, "2.5")

    settings = LookupSettings.from_options({"api_base": None, "timeout_s": None})

    assert settings.api_base == "https://mirror.test"
    assert settings.timeout_s == 2.5


def test_options_override_env(monkeypatch: Any) -> None:
    monkeypatch.setenv(API_BASE_ENV, "https://mirror.test")
    monkeypatch.setenv(TIMEOUT_ENV, "2.5")

    settings = LookupSettings.from_options(
        {"api_base": "https://cli.test", "timeout_s": 1, "user_agent": "x/1"}
    )

    assert settings == LookupSettings(
        api_base="https://cli.test", timeout_s=1.0, user_agent="x/1"
    )


def test_bad_timeouts_fall_back_to_default(monkeypatch: Any) -> None:
    monkeypatch.setenv(TIMEOUT_ENV, "soon")
    assert LookupSettings.from_options().timeout_s == DEFAULT_TIMEOUT_S
    assert LookupSettings.from_options({"timeout_s": 0}).timeout_s == DEFAULT_TIMEOUT_S
