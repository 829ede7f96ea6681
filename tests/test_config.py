from __future__ import annotations

import pytest

from ledger import config


@pytest.fixture
def no_secrets(monkeypatch):
    monkeypatch.setattr(config, "_secret", lambda name: None)
    for name in ("LEDGER_API_BASE_URL", "LEDGER_REQUEST_TIMEOUT", "LEDGER_LOG_LEVEL",
                 "SUPABASE_URL", "SUPABASE_ANON_KEY"):
        monkeypatch.delenv(name, raising=False)


def test_defaults_without_environment(no_secrets):
    settings = config.load_settings()
    assert settings.api_base_url == config.DEFAULT_API_BASE_URL
    assert settings.request_timeout == config.DEFAULT_TIMEOUT_SECONDS
    assert settings.supabase_url is None
    assert settings.log_level == "INFO"


def test_environment_overrides(no_secrets, monkeypatch):
    monkeypatch.setenv("LEDGER_API_BASE_URL", "https://api.albanyledger.test/")
    monkeypatch.setenv("LEDGER_REQUEST_TIMEOUT", "30")
    monkeypatch.setenv("LEDGER_LOG_LEVEL", "debug")
    monkeypatch.setenv("SUPABASE_URL", "https://project.supabase.co")

    settings = config.load_settings()
    assert settings.api_base_url == "https://api.albanyledger.test"
    assert settings.request_timeout == 30.0
    assert settings.log_level == "DEBUG"
    assert settings.supabase_url == "https://project.supabase.co"


def test_bad_timeout_falls_back_to_default(no_secrets, monkeypatch):
    monkeypatch.setenv("LEDGER_REQUEST_TIMEOUT", "soon")
    assert config.load_settings().request_timeout == config.DEFAULT_TIMEOUT_SECONDS


def test_secrets_used_when_environment_is_empty(monkeypatch):
    monkeypatch.delenv("SUPABASE_ANON_KEY", raising=False)
    monkeypatch.setattr(config, "_secret", lambda name: "anon-key" if name == "SUPABASE_ANON_KEY" else None)
    assert config.get_setting("SUPABASE_ANON_KEY") == "anon-key"
    assert config.get_setting("MISSING", "fallback") == "fallback"
