"""Tests for settings and the moderation config built from them."""

import pytest

from kindrewrite.settings import ModerationConfig, Settings


def test_defaults(monkeypatch):
    for var in ("HF_TOKEN", "PORT", "HOST", "MODERATION_TIMEOUT"):
        monkeypatch.delenv(var, raising=False)
    s = Settings(_env_file=None)
    assert s.HF_TOKEN is None
    assert s.PORT == 3000
    assert s.MODERATION_API_NAME == "fetch_toxicity_level"


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("HF_TOKEN", "hf_env")
    s = Settings(_env_file=None)
    assert s.PORT == 8080
    assert ModerationConfig.from_settings(s).api_token == "hf_env"


def test_from_settings():
    s = Settings(_env_file=None, HF_TOKEN="hf_x", MODERATION_BASE_URL="http://local", MODERATION_TIMEOUT=2)
    config = ModerationConfig.from_settings(s)
    assert config.configured
    assert config.base_url == "http://local"
    assert config.timeout == 2.0


def test_blank_token_is_not_configured():
    config = ModerationConfig.from_settings(Settings(_env_file=None, HF_TOKEN=""))
    assert config.api_token is None
    assert not config.configured


def test_config_is_frozen():
    config = ModerationConfig(api_token="a")
    with pytest.raises(AttributeError):
        config.api_token = "b"  # type: ignore[misc]
