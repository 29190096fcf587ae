"""Tests for configuration adapter."""

import pytest

from page_presence.adapters.config import AppConfig


def test_config_loads_defaults() -> None:
    """Given no environment variables, when loading config, then defaults are used."""
    config = AppConfig(_env_file=None)

    assert config.host == "0.0.0.0"
    assert config.port == 3000
    assert config.websocket_path == "/ws"
    assert config.cors_allow_origins == ["*"]
    assert config.admin_command_token is None
    assert config.log_level == "info"


def test_config_loads_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Given environment variables, when loading config, then they are used."""
    monkeypatch.setenv("HOST", "127.0.0.1")
    monkeypatch.setenv("PORT", "9000")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("CORS_ALLOW_ORIGINS", '["https://example.test"]')
    monkeypatch.setenv("OUTBOUND_QUEUE_SIZE", "8")

    config = AppConfig(_env_file=None)

    assert config.host == "127.0.0.1"
    assert config.port == 9000
    assert config.log_level == "debug"
    assert config.cors_allow_origins == ["https://example.test"]
    assert config.outbound_queue_size == 8


def test_config_validates_log_level(monkeypatch: pytest.MonkeyPatch) -> None:
    """Given an invalid log level, when loading config, then validation error is raised."""
    monkeypatch.setenv("LOG_LEVEL", "chatty")

    with pytest.raises(ValueError, match="log_level must be one of"):
        AppConfig(_env_file=None)


def test_config_validates_websocket_path() -> None:
    """Given a relative websocket path, when loading config, then validation error is raised."""
    with pytest.raises(ValueError, match="websocket_path must start with"):
        AppConfig(_env_file=None, websocket_path="ws")


@pytest.mark.parametrize(
    "field", ["page_id_max_length", "outbound_queue_size", "rate_limit_per_minute"]
)
def test_config_rejects_non_positive_limits(field: str) -> None:
    """Given a zero limit, when loading config, then validation error is raised."""
    with pytest.raises(ValueError, match="value must be positive"):
        AppConfig(_env_file=None, **{field: 0})


def test_config_rejects_non_positive_send_timeout() -> None:
    """Given a zero send timeout, when loading config, then validation error is raised."""
    with pytest.raises(ValueError, match="send_timeout_seconds must be positive"):
        AppConfig(_env_file=None, send_timeout_seconds=0)
