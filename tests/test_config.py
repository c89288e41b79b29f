from __future__ import annotations

import json
from pathlib import Path

import pytest

from backend.app.core.config import ConfigLoaderError, load_app_config
from backend.app.services.config_loader import ConfigService

REPO_CONFIG_DIR = Path(__file__).resolve().parents[1] / "config"


@pytest.fixture(autouse=True)
def _clear_env(monkeypatch):
    for name in (
        "STICKY_NOTES_HOST",
        "STICKY_NOTES_PORT",
        "STICKY_NOTES_LOG_LEVEL",
        "STICKY_NOTES_KEEPALIVE_SECONDS",
    ):
        monkeypatch.delenv(name, raising=False)


def test_repository_config_loads():
    config = load_app_config(REPO_CONFIG_DIR)
    assert config.http.port == 3500
    assert config.transport.messages_path == "/messages"
    assert config.transport.keepalive_interval_seconds == 15
    assert config.logging.level == "INFO"


def test_missing_file_uses_defaults(tmp_path):
    config = load_app_config(tmp_path)
    assert config.http.host == "0.0.0.0"
    assert config.http.cors_allow_origins == ["*"]
    assert config.transport.keepalive_interval_seconds == 15


def test_env_overrides(tmp_path, monkeypatch):
    (tmp_path / "server.json").write_text(json.dumps({"http": {"port": 4000}}), "utf-8")
    monkeypatch.setenv("STICKY_NOTES_PORT", "5100")
    monkeypatch.setenv("STICKY_NOTES_LOG_LEVEL", "debug")
    monkeypatch.setenv("STICKY_NOTES_KEEPALIVE_SECONDS", "2.5")

    config = load_app_config(tmp_path)

    assert config.http.port == 5100
    assert config.logging.level == "DEBUG"
    assert config.transport.keepalive_interval_seconds == 2.5


@pytest.mark.parametrize(
    "payload",
    [
        {"transport": {"keepalive_interval_seconds": 0}},
        {"transport": {"messages_path": "messages"}},
        {"logging": {"level": "chatty"}},
        {"http": {"port": 0}},
    ],
)
def test_invalid_values_raise(tmp_path, payload):
    (tmp_path / "server.json").write_text(json.dumps(payload), "utf-8")
    with pytest.raises(ConfigLoaderError):
        load_app_config(tmp_path)


def test_invalid_json_raises(tmp_path):
    (tmp_path / "server.json").write_text("{broken", "utf-8")
    with pytest.raises(ConfigLoaderError, match="Invalid JSON"):
        load_app_config(tmp_path)


def test_config_service_caches(tmp_path):
    service = ConfigService(config_dir=tmp_path)
    first = service.get()
    assert service.get() is first
    assert service.load() is not first
