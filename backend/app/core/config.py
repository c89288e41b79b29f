from __future__ import annotations

import json
import os
from pathlib import Path
from typing import List

from pydantic import BaseModel, Field, ValidationError, constr, field_validator

CONFIG_FILENAME = "server.json"


class HTTPConfig(BaseModel):
    host: constr(strip_whitespace=True, min_length=1) = "0.0.0.0"
    port: int = Field(3500, ge=1, le=65535, description="TCP port the HTTP server binds to")
    cors_allow_origins: List[str] = Field(default_factory=lambda: ["*"])
    shutdown_timeout_seconds: int = Field(
        5,
        ge=1,
        description="Seconds uvicorn waits for open connections before cancelling them on shutdown",
    )


class TransportConfig(BaseModel):
    messages_path: str = Field(
        "/messages",
        description="Relative location announced to event-stream clients for JSON-RPC posts",
    )
    keepalive_interval_seconds: float = Field(
        15,
        gt=0,
        description="Seconds between keep-alive comments on an open event stream",
    )

    @field_validator("messages_path")
    @classmethod
    def validate_messages_path(cls, value: str) -> str:
        if not value.startswith("/"):
            raise ValueError("messages_path must start with '/'")
        return value


class LoggingConfig(BaseModel):
    level: str = "INFO"

    @field_validator("level")
    @classmethod
    def normalize_level(cls, value: str) -> str:
        normalized = value.strip().upper()
        if normalized not in {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}:
            raise ValueError(f"Unsupported log level '{value}'")
        return normalized


class AppConfig(BaseModel):
    http: HTTPConfig = Field(default_factory=HTTPConfig)
    transport: TransportConfig = Field(default_factory=TransportConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


class ConfigLoaderError(RuntimeError):
    pass


def _read_json(path: Path) -> dict:
    if not path.exists():
        return {}
    try:
        payload = json.loads(path.read_text("utf-8"))
    except json.JSONDecodeError as exc:
        raise ConfigLoaderError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(payload, dict):
        raise ConfigLoaderError(f"Expected a JSON object in {path}")
    return payload


def _apply_env_overrides(payload: dict) -> dict:
    """Overlay STICKY_NOTES_* environment variables onto the raw configuration."""
    overrides = {
        ("http", "host"): os.getenv("STICKY_NOTES_HOST"),
        ("http", "port"): os.getenv("STICKY_NOTES_PORT"),
        ("logging", "level"): os.getenv("STICKY_NOTES_LOG_LEVEL"),
        ("transport", "keepalive_interval_seconds"): os.getenv("STICKY_NOTES_KEEPALIVE_SECONDS"),
    }
    for (section, key), value in overrides.items():
        if not value:
            continue
        section_payload = payload.get(section)
        if not isinstance(section_payload, dict):
            section_payload = {}
            payload[section] = section_payload
        section_payload[key] = value.strip()
    return payload


def default_config_dir() -> Path:
    override = os.getenv("STICKY_NOTES_CONFIG_DIR")
    if override:
        return Path(override)
    return Path(__file__).resolve().parents[3] / "config"


def load_app_config(config_dir: Path) -> AppConfig:
    """Load the server configuration from the provided directory."""
    payload = _apply_env_overrides(_read_json(config_dir / CONFIG_FILENAME))
    try:
        return AppConfig(**payload)
    except ValidationError as exc:
        raise ConfigLoaderError(str(exc)) from exc
