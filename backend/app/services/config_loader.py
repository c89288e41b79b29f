from __future__ import annotations

from pathlib import Path
from typing import Optional

from ..core.config import AppConfig, default_config_dir, load_app_config


class ConfigService:
    def __init__(self, config_dir: Path) -> None:
        self._config_dir = config_dir
        self._config: Optional[AppConfig] = None

    @property
    def config_dir(self) -> Path:
        return self._config_dir

    def load(self) -> AppConfig:
        self._config = load_app_config(self._config_dir)
        return self._config

    def get(self) -> AppConfig:
        if self._config is None:
            self.load()
        assert self._config is not None
        return self._config


def create_config_service() -> ConfigService:
    return ConfigService(config_dir=default_config_dir())
