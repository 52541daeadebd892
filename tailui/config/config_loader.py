"""Configuration loading from file, environment and explicit overrides."""

import json
from pathlib import Path
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from ..builder_logging import get_logger
from ..errors import ConfigurationError
from .models import BuilderConfig, env_overrides

logger = get_logger()

# Looked up relative to the working directory when no file is given
DEFAULT_CONFIG_FILE = Path(".tailui") / "config.json"


class ConfigLoader:
    """Layered configuration loader."""

    def __init__(self, config_file: Path | None = None):
        self.config_file = Path(config_file) if config_file else None

    def _resolve_file(self) -> Path | None:
        if self.config_file is not None:
            if not self.config_file.exists():
                raise ConfigurationError(
                    f"Configuration file not found: {self.config_file}",
                    config_file=str(self.config_file),
                )
            return self.config_file
        default = Path.cwd() / DEFAULT_CONFIG_FILE
        return default if default.exists() else None

    def _read_file(self, path: Path) -> dict[str, Any]:
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(
                f"Invalid JSON in configuration file: {e}", config_file=str(path)
            ) from e
        except OSError as e:
            raise ConfigurationError(
                f"Cannot read configuration file: {e}", config_file=str(path)
            ) from e

        if not isinstance(data, dict):
            raise ConfigurationError(
                "Configuration file must contain a JSON object",
                config_file=str(path),
            )
        return data

    def load(self, **overrides: Any) -> BuilderConfig:
        """Load configuration from all sources.

        Precedence (highest to lowest):
        1. Explicit overrides
        2. Environment variables
        3. Config file (explicit path or ./.tailui/config.json)
        4. Defaults
        """
        config_dict: dict[str, Any] = {}

        config_path = self._resolve_file()
        if config_path is not None:
            file_settings = self._read_file(config_path)
            config_dict.update(file_settings)
            logger.debug(f"Loaded {len(file_settings)} settings from {config_path}")

        env_settings = env_overrides()
        if env_settings:
            config_dict.update(env_settings)
            logger.debug(f"Applied {len(env_settings)} environment variables")

        config_dict.update({k: v for k, v in overrides.items() if v is not None})

        try:
            return BuilderConfig(**config_dict)
        except PydanticValidationError as e:
            raise ConfigurationError(
                f"Invalid configuration: {e.errors()[0]['msg']}",
                config_file=str(config_path) if config_path else None,
            ) from e


def load_config(config_file: Path | None = None, **overrides: Any) -> BuilderConfig:
    """Load configuration with the standard precedence rules."""
    return ConfigLoader(config_file).load(**overrides)
