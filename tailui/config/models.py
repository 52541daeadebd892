"""Configuration model for the layout builder."""

import os
from pathlib import Path

from pydantic import BaseModel, Field

# Environment variable -> config field
ENV_VARS = {
    "TAILUI_GRID_SIZE": "grid_size",
    "TAILUI_HISTORY_LIMIT": "history_limit",
    "TAILUI_DEFAULT_COLUMNS": "default_columns",
    "TAILUI_STORAGE_KEY": "storage_key",
    "TAILUI_STORAGE_PATH": "storage_path",
    "TAILUI_COMMIT_DEBOUNCE_SECONDS": "commit_debounce_seconds",
    "TAILUI_LOG_LEVEL": "log_level",
    "TAILUI_LOG_FORMAT": "log_format",
}


class BuilderConfig(BaseModel):
    """Global configuration model with validation."""

    # Placement
    grid_size: int = Field(default=20, ge=1)  # Snap quantum in pixels
    min_element_size: int = Field(default=20, ge=1)  # Resize clamp

    # History
    history_limit: int = Field(default=50, ge=1)
    commit_debounce_seconds: float = Field(default=0.5, ge=0)

    # Project
    default_columns: int = Field(default=12, ge=1, le=12)
    project_version: str = Field(default="1.0.0")

    # Persistence
    storage_key: str = Field(default="tailui-generator-project", min_length=1)
    storage_path: Path | None = Field(default=None)  # None = in-memory only

    # Logging
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="text")
    log_file: Path | None = Field(default=None)

    @classmethod
    def from_env(cls) -> "BuilderConfig":
        """Create config with environment variable overrides."""
        return cls(**env_overrides())


def env_overrides() -> dict[str, str]:
    """Collect config values set through TAILUI_* environment variables."""
    overrides: dict[str, str] = {}
    for env_var, field_name in ENV_VARS.items():
        value = os.environ.get(env_var)
        if value is not None:
            overrides[field_name] = value
    return overrides
