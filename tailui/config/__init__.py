"""Configuration package.

Configuration Precedence (highest to lowest):
1. Explicit overrides
2. Environment variables (TAILUI_*)
3. Config file (.tailui/config.json or an explicit path)
4. Defaults
"""

from .config_loader import ConfigLoader, load_config
from .models import BuilderConfig

__all__ = [
    "BuilderConfig",
    "ConfigLoader",
    "load_config",
]
