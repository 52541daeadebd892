"""CLI utilities package.

Modules:
    output: OutputManager for consistent CLI output with color/quiet support
"""

from .output import OutputConfig, OutputManager, should_use_color

__all__ = [
    "OutputConfig",
    "OutputManager",
    "should_use_color",
]
