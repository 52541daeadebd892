"""tailui - layout builder core.

Element store with bounded undo/redo history, a deterministic style compiler
producing utility class tokens plus residual CSS, and a project serializer.
"""

__version__ = "1.0.0"

from .config import BuilderConfig, load_config
from .core import Animation, CommitDebouncer, Element, ElementStore, HistoryEngine
from .errors import (
    BuilderError,
    ConfigurationError,
    ReadError,
    StorageError,
    ValidationError,
)
from .project import ProjectSerializer
from .styles import CompiledStyle, StyleCompiler
from .workspace import Workspace, build_workspace

__all__ = [
    "Animation",
    "BuilderConfig",
    "BuilderError",
    "CommitDebouncer",
    "CompiledStyle",
    "ConfigurationError",
    "Element",
    "ElementStore",
    "HistoryEngine",
    "ProjectSerializer",
    "ReadError",
    "StorageError",
    "StyleCompiler",
    "ValidationError",
    "Workspace",
    "build_workspace",
    "load_config",
]
