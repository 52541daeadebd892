"""Document model: elements, the element store and undo/redo history."""

from .elements import (
    ELEMENT_KINDS,
    Animation,
    Element,
    ElementStore,
    Snapshot,
    snap_to_grid,
)
from .history import HistoryEngine
from .scheduler import CommitDebouncer

__all__ = [
    "ELEMENT_KINDS",
    "Animation",
    "CommitDebouncer",
    "Element",
    "ElementStore",
    "HistoryEngine",
    "Snapshot",
    "snap_to_grid",
]
