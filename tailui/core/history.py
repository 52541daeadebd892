"""Bounded linear undo/redo history over element snapshots.

History entries are snapshots (tuples of frozen elements), so an entry can
never change after it has been committed, no matter what happens to the live
store afterwards.
"""

from collections.abc import Iterable
from typing import Any

from ..builder_logging import LogCategory, get_category_logger
from .elements import Element, Snapshot

logger = get_category_logger(LogCategory.HISTORY)

DEFAULT_HISTORY_LIMIT = 50


class HistoryEngine:
    """Linear undo/redo over a bounded sequence of snapshots with a cursor.

    Invariant: ``0 <= cursor <= len(history) - 1`` at all times. Committing
    after an undo permanently drops the abandoned forward branch.
    """

    def __init__(self, limit: int = DEFAULT_HISTORY_LIMIT):
        """Initialize with a single empty snapshot.

        Args:
            limit: Maximum number of snapshots kept (oldest evicted first).
        """
        if limit < 1:
            raise ValueError("history limit must be >= 1")
        self.limit = limit
        self._entries: list[Snapshot] = [()]
        self._cursor = 0

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def cursor(self) -> int:
        return self._cursor

    def current(self) -> Snapshot:
        """Return the snapshot at the cursor."""
        return self._entries[self._cursor]

    def commit(self, snapshot: Iterable[Element]) -> None:
        """Record ``snapshot`` as the newest entry.

        Any redo branch beyond the cursor is discarded. When the bound is
        exceeded the oldest entry is evicted and the cursor moves with it.
        """
        entries = self._entries[: self._cursor + 1]
        entries.append(tuple(snapshot))
        cursor = len(entries) - 1

        if len(entries) > self.limit:
            entries.pop(0)
            cursor -= 1

        self._entries = entries
        self._cursor = cursor
        logger.debug(
            f"Committed snapshot {self._cursor + 1}/{len(self._entries)} "
            f"({len(self._entries[self._cursor])} elements)"
        )

    def undo(self) -> Snapshot | None:
        """Step back one entry; returns ``None`` when there is nothing to undo."""
        if not self.can_undo():
            return None
        self._cursor -= 1
        return self._entries[self._cursor]

    def redo(self) -> Snapshot | None:
        """Step forward one entry; returns ``None`` when there is nothing to redo."""
        if not self.can_redo():
            return None
        self._cursor += 1
        return self._entries[self._cursor]

    def can_undo(self) -> bool:
        return self._cursor > 0

    def can_redo(self) -> bool:
        return self._cursor < len(self._entries) - 1

    def reset(self, snapshot: Iterable[Element]) -> None:
        """Replace the whole history with a single snapshot."""
        self._entries = [tuple(snapshot)]
        self._cursor = 0
        logger.debug("History reset")

    def get_stats(self) -> dict[str, Any]:
        """Get statistics about history usage."""
        return {
            "entries": len(self._entries),
            "cursor": self._cursor,
            "undo_count": self._cursor,
            "redo_count": len(self._entries) - 1 - self._cursor,
            "limit": self.limit,
            "full": len(self._entries) >= self.limit,
        }
