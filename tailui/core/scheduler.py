"""Debounced commit scheduling.

Property-panel edits arrive as bursts of small updates. The calling layer
owns a ``CommitDebouncer`` that coalesces a burst into one history commit,
which keeps timers out of the element store.
"""

import threading
from collections.abc import Callable
from typing import Any, Protocol

from ..builder_logging import LogCategory, get_category_logger

logger = get_category_logger(LogCategory.HISTORY)


class Timer(Protocol):
    def start(self) -> None: ...

    def cancel(self) -> None: ...


TimerFactory = Callable[[float, Callable[[], None]], Timer]


class CommitDebouncer:
    """Runs ``callback`` once, ``delay`` seconds after the last ``trigger``.

    Example:
        >>> debouncer = CommitDebouncer(0.5, workspace.commit)
        >>> debouncer.trigger()  # each keystroke
        >>> debouncer.flush()  # e.g. before saving
    """

    def __init__(
        self,
        delay: float,
        callback: Callable[[], None],
        timer_factory: TimerFactory | None = None,
    ):
        """Initialize the debouncer.

        Args:
            delay: Quiet period in seconds before the callback fires.
            callback: Function to run once the burst is over.
            timer_factory: Creates timers; defaults to ``threading.Timer``.
        """
        self.delay = delay
        self.callback = callback
        self._timer_factory = timer_factory or threading.Timer
        self._timer: Timer | None = None
        self._lock = threading.Lock()
        self._fired = 0
        self._generation = 0

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._timer is not None

    def trigger(self) -> None:
        """(Re)arm the timer, postponing any pending callback."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._generation += 1
            generation = self._generation
            self._timer = self._timer_factory(
                self.delay, lambda: self._fire(generation)
            )
            self._timer.start()

    def cancel(self) -> None:
        """Drop the pending callback, if any."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    def flush(self) -> bool:
        """Run the pending callback now.

        Returns:
            True if a callback was pending and has run.
        """
        with self._lock:
            if self._timer is None:
                return False
            self._timer.cancel()
            self._timer = None
        self._run()
        return True

    def _fire(self, generation: int) -> None:
        with self._lock:
            # A re-armed or flushed timer may still fire once; ignore it
            if self._timer is None or generation != self._generation:
                return
            self._timer = None
        self._run()

    def _run(self) -> None:
        self._fired += 1
        self.callback()

    def get_stats(self) -> dict[str, Any]:
        """Get debouncer statistics."""
        return {
            "pending": self.pending,
            "delay": self.delay,
            "fired": self._fired,
        }
