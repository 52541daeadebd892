"""Workspace: the composition root wiring store, history, compiler and serializer.

Every component is built once by ``build_workspace`` and handed around as an
explicit reference; nothing is looked up globally. The workspace is the
calling layer the UI glue talks to: it turns discrete user commands into
store mutations followed by history commits and autosaves.

Edits arrive three ways:

- discrete commands (add, delete, undo, ...) commit immediately;
- property edits (``update_selected``) are coalesced by a debouncer into one
  commit per burst;
- pointer gestures (``begin_gesture``/``preview``/``end_gesture``) update the
  store live and commit once at the end.
"""

import threading
from collections.abc import Callable, Mapping
from concurrent.futures import Future
from pathlib import Path
from typing import Any

from .builder_logging import LogCategory, get_category_logger
from .config import BuilderConfig
from .core.elements import ELEMENT_FIELDS, IDENTITY_FIELDS, Element, ElementStore
from .core.history import HistoryEngine
from .core.scheduler import CommitDebouncer, TimerFactory
from .errors import BuilderError, StorageError, ValidationError
from .project.reader import ProjectFileReader
from .project.serializer import LoadResult, ProjectSerializer, Transport
from .project.storage import JsonFileKeyValueStore, KeyValueStore, MemoryKeyValueStore
from .styles.compiler import StyleCompiler

logger = get_category_logger(LogCategory.STORE)

# Normalized key combo -> Workspace method
SHORTCUTS: dict[str, str] = {
    "ctrl+z": "undo",
    "ctrl+shift+z": "redo",
    "ctrl+y": "redo",
    "delete": "delete_selected",
    "backspace": "delete_selected",
    "escape": "clear_selection",
    "ctrl+s": "save",
    "ctrl+o": "request_open",
}

MODIFIER_ORDER = ("ctrl", "alt", "shift")
MODIFIER_ALIASES = {
    "control": "ctrl",
    "cmd": "ctrl",
    "command": "ctrl",
    "meta": "ctrl",
    "option": "alt",
}
KEY_ALIASES = {"del": "delete", "esc": "escape"}

SIZE_FIELDS = ("width", "height")


def normalize_combo(combo: str) -> str:
    """Normalize a key combo such as ``"Cmd+Shift+Z"`` to ``"ctrl+shift+z"``.

    The platform command key is treated as ctrl.
    """
    parts = [part.strip().lower() for part in combo.split("+") if part.strip()]
    if not parts:
        raise ValueError(f"Empty key combo: {combo!r}")
    *modifiers, key = parts
    names = {MODIFIER_ALIASES.get(m, m) for m in modifiers}
    unknown = names - set(MODIFIER_ORDER)
    if unknown:
        raise ValueError(f"Unknown modifier(s) in {combo!r}: {', '.join(sorted(unknown))}")
    ordered = [m for m in MODIFIER_ORDER if m in names]
    return "+".join([*ordered, KEY_ALIASES.get(key, key)])


class Workspace:
    """One open project and the commands that edit it."""

    def __init__(
        self,
        config: BuilderConfig,
        store: ElementStore,
        history: HistoryEngine,
        compiler: StyleCompiler,
        serializer: ProjectSerializer,
        reader: ProjectFileReader,
        timer_factory: TimerFactory | None = None,
        open_requester: Callable[[], None] | None = None,
    ):
        """Initialize the workspace from already built components.

        Use ``build_workspace`` rather than calling this directly.

        Args:
            config: Builder configuration.
            store: Element store.
            history: Undo/redo history.
            compiler: Style compiler.
            serializer: Project serializer bound to ``store`` and ``history``.
            reader: Project file reader.
            timer_factory: Timer factory for the property-edit debouncer.
            open_requester: Called when the open shortcut is pressed; shows
                whatever file picker the host provides.
        """
        self.config = config
        self.store = store
        self.history = history
        self.compiler = compiler
        self.serializer = serializer
        self.reader = reader
        self.open_requester = open_requester
        self.debouncer = CommitDebouncer(
            config.commit_debounce_seconds,
            self._commit_pending,
            timer_factory=timer_factory,
        )
        self._lock = threading.RLock()
        # Set by property edits not yet recorded in history
        self._dirty = False
        self._gesture_origin: Element | None = None

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def elements(self) -> tuple[Element, ...]:
        return self.store.get_all()

    @property
    def selected(self) -> Element | None:
        return self.store.get_selected()

    @property
    def columns(self) -> int:
        return self.serializer.columns

    def can_undo(self) -> bool:
        return self.history.can_undo()

    def can_redo(self) -> bool:
        return self.history.can_redo()

    # ------------------------------------------------------------------
    # Commit pipeline
    # ------------------------------------------------------------------

    def commit(self) -> None:
        """Record the live element list in history and autosave it."""
        with self._lock:
            self.history.commit(self.store.get_all())
            self.autosave()

    def autosave(self) -> bool:
        """Persist the project, logging instead of raising on storage failure."""
        try:
            return self.serializer.persist()
        except StorageError as e:
            logger.warning(f"Autosave failed: {e.message}")
            return False

    def _commit_pending(self) -> bool:
        """Commit uncommitted property edits, if any.

        Runs on the debouncer's timer thread as well as inline; the dirty
        flag is only read and cleared under the workspace lock.
        """
        with self._lock:
            if not self._dirty:
                return False
            self._dirty = False
            self.commit()
            return True

    def _flush_pending(self) -> None:
        # Pending property edits get their own history entry first
        self.debouncer.cancel()
        self._commit_pending()

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def add_element(self, kind: str, x: float, y: float) -> Element:
        """Create an element of ``kind`` at a snapped position, select and commit it."""
        with self._lock:
            self._flush_pending()
            element = self.store.create(kind, x, y)
            self.store.add(element)
            self.store.select(element.id)
            self.commit()
            logger.info(f"Added {kind} element {element.id} at ({element.x}, {element.y})")
            return element

    def select(self, element_id: str) -> None:
        with self._lock:
            self.store.select(element_id)

    def clear_selection(self) -> None:
        with self._lock:
            self.store.clear_selection()

    def update_selected(self, patch: Mapping[str, Any]) -> bool:
        """Apply a property-panel edit to the selection.

        The edit shows up in the store at once; the history commit is
        debounced so a burst of edits becomes one undo step.

        Returns:
            False when nothing is selected.
        """
        with self._lock:
            element_id = self.store.selected_id
            if element_id is None:
                return False
            self.store.update(element_id, patch)
            self._dirty = True
            self.debouncer.trigger()
            return True

    def delete_selected(self) -> bool:
        """Delete the selected element and commit.

        Returns:
            False when nothing is selected.
        """
        with self._lock:
            element_id = self.store.selected_id
            if element_id is None:
                return False
            self._flush_pending()
            self.store.delete(element_id)
            self.commit()
            return True

    def undo(self) -> bool:
        """Step back one history entry.

        Returns:
            False when there is nothing to undo.
        """
        with self._lock:
            self._flush_pending()
            snapshot = self.history.undo()
            if snapshot is None:
                return False
            self.store.set_all(snapshot)
            self.autosave()
            return True

    def redo(self) -> bool:
        """Step forward one history entry.

        Returns:
            False when there is nothing to redo.
        """
        with self._lock:
            self._flush_pending()
            snapshot = self.history.redo()
            if snapshot is None:
                return False
            self.store.set_all(snapshot)
            self.autosave()
            return True

    def set_columns(self, columns: int) -> None:
        """Change the grid column count (1-12) and autosave."""
        with self._lock:
            self.serializer.columns = columns
            self.autosave()

    # ------------------------------------------------------------------
    # Gestures
    # ------------------------------------------------------------------

    @property
    def gesture_active(self) -> bool:
        return self._gesture_origin is not None

    def begin_gesture(self, element_id: str) -> bool:
        """Start a drag/resize/rotate gesture on ``element_id``.

        Returns:
            False if the element does not exist.
        """
        with self._lock:
            element = self.store.get_by_id(element_id)
            if element is None:
                return False
            self._flush_pending()
            self.store.select(element_id)
            self._gesture_origin = element
            return True

    def preview(self, patch: Mapping[str, Any]) -> None:
        """Apply a live gesture update without touching history.

        Width and height are clamped to the minimum element size.
        """
        with self._lock:
            if self._gesture_origin is None:
                raise RuntimeError("preview() called outside a gesture")
            changes = dict(patch)
            for name in SIZE_FIELDS:
                if name in changes:
                    changes[name] = max(self.config.min_element_size, changes[name])
            self.store.update(self._gesture_origin.id, changes)

    def end_gesture(self) -> bool:
        """Finish the gesture with a single commit.

        Returns:
            True if the gesture changed the element and was committed.
        """
        with self._lock:
            origin = self._gesture_origin
            if origin is None:
                return False
            self._gesture_origin = None
            current = self.store.get_by_id(origin.id)
            if current is None or current == origin:
                return False
            self.commit()
            return True

    def cancel_gesture(self) -> None:
        """Abandon the gesture, restoring the element as it was at the start."""
        with self._lock:
            origin = self._gesture_origin
            if origin is None:
                return
            self._gesture_origin = None
            restore = {
                name: getattr(origin, name)
                for name in ELEMENT_FIELDS
                if name not in IDENTITY_FIELDS
            }
            self.store.update(origin.id, restore)

    # ------------------------------------------------------------------
    # Files
    # ------------------------------------------------------------------

    def save(self) -> dict[str, Any]:
        """Build the project payload and hand it to the transport."""
        with self._lock:
            self._flush_pending()
            return self.serializer.save()

    def load(self, project: Any) -> LoadResult:
        """Replace the open project with a decoded payload."""
        with self._lock:
            result = self.serializer.load(project)
            self.debouncer.cancel()
            self._dirty = False
            self._gesture_origin = None
            return result

    def load_text(self, text: str) -> LoadResult:
        """Parse, validate and load project JSON text."""
        return self.load(self.serializer.parse(text))

    def open_file(
        self,
        path: Path | str,
        on_done: Callable[[LoadResult], None] | None = None,
        on_error: Callable[[BuilderError], None] | None = None,
    ) -> Future:
        """Read ``path`` in the background, then parse, validate and load it.

        The load runs on the reader's thread once the text arrives. Read and
        validation failures go to ``on_error`` and leave the project as it was.

        Returns:
            Future resolved once the file has been handled.
        """

        def loaded(text: str) -> None:
            try:
                result = self.load_text(text)
            except ValidationError as e:
                logger.warning(f"Rejected project file {path}: {e.message}")
                if on_error is not None:
                    on_error(e)
                return
            if on_done is not None:
                on_done(result)

        return self.reader.read(path, loaded, on_error)

    def request_open(self) -> bool:
        """Ask the host to show its file picker.

        Returns:
            False if no open requester is configured.
        """
        if self.open_requester is None:
            return False
        self.open_requester()
        return True

    def restore(self) -> LoadResult | None:
        """Load the autosaved project, if any."""
        with self._lock:
            return self.serializer.restore()

    # ------------------------------------------------------------------
    # Keyboard
    # ------------------------------------------------------------------

    def dispatch(self, combo: str) -> bool:
        """Run the command bound to ``combo``.

        Returns:
            True if a binding exists and its command did something.
        """
        action = SHORTCUTS.get(normalize_combo(combo))
        if action is None:
            return False
        handled = getattr(self, action)()
        return handled is not False

    def close(self) -> None:
        """Flush pending edits and release the reader."""
        with self._lock:
            self._flush_pending()
        self.reader.close()


def build_storage(config: BuilderConfig) -> KeyValueStore:
    """Storage collaborator for ``config``: a JSON file if a path is set."""
    if config.storage_path is not None:
        return JsonFileKeyValueStore(config.storage_path)
    return MemoryKeyValueStore()


def build_workspace(
    config: BuilderConfig | None = None,
    storage: KeyValueStore | None = None,
    transport: Transport | None = None,
    reader: ProjectFileReader | None = None,
    timer_factory: TimerFactory | None = None,
    open_requester: Callable[[], None] | None = None,
) -> Workspace:
    """Build every component once and wire them together.

    Args:
        config: Builder configuration (defaults when omitted).
        storage: Autosave collaborator; derived from ``config`` when omitted.
        transport: Receives payloads built by ``save``.
        reader: Project file reader.
        timer_factory: Timer factory for debounced commits.
        open_requester: Host callback for the open shortcut.

    Returns:
        A ready Workspace with an empty project.
    """
    config = config or BuilderConfig()
    store = ElementStore(grid_size=config.grid_size)
    history = HistoryEngine(limit=config.history_limit)
    compiler = StyleCompiler()
    serializer = ProjectSerializer(
        store,
        history,
        compiler=compiler,
        storage=storage if storage is not None else build_storage(config),
        transport=transport,
        storage_key=config.storage_key,
        version=config.project_version,
        columns=config.default_columns,
    )
    logger.debug("Workspace built")
    return Workspace(
        config,
        store,
        history,
        compiler,
        serializer,
        reader or ProjectFileReader(),
        timer_factory=timer_factory,
        open_requester=open_requester,
    )
