"""Project serializer: validate, load, save and persist whole projects.

Project wire format::

    {"elements": [<element>, ...], "columns": 1..12, "version": "1.0.0"}

Elements use the camelCase keys produced by ``Element.to_dict``.
"""

import json
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from ..builder_logging import LogCategory, get_category_logger
from ..core.elements import Element, ElementStore
from ..core.history import HistoryEngine
from ..errors import StorageError, ValidationError
from ..exporters.markup import MarkupExportConfig, MarkupExporter
from ..exporters.stylesheet import StylesheetExporter
from ..styles.compiler import StyleCompiler
from .storage import KeyValueStore
from .validation import ProjectValidator

logger = get_category_logger(LogCategory.SERIALIZER)

PROJECT_VERSION = "1.0.0"
DEFAULT_STORAGE_KEY = "tailui-generator-project"
DEFAULT_COLUMNS = 12
MIN_COLUMNS = 1
MAX_COLUMNS = 12

Transport = Callable[[dict[str, Any]], None]


@dataclass
class LoadResult:
    """Outcome of loading a project.

    A storage failure does not undo the in-memory load; it is reported here.
    """

    element_count: int
    columns: int
    persisted: bool = False
    storage_error: StorageError | None = None

    @property
    def success(self) -> bool:
        return self.storage_error is None


def check_columns(columns: Any) -> int:
    """Return ``columns`` as an int, raising ``ValidationError`` when out of range."""
    if (
        isinstance(columns, bool)
        or not isinstance(columns, (int, float))
        or not MIN_COLUMNS <= columns <= MAX_COLUMNS
    ):
        raise ValidationError(
            f"columns must be a number between {MIN_COLUMNS} and {MAX_COLUMNS}, "
            f"got {columns!r}",
            field="columns",
        )
    return int(columns)


class ProjectSerializer:
    """Converts between the live store and the project wire format.

    The serializer only builds payloads; handing a saved payload to a file,
    clipboard or download is the job of the injected ``transport``.
    """

    def __init__(
        self,
        store: ElementStore,
        history: HistoryEngine,
        compiler: StyleCompiler | None = None,
        storage: KeyValueStore | None = None,
        transport: Transport | None = None,
        storage_key: str = DEFAULT_STORAGE_KEY,
        version: str = PROJECT_VERSION,
        columns: int = DEFAULT_COLUMNS,
        validator: ProjectValidator | None = None,
    ):
        """Initialize the serializer.

        Args:
            store: Element store read by ``save`` and replaced by ``load``.
            history: History reset by ``load``.
            compiler: Style compiler used by the exports.
            storage: Optional key-value collaborator for autosave.
            transport: Optional callable receiving saved payloads.
            storage_key: Key the project is persisted under.
            version: Version string written into saved payloads.
            columns: Initial grid column count.
            validator: Payload validator.
        """
        self.store = store
        self.history = history
        self.compiler = compiler or StyleCompiler()
        self.storage = storage
        self.transport = transport
        self.storage_key = storage_key
        self.version = version
        self.validator = validator or ProjectValidator()
        self._columns = check_columns(columns)

    @property
    def columns(self) -> int:
        return self._columns

    @columns.setter
    def columns(self, value: int) -> None:
        self._columns = check_columns(value)

    # ------------------------------------------------------------------
    # Validation and loading
    # ------------------------------------------------------------------

    def validate(self, raw: Any) -> None:
        """Check the project envelope, raising ``ValidationError`` on the first problem."""
        self.validator.check(raw)

    def build_elements(self, raw: dict[str, Any]) -> list[Element]:
        """Build every element of a validated payload, or none at all."""
        elements = []
        for index, data in enumerate(raw["elements"]):
            try:
                elements.append(Element.from_dict(data))
            except (TypeError, ValueError) as e:
                raise ValidationError(
                    f"Invalid element at index {index}: {e}",
                    field=f"elements.{index}",
                ) from e
        return elements

    def load(self, project: Any) -> LoadResult:
        """Replace the store contents with ``project``.

        The payload is validated and every element built before anything is
        touched, so a failure leaves the store and history unchanged. On
        success the selection is cleared, history is reset to the loaded
        elements, the column count adopted and the project persisted.

        Raises:
            ValidationError: If the payload is malformed.
        """
        self.validate(project)
        elements = self.build_elements(project)
        columns = check_columns(project["columns"])

        self.store.clear_selection()
        snapshot = self.store.set_all(elements)
        self.history.reset(snapshot)
        self._columns = columns
        logger.info(f"Loaded project with {len(snapshot)} elements")

        result = LoadResult(element_count=len(snapshot), columns=columns)
        try:
            result.persisted = self.persist()
        except StorageError as e:
            logger.warning(f"Project loaded but not persisted: {e.message}")
            result.storage_error = e
        return result

    def parse(self, text: str) -> dict[str, Any]:
        """Decode and validate project JSON text."""
        try:
            project = json.loads(text)
        except json.JSONDecodeError as e:
            raise ValidationError(
                f"Project is not valid JSON: {e.msg} (line {e.lineno})",
                suggestion="Check the file is an exported project",
            ) from e
        self.validate(project)
        return project

    def loads(self, text: str) -> LoadResult:
        """Parse project JSON text and load it."""
        return self.load(self.parse(text))

    # ------------------------------------------------------------------
    # Saving and persistence
    # ------------------------------------------------------------------

    def to_payload(self) -> dict[str, Any]:
        return {
            "elements": [element.to_dict() for element in self.store.get_all()],
            "columns": self._columns,
            "version": self.version,
        }

    def save(self) -> dict[str, Any]:
        """Build the project payload and hand it to the transport, if any."""
        payload = self.to_payload()
        if self.transport is not None:
            self.transport(payload)
        logger.debug(f"Saved project with {len(payload['elements'])} elements")
        return payload

    def dumps(self, indent: int | None = 2) -> str:
        """Serialize the current project as JSON text."""
        return json.dumps(self.to_payload(), indent=indent)

    def persist(self) -> bool:
        """Write the current project to the storage collaborator.

        Returns:
            True if a storage collaborator is configured and the write succeeded.

        Raises:
            StorageError: If the collaborator fails.
        """
        if self.storage is None:
            return False
        self.storage.set(self.storage_key, self.to_payload())
        return True

    def restore(self) -> LoadResult | None:
        """Load the persisted project, if one exists.

        Returns:
            LoadResult, or None when nothing is persisted or the stored
            payload is unusable.
        """
        if self.storage is None:
            return None
        try:
            project = self.storage.get(self.storage_key)
        except StorageError as e:
            logger.error(f"Failed to restore saved project: {e.message}")
            return None
        if project is None:
            return None
        try:
            return self.load(project)
        except ValidationError as e:
            logger.error(f"Ignoring invalid saved project: {e.message}")
            return None

    def clear_persisted(self) -> None:
        """Remove the persisted project."""
        if self.storage is not None:
            self.storage.delete(self.storage_key)

    # ------------------------------------------------------------------
    # Code export
    # ------------------------------------------------------------------

    def export_markup(self, title: str | None = None) -> str:
        """Render the current elements as an HTML page."""
        config = MarkupExportConfig() if title is None else MarkupExportConfig(title=title)
        exporter = MarkupExporter(self.compiler, config)
        return exporter.render(self.store.get_all(), self._columns)

    def export_stylesheet(self) -> str:
        """Render the current elements as a declaration sheet."""
        return StylesheetExporter(self.compiler).render(self.store.get_all())
