"""Shared fixtures for tailui tests."""

import itertools
import logging

import pytest

from tailui.builder_logging import ROOT_LOGGER_NAME
from tailui.config import BuilderConfig
from tailui.core.elements import Element, ElementStore
from tailui.core.history import HistoryEngine
from tailui.project.serializer import ProjectSerializer
from tailui.project.storage import MemoryKeyValueStore
from tailui.workspace import build_workspace


class ManualTimer:
    """Timer stand-in that only fires when told to."""

    def __init__(self, delay, function):
        self.delay = delay
        self.function = function
        self.started = False
        self.cancelled = False

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        self.function()


class ManualTimerFactory:
    """Collects every timer created so tests can fire them explicitly."""

    def __init__(self):
        self.timers: list[ManualTimer] = []

    def __call__(self, delay, function):
        timer = ManualTimer(delay, function)
        self.timers.append(timer)
        return timer

    @property
    def last(self) -> ManualTimer:
        return self.timers[-1]


@pytest.fixture(autouse=True)
def reset_tailui_logger():
    """Undo any logging configuration a test applied."""
    yield
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture
def sequential_ids():
    """Deterministic id factory: el1, el2, ..."""
    counter = itertools.count(1)
    return lambda: f"el{next(counter)}"


@pytest.fixture
def store(sequential_ids) -> ElementStore:
    return ElementStore(id_factory=sequential_ids)


@pytest.fixture
def history() -> HistoryEngine:
    return HistoryEngine()


@pytest.fixture
def storage() -> MemoryKeyValueStore:
    return MemoryKeyValueStore()


@pytest.fixture
def serializer(store, history, storage) -> ProjectSerializer:
    return ProjectSerializer(store, history, storage=storage)


@pytest.fixture
def timer_factory() -> ManualTimerFactory:
    return ManualTimerFactory()


@pytest.fixture
def workspace(storage, timer_factory):
    ws = build_workspace(BuilderConfig(), storage=storage, timer_factory=timer_factory)
    yield ws
    ws.reader.close()


@pytest.fixture
def button() -> Element:
    """A button element built from its kind defaults."""
    return Element.from_dict({"id": "btn", "type": "button", "x": 40, "y": 60})


@pytest.fixture
def sample_project() -> dict:
    """A small valid project payload."""
    return {
        "elements": [
            {"id": "a", "type": "button", "x": 20, "y": 40, "textContent": "Go"},
            {"id": "b", "type": "circle", "x": 100, "y": 100},
            {"id": "c", "type": "text", "x": 0, "y": 200, "fontWeight": 700},
        ],
        "columns": 6,
        "version": "1.0.0",
    }
