"""Project files: validation, (de)serialization, persistence and reading."""

from .reader import ProjectFileReader
from .serializer import LoadResult, ProjectSerializer
from .storage import JsonFileKeyValueStore, KeyValueStore, MemoryKeyValueStore
from .validation import ProjectValidator, ValidationIssue, ValidationResult

__all__ = [
    "JsonFileKeyValueStore",
    "KeyValueStore",
    "LoadResult",
    "MemoryKeyValueStore",
    "ProjectFileReader",
    "ProjectSerializer",
    "ProjectValidator",
    "ValidationIssue",
    "ValidationResult",
]
