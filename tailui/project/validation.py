"""Project payload validation with clear, actionable error messages.

The schema covers the project envelope and the element fields every consumer
relies on (``id``, ``type``, ``x``, ``y``). Style fields are checked against
the element attribute types afterwards; unknown keys are left alone.
"""

from dataclasses import dataclass, field
from typing import Any

from jsonschema import Draft7Validator

from ..builder_logging import LogCategory, get_category_logger
from ..core.elements import (
    ELEMENT_KINDS,
    IDENTITY_FIELDS,
    WIRE_TO_FIELD,
    Animation,
    check_value,
)
from ..errors import ValidationError

logger = get_category_logger(LogCategory.SERIALIZER)

PROJECT_SCHEMA: dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "tailui project",
    "type": "object",
    "required": ["elements", "columns"],
    "properties": {
        "elements": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["id", "type", "x", "y"],
                "properties": {
                    "id": {"type": ["string", "integer"], "minLength": 1},
                    "type": {"type": "string", "minLength": 1},
                    "x": {"type": "number"},
                    "y": {"type": "number"},
                },
            },
        },
        "columns": {"type": "number", "minimum": 1, "maximum": 12},
        "version": {"type": "string"},
    },
}


@dataclass
class ValidationIssue:
    """A single problem found in a project payload."""

    path: str
    message: str
    suggestion: str | None = None
    severity: str = "error"

    def __str__(self) -> str:
        result = f"  [{self.path}] {self.message}"
        if self.suggestion:
            result += f"\n    Suggestion: {self.suggestion}"
        return result

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "path": self.path,
            "message": self.message,
            "suggestion": self.suggestion,
            "severity": self.severity,
        }


@dataclass
class ValidationResult:
    """Result of project validation."""

    valid: bool
    errors: list[ValidationIssue] = field(default_factory=list)
    warnings: list[ValidationIssue] = field(default_factory=list)

    def __str__(self) -> str:
        if self.valid and not self.warnings:
            return "Project is valid."

        lines = []
        if self.errors:
            lines.append(f"Errors ({len(self.errors)}):")
            lines.extend(str(e) for e in self.errors)
        if self.warnings:
            lines.append(f"Warnings ({len(self.warnings)}):")
            lines.extend(str(w) for w in self.warnings)
        return "\n".join(lines)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "valid": self.valid,
            "errors": [e.to_dict() for e in self.errors],
            "warnings": [w.to_dict() for w in self.warnings],
        }


def _path_sort_key(path: list[Any]) -> list[tuple[int, Any]]:
    # Integer indexes sort numerically, so elements.2 precedes elements.10
    return [(0, part) if isinstance(part, int) else (1, str(part)) for part in path]


class ProjectValidator:
    """Validates project payloads against ``PROJECT_SCHEMA``."""

    ERROR_SUGGESTIONS: dict[str, str] = {
        "minimum": "Use a larger value",
        "maximum": "Use a smaller value",
        "minLength": "The value must not be empty",
        "type": "Check the expected data type",
        "required": "This field is required",
    }

    def __init__(self, schema: dict[str, Any] | None = None):
        self.schema = schema or PROJECT_SCHEMA
        self._validator = Draft7Validator(self.schema)

    def validate(self, project: Any) -> ValidationResult:
        """Validate a payload and return every problem found.

        Args:
            project: Decoded project payload.

        Returns:
            ValidationResult with errors ordered by field path.
        """
        schema_errors = sorted(
            self._validator.iter_errors(project),
            key=lambda error: _path_sort_key(list(error.path)),
        )
        errors = [self._convert_schema_error(error) for error in schema_errors]
        warnings: list[ValidationIssue] = []
        if not errors:
            for issue in self._semantic_issues(project):
                if issue.severity == "error":
                    errors.append(issue)
                else:
                    warnings.append(issue)

        return ValidationResult(valid=not errors, errors=errors, warnings=warnings)

    def check(self, project: Any) -> None:
        """Raise ``ValidationError`` for the first problem found, if any."""
        result = self.validate(project)
        if result.valid:
            return
        first = result.errors[0]
        logger.warning(f"Project validation failed at {first.path}: {first.message}")
        raise ValidationError(first.message, field=first.path, suggestion=first.suggestion)

    def _convert_schema_error(self, error: Any) -> ValidationIssue:
        """Convert a jsonschema error to a ValidationIssue."""
        parts = [str(p) for p in error.path]
        message = error.message
        validator = error.validator
        suggestion = self.ERROR_SUGGESTIONS.get(validator)

        if validator == "type":
            expected = error.validator_value
            if isinstance(expected, list):
                expected = " or ".join(expected)
            actual = type(error.instance).__name__
            message = f"Expected {expected}, got {actual}"
        elif validator == "required":
            missing = [name for name in error.validator_value if name not in error.instance]
            # Name the missing field itself so callers see e.g. elements.3.id
            parts.append(missing[0])
            message = f"Missing required field(s): {', '.join(missing)}"
        elif validator == "minimum":
            message = f"Value {error.instance} is below minimum {error.validator_value}"
        elif validator == "maximum":
            message = f"Value {error.instance} is above maximum {error.validator_value}"
        elif validator == "minLength":
            message = "Value must not be empty"

        return ValidationIssue(
            path=".".join(parts) or "root",
            message=message,
            suggestion=suggestion,
        )

    def _semantic_issues(self, project: dict[str, Any]) -> list[ValidationIssue]:
        """Kind, id uniqueness and attribute type checks on a schema-valid payload."""
        issues = []
        seen: set[Any] = set()
        for index, element in enumerate(project["elements"]):
            if element["type"] not in ELEMENT_KINDS:
                issues.append(
                    ValidationIssue(
                        path=f"elements.{index}.type",
                        message=f"Unknown element kind {element['type']!r}",
                        suggestion="Generic defaults will be used for missing fields",
                        severity="warning",
                    )
                )
            if element["id"] in seen:
                issues.append(
                    ValidationIssue(
                        path=f"elements.{index}.id",
                        message=f"Duplicate element id {element['id']!r}",
                        suggestion="Element ids must be unique within a project",
                    )
                )
            seen.add(element["id"])
            issues.extend(self._field_issues(index, element))
        return issues

    def _field_issues(
        self, index: int, element: dict[str, Any]
    ) -> list[ValidationIssue]:
        issues = []
        for key, value in element.items():
            name = WIRE_TO_FIELD.get(key)
            if name is None or name in IDENTITY_FIELDS:
                continue
            try:
                if name == "animation":
                    Animation.from_dict(value)
                else:
                    check_value(name, value)
            except ValueError as e:
                issues.append(
                    ValidationIssue(
                        path=f"elements.{index}.{key}",
                        message=str(e),
                        suggestion="Use numbers for sizes and weights, strings otherwise",
                    )
                )
        return issues
