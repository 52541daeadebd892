"""Structured error types with recovery suggestions.

Every failure the core surfaces to a caller is one of these categorised
errors. Unknown element ids are deliberately not errors: store updates and
deletes on missing ids are silent no-ops.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(Enum):
    """Categories of builder errors for organization and handling."""

    VALIDATION = "validation"  # Malformed project or import payload
    STORAGE = "storage"  # Key-value persistence failures
    READ = "read"  # External file read failures
    CONFIGURATION = "configuration"  # Invalid config file or settings
    RUNTIME = "runtime"  # Unexpected errors


@dataclass
class BuilderError(Exception):
    """Base class for structured errors with recovery suggestions.

    Attributes:
        category: Error category for grouping.
        message: Human-readable error message.
        suggestion: Optional actionable recovery suggestion.
        details: Optional additional details dict.
        exit_code: Exit code to use when this error terminates the CLI.
    """

    category: ErrorCategory
    message: str
    suggestion: str | None = None
    details: dict[str, Any] | None = field(default_factory=dict)
    exit_code: int = 1

    def __post_init__(self) -> None:
        """Initialize the exception with the message."""
        super().__init__(self.message)

    def format(self, use_color: bool = True) -> str:
        """Format the error for display.

        Args:
            use_color: Whether to include ANSI color codes.

        Returns:
            Formatted error string with suggestion if available.
        """
        red = "\033[91m" if use_color else ""
        cyan = "\033[96m" if use_color else ""
        dim = "\033[2m" if use_color else ""
        reset = "\033[0m" if use_color else ""

        lines = [f"{red}Error:{reset} {self.message}"]

        if self.suggestion:
            lines.append(f"{cyan}Suggestion:{reset} {self.suggestion}")

        if self.details:
            for key, value in self.details.items():
                lines.append(f"{dim}  {key}: {value}{reset}")

        return "\n".join(lines)

    def __str__(self) -> str:
        """Return the formatted error message."""
        return self.format(use_color=False)


class ValidationError(BuilderError):
    """Malformed project or import payload.

    The operation that raised it is aborted and the store is left untouched.
    """

    def __init__(
        self,
        message: str,
        field: str = "root",
        suggestion: str | None = None,
    ):
        self.field = field
        super().__init__(
            category=ErrorCategory.VALIDATION,
            message=message,
            suggestion=suggestion or "Check the project file structure",
            details={"field": field},
            exit_code=2,
        )


class StorageError(BuilderError):
    """Failure of the key-value persistence collaborator.

    Reported to the caller but never blocks in-memory operation.
    """

    def __init__(
        self,
        message: str,
        key: str | None = None,
        original_error: str | None = None,
    ):
        if original_error:
            message = f"{message}: {original_error}"
        super().__init__(
            category=ErrorCategory.STORAGE,
            message=message,
            suggestion="Check that the storage location exists and is writable",
            details={"key": key} if key else None,
            exit_code=1,
        )


class ReadError(BuilderError):
    """Failure to read an externally supplied project file."""

    def __init__(self, path: str, original_error: str | None = None):
        message = f"Failed to read file: {path}"
        if original_error:
            message = f"{message}: {original_error}"
        super().__init__(
            category=ErrorCategory.READ,
            message=message,
            suggestion="Verify the path exists and you have read permissions",
            details={"path": path},
            exit_code=1,
        )


class ConfigurationError(BuilderError):
    """Error in configuration file or settings."""

    def __init__(
        self,
        message: str,
        config_file: str | None = None,
        suggestion: str | None = None,
    ):
        default_suggestion = "Check your configuration file syntax and field values"
        super().__init__(
            category=ErrorCategory.CONFIGURATION,
            message=message,
            suggestion=suggestion or default_suggestion,
            details={"config_file": config_file} if config_file else None,
            exit_code=1,
        )


def handle_exception(
    error: Exception,
    use_color: bool = True,
    verbose: bool = False,
) -> tuple[str, int]:
    """Convert any exception to formatted output and exit code.

    Args:
        error: The exception to handle.
        use_color: Whether to use color in output.
        verbose: Whether to include full traceback.

    Returns:
        Tuple of (formatted_message, exit_code).
    """
    import traceback

    if isinstance(error, BuilderError):
        message = error.format(use_color=use_color)
        exit_code = error.exit_code
    else:
        red = "\033[91m" if use_color else ""
        reset = "\033[0m" if use_color else ""
        message = f"{red}Error:{reset} {str(error)}"
        exit_code = 1

    if verbose:
        message += "\n\nTraceback:\n" + traceback.format_exc()

    return message, exit_code
