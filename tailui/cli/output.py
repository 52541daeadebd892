"""Status line output for the tailui commands.

Command results (markup, stylesheets, compiled JSON) go to stdout untouched;
status lines carry a symbol prefix that falls back to a bracketed tag when
color is off. Honors ``NO_COLOR`` (https://no-color.org/) and ``--no-color``.
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from typing import TextIO

import click


def should_use_color(
    explicit_flag: bool | None = None,
    stream: TextIO | None = None,
) -> bool:
    """Decide whether status lines get ANSI colors.

    ``--no-color`` wins, then ``NO_COLOR``, then ``FORCE_COLOR``; otherwise
    colors are used only when ``stream`` (stdout by default) is a terminal.
    """
    if explicit_flag is not None:
        return explicit_flag
    if "NO_COLOR" in os.environ:
        return False
    if "FORCE_COLOR" in os.environ:
        return True
    stream = stream or sys.stdout
    return bool(getattr(stream, "isatty", lambda: False)())


@dataclass
class OutputConfig:
    """How a command reports status.

    Attributes:
        use_color: Prefix status lines with colored symbols.
        quiet: Only errors and command results are printed.
        stream: Destination of results and status lines.
        err_stream: Destination of errors.
    """

    use_color: bool = True
    quiet: bool = False
    stream: TextIO = field(default_factory=lambda: sys.stdout)
    err_stream: TextIO = field(default_factory=lambda: sys.stderr)

    @classmethod
    def from_flags(cls, quiet: bool = False, no_color: bool = False) -> OutputConfig:
        return cls(
            use_color=should_use_color(explicit_flag=False if no_color else None),
            quiet=quiet,
        )


class OutputManager:
    """Prints results and status lines for one command run.

    Example:
        >>> output = OutputManager(OutputConfig(use_color=False))
        >>> output.success("Wrote markup to page.html")
        [OK] Wrote markup to page.html
    """

    SYMBOLS = {
        "success": ("\033[92m✓\033[0m", "[OK]"),
        "error": ("\033[91m✗\033[0m", "[FAIL]"),
        "warning": ("\033[93m⚠\033[0m", "[WARN]"),
    }

    def __init__(self, config: OutputConfig | None = None):
        self.config = config or OutputConfig()

    def _status(self, kind: str, message: str, err: bool = False) -> None:
        if self.config.quiet and not err:
            return
        colored, plain = self.SYMBOLS[kind]
        symbol = colored if self.config.use_color else plain
        stream = self.config.err_stream if err else self.config.stream
        click.echo(f"{symbol} {message}", file=stream)

    def success(self, message: str) -> None:
        self._status("success", message)

    def warning(self, message: str) -> None:
        """Report a validation warning; suppressed by ``--quiet``."""
        self._status("warning", message)

    def error(self, message: str) -> None:
        """Report an error on stderr, even in quiet mode."""
        self._status("error", message, err=True)

    def result(self, text: str) -> None:
        """Print a command result; never suppressed."""
        click.echo(text, file=self.config.stream)
