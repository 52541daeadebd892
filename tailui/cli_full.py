"""Click-based CLI for working with layout project files."""

import json
import sys
from pathlib import Path
from typing import Any

import click

from . import __version__
from .builder_logging import LogCategory, get_category_logger, setup_logging
from .cli.output import OutputConfig, OutputManager
from .config import BuilderConfig, load_config
from .errors import BuilderError, StorageError, ValidationError, handle_exception
from .project.reader import ProjectFileReader
from .project.storage import MemoryKeyValueStore
from .project.validation import ProjectValidator
from .workspace import Workspace, build_workspace

logger = get_category_logger(LogCategory.CLI)


def common_options(f: Any) -> Any:
    """Common options for every command."""
    f = click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")(f)
    f = click.option("--quiet", "-q", is_flag=True, help="Suppress non-error output")(f)
    f = click.option("--no-color", is_flag=True, help="Disable colored output")(f)
    f = click.option(
        "--config", type=click.Path(exists=True), help="Configuration file path"
    )(f)
    return f


def _setup(
    verbose: bool, quiet: bool, no_color: bool, config: str | None
) -> tuple[BuilderConfig, OutputManager]:
    """Load configuration and set up logging and output for a command."""
    output = OutputManager(
        OutputConfig.from_flags(quiet=quiet, no_color=no_color)
    )
    if quiet and verbose:
        output.error("--quiet and --verbose are mutually exclusive")
        sys.exit(1)

    try:
        config_obj = load_config(Path(config) if config else None)
    except BuilderError as e:
        _fail(e, output, verbose)

    setup_logging(
        level=config_obj.log_level,
        quiet=quiet,
        verbose=verbose,
        log_file=config_obj.log_file,
        log_format=config_obj.log_format,
    )
    return config_obj, output


def _fail(error: Exception, output: OutputManager, verbose: bool) -> None:
    message, exit_code = handle_exception(
        error, use_color=output.config.use_color, verbose=verbose
    )
    click.echo(message, err=True)
    sys.exit(exit_code)


def _open_project(project: str, config: BuilderConfig) -> Workspace:
    """Build a workspace holding the project file's contents.

    Autosave goes to memory so CLI runs never touch the configured storage.
    """
    reader = ProjectFileReader()
    text = reader.read_text(project)
    workspace = build_workspace(config, storage=MemoryKeyValueStore(), reader=reader)
    result = workspace.load_text(text)
    logger.debug(f"Opened {project} with {result.element_count} elements")
    return workspace


def _write_or_print(
    content: str, output_path: str | None, output: OutputManager, what: str
) -> None:
    if output_path is None:
        output.result(content)
        return
    try:
        Path(output_path).write_text(content, encoding="utf-8")
    except OSError as e:
        raise StorageError(f"Failed to write {output_path}", original_error=str(e)) from e
    output.success(f"Wrote {what} to {output_path}")


@click.group()
@click.version_option(version=__version__)
def cli() -> None:
    """tailui - compose positioned layouts and export them as markup and CSS."""


@cli.command()
@click.argument("project", type=click.Path())
@common_options
def validate(project, verbose, quiet, no_color, config):
    """Validate a project file and list every problem found."""
    config_obj, output = _setup(verbose, quiet, no_color, config)

    try:
        text = ProjectFileReader().read_text(project)
        try:
            payload = json.loads(text)
        except json.JSONDecodeError as e:
            raise ValidationError(f"Project is not valid JSON: {e.msg} (line {e.lineno})") from e

        result = ProjectValidator().validate(payload)
    except BuilderError as e:
        _fail(e, output, verbose)

    for warning in result.warnings:
        output.warning(f"[{warning.path}] {warning.message}")

    if not result.valid:
        for issue in result.errors:
            output.error(f"[{issue.path}] {issue.message}")
        sys.exit(2)

    element_count = len(payload["elements"])
    output.success(
        f"{project} is valid ({element_count} elements, {payload['columns']} columns)"
    )


@cli.command("export-html")
@click.argument("project", type=click.Path())
@click.option("--output", "-o", "output_path", type=click.Path(), help="Write to file")
@click.option("--title", default=None, help="Document title")
@common_options
def export_html(project, output_path, title, verbose, quiet, no_color, config):
    """Export a project as a standalone HTML page."""
    config_obj, output = _setup(verbose, quiet, no_color, config)

    try:
        workspace = _open_project(project, config_obj)
        markup = workspace.serializer.export_markup(title=title)
        _write_or_print(markup, output_path, output, "markup")
    except BuilderError as e:
        _fail(e, output, verbose)


@cli.command("export-css")
@click.argument("project", type=click.Path())
@click.option("--output", "-o", "output_path", type=click.Path(), help="Write to file")
@common_options
def export_css(project, output_path, verbose, quiet, no_color, config):
    """Export a project as a CSS declaration sheet."""
    config_obj, output = _setup(verbose, quiet, no_color, config)

    try:
        workspace = _open_project(project, config_obj)
        stylesheet = workspace.serializer.export_stylesheet()
        _write_or_print(stylesheet, output_path, output, "stylesheet")
    except BuilderError as e:
        _fail(e, output, verbose)


@cli.command("compile")
@click.argument("project", type=click.Path())
@click.option("--id", "element_id", default=None, help="Only compile this element")
@common_options
def compile_command(project, element_id, verbose, quiet, no_color, config):
    """Print compiled class tokens and residual styles as JSON."""
    config_obj, output = _setup(verbose, quiet, no_color, config)

    try:
        workspace = _open_project(project, config_obj)
    except BuilderError as e:
        _fail(e, output, verbose)

    elements = workspace.elements
    if element_id is not None:
        elements = tuple(e for e in elements if str(e.id) == element_id)
        if not elements:
            output.error(f"No element with id {element_id!r}")
            sys.exit(1)

    compiled = []
    for element in elements:
        entry = {"id": element.id, "type": element.type}
        entry.update(workspace.compiler.compile(element).to_dict())
        compiled.append(entry)
    output.result(json.dumps(compiled, indent=2))


@cli.command()
@click.argument("project", type=click.Path())
@click.argument("kind")
@click.argument("x", type=float)
@click.argument("y", type=float)
@common_options
def add(project, kind, x, y, verbose, quiet, no_color, config):
    """Add an element of KIND at (X, Y), snapped to the grid."""
    config_obj, output = _setup(verbose, quiet, no_color, config)

    try:
        workspace = _open_project(project, config_obj)
        element = workspace.add_element(kind, x, y)
        _write_or_print(workspace.serializer.dumps(), project, output, "project")
    except BuilderError as e:
        _fail(e, output, verbose)

    output.success(f"Added {kind} {element.id} at ({element.x}, {element.y})")


if __name__ == "__main__":
    cli()
