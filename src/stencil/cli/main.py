"""Stencil CLI Main Entry Point

Usage:
    stencil render page.tpl                      # Render to stdout
    stencil render page.tpl -s name=Ferris       # Bind a variable
    stencil render page.tpl -d data.yaml         # Bind variables and patterns from YAML
    stencil render page.tpl -o page.html         # Write to a file
    stencil tree page.tpl                        # Print the structured tree as JSON
    stencil --version                            # Show version

Data files look like:

    variables:
      title: Shopping list
    patterns:
      item:
        - text: apples
        - text: pears
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import typer
import yaml

from stencil._version import __version__
from stencil.ast.nodes import dump_tree
from stencil.document import Document
from stencil.options import ErrorLevel, IncludeMethod, Options, load_options

from .errors import CliError, handle_error
from .utils import setup_logging

log = logging.getLogger(__name__)


def parse_assignments(assignments: Optional[List[str]]) -> Dict[str, str]:
    """Parse NAME=VALUE strings into a dict."""
    variables: Dict[str, str] = {}
    for assignment in assignments or []:
        name, sep, value = assignment.partition("=")
        if not sep or not name:
            raise CliError(f"Invalid variable binding '{assignment}', expected NAME=VALUE")
        variables[name] = value
    return variables


def load_data(path: Path) -> Tuple[Dict[str, str], Dict[str, List[Dict[str, str]]]]:
    """Load variables and pattern instances from a YAML data file."""
    if not path.exists():
        raise CliError(f"Data file not found: {path}")

    with open(path) as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise CliError(f"Data file must be a mapping: {path}")

    variables = data.get("variables") or {}
    patterns = data.get("patterns") or {}
    if not isinstance(variables, dict):
        raise CliError("'variables' must be a mapping")
    if not isinstance(patterns, dict):
        raise CliError("'patterns' must be a mapping")

    instances: Dict[str, List[Dict[str, str]]] = {}
    for name, items in patterns.items():
        if not isinstance(items, list):
            raise CliError(f"Pattern '{name}' must be a list of mappings")
        instances[str(name)] = [_stringify(item or {}, f"pattern '{name}'") for item in items]

    return _stringify(variables, "'variables'"), instances


def _stringify(mapping: Any, where: str) -> Dict[str, str]:
    if not isinstance(mapping, dict):
        raise CliError(f"Expected a mapping in {where}")
    return {str(k): "" if v is None else str(v) for k, v in mapping.items()}


def apply_bindings(
    doc: Document,
    variables: Dict[str, str],
    patterns: Dict[str, List[Dict[str, str]]],
) -> None:
    """Bind variables, then render and register every pattern instance."""
    for name, value in variables.items():
        doc.set(name, value)

    for name, items in patterns.items():
        extracted = doc.get_pattern(name)
        if extracted is None:
            raise CliError(f"Pattern '{name}' not found in template")
        for item in items:
            instance = extracted.copy()
            for key, value in item.items():
                instance.set(key, value)
            doc.add_pattern(instance)
        log.info("Rendered %d instance(s) of pattern %s", len(items), name)


def build_options(
    config: Optional[Path],
    include_method: Optional[IncludeMethod],
    include_path: Optional[Path],
    strict: bool,
) -> Options:
    """Combine a YAML options file with command line overrides."""
    try:
        options = load_options(config) if config is not None else Options()
    except (FileNotFoundError, ValueError, yaml.YAMLError) as exc:
        raise CliError(f"Invalid options file {config}: {exc}") from exc
    data = options.model_dump()

    if include_path is not None:
        data["include_path"] = include_path
        if include_method is None:
            include_method = IncludeMethod.PATH
    if include_method is not None:
        data["include_method"] = include_method
    if strict:
        data["unset_variable"] = ErrorLevel.ERROR

    try:
        return Options(**data)
    except ValueError as exc:
        raise CliError(str(exc)) from exc


typer_app = typer.Typer(
    no_args_is_help=True,
    help="Compile text templates with variables, conditionals, patterns and includes.",
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"stencil {__version__}")
        raise typer.Exit()


@typer_app.callback()
def main(
    version: bool = typer.Option(
        False,
        "-V",
        "--version",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """Stencil - text-template compiler."""


@typer_app.command()
def render(
    template: Path = typer.Argument(..., help="Template file to render."),
    set_: Optional[List[str]] = typer.Option(
        None, "-s", "--set", help="Bind a variable as NAME=VALUE (repeatable)."
    ),
    data: Optional[Path] = typer.Option(
        None, "-d", "--data", help="YAML file with variables and pattern instances."
    ),
    config: Optional[Path] = typer.Option(
        None, "-c", "--config", help="YAML file with compilation options."
    ),
    include_method: Optional[IncludeMethod] = typer.Option(
        None, "--include-method", help="Where relative includes are resolved from."
    ),
    include_path: Optional[Path] = typer.Option(
        None, "--include-path", help="Base path for includes (implies --include-method path)."
    ),
    strict: bool = typer.Option(
        False, "--strict", help="Fail when a variable has no value."
    ),
    output: Optional[Path] = typer.Option(
        None, "-o", "--output", help="Write the result to a file instead of stdout."
    ),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Verbose logging."),
) -> None:
    """Render TEMPLATE with the given bindings.

    Examples:
        stencil render page.tpl -s title=Home
        stencil render page.tpl -d data.yaml -o page.html
    """
    setup_logging(verbose)

    try:
        options = build_options(config, include_method, include_path, strict)
        variables: Dict[str, str] = {}
        patterns: Dict[str, List[Dict[str, str]]] = {}
        if data is not None:
            variables, patterns = load_data(data)
        variables.update(parse_assignments(set_))

        doc = Document.from_file(template, options)
        apply_bindings(doc, variables, patterns)
        text = doc.render()
    except Exception as exc:
        handle_error(exc)

    if output is not None:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(text, encoding="utf-8")
        log.info("Wrote %s", output)
    else:
        typer.echo(text, nl=False)


@typer_app.command()
def tree(
    template: Path = typer.Argument(..., help="Template file to parse."),
    config: Optional[Path] = typer.Option(
        None, "-c", "--config", help="YAML file with compilation options."
    ),
    include_method: Optional[IncludeMethod] = typer.Option(
        None, "--include-method", help="Where relative includes are resolved from."
    ),
    include_path: Optional[Path] = typer.Option(
        None, "--include-path", help="Base path for includes (implies --include-method path)."
    ),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Verbose logging."),
) -> None:
    """Print the structured tree of TEMPLATE as JSON."""
    setup_logging(verbose)

    try:
        options = build_options(config, include_method, include_path, strict=False)
        doc = Document.from_file(template, options)
    except Exception as exc:
        handle_error(exc)

    typer.echo(dump_tree(doc.nodes).decode("utf-8"))


def app() -> None:
    """Entry point for the installed `stencil` script."""
    typer_app()


if __name__ == "__main__":
    app()
