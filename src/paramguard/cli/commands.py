from __future__ import annotations

import importlib
import sys
from enum import Enum
from pathlib import Path

import typer

from paramguard.constants import EXIT_INTERNAL_ERROR
from paramguard.errors import ParamguardError
from paramguard.report import describe_declarations, render_json, render_yaml


class OutputFormat(str, Enum):
    YAML = "yaml"
    JSON = "json"


def _version_callback(value: bool) -> None:
    if value:
        from paramguard import __version__

        typer.echo(f"paramguard {__version__}")
        raise typer.Exit()


app = typer.Typer(add_completion=False, help="Inspect declarative parameter contracts")


@app.callback(invoke_without_command=True)
def _main(
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Print version and exit."
    ),
) -> None:
    pass


@app.command()
def describe(
    module: str = typer.Argument(..., help="Dotted module path to import, e.g. mypkg.api"),
    output_format: OutputFormat = typer.Option(OutputFormat.YAML, "--format", "-f", help="Output format."),
    path: Path | None = typer.Option(None, "--path", help="Directory prepended to sys.path before importing."),
) -> None:
    """Print every validated or tagged declaration registered by MODULE."""
    if path is not None:
        sys.path.insert(0, str(path.resolve()))
    try:
        importlib.import_module(module)
    except ImportError as exc:
        typer.echo(f"ERROR: cannot import {module}: {exc}", err=True)
        raise typer.Exit(EXIT_INTERNAL_ERROR) from exc
    except ParamguardError as exc:
        typer.echo(f"ERROR: {module} declares an invalid contract: {exc}", err=True)
        raise typer.Exit(EXIT_INTERNAL_ERROR) from exc

    declarations = describe_declarations(module)
    if output_format is OutputFormat.JSON:
        typer.echo(render_json(declarations))
    else:
        typer.echo(render_yaml(declarations), nl=False)
