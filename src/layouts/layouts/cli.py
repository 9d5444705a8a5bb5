"""Layouts CLI

Usage:
    layouts chain layouts.yaml page            # Show the layout chain, root first
    layouts stack layouts.yaml page            # Print the flattened layout
    layouts inject layouts.yaml page "Hello"   # Inject content (or stdin)
    layouts inject layouts.yaml page -r        # ... and render it with Jinja2
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import List, NoReturn, Optional

import typer
from jinja2 import TemplateError
from rich.console import Console
from rich.logging import RichHandler

from layouts.config import load_layouts_file
from layouts.engine import Layouts
from layouts.exceptions import LayoutsError
from layouts.render import render

console = Console()
log = logging.getLogger(__name__)

app = typer.Typer(help="Flatten nested layouts and inject page content.")


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the layouts CLI.

    Log levels:
    - Normal: Only warnings/errors shown
    - Verbose (-v): INFO level
    - Debug (LAYOUTS_DEBUG=1): DEBUG level - chain walks and tag substitutions
    """
    debug = bool(os.environ.get("LAYOUTS_DEBUG"))
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    handler = RichHandler(
        console=Console(stderr=True),
        show_time=verbose,
        show_path=debug,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))

    logger = logging.getLogger("layouts")
    logger.setLevel(level)
    logger.handlers = [handler]
    logger.propagate = False


def parse_assignments(values: Optional[List[str]]) -> dict[str, str]:
    """Parse key=value pairs into a dict."""
    result: dict[str, str] = {}
    for item in values or []:
        key, sep, value = item.partition("=")
        if not sep or not key.strip():
            raise typer.BadParameter(f"Expected key=value, got: {item}")
        result[key.strip()] = value
    return result


def load_engine(path: Path) -> Layouts:
    """Build a Layouts engine from a layouts YAML file."""
    layouts_file = load_layouts_file(path)
    engine = Layouts(layouts_file.options)
    engine.set_layout(layouts_file.records())
    log.info("Loaded %d layouts from %s", len(engine.store), path)
    return engine


def fail(error: Exception) -> NoReturn:
    """Report an error and exit."""
    code = error.exit_code if isinstance(error, LayoutsError) else 1
    typer.secho(f"Error: {error}", err=True, fg=typer.colors.RED)
    raise typer.Exit(code=code)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Verbose output."),
) -> None:
    setup_logging(verbose)


@app.command()
def chain(
    file: Path = typer.Argument(..., help="Layouts YAML file."),
    name: str = typer.Argument(..., help="Layout to start from."),
) -> None:
    """Show the layout chain of NAME, root first."""
    try:
        names = load_engine(file).create_stack(name)
    except (LayoutsError, FileNotFoundError) as e:
        fail(e)

    if not names:
        console.print(f"[yellow]No layouts found for {name}[/yellow]")
        return
    console.print(" -> ".join(names), markup=False)


@app.command()
def stack(
    file: Path = typer.Argument(..., help="Layouts YAML file."),
    name: str = typer.Argument(..., help="Layout to start from."),
    tag: Optional[str] = typer.Option(None, "--tag", help="Body tag name."),
) -> None:
    """Print the flattened layout of NAME."""
    options = {"tag": tag} if tag else None
    try:
        result = load_engine(file).stack(name, options)
    except (LayoutsError, FileNotFoundError) as e:
        fail(e)

    typer.echo(result.content)


@app.command()
def inject(
    file: Path = typer.Argument(..., help="Layouts YAML file."),
    name: str = typer.Argument(..., help="Layout to start from."),
    text: Optional[str] = typer.Argument(
        None, help="Content to inject (read from stdin if omitted)."
    ),
    assignments: Optional[List[str]] = typer.Option(
        None, "--set", "-s", help="Extra data as key=value (repeatable)."
    ),
    do_render: bool = typer.Option(
        False, "--render", "-r", help="Render the page with Jinja2."
    ),
) -> None:
    """Inject TEXT into the layout stack of NAME."""
    if text is None:
        text = typer.get_text_stream("stdin").read()

    options = {"locals": parse_assignments(assignments)}
    try:
        result = load_engine(file).inject(text, name, options)
        output = render(result) if do_render else result.content
    except (LayoutsError, FileNotFoundError, TemplateError) as e:
        fail(e)

    typer.echo(output)


if __name__ == "__main__":
    app()
