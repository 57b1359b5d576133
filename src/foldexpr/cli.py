"""
foldexpr command line.

Feeds one expression string through the parser and prints the canonical
rendering and/or value.

    foldexpr eval "21 + 1"
    foldexpr render "4-3+5"
    foldexpr check "1 / 0"
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from foldexpr._version import get_version
from foldexpr.core.errors import ExpressionError
from foldexpr.core.expression_lang import parse
from foldexpr.core.ir import Environment, Expr, format_number
from foldexpr.core.settings import ExpressionSettings, load_settings

logger = logging.getLogger(__name__)

app = typer.Typer(
    help="Parse and evaluate left-to-right arithmetic expressions.",
    no_args_is_help=True,
)
console = Console(highlight=False)


def version_callback(value: bool) -> None:
    if value:
        typer.echo(f"foldexpr {get_version()}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool | None = typer.Option(
        None,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log parser steps to stderr"),
) -> None:
    """foldexpr CLI main callback for global options."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        )


# =============================================================================
# Helpers
# =============================================================================


def _build_environment(config: Path | None, tolerance: float | None) -> Environment:
    try:
        settings = load_settings(config)
        if tolerance is not None:
            settings = ExpressionSettings(division_tolerance=tolerance)
    except (OSError, ValueError, ValidationError) as e:
        typer.echo(f"Config error: {e}", err=True)
        raise typer.Exit(code=1)
    logger.debug("Division tolerance: %g", settings.division_tolerance)
    return Environment(settings=settings)


def _parse_or_exit(expression: str) -> Expr:
    try:
        return parse(expression)
    except ExpressionError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)


# =============================================================================
# Commands
# =============================================================================


@app.command("eval")
def eval_command(
    expression: str = typer.Argument(..., help="Expression to evaluate"),
    config: Path | None = typer.Option(
        None, "--config", "-c", help="TOML file with an [expression] table", exists=True
    ),
    tolerance: float | None = typer.Option(
        None, "--tolerance", "-t", help="Override the division-by-zero tolerance"
    ),
) -> None:
    """Print the canonical form and value of an expression."""
    env = _build_environment(config, tolerance)
    expr = _parse_or_exit(expression)
    try:
        value = expr.evaluate(env)
    except ExpressionError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)
    console.print(f"[bold]EX:[/bold] {escape(expr.render())}")
    console.print(f"[bold]VAL:[/bold] {format_number(value)}")


@app.command("render")
def render_command(
    expression: str = typer.Argument(..., help="Expression to render"),
) -> None:
    """Print the canonical form of an expression."""
    expr = _parse_or_exit(expression)
    typer.echo(expr.render())


@app.command("check")
def check_command(
    expression: str = typer.Argument(..., help="Expression to check"),
    config: Path | None = typer.Option(
        None, "--config", "-c", help="TOML file with an [expression] table", exists=True
    ),
    tolerance: float | None = typer.Option(
        None, "--tolerance", "-t", help="Override the division-by-zero tolerance"
    ),
) -> None:
    """Report whether an expression can be evaluated safely."""
    env = _build_environment(config, tolerance)
    expr = _parse_or_exit(expression)
    if expr.can_evaluate(env):
        console.print(f"[green]OK[/green] {escape(expr.render())}")
        return
    console.print(f"[red]UNSAFE[/red] {escape(expr.render())}")
    raise typer.Exit(code=1)


# =============================================================================
# Main Entry Point
# =============================================================================


def main(argv: list[str] | None = None) -> None:
    app(args=argv, standalone_mode=True)


if __name__ == "__main__":
    main(sys.argv[1:])
