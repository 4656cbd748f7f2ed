"""
CLI entry point for Package Control.

This module provides the Typer-based command-line interface. It plays the
host's role offline: it activates the plugin from a composer.json, registers
it on an event dispatcher and fires the pre-pool-create event for the
packages listed in a pool manifest.

Commands:
    check       Check a pool manifest against the approval policy

Exit codes:
    0   Pool accepted
    1   An unapproved package was found
    2   composer.json or the pool manifest could not be loaded
"""

import json
import logging
import traceback
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from package_control import __version__
from package_control.errors import (
    ConfigLoadError,
    PackageControlError,
    PoolLoadError,
    UnapprovedPackageError,
)
from package_control.events import EventDispatcher, PluginEvents
from package_control.plugin import ActivationContext, PackageControlPlugin
from package_control.schema import GateDecision, PrePoolCreateEvent, load_pool

EXIT_ACCEPTED = 0
EXIT_UNAPPROVED = 1
EXIT_LOAD_ERROR = 2

app = typer.Typer(
    name="package-control",
    help="Check Winter CMS packages against the Package Control approval policy.",
    add_completion=False,
    no_args_is_help=True,
)

console = Console()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold]package-control[/bold] version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        Optional[bool],
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """
    Package Control - approval gate for Winter CMS plugins, themes and modules.
    """
    pass


@app.command()
def check(
    pool_path: Annotated[
        Path,
        typer.Argument(
            help="Path to the pool manifest (YAML or JSON).",
            resolve_path=True,
        ),
    ],
    composer_path: Annotated[
        Optional[Path],
        typer.Option(
            "--composer",
            "-c",
            help="Path to composer.json. Defaults to ./composer.json if present.",
            resolve_path=True,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            help="Show a per-package table and info logging.",
        ),
    ] = False,
    debug: Annotated[
        bool,
        typer.Option(
            "--debug",
            help="Enable debug logging and full error tracebacks.",
        ),
    ] = False,
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Output the result in JSON format.",
        ),
    ] = False,
) -> None:
    """
    Check a pool manifest against the approval policy.

    Example:
        $ package-control check pool.yaml --composer composer.json
    """
    _configure_logging(verbose, debug, json_output)

    try:
        context = _load_context(composer_path)
        manifest = load_pool(pool_path)
    except (ConfigLoadError, PoolLoadError) as e:
        _report_error(e, json_output, debug)
        raise typer.Exit(code=EXIT_LOAD_ERROR)

    plugin = PackageControlPlugin()
    plugin.activate(context)

    dispatcher = EventDispatcher()
    dispatcher.add_subscriber(plugin)

    event = PrePoolCreateEvent(packages=manifest.packages)

    if verbose and not json_output:
        _display_report(plugin.gate.report(event.packages), plugin.gate.disabled)

    try:
        dispatcher.dispatch(PluginEvents.PRE_POOL_CREATE, event)
    except UnapprovedPackageError as e:
        _report_error(e, json_output, debug)
        raise typer.Exit(code=EXIT_UNAPPROVED)

    if json_output:
        print(json.dumps({
            "accepted": True,
            "packages": len(event.packages),
            "allow_packagist": plugin.gate.disabled,
        }, indent=2))
    else:
        console.print(
            f"[green]✓[/green] Pool accepted ({len(event.packages)} packages checked)"
        )


def _configure_logging(verbose: bool, debug: bool, json_output: bool = False) -> None:
    if debug:
        level = logging.DEBUG
    elif json_output:
        level = logging.ERROR
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(name)s: %(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _load_context(composer_path: Path | None) -> ActivationContext:
    """Build the activation context; a missing default composer.json means no config."""
    if composer_path is None:
        default_path = Path.cwd() / "composer.json"
        if not default_path.exists():
            return ActivationContext()
        composer_path = default_path
    return ActivationContext.from_composer_json(composer_path)


def _display_report(decisions: list[GateDecision], disabled: bool) -> None:
    """Display one row per package with the rule that decided it."""
    table = Table(show_header=True, header_style="bold")
    table.add_column("#", style="dim", width=3)
    table.add_column("Package", style="cyan")
    table.add_column("Decision", width=10)
    table.add_column("Rule")

    for index, decision in enumerate(decisions, start=1):
        if decision.allowed:
            status = "[green]allowed[/green]"
        elif disabled:
            status = "[yellow]ignored[/yellow]"
        else:
            status = "[red]denied[/red]"
        table.add_row(
            str(index),
            escape(decision.package or ""),
            status,
            decision.rule_matched or "",
        )

    console.print(table)
    if disabled:
        console.print("[dim]allowPackagist is enabled: the policy is not enforced[/dim]")
    console.print()


def _report_error(error: PackageControlError, json_output: bool, debug: bool) -> None:
    """Print an error as JSON or as red console text."""
    if json_output:
        output = {"error": True, **error.to_dict()}
        if debug:
            output["traceback"] = traceback.format_exc()
        print(json.dumps(output, indent=2))
        return

    console.print(f"[red]✗ {escape(str(error))}[/red]")
    if debug:
        console.print(f"[dim]{escape(traceback.format_exc())}[/dim]")


if __name__ == "__main__":
    app()
