from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from . import __version__
from .commands import build_command_table
from .config_store import CONFIG_FILE, write_raw_toml
from .logging import get_logger, setup_logging
from .settings import ConfigError, default_config, load_settings

logger = get_logger(__name__)

console = Console()


def _print_version_and_exit() -> None:
    typer.echo(__version__)
    raise typer.Exit()


def _version_callback(value: bool) -> None:
    if value:
        _print_version_and_exit()


app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Inspect and configure the tweetspy command core.",
)


@app.callback()
def app_main(
    version: bool = typer.Option(
        False,
        "--version",
        help="Show the version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
    debug: bool = typer.Option(
        False,
        "--debug/--no-debug",
        help="Enable debug logging.",
    ),
) -> None:
    """tweetspy CLI."""
    setup_logging(debug=debug)


@app.command("commands")
def commands_command() -> None:
    """List the chat commands users can send."""
    table = Table(title="Chat Commands", show_header=True)
    table.add_column("Command", style="bold")
    table.add_column("Summary")
    for name, short in build_command_table().list_all():
        table.add_row(name, short)
    console.print(table)


@app.command("help")
def help_command(name: str = typer.Argument(..., help="Command name")) -> None:
    """Show the full help text for one chat command."""
    help_ = build_command_table().help_for(name)
    if help_ is None:
        typer.echo(f"error: no help for '{name}'", err=True)
        raise typer.Exit(code=1)
    typer.echo(help_.full)


@app.command("init")
def init_command(
    path: Path = typer.Argument(
        Path(CONFIG_FILE), help="Where to write the config file."
    ),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing file."),
) -> None:
    """Write a default config file."""
    if path.exists() and not force:
        typer.echo(f"error: {path} already exists (use --force)", err=True)
        raise typer.Exit(code=1)
    write_raw_toml(default_config(), path)
    logger.info("config.written", path=str(path))
    typer.echo(f"✓ Config saved to {path}")


@app.command("check")
def check_command(
    path: Path = typer.Argument(Path(CONFIG_FILE), help="Config file to validate."),
) -> None:
    """Validate a config file and print the effective settings."""
    try:
        settings = load_settings(path)
    except ConfigError as e:
        typer.echo(f"error: {e}", err=True)
        raise typer.Exit(code=1)
    if not path.exists():
        typer.echo(f"Note: {path} not found, showing defaults.")
    for key, value in settings.model_dump().items():
        typer.echo(f"{key} = {value}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
