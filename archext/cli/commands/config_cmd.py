"""Config command for viewing and managing archext configuration."""

import typer

from ..app import app, console
from ...config import (
    get_config,
    reset_config,
    CONFIG_FILE,
    VALID_LOG_LEVELS,
    VALID_MODES,
)


VALID_KEYS = {
    "catalog.path",
    "resolver.negation_prefix",
    "cli.mode",
    "cli.log_level",
}


@app.command("config")
def config_command(
    action: str = typer.Argument(
        ...,
        help="Action: show, set, reset",
    ),
    key: str | None = typer.Argument(
        None,
        help="Config key (e.g. catalog.path, resolver.negation_prefix)",
    ),
    value: str | None = typer.Argument(
        None,
        help="Value to set",
    ),
):
    """View or modify archext configuration.

    Examples:
        archext config show
        archext config set catalog.path ./my-cpus.yaml
        archext config set cli.log_level DEBUG
        archext config reset
    """
    if action == "show":
        _show_config()
    elif action == "set":
        if not key or value is None:
            console.print("[red]Usage:[/red] archext config set <key> <value>")
            console.print()
            console.print("Available keys:")
            for k in sorted(VALID_KEYS):
                console.print(f"  {k}")
            raise typer.Exit(1)
        _set_config(key, value)
    elif action == "reset":
        _reset_config()
    else:
        console.print(f"[red]Unknown action:[/red] {action}")
        console.print("Valid actions: show, set, reset")
        raise typer.Exit(1)


def _show_config():
    """Display current resolved configuration."""
    config = get_config()

    console.print()
    console.print("[bold]archext Configuration[/bold]")
    console.print("─" * 40)

    console.print()
    console.print("[bold cyan]Catalog[/bold cyan]")
    console.print(f"  path = {config.catalog.path or '[dim](bundled)[/dim]'}")

    console.print()
    console.print("[bold cyan]Resolver[/bold cyan]")
    console.print(f"  negation_prefix = {config.resolver.negation_prefix}")

    console.print()
    console.print("[bold cyan]CLI[/bold cyan]")
    console.print(f"  mode      = {config.cli.mode}")
    console.print(f"  log_level = {config.cli.log_level}")

    console.print()
    if CONFIG_FILE.exists():
        console.print(f"Config file: {CONFIG_FILE}")
    else:
        console.print(f"Config file: [dim]not created yet[/dim] ({CONFIG_FILE})")
    console.print()


def _set_config(key: str, value: str):
    """Set a config value and save."""
    if key not in VALID_KEYS:
        console.print(f"[red]Unknown key:[/red] {key}")
        console.print()
        console.print("Available keys:")
        for k in sorted(VALID_KEYS):
            console.print(f"  {k}")
        raise typer.Exit(1)

    if key == "cli.log_level":
        value = value.upper()
        if value not in VALID_LOG_LEVELS:
            console.print(f"[red]Invalid log level:[/red] {value}")
            raise typer.Exit(1)
    elif key == "cli.mode" and value not in VALID_MODES:
        console.print(f"[red]Invalid mode:[/red] {value}")
        raise typer.Exit(1)
    elif key == "resolver.negation_prefix" and not value:
        console.print("[red]Negation prefix cannot be empty[/red]")
        raise typer.Exit(1)

    config = get_config()
    section, field_name = key.split(".", 1)
    setattr(getattr(config, section), field_name, value)

    config.save()
    reset_config()  # Clear cached singleton so next get_config() reloads

    console.print(f"[green]✓[/green] Set {key} = {value}")
    console.print(f"  Saved to {CONFIG_FILE}")


def _reset_config():
    """Reset config to defaults."""
    if CONFIG_FILE.exists():
        CONFIG_FILE.unlink()
        reset_config()
        console.print("[green]✓[/green] Config reset to defaults")
        console.print(f"  Removed {CONFIG_FILE}")
    else:
        console.print("Config already at defaults (no config file exists)")
