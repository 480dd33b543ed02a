"""Core CLI app definition and global state."""

import logging
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler

app = typer.Typer(
    name="archext",
    help="Resolve AArch64 extension sets into target feature lists.",
    no_args_is_help=True,
)

console = Console()

# Global state for JSON mode (set by callback)
_json_mode = False


def get_json_mode() -> bool:
    """Get current JSON mode state."""
    return _json_mode


def is_agent_mode() -> bool:
    """Check if CLI is in agent mode (from config).

    Agent mode means JSON output instead of rich terminal formatting.
    """
    from ..config import get_config

    return get_config().cli.mode == "agent"


def _version_callback(value: bool) -> None:
    if value:
        from .. import __version__

        print(f"archext {__version__}")
        raise typer.Exit()


def _setup_logging(verbose: bool) -> None:
    from ..config import get_config

    level = "DEBUG" if verbose else get_config().cli.log_level
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@app.callback()
def main_callback(
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Output machine-readable JSON instead of human-friendly text",
            is_eager=True,
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log closure steps at DEBUG level"),
    ] = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            help="Show version and exit",
            callback=_version_callback,
            is_eager=True,
        ),
    ] = False,
):
    """archext: AArch64 extension dependency resolution.

    Use --json for machine-readable output suitable for scripting.
    """
    global _json_mode
    _json_mode = json_output
    _setup_logging(verbose)


# Import commands to register them with the app
from .commands import (  # noqa: E402, F401
    resolve,
    validate,
    config_cmd,
)
