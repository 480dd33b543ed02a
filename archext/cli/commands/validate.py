"""Validate command for catalog files."""

from pathlib import Path

import typer
import yaml
from pydantic import ValidationError
from rich.markup import escape

from ...catalog import BUNDLED_CATALOG, validate_catalog_spec
from ...core.models import CatalogSpec
from ..app import app, console, get_json_mode, is_agent_mode
from ..utils import ExitCode, Output, format_validation_for_json


@app.command("validate")
def validate_command(
    catalog_file: Path | None = typer.Argument(
        None, help="Catalog YAML to validate (defaults to the bundled catalog)"
    ),
    strict: bool = typer.Option(
        False, "--strict", help="Treat warnings as errors"
    ),
):
    """Validate a catalog file.

    Examples:
        archext validate
        archext validate my-cpus.yaml --strict
    """
    out = Output(console=console, json_mode=get_json_mode() or is_agent_mode())
    path = catalog_file or BUNDLED_CATALOG

    if not path.exists():
        out.error(f"File not found: {path}", exit_code=ExitCode.NOT_FOUND)
        raise typer.Exit(out.finish())

    try:
        spec = CatalogSpec.from_yaml(path)
    except (ValidationError, yaml.YAMLError) as e:
        out.error(f"Failed to load catalog: {escape(str(e))}")
        raise typer.Exit(out.finish())

    out.success(f"Loaded {path.name}: {spec.summary()}", catalog_file=str(path))

    result = validate_catalog_spec(spec)
    out.set_data("validation", format_validation_for_json(result))

    for issue in result.errors:
        out.error(
            f"[{issue.category}] {issue.location}: {issue.message}",
            location=issue.location,
            category=issue.category,
            suggestion=issue.suggestion,
        )
    for issue in result.warnings:
        out.warning(
            f"[{issue.category}] {issue.location}: {issue.message}",
            location=issue.location,
            category=issue.category,
            suggestion=issue.suggestion,
        )

    if result.valid and strict and result.warnings:
        out.error(
            f"{len(result.warnings)} warning(s) with --strict",
            exit_code=ExitCode.VALIDATION_ERROR,
        )
    elif result.valid:
        out.success(
            f"Catalog valid ({len(result.warnings)} warning(s))",
        )

    raise typer.Exit(out.finish())
