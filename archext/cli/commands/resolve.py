"""Resolve command: seed defaults, apply modifiers, print the feature list."""

from pathlib import Path

import typer
import yaml
from pydantic import ValidationError
from rich.markup import escape

from ...catalog import CatalogError, load_catalog
from ...resolver import UnknownModifierError, UnknownTargetError, resolve_features
from ..app import app, console, get_json_mode, is_agent_mode
from ..utils import ExitCode, Output


def _load(catalog_path: Path | None, out: Output):
    """Load the catalog, reporting failures through ``out``."""
    if catalog_path is not None and not catalog_path.exists():
        out.error(
            f"Catalog not found: {catalog_path}",
            exit_code=ExitCode.NOT_FOUND,
        )
        return None
    try:
        return load_catalog(catalog_path)
    except (CatalogError, ValidationError, yaml.YAMLError) as e:
        out.error(
            f"Failed to build catalog: {escape(str(e))}",
            suggestion="Run `archext validate` on the catalog file",
            exit_code=ExitCode.CATALOG_ERROR,
        )
        return None


@app.command("resolve")
def resolve_command(
    modifiers: list[str] | None = typer.Argument(
        None,
        help="Extension modifiers, e.g. sve nofp16 (one per argument)",
    ),
    cpu: str | None = typer.Option(
        None, "--cpu", "-c", help="Processor model whose defaults seed the set"
    ),
    arch: str | None = typer.Option(
        None,
        "--arch",
        "-a",
        help="Architecture (e.g. armv8.2-a or v8.2a) whose defaults seed the set",
    ),
    catalog_path: Path | None = typer.Option(
        None, "--catalog", help="Catalog YAML (defaults to configured/bundled)"
    ),
):
    """Resolve an extension set and print the target feature list.

    Examples:
        archext resolve --cpu neoverse-n1
        archext resolve --arch armv8.2-a sve nofp16
        archext --json resolve --cpu grace nosve2
    """
    out = Output(console=console, json_mode=get_json_mode() or is_agent_mode())

    catalog = _load(catalog_path, out)
    if catalog is None:
        raise typer.Exit(out.finish())

    try:
        resolver = resolve_features(
            catalog, cpu=cpu, arch=arch, modifiers=modifiers or []
        )
    except UnknownTargetError as e:
        out.error(
            str(e),
            category="UNKNOWN_TARGET",
            suggestion=f"Check the {e.kind} name against the catalog file",
            exit_code=ExitCode.NOT_FOUND,
        )
        raise typer.Exit(out.finish())
    except UnknownModifierError as e:
        out.error(
            str(e),
            category="UNKNOWN_MODIFIER",
            suggestion="Use an extension name, or its name with the negation prefix",
        )
        raise typer.Exit(out.finish())

    features = resolver.to_feature_list()
    base_arch = resolver.base_arch.name if resolver.base_arch else None

    out.success(
        f"Resolved {len(features)} feature decisions"
        + (f" on {base_arch}" if base_arch else ""),
        base_arch=base_arch,
        enabled=resolver.enabled_names(),
        features=features,
    )
    out.text(" ".join(features))
    raise typer.Exit(out.finish())
