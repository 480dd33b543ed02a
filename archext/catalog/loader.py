"""Build runtime catalogs from a CatalogSpec.

Usage:
    from archext.catalog import load_catalog

    catalog = load_catalog()               # configured or bundled catalog
    catalog = load_catalog("my-cpus.yaml") # explicit file
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path

from ..core.models import (
    ArchitectureRecord,
    CatalogSpec,
    DependencyEdge,
    ExtensionRecord,
    ProcessorRecord,
)
from .extensions import CatalogError, ExtensionCatalog
from .targets import ModelCatalog

logger = logging.getLogger(__name__)

BUNDLED_CATALOG = Path(__file__).parent / "data" / "aarch64.yaml"


def _build_extensions(spec: CatalogSpec) -> ExtensionCatalog:
    records = [
        ExtensionRecord(
            id=index,
            name=entry.name,
            feature=entry.feature,
            neg_feature=entry.resolved_neg_feature(),
            fmv_code=entry.fmv_code,
            fmv_implies=entry.fmv_implies,
            fmv_priority=entry.fmv_priority,
        )
        for index, entry in enumerate(spec.extensions)
    ]
    ids = {}
    for record in records:
        if record.name in ids:
            raise CatalogError(f"Duplicate extension name '{record.name}'")
        ids[record.name] = record.id

    edges = []
    for dep in spec.dependencies:
        for name in (dep.earlier, dep.later):
            if name not in ids:
                raise CatalogError(
                    f"Dependency {dep.earlier}->{dep.later} references "
                    f"unknown extension '{name}'"
                )
        edges.append(DependencyEdge(earlier=ids[dep.earlier], later=ids[dep.later]))

    return ExtensionCatalog(records, edges, aliases=spec.aliases.extension)


def _build_architectures(
    spec: CatalogSpec, extensions: ExtensionCatalog
) -> list[ArchitectureRecord]:
    built: dict[str, ArchitectureRecord] = {}
    for entry in spec.architectures:
        if entry.name in built:
            raise CatalogError(f"Duplicate architecture '{entry.name}'")
        defaults = 0
        if entry.base is not None:
            base = built.get(entry.base)
            if base is None:
                raise CatalogError(
                    f"Architecture '{entry.name}' extends '{entry.base}', "
                    "which must be declared before it"
                )
            defaults = base.default_extensions
        defaults |= extensions.bitset(entry.add)
        defaults &= ~extensions.bitset(entry.remove)

        built[entry.name] = ArchitectureRecord(
            name=entry.name,
            major=entry.version[0],
            minor=entry.version[1],
            profile=entry.profile,
            arch_feature=entry.arch_feature,
            default_extensions=defaults,
        )
    return list(built.values())


def build_catalog(spec: CatalogSpec) -> ModelCatalog:
    """Build an ExtensionCatalog and ModelCatalog from a spec.

    Raises:
        CatalogError: If the spec has duplicate names, unknown references,
            too many extensions or cyclic dependencies.
    """
    extensions = _build_extensions(spec)
    architectures = _build_architectures(spec, extensions)
    arch_by_name = {arch.name: arch for arch in architectures}

    processors = []
    for entry in spec.processors:
        arch = arch_by_name.get(entry.arch)
        if arch is None:
            raise CatalogError(
                f"Processor '{entry.name}' references unknown architecture "
                f"'{entry.arch}'"
            )
        processors.append(
            ProcessorRecord(
                name=entry.name,
                architecture=arch,
                default_extensions=extensions.bitset(entry.extensions),
            )
        )

    catalog = ModelCatalog(
        extensions, architectures, processors, cpu_aliases=spec.aliases.cpu
    )
    logger.debug("Built catalog: %s", spec.summary())
    return catalog


@lru_cache(maxsize=1)
def default_catalog() -> ModelCatalog:
    """The bundled catalog, built once per process."""
    return build_catalog(CatalogSpec.from_yaml(BUNDLED_CATALOG))


def load_catalog(path: Path | str | None = None) -> ModelCatalog:
    """Load a catalog file, or the configured catalog when ``path`` is None.

    An empty ``catalog.path`` setting selects the bundled catalog. A
    configured path that does not exist falls back to the bundled catalog
    with a warning; an explicit ``path`` argument must exist.
    """
    if path is None:
        from ..config import get_config

        configured = get_config().catalog.path
        if not configured:
            return default_catalog()
        if not Path(configured).exists():
            logger.warning(
                "Configured catalog %s not found, using bundled catalog",
                configured,
            )
            return default_catalog()
        path = configured

    return build_catalog(CatalogSpec.from_yaml(path))
