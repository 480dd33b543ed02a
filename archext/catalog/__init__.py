"""Static catalogs: extensions, architectures and processors.

Usage:
    from archext.catalog import load_catalog, implies

    catalog = load_catalog()
    cpu = catalog.parse_cpu("neoverse-n1")
    arch = catalog.parse_arch("armv9-a")
    implies(arch, cpu.architecture)  # True

Catalogs are immutable once built and can be shared between any number of
resolver sessions.
"""

from .extensions import (
    EXTENSION_BITSET_WIDTH,
    CatalogError,
    ExtensionCatalog,
    iter_bits,
)
from .loader import BUNDLED_CATALOG, build_catalog, default_catalog, load_catalog
from .order import implies, is_superset
from .targets import ModelCatalog
from .validator import validate_catalog_spec

__all__ = [
    "EXTENSION_BITSET_WIDTH",
    "CatalogError",
    "ExtensionCatalog",
    "iter_bits",
    "BUNDLED_CATALOG",
    "build_catalog",
    "default_catalog",
    "load_catalog",
    "implies",
    "is_superset",
    "ModelCatalog",
    "validate_catalog_spec",
]
