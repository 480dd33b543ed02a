"""archext: AArch64 extension dependency resolution.

Given a processor model or architecture version plus enable/disable
modifiers, computes the active instruction-set extensions and emits the
matching target feature list.

    from archext import load_catalog, resolve_features

    catalog = load_catalog()
    resolver = resolve_features(catalog, arch="armv8.2-a", modifiers=["sve"])
    resolver.to_feature_list()
"""

__version__ = "0.1.0"

from .catalog import (
    CatalogError,
    ExtensionCatalog,
    ModelCatalog,
    build_catalog,
    default_catalog,
    implies,
    is_superset,
    load_catalog,
)
from .resolver import (
    FeatureState,
    FeatureStateResolver,
    UnknownModifierError,
    UnknownTargetError,
    resolve_features,
)

__all__ = [
    "__version__",
    "CatalogError",
    "ExtensionCatalog",
    "ModelCatalog",
    "build_catalog",
    "default_catalog",
    "implies",
    "is_superset",
    "load_catalog",
    "FeatureState",
    "FeatureStateResolver",
    "UnknownModifierError",
    "UnknownTargetError",
    "resolve_features",
]
