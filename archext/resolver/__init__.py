"""Feature resolution sessions.

Usage:
    from archext.catalog import load_catalog
    from archext.resolver import resolve_features

    features = resolve_features(load_catalog(), cpu="neoverse-n1", modifiers=["sve"])
"""

from __future__ import annotations

from collections.abc import Iterable

from ..catalog.targets import ModelCatalog
from .state import FeatureState, FeatureStateResolver


class UnknownModifierError(ValueError):
    """Raised by ``resolve_features`` for a modifier naming no extension."""

    def __init__(self, modifier: str):
        super().__init__(f"Unknown extension modifier '{modifier}'")
        self.modifier = modifier


class UnknownTargetError(LookupError):
    """Raised by ``resolve_features`` for an unknown CPU or architecture."""

    def __init__(self, kind: str, name: str):
        super().__init__(f"Unknown {kind} '{name}'")
        self.kind = kind
        self.name = name


def resolve_features(
    catalog: ModelCatalog,
    *,
    cpu: str | None = None,
    arch: str | None = None,
    modifiers: Iterable[str] = (),
    negation_prefix: str | None = None,
) -> FeatureStateResolver:
    """Run one resolution session and return the resolver.

    Architecture defaults are seeded before CPU defaults, so when both are
    given the CPU's architecture is the recorded base architecture.

    Raises:
        UnknownTargetError: If ``cpu`` or ``arch`` is not in the catalog.
        UnknownModifierError: On the first modifier that names no extension.
    """
    resolver = FeatureStateResolver(catalog.extensions, negation_prefix)

    if arch is not None:
        arch_info = catalog.parse_arch(arch) or catalog.find_by_sub_arch(arch)
        if arch_info is None:
            raise UnknownTargetError("architecture", arch)
        resolver.add_arch_defaults(arch_info)

    if cpu is not None:
        cpu_info = catalog.parse_cpu(cpu)
        if cpu_info is None:
            raise UnknownTargetError("processor", cpu)
        resolver.add_cpu_defaults(cpu_info)

    for modifier in modifiers:
        if not resolver.parse_modifier(modifier):
            raise UnknownModifierError(modifier)

    return resolver


__all__ = [
    "FeatureState",
    "FeatureStateResolver",
    "UnknownModifierError",
    "UnknownTargetError",
    "resolve_features",
]
