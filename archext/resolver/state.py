"""Per-session extension state: enable/disable closure and feature emission.

A FeatureStateResolver tracks two bitmasks over the catalog's extension ids:

- ``enabled``: extensions currently on.
- ``touched``: extensions a decision was made about at any point. Only
  touched extensions appear in ``to_feature_list()``, which keeps the
  emitted feature list short.

After every ``enable``/``disable`` the enabled set is closed under the
catalog's dependency edges: an enabled extension has all its prerequisites
enabled, and a disabled extension has all its dependents disabled.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..catalog.extensions import ExtensionCatalog, iter_bits
from ..core.models import ArchitectureRecord, ProcessorRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FeatureState:
    """Immutable snapshot of a resolver's state."""

    enabled: int
    touched: int
    base_arch: ArchitectureRecord | None = None


class FeatureStateResolver:
    """Resolve extension decisions for one session.

    Usage:
        resolver = FeatureStateResolver(catalog.extensions)
        resolver.add_cpu_defaults(catalog.parse_cpu("cortex-a55"))
        resolver.parse_modifier("sve")
        resolver.parse_modifier("nofp16")
        resolver.to_feature_list()  # ['+fp-armv8', '+neon', ..., '-fullfp16', ...]

    Instances are not shared between sessions.
    """

    def __init__(self, extensions: ExtensionCatalog, negation_prefix: str | None = None):
        if negation_prefix is None:
            from ..config import get_config

            negation_prefix = get_config().resolver.negation_prefix
        if not negation_prefix:
            raise ValueError("negation_prefix must be a non-empty string")
        self.extensions = extensions
        self.negation_prefix = negation_prefix
        self._enabled = 0
        self._touched = 0
        self._base_arch: ArchitectureRecord | None = None

    # ── State access ──

    @property
    def enabled(self) -> int:
        return self._enabled

    @property
    def touched(self) -> int:
        return self._touched

    @property
    def base_arch(self) -> ArchitectureRecord | None:
        return self._base_arch

    def is_enabled(self, ext: int | str) -> bool:
        if isinstance(ext, str):
            record = self.extensions.parse_extension(ext)
            if record is None:
                return False
            ext = record.id
        return bool(self._enabled >> ext & 1)

    def enabled_names(self) -> list[str]:
        return self.extensions.names(self._enabled)

    def snapshot(self) -> FeatureState:
        return FeatureState(self._enabled, self._touched, self._base_arch)

    # ── Closure ──

    def enable(self, ext_id: int) -> None:
        """Enable an extension and, transitively, everything it requires."""
        bit = 1 << ext_id
        self._touched |= bit
        if self._enabled & bit:
            return
        self._enabled |= bit
        logger.debug("Enabled %s", self.extensions.get(ext_id).name)

        for prerequisite in self.extensions.prerequisites(ext_id):
            if not self._enabled >> prerequisite & 1:
                self.enable(prerequisite)

    def disable(self, ext_id: int) -> None:
        """Disable an extension and, transitively, everything built on it."""
        bit = 1 << ext_id
        self._touched |= bit
        if not self._enabled & bit:
            return
        self._enabled &= ~bit
        logger.debug("Disabled %s", self.extensions.get(ext_id).name)

        for dependent in self.extensions.dependents(ext_id):
            if self._enabled >> dependent & 1:
                self.disable(dependent)

    # ── Defaults ──

    def _set_base_arch(self, arch: ArchitectureRecord) -> None:
        if self._base_arch is not None and self._base_arch.name != arch.name:
            logger.debug(
                "Base architecture changed from %s to %s",
                self._base_arch.name,
                arch.name,
            )
        self._base_arch = arch

    def add_arch_defaults(self, arch: ArchitectureRecord) -> None:
        """Record ``arch`` as the base architecture and enable its defaults."""
        self._set_base_arch(arch)
        for ext_id in iter_bits(arch.default_extensions):
            self.enable(ext_id)

    def add_cpu_defaults(self, cpu: ProcessorRecord) -> None:
        """Record the CPU's architecture and enable the CPU and arch defaults."""
        self._set_base_arch(cpu.architecture)
        for ext_id in iter_bits(cpu.implied_extensions()):
            self.enable(ext_id)

    # ── Modifiers ──

    def parse_modifier(self, modifier: str) -> bool:
        """Apply '<name>' (enable) or '<prefix><name>' (disable).

        Returns False, without changing any state, if the name is unknown.
        """
        negated = modifier.startswith(self.negation_prefix)
        name = modifier[len(self.negation_prefix) :] if negated else modifier

        record = self.extensions.parse_extension(name)
        if record is None:
            logger.debug("Unknown extension modifier '%s'", modifier)
            return False

        if negated:
            self.disable(record.id)
        else:
            self.enable(record.id)
        return True

    # ── Output ──

    def to_feature_list(self) -> list[str]:
        """Feature tokens for every touched extension, in catalog order."""
        features = []
        for ext_id in iter_bits(self._touched):
            record = self.extensions.get(ext_id)
            if self._enabled >> ext_id & 1:
                features.append(record.feature)
            else:
                features.append(record.neg_feature)
        return features
