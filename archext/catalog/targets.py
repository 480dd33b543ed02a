"""Name lookup for architectures and processor models."""

from __future__ import annotations

from collections.abc import Iterable

from ..core.models import ArchitectureRecord, ExtensionRecord, ProcessorRecord
from .extensions import CatalogError, ExtensionCatalog


class ModelCatalog:
    """Architectures and processors by name, with alias resolution.

    Every lookup returns the record or ``None``; a missing name never yields
    a placeholder record.
    """

    def __init__(
        self,
        extensions: ExtensionCatalog,
        architectures: Iterable[ArchitectureRecord],
        processors: Iterable[ProcessorRecord],
        cpu_aliases: dict[str, str] | None = None,
    ):
        self.extensions = extensions
        self._architectures: dict[str, ArchitectureRecord] = {}
        self._by_sub_arch: dict[str, ArchitectureRecord] = {}
        self._processors: dict[str, ProcessorRecord] = {}
        self._cpu_aliases: dict[str, str] = dict(cpu_aliases or {})

        for arch in architectures:
            if arch.name in self._architectures:
                raise CatalogError(f"Duplicate architecture '{arch.name}'")
            self._architectures[arch.name] = arch
            self._by_sub_arch[arch.sub_arch] = arch

        for cpu in processors:
            if cpu.name in self._processors:
                raise CatalogError(f"Duplicate processor '{cpu.name}'")
            self._processors[cpu.name] = cpu

    # ── Aliases ──

    def resolve_cpu_alias(self, name: str) -> str:
        return self._cpu_aliases.get(name, name)

    def resolve_ext_alias(self, name: str) -> str:
        return self.extensions.resolve_alias(name)

    # ── Architectures ──

    def architectures(self) -> list[ArchitectureRecord]:
        return list(self._architectures.values())

    def parse_arch(self, name: str) -> ArchitectureRecord | None:
        """Find an architecture by name, e.g. 'armv8.2-a'."""
        return self._architectures.get(name)

    def find_by_sub_arch(self, sub_arch: str) -> ArchitectureRecord | None:
        """Find an architecture by its feature without '+', e.g. 'v8.2a'."""
        return self._by_sub_arch.get(sub_arch)

    # ── Processors ──

    def processors(self) -> list[ProcessorRecord]:
        return list(self._processors.values())

    def parse_cpu(self, name: str) -> ProcessorRecord | None:
        """Find a processor by name or alias."""
        return self._processors.get(self.resolve_cpu_alias(name))

    def arch_for_cpu(self, name: str) -> ArchitectureRecord | None:
        cpu = self.parse_cpu(name)
        if cpu is None:
            return None
        return cpu.architecture

    def cpu_names(self) -> list[str]:
        """Every accepted processor name, aliases included."""
        return [*self._processors, *self._cpu_aliases]

    # ── Extensions ──

    def parse_extension(self, name: str) -> ExtensionRecord | None:
        return self.extensions.parse_extension(name)
