"""Catalog models and YAML I/O for archext.

Two layers live here:
- Spec models (``*Entry``, ``DependencySpec``, ``AliasTables``,
  ``CatalogSpec``) mirror the YAML catalog file and refer to extensions
  by name.
- Record models (``ExtensionRecord``, ``DependencyEdge``,
  ``ArchitectureRecord``, ``ProcessorRecord``) are the frozen runtime
  descriptors built from a spec, keyed by dense extension ids and carrying
  default extension sets as integer bitmasks.
"""

from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, model_validator

# Upper bound on multiversioning priorities.
MAX_FMV_PRIORITY = 1000

ArchProfile = Literal["A", "R"]


# =============================================================================
# Spec models (YAML schema)
# =============================================================================


class ExtensionEntry(BaseModel):
    """An extension as declared in the catalog file.

    Ids are not declared: an extension's id is its position in the
    ``extensions`` list.
    """

    name: str = Field(description="Human readable name, e.g. 'profile'")
    feature: str = Field(description="Enable token, e.g. '+spe'")
    neg_feature: str | None = Field(
        default=None, description="Disable token; derived from feature when omitted"
    )
    fmv_code: int | None = None
    fmv_implies: str | None = Field(
        default=None, description="FMV enabled features, e.g. '+dotprod,+neon'"
    )
    fmv_priority: int = Field(default=0, ge=0, le=MAX_FMV_PRIORITY)

    def resolved_neg_feature(self) -> str:
        if self.neg_feature:
            return self.neg_feature
        return "-" + self.feature.lstrip("+")


class DependencySpec(BaseModel):
    """A prerequisite link: enabling ``later`` requires ``earlier``."""

    earlier: str
    later: str

    @model_validator(mode="before")
    @classmethod
    def _from_pair(cls, data):
        # YAML shorthand: [earlier, later]
        if isinstance(data, (list, tuple)):
            if len(data) != 2:
                raise ValueError(f"dependency must be a pair, got {data!r}")
            return {"earlier": data[0], "later": data[1]}
        return data


class ArchitectureEntry(BaseModel):
    """An architecture version as declared in the catalog file.

    Default extensions are given relative to an optional ``base``
    architecture: ``defaults(base) | add - remove``.
    """

    name: str = Field(description="Human readable name, e.g. 'armv8.1-a'")
    version: tuple[int, int]
    profile: ArchProfile = "A"
    arch_feature: str = Field(description="Command line feature flag, e.g. '+v8.1a'")
    base: str | None = None
    add: list[str] = Field(default_factory=list)
    remove: list[str] = Field(default_factory=list)


class ProcessorEntry(BaseModel):
    """A processor model as declared in the catalog file."""

    name: str
    arch: str
    extensions: list[str] = Field(default_factory=list)


class AliasTables(BaseModel):
    """Alternate-name tables, one indirection each."""

    cpu: dict[str, str] = Field(default_factory=dict)
    extension: dict[str, str] = Field(default_factory=dict)


class CatalogSpec(BaseModel):
    """Complete static catalog: extensions, edges, architectures, processors."""

    extensions: list[ExtensionEntry]
    dependencies: list[DependencySpec] = Field(default_factory=list)
    architectures: list[ArchitectureEntry] = Field(default_factory=list)
    processors: list[ProcessorEntry] = Field(default_factory=list)
    aliases: AliasTables = Field(default_factory=AliasTables)

    def to_yaml(self, path: Path | str) -> None:
        """Save catalog to YAML file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        data = self.model_dump(mode="json", exclude_none=True)

        with open(path, "w") as f:
            yaml.dump(
                data, f, default_flow_style=False, sort_keys=False, allow_unicode=True
            )

    @classmethod
    def from_yaml(cls, path: Path | str) -> "CatalogSpec":
        """Load catalog from YAML file."""
        path = Path(path)

        with open(path) as f:
            data = yaml.safe_load(f)

        return cls.model_validate(data)

    def summary(self) -> str:
        return (
            f"{len(self.extensions)} extensions, "
            f"{len(self.dependencies)} dependencies, "
            f"{len(self.architectures)} architectures, "
            f"{len(self.processors)} processors"
        )


# =============================================================================
# Runtime records
# =============================================================================


class ExtensionRecord(BaseModel):
    """Static descriptor of one extension, keyed by its dense id."""

    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    feature: str
    neg_feature: str
    fmv_code: int | None = None
    fmv_implies: str | None = None
    fmv_priority: int = 0


class DependencyEdge(BaseModel):
    """Ordered (prerequisite, dependent) pair of extension ids."""

    model_config = ConfigDict(frozen=True)

    earlier: int
    later: int


class ArchitectureRecord(BaseModel):
    """A specific architecture version, e.g. armv8.1-a."""

    model_config = ConfigDict(frozen=True)

    name: str
    major: int
    minor: int
    profile: ArchProfile
    arch_feature: str
    default_extensions: int = 0

    @property
    def version(self) -> tuple[int, int]:
        return (self.major, self.minor)

    @property
    def sub_arch(self) -> str:
        """The arch feature without its leading '+', e.g. 'v8.1a'."""
        return self.arch_feature[1:]


class ProcessorRecord(BaseModel):
    """A processor model and the architecture it implements."""

    model_config = ConfigDict(frozen=True)

    name: str
    architecture: ArchitectureRecord
    default_extensions: int = 0

    def implied_extensions(self) -> int:
        """Processor defaults ORed with its architecture's defaults."""
        return self.default_extensions | self.architecture.default_extensions
