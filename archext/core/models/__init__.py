"""All Pydantic models for archext, organized by domain.

- catalog.py: Catalog file schema and the frozen runtime records
- validation.py: Validation issues and results
"""

from .catalog import (
    # Spec (YAML schema)
    ExtensionEntry,
    DependencySpec,
    ArchitectureEntry,
    ProcessorEntry,
    AliasTables,
    CatalogSpec,
    # Runtime records
    ExtensionRecord,
    DependencyEdge,
    ArchitectureRecord,
    ProcessorRecord,
    ArchProfile,
    MAX_FMV_PRIORITY,
)

from .validation import (
    Severity,
    ValidationIssue,
    ValidationResult,
)

__all__ = [
    # Catalog - Spec
    "ExtensionEntry",
    "DependencySpec",
    "ArchitectureEntry",
    "ProcessorEntry",
    "AliasTables",
    "CatalogSpec",
    # Catalog - Records
    "ExtensionRecord",
    "DependencyEdge",
    "ArchitectureRecord",
    "ProcessorRecord",
    "ArchProfile",
    "MAX_FMV_PRIORITY",
    # Validation
    "Severity",
    "ValidationIssue",
    "ValidationResult",
]
