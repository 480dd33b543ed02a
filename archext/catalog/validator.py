"""Catalog validation.

Unlike ``build_catalog``, which stops at the first defect, this collects
every problem as a ValidationIssue so the whole file can be fixed in one
pass.

ERROR categories block building the catalog:
    DUPLICATE_NAME, TOO_MANY_EXTENSIONS, UNKNOWN_EXTENSION, CYCLE,
    UNKNOWN_ARCHITECTURE, ALIAS_TARGET
WARNING categories do not:
    DUPLICATE_DEPENDENCY, REDUNDANT_DEFAULT, ALIAS_SHADOWS_NAME,
    UNCLOSED_DEFAULTS
"""

from ..core.models import CatalogSpec, ValidationResult
from ..utils.graphs import CircularDependencyError, topological_sort
from .extensions import EXTENSION_BITSET_WIDTH


def validate_catalog_spec(
    spec: CatalogSpec, width: int = EXTENSION_BITSET_WIDTH
) -> ValidationResult:
    """Run all checks on a catalog spec."""
    result = ValidationResult()
    ext_names = _check_extensions(spec, width, result)
    _check_dependencies(spec, ext_names, result)
    arch_defaults = _check_architectures(spec, ext_names, result)
    _check_processors(spec, ext_names, arch_defaults, result)
    _check_aliases(spec, ext_names, result)
    if result.valid:
        _check_default_closure(spec, arch_defaults, result)
    return result


def _check_extensions(
    spec: CatalogSpec, width: int, result: ValidationResult
) -> set[str]:
    seen: set[str] = set()
    for i, ext in enumerate(spec.extensions):
        if ext.name in seen:
            result.add_error(
                "DUPLICATE_NAME",
                f"extensions[{i}]",
                f"extension '{ext.name}' is declared more than once",
                value=ext.name,
            )
        seen.add(ext.name)

    if len(spec.extensions) > width:
        result.add_error(
            "TOO_MANY_EXTENSIONS",
            "extensions",
            f"{len(spec.extensions)} extensions do not fit in a {width}-bit set",
            suggestion="Remove unused extensions or widen the extension set",
        )
    return seen


def _check_dependencies(
    spec: CatalogSpec, ext_names: set[str], result: ValidationResult
) -> None:
    seen: set[tuple[str, str]] = set()
    edges = []
    for i, dep in enumerate(spec.dependencies):
        location = f"dependencies[{i}]"
        unknown = [n for n in (dep.earlier, dep.later) if n not in ext_names]
        for name in unknown:
            result.add_error(
                "UNKNOWN_EXTENSION",
                location,
                f"dependency references unknown extension '{name}'",
                value=name,
            )
        if unknown:
            continue

        pair = (dep.earlier, dep.later)
        if pair in seen:
            result.add_warning(
                "DUPLICATE_DEPENDENCY",
                location,
                f"dependency {dep.earlier} -> {dep.later} is listed more than once",
                suggestion="Remove the duplicate entry",
            )
        seen.add(pair)
        edges.append(pair)

    nodes = list(dict.fromkeys(ext.name for ext in spec.extensions))
    try:
        topological_sort(nodes, edges)
    except CircularDependencyError as exc:
        result.add_error(
            "CYCLE",
            "dependencies",
            f"cyclic dependencies involving: {', '.join(exc.remaining)}",
        )


def _check_architectures(
    spec: CatalogSpec, ext_names: set[str], result: ValidationResult
) -> dict[str, set[str]]:
    """Check architectures and return their flattened default names."""
    defaults: dict[str, set[str]] = {}
    for i, arch in enumerate(spec.architectures):
        location = f"architectures[{i}]"
        if arch.name in defaults:
            result.add_error(
                "DUPLICATE_NAME",
                location,
                f"architecture '{arch.name}' is declared more than once",
                value=arch.name,
            )

        names: set[str] = set()
        if arch.base is not None:
            if arch.base not in defaults:
                result.add_error(
                    "UNKNOWN_ARCHITECTURE",
                    location,
                    f"base architecture '{arch.base}' is not declared before "
                    f"'{arch.name}'",
                    value=arch.base,
                )
            else:
                names |= defaults[arch.base]

        for name in [*arch.add, *arch.remove]:
            if name not in ext_names:
                result.add_error(
                    "UNKNOWN_EXTENSION",
                    location,
                    f"architecture '{arch.name}' references unknown extension "
                    f"'{name}'",
                    value=name,
                )
        names |= set(arch.add)
        names -= set(arch.remove)
        defaults[arch.name] = names
    return defaults


def _check_processors(
    spec: CatalogSpec,
    ext_names: set[str],
    arch_defaults: dict[str, set[str]],
    result: ValidationResult,
) -> None:
    seen: set[str] = set()
    for i, cpu in enumerate(spec.processors):
        location = f"processors[{i}]"
        if cpu.name in seen:
            result.add_error(
                "DUPLICATE_NAME",
                location,
                f"processor '{cpu.name}' is declared more than once",
                value=cpu.name,
            )
        seen.add(cpu.name)

        if cpu.arch not in arch_defaults:
            result.add_error(
                "UNKNOWN_ARCHITECTURE",
                location,
                f"processor '{cpu.name}' references unknown architecture "
                f"'{cpu.arch}'",
                value=cpu.arch,
            )
            inherited: set[str] = set()
        else:
            inherited = arch_defaults[cpu.arch]

        for name in cpu.extensions:
            if name not in ext_names:
                result.add_error(
                    "UNKNOWN_EXTENSION",
                    location,
                    f"processor '{cpu.name}' references unknown extension "
                    f"'{name}'",
                    value=name,
                )
            elif name in inherited:
                result.add_warning(
                    "REDUNDANT_DEFAULT",
                    location,
                    f"'{name}' is already a default of {cpu.arch}",
                    suggestion=f"Remove '{name}' from {cpu.name}",
                    value=name,
                )


def _check_aliases(
    spec: CatalogSpec, ext_names: set[str], result: ValidationResult
) -> None:
    cpu_names = {cpu.name for cpu in spec.processors}
    tables = [
        ("aliases.cpu", spec.aliases.cpu, cpu_names),
        ("aliases.extension", spec.aliases.extension, ext_names),
    ]
    for location, table, canonical in tables:
        for alt_name, name in table.items():
            if name not in canonical:
                result.add_error(
                    "ALIAS_TARGET",
                    location,
                    f"alias '{alt_name}' points to unknown name '{name}'",
                    value=alt_name,
                )
            if alt_name in canonical:
                result.add_warning(
                    "ALIAS_SHADOWS_NAME",
                    location,
                    f"alias '{alt_name}' hides the canonical name '{alt_name}'",
                    value=alt_name,
                )


def _check_default_closure(
    spec: CatalogSpec,
    arch_defaults: dict[str, set[str]],
    result: ValidationResult,
) -> None:
    """Warn when an architecture's defaults miss a prerequisite."""
    prerequisites: dict[str, set[str]] = {}
    for dep in spec.dependencies:
        prerequisites.setdefault(dep.later, set()).add(dep.earlier)

    for arch_name, names in arch_defaults.items():
        missing = sorted(
            {p for name in names for p in prerequisites.get(name, ())} - names
        )
        if missing:
            result.add_warning(
                "UNCLOSED_DEFAULTS",
                f"architectures.{arch_name}",
                f"defaults of {arch_name} omit prerequisites: {', '.join(missing)}",
                suggestion="Add the prerequisites to the architecture defaults",
            )
