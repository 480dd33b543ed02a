"""Pairwise superset ordering between architecture versions.

Defines the following partial order, indicating when an architecture is a
superset of another:

    v9.5a > v9.4a > v9.3a > v9.2a > v9.1a > v9a;
              v       v       v       v       v
            v8.9a > v8.8a > v8.7a > v8.6a > v8.5a > v8.4a > ... > v8a;

Architectures of different profiles (e.g. v8r) have no relation to anything
of another profile.
"""

from ..core.models import ArchitectureRecord

# v9.N extends v8.(N + 5).
_V9_OVER_V8_OFFSET = 5


def implies(a: ArchitectureRecord, b: ArchitectureRecord) -> bool:
    """True if ``a`` is a strict superset of ``b``."""
    if a.profile != b.profile:
        return False
    if a.major == b.major:
        return a.version > b.version
    if a.major == 9 and b.major == 8:
        return a.minor + _V9_OVER_V8_OFFSET >= b.minor
    return False


def is_superset(a: ArchitectureRecord, b: ArchitectureRecord) -> bool:
    """True if ``a`` is ``b`` or implies it."""
    return a.name == b.name or implies(a, b)
