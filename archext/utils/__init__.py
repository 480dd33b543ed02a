"""Pure utility functions for archext.

This module contains pure functions with ZERO dependencies on archext models
or other archext modules, so they can be imported from anywhere without
circular import risk.

Modules:
- graphs: Topological sort and cycle detection
"""

from .graphs import topological_sort, CircularDependencyError

__all__ = [
    "topological_sort",
    "CircularDependencyError",
]
