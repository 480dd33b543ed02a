"""Dependency graph helpers: topological sort and cycle detection."""

import heapq
from collections import defaultdict


class CircularDependencyError(ValueError):
    """Raised when a dependency graph contains a cycle."""

    def __init__(self, message: str, remaining: list | None = None):
        super().__init__(message)
        self.remaining = remaining or []


def topological_sort(nodes: list, edges: list[tuple]) -> list:
    """
    Topological sort of nodes given (earlier, later) edges.

    Uses Kahn's algorithm with a heap of ready nodes keyed by each node's
    position in ``nodes``, so ties resolve deterministically in
    O((V + E) log V).

    Args:
        nodes: All nodes in the graph, in their preferred order
        edges: Pairs of (earlier, later); ``earlier`` must come first

    Returns:
        Nodes ordered so that every edge points forward

    Raises:
        CircularDependencyError: If the edges contain a cycle
    """
    position = {node: i for i, node in enumerate(nodes)}
    graph = defaultdict(list)  # node -> nodes that come after it
    in_degree = {node: 0 for node in nodes}

    for earlier, later in edges:
        graph[earlier].append(later)
        in_degree[later] += 1

    ready = [position[node] for node in nodes if in_degree[node] == 0]
    heapq.heapify(ready)
    order = []

    while ready:
        node = nodes[heapq.heappop(ready)]
        order.append(node)

        for later in graph[node]:
            in_degree[later] -= 1
            if in_degree[later] == 0:
                heapq.heappush(ready, position[later])

    if len(order) != len(nodes):
        placed = set(order)
        remaining = [node for node in nodes if node not in placed]
        raise CircularDependencyError(
            f"Circular dependency detected involving: {remaining}",
            remaining=remaining,
        )

    return order
