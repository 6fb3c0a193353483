"""
Weighted vertex graph of the structure.

The graph is built once from the edge mapping and never mutated. It
answers two questions for the allocation engines:

- which vertices are one edge away from a given vertex
- how far apart two vertices are along the structure (shortest path,
  weighted by edge length), which bounds the feed wire run

Shortest paths are computed with Dijkstra from a single source and the
whole distance table is cached per source, since the engines query the
same strip endpoints over and over.

Usage:
    graph = StructureGraph(structure.edges)
    graph.neighbors(12)          # {7, 13, 40}
    graph.distance(12, 40)       # micrometers, math.inf if unreachable
"""

from __future__ import annotations

import heapq
import logging
import math
from typing import TYPE_CHECKING, Iterable

if TYPE_CHECKING:
    from junction_planner.geometry.models import Edge

logger = logging.getLogger(__name__)

__all__ = ["StructureGraph", "UNREACHABLE"]

UNREACHABLE = math.inf


class StructureGraph:
    """Adjacency and shortest-path distances over structure vertices.

    Args:
        edges: Mapping of edge id to Edge (or any iterable of edges)

    Attributes:
        adjacency: Vertex id to the set of directly connected vertex ids
    """

    def __init__(self, edges: dict[str, Edge] | Iterable[Edge]):
        if isinstance(edges, dict):
            edges = edges.values()

        self.adjacency: dict[int, set[int]] = {}
        self._weights: dict[tuple[int, int], float] = {}
        self._distances: dict[int, dict[int, float]] = {}

        for edge in edges:
            a, b = (v.id for v in edge.vertices)
            if a == b:
                continue
            self.adjacency.setdefault(a, set()).add(b)
            self.adjacency.setdefault(b, set()).add(a)

            # Parallel edges between the same pair: the shorter one wins
            key = (min(a, b), max(a, b))
            length = edge.length
            if key not in self._weights or length < self._weights[key]:
                self._weights[key] = length

        logger.debug(
            "Built graph with %d vertices and %d edges",
            len(self.adjacency),
            len(self._weights),
        )

    @property
    def vertex_ids(self) -> list[int]:
        return sorted(self.adjacency)

    def __contains__(self, vertex_id: int) -> bool:
        return vertex_id in self.adjacency

    def __len__(self) -> int:
        return len(self.adjacency)

    def neighbors(self, vertex_id: int) -> set[int]:
        """Vertices one edge away. Empty for unknown or isolated vertices."""
        return set(self.adjacency.get(vertex_id, ()))

    def weight(self, a: int, b: int) -> float:
        """Length of the edge joining two adjacent vertices."""
        return self._weights.get((min(a, b), max(a, b)), UNREACHABLE)

    def distance(self, a: int, b: int) -> float:
        """Shortest-path distance between two vertices in micrometers.

        The search always runs from the smaller vertex id, so the result
        is exactly symmetric.

        Returns:
            0.0 when ``a == b``; ``math.inf`` when the vertices are not
            connected or either one is not in the graph.
        """
        if a == b:
            return 0.0
        source, target = (a, b) if a < b else (b, a)
        return self.shortest_paths(source).get(target, UNREACHABLE)

    def shortest_paths(self, source: int) -> dict[int, float]:
        """Distances from ``source`` to every reachable vertex (cached)."""
        table = self._distances.get(source)
        if table is None:
            table = self._dijkstra(source)
            self._distances[source] = table
        return table

    def _dijkstra(self, source: int) -> dict[int, float]:
        if source not in self.adjacency:
            return {source: 0.0}

        dist: dict[int, float] = {source: 0.0}
        visited: set[int] = set()
        heap: list[tuple[float, int]] = [(0.0, source)]

        while heap:
            d, vertex = heapq.heappop(heap)
            if vertex in visited:
                continue
            visited.add(vertex)

            for neighbor in self.adjacency[vertex]:
                if neighbor in visited:
                    continue
                candidate = d + self.weight(vertex, neighbor)
                if candidate < dist.get(neighbor, UNREACHABLE):
                    dist[neighbor] = candidate
                    heapq.heappush(heap, (candidate, neighbor))

        return dist
