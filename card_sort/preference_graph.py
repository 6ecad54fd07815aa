"""
Preference graph for cycle detection.

Directed winner -> loser edges between card indices. The graph is a value:
adding an edge returns a new graph that shares every untouched adjacency set
with the old one, so earlier engine states keep their own graph.
"""

from collections import deque
from collections.abc import Iterator, Mapping
from types import MappingProxyType


class PreferenceGraph:
    """Immutable adjacency-set graph over card indices."""

    __slots__ = ("_edges",)

    def __init__(self, edges: Mapping[int, frozenset[int]] | None = None):
        self._edges: Mapping[int, frozenset[int]] = MappingProxyType(dict(edges or {}))

    def with_edge(self, winner: int, loser: int) -> "PreferenceGraph":
        """Return a graph that also contains winner -> loser."""
        current = self._edges.get(winner, frozenset())
        if loser in current:
            return self
        edges = dict(self._edges)
        edges[winner] = current | {loser}
        return PreferenceGraph(edges)

    def reaches(self, source: int, target: int) -> bool:
        """Breadth-first search for a path from source to target."""
        visited: set[int] = set()
        queue = deque([source])
        while queue:
            current = queue.popleft()
            if current == target:
                return True
            if current in visited:
                continue
            visited.add(current)
            for neighbor in self._edges.get(current, ()):
                if neighbor not in visited:
                    queue.append(neighbor)
        return False

    def would_create_cycle(self, winner: int, loser: int) -> bool:
        """Adding winner -> loser closes a cycle iff loser already reaches winner."""
        return self.reaches(loser, winner)

    def successors(self, node: int) -> frozenset[int]:
        return self._edges.get(node, frozenset())

    def items(self) -> Iterator[tuple[int, frozenset[int]]]:
        return iter(self._edges.items())

    def edge_count(self) -> int:
        return sum(len(losers) for losers in self._edges.values())

    def __contains__(self, edge: object) -> bool:
        if not isinstance(edge, tuple) or len(edge) != 2:
            return False
        winner, loser = edge
        return loser in self._edges.get(winner, frozenset())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PreferenceGraph):
            return NotImplemented
        mine = {k: v for k, v in self._edges.items() if v}
        theirs = {k: v for k, v in other._edges.items() if v}
        return mine == theirs

    def __repr__(self) -> str:
        return f"PreferenceGraph(edges={self.edge_count()})"
