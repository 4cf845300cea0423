"""Closure selection: the units a testbench transitively needs."""

from collections import deque
from dataclasses import dataclass, field

from vw_cli.errors import AmbiguityError, UnresolvedDependencyError
from vw_cli.static_analysis.dependency_graph import DependencyGraph
from vw_cli.static_analysis.vhdl import SourceUnit


@dataclass(frozen=True)
class Closure:
    """Units reachable from a root testbench, plus the root itself."""

    root: SourceUnit
    units: tuple[SourceUnit, ...]
    # Consumer path -> provider paths, restricted to the closure
    edges: dict[str, frozenset[str]] = field(default_factory=dict)
    # (consumer, provider) -> why the edge exists, restricted to the closure
    reasons: dict[tuple[str, str], frozenset[str]] = field(default_factory=dict)

    def __contains__(self, path: object) -> bool:
        return path in self.edges

    def __len__(self) -> int:
        return len(self.units)

    @property
    def paths(self) -> list[str]:
        return [unit.path for unit in self.units]


def select(graph: DependencyGraph, root: SourceUnit) -> Closure:
    """Compute the closure of ``root`` over ``graph``.

    Reachability is the only rule: bench files are ordinary providers once
    something in the closure references them. Secondary units (package bodies,
    architectures) kept in separate files are pulled in with their primary unit.

    Raises:
        UnresolvedDependencyError: A unit in the closure has a missing reference.
        AmbiguityError: A unit in the closure has an ambiguous component reference.
    """
    visited = {root.path}
    queue = deque([root.path])
    while queue:
        path = queue.popleft()
        neighbours = graph.providers(path) + sorted(graph.secondary_units.get(path, ()))
        for neighbour in neighbours:
            if neighbour not in visited:
                visited.add(neighbour)
                queue.append(neighbour)

    missing = [
        (path, ref) for path in sorted(visited) for ref in sorted(graph.unresolved.get(path, ()))
    ]
    if missing:
        raise UnresolvedDependencyError(missing)

    ambiguous = [
        (path, ref) for path in sorted(visited) for ref in sorted(graph.ambiguous.get(path, ()))
    ]
    if ambiguous:
        raise AmbiguityError(ambiguous)

    catalog = graph.catalog
    units = tuple(sorted((catalog.get(p) for p in visited), key=lambda u: u.sort_key))
    edges = {
        path: frozenset(p for p in graph.dependencies.get(path, ()) if p in visited)
        for path in visited
    }
    reasons = {
        (consumer, provider): frozenset(graph.reasons.get((consumer, provider), ()))
        for consumer, providers in edges.items()
        for provider in providers
    }
    return Closure(root=root, units=units, edges=edges, reasons=reasons)
