"""Topological ordering of a closure into library batches."""

import heapq
from collections import defaultdict
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from vw_cli.core.closure import Closure
from vw_cli.errors import CyclicDependencyError
from vw_cli.static_analysis.vhdl import WORK, SourceUnit


@dataclass(frozen=True)
class LibraryPartition:
    """Units of one library in compilation order."""

    library: str
    units: tuple[SourceUnit, ...]


def order_units(closure: Closure) -> list[SourceUnit]:
    """Kahn's algorithm over the closure, ties broken by (library, path).

    Raises:
        CyclicDependencyError: The closure's graph has a cycle.
    """
    units = {unit.path: unit for unit in closure.units}
    in_degree = {path: len(closure.edges.get(path, ())) for path in units}
    consumers: dict[str, list[str]] = defaultdict(list)
    for consumer, providers in closure.edges.items():
        for provider in providers:
            consumers[provider].append(consumer)

    ready = [units[p].sort_key for p, degree in in_degree.items() if degree == 0]
    heapq.heapify(ready)
    ordered: list[SourceUnit] = []
    while ready:
        _, path = heapq.heappop(ready)
        ordered.append(units[path])
        for consumer in consumers[path]:
            in_degree[consumer] -= 1
            if in_degree[consumer] == 0:
                heapq.heappush(ready, units[consumer].sort_key)

    if len(ordered) != len(units):
        remaining = {p for p, degree in in_degree.items() if degree > 0}
        cycle = _find_cycle(remaining, lambda p: closure.edges.get(p, ()), key=lambda p: units[p].sort_key)
        reasons = {hop: closure.reasons.get(hop, frozenset()) for hop in zip(cycle, cycle[1:])}
        raise CyclicDependencyError(cycle, reasons=reasons)
    return ordered


def order_libraries(closure: Closure, libraries: Iterable[str]) -> list[str]:
    """Order library batches: providers first, ``work`` last, ties by name.

    Raises:
        CyclicDependencyError: External libraries need each other, or need ``work``.
    """
    units = {unit.path: unit for unit in closure.units}
    needs: dict[str, set[str]] = defaultdict(set)
    for consumer, providers in closure.edges.items():
        for provider in providers:
            consumer_lib, provider_lib = units[consumer].library, units[provider].library
            if consumer_lib != provider_lib:
                needs[consumer_lib].add(provider_lib)

    external = sorted(lib for lib in set(libraries) if lib != WORK)
    for lib in external:
        if WORK in needs[lib]:
            raise CyclicDependencyError([lib, WORK, lib], level="library")

    in_degree = {lib: len(needs[lib] & set(external)) for lib in external}
    users: dict[str, list[str]] = defaultdict(list)
    for lib in external:
        for provider in needs[lib]:
            users[provider].append(lib)

    ready = [lib for lib in external if in_degree[lib] == 0]
    heapq.heapify(ready)
    ordered = []
    while ready:
        lib = heapq.heappop(ready)
        ordered.append(lib)
        for user in users[lib]:
            in_degree[user] -= 1
            if in_degree[user] == 0:
                heapq.heappush(ready, user)

    if len(ordered) != len(external):
        remaining = {lib for lib, degree in in_degree.items() if degree > 0}
        raise CyclicDependencyError(_find_cycle(remaining, lambda lib: needs[lib]), level="library")

    if WORK in set(libraries):
        ordered.append(WORK)
    return ordered


def sort(closure: Closure) -> list[LibraryPartition]:
    """Order a closure for sequential compilation, partitioned by library.

    Relative unit order inside each library follows the global topological
    order; external library batches precede ``work``.

    Raises:
        CyclicDependencyError: The closure is not acyclic.
    """
    ordered = order_units(closure)
    by_library: dict[str, list[SourceUnit]] = defaultdict(list)
    for unit in ordered:
        by_library[unit.library].append(unit)
    return [
        LibraryPartition(lib, tuple(by_library[lib]))
        for lib in order_libraries(closure, by_library)
    ]


def _find_cycle(
    remaining: set[str],
    providers: Callable[[str], Iterable[str]],
    key: Callable[[str], object] = lambda node: node,
) -> list[str]:
    """Walk provider edges among ``remaining`` until a node repeats.

    Every remaining node still waits on a remaining provider, so the walk
    always closes. The cycle is rotated to start at its smallest member.
    """
    node = min(remaining, key=key)
    seen: dict[str, int] = {}
    path: list[str] = []
    while node not in seen:
        seen[node] = len(path)
        path.append(node)
        node = min((p for p in providers(node) if p in remaining), key=key)
    cycle = path[seen[node] :]
    start = cycle.index(min(cycle, key=key))
    cycle = cycle[start:] + cycle[:start]
    return cycle + [cycle[0]]
