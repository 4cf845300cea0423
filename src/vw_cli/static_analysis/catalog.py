"""Unit catalog: symbol and library index over parsed source units."""

from collections import defaultdict
from collections.abc import Iterable

from vw_cli.errors import DuplicateSourceError, DuplicateSymbolError
from vw_cli.static_analysis.vhdl import CONTEXT, ENTITY, PACKAGE, SourceUnit, Symbol


class Catalog:
    """Queryable index of every candidate unit in a resolution call."""

    def __init__(self, units: Iterable[SourceUnit]) -> None:
        """Index units.

        Args:
            units: Parsed units from the workspace, bench and dependencies.

        Raises:
            DuplicateSourceError: The same path appears twice.
            DuplicateSymbolError: Two units of one library declare the same symbol.
        """
        by_path: dict[str, SourceUnit] = {}
        for unit in units:
            if unit.path in by_path:
                raise DuplicateSourceError(unit.path)
            by_path[unit.path] = unit

        self.units: tuple[SourceUnit, ...] = tuple(
            sorted(by_path.values(), key=lambda u: u.sort_key)
        )
        self._by_path = by_path

        # (library, symbol) -> unit
        self._symbols: dict[tuple[str, Symbol], SourceUnit] = {}
        # entity name -> units in any library
        self._entities: dict[str, list[SourceUnit]] = defaultdict(list)
        self._libraries: dict[str, list[SourceUnit]] = defaultdict(list)

        for unit in self.units:
            self._libraries[unit.library].append(unit)
            for symbol in sorted(unit.declared_symbols):
                key = (unit.library, symbol)
                if key in self._symbols:
                    raise DuplicateSymbolError(
                        unit.library, symbol.kind, symbol.name, [self._symbols[key].path, unit.path]
                    )
                self._symbols[key] = unit
                if symbol.kind == ENTITY:
                    self._entities[symbol.name].append(unit)

    def __len__(self) -> int:
        return len(self.units)

    def __contains__(self, path: object) -> bool:
        return path in self._by_path

    def get(self, path: str) -> SourceUnit:
        return self._by_path[path]

    def resolve(self, library: str, kind: str, name: str) -> SourceUnit | None:
        return self._symbols.get((library, Symbol(kind, name)))

    def resolve_package(self, library: str, name: str) -> SourceUnit | None:
        return self.resolve(library, PACKAGE, name)

    def resolve_entity(self, library: str, name: str) -> SourceUnit | None:
        return self.resolve(library, ENTITY, name)

    def resolve_context(self, library: str, name: str) -> SourceUnit | None:
        return self.resolve(library, CONTEXT, name)

    def resolve_component(self, name: str) -> tuple[SourceUnit, ...]:
        """Entities named like an unqualified component, across all libraries."""
        return tuple(self._entities.get(name, ()))

    def libraries(self) -> dict[str, tuple[SourceUnit, ...]]:
        """Library name -> member units, sorted by path."""
        return {lib: tuple(members) for lib, members in sorted(self._libraries.items())}

