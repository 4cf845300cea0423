"""Dependency Graph construction over a unit catalog."""
from collections import defaultdict
from dataclasses import dataclass

from vw_cli.static_analysis.catalog import Catalog
from vw_cli.static_analysis.vhdl import CONTEXT, ENTITY, PACKAGE, SourceUnit

USE_PACKAGE = "use-package"
USE_CONTEXT = "use-context"
DIRECT_ENTITY = "direct-entity"
COMPONENT_ENTITY = "component-entity"
SECONDARY_UNIT = "secondary-unit"

COMPONENT = "component"


@dataclass(frozen=True, order=True)
class UnresolvedReference:
    """A reference no catalog entry satisfies."""

    kind: str
    library: str
    name: str

    def __str__(self) -> str:
        if self.kind == COMPONENT:
            return f"component {self.name} (no entity of that name in any library)"
        return f"{self.kind} {self.library}.{self.name}"


@dataclass(frozen=True, order=True)
class AmbiguousReference:
    """An unqualified component name matching entities in several libraries."""

    name: str
    # (library, path) of every matching entity
    candidates: tuple[tuple[str, str], ...]

    def __str__(self) -> str:
        found = ", ".join(f"{lib}.{self.name} ({path})" for lib, path in self.candidates)
        return f"component {self.name} matches {found}"


class DependencyGraph:
    """Graph structure to represent unit-to-unit dependencies."""

    def __init__(self, catalog: Catalog) -> None:
        """Initialize DependencyGraph.

        Args:
            catalog: Indexed units to connect.
        """
        self.catalog = catalog

        # Map: Consumer path -> Set of provider paths
        self.dependencies: dict[str, set[str]] = defaultdict(set)
        # Map: (consumer, provider) -> reasons, reported on cycles
        self.reasons: dict[tuple[str, str], set[str]] = defaultdict(set)
        # Map: Primary unit path -> paths holding its bodies/architectures
        self.secondary_units: dict[str, set[str]] = defaultdict(set)

        self.unresolved: dict[str, list[UnresolvedReference]] = defaultdict(list)
        self.ambiguous: dict[str, list[AmbiguousReference]] = defaultdict(list)

    def build(self) -> "DependencyGraph":
        """Resolve every reference of every unit in the catalog.

        Never fails: missing and ambiguous references are recorded on the
        consumer and only matter if the consumer ends up in a closure.
        """
        catalog = self.catalog
        for unit in catalog.units:
            # Ensure node exists in graph even if no deps
            self.dependencies.setdefault(unit.path, set())

            for library, name in sorted(unit.used_packages):
                self._link(unit, catalog.resolve_package(library, name), USE_PACKAGE, PACKAGE, library, name)

            for library, name in sorted(unit.used_contexts):
                self._link(unit, catalog.resolve_context(library, name), USE_CONTEXT, CONTEXT, library, name)

            for library, name in sorted(unit.direct_instantiations):
                self._link(unit, catalog.resolve_entity(library, name), DIRECT_ENTITY, ENTITY, library, name)

            for symbol in sorted(unit.implemented_symbols):
                provider = catalog.resolve(unit.library, symbol.kind, symbol.name)
                self._link(unit, provider, SECONDARY_UNIT, symbol.kind, unit.library, symbol.name)
                if provider is not None and provider.path != unit.path:
                    self.secondary_units[provider.path].add(unit.path)

            for name in sorted(unit.component_instantiations):
                self._link_component(unit, name, strict=True)

            for name in sorted(unit.inferred_instantiations - unit.component_instantiations):
                self._link_component(unit, name, strict=False)
        return self

    def _link_component(self, unit: SourceUnit, name: str, strict: bool) -> None:
        """Bind an unqualified component name to the one entity carrying it.

        A name only seen as "<label> : <name> port map" may be a vendor
        primitive from an ignored library; with no matching entity it is
        dropped rather than reported.
        """
        candidates = self.catalog.resolve_component(name)
        if len(candidates) > 1:
            self.ambiguous[unit.path].append(
                AmbiguousReference(name, tuple((c.library, c.path) for c in candidates))
            )
        elif candidates:
            self._link(unit, candidates[0], COMPONENT_ENTITY, COMPONENT, "", name)
        elif strict:
            self.unresolved[unit.path].append(UnresolvedReference(COMPONENT, "", name))

    def _link(
        self,
        unit: SourceUnit,
        provider: SourceUnit | None,
        reason: str,
        kind: str,
        library: str,
        name: str,
    ) -> None:
        if provider is None:
            self.unresolved[unit.path].append(UnresolvedReference(kind, library, name))
        elif provider.path != unit.path:
            self.add_dependency(unit.path, provider.path, reason)

    def add_dependency(self, source: str, target: str, reason: str = "") -> None:
        """Add a dependency: source depends on target.

        Args:
            source: Consumer unit path.
            target: Provider unit path.
            reason: Why the edge exists (reported on cycles).
        """
        self.dependencies[source].add(target)
        if reason:
            self.reasons[(source, target)].add(reason)

    def providers(self, path: str) -> list[str]:
        return sorted(self.dependencies.get(path, ()))


def build_graph(catalog: Catalog) -> DependencyGraph:
    """Build the dependency graph for a catalog."""
    return DependencyGraph(catalog).build()
