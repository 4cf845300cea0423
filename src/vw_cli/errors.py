"""Error types raised by the workspace resolver.

Every failure carries the identifying context (paths, symbol names, cycle
membership) as attributes so the CLI can render an actionable message.
"""

from __future__ import annotations


class VwError(RuntimeError):
    """Base class for all vw failures."""


class WorkspaceError(VwError):
    """The workspace layout or configuration cannot be used."""


class MalformedSourceError(VwError):
    """A source file could not be scanned at all."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot scan {path}: {reason}")


class DuplicateSymbolError(VwError):
    """Two files in the same library declare the same design unit."""

    def __init__(self, library: str, kind: str, name: str, paths: list[str]) -> None:
        self.library = library
        self.kind = kind
        self.name = name
        self.paths = sorted(paths)
        super().__init__(
            f"{kind} '{name}' is declared more than once in library '{library}': "
            + ", ".join(self.paths)
        )


class DuplicateSourceError(VwError):
    """The same path was handed to the catalog twice."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"Source file listed twice: {path}")


class UnresolvedDependencyError(VwError):
    """Units in the selected closure reference symbols nothing provides."""

    def __init__(self, missing: list[tuple[str, object]]) -> None:
        # (consumer path, UnresolvedReference)
        self.missing = missing
        lines = [f"  {path}: {ref}" for path, ref in missing]
        super().__init__("Unresolved references:\n" + "\n".join(lines))


class AmbiguityError(VwError):
    """An unqualified component instantiation matches entities in several libraries."""

    def __init__(self, ambiguous: list[tuple[str, object]]) -> None:
        # (consumer path, AmbiguousReference)
        self.ambiguous = ambiguous
        lines = [f"  {path}: {ref}" for path, ref in ambiguous]
        super().__init__("Ambiguous component instantiations:\n" + "\n".join(lines))


class CyclicDependencyError(VwError):
    """The dependency graph of a closure is not acyclic."""

    def __init__(
        self,
        cycle: list[str],
        level: str = "unit",
        reasons: dict[tuple[str, str], frozenset[str]] | None = None,
    ) -> None:
        self.cycle = cycle
        self.level = level
        self.reasons = reasons or {}
        message = f"Circular {level} dependency: " + " -> ".join(cycle)
        for (consumer, provider), why in self.reasons.items():
            if why:
                message += f"\n  {consumer} -> {provider}: {', '.join(sorted(why))}"
        super().__init__(message)


class UnknownTestbenchError(VwError):
    """No testbench candidate matches the requested name."""

    def __init__(self, name: str, available: list[str]) -> None:
        self.name = name
        self.available = sorted(available)
        hint = ", ".join(self.available) if self.available else "none"
        super().__init__(
            f"Testbench entity '{name}' not found in bench directory (available: {hint})"
        )


class AmbiguousTestbenchError(VwError):
    """Several bench files declare the requested testbench entity."""

    def __init__(self, name: str, paths: list[str]) -> None:
        self.name = name
        self.paths = sorted(paths)
        super().__init__(
            f"Multiple files contain testbench entity '{name}': " + ", ".join(self.paths)
        )


class SimulationError(VwError):
    """The external simulator exited with a failure."""

    def __init__(self, stage: str, command: list[str], library: str | None = None) -> None:
        self.stage = stage
        self.command = command
        self.library = library
        target = f" for library '{library}'" if library else ""
        super().__init__(f"NVC {stage} failed{target}\ncommand:\n" + " ".join(command))
