"""Resolution pipeline: sources -> catalog -> graph -> closure -> plan."""

import logging
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor

from vw_cli.core.closure import select
from vw_cli.core.plan import CompilePlan, emit
from vw_cli.core.sorter import sort
from vw_cli.errors import AmbiguousTestbenchError, UnknownTestbenchError
from vw_cli.static_analysis.catalog import Catalog
from vw_cli.static_analysis.dependency_graph import build_graph
from vw_cli.static_analysis.vhdl import SourceFile, SourceUnit, VhdlAnalyzer

logger = logging.getLogger(__name__)


class Resolver:
    """Turns a materialized source set into a compile plan for one testbench.

    Every call starts from scratch; nothing is cached between calls.
    """

    def __init__(self, analyzer: VhdlAnalyzer | None = None, jobs: int = 1) -> None:
        """Initialize Resolver.

        Args:
            analyzer: Symbol extractor to use (default settings if omitted).
            jobs: Worker threads for parsing; 1 parses sequentially.
        """
        self.analyzer = analyzer or VhdlAnalyzer()
        self.jobs = max(1, jobs)

    def parse(self, sources: Iterable[SourceFile]) -> list[SourceUnit]:
        """Extract every source, merged in (library, path) order."""
        sources = list(sources)
        if self.jobs > 1 and len(sources) > 1:
            with ThreadPoolExecutor(max_workers=self.jobs) as pool:
                units = list(pool.map(self.analyzer.analyze, sources))
        else:
            units = [self.analyzer.analyze(source) for source in sources]
        logger.debug("Parsed %d source files", len(units))
        return sorted(units, key=lambda u: u.sort_key)

    def list_testbenches(self, sources: Iterable[SourceFile]) -> list[SourceUnit]:
        """Return all testbench candidates without computing any closure."""
        units = self.parse(sources)
        return sorted(
            (u for u in units if u.is_testbench_candidate),
            key=lambda u: (u.testbench_name, u.path),
        )

    def resolve(self, sources: Iterable[SourceFile], testbench: str) -> CompilePlan:
        """Compute the compile plan for ``testbench``.

        Raises:
            MalformedSourceError: A file could not be scanned.
            DuplicateSymbolError: A library declares a symbol twice.
            UnknownTestbenchError: No bench file declares the testbench.
            AmbiguousTestbenchError: Several bench files declare it.
            UnresolvedDependencyError: The closure references a missing symbol.
            AmbiguityError: The closure holds an ambiguous component reference.
            CyclicDependencyError: The closure is not acyclic.
        """
        units = self.parse(sources)
        # Before indexing: two bench files declaring the testbench are an
        # ambiguous testbench, not a duplicate symbol
        root = find_testbench((u for u in units if u.is_testbench_candidate), testbench)
        catalog = Catalog(units)
        logger.debug("Resolving %s from %s", root.testbench_name, root.path)

        graph = build_graph(catalog)
        closure = select(graph, root)
        logger.debug("Closure of %s holds %d of %d units", root.testbench_name, len(closure), len(catalog))

        return emit(sort(closure), root)


def find_testbench(candidates: Iterable[SourceUnit], name: str) -> SourceUnit:
    """Pick the root unit for a testbench name (case-insensitive).

    Raises:
        UnknownTestbenchError: No candidate declares ``name``.
        AmbiguousTestbenchError: More than one candidate does.
    """
    candidates = list(candidates)
    wanted = name.lower()
    matches = [u for u in candidates if u.testbench_name == wanted]
    if not matches:
        raise UnknownTestbenchError(name, [u.testbench_name for u in candidates])
    if len(matches) > 1:
        raise AmbiguousTestbenchError(name, [u.path for u in matches])
    return matches[0]


def resolve_testbench(sources: Iterable[SourceFile], testbench: str, jobs: int = 1) -> CompilePlan:
    """Helper to resolve one testbench with default analyzer settings."""
    return Resolver(jobs=jobs).resolve(sources, testbench)


def list_testbenches(sources: Iterable[SourceFile]) -> list[SourceUnit]:
    """Helper to list testbench candidates with default analyzer settings."""
    return Resolver().list_testbenches(sources)
