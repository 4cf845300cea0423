"""Workspace source discovery: the source provider for the resolver."""

import logging
from pathlib import Path

from vw_cli.config.models import DependencyConfig, WorkspaceConfig
from vw_cli.errors import MalformedSourceError, WorkspaceError
from vw_cli.static_analysis.file_filter import FileFilter
from vw_cli.static_analysis.vhdl import WORK, SourceFile, VhdlAnalyzer

logger = logging.getLogger(__name__)


class Workspace:
    """A VHDL workspace rooted at a directory holding vw.toml."""

    def __init__(self, root_path: Path, config: WorkspaceConfig) -> None:
        """Initialize Workspace.

        Args:
            root_path: Workspace root directory.
            config: Loaded workspace configuration.
        """
        self.root_path = root_path
        self.config = config
        self.file_filter = FileFilter(root_path, config.sources.exclude)

    @property
    def bench_dir(self) -> Path:
        return self.root_path / self.config.sources.bench

    def analyzer(self) -> VhdlAnalyzer:
        """Symbol extractor configured for this workspace."""
        return VhdlAnalyzer(
            testbench_suffix=self.config.sources.testbench_suffix,
            ignored_libraries=set(self.config.sources.ignored_libraries),
        )

    def dependency_dir(self, name: str, dependency: DependencyConfig) -> Path:
        """Directory holding the VHDL sources of a fetched dependency.

        Raises:
            WorkspaceError: The dependency has no local checkout.
        """
        if not dependency.path:
            raise WorkspaceError(
                f"Dependency '{name}' has not been fetched: no local path configured"
            )
        checkout = Path(dependency.path).expanduser()
        if not checkout.is_absolute():
            checkout = self.root_path / checkout
        src_dir = (checkout / dependency.src).resolve()
        if not src_dir.is_dir():
            raise WorkspaceError(f"Dependency '{name}' source directory not found: {src_dir}")
        return src_dir

    def dependency_files(self, include_sim_only: bool = True) -> dict[str, list[Path]]:
        """VHDL files of every dependency, keyed by dependency name (sorted)."""
        files: dict[str, list[Path]] = {}
        for name, dependency in sorted(self.config.dependencies.items()):
            if dependency.sim_only and not include_sim_only:
                continue
            src_dir = self.dependency_dir(name, dependency)
            files[name] = list(self.file_filter.walk(src_dir, recursive=dependency.recursive))
        return files

    def local_files(self) -> tuple[list[Path], list[Path]]:
        """Workspace sources and bench files, as (sources, bench)."""
        bench_dir = self.bench_dir.resolve()
        sources: list[Path] = []
        for src in self.config.sources.src:
            src_dir = self.root_path / src
            if not src_dir.is_dir():
                logger.warning("Source directory does not exist: %s", src_dir)
                continue
            for path in self.file_filter.walk(src_dir):
                # bench files are collected separately with their flag set
                if not path.resolve().is_relative_to(bench_dir):
                    sources.append(path)

        bench: list[Path] = []
        if self.bench_dir.is_dir():
            bench = list(self.file_filter.walk(self.bench_dir, recursive=False))
        else:
            logger.debug("No bench directory at %s", self.bench_dir)
        return sorted(set(sources)), bench

    def collect_sources(self) -> list[SourceFile]:
        """Read every candidate file of the workspace and its dependencies.

        Returns:
            SourceFile triples sorted by (library, path).

        Raises:
            WorkspaceError: A dependency is not fetched or a file is unreadable.
            MalformedSourceError: A file is not valid UTF-8 text.
        """
        collected: list[SourceFile] = []
        sources, bench = self.local_files()
        for path in sources:
            collected.append(self._read(path, WORK, is_bench=False))
        for path in bench:
            collected.append(self._read(path, WORK, is_bench=True))

        for name, paths in self.dependency_files().items():
            library = name.lower()
            logger.debug("Dependency %s provides %d files", name, len(paths))
            for path in paths:
                collected.append(self._read(path, library, is_bench=False))

        return sorted(collected, key=lambda s: (s.library, s.path))

    def _display_path(self, path: Path) -> str:
        # Workspace files are reported relative to the root, dependencies absolutely
        try:
            return path.relative_to(self.root_path).as_posix()
        except ValueError:
            return path.as_posix()

    def _read(self, path: Path, library: str, is_bench: bool) -> SourceFile:
        display = self._display_path(path)
        try:
            text = path.read_bytes().decode("utf-8")
        except UnicodeDecodeError as e:
            raise MalformedSourceError(display, f"not valid UTF-8 ({e.reason})") from e
        except OSError as e:
            raise WorkspaceError(f"Failed to read {display}: {e}") from e
        return SourceFile(path=display, library=library, text=text, is_bench=is_bench)
