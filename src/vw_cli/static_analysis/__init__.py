"""Static Analysis Module."""

from vw_cli.static_analysis.catalog import Catalog
from vw_cli.static_analysis.dependency_graph import (
    AmbiguousReference,
    DependencyGraph,
    UnresolvedReference,
    build_graph,
)
from vw_cli.static_analysis.file_filter import FileFilter
from vw_cli.static_analysis.vhdl import SourceFile, SourceUnit, Symbol, VhdlAnalyzer

__all__ = [
    "AmbiguousReference",
    "Catalog",
    "DependencyGraph",
    "FileFilter",
    "SourceFile",
    "SourceUnit",
    "Symbol",
    "UnresolvedReference",
    "VhdlAnalyzer",
    "build_graph",
]
