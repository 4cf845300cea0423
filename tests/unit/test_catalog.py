"""Tests for the unit catalog."""

import pytest

from vw_cli.errors import DuplicateSourceError, DuplicateSymbolError
from vw_cli.static_analysis.catalog import Catalog
from vw_cli.static_analysis.vhdl import ENTITY, PACKAGE, SourceUnit, Symbol


def unit(path: str, library: str = "work", *symbols: Symbol, **kwargs) -> SourceUnit:
    return SourceUnit(path=path, library=library, declared_symbols=frozenset(symbols), **kwargs)


class TestCatalog:
    """Test Catalog indexing and lookups."""

    @pytest.fixture
    def catalog(self) -> Catalog:
        return Catalog(
            [
                unit("src/b.vhd", "work", Symbol(ENTITY, "fifo")),
                unit("src/a.vhd", "work", Symbol(PACKAGE, "fifo_pkg")),
                unit("/deps/q/fifo.vhd", "quartz", Symbol(ENTITY, "fifo")),
                unit(
                    "bench/fifo_tb.vhd",
                    "work",
                    Symbol(ENTITY, "fifo_tb"),
                    is_testbench_candidate=True,
                ),
                unit("src/fifo_body.vhd", "work", implemented_symbols=frozenset({Symbol(PACKAGE, "fifo_pkg")})),
            ]
        )

    def test_units_sorted_by_library_then_path(self, catalog: Catalog) -> None:
        assert [u.path for u in catalog.units] == [
            "/deps/q/fifo.vhd",
            "bench/fifo_tb.vhd",
            "src/a.vhd",
            "src/b.vhd",
            "src/fifo_body.vhd",
        ]
        assert len(catalog) == 5
        assert "src/a.vhd" in catalog

    def test_resolve_package_and_entity(self, catalog: Catalog) -> None:
        assert catalog.resolve_package("work", "fifo_pkg").path == "src/a.vhd"
        assert catalog.resolve_entity("quartz", "fifo").path == "/deps/q/fifo.vhd"
        assert catalog.resolve_entity("work", "fifo").path == "src/b.vhd"
        assert catalog.resolve_package("quartz", "fifo_pkg") is None

    def test_resolve_component_spans_libraries(self, catalog: Catalog) -> None:
        candidates = catalog.resolve_component("fifo")
        assert [(c.library, c.path) for c in candidates] == [
            ("quartz", "/deps/q/fifo.vhd"),
            ("work", "src/b.vhd"),
        ]
        assert catalog.resolve_component("missing") == ()

    def test_libraries(self, catalog: Catalog) -> None:
        libraries = catalog.libraries()
        assert list(libraries) == ["quartz", "work"]
        assert len(libraries["work"]) == 4
        assert [u.path for u in libraries["work"]][0] == "bench/fifo_tb.vhd"

    def test_duplicate_symbol_in_same_library(self) -> None:
        with pytest.raises(DuplicateSymbolError) as excinfo:
            Catalog(
                [
                    unit("src/one.vhd", "work", Symbol(PACKAGE, "util")),
                    unit("src/two.vhd", "work", Symbol(PACKAGE, "util")),
                ]
            )
        error = excinfo.value
        assert error.library == "work"
        assert error.name == "util"
        assert error.paths == ["src/one.vhd", "src/two.vhd"]

    def test_same_name_in_different_libraries_is_legal(self) -> None:
        catalog = Catalog(
            [
                unit("src/util.vhd", "work", Symbol(PACKAGE, "util")),
                unit("/deps/util.vhd", "quartz", Symbol(PACKAGE, "util")),
            ]
        )
        assert catalog.resolve_package("work", "util").path == "src/util.vhd"

    def test_entity_and_package_may_share_a_name(self) -> None:
        catalog = Catalog(
            [
                unit("src/uart.vhd", "work", Symbol(ENTITY, "uart")),
                unit("src/uart_pkg.vhd", "work", Symbol(PACKAGE, "uart")),
            ]
        )
        assert catalog.resolve_entity("work", "uart").path == "src/uart.vhd"

    def test_duplicate_path(self) -> None:
        with pytest.raises(DuplicateSourceError):
            Catalog([unit("src/a.vhd"), unit("src/a.vhd")])
