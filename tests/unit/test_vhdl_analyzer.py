"""Tests for VHDL symbol extraction."""

import pytest

from vw_cli.errors import MalformedSourceError
from vw_cli.static_analysis.vhdl import (
    CONTEXT,
    ENTITY,
    PACKAGE,
    SourceFile,
    Symbol,
    VhdlAnalyzer,
    normalize,
)


def analyze(text: str, library: str = "work", is_bench: bool = False, **kwargs):
    return VhdlAnalyzer(**kwargs).analyze(
        SourceFile(path="f.vhd", library=library, text=text, is_bench=is_bench)
    )


class TestNormalize:
    """Comment and literal stripping."""

    def test_strips_line_comments_and_lowercases(self) -> None:
        assert normalize("ENTITY Foo IS -- entity bar is\n") == "entity foo is  \n"

    def test_comment_marker_inside_string_is_not_a_comment(self) -> None:
        text = normalize('constant S : string := "a--b"; use work.p.all;')
        assert "use work.p.all;" in text

    def test_block_comments_removed(self) -> None:
        text = normalize("/* entity hidden is */ entity shown is")
        assert "hidden" not in text
        assert "entity shown is" in text

    def test_unterminated_block_comment_is_malformed(self) -> None:
        with pytest.raises(MalformedSourceError, match="unterminated block comment"):
            normalize("entity a is /* never closed", "a.vhd")

    def test_binary_content_is_malformed(self) -> None:
        with pytest.raises(MalformedSourceError) as excinfo:
            normalize("entity a is\x00\x01", "a.vhd")
        assert excinfo.value.path == "a.vhd"


class TestDeclarations:
    """Declared design units."""

    def test_entity_declaration(self) -> None:
        unit = analyze("entity Adder is\nend entity Adder;\n")
        assert unit.declared_symbols == {Symbol(ENTITY, "adder")}

    def test_package_declaration_and_body(self) -> None:
        unit = analyze(
            "package util_pkg is\nend package;\n"
            "package body util_pkg is\nend package body;\n"
        )
        # only the declaration registers a symbol
        assert unit.declared_symbols == {Symbol(PACKAGE, "util_pkg")}
        assert unit.implemented_symbols == frozenset()

    def test_package_body_alone_implements_package(self) -> None:
        unit = analyze("package body util_pkg is\nend package body util_pkg;\n")
        assert unit.declared_symbols == frozenset()
        assert unit.implemented_symbols == {Symbol(PACKAGE, "util_pkg")}

    def test_architecture_alone_implements_entity(self) -> None:
        unit = analyze("architecture rtl of alu is\nbegin\nend architecture;\n")
        assert unit.implemented_symbols == {Symbol(ENTITY, "alu")}

    def test_package_instantiation(self) -> None:
        unit = analyze(
            "package fifo_8 is new work.generic_fifo_pkg generic map (WIDTH => 8);\n"
        )
        assert Symbol(PACKAGE, "fifo_8") in unit.declared_symbols
        assert ("work", "generic_fifo_pkg") in unit.used_packages

    def test_context_declaration_and_reference(self) -> None:
        unit = analyze(
            "context project_ctx is\n  library ieee;\nend context;\n"
            "context osvvm.osvvmcontext;\n"
        )
        assert Symbol(CONTEXT, "project_ctx") in unit.declared_symbols
        assert unit.used_contexts == {("osvvm", "osvvmcontext")}

    def test_commented_out_entity_ignored(self) -> None:
        unit = analyze("-- entity ghost is\nentity real is end;\n")
        assert unit.entities == ["real"]


class TestUseClauses:
    """Library and use clauses."""

    def test_standard_libraries_skipped(self) -> None:
        unit = analyze(
            "library ieee;\nuse ieee.std_logic_1164.all;\nuse std.textio.all;\n"
            "use work.my_pkg.all;\n"
        )
        assert unit.used_packages == {("work", "my_pkg")}

    def test_work_means_own_library(self) -> None:
        unit = analyze("use work.bus_pkg.all;\n", library="quartz")
        assert unit.used_packages == {("quartz", "bus_pkg")}

    def test_external_library_kept(self) -> None:
        unit = analyze("library quartz;\nuse quartz.clk_pkg.all;\n")
        assert unit.used_packages == {("quartz", "clk_pkg")}

    def test_item_use_and_multiple_items(self) -> None:
        unit = analyze("use work.a_pkg.some_func, work.b_pkg.all;\n")
        assert unit.used_packages == {("work", "a_pkg"), ("work", "b_pkg")}

    def test_case_insensitive(self) -> None:
        unit = analyze("USE Work.My_Pkg.ALL;\nUse WORK.Other_Pkg.Some_Func;\n")
        assert unit.used_packages == {("work", "my_pkg"), ("work", "other_pkg")}

    def test_use_of_whole_library_names_no_package(self) -> None:
        unit = analyze("library quartz;\nuse work.all;\nuse quartz.all;\nuse work.bus_pkg.all;\n")
        assert unit.used_packages == {("work", "bus_pkg")}

    def test_configured_vendor_library_ignored(self) -> None:
        unit = analyze("library unisim;\nuse unisim.vcomponents.all;\n", ignored_libraries={"UNISIM"})
        assert unit.used_packages == frozenset()


class TestInstantiations:
    """Direct entity and component instantiations."""

    def test_direct_entity_instantiation(self) -> None:
        unit = analyze(
            "architecture rtl of top is\nbegin\n"
            "  u_alu: entity work.alu(rtl)\n    port map (a => a);\n"
            "  u_ext : entity quartz.pll port map (clk => clk);\n"
            "end architecture;\n"
        )
        assert unit.direct_instantiations == {("work", "alu"), ("quartz", "pll")}
        assert unit.component_instantiations == frozenset()

    def test_binding_indication_is_direct_reference(self) -> None:
        unit = analyze("for all : fifo use entity work.fifo_impl(rtl);\n")
        assert ("work", "fifo_impl") in unit.direct_instantiations

    def test_component_declared_and_instantiated(self) -> None:
        unit = analyze(
            "architecture tb of top_tb is\n"
            "  component widget is\n    port (clk : in std_logic);\n  end component widget;\n"
            "begin\n"
            "  dut : widget\n    port map (clk => clk);\n"
            "end architecture;\n"
        )
        assert unit.component_declarations == {"widget"}
        assert unit.component_instantiations == {"widget"}

    def test_component_keyword_instantiation(self) -> None:
        unit = analyze("u1 : component fifo generic map (DEPTH => 4) port map (d => d);\n")
        assert unit.component_instantiations == {"fifo"}
        assert unit.component_declarations == frozenset()

    def test_instantiation_of_component_from_package(self) -> None:
        unit = analyze("use work.comps_pkg.all;\nbegin\n  u1: uart generic map (BAUD => 9600) port map (tx => tx);\n")
        assert unit.component_instantiations == frozenset()
        assert unit.inferred_instantiations == {"uart"}

    def test_vendor_primitive_is_only_inferred(self) -> None:
        unit = analyze(
            "library unisim;\nuse unisim.vcomponents.all;\n"
            "architecture tb of io_tb is\nbegin\n  u : ibuf port map (i => pad, o => sig);\nend;\n",
            ignored_libraries={"unisim"},
        )
        assert unit.used_packages == frozenset()
        assert unit.component_instantiations == frozenset()
        assert unit.inferred_instantiations == {"ibuf"}

    def test_declared_component_is_not_inferred(self) -> None:
        unit = analyze(
            "architecture tb of top_tb is\n  component widget port (clk : in bit); end component;\n"
            "begin\n  a : widget port map (clk => clk);\n  b : component fifo port map (d => d);\nend;\n"
        )
        assert unit.component_instantiations == {"widget", "fifo"}
        assert unit.inferred_instantiations == frozenset()

    def test_declarations_are_not_instantiations(self) -> None:
        unit = analyze(
            "entity e is\n  generic (N : integer := 4);\n  port (clk : in std_logic; q : out std_logic);\nend;\n"
            "architecture a of e is\n  signal s : std_logic;\n  constant C : natural := 1;\n"
            "begin\n  p_main : process (clk) begin end process;\nend;\n"
        )
        assert unit.component_instantiations == frozenset()
        assert unit.inferred_instantiations == frozenset()
        assert unit.direct_instantiations == frozenset()


class TestTestbenchCandidacy:
    """Bench flag plus naming convention."""

    TB = "entity counter_tb is\nend entity;\n"

    def test_bench_file_with_tb_entity(self) -> None:
        unit = analyze(self.TB, is_bench=True)
        assert unit.is_testbench_candidate
        assert unit.testbench_name == "counter_tb"

    def test_not_in_bench(self) -> None:
        unit = analyze(self.TB, is_bench=False)
        assert not unit.is_testbench_candidate
        assert unit.testbench_name is None

    def test_shared_bench_package_is_not_candidate(self) -> None:
        unit = analyze("package test_utils is\nend package;\n", is_bench=True)
        assert not unit.is_testbench_candidate

    def test_two_entities_is_not_candidate(self) -> None:
        unit = analyze(self.TB + "entity helper_tb is\nend entity;\n", is_bench=True)
        assert not unit.is_testbench_candidate

    def test_custom_suffix(self) -> None:
        unit = analyze("entity tb_counter is end;\n", is_bench=True, testbench_suffix="")
        assert unit.is_testbench_candidate
        unit = analyze(self.TB, is_bench=True, testbench_suffix="_test")
        assert not unit.is_testbench_candidate
