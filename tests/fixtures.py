"""Shared test fixtures and factories for vw tests."""

from pathlib import Path

import pytest

from vw_cli.static_analysis.vhdl import SourceFile


class VhdlFactory:
    """Factory for small, consistent VHDL design files."""

    @staticmethod
    def package(name: str, uses: list[str] | None = None, body: bool = False) -> str:
        """Create a package (and optionally its body) using ``uses`` (lib.pkg)."""
        lines = ["library ieee;", "use ieee.std_logic_1164.all;"]
        lines += [f"use {u}.all;" for u in uses or []]
        lines += [
            "",
            f"package {name} is",
            "  constant WIDTH : integer := 8;",
            f"end package {name};",
        ]
        if body:
            lines += [
                "",
                f"package body {name} is",
                f"end package body {name};",
            ]
        return "\n".join(lines) + "\n"

    @staticmethod
    def entity(
        name: str,
        uses: list[str] | None = None,
        components: list[str] | None = None,
        direct: list[str] | None = None,
    ) -> str:
        """Create an entity with one architecture.

        Args:
            name: Entity name.
            uses: Packages as "lib.pkg".
            components: Component names to declare and instantiate.
            direct: Entities to instantiate directly, as "lib.entity".
        """
        lines = ["library ieee;", "use ieee.std_logic_1164.all;"]
        lines += [f"use {u}.all;" for u in uses or []]
        lines += [
            "",
            f"entity {name} is",
            "  port (",
            "    clk : in std_logic",
            "  );",
            f"end entity {name};",
            "",
            f"architecture rtl of {name} is",
        ]
        for comp in components or []:
            lines += [
                f"  component {comp} is",
                "    port (clk : in std_logic);",
                "  end component;",
            ]
        lines.append("begin")
        for i, comp in enumerate(components or []):
            lines.append(f"  u_{comp}_{i}: {comp} port map (clk => clk);")
        for i, ent in enumerate(direct or []):
            lines.append(f"  u_direct_{i}: entity {ent}(rtl) port map (clk => clk);")
        lines.append("end architecture rtl;")
        return "\n".join(lines) + "\n"


def make_sources(specs: dict[str, tuple[str, str]], bench: set[str] | None = None) -> list[SourceFile]:
    """Build SourceFile triples from {path: (library, text)}."""
    bench = bench or set()
    return [
        SourceFile(path=path, library=library, text=text, is_bench=path in bench)
        for path, (library, text) in sorted(specs.items())
    ]


# Pytest fixtures using factories

@pytest.fixture
def widget_sources() -> list[SourceFile]:
    """Fixture: widget/counter workspace with two sibling testbenches."""
    v = VhdlFactory
    specs = {
        "src/widget_pkg.vhd": ("work", v.package("widget_pkg")),
        "src/widget.vhd": ("work", v.entity("widget", uses=["work.widget_pkg"])),
        "src/counter.vhd": ("work", v.entity("counter")),
        "bench/test_utils.vhd": ("work", v.package("test_utils")),
        "bench/widget_tb.vhd": (
            "work",
            v.entity("widget_tb", uses=["work.test_utils"], components=["widget"]),
        ),
        "bench/counter_tb.vhd": (
            "work",
            v.entity("counter_tb", uses=["work.test_utils"], direct=["work.counter"]),
        ),
    }
    return make_sources(
        specs, bench={"bench/test_utils.vhd", "bench/widget_tb.vhd", "bench/counter_tb.vhd"}
    )


@pytest.fixture
def tmp_workspace(tmp_path: Path) -> Path:
    """Fixture: on-disk workspace with vw.toml, sources, bench and one dependency.

    Returns:
        Workspace root path.
    """
    v = VhdlFactory
    dep_root = tmp_path / "deps" / "quartz"
    (dep_root / "hdl").mkdir(parents=True)
    (dep_root / "hdl" / "quartz_pkg.vhd").write_text(v.package("quartz_pkg"))

    root = tmp_path / "ws"
    (root / "src").mkdir(parents=True)
    (root / "bench").mkdir()
    (root / "src" / "blinky.vhd").write_text(v.entity("blinky", uses=["quartz.quartz_pkg"]))
    (root / "bench" / "blinky_tb.vhd").write_text(
        v.entity("blinky_tb", direct=["work.blinky"])
    )
    (root / "vw.toml").write_text(
        f"""
[workspace]
name = "blinky"

[dependencies.quartz]
repo = "https://github.com/example/quartz.git"
branch = "main"
src = "hdl"
path = "{dep_root.as_posix()}"
"""
    )
    return root
