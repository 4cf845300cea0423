"""vw CLI - Main entry point."""

import json
import logging
from enum import Enum
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from vw_cli.backends.nvc import NvcAdapter
from vw_cli.config.loader import CONFIG_FILENAME, load_config
from vw_cli.core.resolver import Resolver
from vw_cli.core.tcl import write_deps_tcl
from vw_cli.core.workspace import Workspace
from vw_cli.errors import VwError

TEMPLATE_ROOT = Path(__file__).resolve().parents[1] / "template" / "defaults"
DEFAULT_CONFIG_PATH = TEMPLATE_ROOT / "vw.toml"

logger = logging.getLogger(__name__)


class VhdlStandard(str, Enum):
    VHDL2008 = "2008"
    VHDL2019 = "2019"


def _load_default_config() -> str:
    try:
        return DEFAULT_CONFIG_PATH.read_text(encoding="utf-8")
    except OSError as exc:
        raise RuntimeError(f"Unable to read default config at {DEFAULT_CONFIG_PATH}") from exc


app = typer.Typer(
    name="vw",
    help="A VHDL workspace management tool",
    add_completion=False,
)

console = Console()


def _fail(error: Exception) -> None:
    console.print(f"[bold red]error:[/bold red] {escape(str(error))}")
    raise typer.Exit(code=1)


def _open_workspace(
    workspace: str, std: str | None = None, build_dir: str | None = None
) -> Workspace:
    root = Path(workspace).resolve()
    config = load_config(root, std=std, build_dir=build_dir)
    return Workspace(root, config)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """A VHDL workspace management tool."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@app.command()
def init(
    name: str = typer.Argument(..., help="Workspace name"),
    workspace: str = typer.Option(".", "--workspace", "-w", help="Workspace directory"),
    overwrite: bool = typer.Option(
        False, "--overwrite", "-f", help="Overwrite an existing vw.toml"
    ),
) -> None:
    """Initialize a new workspace."""
    root = Path(workspace).resolve()
    config_path = root / CONFIG_FILENAME

    if config_path.exists() and not overwrite:
        console.print(f"[yellow]{CONFIG_FILENAME} already exists in {root}[/yellow]")
        console.print("[dim]Use --overwrite to re-initialize.[/dim]")
        raise typer.Exit(code=1)

    try:
        root.mkdir(parents=True, exist_ok=True)
        content = _load_default_config().replace(
            'name = "workspace"', f"name = {json.dumps(name)}", 1
        )
        config_path.write_text(content, encoding="utf-8")
    except (OSError, RuntimeError) as e:
        console.print(f"[bold red]Failed to initialize:[/bold red] {escape(str(e))}")
        raise typer.Exit(code=1)

    console.print(f"[green]✓[/green] Initialized workspace: [cyan]{escape(name)}[/cyan]")


@app.command("list")
def list_dependencies(
    workspace: str = typer.Option(".", "--workspace", "-w", help="Workspace directory"),
) -> None:
    """List workspace dependencies."""
    try:
        ws = _open_workspace(workspace)
    except VwError as e:
        _fail(e)

    dependencies = ws.config.dependencies
    if not dependencies:
        console.print("No dependencies found in workspace")
        return

    console.print("Dependencies:")
    for name, dep in sorted(dependencies.items()):
        if dep.commit:
            version_info = f" ({dep.commit[:8]})"
        elif dep.branch:
            version_info = f" (branch: {dep.branch})"
        else:
            version_info = ""
        sim_only = " [sim only]" if dep.sim_only else ""
        console.print(
            f"  [cyan]{escape(name)}[/cyan] - {escape(dep.repo)}"
            f"[bright_black]{escape(version_info + sim_only)}[/bright_black]"
        )


@app.command()
def test(
    testbench: str | None = typer.Argument(None, help="Name of the testbench entity to run"),
    std: VhdlStandard | None = typer.Option(None, "--std", help="VHDL standard"),
    list_testbenches: bool = typer.Option(False, "--list", help="List all available testbenches"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Print simulator commands without running them"),
    build_dir: str | None = typer.Option(None, "--build-dir", help="Directory for compiled libraries"),
    jobs: int = typer.Option(1, "--jobs", "-j", min=1, help="Parallel parser threads"),
    workspace: str = typer.Option(".", "--workspace", "-w", help="Workspace directory"),
) -> None:
    """Run a testbench using NVC."""
    if not list_testbenches and testbench is None:
        console.print("[bold red]error:[/bold red] Must specify testbench name or use --list")
        raise typer.Exit(code=1)

    try:
        ws = _open_workspace(workspace, std.value if std else None, build_dir)
        resolver = Resolver(ws.analyzer(), jobs=jobs)
        sources = ws.collect_sources()

        if list_testbenches:
            candidates = resolver.list_testbenches(sources)
            if not candidates:
                console.print("No testbenches found in bench directory")
                return
            console.print("Available testbenches:")
            for unit in candidates:
                console.print(
                    f"  [cyan]{unit.testbench_name}[/cyan] - [bright_black]{escape(unit.path)}[/bright_black]"
                )
            return

        plan = resolver.resolve(sources, testbench)
        adapter = NvcAdapter(ws.config.simulator, cwd=ws.root_path)

        if dry_run:
            for step in adapter.steps(plan):
                console.print(escape(str(step)), soft_wrap=True)
            return

        console.print(f"Running testbench: [cyan]{escape(plan.testbench.name)}[/cyan]")
        adapter.execute(plan)
    except VwError as e:
        _fail(e)

    wave = f"{plan.testbench.name}.{ws.config.simulator.wave_format}"
    console.print(f"[green]✓[/green] Testbench '{escape(plan.testbench.name)}' completed successfully!")
    console.print(f"Waveform saved to: [cyan]{escape(wave)}[/cyan]")


@app.command()
def plan(
    testbench: str = typer.Argument(..., help="Name of the testbench entity"),
    as_json: bool = typer.Option(False, "--json", help="Print the plan as JSON"),
    jobs: int = typer.Option(1, "--jobs", "-j", min=1, help="Parallel parser threads"),
    workspace: str = typer.Option(".", "--workspace", "-w", help="Workspace directory"),
) -> None:
    """Show the compile order for a testbench without running it."""
    try:
        ws = _open_workspace(workspace)
        resolver = Resolver(ws.analyzer(), jobs=jobs)
        compile_plan = resolver.resolve(ws.collect_sources(), testbench)
    except VwError as e:
        _fail(e)

    if as_json:
        console.print_json(json.dumps(compile_plan.to_dict()))
        return

    table = Table(title=f"Compile plan for {compile_plan.testbench.name}")
    table.add_column("#", justify="right")
    table.add_column("Library", style="cyan")
    table.add_column("File")
    index = 1
    for batch in compile_plan.batches:
        for path in batch.files:
            table.add_row(str(index), batch.library, path)
            index += 1
    console.print(table)


@app.command("deps-to-tcl")
def deps_to_tcl(
    workspace: str = typer.Option(".", "--workspace", "-w", help="Workspace directory"),
) -> None:
    """Generate deps.tcl file with all dependency VHDL files."""
    try:
        ws = _open_workspace(workspace)
        tcl_path = write_deps_tcl(ws)
    except (VwError, OSError) as e:
        _fail(e)

    logger.debug("Wrote %s", tcl_path)
    console.print("[green]✓[/green] Generated deps.tcl with dependency VHDL files")


@app.command()
def version() -> None:
    """Show version information."""
    from vw_cli import __version__

    console.print(f"vw version: [bold]{__version__}[/bold]")


if __name__ == "__main__":
    app()
