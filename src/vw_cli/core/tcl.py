"""deps.tcl export for synthesis flows."""

from pathlib import Path

from vw_cli.core.workspace import Workspace

DEPS_TCL_FILENAME = "deps.tcl"


def render_deps_tcl(dependency_files: dict[str, list[Path]]) -> str:
    """Render a TCL associative array: library name -> list of VHDL files.

    Args:
        dependency_files: Files per dependency name.

    Returns:
        The TCL script text.
    """
    lines = [
        "# Auto-generated by vw",
        "# Associative array of dependency VHDL files",
        "# Keys: library names, Values: lists of VHDL files",
        "",
    ]
    for name in sorted(dependency_files):
        files = dependency_files[name]
        if not files:
            lines.append(f"set dep_files({name}) [list]")
        else:
            lines.append(f"set dep_files({name}) [list \\")
            for i, path in enumerate(files):
                suffix = " \\" if i < len(files) - 1 else ""
                lines.append(f"    {path.as_posix()}{suffix}")
            lines.append("]")
        lines.append("")
    return "\n".join(lines)


def write_deps_tcl(workspace: Workspace) -> Path:
    """Write deps.tcl for every dependency that is not simulation-only.

    Returns:
        Path of the written file.
    """
    content = render_deps_tcl(workspace.dependency_files(include_sim_only=False))
    tcl_path = workspace.root_path / DEPS_TCL_FILENAME
    tcl_path.write_text(content, encoding="utf-8")
    return tcl_path
