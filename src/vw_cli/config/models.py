"""Configuration models using Pydantic."""

from typing import Literal

from pydantic import BaseModel, Field, field_validator


class WorkspaceInfo(BaseModel):
    """Workspace identity."""

    name: str = Field(default="workspace", description="Workspace name")
    version: str = Field(default="0.1.0", description="Workspace version")


class SourcesConfig(BaseModel):
    """Where workspace sources live and how testbenches are recognized."""

    src: list[str] = Field(
        default_factory=lambda: ["src"],
        description="Directories holding library 'work' sources (searched recursively)",
    )
    bench: str = Field(
        default="bench",
        description="Directory holding testbenches and shared bench code",
    )
    testbench_suffix: str = Field(
        default="_tb",
        description="Entity name suffix that marks a testbench",
    )
    exclude: list[str] = Field(
        default_factory=list,
        description="Gitignore-style patterns to skip, relative to the workspace",
    )
    ignored_libraries: list[str] = Field(
        default_factory=list,
        description="Vendor libraries provided by the simulator (ieee and std always are)",
    )


class DependencyConfig(BaseModel):
    """External dependency, already fetched to a local checkout."""

    repo: str = Field(description="Git repository URL")
    branch: str | None = Field(default=None, description="Branch name")
    commit: str | None = Field(default=None, description="Commit hash")
    src: str = Field(default=".", description="Source path within the repository")
    recursive: bool = Field(
        default=False,
        description="Recursively include VHDL files from subdirectories",
    )
    sim_only: bool = Field(
        default=False,
        description="Simulation-only dependency (excluded from deps.tcl)",
    )
    path: str | None = Field(
        default=None,
        description="Local checkout of the repository at the resolved commit",
    )


class SimulatorConfig(BaseModel):
    """NVC invocation settings."""

    command: str = Field(default="nvc", description="Simulator executable")
    std: Literal["2008", "2019"] = Field(default="2019", description="VHDL standard")
    heap: str = Field(default="256m", description="Simulator heap size (-M)")
    build_dir: str = Field(default="build", description="Directory for compiled libraries")
    runtime_flags: list[str] = Field(
        default_factory=list,
        description="Extra flags passed to the run step",
    )
    wave_format: Literal["fst", "vcd"] = Field(default="fst", description="Waveform format")
    check_synthesis: bool = Field(
        default=True,
        description="Pass --check-synthesis when analyzing the testbench's own library",
    )

    @field_validator("std", mode="before")
    @classmethod
    def _std_as_string(cls, value: object) -> object:
        # std = 2019 and std = "2019" are both accepted
        return str(value) if isinstance(value, int) else value


class WorkspaceConfig(BaseModel):
    """Main vw configuration (vw.toml)."""

    workspace: WorkspaceInfo = Field(default_factory=WorkspaceInfo)
    sources: SourcesConfig = Field(default_factory=SourcesConfig)
    dependencies: dict[str, DependencyConfig] = Field(default_factory=dict)
    simulator: SimulatorConfig = Field(default_factory=SimulatorConfig)
