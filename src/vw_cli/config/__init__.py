"""Configuration management - Settings and TOML parsing."""

from vw_cli.config.loader import ConfigLoader, load_config
from vw_cli.config.models import (
    DependencyConfig,
    SimulatorConfig,
    SourcesConfig,
    WorkspaceConfig,
    WorkspaceInfo,
)

__all__ = [
    "ConfigLoader",
    "DependencyConfig",
    "SimulatorConfig",
    "SourcesConfig",
    "WorkspaceConfig",
    "WorkspaceInfo",
    "load_config",
]
