"""Configuration loader with TOML parsing and priority system."""

import tomllib
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from vw_cli.config.models import WorkspaceConfig
from vw_cli.errors import WorkspaceError

CONFIG_FILENAME = "vw.toml"


class ConfigLoader:
    """Load and merge configuration from multiple sources."""

    def __init__(
        self,
        user_config_path: Path | None = None,
        project_config_path: Path | None = None,
    ) -> None:
        """Initialize ConfigLoader.

        Args:
            user_config_path: Path to user config (~/.config/vw/vw.toml)
            project_config_path: Path to project config (./vw.toml)
        """
        self.user_config_path = user_config_path or Path.home() / ".config" / "vw" / CONFIG_FILENAME
        self.project_config_path = project_config_path or Path(CONFIG_FILENAME)

    def load(self, overrides: dict[str, Any] | None = None) -> WorkspaceConfig:
        """Load configuration with priority: CLI > Project > User > Default.

        Args:
            overrides: structured dictionary of overrides (e.g. from CLI arguments)

        Returns:
            Merged WorkspaceConfig

        Raises:
            WorkspaceError: If a file is not valid TOML or fails validation.
        """
        config_dict: dict[str, Any] = {}

        # Load user config (lowest priority)
        if self.user_config_path.exists():
            config_dict = self._merge_dicts(config_dict, self._load_toml(self.user_config_path))

        # Load project config (higher priority)
        if self.project_config_path.exists():
            config_dict = self._merge_dicts(config_dict, self._load_toml(self.project_config_path))

        # Apply overrides (highest priority)
        if overrides:
            config_dict = self._merge_dicts(config_dict, overrides)

        try:
            return WorkspaceConfig(**config_dict)
        except ValidationError as e:
            raise WorkspaceError(f"Invalid configuration: {e}") from e

    def _load_toml(self, path: Path) -> dict[str, Any]:
        """Load TOML file.

        Args:
            path: Path to TOML file

        Returns:
            Parsed TOML data
        """
        try:
            with open(path, "rb") as f:
                return tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise WorkspaceError(f"Failed to parse {path}: {e}") from e

    def _merge_dicts(self, base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        """Recursively merge two dictionaries.

        Args:
            base: Base dictionary
            override: Override dictionary

        Returns:
            Merged dictionary
        """
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge_dicts(result[key], value)
            else:
                result[key] = value
        return result


def _resolve_cli_overrides(
    std: str | None = None,
    build_dir: str | None = None,
) -> dict[str, Any]:
    """Resolve CLI arguments into configuration overrides dictionary."""
    simulator: dict[str, Any] = {}
    if std is not None:
        simulator["std"] = std
    if build_dir is not None:
        simulator["build_dir"] = build_dir
    return {"simulator": simulator} if simulator else {}


def load_config(
    workspace_dir: Path,
    std: str | None = None,
    build_dir: str | None = None,
    user_config_path: Path | None = None,
) -> WorkspaceConfig:
    """Helper to load the configuration of a workspace with CLI overrides.

    Args:
        workspace_dir: Workspace root holding vw.toml.
        std: VHDL standard override
        build_dir: Build directory override
        user_config_path: Alternative user config location.

    Returns:
        Loaded WorkspaceConfig.

    Raises:
        WorkspaceError: If the workspace has no vw.toml.
    """
    project_config = workspace_dir / CONFIG_FILENAME
    if not project_config.exists():
        raise WorkspaceError(f"No {CONFIG_FILENAME} found in {workspace_dir} (run 'vw init')")

    loader = ConfigLoader(user_config_path=user_config_path, project_config_path=project_config)
    return loader.load(_resolve_cli_overrides(std, build_dir))
