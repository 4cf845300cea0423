"""File filtering logic using pathspec."""
from pathlib import Path
from typing import Generator

import pathspec

VHDL_EXTENSIONS = (".vhd", ".vhdl")


class FileFilter:
    """Select VHDL files, skipping default and user-configured excludes."""

    DEFAULT_EXCLUDES = [
        ".git/",
        "__pycache__/",
        ".venv/",
        "*.swp",
        "*~",
    ]

    def __init__(self, root_path: Path, exclude: list[str] | None = None) -> None:
        """Initialize FileFilter.

        Args:
            root_path: Root directory patterns are relative to.
            exclude: Gitignore-style patterns to skip.
        """
        self.root_path = root_path
        self.default_spec = pathspec.GitIgnoreSpec.from_lines(self.DEFAULT_EXCLUDES)
        self.exclude_spec = pathspec.GitIgnoreSpec.from_lines(exclude or [])

    def should_ignore(self, file_path: Path) -> bool:
        """Check if a file should be ignored.

        Args:
            file_path: Path to the file (absolute or relative to root).

        Returns:
            True if file should be ignored, False otherwise.
        """
        if file_path.is_absolute():
            try:
                rel_path = file_path.relative_to(self.root_path)
            except ValueError:
                # Outside the root (e.g. a dependency checkout): only defaults apply
                return self.default_spec.match_file(file_path.as_posix().lstrip("/"))
        else:
            rel_path = file_path

        rel_str = rel_path.as_posix()
        return self.exclude_spec.match_file(rel_str) or self.default_spec.match_file(rel_str)

    def walk(self, directory: Path, recursive: bool = True) -> Generator[Path, None, None]:
        """Walk a directory and yield VHDL files in sorted order.

        Args:
            directory: Directory to scan.
            recursive: Descend into subdirectories.

        Yields:
            Path objects for valid files.
        """
        candidates = directory.rglob("*") if recursive else directory.glob("*")
        for path in sorted(candidates):
            if path.is_file() and path.suffix.lower() in VHDL_EXTENSIONS:
                if not self.should_ignore(path):
                    yield path
