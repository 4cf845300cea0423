"""Compile plan emitted for the simulator invocation layer."""

import re
from dataclasses import dataclass

from vw_cli.core.sorter import LibraryPartition
from vw_cli.static_analysis.vhdl import SourceUnit

_NON_IDENTIFIER_RE = re.compile(r"[^A-Za-z0-9_]")


@dataclass(frozen=True)
class LibraryBatch:
    """One simulator analysis call: a library and its files in order."""

    library: str
    files: tuple[str, ...]


@dataclass(frozen=True)
class TestbenchTarget:
    """The entity to elaborate and run after the last batch."""

    __test__ = False  # not a pytest class

    name: str
    path: str
    library: str


@dataclass(frozen=True)
class CompilePlan:
    """Ordered library batches plus the testbench to run."""

    batches: tuple[LibraryBatch, ...]
    testbench: TestbenchTarget

    @property
    def files(self) -> list[str]:
        return [f for batch in self.batches for f in batch.files]

    def to_dict(self) -> dict:
        return {
            "testbench": {
                "name": self.testbench.name,
                "path": self.testbench.path,
                "library": self.testbench.library,
            },
            "batches": [
                {"library": batch.library, "files": list(batch.files)} for batch in self.batches
            ],
        }


def simulator_library_name(library: str) -> str:
    """Make a library name acceptable as a simulator library identifier.

    >>> simulator_library_name("axi-stream")
    'axi_stream'
    """
    name = _NON_IDENTIFIER_RE.sub("_", library)
    if not name[:1].isalpha():
        name = f"lib_{name}"
    return name


def emit(partitions: list[LibraryPartition], root: SourceUnit) -> CompilePlan:
    """Translate ordered library partitions into the external plan shape."""
    batches = tuple(
        LibraryBatch(
            library=simulator_library_name(partition.library),
            files=tuple(unit.path for unit in partition.units),
        )
        for partition in partitions
    )
    testbench = TestbenchTarget(
        name=root.testbench_name or root.entities[0],
        path=root.path,
        library=simulator_library_name(root.library),
    )
    return CompilePlan(batches=batches, testbench=testbench)
