import logging
import shutil
import subprocess
from pathlib import Path

from vw_cli.backends.base import (
    ANALYSIS,
    SIMULATION,
    SimulatorAdapter,
    SimulatorStep,
)
from vw_cli.config.models import SimulatorConfig
from vw_cli.core.plan import CompilePlan
from vw_cli.errors import SimulationError, VwError

logger = logging.getLogger(__name__)


class NvcAdapter(SimulatorAdapter):
    """Adapter for the NVC VHDL simulator."""

    def __init__(self, config: SimulatorConfig | None = None, cwd: Path | None = None) -> None:
        """Initialize NvcAdapter.

        Args:
            config: Simulator settings (defaults if omitted).
            cwd: Directory the plan's relative paths are relative to.
        """
        self.config = config or SimulatorConfig()
        self.cwd = cwd or Path.cwd()

    def health_check(self) -> bool:
        """Check if nvc is available."""
        return shutil.which(self.config.command) is not None

    def base_args(self, library: str) -> list[str]:
        build_dir = self.config.build_dir
        return [
            self.config.command,
            f"--std={self.config.std}",
            f"--work={build_dir}/{library}",
            "-M",
            self.config.heap,
            "-L",
            build_dir,
        ]

    def steps(self, plan: CompilePlan) -> list[SimulatorStep]:
        testbench = plan.testbench
        batches = list(plan.batches)
        # The testbench's own batch is analyzed, elaborated and run in one call
        final = batches.pop() if batches and batches[-1].library == testbench.library else None

        steps = [
            SimulatorStep(ANALYSIS, self.base_args(batch.library) + ["-a", *batch.files], batch.library)
            for batch in batches
        ]

        command = self.base_args(testbench.library)
        if final is not None:
            command += ["-a"]
            if self.config.check_synthesis:
                command.append("--check-synthesis")
            command += final.files
        fmt = self.config.wave_format
        command += ["-e", testbench.name, "-r", testbench.name, *self.config.runtime_flags]
        command += ["--dump-arrays", f"--format={fmt}", f"--wave={testbench.name}.{fmt}"]
        steps.append(SimulatorStep(SIMULATION, command, testbench.library))
        return steps

    def execute(self, plan: CompilePlan) -> list[SimulatorStep]:
        if not self.health_check():
            raise VwError(f"Simulator '{self.config.command}' not found on PATH")
        (self.cwd / self.config.build_dir).mkdir(parents=True, exist_ok=True)
        return super().execute(plan)

    def run_step(self, step: SimulatorStep) -> None:
        logger.debug("Running: %s", step)
        try:
            result = subprocess.run(step.command, cwd=self.cwd, check=False)
        except OSError as e:
            raise VwError(f"Failed to execute {self.config.command}: {e}") from e

        if result.returncode != 0:
            library = step.library if step.stage == ANALYSIS else None
            raise SimulationError(step.stage, step.command, library)
