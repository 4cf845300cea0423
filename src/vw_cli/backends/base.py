"""Base classes for simulator adapters."""
from abc import ABC, abstractmethod
from dataclasses import dataclass

from vw_cli.core.plan import CompilePlan

ANALYSIS = "analysis"
SIMULATION = "simulation"


@dataclass(frozen=True)
class SimulatorStep:
    """One simulator process call."""

    stage: str
    command: list[str]
    library: str | None = None

    def __str__(self) -> str:
        return " ".join(self.command)


class SimulatorAdapter(ABC):
    """Abstract base class for simulators consuming a compile plan."""

    @abstractmethod
    def health_check(self) -> bool:
        """Check if the simulator is installed.

        Returns:
            True if available, False otherwise.
        """
        pass

    @abstractmethod
    def steps(self, plan: CompilePlan) -> list[SimulatorStep]:
        """Translate a compile plan into process calls.

        One analysis call per library batch; the batch holding the testbench
        is analyzed, elaborated and run by a single final call.

        Args:
            plan: Ordered library batches plus the testbench.

        Returns:
            Steps in execution order.
        """
        pass

    @abstractmethod
    def run_step(self, step: SimulatorStep) -> None:
        """Execute one step.

        Raises:
            SimulationError: The simulator reported a failure.
        """
        pass

    def execute(self, plan: CompilePlan) -> list[SimulatorStep]:
        """Run every step of a plan, stopping at the first failure.

        Returns:
            The executed steps.
        """
        steps = self.steps(plan)
        for step in steps:
            self.run_step(step)
        return steps
