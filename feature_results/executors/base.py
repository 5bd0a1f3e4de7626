"""Abstract base class for scenario executors."""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any

from feature_results.models.feature import Scenario
from feature_results.models.result import ScenarioResult


class ScenarioExecutor(ABC):
    """Runs a single scenario and reports its outcome.

    Implementations decide pass or fail for the scenario; the orchestrator only
    records what they return.
    """

    @abstractmethod
    async def execute(
        self,
        scenario: Scenario,
        call_arg: Mapping[str, Any] | None = None,
    ) -> ScenarioResult:
        """Execute a scenario, including the feature background if any.

        Args:
            scenario: Scenario to run, or one iteration of an outline
            call_arg: Argument passed when the feature is invoked as a call

        Returns:
            Outcome of the scenario with step results and duration

        """
