"""Models for scenario and step execution outcomes."""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Literal

from feature_results.errors import error_message
from feature_results.models.feature import (
    Background,
    Scenario,
    Step,
    tags_to_result_list,
)
from feature_results.paths import to_id_string

StepStatus = Literal["passed", "failed", "skipped"]


@dataclass(frozen=True, kw_only=True)
class StepResult:
    """Outcome of a single executed step."""

    step: Step
    status: StepStatus
    duration_nanos: int = 0
    error: BaseException | None = None
    background: bool = False

    def to_map(self) -> dict[str, Any]:
        """Render the step as a report entry."""
        result: dict[str, Any] = {
            "status": self.status,
            "duration": self.duration_nanos,
        }
        if self.error is not None:
            result["error_message"] = error_message(self.error)

        entry: dict[str, Any] = {
            "line": self.step.line,
            "keyword": self.step.keyword,
            "name": self.step.text,
            "result": result,
        }
        if self.step.doc_string is not None:
            entry["doc_string"] = {
                "content_type": "",
                "line": self.step.line + 1,
                "value": self.step.doc_string,
            }
        return entry


@dataclass(frozen=True, kw_only=True)
class ScenarioResult:
    """Outcome of one executed scenario, produced by a scenario executor.

    ``step_results`` holds background steps first, flagged with
    ``background=True``, followed by the scenario's own steps.
    """

    scenario: Scenario
    step_results: Sequence[StepResult] = field(default_factory=tuple)
    duration_nanos: int = 0
    error: BaseException | None = None
    result_vars: Mapping[str, Any] | None = None

    @property
    def failed(self) -> bool:
        return self.error is not None

    def to_map(self) -> dict[str, Any]:
        """Render the scenario and its own steps as a report entry."""
        scenario = self.scenario
        entry: dict[str, Any] = {
            "name": scenario.name,
            "steps": [sr.to_map() for sr in self.step_results if not sr.background],
            "line": scenario.line,
            "id": to_id_string(scenario.name),
            "description": scenario.description or "",
            "type": scenario.TYPE,
            "keyword": scenario.keyword,
        }
        if scenario.tags is not None:
            entry["tags"] = tags_to_result_list(scenario.tags)
        return entry

    def background_to_map(self) -> dict[str, Any]:
        """Render the background steps run for this scenario as a report entry."""
        background = self.scenario.feature.background
        return {
            "name": "",
            "steps": [sr.to_map() for sr in self.step_results if sr.background],
            "line": background.line if background is not None else 0,
            "description": "",
            "type": "background",
            "keyword": Background.KEYWORD,
        }
