"""Aggregation of scenario outcomes into a feature-level result."""

import logging
import threading
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from feature_results.errors import FeatureError, error_message, wrap_outline_error
from feature_results.json_utils import (
    remove_cyclic_references,
    to_pretty_json,
    to_primitive,
)
from feature_results.models.feature import Feature, tags_to_result_list
from feature_results.models.report import FeatureReport
from feature_results.models.result import ScenarioResult, StepResult
from feature_results.paths import nanos_to_millis, remove_prefix, to_id_string

log = logging.getLogger(__name__)

SEPARATOR = "-" * 57


@dataclass(kw_only=True, eq=False)
class FeatureResult:
    """Outcome of all scenarios run for one feature.

    Results are accumulated through ``add_result``, which may be called
    concurrently when scenarios run in parallel. Counters, duration and
    errors only ever grow.
    """

    feature: Feature
    call_arg: Mapping[str, Any] | None = None
    loop_index: int = -1
    result_vars: Mapping[str, Any] | None = None

    display_name: str = field(init=False)
    _scenario_results: list[ScenarioResult] = field(init=False, default_factory=list)
    _errors: list[BaseException] = field(init=False, default_factory=list)
    _scenario_count: int = field(init=False, default=0)
    _failed_count: int = field(init=False, default=0)
    _duration_millis: float = field(init=False, default=0.0)
    _lock: threading.Lock = field(
        init=False, repr=False, default_factory=threading.Lock
    )

    def __post_init__(self) -> None:
        self.display_name = remove_prefix(self.feature.relative_path) or ""

    def add_result(self, result: ScenarioResult) -> None:
        """Record a scenario outcome, wrapping outline failures with their context."""
        error = result.error
        if error is not None and result.scenario.is_outline:
            error = wrap_outline_error(result.scenario, error)

        with self._lock:
            self._scenario_results.append(result)
            self._duration_millis += nanos_to_millis(result.duration_nanos)
            self._scenario_count += 1
            if error is not None:
                self._failed_count += 1
                self._errors.append(error)

        if error is not None:
            log.debug("Scenario failed: %s %s", self.display_name, error)
        else:
            log.debug("Scenario passed: %s %s", self.display_name, result.scenario.name)

    @property
    def scenario_results(self) -> Sequence[ScenarioResult]:
        with self._lock:
            return tuple(self._scenario_results)

    @property
    def errors(self) -> Sequence[BaseException]:
        with self._lock:
            return tuple(self._errors)

    @property
    def scenario_count(self) -> int:
        return self._scenario_count

    @property
    def failed_count(self) -> int:
        return self._failed_count

    @property
    def duration_millis(self) -> float:
        return self._duration_millis

    @property
    def is_failed(self) -> bool:
        return bool(self._errors)

    @property
    def package_qualified_name(self) -> str:
        return self.feature.package_qualified_name

    @property
    def call_name(self) -> str:
        """Display name, prefixed with ``[n]`` when run as part of a call loop."""
        if self.loop_index == -1:
            return self.display_name
        return f"[{self.loop_index}] {self.display_name}"

    @property
    def call_arg_pretty(self) -> str | None:
        if self.call_arg is None:
            return None
        return to_pretty_json(remove_cyclic_references(self.call_arg))

    @property
    def result_as_primitive_map(self) -> dict[str, Any]:
        """Final variables of a called feature, reduced to JSON primitives."""
        if self.result_vars is None:
            return {}
        return to_primitive(remove_cyclic_references(self.result_vars))

    @property
    def step_results(self) -> Sequence[StepResult]:
        """All step outcomes, in scenario order then step order."""
        return [sr for result in self.scenario_results for sr in result.step_results]

    def combined_error(self) -> FeatureError | None:
        """Collapse recorded failures into one exception for the caller to raise.

        A single ``FeatureError`` is returned as is; any other single error is
        wrapped as ``call failed``. Several errors are joined line by line.
        """
        errors = self.errors
        if not errors:
            return None
        if len(errors) == 1:
            error = errors[0]
            if isinstance(error, FeatureError):
                return error
            return FeatureError("call failed", cause=error)
        return FeatureError(self.error_messages())

    def error_messages(self) -> str:
        return "\n".join(error_message(error) for error in self.errors)

    def to_report(self) -> FeatureReport:
        """Build the report record for this feature."""
        elements: list[dict[str, Any]] = []
        for result in self.scenario_results:
            if result.scenario.feature.background_present:
                elements.append(result.background_to_map())
            elements.append(result.to_map())

        feature = self.feature
        description = feature.name or ""
        if feature.description is not None:
            description = f"{description}\n{feature.description}"

        tags = None
        if feature.tags is not None:
            tags = tags_to_result_list(feature.tags)

        return FeatureReport(
            elements=elements,
            keyword=Feature.KEYWORD,
            line=feature.line,
            uri=self.display_name,
            name=self.display_name,
            id=to_id_string(feature.name),
            description=description.strip(),
            tags=tags,
        )

    def to_map(self) -> dict[str, Any]:
        return self.to_report().to_map()

    def print_stats(self, report_path: str | None = None) -> None:
        """Print a summary block for this feature to stdout."""
        with self._lock:
            scenario_count = self._scenario_count
            failed_count = self._failed_count
            duration_millis = self._duration_millis

        lines = [SEPARATOR, f"feature: {self.feature.relative_path}"]
        if report_path is not None:
            lines.append(f"report: {report_path}")
        lines.append(
            "scenarios: %2d | passed: %2d | failed: %2d | time: %.4f"
            % (
                scenario_count,
                scenario_count - failed_count,
                failed_count,
                duration_millis / 1000,
            )
        )
        lines.append(SEPARATOR)
        print("\n".join(lines))
