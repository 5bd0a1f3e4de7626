"""Tests for the feature orchestrator."""

import asyncio
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any
from unittest.mock import Mock

import pytest

from feature_results.config import OrchestratorConfig
from feature_results.errors import ScenarioOutlineError
from feature_results.executors.base import ScenarioExecutor
from feature_results.models.feature import Feature, Scenario, ScenarioDefinition
from feature_results.models.result import ScenarioResult
from feature_results.orchestrator import FeatureOrchestrator


@dataclass(kw_only=True)
class RecordingExecutor(ScenarioExecutor):
    """Executor that passes every scenario and tracks peak concurrency."""

    delay: float = 0.01
    running: int = 0
    peak: int = 0
    calls: list[tuple[str, Mapping[str, Any] | None]] = field(default_factory=list)

    async def execute(
        self,
        scenario: Scenario,
        call_arg: Mapping[str, Any] | None = None,
    ) -> ScenarioResult:
        """Record the call and return a passed result."""
        self.running += 1
        self.peak = max(self.peak, self.running)
        self.calls.append((scenario.name, call_arg))
        await asyncio.sleep(self.delay)
        self.running -= 1
        return ScenarioResult(
            scenario=scenario,
            duration_nanos=1_000_000,
            result_vars={"last": scenario.name},
        )


def make_feature(path: str, *names: str) -> Feature:
    """Build a feature with one plain scenario per name."""
    return Feature(
        name=path,
        relative_path=path,
        sections=[
            ScenarioDefinition(name=name, line=index + 2)
            for index, name in enumerate(names)
        ],
    )


@pytest.fixture
def executor_mock() -> Mock:
    """Create mock executor."""
    return Mock(spec=ScenarioExecutor)


async def test_runs_every_scenario(executor_mock: Mock) -> None:
    """Executes each scenario and records its outcome."""
    feature = make_feature("a.feature", "one", "two")
    executor_mock.execute.side_effect = lambda scenario, call_arg: ScenarioResult(
        scenario=scenario, duration_nanos=2_000_000
    )
    orchestrator = FeatureOrchestrator(executor=executor_mock)

    result = await orchestrator.run_feature(feature)

    assert result.scenario_count == 2
    assert result.duration_millis == pytest.approx(4.0)
    assert not result.is_failed
    assert executor_mock.execute.call_count == 2


async def test_records_executor_exception_as_failure(
    executor_mock: Mock, caplog: pytest.LogCaptureFixture
) -> None:
    """Turns an exception raised by the executor into a failed scenario."""
    feature = make_feature("a.feature", "one")
    executor_mock.execute.side_effect = RuntimeError("driver crashed")
    orchestrator = FeatureOrchestrator(executor=executor_mock)

    result = await orchestrator.run_feature(feature)

    assert result.failed_count == 1
    assert str(result.errors[0]) == "driver crashed"
    assert "Scenario execution failed" in caplog.text


async def test_wraps_outline_failures(executor_mock: Mock) -> None:
    """Keeps outline context on failures reported by the executor."""
    feature = Feature(
        relative_path="outline.feature",
        sections=[
            ScenarioDefinition(name="row <n>", line=4, examples=[{"n": 1}, {"n": 2}])
        ],
    )
    executor_mock.execute.side_effect = lambda scenario, call_arg: ScenarioResult(
        scenario=scenario, error=AssertionError(f"failed {scenario.name}")
    )
    config = OrchestratorConfig(parallel_scenarios=False)
    orchestrator = FeatureOrchestrator(executor=executor_mock, config=config)

    result = await orchestrator.run_feature(feature)

    assert all(isinstance(e, ScenarioOutlineError) for e in result.errors)
    assert result.error_messages() == "[1.1:4] failed row 1\n[1.2:4] failed row 2"


async def test_sequential_run_keeps_scenario_order() -> None:
    """Records results in declaration order when scenarios run sequentially."""
    executor = RecordingExecutor()
    config = OrchestratorConfig(parallel_scenarios=False)
    orchestrator = FeatureOrchestrator(executor=executor, config=config)

    result = await orchestrator.run_feature(make_feature("a.feature", "x", "y", "z"))

    assert [r.scenario.name for r in result.scenario_results] == ["x", "y", "z"]
    assert executor.peak == 1


async def test_parallel_run_respects_max_concurrency() -> None:
    """Never runs more scenarios at once than configured."""
    executor = RecordingExecutor()
    config = OrchestratorConfig(max_concurrency=2)
    orchestrator = FeatureOrchestrator(executor=executor, config=config)

    result = await orchestrator.run_feature(
        make_feature("a.feature", "1", "2", "3", "4", "5")
    )

    assert result.scenario_count == 5
    assert executor.peak == 2


async def test_called_feature_keeps_call_context() -> None:
    """Passes the call argument through and keeps the last result variables."""
    executor = RecordingExecutor()
    config = OrchestratorConfig(parallel_scenarios=False)
    orchestrator = FeatureOrchestrator(executor=executor, config=config)

    result = await orchestrator.run_feature(
        make_feature("called.feature", "first", "second"),
        call_arg={"id": 42},
        loop_index=1,
    )

    assert executor.calls == [("first", {"id": 42}), ("second", {"id": 42})]
    assert result.call_arg == {"id": 42}
    assert result.call_name == "[1] called.feature"
    assert result.result_as_primitive_map == {"last": "second"}


async def test_returns_empty_suite_without_features(executor_mock: Mock) -> None:
    """Returns an empty suite result when no features are given."""
    orchestrator = FeatureOrchestrator(executor=executor_mock)

    suite = await orchestrator.run_features([])

    assert suite.feature_count == 0
    executor_mock.execute.assert_not_called()


@pytest.mark.parametrize("parallel_features", [True, False])
async def test_runs_features_into_suite(parallel_features: bool) -> None:
    """Collects one feature result per feature, in input order."""
    executor = RecordingExecutor()
    config = OrchestratorConfig(parallel_features=parallel_features)
    orchestrator = FeatureOrchestrator(executor=executor, config=config)
    features = [
        make_feature("a.feature", "a1", "a2"),
        make_feature("b.feature", "b1"),
    ]

    suite = await orchestrator.run_features(features)

    assert [fr.display_name for fr in suite.feature_results] == [
        "a.feature",
        "b.feature",
    ]
    assert suite.scenario_count == 3
    assert suite.exit_code == 0
