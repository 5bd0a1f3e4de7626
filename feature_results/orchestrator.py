"""Feature orchestrator feeding scenario outcomes into feature results."""

import asyncio
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from feature_results.config import OrchestratorConfig
from feature_results.executors.base import ScenarioExecutor
from feature_results.feature_result import FeatureResult
from feature_results.models.feature import Feature, Scenario
from feature_results.models.result import ScenarioResult
from feature_results.suite import SuiteResult

log = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class FeatureOrchestrator:
    """Runs the scenarios of features with one executor and collects results."""

    executor: ScenarioExecutor
    config: OrchestratorConfig = field(default_factory=OrchestratorConfig)

    async def run_features(self, features: Sequence[Feature]) -> SuiteResult:
        """Run all features and merge their results into a suite result.

        Args:
            features: Parsed features to run

        Returns:
            Suite result holding one feature result per feature, in input order

        """
        suite = SuiteResult()
        if not features:
            log.info("No features to run")
            return suite

        log.info("Running %d feature(s)...", len(features))
        semaphore = asyncio.Semaphore(self.config.max_concurrency)
        if self.config.parallel_features:
            feature_results = await asyncio.gather(
                *(self._run_feature(f, None, -1, semaphore) for f in features)
            )
        else:
            feature_results = [
                await self._run_feature(f, None, -1, semaphore) for f in features
            ]

        for feature_result in feature_results:
            suite.add_feature_result(feature_result)
        log.info("Feature execution completed")
        return suite

    async def run_feature(
        self,
        feature: Feature,
        call_arg: Mapping[str, Any] | None = None,
        loop_index: int = -1,
    ) -> FeatureResult:
        """Run a single feature, optionally as a call from another feature.

        Args:
            feature: Parsed feature to run
            call_arg: Argument passed by the calling feature
            loop_index: Position in the caller's loop, -1 when not looping

        Returns:
            Result aggregating every scenario of the feature

        """
        semaphore = asyncio.Semaphore(self.config.max_concurrency)
        return await self._run_feature(feature, call_arg, loop_index, semaphore)

    async def _run_feature(
        self,
        feature: Feature,
        call_arg: Mapping[str, Any] | None,
        loop_index: int,
        semaphore: asyncio.Semaphore,
    ) -> FeatureResult:
        feature_result = FeatureResult(
            feature=feature, call_arg=call_arg, loop_index=loop_index
        )
        scenarios = feature.expand_scenarios()
        log.info(
            "Running feature %s (%d scenario(s))",
            feature_result.call_name,
            len(scenarios),
        )

        if self.config.parallel_scenarios:
            await asyncio.gather(
                *(
                    self._run_scenario(s, call_arg, feature_result, semaphore)
                    for s in scenarios
                )
            )
        else:
            for scenario in scenarios:
                await self._run_scenario(scenario, call_arg, feature_result, semaphore)

        recorded = feature_result.scenario_results
        if recorded and recorded[-1].result_vars is not None:
            feature_result.result_vars = recorded[-1].result_vars
        return feature_result

    async def _run_scenario(
        self,
        scenario: Scenario,
        call_arg: Mapping[str, Any] | None,
        feature_result: FeatureResult,
        semaphore: asyncio.Semaphore,
    ) -> None:
        async with semaphore:
            try:
                result = await self.executor.execute(scenario, call_arg)
            except Exception as e:
                log.error(
                    "Scenario execution failed: %s %s",
                    scenario.display_meta,
                    e,
                    exc_info=e,
                )
                result = ScenarioResult(scenario=scenario, error=e)
        feature_result.add_result(result)
