"""Scenario executors."""

from feature_results.executors.base import ScenarioExecutor

__all__ = ["ScenarioExecutor"]
