"""Test factories for generating features and execution outcomes."""

from polyfactory import Use
from polyfactory.factories import DataclassFactory
from polyfactory.factories.pydantic_factory import ModelFactory

from feature_results.models.feature import (
    Feature,
    Scenario,
    ScenarioDefinition,
    Step,
    Tag,
)
from feature_results.models.result import ScenarioResult, StepResult


class TagFactory(ModelFactory[Tag]):
    """Factory for Tag."""


class StepFactory(ModelFactory[Step]):
    """Factory for Step."""

    doc_string = None


class ScenarioDefinitionFactory(ModelFactory[ScenarioDefinition]):
    """Factory for plain (non-outline) ScenarioDefinition."""

    description = None
    tags = None
    steps = Use(list[Step])
    examples = None


class FeatureFactory(ModelFactory[Feature]):
    """Factory for Feature without background or tags."""

    tags = None
    background = None
    sections = Use(list[ScenarioDefinition])


class ScenarioFactory(ModelFactory[Scenario]):
    """Factory for a plain Scenario."""

    feature = Use(FeatureFactory.build)
    definition = Use(ScenarioDefinitionFactory.build)
    example_index = -1
    example_data = Use(dict)


class StepResultFactory(DataclassFactory[StepResult]):
    """Factory for a passed StepResult."""

    step = Use(StepFactory.build)
    status = "passed"
    error = None
    background = False


class ScenarioResultFactory(DataclassFactory[ScenarioResult]):
    """Factory for a passed ScenarioResult without steps."""

    scenario = Use(ScenarioFactory.build)
    step_results = Use(list[StepResult])
    error = None
    result_vars = None
