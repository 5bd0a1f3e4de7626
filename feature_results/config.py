"""Configuration for running features and collecting their results."""

from pydantic import BaseModel, Field


class OrchestratorConfig(BaseModel):
    """Configuration for the feature orchestrator."""

    parallel_scenarios: bool = True
    parallel_features: bool = True
    # Upper bound on scenarios executing at the same time, across all features
    max_concurrency: int = Field(default=4, ge=1)
