"""Serializable report records consumed by report renderers."""

from collections.abc import Sequence
from typing import Any

from pydantic import Field

from feature_results.models.base import Model


class FeatureReport(Model):
    """Feature-level report entry in cucumber JSON form.

    Key names are read by downstream HTML and JSON renderers and must not change.
    """

    elements: Sequence[dict[str, Any]] = Field(
        default_factory=list,
        description="Scenario entries, each preceded by its background entry",
    )
    keyword: str
    line: int
    uri: str
    name: str
    id: str
    description: str = ""
    tags: Sequence[dict[str, Any]] | None = None

    def to_map(self) -> dict[str, Any]:
        """Return the plain mapping form; ``tags`` is omitted when not declared."""
        data = self.model_dump()
        if self.tags is None:
            del data["tags"]
        return data
