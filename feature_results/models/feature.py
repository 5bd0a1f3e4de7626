"""Models for parsed features, their scenarios and steps."""

import re
from collections.abc import Mapping, Sequence
from typing import Any, ClassVar

from pydantic import Field

from feature_results.models.base import Model
from feature_results.paths import to_package_qualified_name

_PLACEHOLDER = re.compile(r"<([^<>\s]+)>")


class Tag(Model):
    """Tag attached to a feature or scenario, stored without the ``@``."""

    name: str = Field(..., description="Tag name without the leading @")
    line: int = Field(..., description="Source line of the tag")

    def to_map(self) -> dict[str, Any]:
        """Render the tag as a report entry."""
        return {"name": f"@{self.name}", "line": self.line}


def tags_to_result_list(tags: Sequence[Tag]) -> list[dict[str, Any]]:
    """Render tags as the list consumed by report renderers."""
    return [tag.to_map() for tag in tags]


class Step(Model):
    """Single step within a scenario or background."""

    line: int = Field(..., description="Source line of the step")
    keyword: str = Field(..., description="Step keyword (Given, When, Then, ...)")
    text: str = Field(..., description="Step text after the keyword")
    doc_string: str | None = Field(default=None, description="Attached doc string")


class Background(Model):
    """Shared setup steps run before every scenario of a feature."""

    KEYWORD: ClassVar[str] = "Background"

    line: int = Field(..., description="Source line of the background block")
    steps: Sequence[Step] = Field(default_factory=tuple)


class ScenarioDefinition(Model):
    """Scenario or scenario outline as declared in the feature file.

    A definition with ``examples`` is an outline: it runs once per example row.
    """

    name: str = ""
    description: str | None = None
    line: int = Field(..., description="Source line of the scenario declaration")
    tags: Sequence[Tag] | None = None
    steps: Sequence[Step] = Field(default_factory=tuple)
    examples: Sequence[Mapping[str, Any]] | None = Field(
        default=None, description="Example rows; None for a plain scenario"
    )

    @property
    def is_outline(self) -> bool:
        """Whether this definition is a parameterized scenario outline."""
        return self.examples is not None


class Feature(Model):
    """Immutable parsed feature."""

    KEYWORD: ClassVar[str] = "Feature"

    name: str | None = None
    description: str | None = None
    relative_path: str = Field(..., description="Feature path, may carry a prefix")
    line: int = Field(default=1, description="Source line of the Feature keyword")
    tags: Sequence[Tag] | None = None
    background: Background | None = None
    sections: Sequence[ScenarioDefinition] = Field(default_factory=tuple)

    @property
    def background_present(self) -> bool:
        """Whether the feature declares a background block."""
        return self.background is not None

    @property
    def package_qualified_name(self) -> str:
        """Dotted name derived from the feature path."""
        return to_package_qualified_name(self.relative_path)

    def expand_scenarios(self) -> Sequence["Scenario"]:
        """Expand sections into runnable scenarios, one per outline example row."""
        scenarios: list[Scenario] = []
        for index, definition in enumerate(self.sections):
            if definition.examples is None:
                scenarios.append(
                    Scenario(feature=self, section_index=index, definition=definition)
                )
                continue
            for example_index, row in enumerate(definition.examples):
                scenarios.append(
                    Scenario(
                        feature=self,
                        section_index=index,
                        definition=definition,
                        example_index=example_index,
                        example_data=row,
                    )
                )
        return scenarios


class Scenario(Model):
    """Runnable scenario: a plain scenario or one iteration of an outline."""

    TYPE: ClassVar[str] = "scenario"

    feature: Feature
    section_index: int = Field(..., ge=0, description="Position within the feature")
    definition: ScenarioDefinition
    example_index: int = Field(default=-1, description="-1 when not an outline row")
    example_data: Mapping[str, Any] = Field(default_factory=dict)

    @property
    def is_outline(self) -> bool:
        """Whether this scenario is one iteration of a scenario outline."""
        return self.example_index != -1

    @property
    def line(self) -> int:
        return self.definition.line

    @property
    def description(self) -> str | None:
        return self.definition.description

    @property
    def tags(self) -> Sequence[Tag] | None:
        return self.definition.tags

    @property
    def keyword(self) -> str:
        return "Scenario Outline" if self.is_outline else "Scenario"

    @property
    def name(self) -> str:
        """Scenario name with outline placeholders filled from the example row."""
        if not self.is_outline:
            return self.definition.name

        def substitute(match: re.Match[str]) -> str:
            key = match.group(1)
            if key in self.example_data:
                return str(self.example_data[key])
            return match.group(0)

        return _PLACEHOLDER.sub(substitute, self.definition.name)

    @property
    def display_meta(self) -> str:
        """Identify the scenario, e.g. ``[2.3:14]`` for the third row of section 2."""
        meta = f"[{self.section_index + 1}"
        if self.is_outline:
            meta += f".{self.example_index + 1}"
        return f"{meta}:{self.line}]"
