"""JSON helpers for call arguments and result variables."""

import dataclasses
import json
from collections.abc import Mapping, Set
from typing import Any

from pydantic import BaseModel

CYCLIC_MARKER = "#ref:"


def remove_cyclic_references(value: Any) -> Any:
    """Copy nested mappings and lists, replacing back-references with a marker.

    Only references to a container that is one of its own ancestors are
    replaced; the same object appearing in two sibling branches is kept.
    """
    return _copy_acyclic(value, ancestors=())


def _copy_acyclic(value: Any, ancestors: tuple[int, ...]) -> Any:
    if isinstance(value, Mapping | list | tuple):
        if id(value) in ancestors:
            return f"{CYCLIC_MARKER}{type(value).__name__}"
        path = (*ancestors, id(value))
        if isinstance(value, Mapping):
            return {key: _copy_acyclic(item, path) for key, item in value.items()}
        return [_copy_acyclic(item, path) for item in value]
    return value


def to_primitive(value: Any) -> Any:
    """Convert a value into JSON-compatible primitives.

    Pydantic models, dataclasses, mappings, sequences and sets are converted
    recursively; other objects are rendered with ``str``.
    """
    if value is None or isinstance(value, bool | int | float | str):
        return value
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return to_primitive(dataclasses.asdict(value))
    if isinstance(value, Mapping):
        return {str(key): to_primitive(item) for key, item in value.items()}
    if isinstance(value, list | tuple | Set):
        return [to_primitive(item) for item in value]
    return str(value)


def to_pretty_json(value: Any) -> str:
    """Render a value as indented JSON."""
    return json.dumps(value, indent=2, default=to_primitive)
