"""Base model configuration for parsed feature structures."""

from pydantic import BaseModel, ConfigDict


class Model(BaseModel):
    """Immutable model shared by every parsed feature structure."""

    model_config = ConfigDict(frozen=True, extra="forbid")
