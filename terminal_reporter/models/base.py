"""Base model configuration for reporter settings."""

from pydantic import BaseModel, ConfigDict


class Model(BaseModel):
    """Base model for configuration handed over by the execution engine."""

    model_config = ConfigDict(frozen=True, extra="forbid")
