"""Shared Pydantic base model for mutable configuration and state objects."""

from pydantic import BaseModel, ConfigDict


class BaseConfig(BaseModel):
    """Base for models that are mutated in place after construction.

    Assignments are validated, unknown fields are rejected, and nested model instances
    are kept as passed in (a chapter held by a project is the same object the caller
    mutates).
    """

    model_config = ConfigDict(
        validate_assignment=True,
        validate_default=True,
        extra="forbid",
        revalidate_instances="never",
        use_enum_values=False,
    )
