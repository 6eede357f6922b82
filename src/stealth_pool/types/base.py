"""Base model shared by notes, events, keys and configuration."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class StrictBaseModel(BaseModel):
    """
    Immutable pydantic model with camelCase aliases.

    Fields are written in snake_case and populated by name in Python. Dumps
    with `by_alias=True` use camelCase (`leaf_index` becomes `leafIndex`),
    which is the form the circuit tooling and stored notes use.

    Validation is strict and unknown keys are refused, so a note or proof
    from disk either parses exactly or fails loudly.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_default=True,
        arbitrary_types_allowed=True,
        extra="forbid",
        frozen=True,
        strict=True,
    )
