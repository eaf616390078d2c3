"""Common pydantic base for engine models."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class EngineModel(BaseModel):
    """Immutable model with camelCase wire aliases.

    Attributes stay snake_case in Python; ``model_dump(by_alias=True)``
    produces the camelCase shape used on the wire.
    """
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )
