"""
Shared API schema base classes.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Request body accepting camelCase keys (snake_case also accepted)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, use_enum_values=True)


class IdList(CamelModel):
    ids: list[str]


__all__ = ["CamelModel", "IdList"]
