"""Shared schema configuration for the camelCase JSON wire format."""

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model that reads and writes camelCase field names."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def blank_to_none(value: Any) -> Any:
    """Treat empty strings from form submissions as absent values."""
    if isinstance(value, str) and not value.strip():
        return None
    return value
