"""Shared schema base and number formatting."""

from decimal import Decimal
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base schema: snake_case attributes, camelCase JSON."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def money(value: Optional[Union[Decimal, float]]) -> Optional[float]:
    """Round a monetary amount to 2 decimals for the wire."""
    if value is None:
        return None
    return round(float(value), 2)


def number(value: Optional[Union[Decimal, float]]) -> Optional[float]:
    """Quantities keep their precision."""
    if value is None:
        return None
    return float(value)
