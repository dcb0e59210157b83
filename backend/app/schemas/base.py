"""
Shared response building blocks.

Prices and hours are stored as NUMERIC and handled as ``Decimal`` inside the
app; clients receive plain JSON numbers rounded to cents.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, PlainSerializer

_CENT = Decimal("0.01")


class StandardizedModel(BaseModel):
    """Base for response DTOs: enums render as their values."""

    model_config = ConfigDict(use_enum_values=True, populate_by_name=True)


def _to_cents(value: Any) -> Decimal:
    if isinstance(value, bool) or not isinstance(value, (Decimal, int, float, str)):
        raise ValueError(f"Cannot convert {type(value).__name__} to a money amount")
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except InvalidOperation as exc:
        raise ValueError(f"Invalid money amount: {value!r}") from exc
    return amount.quantize(_CENT, rounding=ROUND_HALF_UP)


# Decimal amount, rounded to cents, serialized as a JSON number
Money = Annotated[
    Decimal,
    BeforeValidator(_to_cents),
    PlainSerializer(float, return_type=float),
]
