"""Payload and query-string schemas for the product endpoints."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, fields
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

REQUIRED_FIELDS = ("name", "category", "price", "inStock", "quantity", "brand")
# Text fields must be truthy; the rest only have to be present.
TEXT_FIELDS = ("name", "category", "brand")

_FLOAT_PREFIX = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")
_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")


def parse_float(value: Any) -> float:
    """Parse the leading number of ``value``; ``nan`` when there is none."""

    if isinstance(value, bool) or value is None:
        return math.nan
    if isinstance(value, (int, float)):
        try:
            return float(value)
        except OverflowError:
            return math.inf if value > 0 else -math.inf
    match = _FLOAT_PREFIX.match(str(value))
    if not match:
        return math.nan
    return float(match.group(1))


def parse_int(value: Any) -> Optional[int]:
    """Parse the leading integer of ``value``; ``None`` when there is none."""

    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    if isinstance(value, int):
        return value
    match = _INT_PREFIX.match(str(value))
    if not match:
        return None
    return int(match.group(1))


def is_truthy(value: Any) -> bool:
    if isinstance(value, float) and math.isnan(value):
        return False
    if isinstance(value, (list, dict)):
        return True
    return bool(value)


def missing_fields(payload: Mapping[str, Any]) -> list[str]:
    missing = []
    for name in REQUIRED_FIELDS:
        value = payload.get(name)
        if name in TEXT_FIELDS:
            if not is_truthy(value):
                missing.append(name)
        elif value is None:
            missing.append(name)
    return missing


class ProductModel(BaseModel):
    """Schema for validating and coercing product payloads."""

    model_config = ConfigDict(extra="ignore")

    name: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1)
    price: float
    inStock: bool
    quantity: int
    brand: str = Field(..., min_length=1)

    @field_validator("price", mode="before")
    @classmethod
    def coerce_price(cls, value):
        number = parse_float(value)
        if not math.isfinite(number):
            raise ValueError("price must be a number")
        return number

    @field_validator("inStock", mode="before")
    @classmethod
    def coerce_in_stock(cls, value):
        return is_truthy(value)

    @field_validator("quantity", mode="before")
    @classmethod
    def coerce_quantity(cls, value):
        number = parse_int(value)
        if number is None:
            raise ValueError("quantity must be an integer")
        return number

    def to_record(self, product_id: int) -> dict:
        return {"id": product_id, **self.model_dump()}


@dataclass(frozen=True)
class ProductFilters:
    """Raw query-string filters for ``GET /products``.

    Values are kept as the strings received; ``None`` means the parameter was
    not supplied at all, which is distinct from an empty string.
    """

    category: Optional[str] = None
    brand: Optional[str] = None
    inStock: Optional[str] = None
    priceMin: Optional[str] = None
    priceMax: Optional[str] = None
    page: Optional[str] = None
    limit: Optional[str] = None

    @classmethod
    def from_args(cls, args: Mapping[str, str]) -> "ProductFilters":
        return cls(**{f.name: args.get(f.name) for f in fields(cls)})
