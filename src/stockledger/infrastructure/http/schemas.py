"""Request bodies for the HTTP API.

Field names are camelCase on the wire.  Money is always a decimal string
(``"2.50"``); JSON numbers are rejected for price fields so nothing
passes through a float.
"""

from __future__ import annotations

from dataclasses import fields, is_dataclass
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )


class TransactionIn(CamelModel):
    type: str
    item_id: str
    quantity: Optional[int] = None
    delta: Optional[int] = None
    unit_price: str
    supplier_id: Optional[str] = None
    user_id: Optional[str] = None
    reference_number: Optional[str] = None
    notes: Optional[str] = None


class ItemIn(CamelModel):
    name: str
    sku: str
    unit_price: str
    cost_price: str = "0"
    reorder_level: int = Field(default=0, ge=0)
    reorder_quantity: int = Field(default=0, ge=0)
    category_id: Optional[str] = None
    supplier_id: Optional[str] = None
    location: Optional[str] = None
    description: Optional[str] = None
    opening_quantity: int = Field(default=0, ge=0)
    user_id: Optional[str] = None


class ItemPatch(CamelModel):
    """Every field optional; only the fields sent are changed.

    ``quantity`` is accepted here only so it can be refused with a clear
    message instead of a generic "extra field" error.
    """

    name: Optional[str] = None
    sku: Optional[str] = None
    description: Optional[str] = None
    unit_price: Optional[str] = None
    cost_price: Optional[str] = None
    reorder_level: Optional[int] = None
    reorder_quantity: Optional[int] = None
    category_id: Optional[str] = None
    supplier_id: Optional[str] = None
    location: Optional[str] = None
    quantity: Optional[int] = None


class StockCountIn(CamelModel):
    counted_quantity: int
    user_id: Optional[str] = None
    reference_number: Optional[str] = None
    notes: Optional[str] = None


def to_wire(value: Any) -> Any:
    """Render DTOs (or lists of them) as camelCase JSON-ready data.

    Only dataclass field names are renamed; keys of plain dicts such as
    per-type counts are kept as they are.
    """
    if is_dataclass(value) and not isinstance(value, type):
        return {to_camel(f.name): to_wire(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, list):
        return [to_wire(v) for v in value]
    if isinstance(value, dict):
        return {k: to_wire(v) for k, v in value.items()}
    return value
