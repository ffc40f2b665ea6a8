# models/order.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from collections.abc import Iterable, Mapping
from typing import Any

from services.errors import InvalidInputError

# Order model representing one stock request sent by a branch to the kitchen.


class Stage(str, Enum):
    PENDING = "pending"
    PREPARING = "preparing"
    PREPARED = "prepared"
    COLLECTED = "collected"
    DELIVERED = "delivered"

    @property
    def rank(self) -> int:
        return STAGE_ORDER.index(self)


STAGE_ORDER: tuple[Stage, ...] = (
    Stage.PENDING,
    Stage.PREPARING,
    Stage.PREPARED,
    Stage.COLLECTED,
    Stage.DELIVERED,
)


@dataclass(frozen=True)
class LineItem:
    name: str
    quantity: int

    def __post_init__(self):
        if not isinstance(self.name, str) or not self.name.strip():
            raise InvalidInputError("Item name must be a non-empty string.")
        # bool is an int subclass, but True is not a quantity
        if isinstance(self.quantity, bool) or not isinstance(self.quantity, int):
            raise InvalidInputError(f"Quantity for {self.name} must be an integer.")
        if self.quantity < 0:
            raise InvalidInputError(f"Quantity for {self.name} cannot be negative.")

    @classmethod
    def coerce(cls, value: LineItem | Mapping[str, Any]) -> LineItem:
        # Accept {"name": ..., "quantity": ...} dicts as well as LineItem.
        if isinstance(value, LineItem):
            return value
        if isinstance(value, Mapping):
            try:
                return cls(name=value["name"], quantity=value["quantity"])
            except KeyError as e:
                raise InvalidInputError(f"Item is missing field {e.args[0]!r}") from e
        raise InvalidInputError(f"Unsupported item value: {value!r}")


def line_items(values: Iterable[LineItem | Mapping[str, Any]]) -> tuple[LineItem, ...]:
    """Validate an item sequence: every entry coerced, names unique."""
    if values is None or isinstance(values, (str, bytes, Mapping)):
        raise InvalidInputError("Items must be a sequence of line items.")
    items = tuple(LineItem.coerce(v) for v in values)
    seen = set()
    for it in items:
        if it.name in seen:
            raise InvalidInputError(f"Duplicate item in order: {it.name}")
        seen.add(it.name)
    return items


@dataclass(frozen=True)
class Order:
    order_id: str
    branch_name: str
    items: tuple[LineItem, ...]
    placed_at: datetime
    kitchen_note: str | None = None
    prepared_items: tuple[LineItem, ...] | None = None

    # one timestamp per stage; the stage flag is derived from it
    preparing_at: datetime | None = None
    prepared_at: datetime | None = None
    collected_at: datetime | None = None
    delivered_at: datetime | None = None

    @property
    def is_preparing(self) -> bool:
        return self.preparing_at is not None

    @property
    def is_prepared(self) -> bool:
        return self.prepared_at is not None

    @property
    def is_collected(self) -> bool:
        return self.collected_at is not None

    @property
    def is_delivered(self) -> bool:
        return self.delivered_at is not None

    @property
    def stage(self) -> Stage:
        return current_stage(self)

    @property
    def fulfilled_items(self) -> tuple[LineItem, ...]:
        # what actually left the kitchen, or the original request
        if self.prepared_items is not None:
            return self.prepared_items
        return self.items

    @property
    def total_quantity(self) -> int:
        return sum(it.quantity for it in self.items)

    @property
    def prepared_quantity(self) -> int | None:
        if self.prepared_items is None:
            return None
        return sum(it.quantity for it in self.prepared_items)

    def stage_timestamp(self, stage: Stage) -> datetime | None:
        return {
            Stage.PENDING: self.placed_at,
            Stage.PREPARING: self.preparing_at,
            Stage.PREPARED: self.prepared_at,
            Stage.COLLECTED: self.collected_at,
            Stage.DELIVERED: self.delivered_at,
        }[stage]


def current_stage(order: Order) -> Stage:
    # Highest stage whose flag is set. Undo operations may clear a later
    # flag while leaving earlier ones, so walk from the top down.
    if order.is_delivered:
        return Stage.DELIVERED
    if order.is_collected:
        return Stage.COLLECTED
    if order.is_prepared:
        return Stage.PREPARED
    if order.is_preparing:
        return Stage.PREPARING
    return Stage.PENDING
