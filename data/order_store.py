# data/order_store.py
import logging
import threading
from dataclasses import replace
from datetime import datetime
from typing import Callable, Iterator

from models.order import Order, line_items
from services.errors import InvalidInputError, NotFoundError

logger = logging.getLogger("kitchen.store")

# Stands in for "now" until _apply holds the lock.
NOW = object()


class OrderStore:
    # Authoritative, insertion-ordered collection of every order placed by
    # the branches. This is the only place orders are created or changed;
    # everyone else receives frozen Order snapshots.

    def __init__(self, clock: Callable[[], datetime] | None = None):
        # clock is injectable so tests can control "now"
        self.clock = clock or datetime.now
        self._orders: dict[str, Order] = {}
        self._next_number = 1
        self._lock = threading.RLock()

    def _now(self) -> datetime:
        return self.clock()

    def _get(self, order_id: str) -> Order:
        order = self._orders.get(order_id)
        if order is None:
            logger.warning(f"Store: unknown order id {order_id!r}")
            raise NotFoundError(order_id)
        return order

    def _items(self, items, context: str):
        try:
            return line_items(items)
        except InvalidInputError as e:
            logger.warning(f"Store: rejected {context}: {e}")
            raise

    def _apply(self, order_id: str, action: str, **changes) -> Order:
        # Swap in a replaced copy so a failed lookup leaves nothing half-applied.
        # Timestamps are read under the lock so they commit in call order.
        with self._lock:
            changes = {k: self._now() if v is NOW else v for k, v in changes.items()}
            updated = replace(self._get(order_id), **changes)
            self._orders[order_id] = updated
        logger.info(f"Store: {order_id} {action} (stage={updated.stage.value})")
        return updated

    # ---- creation ----

    def add_order(self, branch_name: str, items, note: str | None = None) -> str:
        if not isinstance(branch_name, str) or not branch_name.strip():
            logger.warning(f"Store: rejected order with branch name {branch_name!r}")
            raise InvalidInputError("Branch name must be a non-empty string.")
        order_items = self._items(items, f"order items from {branch_name}")
        if not order_items:
            logger.warning(f"Store: rejected empty order from {branch_name}")
            raise InvalidInputError("An order needs at least one item.")

        with self._lock:
            order_id = f"ORD-{self._next_number:06d}"
            self._next_number += 1
            self._orders[order_id] = Order(
                order_id=order_id,
                branch_name=branch_name,
                items=order_items,
                placed_at=self._now(),
                kitchen_note=note,
            )
        logger.info(f"Store: {order_id} placed by {branch_name} ({len(order_items)} items)")
        return order_id

    # ---- kitchen workflow ----

    def mark_order_as_preparing(self, order_id: str) -> Order:
        # Re-invoking simply moves the timestamp forward.
        return self._apply(order_id, "marked preparing", preparing_at=NOW)

    def mark_order_as_prepared(self, order_id: str, prepared_items=None,
                               note: str | None = None) -> Order:
        # Stages may be skipped: Preparing is not required first.
        changes = {"prepared_at": NOW}
        if prepared_items is not None:
            changes["prepared_items"] = self._items(prepared_items, f"prepared items for {order_id}")
        if note is not None:
            changes["kitchen_note"] = note
        return self._apply(order_id, "marked prepared", **changes)

    def unmark_prepared(self, order_id: str) -> Order:
        # prepared_items and later stages are left as they are
        return self._apply(order_id, "unmarked prepared", prepared_at=None)

    # ---- delivery workflow ----

    def mark_order_as_collected(self, order_id: str) -> Order:
        return self._apply(order_id, "marked collected", collected_at=NOW)

    def mark_order_as_delivered(self, order_id: str) -> Order:
        return self._apply(order_id, "marked delivered", delivered_at=NOW)

    def unmark_delivered(self, order_id: str) -> Order:
        return self._apply(order_id, "unmarked delivered", delivered_at=None)

    # ---- read access ----

    def get_order(self, order_id: str) -> Order:
        with self._lock:
            return self._get(order_id)

    def orders(self) -> list[Order]:
        # Returns a snapshot of all orders in insertion order.
        with self._lock:
            return list(self._orders.values())

    def branches(self) -> list[str]:
        names: list[str] = []
        for order in self.orders():
            if order.branch_name not in names:
                names.append(order.branch_name)
        return names

    def __len__(self) -> int:
        with self._lock:
            return len(self._orders)

    def __contains__(self, order_id) -> bool:
        with self._lock:
            return order_id in self._orders

    def __iter__(self) -> Iterator[Order]:
        return iter(self.orders())
