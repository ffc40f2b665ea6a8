# services/board_service.py
"""
board_service.py

Read-only helpers that slice the order collection the way the kitchen,
delivery and branch history screens look at it.

Features:
- Kitchen board: pending / preparing / prepared columns.
- Delivery board: awaiting collection / collected / delivered columns.
- Branch history, newest order first, with a short summary and
  today / yesterday / earlier grouping.
- Stage timeline for a single order.

None of these change an order; they only filter and sort snapshots
returned by OrderStore.orders().
"""

from datetime import datetime, timedelta
from typing import Dict, Iterable, List, Optional, Tuple

from models.order import STAGE_ORDER, Order, Stage


def kitchen_board(orders: Iterable[Order]) -> Dict[str, List[Order]]:
    board: Dict[str, List[Order]] = {"pending": [], "preparing": [], "prepared": []}
    for o in orders:
        if o.is_prepared:
            board["prepared"].append(o)
        elif o.is_preparing:
            board["preparing"].append(o)
        else:
            board["pending"].append(o)
    return board


def delivery_board(orders: Iterable[Order]) -> Dict[str, List[Order]]:
    # Orders that never reached Prepared are not the driver's business.
    board: Dict[str, List[Order]] = {"awaiting_collection": [], "collected": [], "delivered": []}
    for o in orders:
        if o.is_delivered:
            board["delivered"].append(o)
        elif o.is_collected:
            board["collected"].append(o)
        elif o.is_prepared:
            board["awaiting_collection"].append(o)
    return board


def branch_history(orders: Iterable[Order], branch_name: str) -> List[Order]:
    # All orders of one branch, newest first.
    mine = [o for o in orders if o.branch_name == branch_name]
    return sorted(mine, key=lambda o: o.placed_at, reverse=True)


def branch_history_summary(orders: Iterable[Order], branch_name: str) -> Dict[str, float]:
    # delivered_pct is truncated to a whole percent; avg_items counts item
    # lines per order, not quantities.
    history = branch_history(orders, branch_name)
    total = len(history)
    if total == 0:
        return {"orders": 0, "delivered_pct": 0, "avg_items": 0.0}
    delivered = sum(1 for o in history if o.is_delivered)
    return {
        "orders": total,
        "delivered_pct": int(delivered / total * 100),
        "avg_items": sum(len(o.items) for o in history) / total,
    }


def group_history_by_day(orders: Iterable[Order], today: datetime) -> Dict[str, List[Order]]:
    # Today / yesterday / earlier buckets by placed date, input order kept.
    # Anything not placed today or yesterday lands in "earlier".
    groups: Dict[str, List[Order]] = {"today": [], "yesterday": [], "earlier": []}
    day = today.date()
    yesterday = day - timedelta(days=1)
    for o in orders:
        placed = o.placed_at.date()
        if placed == day:
            groups["today"].append(o)
        elif placed == yesterday:
            groups["yesterday"].append(o)
        else:
            groups["earlier"].append(o)
    return groups


def order_timeline(order: Order) -> List[Tuple[Stage, Optional[datetime]]]:
    # One (stage, timestamp) row per stage; None for stages not reached.
    return [(stage, order.stage_timestamp(stage)) for stage in STAGE_ORDER]


def find_order(orders: Iterable[Order], order_id: str) -> Optional[Order]:
    for o in orders:
        if o.order_id == order_id:
            return o
    return None
