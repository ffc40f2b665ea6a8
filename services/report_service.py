# services/report_service.py
import logging
from collections import Counter
from typing import Iterable

from models.interval import Interval
from models.order import Order
from services.errors import InvalidInputError

logger = logging.getLogger("kitchen.reports")

# report_service.py is the reporting layer: ReportingEngine reads the order
# store and computes time-windowed metrics. It never mutates orders and keeps
# no state of its own, so identical inputs always give identical results.

METRICS = (
    "total_orders",
    "prepared_orders",
    "collected_orders",
    "delivered_orders",
    "average_prep_time",
    "average_delivery_time",
)


def sum_usage(orders: Iterable[Order], pick_items) -> dict[str, dict[str, int]]:
    # branch -> item name -> summed quantity, using pick_items(order)
    # to choose which item list counts.
    usage: dict[str, Counter] = {}
    for o in orders:
        counter = usage.setdefault(o.branch_name, Counter())
        for it in pick_items(o):
            counter[it.name] += it.quantity
    return {branch: dict(counter) for branch, counter in usage.items()}


def _mean(durations: list[float]) -> float:
    if not durations:
        return 0.0
    return sum(durations) / len(durations)


class ReportingEngine:
    def __init__(self, store):
        self.store = store

    def orders_placed_in(self, interval: Interval) -> list[Order]:
        return [o for o in self.store.orders() if interval.contains(o.placed_at)]

    def total_orders(self, interval: Interval) -> int:
        return len(self.orders_placed_in(interval))

    # An order counts for a stage only when it was placed in the window AND
    # reached that stage inside the same window.

    def prepared_in(self, interval: Interval) -> list[Order]:
        return [o for o in self.orders_placed_in(interval)
                if o.is_prepared and interval.contains(o.prepared_at)]

    def collected_in(self, interval: Interval) -> list[Order]:
        return [o for o in self.orders_placed_in(interval)
                if o.is_collected and interval.contains(o.collected_at)]

    def delivered_in(self, interval: Interval) -> list[Order]:
        return [o for o in self.orders_placed_in(interval)
                if o.is_delivered and interval.contains(o.delivered_at)]

    def prepared_orders(self, interval: Interval) -> int:
        return len(self.prepared_in(interval))

    def collected_orders(self, interval: Interval) -> int:
        return len(self.collected_in(interval))

    def delivered_orders(self, interval: Interval) -> int:
        return len(self.delivered_in(interval))

    def average_prep_time(self, interval: Interval) -> float:
        # Average seconds from placed to prepared; 0.0 when nothing qualifies.
        durations = [
            (o.prepared_at - o.placed_at).total_seconds()
            for o in self.orders_placed_in(interval)
            if interval.contains(o.prepared_at)
        ]
        return _mean(durations)

    def average_delivery_time(self, interval: Interval) -> float:
        # Average seconds from prepared to delivered; 0.0 when nothing qualifies.
        durations = [
            (o.delivered_at - o.prepared_at).total_seconds()
            for o in self.orders_placed_in(interval)
            if o.prepared_at is not None and interval.contains(o.delivered_at)
        ]
        return _mean(durations)

    def item_usage_per_branch(self, interval: Interval) -> dict[str, dict[str, int]]:
        # Quantities as the branches ordered them.
        return sum_usage(self.orders_placed_in(interval), lambda o: o.items)

    def delivered_item_usage_per_branch(self, interval: Interval) -> dict[str, dict[str, int]]:
        # Quantities that actually reached the branches. Keyed on the delivery
        # time only, so an order placed last week but delivered today counts.
        delivered = [o for o in self.store.orders()
                     if o.is_delivered and interval.contains(o.delivered_at)]
        return sum_usage(delivered, lambda o: o.fulfilled_items)

    # ---- report screen helpers ----

    def summary(self, interval: Interval) -> dict:
        #This method returns the headline numbers for one window.
        report = {
            "total_orders": self.total_orders(interval),
            "prepared_orders": self.prepared_orders(interval),
            "collected_orders": self.collected_orders(interval),
            "delivered_orders": self.delivered_orders(interval),
            "average_prep_time": self.average_prep_time(interval),
            "average_delivery_time": self.average_delivery_time(interval),
        }
        logger.info(f"Reports: summary {interval.start:%Y-%m-%d %H:%M} -> "
                    f"{interval.end:%Y-%m-%d %H:%M}: {report}")
        return report

    def drill_down(self, metric: str, interval: Interval) -> list[Order]:
        # The orders behind one summary metric.
        if metric == "total_orders":
            return self.orders_placed_in(interval)
        if metric == "prepared_orders":
            return self.prepared_in(interval)
        if metric == "collected_orders":
            return self.collected_in(interval)
        if metric == "delivered_orders":
            return self.delivered_in(interval)
        if metric == "average_prep_time":
            return [o for o in self.orders_placed_in(interval)
                    if interval.contains(o.prepared_at)]
        if metric == "average_delivery_time":
            return [o for o in self.orders_placed_in(interval)
                    if interval.contains(o.delivered_at)]
        raise InvalidInputError(f"Unknown metric {metric!r}; expected one of {METRICS}")

    def branch_usage_totals(self, interval: Interval, delivered: bool = False) -> list[tuple[str, int]]:
        # Total item count per branch, sorted by branch name.
        if delivered:
            usage = self.delivered_item_usage_per_branch(interval)
        else:
            usage = self.item_usage_per_branch(interval)
        return sorted(
            ((branch, sum(items.values())) for branch, items in usage.items()),
            key=lambda pair: pair[0],
        )
