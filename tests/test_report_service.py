from datetime import datetime

import pytest

from models.interval import Interval
from models.order import LineItem
from services.errors import InvalidInputError
from services.report_service import METRICS, sum_usage

TODAY = Interval(datetime(2025, 5, 12), datetime(2025, 5, 13))


def place(store, clock, branch, items, at=None):
    if at is not None:
        clock.set(at)
    return store.add_order(branch, items)


def test_empty_store_reports_zeroes(reports):
    assert reports.orders_placed_in(TODAY) == []
    assert reports.total_orders(TODAY) == 0
    assert reports.average_prep_time(TODAY) == 0
    assert reports.average_delivery_time(TODAY) == 0
    assert reports.item_usage_per_branch(TODAY) == {}
    assert reports.delivered_item_usage_per_branch(TODAY) == {}


def test_average_prep_time_is_zero_without_prepared_orders(store, reports):
    store.add_order("Branch A", [LineItem("Widget", 1)])
    assert reports.average_prep_time(TODAY) == 0.0


def test_average_prep_time_over_two_orders(store, clock, reports):
    first = store.add_order("Branch A", [LineItem("Widget", 1)])
    second = store.add_order("Branch B", [LineItem("Widget", 1)])
    clock.advance(60)
    store.mark_order_as_prepared(first)
    clock.advance(60)
    store.mark_order_as_prepared(second)
    assert reports.average_prep_time(TODAY) == 90


def test_delivered_usage_uses_prepared_items(store, reports):
    order_id = store.add_order("Branch A", [{"name": "Widget", "quantity": 3}])
    store.mark_order_as_prepared(order_id, prepared_items=[{"name": "Widget", "quantity": 2}])
    store.mark_order_as_collected(order_id)
    store.mark_order_as_delivered(order_id)
    assert reports.delivered_item_usage_per_branch(TODAY) == {"Branch A": {"Widget": 2}}
    assert reports.item_usage_per_branch(TODAY) == {"Branch A": {"Widget": 3}}


def test_delivered_usage_falls_back_to_ordered_items(store, reports):
    order_id = store.add_order("Branch A", [LineItem("Widget", 3)])
    store.mark_order_as_delivered(order_id)
    assert reports.delivered_item_usage_per_branch(TODAY) == {"Branch A": {"Widget": 3}}


def test_item_usage_sums_across_orders_of_a_branch(store, reports):
    store.add_order("Branch A", [LineItem("Widget", 3), LineItem("Bread", 1)])
    store.add_order("Branch A", [LineItem("Widget", 4)])
    store.add_order("Branch B", [LineItem("Bread", 5)])
    assert reports.item_usage_per_branch(TODAY) == {
        "Branch A": {"Widget": 7, "Bread": 1},
        "Branch B": {"Bread": 5},
    }


def test_stage_counts(store, clock, reports):
    ids = [store.add_order("Branch A", [LineItem("Widget", 1)]) for _ in range(4)]
    clock.advance(minutes=5)
    store.mark_order_as_prepared(ids[0])
    store.mark_order_as_prepared(ids[1])
    store.mark_order_as_prepared(ids[2])
    store.mark_order_as_collected(ids[0])
    store.mark_order_as_collected(ids[1])
    store.mark_order_as_delivered(ids[0])
    assert reports.total_orders(TODAY) == 4
    assert reports.prepared_orders(TODAY) == 3
    assert reports.collected_orders(TODAY) == 2
    assert reports.delivered_orders(TODAY) == 1


def test_unmarked_stage_is_not_counted(store, reports):
    order_id = store.add_order("Branch A", [LineItem("Widget", 1)])
    store.mark_order_as_prepared(order_id)
    store.unmark_prepared(order_id)
    assert reports.prepared_orders(TODAY) == 0
    assert reports.average_prep_time(TODAY) == 0


def test_stage_reached_after_window_is_not_counted(store, clock, reports):
    order_id = store.add_order("Branch A", [LineItem("Widget", 1)])
    clock.set(datetime(2025, 5, 13, 8, 0))
    store.mark_order_as_prepared(order_id)
    assert reports.total_orders(TODAY) == 1
    assert reports.prepared_orders(TODAY) == 0
    assert reports.average_prep_time(TODAY) == 0


def test_orders_placed_outside_window_never_count(store, clock, reports):
    clock.set(datetime(2025, 5, 11, 23, 0))
    order_id = store.add_order("Branch A", [LineItem("Widget", 1)])
    clock.set(datetime(2025, 5, 12, 9, 0))
    store.mark_order_as_preparing(order_id)
    store.mark_order_as_prepared(order_id)
    store.mark_order_as_collected(order_id)
    assert reports.orders_placed_in(TODAY) == []
    assert reports.total_orders(TODAY) == 0
    assert reports.prepared_orders(TODAY) == 0
    assert reports.collected_orders(TODAY) == 0
    assert reports.average_prep_time(TODAY) == 0
    assert reports.item_usage_per_branch(TODAY) == {}


def test_window_is_half_open(store, clock, reports):
    clock.set(TODAY.end)
    store.add_order("Branch A", [LineItem("Widget", 1)])
    clock.set(TODAY.start)
    store.add_order("Branch B", [LineItem("Widget", 1)])
    assert [o.branch_name for o in reports.orders_placed_in(TODAY)] == ["Branch B"]


def test_average_delivery_time(store, clock, reports):
    first = store.add_order("Branch A", [LineItem("Widget", 1)])
    second = store.add_order("Branch A", [LineItem("Widget", 1)])
    store.mark_order_as_prepared(first)
    store.mark_order_as_prepared(second)
    clock.advance(100)
    store.mark_order_as_delivered(first)
    clock.advance(200)
    store.mark_order_as_delivered(second)
    assert reports.average_delivery_time(TODAY) == 200


def test_average_delivery_time_needs_prepared_timestamp(store, clock, reports):
    order_id = store.add_order("Branch A", [LineItem("Widget", 1)])
    clock.advance(60)
    store.mark_order_as_delivered(order_id)
    assert reports.delivered_orders(TODAY) == 1
    assert reports.average_delivery_time(TODAY) == 0


def test_delivered_usage_is_keyed_on_delivery_time(store, clock, reports):
    clock.set(datetime(2025, 5, 11, 18, 0))
    order_id = store.add_order("Branch A", [LineItem("Widget", 3)])
    clock.set(datetime(2025, 5, 12, 10, 0))
    store.mark_order_as_delivered(order_id)
    assert reports.delivered_orders(TODAY) == 0
    assert reports.delivered_item_usage_per_branch(TODAY) == {"Branch A": {"Widget": 3}}


def test_identical_inputs_give_identical_results(store, clock, reports):
    order_id = store.add_order("Branch A", [LineItem("Widget", 2)])
    clock.advance(45)
    store.mark_order_as_prepared(order_id)
    assert reports.summary(TODAY) == reports.summary(TODAY)


def test_summary(store, clock, reports):
    order_id = store.add_order("Branch A", [LineItem("Widget", 2)])
    clock.advance(30)
    store.mark_order_as_prepared(order_id)
    clock.advance(90)
    store.mark_order_as_collected(order_id)
    store.mark_order_as_delivered(order_id)
    assert reports.summary(TODAY) == {
        "total_orders": 1,
        "prepared_orders": 1,
        "collected_orders": 1,
        "delivered_orders": 1,
        "average_prep_time": 30.0,
        "average_delivery_time": 90.0,
    }


@pytest.mark.parametrize("metric", METRICS)
def test_drill_down_matches_summary_counts(store, clock, reports, metric):
    ids = [store.add_order("Branch A", [LineItem("Widget", 1)]) for _ in range(3)]
    clock.advance(60)
    store.mark_order_as_prepared(ids[0])
    store.mark_order_as_prepared(ids[1])
    store.mark_order_as_collected(ids[0])
    store.mark_order_as_delivered(ids[0])
    # delivered straight from the pending column
    store.mark_order_as_delivered(ids[2])
    expected = {
        "total_orders": 3,
        "prepared_orders": 2,
        "collected_orders": 1,
        "delivered_orders": 2,
        "average_prep_time": 2,
        "average_delivery_time": 2,
    }
    assert len(reports.drill_down(metric, TODAY)) == expected[metric]


def test_delivery_drill_down_includes_unprepared_orders(store, clock, reports):
    order_id = store.add_order("Branch A", [LineItem("Widget", 1)])
    clock.advance(60)
    store.mark_order_as_delivered(order_id)
    assert [o.order_id for o in reports.drill_down("average_delivery_time", TODAY)] == [order_id]
    # the average itself still needs a prepared timestamp
    assert reports.average_delivery_time(TODAY) == 0


def test_drill_down_rejects_unknown_metric(reports):
    with pytest.raises(InvalidInputError):
        reports.drill_down("revenue", TODAY)


def test_branch_usage_totals(store, reports):
    store.add_order("Branch B", [LineItem("Widget", 3), LineItem("Bread", 2)])
    order_id = store.add_order("Branch A", [LineItem("Widget", 4)])
    store.mark_order_as_prepared(order_id, prepared_items=[LineItem("Widget", 1)])
    store.mark_order_as_delivered(order_id)
    assert reports.branch_usage_totals(TODAY) == [("Branch A", 4), ("Branch B", 5)]
    assert reports.branch_usage_totals(TODAY, delivered=True) == [("Branch A", 1)]


def test_sum_usage_keeps_zero_quantities(store, reports):
    store.add_order("Branch A", [LineItem("Widget", 0)])
    assert sum_usage(store.orders(), lambda o: o.items) == {"Branch A": {"Widget": 0}}


def test_engine_does_not_mutate_store(store, clock, reports):
    order_id = store.add_order("Branch A", [LineItem("Widget", 1)])
    clock.advance(minutes=1)
    store.mark_order_as_prepared(order_id)
    before = store.orders()
    reports.summary(TODAY)
    reports.item_usage_per_branch(TODAY)
    reports.delivered_item_usage_per_branch(TODAY)
    assert store.orders() == before
