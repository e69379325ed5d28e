from __future__ import annotations

from datetime import date

from order_panel.models import Order, OrderStatus
from order_panel.order_book import OrderBook


def _orders(make_order, *entries: tuple[str, str]) -> list[Order]:
    return [Order.model_validate(make_order(order_id, status)) for order_id, status in entries]


def _ids(orders) -> list[str]:
    return [order.id for order in orders]


def test_reset_treats_absent_collections_as_empty(make_order) -> None:
    book = OrderBook()
    book.reset(_orders(make_order, ("ORDER_001", "pending")), None)

    assert _ids(book.open_orders) == ["ORDER_001"]
    assert book.completed_orders == ()


def test_reset_closes_detail_view(make_order) -> None:
    book = OrderBook()
    book.reset(_orders(make_order, ("ORDER_001", "pending")), [])
    assert book.open_detail("ORDER_001") is not None

    book.reset([], [])

    assert book.detail is None


def test_completed_status_moves_order_between_collections(make_order) -> None:
    book = OrderBook()
    book.reset(
        _orders(make_order, ("ORDER_001", "pending"), ("ORDER_002", "in_preparation")),
        _orders(make_order, ("ORDER_000", "completed")),
    )

    updated = book.apply_status("ORDER_002", OrderStatus.COMPLETED)

    assert updated is not None
    assert updated.status is OrderStatus.COMPLETED
    assert _ids(book.open_orders) == ["ORDER_001"]
    assert _ids(book.completed_orders) == ["ORDER_000", "ORDER_002"]


def test_in_preparation_status_updates_in_place(make_order) -> None:
    book = OrderBook()
    book.reset(_orders(make_order, ("ORDER_001", "pending"), ("ORDER_002", "pending")), [])

    book.apply_status("ORDER_001", OrderStatus.IN_PREPARATION)

    assert _ids(book.open_orders) == ["ORDER_001", "ORDER_002"]
    assert book.open_orders[0].status is OrderStatus.IN_PREPARATION
    assert book.completed_orders == ()


def test_status_for_order_not_open_leaves_collections_unchanged(make_order) -> None:
    book = OrderBook()
    book.reset(_orders(make_order, ("ORDER_001", "pending")), _orders(make_order, ("ORDER_000", "completed")))
    before = (book.open_orders, book.completed_orders)

    assert book.apply_status("ORDER_000", OrderStatus.IN_PREPARATION) is None
    assert book.apply_status("ORDER_404", OrderStatus.COMPLETED) is None
    assert (book.open_orders, book.completed_orders) == before


def test_apply_status_refreshes_open_detail(make_order) -> None:
    book = OrderBook()
    book.reset(_orders(make_order, ("ORDER_002", "in_preparation")), [])
    book.open_detail("ORDER_002")

    book.apply_status("ORDER_002", OrderStatus.COMPLETED)

    assert book.detail is not None
    assert book.detail.status is OrderStatus.COMPLETED


def test_snapshot_replaces_only_present_collections(make_order) -> None:
    book = OrderBook()
    book.reset(
        _orders(make_order, ("ORDER_001", "pending")),
        _orders(make_order, ("ORDER_000", "completed")),
    )

    book.apply_snapshot(open_orders=_orders(make_order, ("ORDER_005", "pending")))

    assert _ids(book.open_orders) == ["ORDER_005"]
    assert _ids(book.completed_orders) == ["ORDER_000"]


def test_snapshot_refreshes_detail_copy(make_order) -> None:
    book = OrderBook()
    book.reset(_orders(make_order, ("ORDER_002", "in_preparation")), [])
    book.open_detail("ORDER_002")

    book.apply_snapshot(open_orders=[], completed_orders=_orders(make_order, ("ORDER_002", "completed")))

    assert book.detail is not None
    assert book.detail.status is OrderStatus.COMPLETED


def test_snapshot_without_detail_order_keeps_last_copy(make_order) -> None:
    book = OrderBook()
    book.reset(_orders(make_order, ("ORDER_002", "pending")), [])
    book.open_detail("ORDER_002")

    book.apply_snapshot(open_orders=_orders(make_order, ("ORDER_003", "pending")))

    assert book.detail is not None
    assert book.detail.id == "ORDER_002"
    assert book.detail.status is OrderStatus.PENDING


def test_close_detail_with_stale_version_is_ignored(make_order) -> None:
    book = OrderBook()
    book.reset(_orders(make_order, ("ORDER_001", "pending"), ("ORDER_002", "pending")), [])
    first = book.open_detail("ORDER_001")
    book.open_detail("ORDER_002")

    assert book.close_detail(first) is False
    assert book.detail is not None
    assert book.detail.id == "ORDER_002"
    assert book.close_detail() is True
    assert book.detail is None


def test_open_detail_for_unknown_order(make_order) -> None:
    book = OrderBook()
    assert book.open_detail("ORDER_404") is None


def test_completed_on_filters_by_local_date(make_order) -> None:
    book = OrderBook()
    book.reset(
        [],
        [
            Order.model_validate(make_order("ORDER_010", "completed", timestamp="2024-05-10T09:00:00")),
            Order.model_validate(make_order("ORDER_011", "completed", timestamp="2024-05-09T23:00:00")),
            Order.model_validate(make_order("ORDER_012", "completed", timestamp="2024-05-10T22:15:00")),
        ],
    )

    assert _ids(book.completed_on(date(2024, 5, 10))) == ["ORDER_010", "ORDER_012"]
