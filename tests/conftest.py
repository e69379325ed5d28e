from __future__ import annotations

from datetime import datetime
from typing import Any, Callable

import pytest

from order_panel import LocalHostBridge, PanelConfig, PanelEngine

CATALOG = [
    {"index": "burger", "label": "Burger", "type": "food", "price": 25.0},
    {"index": "soda", "label": "Soda", "type": "drink", "price": 8.0},
    {"index": "donut", "label": "Donut", "type": "candy", "price": "4.50"},
    {"index": "wrench", "label": "Wrench", "type": "utils", "price": 40},
]

# Naive timestamps are read as local time, so these compare equal to the
# local clock below whatever the machine's timezone is.
NOW = datetime(2024, 5, 10, 15, 30).astimezone()


def _order(
    order_id: str,
    status: str = "pending",
    *,
    name: str | None = None,
    timestamp: str = "2024-05-10T12:00:00",
    total: str = "10.00",
) -> dict[str, Any]:
    return {
        "id": order_id,
        "name": name or f"Table {order_id}",
        "items": [{"index": "burger", "label": "Burger", "type": "food", "price": 10.0, "quantity": 1}],
        "total": total,
        "status": status,
        "timestamp": timestamp,
        "playerId": 7,
        "playerName": "Ana",
    }


@pytest.fixture
def catalog_payload() -> list[dict[str, Any]]:
    return [dict(item) for item in CATALOG]


@pytest.fixture
def make_order() -> Callable[..., dict[str, Any]]:
    return _order


@pytest.fixture
def host() -> LocalHostBridge:
    bridge = LocalHostBridge()
    bridge.register("submitOrder", lambda payload: {"id": "ORDER_100", **payload})
    bridge.register("updateOrderStatus", lambda payload: {"success": True})
    bridge.register(
        "getDashboardStats",
        lambda payload: {
            "totalRevenue": 1520.5,
            "todayRevenue": 120,
            "monthRevenue": 900,
            "totalOrders": 40,
            "pendingOrders": 3,
            "inProgressOrders": 2,
            "completedOrders": 35,
            "averageOrderValue": 38.01,
        },
    )
    bridge.register("getBankBalance", lambda payload: {"balance": 100})
    bridge.register("withdrawBank", lambda payload: {"success": True})
    return bridge


@pytest.fixture
def engine(host: LocalHostBridge) -> PanelEngine:
    return PanelEngine(host, config=PanelConfig(notification_ttl_seconds=0.05), clock=lambda: NOW)


@pytest.fixture
def open_panel(engine: PanelEngine, catalog_payload) -> Callable[..., PanelEngine]:
    def _open(**data: Any) -> PanelEngine:
        payload = {"items": catalog_payload, "isStaff": True, "mode": "restaurant"}
        payload.update(data)
        payload = {key: value for key, value in payload.items() if value is not None}
        engine.dispatch({"action": "openPanel", "data": payload})
        return engine

    return _open
