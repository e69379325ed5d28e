"""Payloads the host pushes into the panel, keyed by message tag."""

from __future__ import annotations

import json
import logging
from typing import Any

from pydantic import AliasChoices, Field, ValidationError

from .models import CatalogItem, HostModel, Order

logger = logging.getLogger(__name__)

OPEN_PANEL = "openPanel"
ORDER_NOTIFICATION = "orderNotification"
ORDERS_UPDATED = "ordersUpdated"


class OpenPanelEvent(HostModel):
    # Catalog and order collections are parsed separately so one bad entry
    # never discards the rest of the event.
    items: Any = None
    is_staff: bool = Field(default=False, validation_alias=AliasChoices("isStaff", "isEmployee", "is_staff"))
    open_orders: Any = None
    completed_orders: Any = None
    mode: str | None = Field(default=None, validation_alias=AliasChoices("mode", "painelType"))

    @property
    def catalog(self) -> list[CatalogItem]:
        return parse_catalog(self.items)

    @property
    def open_order_list(self) -> list[Order]:
        return parse_orders(self.open_orders, "openOrders")

    @property
    def completed_order_list(self) -> list[Order]:
        return parse_orders(self.completed_orders, "completedOrders")


class OrderNotificationEvent(HostModel):
    message: str
    source_label: str = Field(
        default="",
        validation_alias=AliasChoices("sourceLabel", "restaurant", "source_label"),
    )


class OrdersUpdatedEvent(HostModel):
    open_orders: list[Order] | None = None
    completed_orders: list[Order] | None = None


def parse_catalog(raw: Any) -> list[CatalogItem]:
    """Parse the catalog from a list or a JSON-encoded list.

    Any failure yields an empty catalog and a logged diagnostic.
    """
    if raw is None:
        return []
    if isinstance(raw, (str, bytes)):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError as exc:
            logger.warning("catalog_parse_failed", extra={"error": str(exc)})
            return []
    if not isinstance(raw, list):
        logger.warning("catalog_parse_failed", extra={"error": f"expected a list, got {type(raw).__name__}"})
        return []
    try:
        return [CatalogItem.model_validate(entry) for entry in raw]
    except ValidationError as exc:
        logger.warning("catalog_parse_failed", extra={"error": str(exc)})
        return []


def parse_orders(raw: Any, collection: str) -> list[Order]:
    """Parse an order collection entry by entry; invalid orders are dropped."""
    if raw is None:
        return []
    if not isinstance(raw, list):
        logger.warning(
            "orders_parse_failed",
            extra={"collection": collection, "error": f"expected a list, got {type(raw).__name__}"},
        )
        return []
    orders: list[Order] = []
    for position, entry in enumerate(raw):
        try:
            orders.append(Order.model_validate(entry))
        except ValidationError as exc:
            logger.warning(
                "order_entry_dropped",
                extra={"collection": collection, "position": position, "error": str(exc)},
            )
    return orders
