"""Locally held mirror of the host's open and completed order collections.

Every mutation computes the new open tuple, completed tuple and detail copy
first and then swaps all three in a single assignment, so a reader never sees
an order in both collections, in neither, or a detail copy older than the
collections it came from.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable

from .models import Order, OrderStatus

logger = logging.getLogger(__name__)


@dataclass
class OrderBook:
    _open: tuple[Order, ...] = ()
    _completed: tuple[Order, ...] = ()
    _detail: Order | None = None
    detail_version: int = 0
    revision: int = field(default=0)

    @property
    def open_orders(self) -> tuple[Order, ...]:
        return self._open

    @property
    def completed_orders(self) -> tuple[Order, ...]:
        return self._completed

    @property
    def detail(self) -> Order | None:
        return self._detail

    def find(self, order_id: str) -> Order | None:
        for order in (*self._open, *self._completed):
            if order.id == order_id:
                return order
        return None

    def reset(self, open_orders: Iterable[Order] | None, completed_orders: Iterable[Order] | None) -> None:
        """Session reset: absent collections become empty and the detail view closes."""
        self._open, self._completed, self._detail = (
            tuple(open_orders or ()),
            tuple(completed_orders or ()),
            None,
        )
        self.detail_version += 1
        self.revision += 1

    def apply_snapshot(
        self,
        *,
        open_orders: Iterable[Order] | None = None,
        completed_orders: Iterable[Order] | None = None,
    ) -> None:
        """Wholesale replace each collection that is present; absent ones are untouched."""
        new_open = tuple(open_orders) if open_orders is not None else self._open
        new_completed = tuple(completed_orders) if completed_orders is not None else self._completed
        new_detail = self._detail
        if new_detail is not None:
            pushed: list[Order] = []
            if open_orders is not None:
                pushed.extend(new_open)
            if completed_orders is not None:
                pushed.extend(new_completed)
            # Later snapshots win; completed is applied after open.
            for order in pushed:
                if order.id == new_detail.id:
                    new_detail = order
        self._open, self._completed, self._detail = new_open, new_completed, new_detail
        self.revision += 1

    def apply_status(self, order_id: str, status: OrderStatus) -> Order | None:
        """Apply a host-acknowledged status to an order in the open collection.

        Returns the updated order, or None when the order is not open locally.
        """
        current = next((order for order in self._open if order.id == order_id), None)
        if current is None:
            logger.warning("status_ack_for_unknown_open_order", extra={"order_id": order_id, "status": status.value})
            return None
        updated = current.model_copy(update={"status": status})
        if status == OrderStatus.COMPLETED:
            new_open = tuple(order for order in self._open if order.id != order_id)
            new_completed = (*self._completed, updated)
        else:
            new_open = tuple(updated if order.id == order_id else order for order in self._open)
            new_completed = self._completed
        new_detail = self._detail
        if new_detail is not None and new_detail.id == order_id:
            new_detail = updated
        self._open, self._completed, self._detail = new_open, new_completed, new_detail
        self.revision += 1
        return updated

    def open_detail(self, order_id: str) -> int | None:
        order = self.find(order_id)
        if order is None:
            return None
        self._detail = order
        self.detail_version += 1
        return self.detail_version

    def close_detail(self, version: int | None = None) -> bool:
        """Close the detail view; with ``version``, only if it is still the displayed one."""
        if version is not None and version != self.detail_version:
            return False
        if self._detail is None:
            return False
        self._detail = None
        self.detail_version += 1
        return True

    def completed_on(self, day: date) -> list[Order]:
        return [
            order
            for order in self._completed
            if order.status == OrderStatus.COMPLETED and order.local_date() == day
        ]
