from __future__ import annotations

from dataclasses import dataclass

from .models import OrderStatus

NEXT_STATUS: dict[OrderStatus, OrderStatus] = {
    OrderStatus.PENDING: OrderStatus.IN_PREPARATION,
    OrderStatus.IN_PREPARATION: OrderStatus.COMPLETED,
}


@dataclass(frozen=True)
class OrderActionAvailability:
    can_start_preparation: bool
    can_complete: bool


def next_status(current: OrderStatus) -> OrderStatus | None:
    return NEXT_STATUS.get(current)


def is_adjacent_transition(current: OrderStatus, requested: OrderStatus) -> bool:
    """Forward single-step moves only; completed is terminal."""
    return NEXT_STATUS.get(current) == requested


def order_action_availability(status: OrderStatus, *, is_staff: bool) -> OrderActionAvailability:
    if not is_staff:
        return OrderActionAvailability(False, False)
    return OrderActionAvailability(
        can_start_preparation=status == OrderStatus.PENDING,
        can_complete=status == OrderStatus.IN_PREPARATION,
    )
