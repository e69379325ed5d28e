from __future__ import annotations

from order_panel.models import OrderStatus
from order_panel.order_state import is_adjacent_transition, next_status, order_action_availability


def test_next_status_walks_forward_once() -> None:
    assert next_status(OrderStatus.PENDING) is OrderStatus.IN_PREPARATION
    assert next_status(OrderStatus.IN_PREPARATION) is OrderStatus.COMPLETED
    assert next_status(OrderStatus.COMPLETED) is None


def test_only_adjacent_forward_transitions_are_adjacent() -> None:
    assert is_adjacent_transition(OrderStatus.PENDING, OrderStatus.IN_PREPARATION) is True
    assert is_adjacent_transition(OrderStatus.PENDING, OrderStatus.COMPLETED) is False
    assert is_adjacent_transition(OrderStatus.COMPLETED, OrderStatus.IN_PREPARATION) is False


def test_order_action_availability() -> None:
    pending = order_action_availability(OrderStatus.PENDING, is_staff=True)
    assert pending.can_start_preparation is True
    assert pending.can_complete is False

    preparing = order_action_availability(OrderStatus.IN_PREPARATION, is_staff=True)
    assert preparing.can_start_preparation is False
    assert preparing.can_complete is True

    done = order_action_availability(OrderStatus.COMPLETED, is_staff=True)
    assert done.can_start_preparation is False
    assert done.can_complete is False


def test_order_action_availability_staff_gate() -> None:
    availability = order_action_availability(OrderStatus.PENDING, is_staff=False)
    assert availability.can_start_preparation is False
    assert availability.can_complete is False
