from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from dataclasses import asdict
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Callable

from pydantic import ValidationError

from .cart import CartManager
from .channel import MessageChannel
from .config import PanelConfig, load_config
from .events import (
    OPEN_PANEL,
    ORDER_NOTIFICATION,
    ORDERS_UPDATED,
    OpenPanelEvent,
    OrderNotificationEvent,
    OrdersUpdatedEvent,
)
from .exceptions import FailureReason, PanelServiceError
from .host_bridge import HostBridge, HttpHostBridge
from .models import CatalogItem, CartLine, Order, OrderStatus, normalize_status
from .notifications import NotificationCenter
from .observability import log_action
from .order_book import OrderBook
from .order_state import is_adjacent_transition, order_action_availability
from .pagination import PaginationState, clamp_page, goto_page, next_page, page_slice, prev_page, total_pages
from .services import CheckoutService, DashboardService, OrderStatusService, TreasuryService
from .state import STAFF_TABS, ItemSelection, PanelState, Tab, WithdrawalView, visible_tabs

logger = logging.getLogger(__name__)

Outcome = dict[str, Any]


class PanelEngine:
    """Session-scoped ordering panel.

    Pushed host messages arrive through ``dispatch``; user actions are the
    public methods below. Methods that talk to the host are coroutines and
    return an outcome dict (``ok`` plus either the result or ``reason`` and
    ``error``). Nothing is applied locally before the host acknowledges it.
    """

    def __init__(
        self,
        bridge: HostBridge,
        *,
        config: PanelConfig | None = None,
        clock: Callable[[], datetime] | None = None,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        self.config = config or PanelConfig()
        self.bridge = bridge
        self.state = PanelState()
        self.cart = CartManager()
        self.orders = OrderBook()
        self.pagination = PaginationState(page_size=self.config.page_size)
        self.notifications = NotificationCenter(ttl_seconds=self.config.notification_ttl_seconds, loop=loop)
        self.checkout_service = CheckoutService(bridge)
        self.status_service = OrderStatusService(bridge)
        self.dashboard_service = DashboardService(bridge)
        self.treasury_service = TreasuryService(bridge)
        self._clock = clock or (lambda: datetime.now().astimezone())
        self.channel = MessageChannel()
        self.channel.subscribe(OPEN_PANEL, self.handle_open_panel)
        self.channel.subscribe(ORDERS_UPDATED, self.handle_orders_updated)
        self.channel.subscribe(ORDER_NOTIFICATION, self.handle_order_notification)

    @classmethod
    def from_config(cls, config: PanelConfig | None = None) -> "PanelEngine":
        config = config or load_config()
        return cls(HttpHostBridge(config), config=config)

    # ------------------------------------------------------------------
    # Pushed events
    # ------------------------------------------------------------------
    def dispatch(self, message: Mapping[str, Any]) -> bool:
        return self.channel.dispatch(message)

    def handle_open_panel(self, data: Mapping[str, Any]) -> None:
        try:
            event = OpenPanelEvent.model_validate(dict(data))
        except ValidationError as exc:
            log_action(logger, "sync", OPEN_PANEL, "ignored", level=logging.WARNING, error=str(exc))
            return
        catalog = event.catalog
        self.state.reset_session(is_staff=event.is_staff)
        self.cart.load_catalog(catalog, event.mode)
        self.orders.reset(event.open_order_list, event.completed_order_list)
        self.pagination.page = 1
        log_action(
            logger,
            "sync",
            OPEN_PANEL,
            "applied",
            session=self.state.session_version,
            catalog_size=len(catalog),
            open_orders=len(self.orders.open_orders),
            completed_orders=len(self.orders.completed_orders),
            mode=self.cart.mode,
        )

    def handle_orders_updated(self, data: Mapping[str, Any]) -> None:
        try:
            event = OrdersUpdatedEvent.model_validate(dict(data))
        except ValidationError as exc:
            log_action(logger, "sync", ORDERS_UPDATED, "ignored", level=logging.WARNING, error=str(exc))
            return
        self.orders.apply_snapshot(open_orders=event.open_orders, completed_orders=event.completed_orders)
        log_action(
            logger,
            "sync",
            ORDERS_UPDATED,
            "applied",
            open_orders=len(event.open_orders) if event.open_orders is not None else None,
            completed_orders=len(event.completed_orders) if event.completed_orders is not None else None,
        )

    def handle_order_notification(self, data: Mapping[str, Any]) -> None:
        try:
            event = OrderNotificationEvent.model_validate(dict(data))
        except ValidationError as exc:
            log_action(logger, "notifications", ORDER_NOTIFICATION, "ignored", level=logging.WARNING, error=str(exc))
            return
        self.notifications.push(message=event.message, source_label=event.source_label)

    def dismiss_notification(self) -> None:
        self.notifications.dismiss()

    # ------------------------------------------------------------------
    # Catalog and cart
    # ------------------------------------------------------------------
    def set_filter(self, category: str) -> bool:
        return self.cart.set_filter(category)

    def filtered_catalog(self) -> list[CatalogItem]:
        return self.cart.filtered_catalog()

    def select_item(self, index: str) -> bool:
        item = self.cart.find_item(index)
        if item is None:
            return False
        self.state.selection = ItemSelection(item=item, quantity=1)
        return True

    def set_selection_quantity(self, quantity: int) -> int | None:
        if self.state.selection is None:
            return None
        self.state.selection.quantity = max(1, int(quantity))
        return self.state.selection.quantity

    def close_selection(self) -> None:
        self.state.selection = None

    def confirm_selection(self) -> CartLine | None:
        selection = self.state.selection
        if selection is None:
            return None
        line = self.add_to_cart(selection.item, selection.quantity)
        self.state.selection = None
        return line

    def add_to_cart(self, item: CatalogItem, quantity: int = 1) -> CartLine:
        return self.cart.add_to_cart(item, quantity)

    def set_line_quantity(self, index: str, new_quantity: int) -> None:
        self.cart.set_line_quantity(index, new_quantity)

    def remove_line(self, index: str) -> None:
        self.cart.remove_line(index)

    def cart_total(self) -> Decimal:
        return self.cart.cart_total()

    def set_order_name(self, name: str) -> None:
        self.cart.order_name = name

    def open_checkout(self) -> None:
        self.state.checkout_open = True

    def close_checkout(self) -> None:
        self.state.checkout_open = False

    # ------------------------------------------------------------------
    # Checkout
    # ------------------------------------------------------------------
    async def submit(self) -> Outcome:
        if self.state.is_submitting:
            return self._fail(
                "checkout",
                "submit",
                PanelServiceError("Order submission already in progress", FailureReason.IN_PROGRESS),
            )
        session = self.state.session_version
        self.state.is_submitting = True
        try:
            ack = await self.checkout_service.submit(
                self.cart.snapshot_lines(),
                self.cart.order_name,
                self.cart.cart_total(),
                now=self._clock(),
            )
        except PanelServiceError as exc:
            if exc.reason is FailureReason.EMPTY_CART:
                self.state.checkout_open = False
            return self._fail("checkout", "submit", exc)
        finally:
            self.state.is_submitting = False
        if session != self.state.session_version:
            return self._stale("checkout", "submit", order_id=ack.id)
        self.cart.clear()
        self.state.checkout_open = False
        self.state.error_message = None
        return self._ok("checkout", "submit", order_id=ack.id)

    # ------------------------------------------------------------------
    # Order status
    # ------------------------------------------------------------------
    async def change_status(self, order_id: str, new_status: OrderStatus | str) -> Outcome:
        try:
            status = OrderStatus(normalize_status(new_status))
        except ValueError:
            return self._fail(
                "orders",
                "change_status",
                PanelServiceError(f"Unknown order status: {new_status}", FailureReason.INVALID_STATUS),
                order_id=order_id,
            )
        if order_id in self.state.status_changes_in_flight:
            return self._fail(
                "orders",
                "change_status",
                PanelServiceError("A status change for this order is already in progress", FailureReason.IN_PROGRESS),
                order_id=order_id,
            )
        known = self.orders.find(order_id)
        if known is not None and not is_adjacent_transition(known.status, status):
            # The host decides; the request is still issued.
            log_action(
                logger,
                "orders",
                "change_status",
                "non_adjacent_transition",
                level=logging.WARNING,
                order_id=order_id,
                current=known.status.value,
                requested=status.value,
            )
        session = self.state.session_version
        self.state.status_changes_in_flight.add(order_id)
        try:
            await self.status_service.change_status(order_id, status)
        except PanelServiceError as exc:
            return self._fail("orders", "change_status", exc, order_id=order_id, status=status.value)
        finally:
            self.state.status_changes_in_flight.discard(order_id)
        if session != self.state.session_version:
            return self._stale("orders", "change_status", order_id=order_id, status=status.value)
        updated = self.orders.apply_status(order_id, status)
        return self._ok("orders", "change_status", order_id=order_id, status=status.value, applied=updated is not None)

    async def complete_order(self, order_id: str) -> Outcome:
        detail_version = self.orders.detail_version
        outcome = await self.change_status(order_id, OrderStatus.COMPLETED)
        if outcome["ok"]:
            self.orders.close_detail(detail_version)
        return outcome

    def open_detail(self, order_id: str) -> bool:
        return self.orders.open_detail(order_id) is not None

    def close_detail(self) -> None:
        self.orders.close_detail()

    # ------------------------------------------------------------------
    # Dashboard and pagination
    # ------------------------------------------------------------------
    async def select_tab(self, tab: Tab | str) -> Outcome:
        try:
            target = Tab(tab)
        except ValueError:
            return self._fail(
                "navigation",
                "select_tab",
                PanelServiceError(f"Unknown tab: {tab}", FailureReason.INVALID_TAB),
            )
        if target in STAFF_TABS and not self.state.is_staff:
            return self._fail(
                "navigation",
                "select_tab",
                PanelServiceError("Only staff can open this tab", FailureReason.NOT_STAFF),
                tab=target.value,
            )
        self.state.active_tab = target
        if target is not Tab.MANAGEMENT:
            return {"ok": True, "tab": target.value}
        stats, balance = await asyncio.gather(self.refresh_stats(), self.refresh_balance())
        return {"ok": True, "tab": target.value, "stats": stats, "balance": balance}

    async def refresh_stats(self) -> Outcome:
        session = self.state.session_version
        try:
            stats = await self.dashboard_service.fetch_stats()
        except PanelServiceError as exc:
            return self._fail("dashboard", "refresh_stats", exc)
        if session != self.state.session_version:
            return self._stale("dashboard", "refresh_stats")
        self.state.dashboard_stats = stats
        return self._ok("dashboard", "refresh_stats")

    async def refresh_balance(self) -> Outcome:
        session = self.state.session_version
        try:
            balance = await self.dashboard_service.fetch_balance()
        except PanelServiceError as exc:
            return self._fail("dashboard", "refresh_balance", exc)
        if session != self.state.session_version:
            return self._stale("dashboard", "refresh_balance")
        self.state.balance = balance
        return self._ok("dashboard", "refresh_balance", balance=balance)

    def todays_completed_orders(self, today: date | None = None) -> list[Order]:
        return self.orders.completed_on(today or self._clock().date())

    def total_completed_pages(self) -> int:
        return total_pages(len(self.orders.completed_orders), self.pagination.page_size)

    def completed_page(self, page: int | None = None) -> list[Order]:
        requested = self.pagination.page if page is None else page
        return page_slice(self.orders.completed_orders, requested, self.pagination.page_size)

    def goto_completed_page(self, page: int) -> int:
        return goto_page(self.pagination, page, len(self.orders.completed_orders)).page

    def next_completed_page(self) -> int:
        return next_page(self.pagination, len(self.orders.completed_orders)).page

    def prev_completed_page(self) -> int:
        return prev_page(self.pagination, len(self.orders.completed_orders)).page

    def current_completed_page(self) -> int:
        return clamp_page(self.pagination.page, len(self.orders.completed_orders), self.pagination.page_size)

    # ------------------------------------------------------------------
    # Treasury
    # ------------------------------------------------------------------
    def open_withdrawal(self) -> None:
        self.state.withdrawal = WithdrawalView(is_open=True, amount_text="", version=self.state.withdrawal.version + 1)

    def close_withdrawal(self, version: int | None = None) -> bool:
        view = self.state.withdrawal
        if version is not None and version != view.version:
            return False
        self.state.withdrawal = WithdrawalView(version=view.version + 1)
        return True

    def set_withdrawal_amount(self, text: str) -> None:
        self.state.withdrawal.amount_text = text

    def quick_amounts(self) -> dict[int, Decimal]:
        return self.treasury_service.quick_amounts(self.state.balance)

    def apply_quick_amount(self, percentage: int) -> Outcome:
        amount = self.quick_amounts().get(percentage)
        if amount is None:
            return self._fail(
                "treasury",
                "apply_quick_amount",
                PanelServiceError(f"Unsupported quick amount: {percentage}%", FailureReason.INVALID_AMOUNT),
                percentage=percentage,
            )
        self.state.withdrawal.amount_text = f"{amount:.2f}"
        return {"ok": True, "percentage": percentage, "amount": self.state.withdrawal.amount_text}

    async def withdraw(self, amount: Decimal | float | int | str | None = None) -> Outcome:
        if self.state.is_withdrawing:
            return self._fail(
                "treasury",
                "withdraw",
                PanelServiceError("Withdrawal already in progress", FailureReason.IN_PROGRESS),
            )
        raw = self.state.withdrawal.amount_text if amount is None else amount
        session = self.state.session_version
        view_version = self.state.withdrawal.version
        self.state.is_withdrawing = True
        try:
            withdrawn = await self.treasury_service.withdraw(raw, self.state.balance)
        except PanelServiceError as exc:
            return self._fail("treasury", "withdraw", exc)
        finally:
            self.state.is_withdrawing = False
        if session != self.state.session_version:
            return self._stale("treasury", "withdraw", amount=withdrawn)
        refreshed = await self.refresh_balance()
        self.close_withdrawal(view_version)
        return self._ok(
            "treasury",
            "withdraw",
            amount=withdrawn,
            balance=self.state.balance,
            balance_refreshed=refreshed["ok"],
        )

    # ------------------------------------------------------------------
    # Rendering and outcomes
    # ------------------------------------------------------------------
    def render(self) -> dict[str, Any]:
        detail = self.orders.detail
        withdrawal = self.state.withdrawal
        return {
            "session": self.state.session_version,
            "is_staff": self.state.is_staff,
            "mode": self.cart.mode,
            "tabs": [tab.value for tab in visible_tabs(self.state.is_staff)],
            "active_tab": self.state.active_tab.value,
            "filters": list(self.cart.available_filters()),
            "active_filter": self.cart.active_filter,
            "catalog": [item.model_dump(mode="json", by_alias=True) for item in self.cart.filtered_catalog()],
            "cart": {
                "lines": [
                    {**line.model_dump(mode="json", by_alias=True), "subtotal": float(line.subtotal)}
                    for line in self.cart.lines
                ],
                "count": self.cart.line_count(),
                "total": float(self.cart.cart_total()),
                "order_name": self.cart.order_name,
            },
            "checkout_open": self.state.checkout_open,
            "open_orders": [order.model_dump(mode="json", by_alias=True) for order in self.orders.open_orders],
            "completed_orders": {
                "page": self.current_completed_page(),
                "total_pages": self.total_completed_pages(),
                "count": len(self.orders.completed_orders),
                "items": [order.model_dump(mode="json", by_alias=True) for order in self.completed_page()],
            },
            "todays_completed": len(self.todays_completed_orders()),
            "detail": None
            if detail is None
            else {
                "order": detail.model_dump(mode="json", by_alias=True),
                "actions": asdict(order_action_availability(detail.status, is_staff=self.state.is_staff)),
            },
            "stats": None
            if self.state.dashboard_stats is None
            else self.state.dashboard_stats.model_dump(mode="json", by_alias=True),
            "balance": float(self.state.balance),
            "withdrawal": {"open": withdrawal.is_open, "amount": withdrawal.amount_text},
            "notification": self.notifications.render(),
            "error": self.state.error_message,
        }

    def _ok(self, module: str, action: str, **context: Any) -> Outcome:
        log_action(logger, module, action, "success", **context)
        return {"ok": True, **context}

    def _stale(self, module: str, action: str, **context: Any) -> Outcome:
        # The host accepted the request, but the session it belonged to is gone.
        log_action(logger, module, action, "stale_result_discarded", **context)
        return {"ok": True, "applied": False, **context}

    def _fail(self, module: str, action: str, exc: PanelServiceError, **context: Any) -> Outcome:
        log_action(
            logger,
            module,
            action,
            "rejected" if exc.reason.is_local else "error",
            level=logging.WARNING,
            reason=exc.reason.value,
            error=exc.message,
            details=exc.details,
            **context,
        )
        self.state.error_message = exc.message
        return {"ok": False, "reason": exc.reason.value, "error": exc.message, "details": exc.details, **context}
