from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum

from .models import CatalogItem, DashboardStats


class Tab(str, Enum):
    MENU = "menu"
    OPEN_ORDERS = "open_orders"
    COMPLETED_ORDERS = "completed_orders"
    MANAGEMENT = "management"


STAFF_TABS = frozenset({Tab.OPEN_ORDERS, Tab.COMPLETED_ORDERS, Tab.MANAGEMENT})


def visible_tabs(is_staff: bool) -> list[Tab]:
    if not is_staff:
        return [Tab.MENU]
    return list(Tab)


@dataclass
class ItemSelection:
    item: CatalogItem
    quantity: int = 1


@dataclass
class WithdrawalView:
    is_open: bool = False
    amount_text: str = ""
    version: int = 0


@dataclass
class PanelState:
    """Everything scoped to one panel session besides the cart and order mirror."""

    session_version: int = 0
    is_staff: bool = False
    active_tab: Tab = Tab.MENU
    checkout_open: bool = False
    selection: ItemSelection | None = None
    withdrawal: WithdrawalView = field(default_factory=WithdrawalView)
    dashboard_stats: DashboardStats | None = None
    balance: Decimal = Decimal("0")
    error_message: str | None = None
    is_submitting: bool = False
    is_withdrawing: bool = False
    status_changes_in_flight: set[str] = field(default_factory=set)

    def reset_session(self, *, is_staff: bool) -> int:
        # In-flight flags survive: their requests still resolve, and the
        # session version tells them their results are stale.
        self.session_version += 1
        self.is_staff = is_staff
        self.active_tab = Tab.MENU
        self.checkout_open = False
        self.selection = None
        self.withdrawal = WithdrawalView(version=self.withdrawal.version + 1)
        self.dashboard_stats = None
        self.balance = Decimal("0")
        self.error_message = None
        return self.session_version
