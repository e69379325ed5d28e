from .checkout_service import CheckoutService
from .dashboard_service import DashboardService
from .order_status_service import OrderStatusService
from .treasury_service import QUICK_AMOUNT_PERCENTAGES, TreasuryService, quick_amount

__all__ = [
    "CheckoutService",
    "DashboardService",
    "OrderStatusService",
    "QUICK_AMOUNT_PERCENTAGES",
    "TreasuryService",
    "quick_amount",
]
