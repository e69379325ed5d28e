from .cart import CartManager
from .config import ConfigError, PanelConfig, load_config
from .engine import PanelEngine
from .exceptions import (
    FailureReason,
    HostError,
    HostRejectedError,
    NotFoundError,
    PanelServiceError,
    ServerError,
    TransportError,
    ValidationError,
)
from .host_bridge import HostBridge, HttpHostBridge, LocalHostBridge
from .models import (
    CartLine,
    CatalogItem,
    DashboardStats,
    Order,
    OrderDraft,
    OrderStatus,
)
from .notifications import Notification, NotificationCenter
from .order_book import OrderBook
from .state import PanelState, Tab

__all__ = [
    "CartLine",
    "CartManager",
    "CatalogItem",
    "ConfigError",
    "DashboardStats",
    "FailureReason",
    "HostBridge",
    "HostError",
    "HostRejectedError",
    "HttpHostBridge",
    "LocalHostBridge",
    "NotFoundError",
    "Notification",
    "NotificationCenter",
    "Order",
    "OrderBook",
    "OrderDraft",
    "OrderStatus",
    "PanelConfig",
    "PanelEngine",
    "PanelServiceError",
    "PanelState",
    "ServerError",
    "Tab",
    "TransportError",
    "ValidationError",
    "load_config",
]
