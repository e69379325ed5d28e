from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from ..host_bridge import GET_BANK_BALANCE, GET_DASHBOARD_STATS
from ..models import BalanceResponse, DashboardStats
from .base import BaseService, _coerce_model

STATS_FAILED = "Failed to load dashboard statistics"
BALANCE_FAILED = "Failed to load treasury balance"


@dataclass
class DashboardService(BaseService):
    async def fetch_stats(self) -> DashboardStats:
        response = await self._call(GET_DASHBOARD_STATS, {}, failure=STATS_FAILED)
        return _coerce_model(response, DashboardStats, STATS_FAILED)

    async def fetch_balance(self) -> Decimal:
        response = await self._call(GET_BANK_BALANCE, {}, failure=BALANCE_FAILED)
        return _coerce_model(response, BalanceResponse, BALANCE_FAILED).balance
