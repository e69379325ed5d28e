from __future__ import annotations

from dataclasses import dataclass

from ..host_bridge import UPDATE_ORDER_STATUS
from ..models import ActionResponse, OrderStatus, StatusUpdateRequest
from .base import BaseService

STATUS_FAILED = "Failed to update order status"


@dataclass
class OrderStatusService(BaseService):
    async def change_status(self, order_id: str, status: OrderStatus) -> ActionResponse:
        request = StatusUpdateRequest(order_id=order_id, status=status)
        return await self._acknowledged(
            UPDATE_ORDER_STATUS,
            request.model_dump(mode="json", by_alias=True),
            failure=STATUS_FAILED,
        )
