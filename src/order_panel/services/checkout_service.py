from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Sequence

from ..error_mapper import to_service_error
from ..exceptions import PanelServiceError
from ..host_bridge import SUBMIT_ORDER
from ..models import CartLine, OrderDraft, SubmitOrderAck
from ..validation import validate_checkout
from .base import BaseService, _coerce_model, _rejection

SUBMIT_FAILED = "Order submission failed"


@dataclass
class CheckoutService(BaseService):
    def build_draft(
        self,
        lines: Sequence[CartLine],
        name: str,
        total: Decimal,
        *,
        now: datetime | None = None,
    ) -> OrderDraft:
        return OrderDraft(
            name=name.strip(),
            items=[line.model_copy() for line in lines],
            total=total,
            timestamp=now or datetime.now(timezone.utc),
        )

    async def submit(
        self,
        lines: Sequence[CartLine],
        name: str | None,
        total: Decimal,
        *,
        now: datetime | None = None,
    ) -> SubmitOrderAck:
        """Validate locally, then send the order in a single host request.

        Validation failures raise before the host is contacted.
        """
        check = validate_checkout(lines, name)
        if not check.ok:
            issue = check.issues[0]
            raise PanelServiceError(message=issue.message, reason=issue.reason)
        draft = self.build_draft(lines, name or "", total, now=now)
        response = await self._call(SUBMIT_ORDER, draft.to_payload(), failure=SUBMIT_FAILED)
        # A bare or non-object acknowledgement still counts as accepted.
        if not isinstance(response, Mapping):
            return SubmitOrderAck()
        ack = _coerce_model(response, SubmitOrderAck, SUBMIT_FAILED)
        if ack.rejected:
            rejected = _rejection(response, SUBMIT_FAILED)
            raise to_service_error(rejected, SUBMIT_FAILED) from rejected
        return ack
