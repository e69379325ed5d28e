from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_DOWN, Decimal

from ..exceptions import PanelServiceError
from ..host_bridge import WITHDRAW_BANK
from ..models import WithdrawRequest
from ..validation import parse_amount, validate_withdrawal
from .base import BaseService

WITHDRAW_FAILED = "Withdrawal failed"
QUICK_AMOUNT_PERCENTAGES = (25, 50, 75, 100)
CENT = Decimal("0.01")


def quick_amount(balance: Decimal, percentage: int) -> Decimal:
    """Share of the known balance, rounded down to cents so 100% never exceeds it."""
    return (balance * Decimal(percentage) / Decimal(100)).quantize(CENT, rounding=ROUND_DOWN)


@dataclass
class TreasuryService(BaseService):
    async def withdraw(self, amount: Decimal | float | int | str | None, balance: Decimal) -> Decimal:
        value = parse_amount(amount)
        check = validate_withdrawal(value, balance)
        if not check.ok or value is None:
            issue = check.issues[0]
            raise PanelServiceError(message=issue.message, reason=issue.reason)
        await self._acknowledged(
            WITHDRAW_BANK,
            WithdrawRequest(amount=value).model_dump(mode="json", by_alias=True),
            failure=WITHDRAW_FAILED,
        )
        return value

    @staticmethod
    def quick_amounts(balance: Decimal) -> dict[int, Decimal]:
        return {percentage: quick_amount(balance, percentage) for percentage in QUICK_AMOUNT_PERCENTAGES}
