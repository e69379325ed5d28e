from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Sequence

from .exceptions import FailureReason
from .models import CartLine


@dataclass(frozen=True)
class ValidationIssue:
    field: str
    reason: FailureReason
    message: str


@dataclass(frozen=True)
class ValidationResult:
    ok: bool
    issues: list[ValidationIssue]

    @property
    def first(self) -> ValidationIssue | None:
        return self.issues[0] if self.issues else None


def parse_amount(value: Decimal | float | int | str | None) -> Decimal | None:
    """Decimal for a user-entered amount, or None when it is not a number at all."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return value
    text = str(value).strip()
    if not text:
        return None
    try:
        return Decimal(text)
    except InvalidOperation:
        return None


def validate_checkout(lines: Sequence[CartLine], name: str | None) -> ValidationResult:
    issues: list[ValidationIssue] = []
    if not lines:
        issues.append(ValidationIssue(field="cart", reason=FailureReason.EMPTY_CART, message="Cart is empty"))
    if name is None or not name.strip():
        issues.append(
            ValidationIssue(field="name", reason=FailureReason.MISSING_NAME, message="Order name is required")
        )
    return ValidationResult(ok=not issues, issues=issues)


def validate_withdrawal(amount: Decimal | None, balance: Decimal) -> ValidationResult:
    issues: list[ValidationIssue] = []
    if amount is None or not amount.is_finite() or amount <= 0:
        issues.append(
            ValidationIssue(
                field="amount",
                reason=FailureReason.INVALID_AMOUNT,
                message="Withdrawal amount must be greater than 0",
            )
        )
    elif amount > balance:
        issues.append(
            ValidationIssue(
                field="amount",
                reason=FailureReason.INSUFFICIENT_BALANCE,
                message="Withdrawal amount exceeds the available balance",
            )
        )
    return ValidationResult(ok=not issues, issues=issues)
