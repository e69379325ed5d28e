from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


@dataclass
class HostError(Exception):
    code: str
    message: str
    details: object | None = None
    status_code: int = 0
    raw_payload: object | None = None

    def __str__(self) -> str:
        return f"[{self.status_code}] {self.code}: {self.message}"


class HostRejectedError(HostError):
    """The host answered but refused the operation (success=false or an error field)."""


class ValidationError(HostError):
    pass


class NotFoundError(HostError):
    pass


class ServerError(HostError):
    """5xx host-side failures."""


class TransportError(HostError):
    """The request never completed: timeout, connection failure or unknown operation."""


class FailureReason(str, Enum):
    EMPTY_CART = "EMPTY_CART"
    MISSING_NAME = "MISSING_NAME"
    INVALID_AMOUNT = "INVALID_AMOUNT"
    INSUFFICIENT_BALANCE = "INSUFFICIENT_BALANCE"
    HOST_REJECTED = "HOST_REJECTED"
    TRANSPORT_ERROR = "TRANSPORT_ERROR"
    IN_PROGRESS = "IN_PROGRESS"
    NOT_STAFF = "NOT_STAFF"
    INVALID_RESPONSE = "INVALID_RESPONSE"
    INVALID_STATUS = "INVALID_STATUS"
    INVALID_TAB = "INVALID_TAB"

    @property
    def is_local(self) -> bool:
        return self in _LOCAL_REASONS


_LOCAL_REASONS = {
    FailureReason.EMPTY_CART,
    FailureReason.MISSING_NAME,
    FailureReason.INVALID_AMOUNT,
    FailureReason.INSUFFICIENT_BALANCE,
    FailureReason.IN_PROGRESS,
    FailureReason.NOT_STAFF,
    FailureReason.INVALID_STATUS,
    FailureReason.INVALID_TAB,
}


@dataclass(frozen=True)
class PanelServiceError(RuntimeError):
    message: str
    reason: FailureReason
    details: str | None = None

    def __str__(self) -> str:
        return self.message
