from __future__ import annotations

from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer, field_validator
from pydantic.alias_generators import to_camel

# Decimal in memory, JSON number on the wire.
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]

CATEGORY_ALIASES = {"utils": "utility"}


class OrderStatus(str, Enum):
    PENDING = "pending"
    IN_PREPARATION = "in_preparation"
    COMPLETED = "completed"


STATUS_ALIASES = {
    "pendente": OrderStatus.PENDING,
    "em_preparo": OrderStatus.IN_PREPARATION,
    "concluido": OrderStatus.COMPLETED,
}

OPEN_STATUSES = frozenset({OrderStatus.PENDING, OrderStatus.IN_PREPARATION})


def normalize_status(value: Any) -> Any:
    if isinstance(value, str):
        key = value.strip().lower()
        return STATUS_ALIASES.get(key, key)
    return value


class HostModel(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True, alias_generator=to_camel)


class CatalogItem(HostModel):
    model_config = ConfigDict(frozen=True)

    index: str
    label: str
    category: str = Field(default="", alias="type")
    price: Money = Field(ge=0)

    @field_validator("index", mode="before")
    @classmethod
    def _index_as_text(cls, value: Any) -> Any:
        return str(value) if isinstance(value, int) else value

    @field_validator("category", mode="before")
    @classmethod
    def _normalize_category(cls, value: Any) -> Any:
        if value is None:
            return ""
        if isinstance(value, str):
            key = value.strip().lower()
            return CATEGORY_ALIASES.get(key, key)
        return value


class CartLine(CatalogItem):
    quantity: int = Field(ge=1)

    @property
    def subtotal(self) -> Decimal:
        return self.price * self.quantity

    @classmethod
    def from_item(cls, item: CatalogItem, quantity: int) -> "CartLine":
        return cls(**item.model_dump(), quantity=quantity)


class OrderDraft(HostModel):
    name: str
    items: list[CartLine]
    total: Money
    status: OrderStatus = OrderStatus.PENDING
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class Order(HostModel):
    id: str
    name: str = ""
    items: list[CartLine] = Field(default_factory=list)
    total: Money = Decimal("0")
    status: OrderStatus = OrderStatus.PENDING
    timestamp: datetime | None = None
    player_id: int | str | None = None
    player_name: str | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_text(cls, value: Any) -> Any:
        return str(value) if isinstance(value, int) else value

    @field_validator("status", mode="before")
    @classmethod
    def _status_aliases(cls, value: Any) -> Any:
        return normalize_status(value)

    @property
    def is_open(self) -> bool:
        return self.status in OPEN_STATUSES

    def local_date(self) -> date | None:
        if self.timestamp is None:
            return None
        return self.timestamp.astimezone().date()


class SubmitOrderAck(HostModel):
    id: str | None = None
    success: bool | None = None
    error: str | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_text(cls, value: Any) -> Any:
        return str(value) if isinstance(value, int) else value

    @property
    def rejected(self) -> bool:
        return self.success is False or bool(self.error)


class StatusUpdateRequest(HostModel):
    order_id: str
    status: OrderStatus


class ActionResponse(HostModel):
    success: bool = False
    error: str | None = None


class WithdrawRequest(HostModel):
    amount: Money


class DashboardStats(HostModel):
    total_revenue: Money = Decimal("0")
    today_revenue: Money = Decimal("0")
    month_revenue: Money = Decimal("0")
    total_orders: int = 0
    pending_orders: int = 0
    in_progress_orders: int = 0
    completed_orders: int = 0
    average_order_value: Money = Decimal("0")


class BalanceResponse(HostModel):
    balance: Money = Decimal("0")

    @field_validator("balance", mode="before")
    @classmethod
    def _missing_is_zero(cls, value: Any) -> Any:
        if value is None or value == "":
            return Decimal("0")
        return value
