from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable

from .models import CartLine, CatalogItem

RESTAURANT_MODE = "restaurant"
UTILITY_MODE = "utility"
MODE_ALIASES = {"utils": UTILITY_MODE}

# Category filters offered per panel mode; "" means every category.
FILTERS_BY_MODE: dict[str, tuple[str, ...]] = {
    RESTAURANT_MODE: ("", "food", "drink", "candy"),
    UTILITY_MODE: ("utility",),
}
DEFAULT_FILTER_BY_MODE: dict[str, str] = {
    RESTAURANT_MODE: "",
    UTILITY_MODE: "utility",
}


def normalize_mode(mode: str | None) -> str:
    if mode is None or not mode.strip():
        return RESTAURANT_MODE
    key = mode.strip().lower()
    return MODE_ALIASES.get(key, key)


def filters_for_mode(mode: str) -> tuple[str, ...]:
    """Unrecognized modes show no category filters."""
    return FILTERS_BY_MODE.get(mode, ())


@dataclass
class CartManager:
    """Catalog received on panel-open plus the in-progress cart."""

    catalog: list[CatalogItem] = field(default_factory=list)
    lines: list[CartLine] = field(default_factory=list)
    order_name: str = ""
    mode: str = RESTAURANT_MODE
    active_filter: str = ""

    def load_catalog(self, items: Iterable[CatalogItem], mode: str | None = None) -> None:
        self.catalog = list(items)
        self.lines = []
        self.order_name = ""
        self.mode = normalize_mode(mode)
        self.active_filter = DEFAULT_FILTER_BY_MODE.get(self.mode, "")

    def find_item(self, index: str) -> CatalogItem | None:
        return next((item for item in self.catalog if item.index == index), None)

    def available_filters(self) -> tuple[str, ...]:
        return filters_for_mode(self.mode)

    def set_filter(self, category: str) -> bool:
        value = category.strip().lower()
        if value not in self.available_filters():
            return False
        self.active_filter = value
        return True

    def filtered_catalog(self) -> list[CatalogItem]:
        if not self.active_filter:
            return list(self.catalog)
        return [item for item in self.catalog if item.category.lower() == self.active_filter]

    def add_to_cart(self, item: CatalogItem, quantity: int) -> CartLine:
        for position, line in enumerate(self.lines):
            if line.index == item.index:
                merged = line.model_copy(update={"quantity": line.quantity + quantity})
                self.lines[position] = merged
                return merged
        line = CartLine.from_item(item, quantity)
        self.lines.append(line)
        return line

    def set_line_quantity(self, index: str, new_quantity: int) -> None:
        if new_quantity <= 0:
            self.remove_line(index)
            return
        self.lines = [
            line.model_copy(update={"quantity": new_quantity}) if line.index == index else line
            for line in self.lines
        ]

    def remove_line(self, index: str) -> None:
        self.lines = [line for line in self.lines if line.index != index]

    def cart_total(self) -> Decimal:
        return sum((line.price * line.quantity for line in self.lines), Decimal("0"))

    def line_count(self) -> int:
        return sum(line.quantity for line in self.lines)

    def snapshot_lines(self) -> list[CartLine]:
        return [line.model_copy() for line in self.lines]

    def clear(self) -> None:
        self.lines = []
        self.order_name = ""
