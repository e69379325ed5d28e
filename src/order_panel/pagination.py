from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence, TypeVar

from .config import DEFAULT_PAGE_SIZE

T = TypeVar("T")


@dataclass
class PaginationState:
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE


def total_pages(count: int, page_size: int) -> int:
    return math.ceil(count / page_size) if count > 0 else 0


def clamp_page(page: int, count: int, page_size: int) -> int:
    return min(max(1, page), max(1, total_pages(count, page_size)))


def page_slice(items: Sequence[T], page: int, page_size: int) -> list[T]:
    current = clamp_page(page, len(items), page_size)
    start = (current - 1) * page_size
    return list(items[start : start + page_size])


def goto_page(state: PaginationState, page: int, count: int) -> PaginationState:
    state.page = clamp_page(page, count, state.page_size)
    return state


def next_page(state: PaginationState, count: int) -> PaginationState:
    # Step from the clamped page; the stored one may predate a smaller collection.
    return goto_page(state, clamp_page(state.page, count, state.page_size) + 1, count)


def prev_page(state: PaginationState, count: int) -> PaginationState:
    return goto_page(state, clamp_page(state.page, count, state.page_size) - 1, count)
