from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, List, TypeVar

from pharma_ledger.core.errors import NotFoundError, ValidationError

T = TypeVar("T")


@dataclass(frozen=True)
class Page(Generic[T]):
    total: int
    offset: int
    limit: int
    items: List[T]


def check_page(offset: int, limit: int, max_page_size: int) -> None:
    if offset < 0:
        raise ValidationError("offset must be >= 0.")
    if limit < 1 or limit > max_page_size:
        raise ValidationError(f"limit must be between 1 and {max_page_size}.")


def check_index(index: int, count: int, *, what: str) -> None:
    if index < 0 or index >= count:
        raise NotFoundError(f"{what} index {index} out of range (count={count}).")
