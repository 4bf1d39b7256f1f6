from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, Generic, List, Sequence, TypeVar

T = TypeVar("T")

# Public sort keys accepted in ?sortBy= mapped to Product model fields
PRODUCT_SORT_FIELDS: Dict[str, str] = {
    "productId": "id",
    "productName": "name",
    "description": "description",
    "quantity": "quantity",
    "price": "price",
    "discount": "discount",
    "specialPrice": "special_price",
    "image": "image",
}


@dataclass(frozen=True)
class PageRequest:
    """Zero-based page request with a single sort key."""

    page_number: int
    page_size: int
    sort_by: str = "productId"
    sort_dir: str = "asc"

    def __post_init__(self):
        if self.page_number < 0:
            raise ValueError("page_number must be >= 0")
        if self.page_size < 1:
            raise ValueError("page_size must be >= 1")

    @property
    def ascending(self) -> bool:
        return (self.sort_dir or "").lower() == "asc"

    @property
    def offset(self) -> int:
        return self.page_number * self.page_size

    def ordering(self, field_map: Dict[str, str] = PRODUCT_SORT_FIELDS) -> List[str]:
        field = field_map.get(self.sort_by, self.sort_by)
        primary = field if self.ascending else f"-{field}"
        # pk tie-breaker keeps slices stable between pages
        if field in ("id", "pk"):
            return [primary]
        return [primary, "id" if self.ascending else "-id"]


@dataclass
class Page(Generic[T]):
    items: List[T]
    number: int
    size: int
    total_elements: int

    @property
    def total_pages(self) -> int:
        if self.total_elements == 0:
            return 0
        return math.ceil(self.total_elements / self.size)

    @property
    def is_last(self) -> bool:
        return self.number + 1 >= self.total_pages


def paginate(queryset: Any, page_request: PageRequest) -> Page:
    """Slice an ordered queryset (or list) into one ``Page``.

    Pages past the end come back empty but keep the real totals.
    """
    ordering = page_request.ordering()
    if hasattr(queryset, "order_by"):
        queryset = queryset.order_by(*ordering)
        total = queryset.count()
    else:
        total = len(queryset)
    start = page_request.offset
    items: Sequence[Any] = queryset[start:start + page_request.page_size] if start < total else []
    return Page(
        items=list(items),
        number=page_request.page_number,
        size=page_request.page_size,
        total_elements=total,
    )
