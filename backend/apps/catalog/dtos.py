"""DTO dataclasses only. Mapping logic lives in mappers.py."""

from dataclasses import dataclass, field
from typing import Generic, List, Optional, TypeVar

T = TypeVar("T")


@dataclass
class CategoryDTO:
    category_id: int
    category_name: str


@dataclass
class ProductDTO:
    product_id: int
    product_name: str
    description: str
    quantity: int
    price: str
    discount: str
    special_price: str
    image: str
    category_id: Optional[int] = None
    category_name: Optional[str] = None


@dataclass
class PageResponse(Generic[T]):
    content: List[T] = field(default_factory=list)
    page_number: int = 0
    page_size: int = 0
    total_elements: int = 0
    total_pages: int = 0
    last_page: bool = True


@dataclass
class CategoryResponse(PageResponse[CategoryDTO]):
    pass


@dataclass
class ProductResponse(PageResponse[ProductDTO]):
    pass
