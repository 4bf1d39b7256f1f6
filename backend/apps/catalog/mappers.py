from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable, List, Optional

from .dtos import CategoryDTO, ProductDTO
from .models import Category, Product
from .pagination import Page

TWO_PLACES = Decimal("0.01")


def format_decimal(value: Any) -> str:
    """Render a money/percentage value with exactly two decimal places."""
    if value is None:
        value = 0
    return str(Decimal(str(value)).quantize(TWO_PLACES, rounding=ROUND_HALF_UP))


class CategoryMapper:
    @staticmethod
    def to_dto(cat: Category) -> CategoryDTO:
        return CategoryDTO(category_id=cat.id, category_name=cat.name)

    @staticmethod
    def many_to_dto(categories: Iterable[Category]) -> List[CategoryDTO]:
        return [CategoryMapper.to_dto(c) for c in categories]


class ProductMapper:
    @staticmethod
    def to_dto(product: Product, *, category: Optional[Category] = None) -> ProductDTO:
        """Map a product; ``category`` fills the denormalized categoryId/categoryName."""
        return ProductDTO(
            product_id=product.id,
            product_name=product.name,
            description=product.description,
            quantity=product.quantity,
            price=format_decimal(product.price),
            discount=format_decimal(product.discount),
            special_price=format_decimal(product.special_price),
            image=product.image,
            category_id=category.id if category is not None else None,
            category_name=category.name if category is not None else None,
        )

    @staticmethod
    def to_enriched_dto(product: Product) -> ProductDTO:
        return ProductMapper.to_dto(product, category=product.category)

    @staticmethod
    def many_to_dto(
        products: Iterable[Product], *, category: Optional[Category] = None
    ) -> List[ProductDTO]:
        return [ProductMapper.to_dto(p, category=category) for p in products]

    @staticmethod
    def many_to_enriched_dto(products: Iterable[Product]) -> List[ProductDTO]:
        return [ProductMapper.to_enriched_dto(p) for p in products]


class PageMapper:
    """Copies page metadata from a repository ``Page`` onto a response envelope."""

    @staticmethod
    def to_response(page: Page, content: List[Any], response_cls):
        return response_cls(
            content=content,
            page_number=page.number,
            page_size=page.size,
            total_elements=page.total_elements,
            total_pages=page.total_pages,
            last_page=page.is_last,
        )
