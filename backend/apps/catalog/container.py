from __future__ import annotations

from typing import Optional

from .config import CatalogConfig
from .repositories import CategoryRepository, ProductRepository
from .services import CategoryService, ProductService
from .storage import FileService


def build_product_service(*, config: Optional[CatalogConfig] = None) -> ProductService:
    return ProductService(
        products=ProductRepository(),
        categories=CategoryRepository(),
        files=FileService(),
        config=config or CatalogConfig.from_settings(),
    )


def build_category_service() -> CategoryService:
    return CategoryService(categories=CategoryRepository())
