from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Optional, Union

from django.core.files.uploadedfile import UploadedFile
from django.db import IntegrityError, transaction

from apps.common import get_logger
from .commands import CategoryCommand, ProductCreateCommand, ProductUpdateCommand
from .config import CatalogConfig
from .dtos import CategoryDTO, CategoryResponse, ProductDTO, ProductResponse
from .exceptions import DuplicateResourceError, ResourceNotFoundError
from .mappers import CategoryMapper, PageMapper, ProductMapper
from .models import DEFAULT_PRODUCT_IMAGE, Category, Product
from .pagination import PageRequest
from .protocols import (
    CategoryRepositoryProtocol,
    FileServiceProtocol,
    ProductRepositoryProtocol,
)

logger = get_logger(__name__).bind(component="catalog", layer="service")

HUNDREDTH = Decimal("0.01")


def calculate_special_price(price: Decimal, discount: Decimal) -> Decimal:
    """``price - discount% * price`` rounded half-up to cents."""
    price = Decimal(str(price))
    discount = Decimal(str(discount))
    special = price - (discount * HUNDREDTH) * price
    return special.quantize(HUNDREDTH, rounding=ROUND_HALF_UP)


class CategoryService:
    def __init__(self, categories: CategoryRepositoryProtocol):
        self.categories = categories
        self.logger = logger.bind(service="CategoryService")

    def _get_or_raise(self, category_id: int) -> Category:
        category = self.categories.get(id=category_id)
        if not category:
            self.logger.warning("Category not found", category_id=category_id)
            raise ResourceNotFoundError("Category", "categoryId", category_id)
        return category

    def _duplicate(self, name: str, category_id: Optional[int] = None) -> DuplicateResourceError:
        self.logger.warning(
            "Rejecting duplicate category name", name=name, category_id=category_id
        )
        return DuplicateResourceError("Category", "categoryName", name)

    def _ensure_name_free(self, name: str, exclude_id: Optional[int] = None) -> None:
        if self.categories.name_taken(name, exclude_id=exclude_id):
            raise self._duplicate(name, exclude_id)

    def get_all_categories(self) -> CategoryResponse:
        self.logger.debug("Listing categories")
        content = CategoryMapper.many_to_dto(self.categories.list())
        # Not paginated: the whole list is reported as a single page
        return CategoryResponse(
            content=content,
            page_number=0,
            page_size=len(content),
            total_elements=len(content),
            total_pages=1 if content else 0,
            last_page=True,
        )

    def create_category(
        self, data: Union[Dict[str, Any], CategoryCommand]
    ) -> CategoryDTO:
        cmd = data if isinstance(data, CategoryCommand) else CategoryCommand.from_raw(data)
        self.logger.info("Creating category", name=cmd.name)
        try:
            with transaction.atomic():
                self._ensure_name_free(cmd.name)
                category: Category = self.categories.create(name=cmd.name)
        except IntegrityError as exc:
            raise self._duplicate(cmd.name) from exc
        self.logger.info("Category created", category_id=category.id)
        return CategoryMapper.to_dto(category)

    def update_category(
        self, data: Union[Dict[str, Any], CategoryCommand], category_id: int
    ) -> CategoryDTO:
        cmd = data if isinstance(data, CategoryCommand) else CategoryCommand.from_raw(data)
        self.logger.info("Updating category", category_id=category_id)
        try:
            with transaction.atomic():
                category = self._get_or_raise(category_id)
                self._ensure_name_free(cmd.name, exclude_id=category.id)
                category.name = cmd.name
                self.categories.save(category)
        except IntegrityError as exc:
            raise self._duplicate(cmd.name, category_id) from exc
        self.logger.info("Category updated", category_id=category_id)
        return CategoryMapper.to_dto(category)

    def delete_category(self, category_id: int) -> str:
        self.logger.info("Deleting category", category_id=category_id)
        with transaction.atomic():
            category = self._get_or_raise(category_id)
            # products cascade with their category
            self.categories.delete(category)
        self.logger.info("Category deleted", category_id=category_id)
        return f"Category with categoryId: {category_id} deleted successfully"


class ProductService:
    def __init__(
        self,
        products: ProductRepositoryProtocol,
        categories: CategoryRepositoryProtocol,
        files: FileServiceProtocol,
        config: CatalogConfig,
    ):
        self.products = products
        self.categories = categories
        self.files = files
        self.config = config
        self.logger = logger.bind(service="ProductService")

    def _get_category_or_raise(self, category_id: int) -> Category:
        category = self.categories.get(id=category_id)
        if not category:
            self.logger.warning("Category not found", category_id=category_id)
            raise ResourceNotFoundError("Category", "categoryId", category_id)
        return category

    def _get_product_or_raise(self, product_id: int) -> Product:
        product = self.products.get(id=product_id)
        if not product:
            self.logger.warning("Product not found", product_id=product_id)
            raise ResourceNotFoundError("Product", "productId", product_id)
        return product

    def _duplicate(self, name: str, category_id: int) -> DuplicateResourceError:
        self.logger.warning(
            "Rejecting duplicate product name", category_id=category_id, name=name
        )
        return DuplicateResourceError("Product", "productName", name)

    def page_request(
        self,
        page_number: Optional[int] = None,
        page_size: Optional[int] = None,
        sort_by: Optional[str] = None,
        sort_dir: Optional[str] = None,
    ) -> PageRequest:
        """Build a ``PageRequest``, filling gaps from the catalog defaults."""
        return PageRequest(
            page_number=self.config.page_number if page_number is None else page_number,
            page_size=self.config.page_size if page_size is None else page_size,
            sort_by=sort_by or self.config.sort_products_by,
            sort_dir=sort_dir or self.config.sort_dir,
        )

    def add_product(
        self, category_id: int, data: Union[Dict[str, Any], ProductCreateCommand]
    ) -> ProductDTO:
        cmd = (
            data
            if isinstance(data, ProductCreateCommand)
            else ProductCreateCommand.from_raw(data)
        )
        self.logger.info("Adding product", category_id=category_id, name=cmd.name)
        try:
            with transaction.atomic():
                category = self._get_category_or_raise(category_id)
                if self.products.name_exists_in_category(category, cmd.name):
                    raise self._duplicate(cmd.name, category_id)
                product: Product = self.products.create(
                    name=cmd.name,
                    description=cmd.description,
                    quantity=cmd.quantity,
                    price=cmd.price,
                    discount=cmd.discount,
                    special_price=calculate_special_price(cmd.price, cmd.discount),
                    image=DEFAULT_PRODUCT_IMAGE,
                    category=category,
                )
        except IntegrityError as exc:
            # a concurrent add won the per-category unique constraint
            raise self._duplicate(cmd.name, category_id) from exc
        self.logger.info("Product added", product_id=product.id, category_id=category_id)
        return ProductMapper.to_dto(product, category=category)

    def get_all_products(self, page_request: PageRequest) -> ProductResponse:
        self.logger.debug(
            "Listing products",
            page=page_request.page_number,
            size=page_request.page_size,
            sort_by=page_request.sort_by,
            sort_dir=page_request.sort_dir,
        )
        page = self.products.page_all(page_request)
        content = ProductMapper.many_to_enriched_dto(page.items)
        return PageMapper.to_response(page, content, ProductResponse)

    def search_by_category(
        self, category_id: int, page_request: PageRequest
    ) -> ProductResponse:
        self.logger.debug(
            "Listing products by category",
            category_id=category_id,
            page=page_request.page_number,
            size=page_request.page_size,
            sort_by=page_request.sort_by,
            sort_dir=page_request.sort_dir,
        )
        category = self._get_category_or_raise(category_id)
        page = self.products.page_by_category(category, page_request)
        content = ProductMapper.many_to_dto(page.items, category=category)
        return PageMapper.to_response(page, content, ProductResponse)

    def search_product_by_keyword(
        self, keyword: str, page_request: PageRequest
    ) -> ProductResponse:
        self.logger.debug(
            "Searching products by keyword",
            keyword=keyword,
            page=page_request.page_number,
            size=page_request.page_size,
        )
        page = self.products.page_by_name_containing(keyword, page_request)
        content = ProductMapper.many_to_dto(page.items)
        return PageMapper.to_response(page, content, ProductResponse)

    def update_product(
        self, data: Union[Dict[str, Any], ProductUpdateCommand], product_id: int
    ) -> ProductDTO:
        cmd = (
            data
            if isinstance(data, ProductUpdateCommand)
            else ProductUpdateCommand.from_raw(product_id, data)
        )
        self.logger.info("Updating product", product_id=product_id)
        try:
            with transaction.atomic():
                product = self._get_product_or_raise(product_id)
                product.name = cmd.name
                product.description = cmd.description
                product.quantity = cmd.quantity
                product.price = cmd.price
                product.discount = cmd.discount
                product.special_price = calculate_special_price(product.price, product.discount)
                self.products.save(product)
        except IntegrityError as exc:
            raise self._duplicate(cmd.name, product.category_id) from exc
        self.logger.info("Product updated", product_id=product_id)
        return ProductMapper.to_enriched_dto(product)

    def delete_product(self, product_id: int) -> ProductDTO:
        self.logger.info("Deleting product", product_id=product_id)
        with transaction.atomic():
            product = self._get_product_or_raise(product_id)
            # map before delete() clears the primary key
            dto = ProductMapper.to_enriched_dto(product)
            self.products.delete(product)
        self.logger.info("Product deleted", product_id=product_id)
        return dto

    def update_product_image(self, product_id: int, image: UploadedFile) -> ProductDTO:
        self.logger.info(
            "Updating product image", product_id=product_id, original_name=image.name
        )
        product = self._get_product_or_raise(product_id)
        file_name = self.files.upload_image(self.config.image_path, image)
        product.image = file_name
        self.products.save(product)
        self.logger.info("Product image updated", product_id=product_id, image=file_name)
        return ProductMapper.to_enriched_dto(product)
