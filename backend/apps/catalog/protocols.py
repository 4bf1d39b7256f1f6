from __future__ import annotations

from typing import Iterable, Optional, Protocol, TYPE_CHECKING

from .models import Category, Product
from .pagination import Page, PageRequest

if TYPE_CHECKING:
    from django.core.files.uploadedfile import UploadedFile


class CategoryRepositoryProtocol(Protocol):
    def list(self, **filters) -> Iterable[Category]:
        ...

    def get(self, **filters) -> Optional[Category]:
        ...

    def create(self, **data) -> Category:
        ...

    def save(self, category: Category) -> Category:
        ...

    def delete(self, category: Category) -> None:
        ...

    def name_taken(self, name: str, exclude_id: Optional[int] = None) -> bool:
        ...


class ProductRepositoryProtocol(Protocol):
    def get(self, **filters) -> Optional[Product]:
        ...

    def create(self, **data) -> Product:
        ...

    def save(self, product: Product) -> Product:
        ...

    def delete(self, product: Product) -> None:
        ...

    def name_exists_in_category(self, category: Category, name: str) -> bool:
        ...

    def page_all(self, page_request: PageRequest) -> Page[Product]:
        ...

    def page_by_category(
        self, category: Category, page_request: PageRequest
    ) -> Page[Product]:
        ...

    def page_by_name_containing(
        self, keyword: str, page_request: PageRequest
    ) -> Page[Product]:
        ...


class FileServiceProtocol(Protocol):
    def upload_image(self, path: str, image: "UploadedFile") -> str:
        ...
