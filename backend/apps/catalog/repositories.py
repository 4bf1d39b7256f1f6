from typing import Optional

from apps.common.repository import GenericRepository
from .models import Category, Product
from .pagination import Page, PageRequest, paginate


class CategoryRepository(GenericRepository[Category]):
    def __init__(self):
        super().__init__(Category)

    def name_taken(self, name: str, exclude_id: Optional[int] = None) -> bool:
        qs = self.model.objects.filter(name=name)
        if exclude_id is not None:
            qs = qs.exclude(id=exclude_id)
        return qs.exists()


class ProductRepository(GenericRepository[Product]):
    def __init__(self):
        super().__init__(Product)

    def queryset(self):
        """Products with their category joined to avoid N+1 during DTO mapping."""
        return self.model.objects.select_related("category")

    def name_exists_in_category(self, category: Category, name: str) -> bool:
        # exact, case-sensitive match
        return self.model.objects.filter(category=category, name=name).exists()

    def page_all(self, page_request: PageRequest) -> Page[Product]:
        return paginate(self.queryset(), page_request)

    def page_by_category(self, category: Category, page_request: PageRequest) -> Page[Product]:
        return paginate(self.queryset().filter(category=category), page_request)

    def page_by_name_containing(self, keyword: str, page_request: PageRequest) -> Page[Product]:
        return paginate(self.queryset().filter(name__icontains=keyword), page_request)
