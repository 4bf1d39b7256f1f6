from typing import Generic, Iterable, Optional, Sequence, Type, TypeVar

from django.db import models

T = TypeVar('T', bound=models.Model)


class GenericRepository(Generic[T]):
    """Thin query facade over a model's default manager."""

    def __init__(self, model: Type[T]):
        self.model = model

    def queryset(self) -> models.QuerySet:
        return self.model.objects.all()

    def get(self, **filters) -> Optional[T]:
        return self.queryset().filter(**filters).first()

    def list(self, ordering: Sequence[str] = ('pk',), **filters) -> Iterable[T]:
        return self.queryset().filter(**filters).order_by(*ordering)

    def create(self, **data) -> T:
        return self.model.objects.create(**data)

    def save(self, obj: T) -> T:
        obj.save()
        return obj

    def delete(self, obj: T) -> None:
        obj.delete()
