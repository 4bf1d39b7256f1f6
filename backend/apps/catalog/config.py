from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from django.conf import settings


@dataclass(frozen=True)
class CatalogConfig:
    """Catalog settings handed to services at construction time."""

    image_path: str
    page_number: int = 0
    page_size: int = 50
    max_page_size: int = 1000
    sort_products_by: str = "productId"
    sort_dir: str = "asc"

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> "CatalogConfig":
        return cls(
            image_path=str(raw["IMAGE_PATH"]),
            page_number=int(raw.get("PAGE_NUMBER", 0)),
            page_size=int(raw.get("PAGE_SIZE", 50)),
            max_page_size=int(raw.get("MAX_PAGE_SIZE", 1000)),
            sort_products_by=str(raw.get("SORT_PRODUCTS_BY", "productId")),
            sort_dir=str(raw.get("SORT_DIR", "asc")),
        )

    @classmethod
    def from_settings(cls, overrides: Optional[Mapping[str, Any]] = None) -> "CatalogConfig":
        raw = dict(getattr(settings, "CATALOG", {}))
        raw.setdefault("IMAGE_PATH", str(settings.BASE_DIR / "images"))
        raw.update(overrides or {})
        return cls.from_mapping(raw)
