from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Dict

from .exceptions import InvalidCommandError


def _to_decimal(field: str, value: Any, default: str = "0") -> Decimal:
    # missing values take the default; malformed ones are rejected
    if value is None or value == "":
        return Decimal(default)
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value).strip())
        except (InvalidOperation, ValueError) as exc:
            raise InvalidCommandError(field, value, "number") from exc
    if not result.is_finite():
        raise InvalidCommandError(field, value, "number")
    return result


def _to_int(field: str, value: Any, default: int = 0) -> int:
    if value is None or value == "":
        return default
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise InvalidCommandError(field, value, "integer") from exc


# Category Command
@dataclass
class CategoryCommand:
    name: str

    @staticmethod
    def from_raw(payload: Dict[str, Any]):
        data = dict(payload or {})
        name = data.get("category_name", data.get("categoryName", ""))
        return CategoryCommand(name=str(name or "").strip())


# Product Commands
@dataclass
class ProductCreateCommand:
    name: str
    description: str
    quantity: int
    price: Decimal
    discount: Decimal

    @staticmethod
    def from_raw(payload: Dict[str, Any]):
        data = dict(payload or {})
        # server assigned / derived values are never taken from the client
        for ignored in ("product_id", "productId", "special_price", "specialPrice", "image"):
            data.pop(ignored, None)
        return ProductCreateCommand(
            name=str(data.get("product_name", data.get("productName", ""))).strip(),
            description=str(data.get("description") or "").strip(),
            quantity=_to_int("quantity", data.get("quantity")),
            price=_to_decimal("price", data.get("price")),
            discount=_to_decimal("discount", data.get("discount")),
        )


@dataclass
class ProductUpdateCommand(ProductCreateCommand):
    product_id: int = 0

    @staticmethod
    def from_raw(product_id: int, payload: Dict[str, Any]):  # type: ignore[override]
        base = ProductCreateCommand.from_raw(payload)
        return ProductUpdateCommand(
            name=base.name,
            description=base.description,
            quantity=base.quantity,
            price=base.price,
            discount=base.discount,
            product_id=product_id,
        )
