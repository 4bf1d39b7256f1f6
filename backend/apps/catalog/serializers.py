from typing import Optional

from rest_framework import serializers

from .config import CatalogConfig
from .pagination import PRODUCT_SORT_FIELDS


class CategorySerializer(serializers.Serializer):
    categoryId = serializers.IntegerField(source="category_id", read_only=True)
    categoryName = serializers.CharField(source="category_name", max_length=100)

    def to_representation(self, instance):
        if instance is None:
            return None
        # Dataclass DTOs are read directly
        if hasattr(instance, "__dataclass_fields__"):
            return {
                "categoryId": instance.category_id,
                "categoryName": instance.category_name,
            }
        return super().to_representation(instance)


class ProductReadSerializer(serializers.Serializer):
    # Matches ProductDTO shapes used for responses
    productId = serializers.IntegerField()
    productName = serializers.CharField()
    description = serializers.CharField()
    quantity = serializers.IntegerField()
    price = serializers.CharField()
    discount = serializers.CharField()
    specialPrice = serializers.CharField()
    image = serializers.CharField()
    categoryId = serializers.IntegerField(allow_null=True)
    categoryName = serializers.CharField(allow_null=True)

    def to_representation(self, instance):
        if instance is None:
            return None
        if hasattr(instance, "__dataclass_fields__"):
            return {
                "productId": instance.product_id,
                "productName": instance.product_name,
                "description": instance.description,
                "quantity": instance.quantity,
                "price": instance.price,
                "discount": instance.discount,
                "specialPrice": instance.special_price,
                "image": instance.image,
                "categoryId": instance.category_id,
                "categoryName": instance.category_name,
            }
        return super().to_representation(instance)


class ProductWriteSerializer(serializers.Serializer):
    # productId, specialPrice and image are server-assigned and not accepted here
    productName = serializers.CharField(source="product_name", max_length=255)
    description = serializers.CharField(allow_blank=True, required=False, default="")
    quantity = serializers.IntegerField(min_value=0, required=False, default=0)
    price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0)
    discount = serializers.DecimalField(
        max_digits=5, decimal_places=2, min_value=0, max_value=100, required=False, default=0
    )


class ProductImageSerializer(serializers.Serializer):
    image = serializers.FileField(allow_empty_file=False)


class PageEnvelopeSerializer(serializers.Serializer):
    """Renders ``CategoryResponse`` / ``ProductResponse`` dataclasses."""

    item_serializer_class = serializers.Serializer

    pageNumber = serializers.IntegerField()
    pageSize = serializers.IntegerField()
    totalElements = serializers.IntegerField()
    totalPages = serializers.IntegerField()
    lastPage = serializers.BooleanField()

    def to_representation(self, instance):
        return {
            "content": self.item_serializer_class(instance.content, many=True).data,
            "pageNumber": instance.page_number,
            "pageSize": instance.page_size,
            "totalElements": instance.total_elements,
            "totalPages": instance.total_pages,
            "lastPage": instance.last_page,
        }


class CategoryResponseSerializer(PageEnvelopeSerializer):
    item_serializer_class = CategorySerializer
    content = CategorySerializer(many=True)


class ProductResponseSerializer(PageEnvelopeSerializer):
    item_serializer_class = ProductReadSerializer
    content = ProductReadSerializer(many=True)


class PageQuerySerializer(serializers.Serializer):
    """Validates ?pageNo=&pageSize=&sortBy=&sortDir= against the catalog page size limit."""

    pageNo = serializers.IntegerField(min_value=0, required=False)
    pageSize = serializers.IntegerField(min_value=1, required=False)
    sortBy = serializers.ChoiceField(choices=sorted(PRODUCT_SORT_FIELDS), required=False)
    sortDir = serializers.CharField(required=False)

    def __init__(self, *args, config: Optional[CatalogConfig] = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.config = config or CatalogConfig.from_settings()

    def validate_pageSize(self, value):
        if value > self.config.max_page_size:
            raise serializers.ValidationError(
                f"Ensure this value is less than or equal to {self.config.max_page_size}."
            )
        return value

    def validate(self, attrs):
        # missing values stay None; ProductService.page_request fills the defaults
        return {
            "page_number": attrs.get("pageNo"),
            "page_size": attrs.get("pageSize"),
            "sort_by": attrs.get("sortBy"),
            "sort_dir": attrs.get("sortDir"),
        }
