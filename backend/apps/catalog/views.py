from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.api.schemas import ErrorResponseSerializer, MessageResponseSerializer
from apps.api.utils import message_response
from apps.common import get_logger
from .container import build_category_service, build_product_service
from .pagination import PageRequest
from .serializers import (
    CategoryResponseSerializer,
    CategorySerializer,
    PageQuerySerializer,
    ProductImageSerializer,
    ProductReadSerializer,
    ProductResponseSerializer,
    ProductWriteSerializer,
)

logger = get_logger(__name__).bind(component="catalog", layer="view")

ERROR_404 = OpenApiResponse(response=ErrorResponseSerializer)
ERROR_400 = OpenApiResponse(response=ErrorResponseSerializer)
ERROR_409 = OpenApiResponse(response=ErrorResponseSerializer)

PAGE_PARAMETERS = [
    OpenApiParameter("pageNo", int, description="Zero-based page number"),
    OpenApiParameter("pageSize", int, description="Items per page"),
    OpenApiParameter("sortBy", str, description="Sort key, e.g. productId, productName, price"),
    OpenApiParameter("sortDir", str, description="'asc' for ascending, anything else descending"),
]


class PageQueryMixin:
    """Binds the pagination query parameters; the service fills in its defaults."""

    def page_request(self, request) -> PageRequest:
        query = PageQuerySerializer(
            data=request.query_params, config=self.service.config
        )
        query.is_valid(raise_exception=True)
        return self.service.page_request(**query.validated_data)


@extend_schema(tags=["Categories"])
class CategoryListView(APIView):
    service = build_category_service()
    log = logger.bind(view="CategoryListView")

    @extend_schema(
        operation_id="categories_list",
        summary="List categories",
        responses={200: CategoryResponseSerializer},
    )
    def get(self, request):
        self.log.debug("Listing categories")
        data = self.service.get_all_categories()
        return Response(CategoryResponseSerializer(data).data)

    @extend_schema(
        summary="Create category",
        request=CategorySerializer,
        responses={201: CategorySerializer, 400: ERROR_400, 409: ERROR_409},
    )
    def post(self, request):
        serializer = CategorySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        dto = self.service.create_category(serializer.validated_data)
        self.log.info("Category created via API", category_id=dto.category_id)
        return Response(CategorySerializer(dto).data, status=status.HTTP_201_CREATED)


@extend_schema(tags=["Categories"])
class CategoryDetailView(APIView):
    service = build_category_service()
    log = logger.bind(view="CategoryDetailView")

    @extend_schema(
        summary="Replace category",
        request=CategorySerializer,
        responses={200: CategorySerializer, 400: ERROR_400, 404: ERROR_404, 409: ERROR_409},
    )
    def put(self, request, category_id: int):
        serializer = CategorySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        self.log.info("Replacing category", category_id=category_id)
        dto = self.service.update_category(serializer.validated_data, category_id)
        return Response(CategorySerializer(dto).data)


@extend_schema(tags=["Categories"])
class CategoryAdminView(APIView):
    service = build_category_service()
    log = logger.bind(view="CategoryAdminView")

    @extend_schema(
        summary="Delete category",
        description="Deletes the category together with all of its products.",
        responses={200: MessageResponseSerializer, 404: ERROR_404},
    )
    def delete(self, request, category_id: int):
        self.log.info("Deleting category", category_id=category_id)
        message = self.service.delete_category(category_id)
        return message_response(message)


@extend_schema(tags=["Products"])
class CategoryProductCreateView(APIView):
    service = build_product_service()
    log = logger.bind(view="CategoryProductCreateView")

    @extend_schema(
        summary="Add product to category",
        request=ProductWriteSerializer,
        responses={201: ProductReadSerializer, 400: ERROR_400, 404: ERROR_404, 409: ERROR_409},
    )
    def post(self, request, category_id: int):
        serializer = ProductWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        self.log.info(
            "Adding product via API",
            category_id=category_id,
            name=serializer.validated_data.get("product_name"),
        )
        dto = self.service.add_product(category_id, serializer.validated_data)
        return Response(ProductReadSerializer(dto).data, status=status.HTTP_201_CREATED)


@extend_schema(tags=["Products"])
class ProductListView(PageQueryMixin, APIView):
    service = build_product_service()
    log = logger.bind(view="ProductListView")

    @extend_schema(
        operation_id="products_list",
        summary="List products",
        parameters=PAGE_PARAMETERS,
        responses={200: ProductResponseSerializer, 400: ERROR_400},
    )
    def get(self, request):
        page_request = self.page_request(request)
        self.log.debug("Handling product list request", page=page_request.page_number)
        data = self.service.get_all_products(page_request)
        return Response(ProductResponseSerializer(data).data)


@extend_schema(tags=["Products"])
class CategoryProductListView(PageQueryMixin, APIView):
    service = build_product_service()
    log = logger.bind(view="CategoryProductListView")

    @extend_schema(
        summary="List products of a category",
        parameters=PAGE_PARAMETERS,
        responses={200: ProductResponseSerializer, 400: ERROR_400, 404: ERROR_404},
    )
    def get(self, request, category_id: int):
        page_request = self.page_request(request)
        self.log.debug("Handling category product list request", category_id=category_id)
        data = self.service.search_by_category(category_id, page_request)
        return Response(ProductResponseSerializer(data).data)


@extend_schema(tags=["Products"])
class ProductKeywordSearchView(PageQueryMixin, APIView):
    service = build_product_service()
    log = logger.bind(view="ProductKeywordSearchView")

    @extend_schema(
        summary="Search products by name",
        description="Case-insensitive substring match on the product name. Answers 302 Found.",
        parameters=PAGE_PARAMETERS,
        responses={302: ProductResponseSerializer, 400: ERROR_400},
    )
    def get(self, request, keyword: str):
        page_request = self.page_request(request)
        self.log.debug("Handling keyword search", keyword=keyword)
        data = self.service.search_product_by_keyword(keyword, page_request)
        return Response(ProductResponseSerializer(data).data, status=status.HTTP_302_FOUND)


@extend_schema(tags=["Products"])
class ProductAdminDetailView(APIView):
    service = build_product_service()
    log = logger.bind(view="ProductAdminDetailView")

    @extend_schema(
        summary="Update product",
        request=ProductWriteSerializer,
        responses={200: ProductReadSerializer, 400: ERROR_400, 404: ERROR_404},
    )
    def put(self, request, product_id: int):
        serializer = ProductWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        self.log.info("Updating product", product_id=product_id)
        dto = self.service.update_product(serializer.validated_data, product_id)
        return Response(ProductReadSerializer(dto).data)

    @extend_schema(
        summary="Delete product",
        responses={200: ProductReadSerializer, 404: ERROR_404},
    )
    def delete(self, request, product_id: int):
        self.log.info("Deleting product", product_id=product_id)
        dto = self.service.delete_product(product_id)
        return Response(ProductReadSerializer(dto).data)


@extend_schema(tags=["Products"])
class ProductImageView(APIView):
    parser_classes = [MultiPartParser, FormParser]
    service = build_product_service()
    log = logger.bind(view="ProductImageView")

    @extend_schema(
        summary="Replace product image",
        request={"multipart/form-data": ProductImageSerializer},
        responses={200: ProductReadSerializer, 400: ERROR_400, 404: ERROR_404},
    )
    def put(self, request, product_id: int):
        serializer = ProductImageSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        image = serializer.validated_data["image"]
        self.log.info("Uploading product image", product_id=product_id, original_name=image.name)
        dto = self.service.update_product_image(product_id, image)
        return Response(ProductReadSerializer(dto).data)
