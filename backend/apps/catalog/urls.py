from django.urls import path
from .views import (
    CategoryAdminView,
    CategoryDetailView,
    CategoryListView,
    CategoryProductCreateView,
    CategoryProductListView,
    ProductAdminDetailView,
    ProductImageView,
    ProductKeywordSearchView,
    ProductListView,
)

urlpatterns = [
	path('public/categories', CategoryListView.as_view(), name='api-categories-list'),
	path('public/categories/<int:category_id>', CategoryDetailView.as_view(), name='api-categories-detail'),
	path('public/categories/<int:category_id>/products', CategoryProductListView.as_view(), name='api-category-products'),
	path('admin/categories/<int:category_id>', CategoryAdminView.as_view(), name='api-categories-admin'),
	path('admin/categories/<int:category_id>/product', CategoryProductCreateView.as_view(), name='api-category-product-create'),
	path('public/products', ProductListView.as_view(), name='api-products-list'),
	path('public/products/keyword/<str:keyword>', ProductKeywordSearchView.as_view(), name='api-products-keyword'),
	path('admin/products/<int:product_id>', ProductAdminDetailView.as_view(), name='api-products-admin'),
	path('products/<int:product_id>/image', ProductImageView.as_view(), name='api-products-image'),
]
