from django.urls import path

from .views import (
    CategoryDetailView,
    CategoryListCreateView,
    ProductDetailView,
    ProductListCreateView,
    ProductReviewListView,
    ReviewApproveView,
    ReviewCreateView,
    ReviewDeleteView,
)

product_urlpatterns = [
    path("", ProductListCreateView.as_view(), name="product-list"),
    path("<int:pk>/", ProductDetailView.as_view(), name="product-detail"),
]

category_urlpatterns = [
    path("", CategoryListCreateView.as_view(), name="category-list"),
    path("<int:pk>/", CategoryDetailView.as_view(), name="category-detail"),
]

review_urlpatterns = [
    path("", ReviewCreateView.as_view(), name="review-create"),
    path(
        "product/<int:product_id>/",
        ProductReviewListView.as_view(),
        name="product-reviews",
    ),
    path("<int:pk>/approve/", ReviewApproveView.as_view(), name="review-approve"),
    path("<int:pk>/", ReviewDeleteView.as_view(), name="review-delete"),
]
