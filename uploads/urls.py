from django.urls import path

from .views import DeleteImageView, ProductImagesUploadView, UploadImagesView

urlpatterns = [
    path("images/", UploadImagesView.as_view(), name="upload-images"),
    path(
        "product-images/<int:product_id>/",
        ProductImagesUploadView.as_view(),
        name="upload-product-images",
    ),
    path("delete-image/", DeleteImageView.as_view(), name="delete-image"),
]
