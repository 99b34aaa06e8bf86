from django.db import DatabaseError, transaction
from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.exceptions import ValidationError
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.views import APIView

from backend.responses import api_response
from catalog.models import Product, ProductImage
from catalog.serializers import ProductImageSerializer
from users.permissions import IsAdmin

from .services import (
    delete_image,
    discard_uploads,
    upload_images,
    validate_image_files,
)


class UploadImagesView(APIView):
    permission_classes = [IsAdmin]
    parser_classes = [MultiPartParser, FormParser]

    def post(self, request):
        files = request.FILES.getlist("images")
        validate_image_files(files)
        folder = request.data.get("folder") or "general"

        results = upload_images(files, folder)

        return api_response(
            data=results,
            message=f"{len(results)} image(s) uploaded successfully",
        )


class ProductImagesUploadView(APIView):
    permission_classes = [IsAdmin]
    parser_classes = [MultiPartParser, FormParser]

    def post(self, request, product_id):
        product = get_object_or_404(Product, pk=product_id)
        files = request.FILES.getlist("images")
        validate_image_files(files)

        results = upload_images(files, f"products/{product.id}")

        try:
            with transaction.atomic():
                start = product.images.count()
                images = [
                    ProductImage.objects.create(
                        product=product,
                        url=result["url"],
                        public_id=result["public_id"],
                        alt=f"{product.name} - Image {start + index + 1}",
                        position=start + index,
                    )
                    for index, result in enumerate(results)
                ]
        except DatabaseError:
            discard_uploads(results)
            raise

        return api_response(
            data=ProductImageSerializer(images, many=True).data,
            message=f"{len(images)} product image(s) uploaded successfully",
            status=status.HTTP_201_CREATED,
        )


class DeleteImageView(APIView):
    permission_classes = [IsAdmin]
    parser_classes = [JSONParser]

    def delete(self, request):
        public_id = request.data.get("public_id")
        image_id = request.data.get("image_id")
        if not public_id and not image_id:
            raise ValidationError("public_id or image_id is required")

        with transaction.atomic():
            image = None
            if image_id:
                image = get_object_or_404(ProductImage, pk=image_id)
                public_id = public_id or image.public_id

            if public_id:
                delete_image(public_id)
            if image is not None:
                image.delete()

        return api_response(message="Image deleted successfully")
