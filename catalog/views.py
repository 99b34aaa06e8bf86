import logging

from django.db.models import Count, Q
from django.shortcuts import get_object_or_404
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import filters, generics, status
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.views import APIView

from backend.exceptions import ConflictError
from backend.responses import api_response
from cart.models import WishlistItem
from users.authentication import (
    BearerTokenAuthentication,
    OptionalBearerTokenAuthentication,
)
from users.permissions import IsAdmin

from .filters import ProductFilter
from .models import Category, Product, Review
from .permissions import IsAdminOrReadOnly
from .serializers import CategorySerializer, ProductSerializer, ReviewSerializer

logger = logging.getLogger(__name__)


class OptionalAuthMixin:
    """Anonymous reads, bearer-authenticated writes."""

    def get_authenticators(self):
        if self.request.method in ("GET", "HEAD", "OPTIONS"):
            return [OptionalBearerTokenAuthentication()]
        return [BearerTokenAuthentication()]


class WishlistContextMixin:
    def get_serializer_context(self):
        context = super().get_serializer_context()
        user = self.request.user
        if user and user.is_authenticated:
            context["wishlist_ids"] = set(
                WishlistItem.objects.filter(user=user).values_list(
                    "product_id", flat=True
                )
            )
        return context


def product_queryset():
    return Product.objects.select_related("category").prefetch_related(
        "images", "reviews"
    )


class ProductListCreateView(
    OptionalAuthMixin, WishlistContextMixin, generics.ListCreateAPIView
):
    serializer_class = ProductSerializer
    permission_classes = [IsAdminOrReadOnly]
    filterset_class = ProductFilter
    filter_backends = [DjangoFilterBackend, filters.OrderingFilter]
    ordering_fields = ["name", "price", "created_at", "quantity"]
    ordering = ["-created_at"]

    def get_queryset(self):
        return product_queryset().filter(is_active=True)

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        product = serializer.save()
        logger.info(f"[Catalog] Created product {product.id} ({product.sku})")
        return api_response(
            data=self.get_serializer(product).data,
            status=status.HTTP_201_CREATED,
        )


class ProductDetailView(
    OptionalAuthMixin, WishlistContextMixin, generics.RetrieveUpdateDestroyAPIView
):
    serializer_class = ProductSerializer
    permission_classes = [IsAdminOrReadOnly]

    def get_queryset(self):
        return product_queryset()

    def retrieve(self, request, *args, **kwargs):
        return api_response(data=self.get_serializer(self.get_object()).data)

    def update(self, request, *args, **kwargs):
        product = self.get_object()
        serializer = self.get_serializer(product, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return api_response(data=self.get_serializer(product).data)

    def destroy(self, request, *args, **kwargs):
        product = self.get_object()
        product.delete()
        logger.info(f"[Catalog] Deleted product {kwargs['pk']}")
        return api_response(message="Product deleted successfully")


def category_queryset():
    return (
        Category.objects.select_related("parent")
        .prefetch_related("children")
        .annotate(
            product_count=Count("products", filter=Q(products__is_active=True))
        )
    )


class CategoryListCreateView(OptionalAuthMixin, generics.ListCreateAPIView):
    serializer_class = CategorySerializer
    permission_classes = [IsAdminOrReadOnly]
    pagination_class = None

    def get_queryset(self):
        return category_queryset().filter(is_active=True)

    def list(self, request, *args, **kwargs):
        serializer = self.get_serializer(self.get_queryset(), many=True)
        return api_response(data=serializer.data)

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        category = serializer.save()
        category = category_queryset().get(pk=category.pk)
        return api_response(
            data=self.get_serializer(category).data,
            status=status.HTTP_201_CREATED,
        )


class CategoryDetailView(OptionalAuthMixin, generics.RetrieveUpdateDestroyAPIView):
    serializer_class = CategorySerializer
    permission_classes = [IsAdminOrReadOnly]

    def get_queryset(self):
        return category_queryset()

    def retrieve(self, request, *args, **kwargs):
        category = self.get_object()
        data = self.get_serializer(category).data
        products = product_queryset().filter(category=category, is_active=True)
        data["products"] = ProductSerializer(products, many=True).data
        return api_response(data=data)

    def update(self, request, *args, **kwargs):
        category = self.get_object()
        serializer = self.get_serializer(category, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return api_response(data=self.get_serializer(self.get_object()).data)

    def destroy(self, request, *args, **kwargs):
        self.get_object().delete()
        return api_response(message="Category deleted successfully")


class ProductReviewListView(generics.ListAPIView):
    serializer_class = ReviewSerializer
    authentication_classes = []
    permission_classes = [AllowAny]

    def get_queryset(self):
        return Review.objects.filter(
            product_id=self.kwargs["product_id"], is_approved=True
        ).select_related("user")


class ReviewCreateView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request):
        serializer = ReviewSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        product = get_object_or_404(
            Product, pk=serializer.validated_data.pop("product_id")
        )
        if Review.objects.filter(user=request.user, product=product).exists():
            raise ConflictError("You have already reviewed this product")

        review = serializer.save(user=request.user, product=product)
        logger.info(f"[Catalog] Review {review.id} added to product {product.id}")
        return api_response(
            data=ReviewSerializer(review).data,
            message="Review submitted for approval",
            status=status.HTTP_201_CREATED,
        )


class ReviewApproveView(APIView):
    permission_classes = [IsAdmin]

    def put(self, request, pk):
        review = get_object_or_404(Review, pk=pk)
        review.is_approved = True
        review.save(update_fields=["is_approved", "updated_at"])
        return api_response(data=ReviewSerializer(review).data)


class ReviewDeleteView(APIView):
    permission_classes = [IsAuthenticated]

    def delete(self, request, pk):
        review = get_object_or_404(Review, pk=pk)
        if review.user_id != request.user.id and not request.user.is_admin:
            raise PermissionDenied("Forbidden")
        review.delete()
        return api_response(message="Review deleted successfully")
