import logging
from decimal import Decimal

from django.db.models import F
from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.views import APIView

from backend.exceptions import ConflictError
from backend.responses import api_response
from catalog.models import Product

from .models import CartItem, WishlistItem
from .serializers import (
    CartAddSerializer,
    CartItemSerializer,
    CartUpdateSerializer,
    WishlistAddSerializer,
    WishlistItemSerializer,
)

logger = logging.getLogger(__name__)


def cart_items_for(user):
    return (
        CartItem.objects.filter(user=user)
        .select_related("product")
        .prefetch_related("product__images")
    )


class CartView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        items = list(cart_items_for(request.user))
        total = sum((item.line_total for item in items), Decimal("0.00"))
        return api_response(
            data={
                "items": CartItemSerializer(items, many=True).data,
                "total": f"{total:.2f}",
            }
        )

    def delete(self, request):
        CartItem.objects.filter(user=request.user).delete()
        return api_response(message="Cart cleared successfully")


class CartAddView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request):
        serializer = CartAddSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        product = get_object_or_404(
            Product, pk=serializer.validated_data["product_id"], is_active=True
        )
        quantity = serializer.validated_data["quantity"]

        item, created = CartItem.objects.get_or_create(
            user=request.user, product=product, defaults={"quantity": quantity}
        )
        if not created:
            CartItem.objects.filter(pk=item.pk).update(
                quantity=F("quantity") + quantity
            )
            item.refresh_from_db()

        return api_response(
            data=CartItemSerializer(item).data,
            message="Item added to cart",
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        )


class CartItemView(APIView):
    permission_classes = [IsAuthenticated]

    def put(self, request, item_id):
        item = get_object_or_404(CartItem, pk=item_id, user=request.user)
        serializer = CartUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        item.quantity = serializer.validated_data["quantity"]
        item.save(update_fields=["quantity", "updated_at"])
        return api_response(data=CartItemSerializer(item).data)

    def delete(self, request, item_id):
        item = get_object_or_404(CartItem, pk=item_id, user=request.user)
        item.delete()
        return api_response(message="Item removed from cart")


class WishlistView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        items = (
            WishlistItem.objects.filter(user=request.user)
            .select_related("product")
            .prefetch_related("product__images")
        )
        return api_response(data=WishlistItemSerializer(items, many=True).data)


class WishlistAddView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request):
        serializer = WishlistAddSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        product = get_object_or_404(Product, pk=serializer.validated_data["product_id"])

        if WishlistItem.objects.filter(user=request.user, product=product).exists():
            raise ConflictError("Product is already in your wishlist")

        item = WishlistItem.objects.create(user=request.user, product=product)
        return api_response(
            data=WishlistItemSerializer(item).data,
            message="Item added to wishlist",
            status=status.HTTP_201_CREATED,
        )


class WishlistItemView(APIView):
    permission_classes = [IsAuthenticated]

    def delete(self, request, item_id):
        item = get_object_or_404(WishlistItem, pk=item_id, user=request.user)
        item.delete()
        return api_response(message="Item removed from wishlist")
