import logging

from django.shortcuts import get_object_or_404
from rest_framework import generics, status
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import IsAuthenticated
from rest_framework.views import APIView

from backend.responses import api_response

from .models import Order
from .serializers import OrderCreateSerializer, OrderDetailSerializer, OrderSerializer
from .services import create_order

logger = logging.getLogger(__name__)


def order_queryset():
    return Order.objects.select_related("user", "shipping_address").prefetch_related(
        "items__product"
    )


class OrderListCreateView(generics.ListAPIView):
    serializer_class = OrderSerializer
    permission_classes = [IsAuthenticated]

    def get_queryset(self):
        queryset = order_queryset()
        if self.request.user.is_admin:
            return queryset
        return queryset.filter(user=self.request.user)

    def post(self, request):
        serializer = OrderCreateSerializer(data=request.data, context={"request": request})
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        order = create_order(
            user=request.user,
            items=data["items"],
            shipping_address=data.get("shippingAddress"),
            payment_method=data["paymentMethod"],
            coupon_code=data.get("couponCode"),
        )
        order = order_queryset().prefetch_related("tracking").get(pk=order.pk)
        return api_response(
            data=OrderDetailSerializer(order).data,
            message="Order created successfully",
            status=status.HTTP_201_CREATED,
        )


class OrderDetailView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, pk):
        order = get_object_or_404(order_queryset().prefetch_related("tracking"), pk=pk)
        if order.user_id != request.user.id and not request.user.is_admin:
            raise PermissionDenied("Forbidden")
        return api_response(data=OrderDetailSerializer(order).data)
