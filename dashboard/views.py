import logging

from django.contrib.auth import get_user_model
from django.db.models import Q
from django.shortcuts import get_object_or_404
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import generics
from rest_framework.exceptions import ValidationError
from rest_framework.views import APIView

from backend.responses import api_response
from catalog.models import Product
from catalog.serializers import ProductSerializer
from orders.filters import OrderFilter
from orders.models import Order
from orders.serializers import (
    OrderDetailSerializer,
    OrderSerializer,
    OrderStatusUpdateSerializer,
)
from orders.state import set_fulfillment_status
from payments.services.payment_update_service import refund_order
from users.permissions import IsAdmin
from users.serializers import UserSerializer

from .services import dashboard_stats

logger = logging.getLogger(__name__)

User = get_user_model()


class DashboardView(APIView):
    permission_classes = [IsAdmin]

    def get(self, request):
        stats = dashboard_stats()
        stats["recent_orders"] = OrderSerializer(stats["recent_orders"], many=True).data
        return api_response(data=stats)


class AdminOrderListView(generics.ListAPIView):
    serializer_class = OrderSerializer
    permission_classes = [IsAdmin]
    filter_backends = [DjangoFilterBackend]
    filterset_class = OrderFilter

    def get_queryset(self):
        return Order.objects.select_related(
            "user", "shipping_address"
        ).prefetch_related("items__product")


def admin_order(pk):
    return get_object_or_404(
        Order.objects.select_related("user", "shipping_address"), pk=pk
    )


class AdminOrderStatusView(APIView):
    permission_classes = [IsAdmin]

    def put(self, request, pk):
        order = admin_order(pk)
        serializer = OrderStatusUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        set_fulfillment_status(
            order,
            data["status"],
            description=data.get("description", ""),
            location=data.get("location"),
        )
        logger.info(f"[Admin] User {request.user.id} set {order.order_number} to {data['status']}")
        return api_response(
            data=OrderDetailSerializer(admin_order(pk)).data,
            message="Order status updated successfully",
        )


class AdminOrderRefundView(APIView):
    permission_classes = [IsAdmin]

    def post(self, request, pk):
        order = refund_order(admin_order(pk))
        logger.info(f"[Admin] User {request.user.id} refunded {order.order_number}")
        return api_response(
            data=OrderDetailSerializer(admin_order(pk)).data,
            message="Order refunded successfully",
        )


class AdminProductListView(generics.ListAPIView):
    serializer_class = ProductSerializer
    permission_classes = [IsAdmin]
    filter_backends = []

    def get_queryset(self):
        queryset = Product.objects.select_related("category").prefetch_related(
            "images", "reviews"
        )
        search = self.request.query_params.get("search")
        if search:
            queryset = queryset.filter(
                Q(name__icontains=search)
                | Q(sku__icontains=search)
                | Q(description__icontains=search)
            )
        return queryset


class AdminUserListView(generics.ListAPIView):
    serializer_class = UserSerializer
    permission_classes = [IsAdmin]
    filter_backends = []

    def get_queryset(self):
        queryset = User.objects.all().order_by("-created_at")
        role = self.request.query_params.get("role")
        if role:
            queryset = queryset.filter(role=role)
        return queryset


class AdminUserToggleStatusView(APIView):
    permission_classes = [IsAdmin]

    def put(self, request, pk):
        user = get_object_or_404(User, pk=pk)
        if user.pk == request.user.pk:
            raise ValidationError("You cannot deactivate your own account")

        user.is_active = not user.is_active
        user.save(update_fields=["is_active", "updated_at"])
        logger.info(f"[Admin] User {user.id} is_active={user.is_active}")
        return api_response(
            data=UserSerializer(user).data,
            message=f"User {'activated' if user.is_active else 'deactivated'} successfully",
        )
