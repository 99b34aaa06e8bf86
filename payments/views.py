import logging

from django.shortcuts import get_object_or_404
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import IsAuthenticated
from rest_framework.views import APIView

from backend.exceptions import ConflictError
from backend.responses import api_response
from orders.models import Order, PaymentStatus
from orders.serializers import OrderSerializer

from .serializers import ConfirmPaymentSerializer, CreatePaymentIntentSerializer
from .services.payment_update_service import find_order_for_intent, mark_payment_succeeded
from .services.stripe_gateway import create_payment_intent, retrieve_payment_intent

logger = logging.getLogger(__name__)

PAYMENT_METHODS = [
    {"id": "card", "type": "card", "name": "Credit/Debit Card", "icon": "credit-card"},
    {"id": "paypal", "type": "paypal", "name": "PayPal", "icon": "paypal"},
]


class CreatePaymentIntentView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request):
        serializer = CreatePaymentIntentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        order = None
        amount = data.get("amount")
        if data.get("order_id"):
            order = get_object_or_404(Order, pk=data["order_id"], user=request.user)
            if order.payment_status == PaymentStatus.PAID:
                raise ConflictError("Order is already paid")
            amount = order.total

        intent = create_payment_intent(
            amount,
            currency=data.get("currency"),
            metadata={"user_id": request.user.id, "order_id": order.id if order else ""},
        )

        if order is not None:
            Order.objects.filter(pk=order.pk).update(payment_intent_id=intent.id)
            logger.info(f"[Payments] Order {order.order_number} linked to {intent.id}")

        return api_response(
            data={
                "client_secret": intent.client_secret,
                "payment_intent_id": intent.id,
            }
        )


class ConfirmPaymentView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request):
        serializer = ConfirmPaymentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        intent_id = serializer.validated_data["payment_intent_id"]

        order = find_order_for_intent(intent_id)
        if order and order.user_id != request.user.id and not request.user.is_admin:
            raise PermissionDenied("Forbidden")

        intent = retrieve_payment_intent(intent_id)
        if intent.status == "succeeded":
            order = mark_payment_succeeded(intent_id)

        return api_response(
            data={
                "payment_intent_id": intent.id,
                "status": intent.status,
                "order": OrderSerializer(order).data if order else None,
            }
        )


class PaymentMethodsView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return api_response(data=PAYMENT_METHODS)
