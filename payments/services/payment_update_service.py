import logging

from django.db import transaction

from cart.models import CartItem
from orders.models import Order, OrderStatus, PaymentStatus
from orders.state import (
    FULFILLMENT_TRANSITIONS,
    InvalidTransition,
    advance_fulfillment,
    record_tracking,
    transition_payment_status,
)
from payments.emails import send_payment_success_email

from .stripe_gateway import refund_payment_intent

logger = logging.getLogger(__name__)


def find_order_for_intent(payment_intent_id):
    if not payment_intent_id:
        return None
    return Order.objects.filter(payment_intent_id=payment_intent_id).first()


def mark_payment_succeeded(payment_intent_id):
    """Apply a "succeeded" outcome. Replays leave the order and cart untouched."""
    order = find_order_for_intent(payment_intent_id)
    if order is None:
        logger.warning(f"[Payment Update] No order for payment intent {payment_intent_id}")
        return None

    with transaction.atomic():
        if not transition_payment_status(order, PaymentStatus.PAID):
            logger.info(
                f"[Payment Update] Order {order.order_number} already "
                f"{order.payment_status}, skipping"
            )
            return order

        advance_fulfillment(
            order, OrderStatus.PENDING, OrderStatus.CONFIRMED, "Payment received"
        )
        cleared, _ = CartItem.objects.filter(user_id=order.user_id).delete()
        transaction.on_commit(
            lambda: send_payment_success_email.delay(order.id), robust=True
        )

    logger.info(
        f"[Payment Update] Order {order.order_number} PAID, cleared {cleared} cart rows"
    )
    order.refresh_from_db()
    return order


def mark_payment_failed(payment_intent_id):
    order = find_order_for_intent(payment_intent_id)
    if order is None:
        logger.warning(f"[Payment Update] No order for payment intent {payment_intent_id}")
        return None

    if transition_payment_status(order, PaymentStatus.FAILED):
        logger.info(f"[Payment Update] Order {order.order_number} payment FAILED")
    order.refresh_from_db()
    return order


def refund_order(order):
    """Refund a paid order through Stripe and mark it REFUNDED."""
    if order.payment_status != PaymentStatus.PAID:
        raise InvalidTransition(
            f"Only paid orders can be refunded (payment status is {order.payment_status})."
        )
    if not order.payment_intent_id:
        raise InvalidTransition("Order has no payment to refund.")

    refund_payment_intent(order.payment_intent_id)

    with transaction.atomic():
        if transition_payment_status(order, PaymentStatus.REFUNDED):
            if OrderStatus.REFUNDED in FULFILLMENT_TRANSITIONS.get(order.status, set()):
                advance_fulfillment(
                    order, order.status, OrderStatus.REFUNDED, "Payment refunded"
                )
            else:
                record_tracking(order, order.status, "Payment refunded")

    logger.info(f"[Payment Update] Order {order.order_number} refunded")
    order.refresh_from_db()
    return order
