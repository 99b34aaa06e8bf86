"""Order lifecycle.

Fulfillment and payment are independent enumerations with their own
transition tables. Payment transitions are applied as a single conditional
``UPDATE`` filtered on the legal source states, so a replayed provider
callback matches no rows and changes nothing. Manual fulfillment edits are
only checked against the table when ``ORDER_ENFORCE_MANUAL_TRANSITIONS`` is on.
"""

import logging

from django.conf import settings
from django.utils import timezone
from rest_framework import status
from rest_framework.exceptions import APIException

from .models import Order, OrderStatus, OrderTracking, PaymentStatus

logger = logging.getLogger(__name__)

_CLOSE = {OrderStatus.CANCELLED, OrderStatus.REFUNDED}

FULFILLMENT_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.CONFIRMED} | _CLOSE,
    OrderStatus.CONFIRMED: {OrderStatus.PROCESSING} | _CLOSE,
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED} | _CLOSE,
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED} | _CLOSE,
    OrderStatus.DELIVERED: {OrderStatus.REFUNDED},
    OrderStatus.CANCELLED: set(),
    OrderStatus.REFUNDED: set(),
}

PAYMENT_TRANSITIONS = {
    PaymentStatus.PENDING: {PaymentStatus.PAID, PaymentStatus.FAILED},
    PaymentStatus.FAILED: {PaymentStatus.PAID},
    PaymentStatus.PAID: {PaymentStatus.REFUNDED},
    PaymentStatus.REFUNDED: set(),
}


class InvalidTransition(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Invalid status transition."
    default_code = "invalid_transition"


def can_transition(current, target, table=FULFILLMENT_TRANSITIONS):
    return target in table.get(current, set())


def payment_sources(target):
    """Payment states from which ``target`` may be entered."""
    return [source for source, targets in PAYMENT_TRANSITIONS.items() if target in targets]


def record_tracking(order, status, description="", location=None):
    return OrderTracking.objects.create(
        order=order, status=status, description=description, location=location
    )


def set_fulfillment_status(order, new_status, description="", location=None):
    """Manual (admin) fulfillment edit. Always appends a tracking entry."""
    if settings.ORDER_ENFORCE_MANUAL_TRANSITIONS and not can_transition(
        order.status, new_status
    ):
        raise InvalidTransition(
            f"Cannot change order status from {order.status} to {new_status}."
        )

    previous = order.status
    order.status = new_status
    order.save(update_fields=["status", "updated_at"])
    record_tracking(
        order,
        new_status,
        description or f"Order status updated to {new_status}",
        location,
    )
    logger.info(f"[Order] {order.order_number} status {previous} -> {new_status}")
    return order


def transition_payment_status(order, target):
    """Move ``order`` to ``target`` if its current payment state allows it.

    Returns True when this call performed the transition.
    """
    updated = Order.objects.filter(
        pk=order.pk, payment_status__in=payment_sources(target)
    ).update(payment_status=target, updated_at=timezone.now())
    if updated:
        order.payment_status = target
    return bool(updated)


def advance_fulfillment(order, source, target, description=""):
    """Conditional fulfillment move used by payment-driven flows."""
    updated = Order.objects.filter(pk=order.pk, status=source).update(
        status=target, updated_at=timezone.now()
    )
    if updated:
        order.status = target
        record_tracking(order, target, description)
    return bool(updated)
