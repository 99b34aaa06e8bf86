import logging
import random
import time
from decimal import ROUND_HALF_UP, Decimal

from django.conf import settings
from django.db import transaction

from .emails import send_order_confirmation_email
from .models import Order, OrderItem, OrderStatus, PaymentStatus
from .state import record_tracking

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")


def to_money(value):
    return Decimal(str(value)).quantize(CENTS, rounding=ROUND_HALF_UP)


def calculate_order_total(items, tax_rate=None, shipping_cost=None):
    """Price a list of ``{"price", "quantity"}`` line items.

    Prices are taken as given (point-in-time snapshot), never re-read from the
    catalog. Negative values are not rejected here.
    """
    rate = Decimal(str(settings.ORDER_TAX_RATE if tax_rate is None else tax_rate))
    shipping = to_money(
        settings.ORDER_SHIPPING_COST if shipping_cost is None else shipping_cost
    )

    subtotal = to_money(
        sum(
            (Decimal(str(item["price"])) * int(item["quantity"]) for item in items),
            Decimal("0"),
        )
    )
    tax = to_money(subtotal * rate)
    total = to_money(subtotal + tax + shipping)

    return {"subtotal": subtotal, "tax": tax, "shipping": shipping, "total": total}


def fits_money_field(value, field):
    """Whether ``value`` fits the precision of a ``DecimalField``."""
    return abs(value) < Decimal(10) ** (field.max_digits - field.decimal_places)


def generate_order_number():
    """``ORD-<ms timestamp>-<3 digits>``. Uniqueness is left to the database."""
    return f"ORD-{int(time.time() * 1000)}-{random.randint(0, 999):03d}"


def create_order(user, items, shipping_address=None, payment_method="", coupon_code=None):
    """Persist an order and its line items in one transaction.

    ``items`` holds ``{"product", "quantity", "price"}`` mappings where
    ``product`` is a ``catalog.Product``.
    """
    totals = calculate_order_total(items)

    with transaction.atomic():
        order = Order.objects.create(
            order_number=generate_order_number(),
            user=user,
            status=OrderStatus.PENDING,
            payment_status=PaymentStatus.PENDING,
            payment_method=payment_method or "",
            coupon_code=coupon_code or None,
            shipping_address=shipping_address,
            **totals,
        )
        OrderItem.objects.bulk_create(
            [
                OrderItem(
                    order=order,
                    product=item["product"],
                    quantity=item["quantity"],
                    price=to_money(item["price"]),
                    total=to_money(Decimal(str(item["price"])) * item["quantity"]),
                )
                for item in items
            ]
        )
        record_tracking(order, OrderStatus.PENDING, "Order placed")
        transaction.on_commit(
            lambda: send_order_confirmation_email.delay(order.id), robust=True
        )

    logger.info(f"[Order] Created {order.order_number} for user {user.id} total={order.total}")
    return order
