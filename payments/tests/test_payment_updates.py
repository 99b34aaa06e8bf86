from decimal import Decimal
from unittest import mock

import pytest
from django.core import mail

from cart.models import CartItem
from orders.models import Order, OrderStatus, PaymentStatus
from orders.services import create_order
from payments.services.payment_update_service import (
    mark_payment_failed,
    mark_payment_succeeded,
)

pytestmark = pytest.mark.django_db


@pytest.fixture
def paid_intent_order(customer, product):
    order = create_order(
        customer, [{"product": product, "quantity": 1, "price": Decimal("10.00")}]
    )
    order.payment_intent_id = "pi_123"
    order.save()
    return order


def test_succeeded_twice_is_idempotent(
    customer, product, second_product, paid_intent_order, django_capture_on_commit_callbacks
):
    CartItem.objects.create(user=customer, product=product, quantity=2)

    with django_capture_on_commit_callbacks(execute=True):
        mark_payment_succeeded("pi_123")

    CartItem.objects.create(user=customer, product=second_product, quantity=1)
    with django_capture_on_commit_callbacks(execute=True) as callbacks:
        mark_payment_succeeded("pi_123")

    order = Order.objects.get(pk=paid_intent_order.pk)
    assert order.payment_status == PaymentStatus.PAID
    assert order.status == OrderStatus.CONFIRMED
    # a replay does not clear the cart again nor send a second email
    assert list(CartItem.objects.filter(user=customer).values_list("product_id", flat=True)) == [second_product.id]
    assert callbacks == []
    assert len(mail.outbox) == 1
    assert [t.status for t in order.tracking.all()] == ["PENDING", "CONFIRMED"]


def test_failed_sets_payment_only(paid_intent_order):
    mark_payment_failed("pi_123")

    order = Order.objects.get(pk=paid_intent_order.pk)
    assert order.payment_status == PaymentStatus.FAILED
    assert order.status == OrderStatus.PENDING


def test_succeeded_after_failed_retry(paid_intent_order):
    mark_payment_failed("pi_123")
    mark_payment_succeeded("pi_123")

    assert Order.objects.get(pk=paid_intent_order.pk).payment_status == PaymentStatus.PAID


def test_failed_after_paid_is_ignored(paid_intent_order):
    mark_payment_succeeded("pi_123")
    mark_payment_failed("pi_123")

    assert Order.objects.get(pk=paid_intent_order.pk).payment_status == PaymentStatus.PAID


def test_succeeded_keeps_later_fulfillment(paid_intent_order):
    Order.objects.filter(pk=paid_intent_order.pk).update(status=OrderStatus.PROCESSING)

    mark_payment_succeeded("pi_123")

    assert Order.objects.get(pk=paid_intent_order.pk).status == OrderStatus.PROCESSING


def test_unknown_intent_is_noop(paid_intent_order):
    assert mark_payment_failed("pi_unknown") is None
    assert mark_payment_succeeded("pi_unknown") is None

    order = Order.objects.get(pk=paid_intent_order.pk)
    assert order.payment_status == PaymentStatus.PENDING
    assert Order.objects.count() == 1


def test_success_survives_unreachable_broker(
    paid_intent_order, django_capture_on_commit_callbacks
):
    with mock.patch(
        "payments.services.payment_update_service.send_payment_success_email.delay",
        side_effect=ConnectionError("broker unreachable"),
    ) as delay:
        with django_capture_on_commit_callbacks(execute=True):
            order = mark_payment_succeeded("pi_123")

    delay.assert_called_once_with(order.id)
    assert Order.objects.get(pk=order.pk).payment_status == PaymentStatus.PAID
