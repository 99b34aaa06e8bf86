from decimal import Decimal
from types import SimpleNamespace
from unittest import mock

import pytest
import stripe

from orders.models import Order, OrderStatus, PaymentStatus
from orders.services import create_order

pytestmark = pytest.mark.django_db


@pytest.fixture
def order(customer, product, second_product):
    return create_order(
        customer,
        [
            {"product": product, "quantity": 2, "price": Decimal("10.00")},
            {"product": second_product, "quantity": 1, "price": Decimal("5.50")},
        ],
    )


def fake_intent(intent_id="pi_new", status="requires_payment_method"):
    return SimpleNamespace(id=intent_id, client_secret=f"{intent_id}_secret", status=status)


def test_create_intent_for_order_uses_order_total(customer_client, customer, order):
    with mock.patch("stripe.PaymentIntent.create", return_value=fake_intent()) as create:
        response = customer_client.post(
            "/api/payments/create-payment-intent/", {"order_id": order.id}, format="json"
        )

    assert response.status_code == 200
    assert response.data["data"] == {
        "client_secret": "pi_new_secret",
        "payment_intent_id": "pi_new",
    }
    kwargs = create.call_args.kwargs
    assert kwargs["amount"] == 3805
    assert kwargs["currency"] == "usd"
    assert kwargs["metadata"] == {"user_id": str(customer.id), "order_id": str(order.id)}
    assert Order.objects.get(pk=order.pk).payment_intent_id == "pi_new"


def test_create_intent_for_someone_elses_order(make_client, other_customer, order):
    with mock.patch("stripe.PaymentIntent.create") as create:
        response = make_client(other_customer).post(
            "/api/payments/create-payment-intent/", {"order_id": order.id}, format="json"
        )

    assert response.status_code == 404
    create.assert_not_called()


def test_create_intent_requires_amount_or_order(customer_client):
    response = customer_client.post(
        "/api/payments/create-payment-intent/", {}, format="json"
    )

    assert response.status_code == 400


def test_stripe_failure_is_bad_gateway(customer_client):
    with mock.patch(
        "stripe.PaymentIntent.create", side_effect=stripe.StripeError("boom")
    ):
        response = customer_client.post(
            "/api/payments/create-payment-intent/", {"amount": "12.34"}, format="json"
        )

    assert response.status_code == 502
    assert response.data["success"] is False


def test_confirm_payment_marks_order_paid(customer_client, order):
    Order.objects.filter(pk=order.pk).update(payment_intent_id="pi_ok")

    with mock.patch(
        "stripe.PaymentIntent.retrieve", return_value=fake_intent("pi_ok", "succeeded")
    ):
        response = customer_client.post(
            "/api/payments/confirm-payment/", {"payment_intent_id": "pi_ok"}, format="json"
        )

    assert response.status_code == 200
    assert response.data["data"]["status"] == "succeeded"
    order.refresh_from_db()
    assert order.payment_status == PaymentStatus.PAID
    assert order.status == OrderStatus.CONFIRMED


def test_confirm_payment_not_succeeded_leaves_order(customer_client, order):
    Order.objects.filter(pk=order.pk).update(payment_intent_id="pi_wait")

    with mock.patch(
        "stripe.PaymentIntent.retrieve", return_value=fake_intent("pi_wait", "processing")
    ):
        customer_client.post(
            "/api/payments/confirm-payment/", {"payment_intent_id": "pi_wait"}, format="json"
        )

    assert Order.objects.get(pk=order.pk).payment_status == PaymentStatus.PENDING


def test_payment_methods(customer_client):
    response = customer_client.get("/api/payments/payment-methods/")

    assert [m["id"] for m in response.data["data"]] == ["card", "paypal"]
