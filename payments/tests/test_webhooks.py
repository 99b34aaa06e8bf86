import hashlib
import hmac
import json
import time
from decimal import Decimal
from unittest import mock

import pytest
from django.conf import settings

from orders.models import Order, PaymentStatus
from orders.services import create_order
from payments.models import PaymentEvent

pytestmark = pytest.mark.django_db

WEBHOOK_URL = "/api/payments/webhook/"


def stripe_event(event_type, intent_id, event_id="evt_1"):
    return {
        "id": event_id,
        "object": "event",
        "type": event_type,
        "data": {"object": {"id": intent_id, "object": "payment_intent", "amount": 1200}},
    }


def sign(payload, secret):
    timestamp = int(time.time())
    signature = hmac.new(
        secret.encode("utf-8"), f"{timestamp}.{payload}".encode("utf-8"), hashlib.sha256
    ).hexdigest()
    return f"t={timestamp},v1={signature}"


def post_event(client, event, secret=None):
    payload = json.dumps(event)
    header = sign(payload, secret or settings.STRIPE_WEBHOOK_SECRET)
    return client.post(
        WEBHOOK_URL,
        data=payload,
        content_type="application/json",
        HTTP_STRIPE_SIGNATURE=header,
    )


@pytest.fixture
def order(customer, product):
    order = create_order(
        customer, [{"product": product, "quantity": 1, "price": Decimal("10.00")}]
    )
    Order.objects.filter(pk=order.pk).update(payment_intent_id="pi_abc")
    return order


def test_bad_signature_rejected(client, order):
    response = post_event(
        client, stripe_event("payment_intent.succeeded", "pi_abc"), secret="whsec_other"
    )

    assert response.status_code == 400
    assert response.json()["success"] is False
    assert not PaymentEvent.objects.exists()
    assert Order.objects.get(pk=order.pk).payment_status == PaymentStatus.PENDING


def test_missing_signature_rejected(client):
    response = client.post(
        WEBHOOK_URL,
        data=json.dumps(stripe_event("payment_intent.succeeded", "pi_abc")),
        content_type="application/json",
    )

    assert response.status_code == 400


def test_succeeded_event_marks_order_paid(client, order):
    response = post_event(client, stripe_event("payment_intent.succeeded", "pi_abc"))

    assert response.status_code == 200
    assert Order.objects.get(pk=order.pk).payment_status == PaymentStatus.PAID
    event = PaymentEvent.objects.get()
    assert event.processed and event.order_id == order.pk
    assert event.payment_intent_id == "pi_abc"
    assert event.payload["amount"] == 1200


def test_replayed_event_is_acknowledged_once(client, order):
    post_event(client, stripe_event("payment_intent.succeeded", "pi_abc"))
    with mock.patch(
        "payments.webhooks.stripe_webhooks.mark_payment_succeeded"
    ) as handler:
        handler_map = {"payment_intent.succeeded": handler}
        with mock.patch.dict("payments.webhooks.stripe_webhooks.EVENT_HANDLERS", handler_map):
            response = post_event(client, stripe_event("payment_intent.succeeded", "pi_abc"))

    assert response.status_code == 200
    handler.assert_not_called()
    assert PaymentEvent.objects.count() == 1


def test_failed_event_for_unknown_intent_is_noop(client, order):
    response = post_event(
        client, stripe_event("payment_intent.payment_failed", "pi_missing", "evt_2")
    )

    assert response.status_code == 200
    assert Order.objects.count() == 1
    assert Order.objects.get(pk=order.pk).payment_status == PaymentStatus.PENDING


def test_failed_event_marks_order_failed(client, order):
    response = post_event(
        client, stripe_event("payment_intent.payment_failed", "pi_abc", "evt_4")
    )

    assert response.status_code == 200
    assert Order.objects.get(pk=order.pk).payment_status == PaymentStatus.FAILED


def test_unhandled_event_type_acknowledged(client):
    response = post_event(client, stripe_event("charge.refunded", "ch_1", "evt_3"))

    assert response.status_code == 200
    assert PaymentEvent.objects.get().event_type == "charge.refunded"


def test_handler_error_returns_500_and_keeps_event_unrecorded(client, order):
    with mock.patch.dict(
        "payments.webhooks.stripe_webhooks.EVENT_HANDLERS",
        {"payment_intent.succeeded": mock.Mock(side_effect=RuntimeError("boom"))},
    ):
        response = post_event(client, stripe_event("payment_intent.succeeded", "pi_abc"))

    assert response.status_code == 500
    assert not PaymentEvent.objects.exists()
