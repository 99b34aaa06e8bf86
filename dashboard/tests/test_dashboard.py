from decimal import Decimal
from types import SimpleNamespace
from unittest import mock

import pytest

from catalog.models import Product
from orders.models import Order, OrderStatus, PaymentStatus
from orders.services import create_order

pytestmark = pytest.mark.django_db


@pytest.fixture
def order(customer, product):
    return create_order(
        customer, [{"product": product, "quantity": 3, "price": Decimal("10.00")}]
    )


def test_dashboard_requires_admin(customer_client):
    assert customer_client.get("/api/admin/dashboard/").status_code == 403


def test_dashboard_stats(admin_client, customer, product, second_product, order):
    paid = create_order(
        customer, [{"product": second_product, "quantity": 1, "price": Decimal("5.50")}]
    )
    Order.objects.filter(pk=paid.pk).update(payment_status=PaymentStatus.PAID)
    Product.objects.create(name="Retired", price=Decimal("1.00"), is_active=False)

    response = admin_client.get("/api/admin/dashboard/")

    assert response.status_code == 200
    data = response.data["data"]
    assert data["total_orders"] == 2
    assert data["total_revenue"] == paid.total.to_eng_string()
    assert data["total_products"] == 2
    assert data["total_customers"] == 1
    assert len(data["recent_orders"]) == 2
    assert data["top_products"][0] == {
        "product_id": product.id,
        "name": "Smartphone",
        "quantity_sold": 3,
        "revenue": "30.00",
    }
    assert len(data["sales_chart"]) == 1
    assert data["sales_chart"][0]["orders"] == 1


def test_admin_order_filters(admin_client, customer, product, order):
    other = create_order(
        customer, [{"product": product, "quantity": 1, "price": Decimal("10.00")}]
    )
    Order.objects.filter(pk=other.pk).update(status=OrderStatus.SHIPPED)

    response = admin_client.get("/api/admin/orders/", {"status": "SHIPPED", "limit": 5})

    assert [o["id"] for o in response.data["data"]] == [other.id]
    assert response.data["pagination"] == {"page": 1, "limit": 5, "total": 1, "totalPages": 1}


def test_non_admin_cannot_edit_order_status(customer_client, order):
    response = customer_client.put(
        f"/api/admin/orders/{order.id}/status/", {"status": "SHIPPED"}, format="json"
    )

    assert response.status_code == 403
    assert response.data["error"] == "Insufficient permissions"
    order.refresh_from_db()
    assert order.status == OrderStatus.PENDING
    assert order.tracking.count() == 1


def test_admin_edits_order_status(admin_client, order):
    response = admin_client.put(
        f"/api/admin/orders/{order.id}/status/",
        {"status": "SHIPPED", "description": "Left warehouse", "location": "Nairobi"},
        format="json",
    )

    assert response.status_code == 200
    assert response.data["data"]["status"] == "SHIPPED"
    assert response.data["data"]["tracking"][-1] == {
        **response.data["data"]["tracking"][-1],
        "status": "SHIPPED",
        "description": "Left warehouse",
        "location": "Nairobi",
    }


def test_admin_status_rejects_unknown_value(admin_client, order):
    response = admin_client.put(
        f"/api/admin/orders/{order.id}/status/", {"status": "LOST"}, format="json"
    )

    assert response.status_code == 400


def test_enforced_transitions_conflict(admin_client, order, settings):
    settings.ORDER_ENFORCE_MANUAL_TRANSITIONS = True

    response = admin_client.put(
        f"/api/admin/orders/{order.id}/status/", {"status": "DELIVERED"}, format="json"
    )

    assert response.status_code == 409


def test_refund_paid_order(admin_client, order):
    Order.objects.filter(pk=order.pk).update(
        payment_status=PaymentStatus.PAID,
        status=OrderStatus.CONFIRMED,
        payment_intent_id="pi_paid",
    )

    with mock.patch("stripe.Refund.create", return_value=SimpleNamespace(id="re_1")) as refund:
        response = admin_client.post(f"/api/admin/orders/{order.id}/refund/")

    assert response.status_code == 200
    refund.assert_called_once_with(payment_intent="pi_paid")
    order.refresh_from_db()
    assert order.payment_status == PaymentStatus.REFUNDED
    assert order.status == OrderStatus.REFUNDED


def test_refund_unpaid_order_is_conflict(admin_client, order):
    with mock.patch("stripe.Refund.create") as refund:
        response = admin_client.post(f"/api/admin/orders/{order.id}/refund/")

    assert response.status_code == 409
    refund.assert_not_called()


def test_admin_product_search(admin_client, product, second_product):
    response = admin_client.get("/api/admin/products/", {"search": "case"})

    assert [p["id"] for p in response.data["data"]] == [second_product.id]


def test_toggle_user_status(admin_client, admin_user, customer):
    response = admin_client.put(f"/api/admin/users/{customer.id}/toggle-status/")

    assert response.status_code == 200
    customer.refresh_from_db()
    assert customer.is_active is False

    assert admin_client.put(f"/api/admin/users/{admin_user.id}/toggle-status/").status_code == 400


def test_admin_user_list(admin_client, customer):
    response = admin_client.get("/api/admin/users/", {"role": "CUSTOMER"})

    assert [u["id"] for u in response.data["data"]] == [customer.id]
