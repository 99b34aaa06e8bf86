import pytest

from cart.models import CartItem, WishlistItem

pytestmark = pytest.mark.django_db


def test_add_existing_product_increments_quantity(customer_client, customer, product):
    CartItem.objects.create(user=customer, product=product, quantity=2)

    response = customer_client.post(
        "/api/cart/add/", {"product_id": product.id, "quantity": 3}, format="json"
    )

    assert response.status_code == 200
    items = CartItem.objects.filter(user=customer, product=product)
    assert items.count() == 1
    assert items.get().quantity == 5


def test_add_new_product_creates_row(customer_client, customer, product):
    response = customer_client.post(
        "/api/cart/add/", {"product_id": product.id, "quantity": 1}, format="json"
    )

    assert response.status_code == 201
    assert CartItem.objects.get(user=customer).quantity == 1


def test_add_rejects_zero_quantity(customer_client, product):
    response = customer_client.post(
        "/api/cart/add/", {"product_id": product.id, "quantity": 0}, format="json"
    )

    assert response.status_code == 400


def test_get_cart_total_uses_live_prices(customer_client, customer, product, second_product):
    CartItem.objects.create(user=customer, product=product, quantity=2)
    CartItem.objects.create(user=customer, product=second_product, quantity=1)

    response = customer_client.get("/api/cart/")

    assert response.data["data"]["total"] == "25.50"
    assert len(response.data["data"]["items"]) == 2


def test_update_and_remove_item(customer_client, customer, product):
    item = CartItem.objects.create(user=customer, product=product, quantity=1)

    response = customer_client.put(f"/api/cart/{item.id}/", {"quantity": 4}, format="json")
    assert response.status_code == 200
    item.refresh_from_db()
    assert item.quantity == 4

    assert customer_client.delete(f"/api/cart/{item.id}/").status_code == 200
    assert not CartItem.objects.exists()


def test_other_users_items_are_not_found(make_client, other_customer, customer, product):
    item = CartItem.objects.create(user=customer, product=product, quantity=1)

    response = make_client(other_customer).delete(f"/api/cart/{item.id}/")

    assert response.status_code == 404
    assert CartItem.objects.filter(pk=item.pk).exists()


def test_clear_cart(customer_client, customer, product, second_product):
    CartItem.objects.create(user=customer, product=product)
    CartItem.objects.create(user=customer, product=second_product)

    assert customer_client.delete("/api/cart/").status_code == 200
    assert not CartItem.objects.filter(user=customer).exists()


def test_wishlist_duplicate_is_conflict(customer_client, customer, product):
    first = customer_client.post("/api/wishlist/add/", {"product_id": product.id}, format="json")
    second = customer_client.post("/api/wishlist/add/", {"product_id": product.id}, format="json")

    assert first.status_code == 201
    assert second.status_code == 409
    assert WishlistItem.objects.filter(user=customer).count() == 1


def test_wishlist_list_and_remove(customer_client, customer, product):
    item = WishlistItem.objects.create(user=customer, product=product)

    response = customer_client.get("/api/wishlist/")
    assert [w["product"]["id"] for w in response.data["data"]] == [product.id]

    assert customer_client.delete(f"/api/wishlist/{item.id}/").status_code == 200
    assert not WishlistItem.objects.exists()
