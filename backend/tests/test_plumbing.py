import pytest
from django.core.exceptions import ImproperlyConfigured

from backend.pagination import pagination_meta
from backend.settings import env_bool, env_list, env_required


def test_pagination_meta_rounds_pages_up():
    assert pagination_meta(41, 2, 20) == {"page": 2, "limit": 20, "total": 41, "totalPages": 3}
    assert pagination_meta(0, 1, 20)["totalPages"] == 0


def test_env_required(monkeypatch):
    monkeypatch.delenv("SOME_REQUIRED_VALUE", raising=False)
    with pytest.raises(ImproperlyConfigured):
        env_required("SOME_REQUIRED_VALUE")

    monkeypatch.setenv("SOME_REQUIRED_VALUE", "x")
    assert env_required("SOME_REQUIRED_VALUE") == "x"


def test_env_helpers(monkeypatch):
    monkeypatch.setenv("FLAG", "Yes")
    monkeypatch.setenv("ITEMS", "a, b,,c")

    assert env_bool("FLAG") is True
    assert env_bool("MISSING_FLAG", default=True) is True
    assert env_list("ITEMS") == ["a", "b", "c"]


@pytest.mark.django_db
def test_api_root(client):
    response = client.get("/")

    assert response.status_code == 200
    assert response.json()["data"]["api_base"] == "http://testserver/api"


@pytest.mark.django_db
def test_not_found_uses_error_envelope(customer_client):
    response = customer_client.get("/api/orders/123456/")

    assert response.status_code == 404
    assert response.data == {"success": False, "error": "No Order matches the given query."}


@pytest.mark.django_db
def test_unhandled_error_is_generic_500(customer_client, monkeypatch):
    def explode(*args, **kwargs):
        raise RuntimeError("database on fire")

    monkeypatch.setattr("orders.views.OrderListCreateView.get_queryset", explode)

    response = customer_client.get("/api/orders/")

    assert response.status_code == 500
    assert response.data == {"success": False, "error": "Internal server error"}
