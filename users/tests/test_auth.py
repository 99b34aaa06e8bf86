import time

import pytest
from django.conf import settings
from jose import jwt

from users.authentication import decode_access_token, issue_tokens
from users.models import User
from users.permissions import is_role_allowed
from users.validators import password_policy_errors

pytestmark = pytest.mark.django_db


def test_register_creates_customer(api_client):
    response = api_client.post(
        "/api/auth/register/",
        {
            "email": "new@example.com",
            "password": "Str0ng!Pass",
            "first_name": "New",
            "last_name": "User",
        },
        format="json",
    )

    assert response.status_code == 201
    assert response.data["success"] is True
    assert response.data["data"]["user"]["role"] == "CUSTOMER"
    assert User.objects.get(email="new@example.com").check_password("Str0ng!Pass")


def test_register_rejects_weak_password_with_failed_rules(api_client):
    response = api_client.post(
        "/api/auth/register/",
        {"email": "weak@example.com", "password": "weak", "first_name": "W", "last_name": "K"},
        format="json",
    )

    assert response.status_code == 400
    assert response.data["success"] is False
    assert response.data["error"] == "Validation failed"
    assert len(response.data["details"]["password"]) == 4
    assert not User.objects.filter(email="weak@example.com").exists()


def test_register_duplicate_email_is_conflict(api_client, customer):
    response = api_client.post(
        "/api/auth/register/",
        {
            "email": customer.email,
            "password": "Str0ng!Pass",
            "first_name": "Dup",
            "last_name": "User",
        },
        format="json",
    )

    assert response.status_code == 409
    assert response.data["error"] == "Email is already registered"


def test_login_returns_tokens(api_client, customer):
    response = api_client.post(
        "/api/auth/login/",
        {"email": customer.email, "password": "Customer@1234"},
        format="json",
    )

    assert response.status_code == 200
    data = response.data["data"]
    assert data["user"]["email"] == customer.email
    payload = decode_access_token(data["token"])
    assert payload["user_id"] == customer.id
    assert payload["role"] == "CUSTOMER"


def test_login_wrong_password(api_client, customer):
    response = api_client.post(
        "/api/auth/login/",
        {"email": customer.email, "password": "nope"},
        format="json",
    )

    assert response.status_code == 401
    assert response.data["error"] == "Invalid email or password"


def test_login_inactive_account(api_client, customer):
    customer.is_active = False
    customer.save()

    response = api_client.post(
        "/api/auth/login/",
        {"email": customer.email, "password": "Customer@1234"},
        format="json",
    )

    assert response.status_code == 401
    assert response.data["error"] == "Account is deactivated"


def test_refresh_returns_new_access_token(api_client, customer):
    _, refresh = issue_tokens(customer)

    response = api_client.post("/api/auth/refresh/", {"refresh": refresh}, format="json")

    assert response.status_code == 200
    assert decode_access_token(response.data["data"]["token"])["user_id"] == customer.id


def test_profile_requires_token(api_client):
    response = api_client.get("/api/auth/profile/")

    assert response.status_code == 401
    assert response.data["details"]["code"] == "token_missing"


def test_profile_with_token(customer_client, customer):
    response = customer_client.get("/api/auth/profile/")

    assert response.status_code == 200
    assert response.data["data"]["id"] == customer.id


def test_invalid_token_reason(api_client):
    api_client.credentials(HTTP_AUTHORIZATION="Bearer not-a-token")

    response = api_client.get("/api/auth/profile/")

    assert response.status_code == 401
    assert response.data["details"]["code"] == "token_invalid"


def test_expired_token_reason(api_client, customer):
    token = jwt.encode(
        {
            "token_type": "access",
            "user_id": customer.id,
            "exp": int(time.time()) - 60,
        },
        settings.SIMPLE_JWT["SIGNING_KEY"],
        algorithm="HS256",
    )
    api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")

    response = api_client.get("/api/auth/profile/")

    assert response.status_code == 401
    assert response.data["details"]["code"] == "token_expired"


def test_refresh_token_is_not_accepted_as_access(api_client, customer):
    _, refresh = issue_tokens(customer)
    api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {refresh}")

    response = api_client.get("/api/auth/profile/")

    assert response.status_code == 401
    assert response.data["details"]["code"] == "token_invalid"


def test_inactive_account_token_rejected(make_client, customer):
    client = make_client(customer)
    customer.is_active = False
    customer.save()

    response = client.get("/api/auth/profile/")

    assert response.status_code == 401
    assert response.data["details"]["code"] == "account_inactive"


def test_deleted_user_token_rejected(make_client, customer):
    client = make_client(customer)
    customer.delete()

    response = client.get("/api/auth/profile/")

    assert response.status_code == 401
    assert response.data["details"]["code"] == "user_not_found"


def test_is_role_allowed():
    assert is_role_allowed(User.Role.ADMIN, {User.Role.ADMIN})
    assert not is_role_allowed(User.Role.CUSTOMER, {User.Role.ADMIN})
    assert is_role_allowed(User.Role.CUSTOMER, {User.Role.ADMIN, User.Role.CUSTOMER})


def test_password_policy_errors():
    assert password_policy_errors("Str0ng!Pass") == []
    assert len(password_policy_errors("")) == 5
    assert password_policy_errors("alllowercase1!") == [
        "Password must contain at least one uppercase letter."
    ]
