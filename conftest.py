from decimal import Decimal

import pytest
from rest_framework.test import APIClient

from catalog.models import Category, Product
from users.authentication import issue_tokens
from users.models import Address, User


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def customer(db):
    return User.objects.create_user(
        email="customer@example.com",
        password="Customer@1234",
        first_name="Jane",
        last_name="Doe",
    )


@pytest.fixture
def other_customer(db):
    return User.objects.create_user(
        email="other@example.com",
        password="Other@1234",
        first_name="Sam",
        last_name="Roe",
    )


@pytest.fixture
def admin_user(db):
    return User.objects.create_user(
        email="admin@example.com",
        password="Admin@1234",
        first_name="Ada",
        last_name="Admin",
        role=User.Role.ADMIN,
    )


def client_for(user):
    client = APIClient()
    access, _ = issue_tokens(user)
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {access}")
    return client


@pytest.fixture
def make_client(db):
    return client_for


@pytest.fixture
def customer_client(customer):
    return client_for(customer)


@pytest.fixture
def admin_client(admin_user):
    return client_for(admin_user)


@pytest.fixture
def category(db):
    return Category.objects.create(name="Electronics")


@pytest.fixture
def product(category):
    return Product.objects.create(
        name="Smartphone",
        price=Decimal("10.00"),
        quantity=50,
        category=category,
    )


@pytest.fixture
def second_product(category):
    return Product.objects.create(
        name="Phone Case",
        price=Decimal("5.50"),
        quantity=20,
        category=category,
    )


@pytest.fixture
def address(customer):
    return Address.objects.create(
        user=customer,
        first_name="Jane",
        last_name="Doe",
        address_line1="1 Main St",
        city="Springfield",
        zip_code="12345",
        country="US",
    )
