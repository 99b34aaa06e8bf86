import pytest
from django.core.management import call_command

from catalog.models import Category, Product
from users.models import User

pytestmark = pytest.mark.django_db


def test_seed_store_is_idempotent():
    call_command("seed_store")
    call_command("seed_store")

    assert User.objects.get(email="admin@ecommerce.com").is_admin
    assert Category.objects.count() == 3
    assert Product.objects.count() == 2
