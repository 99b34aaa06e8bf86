from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.db import transaction

from catalog.models import Category, Product

User = get_user_model()

SEED_USERS = [
    {
        "email": "admin@ecommerce.com",
        "password": "Admin@1234",
        "first_name": "Admin",
        "last_name": "User",
        "role": User.Role.ADMIN,
        "is_staff": True,
    },
    {
        "email": "customer@ecommerce.com",
        "password": "Customer@1234",
        "first_name": "John",
        "last_name": "Doe",
        "role": User.Role.CUSTOMER,
    },
]

SEED_CATEGORIES = [
    ("Electronics", "electronics"),
    ("Clothing", "clothing"),
    ("Books", "books"),
]

SEED_PRODUCTS = [
    ("Smartphone", "smartphone", Decimal("699.99"), "electronics", "ELEC-1234-001"),
    ("T-Shirt", "t-shirt", Decimal("19.99"), "clothing", "CLOTH-5678-002"),
]


class Command(BaseCommand):
    help = "Seed an admin, a customer, categories and products (safe to re-run)"

    @transaction.atomic
    def handle(self, *args, **kwargs):
        for data in SEED_USERS:
            data = dict(data)
            password = data.pop("password")
            user, created = User.objects.get_or_create(
                email=data.pop("email"), defaults=data
            )
            if created:
                user.set_password(password)
                user.save(update_fields=["password"])
                self.stdout.write(f"Created user {user.email}")

        categories = {}
        for name, slug in SEED_CATEGORIES:
            categories[slug], _ = Category.objects.get_or_create(
                slug=slug, defaults={"name": name, "is_active": True}
            )

        added = 0
        for name, slug, price, category_slug, sku in SEED_PRODUCTS:
            _, created = Product.objects.get_or_create(
                slug=slug,
                defaults={
                    "name": name,
                    "price": price,
                    "sku": sku,
                    "quantity": 100,
                    "category": categories[category_slug],
                },
            )
            added += int(created)

        self.stdout.write(self.style.SUCCESS(f"Seeded store ({added} new products)"))
