from datetime import timedelta
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.db.models import Count, Sum
from django.db.models.functions import TruncDate
from django.utils import timezone

from catalog.models import Product
from orders.models import Order, OrderItem, PaymentStatus

User = get_user_model()

SALES_CHART_DAYS = 30


def money(value):
    return f"{(value or Decimal('0')):.2f}"


def top_products(limit=10):
    rows = (
        OrderItem.objects.values("product_id", "product__name")
        .annotate(quantity_sold=Sum("quantity"), revenue=Sum("total"))
        .order_by("-quantity_sold", "product_id")[:limit]
    )
    return [
        {
            "product_id": row["product_id"],
            "name": row["product__name"],
            "quantity_sold": row["quantity_sold"],
            "revenue": money(row["revenue"]),
        }
        for row in rows
    ]


def sales_chart(days=SALES_CHART_DAYS):
    since = timezone.now() - timedelta(days=days)
    rows = (
        Order.objects.filter(payment_status=PaymentStatus.PAID, created_at__gte=since)
        .annotate(date=TruncDate("created_at"))
        .values("date")
        .annotate(revenue=Sum("total"), orders=Count("id"))
        .order_by("date")
    )
    return [
        {"date": row["date"].isoformat(), "revenue": money(row["revenue"]), "orders": row["orders"]}
        for row in rows
    ]


def dashboard_stats():
    revenue = Order.objects.filter(payment_status=PaymentStatus.PAID).aggregate(
        total=Sum("total")
    )["total"]

    recent_orders = (
        Order.objects.select_related("user", "shipping_address")
        .prefetch_related("items__product")
        .order_by("-created_at")[:10]
    )

    return {
        "total_orders": Order.objects.count(),
        "total_revenue": money(revenue),
        "total_products": Product.objects.filter(is_active=True).count(),
        "total_customers": User.objects.filter(role=User.Role.CUSTOMER).count(),
        "recent_orders": recent_orders,
        "top_products": top_products(),
        "sales_chart": sales_chart(),
    }
