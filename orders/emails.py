from datetime import datetime

from celery import shared_task
from django.conf import settings
from django.core.mail import EmailMultiAlternatives
from django.template.loader import render_to_string

from .models import Order


@shared_task
def send_order_confirmation_email(order_id):
    order = (
        Order.objects.select_related("user")
        .prefetch_related("items__product")
        .get(id=order_id)
    )
    user = order.user

    html_content = render_to_string(
        "emails/order_confirmation_email.html",
        {
            "user": user,
            "order": order,
            "items": order.items.all(),
            "client_url": settings.CLIENT_URL,
            "year": datetime.now().year,
        },
    )
    text_content = (
        f"Hi {user.first_name},\n\n"
        f"We received your order {order.order_number}. "
        f"Total: {order.total}.\n"
    )

    msg = EmailMultiAlternatives(
        f"Order {order.order_number} received",
        text_content,
        settings.DEFAULT_FROM_EMAIL,
        [user.email],
    )
    msg.attach_alternative(html_content, "text/html")
    msg.send()
