from datetime import datetime

from celery import shared_task
from django.conf import settings
from django.core.mail import EmailMultiAlternatives
from django.template.loader import render_to_string

from orders.models import Order


@shared_task
def send_payment_success_email(order_id):
    order = (
        Order.objects.select_related("user")
        .prefetch_related("items__product")
        .get(id=order_id)
    )
    user = order.user

    html_content = render_to_string(
        "emails/payment_success_email.html",
        {
            "user": user,
            "order": order,
            "items": order.items.all(),
            "order_url": f"{settings.CLIENT_URL}/orders/{order.id}",
            "year": datetime.now().year,
        },
    )
    text_content = (
        f"Hi {user.first_name},\n\n"
        f"Your payment for order {order.order_number} was successful. "
        f"Amount paid: {order.total}.\n"
    )

    msg = EmailMultiAlternatives(
        "Payment Successful",
        text_content,
        settings.DEFAULT_FROM_EMAIL,
        [user.email],
    )
    msg.attach_alternative(html_content, "text/html")
    msg.send()
