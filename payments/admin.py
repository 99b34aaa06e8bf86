import json

from django.contrib import admin
from django.utils.html import format_html

from .models import PaymentEvent


@admin.register(PaymentEvent)
class PaymentEventAdmin(admin.ModelAdmin):
    list_display = (
        "stripe_event_id",
        "event_type",
        "payment_intent_id",
        "order",
        "processed",
        "created_at",
    )
    list_filter = ("event_type", "processed")
    search_fields = ("stripe_event_id", "payment_intent_id", "order__order_number")
    ordering = ("-created_at",)
    readonly_fields = ("created_at", "formatted_payload")
    exclude = ("payload",)
    date_hierarchy = "created_at"

    @admin.display(description="Stripe Payload")
    def formatted_payload(self, obj):
        return format_html("<pre>{}</pre>", json.dumps(obj.payload or {}, indent=2))
