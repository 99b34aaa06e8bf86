import json
import logging

import stripe
from django.db import transaction
from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_POST

from payments.models import PaymentEvent
from payments.services.payment_update_service import (
    mark_payment_failed,
    mark_payment_succeeded,
)
from payments.services.stripe_gateway import construct_event

logger = logging.getLogger(__name__)

EVENT_HANDLERS = {
    "payment_intent.succeeded": mark_payment_succeeded,
    "payment_intent.payment_failed": mark_payment_failed,
}


@csrf_exempt
@require_POST
def handle_stripe_event(request):
    sig_header = request.META.get("HTTP_STRIPE_SIGNATURE")
    if not sig_header:
        logger.warning("[Stripe Webhook] Missing Stripe-Signature header")
        return JsonResponse(
            {"success": False, "error": "Invalid webhook signature"}, status=400
        )

    try:
        event = construct_event(request.body, sig_header)
    except (ValueError, stripe.SignatureVerificationError) as e:
        logger.error(f"[Stripe Webhook] Signature Error: {e}")
        return JsonResponse(
            {"success": False, "error": "Invalid webhook signature"}, status=400
        )

    event_id = event.id
    event_type = event.type
    # stored as plain JSON; StripeObject is not a dict
    intent = json.loads(request.body)["data"]["object"]
    intent_id = intent.get("id")

    try:
        with transaction.atomic():
            record, created = PaymentEvent.objects.select_for_update().get_or_create(
                stripe_event_id=event_id,
                defaults={
                    "event_type": event_type,
                    "payment_intent_id": intent_id,
                    "payload": intent,
                },
            )
            if not created and record.processed:
                logger.info(f"[Stripe Webhook] Event {event_id} already processed")
                return JsonResponse({"success": True, "received": True})

            handler = EVENT_HANDLERS.get(event_type)
            if handler is None:
                logger.info(f"[Stripe Webhook] Unhandled event type {event_type}")
            else:
                record.order = handler(intent_id)

            record.processed = True
            record.save(update_fields=["order", "processed"])

    except Exception as e:
        logger.exception(f"[Stripe Webhook] Unexpected error processing {event_id}: {e}")
        return JsonResponse({"success": False, "error": "Webhook processing failed"}, status=500)

    return JsonResponse({"success": True, "received": True})
