import logging
from decimal import ROUND_HALF_UP, Decimal

import stripe
from django.conf import settings

from backend.exceptions import ExternalServiceError

logger = logging.getLogger(__name__)

stripe.api_key = settings.STRIPE_SECRET_KEY


def to_minor_units(amount):
    return int((Decimal(str(amount)) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def create_payment_intent(amount, currency=None, metadata=None):
    try:
        intent = stripe.PaymentIntent.create(
            amount=to_minor_units(amount),
            currency=currency or settings.STRIPE_CURRENCY,
            automatic_payment_methods={"enabled": True},
            metadata={key: str(value) for key, value in (metadata or {}).items()},
        )
    except stripe.StripeError as e:
        logger.error(f"[Stripe] PaymentIntent create failed: {e}")
        raise ExternalServiceError(f"Payment provider error: {e.user_message or e}")

    logger.info(f"[Stripe] Created PaymentIntent {intent.id} for {amount}")
    return intent


def retrieve_payment_intent(payment_intent_id):
    try:
        return stripe.PaymentIntent.retrieve(payment_intent_id)
    except stripe.StripeError as e:
        logger.error(f"[Stripe] PaymentIntent retrieve failed for {payment_intent_id}: {e}")
        raise ExternalServiceError(f"Payment provider error: {e.user_message or e}")


def construct_event(payload, sig_header):
    """Verify the ``Stripe-Signature`` header and parse the event.

    Raises ``ValueError`` or ``stripe.SignatureVerificationError``.
    """
    return stripe.Webhook.construct_event(
        payload, sig_header, settings.STRIPE_WEBHOOK_SECRET
    )


def refund_payment_intent(payment_intent_id):
    try:
        refund = stripe.Refund.create(payment_intent=payment_intent_id)
    except stripe.StripeError as e:
        logger.error(f"[Stripe] Refund failed for {payment_intent_id}: {e}")
        raise ExternalServiceError(f"Refund failed: {e.user_message or e}")

    logger.info(f"[Stripe] Refund {refund.id} created for {payment_intent_id}")
    return refund
