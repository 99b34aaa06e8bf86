from django.urls import path

from payments.views import ConfirmPaymentView, CreatePaymentIntentView, PaymentMethodsView
from payments.webhooks.stripe_webhooks import handle_stripe_event

urlpatterns = [
    path(
        "create-payment-intent/",
        CreatePaymentIntentView.as_view(),
        name="create-payment-intent",
    ),
    path("confirm-payment/", ConfirmPaymentView.as_view(), name="confirm-payment"),
    path("webhook/", handle_stripe_event, name="stripe-webhook"),
    path("payment-methods/", PaymentMethodsView.as_view(), name="payment-methods"),
]
