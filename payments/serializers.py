from rest_framework import serializers


class CreatePaymentIntentSerializer(serializers.Serializer):
    order_id = serializers.IntegerField(required=False, allow_null=True)
    amount = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=0, required=False
    )
    currency = serializers.CharField(max_length=3, required=False)

    def validate(self, attrs):
        if not attrs.get("order_id") and attrs.get("amount") is None:
            raise serializers.ValidationError("Either order_id or amount is required.")
        return attrs


class ConfirmPaymentSerializer(serializers.Serializer):
    payment_intent_id = serializers.CharField(max_length=255)
