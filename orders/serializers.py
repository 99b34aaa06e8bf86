from rest_framework import serializers

from catalog.models import Product
from users.models import Address
from users.serializers import AddressSerializer

from .models import Order, OrderItem, OrderStatus, OrderTracking
from .services import calculate_order_total, fits_money_field, to_money


MAX_LINE_QUANTITY = 10000


class OrderLineSerializer(serializers.Serializer):
    productId = serializers.IntegerField()
    quantity = serializers.IntegerField(min_value=1, max_value=MAX_LINE_QUANTITY)
    price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0)


class ShippingAddressField(serializers.Field):
    """Accepts an address id or an object carrying one (``{"id": 3}``)."""

    default_error_messages = {"invalid": "A valid address id is required."}

    def to_internal_value(self, data):
        if isinstance(data, dict):
            data = data.get("id")
        try:
            return int(data)
        except (TypeError, ValueError):
            self.fail("invalid")

    def to_representation(self, value):
        return value


class OrderCreateSerializer(serializers.Serializer):
    items = OrderLineSerializer(many=True, allow_empty=False)
    shippingAddress = ShippingAddressField(required=False, allow_null=True)
    paymentMethod = serializers.CharField(max_length=50)
    couponCode = serializers.CharField(
        max_length=50, required=False, allow_blank=True, allow_null=True
    )

    def validate_items(self, items):
        product_ids = {item["productId"] for item in items}
        products = Product.objects.in_bulk(product_ids)
        missing = sorted(product_ids - set(products))
        if missing:
            raise serializers.ValidationError(
                f"Unknown product ids: {', '.join(str(pk) for pk in missing)}"
            )
        return [
            {
                "product": products[item["productId"]],
                "quantity": item["quantity"],
                "price": item["price"],
            }
            for item in items
        ]

    def validate_shippingAddress(self, address_id):
        if address_id is None:
            return None
        address = Address.objects.filter(
            pk=address_id, user=self.context["request"].user
        ).first()
        if address is None:
            raise serializers.ValidationError("Shipping address not found.")
        return address

    def validate(self, attrs):
        line_total_field = OrderItem._meta.get_field("total")
        for item in attrs["items"]:
            line_total = to_money(item["price"] * item["quantity"])
            if not fits_money_field(line_total, line_total_field):
                raise serializers.ValidationError(
                    {"items": f"Line total {line_total} exceeds the maximum order value."}
                )

        totals = calculate_order_total(attrs["items"])
        for name, value in totals.items():
            if not fits_money_field(value, Order._meta.get_field(name)):
                raise serializers.ValidationError(
                    {"items": f"Order {name} {value} exceeds the maximum order value."}
                )
        return attrs


class OrderProductSerializer(serializers.ModelSerializer):
    class Meta:
        model = Product
        fields = ["id", "name", "slug", "sku"]


class OrderItemSerializer(serializers.ModelSerializer):
    product = OrderProductSerializer(read_only=True)

    class Meta:
        model = OrderItem
        fields = ["id", "product", "quantity", "price", "total"]


class OrderTrackingSerializer(serializers.ModelSerializer):
    class Meta:
        model = OrderTracking
        fields = ["id", "status", "description", "location", "created_at"]


class OrderCustomerSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    email = serializers.EmailField()
    first_name = serializers.CharField()
    last_name = serializers.CharField()


class OrderSerializer(serializers.ModelSerializer):
    items = OrderItemSerializer(many=True, read_only=True)
    user = OrderCustomerSerializer(read_only=True)
    shipping_address = AddressSerializer(read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "order_number",
            "user",
            "status",
            "payment_status",
            "payment_method",
            "payment_intent_id",
            "coupon_code",
            "shipping_address",
            "subtotal",
            "tax",
            "shipping",
            "total",
            "items",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class OrderDetailSerializer(OrderSerializer):
    tracking = OrderTrackingSerializer(many=True, read_only=True)

    class Meta(OrderSerializer.Meta):
        fields = OrderSerializer.Meta.fields + ["tracking"]
        read_only_fields = fields


class OrderStatusUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=OrderStatus.choices)
    description = serializers.CharField(required=False, allow_blank=True, max_length=255)
    location = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, max_length=255
    )
