# orders/serializers.py

from rest_framework import serializers

from cart.pricing import SubscriptionType
from orders.models import Order, OrderItem
from orders.models.order import last_four_digits


class OrderItemSerializer(serializers.ModelSerializer):
    product_id = serializers.UUIDField(read_only=True, allow_null=True)
    total_price = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = OrderItem
        fields = [
            "id",
            "product_id",
            "service_name",
            "quantity",
            "unit_price",
            "total_price",
            "subscription_type",
            "subscription_status",
            "subscription_duration",
            "renewal_date",
            "created_at",
        ]
        read_only_fields = fields


class SubscriptionSerializer(OrderItemSerializer):
    order_id = serializers.UUIDField(read_only=True)
    invoice_number = serializers.CharField(source="order.invoice_number", read_only=True)

    class Meta(OrderItemSerializer.Meta):
        fields = OrderItemSerializer.Meta.fields + ["order_id", "invoice_number"]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    user_id = serializers.UUIDField(read_only=True, allow_null=True)
    user_email = serializers.EmailField(source="user.email", read_only=True, default=None)
    address_id = serializers.UUIDField(read_only=True, allow_null=True)
    items = OrderItemSerializer(many=True, read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "invoice_number",
            "user_id",
            "user_email",
            "address_id",
            "order_date",
            "order_status",
            "payment_method",
            "last_card_digits",
            "subtotal",
            "total_amount",
            "items",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class OrderItemWriteSerializer(serializers.Serializer):
    product_id = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1)
    subscription_type = serializers.ChoiceField(
        choices=SubscriptionType.choices,
        default=SubscriptionType.MONTHLY,
    )
    subscription_status = serializers.ChoiceField(
        choices=OrderItem.SUBSCRIPTION_STATUS_CHOICES,
        required=False,
    )
    renewal_date = serializers.DateField(required=False, allow_null=True)


class OrderWriteSerializer(serializers.Serializer):
    """
    Input for create / PUT. Prices come from the catalog, never from the client.
    """

    user_id = serializers.UUIDField()
    address_id = serializers.UUIDField(required=False, allow_null=True)
    order_status = serializers.ChoiceField(choices=Order.STATUS_CHOICES, default=Order.STATUS_PENDING)
    payment_method = serializers.CharField(min_length=2, max_length=50)
    last_card_digits = serializers.CharField(validators=[last_four_digits])
    items = OrderItemWriteSerializer(many=True, allow_empty=False)


class OrderStatusSerializer(serializers.Serializer):
    order_status = serializers.ChoiceField(choices=Order.STATUS_CHOICES)


class SubscriptionUpdateSerializer(serializers.Serializer):
    subscription_type = serializers.ChoiceField(choices=SubscriptionType.choices)
    quantity = serializers.IntegerField(min_value=1)


class SubscriptionRenewSerializer(serializers.Serializer):
    previous_subscription_id = serializers.UUIDField()
    subscription_type = serializers.ChoiceField(choices=SubscriptionType.choices, required=False)
