# cart/serializers.py

from rest_framework import serializers

from cart.models import CartItem
from cart.pricing import SubscriptionType


class CartItemSerializer(serializers.ModelSerializer):
    product_id = serializers.UUIDField(read_only=True)
    name = serializers.CharField(source="product.name", read_only=True)
    main_image = serializers.CharField(source="product.main_image", read_only=True)
    category = serializers.CharField(source="product.category.name", read_only=True)
    unit_price = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)
    total = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = CartItem
        fields = [
            "id",
            "product_id",
            "name",
            "main_image",
            "category",
            "quantity",
            "subscription_type",
            "unit_price",
            "total",
            "created_at",
        ]
        read_only_fields = fields


class CartAddSerializer(serializers.Serializer):
    product_id = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1, default=1)
    subscription_type = serializers.ChoiceField(
        choices=SubscriptionType.choices,
        default=SubscriptionType.MONTHLY,
    )


class CartUpdateSerializer(serializers.Serializer):
    cart_item_id = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1)
    subscription_type = serializers.ChoiceField(choices=SubscriptionType.choices)


class CartRemoveSerializer(serializers.Serializer):
    cart_item_id = serializers.UUIDField()
