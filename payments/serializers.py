# payments/serializers.py

from rest_framework import serializers

from payments.models import PaymentMethod, Transaction


class CheckoutRequestSerializer(serializers.Serializer):
    session_token = serializers.CharField(max_length=128)


class CheckoutResponseSerializer(serializers.Serializer):
    session_id = serializers.CharField()
    url = serializers.URLField()


class ConfirmationSerializer(serializers.ModelSerializer):
    session_id = serializers.CharField(source="provider_checkout_id", read_only=True)
    order_id = serializers.UUIDField(read_only=True, allow_null=True)
    invoice_number = serializers.CharField(source="order.invoice_number", read_only=True, default=None)

    class Meta:
        model = Transaction
        fields = ["session_id", "status", "amount", "currency", "order_id", "invoice_number"]
        read_only_fields = fields


class PaymentMethodSerializer(serializers.ModelSerializer):
    class Meta:
        model = PaymentMethod
        fields = [
            "id",
            "card_name",
            "last_card_digits",
            "brand",
            "expiration_month",
            "expiration_year",
            "is_default",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class PaymentMethodCreateSerializer(serializers.Serializer):
    card_name = serializers.CharField(max_length=100)
    stripe_payment_id = serializers.CharField(max_length=255)
    last_card_digits = serializers.RegexField(r"^\d{4}$", max_length=4)
    brand = serializers.CharField(max_length=50)
    expiration_month = serializers.IntegerField(min_value=1, max_value=12, required=False, allow_null=True)
    expiration_year = serializers.IntegerField(min_value=2000, required=False, allow_null=True)
    is_default = serializers.BooleanField(default=False)

    def validate_stripe_payment_id(self, value):
        if PaymentMethod.objects.filter(provider_payment_method_id=value).exists():
            raise serializers.ValidationError("This payment method is already registered.")
        return value


class PaymentMethodUpdateSerializer(serializers.Serializer):
    card_name = serializers.CharField(max_length=100, required=False)
    is_default = serializers.BooleanField(required=False)
