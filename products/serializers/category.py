# products/serializers/category.py

from rest_framework import serializers

from products.models import Category


class CategorySerializer(serializers.ModelSerializer):
    """
    Category serializer.

    Rules:
    - name 2..100 chars, trimmed
    - name uniqueness is checked case-insensitively by the view (409, not 400)
    - id + timestamps are read-only
    """

    name = serializers.CharField(min_length=2, max_length=100)
    product_count = serializers.IntegerField(source="products.count", read_only=True)

    class Meta:
        model = Category
        fields = [
            "id",
            "name",
            "description",
            "image",
            "priority_order",
            "active",
            "product_count",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "product_count", "created_at", "updated_at"]

    def validate_name(self, value: str):
        v = (value or "").strip()
        if len(v) < 2:
            raise serializers.ValidationError("name must be at least 2 characters")
        return v
