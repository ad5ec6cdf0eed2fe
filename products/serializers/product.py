# products/serializers/product.py

"""
PRODUCT SERIALIZER

Purpose:
- Canonical Product serializer for both back office and storefront.
- Carousel images are nested: at least one is required on create,
  and sending `images` on update replaces the whole set.

Rules mirrored from the model:
- stock 0 => available cannot be true
- discount_price <= unit_price
"""

from django.db import transaction
from rest_framework import serializers

from products.models import Category, Product, ProductImage


class ProductImageSerializer(serializers.ModelSerializer):
    class Meta:
        model = ProductImage
        fields = ["id", "url", "alt", "position"]
        read_only_fields = ["id"]


class ProductSerializer(serializers.ModelSerializer):
    """
    GUARANTEES:
    - Prices are non-negative with 2 decimals
    - Availability is coherent with stock
    - A product always has at least one carousel image
    """

    category = serializers.PrimaryKeyRelatedField(queryset=Category.objects.all())
    category_name = serializers.CharField(source="category.name", read_only=True)
    images = ProductImageSerializer(many=True, required=False)

    class Meta:
        model = Product
        fields = [
            "id",
            "category",
            "category_name",
            "name",
            "description",
            "technical_specs",
            "unit_price",
            "discount_price",
            "stock",
            "available",
            "priority_order",
            "active",
            "main_image",
            "images",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "category_name", "created_at", "updated_at"]
        extra_kwargs = {
            "name": {"min_length": 3, "max_length": 100},
            "description": {"min_length": 10, "max_length": 1000},
            "technical_specs": {"min_length": 10, "max_length": 2000},
            "unit_price": {"min_value": 0},
            "discount_price": {"min_value": 0},
            "stock": {"min_value": 0},
            "priority_order": {"min_value": 1},
        }

    def _current(self, attrs, field, default=None):
        if field in attrs:
            return attrs[field]
        if self.instance is not None:
            return getattr(self.instance, field)
        return default

    def validate(self, attrs):
        stock = self._current(attrs, "stock", 0)
        available = self._current(attrs, "available", False)
        if stock == 0 and available:
            raise serializers.ValidationError(
                {"available": "A product without stock cannot be available."}
            )

        unit_price = self._current(attrs, "unit_price")
        discount_price = self._current(attrs, "discount_price")
        if discount_price is not None and unit_price is not None and discount_price > unit_price:
            raise serializers.ValidationError(
                {"discount_price": "Discount price cannot exceed unit price."}
            )

        if self.instance is None and not attrs.get("images"):
            raise serializers.ValidationError({"images": "At least one carousel image is required."})
        if self.instance is not None and "images" in attrs and not attrs["images"]:
            raise serializers.ValidationError({"images": "At least one carousel image is required."})

        return attrs

    @transaction.atomic
    def create(self, validated_data):
        images = validated_data.pop("images", [])
        product = Product.objects.create(**validated_data)
        self._write_images(product, images)
        return product

    @transaction.atomic
    def update(self, instance, validated_data):
        images = validated_data.pop("images", None)
        for attr, value in validated_data.items():
            setattr(instance, attr, value)
        instance.save()

        if images is not None:
            instance.images.all().delete()
            self._write_images(instance, images)
        return instance

    @staticmethod
    def _write_images(product, images):
        ProductImage.objects.bulk_create(
            [
                ProductImage(
                    product=product,
                    url=img["url"],
                    alt=img.get("alt", ""),
                    position=img.get("position", index),
                )
                for index, img in enumerate(images)
            ]
        )
