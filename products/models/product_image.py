# products/models/product_image.py

import uuid

from django.db import models

from .product import Product


class ProductImage(models.Model):
    """Carousel image of a product page, displayed by `position`."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name="images")
    url = models.CharField(max_length=500)
    alt = models.CharField(max_length=255, blank=True, default="")
    position = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ["position", "id"]

    def __str__(self):
        return f"{self.product_id} #{self.position}"
