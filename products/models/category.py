# products/models/category.py

import uuid

from django.core.validators import MinLengthValidator, MinValueValidator
from django.db import models


class Category(models.Model):
    """
    Product category.

    Rules:
    - name unique (case-insensitive check happens in the serializer)
    - a category cannot be deleted while products reference it (PROTECT)
    - toggling `active` cascades to the category's products (see services.catalog)
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    name = models.CharField(max_length=100, unique=True, validators=[MinLengthValidator(2)])
    description = models.TextField(blank=True, default="")
    image = models.CharField(max_length=500, blank=True, default="")
    priority_order = models.PositiveIntegerField(default=1, validators=[MinValueValidator(1)])
    active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]
        verbose_name_plural = "categories"

    def __str__(self):
        return self.name
