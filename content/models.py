# content/models.py

import uuid

from django.core.validators import MinLengthValidator, MinValueValidator, RegexValidator
from django.db import models, transaction

hex_color = RegexValidator(
    regex=r"^#(?:[0-9a-fA-F]{3}){1,2}$",
    message="Colors must be hex values like #1a2b3c.",
)


class HeroCarouselSlide(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    title = models.CharField(max_length=150, validators=[MinLengthValidator(2)])
    description = models.TextField(blank=True, default="")
    image_url = models.CharField(max_length=500)
    button_text = models.CharField(max_length=60, blank=True, default="")
    button_link = models.CharField(max_length=500, blank=True, default="")
    active = models.BooleanField(default=True)
    priority_order = models.PositiveIntegerField(default=1, validators=[MinValueValidator(1)])

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["priority_order", "created_at"]

    def __str__(self):
        return f"{self.priority_order}. {self.title}"


class MainMessage(models.Model):
    """
    Banner message shown at the top of the storefront.

    Rules:
    - at most one message is active at a time
    - saving an active message deactivates every other one (same transaction)
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    content = models.TextField(validators=[MinLengthValidator(1)])
    active = models.BooleanField(default=False)
    has_background = models.BooleanField(default=False)
    background_color = models.CharField(max_length=7, default="#000000", validators=[hex_color])
    text_color = models.CharField(max_length=7, default="#FFFFFF", validators=[hex_color])

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-active", "-updated_at"]

    def save(self, *args, **kwargs):
        with transaction.atomic():
            if self.active:
                MainMessage.objects.filter(active=True).exclude(pk=self.pk).update(active=False)
            super().save(*args, **kwargs)

    @classmethod
    def current(cls):
        return cls.objects.filter(active=True).order_by("-updated_at").first()

    def __str__(self):
        return self.content[:60]
