# content/admin.py

from django.contrib import admin

from content.models import HeroCarouselSlide, MainMessage


@admin.register(HeroCarouselSlide)
class HeroCarouselSlideAdmin(admin.ModelAdmin):
    list_display = ("title", "priority_order", "active", "updated_at")
    list_filter = ("active",)
    ordering = ("priority_order",)


@admin.register(MainMessage)
class MainMessageAdmin(admin.ModelAdmin):
    list_display = ("__str__", "active", "has_background", "updated_at")
    list_filter = ("active",)
