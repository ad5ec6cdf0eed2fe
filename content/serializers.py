# content/serializers.py

from rest_framework import serializers

from content.models import HeroCarouselSlide, MainMessage


class HeroCarouselSlideSerializer(serializers.ModelSerializer):
    title = serializers.CharField(min_length=2, max_length=150)
    priority_order = serializers.IntegerField(min_value=1, required=False)

    class Meta:
        model = HeroCarouselSlide
        fields = [
            "id",
            "title",
            "description",
            "image_url",
            "button_text",
            "button_link",
            "active",
            "priority_order",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "created_at", "updated_at"]

    def validate_title(self, value: str):
        v = (value or "").strip()
        if len(v) < 2:
            raise serializers.ValidationError("title must be at least 2 characters")
        return v


class MainMessageSerializer(serializers.ModelSerializer):
    class Meta:
        model = MainMessage
        fields = [
            "id",
            "content",
            "active",
            "has_background",
            "background_color",
            "text_color",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "created_at", "updated_at"]

    def validate_content(self, value: str):
        v = (value or "").strip()
        if not v:
            raise serializers.ValidationError("content cannot be blank")
        return v
