# contact/serializers.py

from rest_framework import serializers

from contact.models import ContactMessage


class ContactMessageSerializer(serializers.ModelSerializer):
    user_id = serializers.UUIDField(read_only=True, allow_null=True)

    class Meta:
        model = ContactMessage
        fields = [
            "id",
            "user_id",
            "first_name",
            "last_name",
            "email",
            "subject",
            "message",
            "sent_date",
            "is_read",
            "is_responded",
            "response",
            "response_date",
        ]
        read_only_fields = [
            "id",
            "user_id",
            "sent_date",
            "is_read",
            "is_responded",
            "response",
            "response_date",
        ]


class ContactResponseSerializer(serializers.Serializer):
    response = serializers.CharField(trim_whitespace=True)


class ContactStatsSerializer(serializers.Serializer):
    total = serializers.IntegerField()
    unread = serializers.IntegerField()
    unanswered = serializers.IntegerField()
    last_week = serializers.IntegerField()
