# chatbot/serializers.py

from rest_framework import serializers

from chatbot.models import ChatMessage, Conversation


class ChatMessageSerializer(serializers.ModelSerializer):
    conversation_id = serializers.UUIDField(read_only=True)

    class Meta:
        model = ChatMessage
        fields = ["id", "conversation_id", "content", "message_type", "context", "created_at"]
        read_only_fields = fields


class ConversationSerializer(serializers.ModelSerializer):
    user_id = serializers.UUIDField(read_only=True, allow_null=True)
    message_count = serializers.IntegerField(read_only=True, required=False)

    class Meta:
        model = Conversation
        fields = [
            "id",
            "user_id",
            "email",
            "subject",
            "status",
            "message_count",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class ConversationDetailSerializer(ConversationSerializer):
    messages = ChatMessageSerializer(many=True, read_only=True)

    class Meta(ConversationSerializer.Meta):
        fields = ConversationSerializer.Meta.fields + ["messages"]
        read_only_fields = fields


class ConversationCreateSerializer(serializers.Serializer):
    email = serializers.EmailField(required=False, allow_blank=True)
    subject = serializers.CharField(required=False, allow_blank=True, max_length=255)
    session_token = serializers.CharField(required=False, allow_blank=True, max_length=128)


class ConversationStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Conversation.STATUS_CHOICES)


class MessageCreateSerializer(serializers.Serializer):
    conversation_id = serializers.UUIDField()
    content = serializers.CharField(max_length=5000)
