# chatbot/views.py
"""
CHATBOT API

Public (throttled, "chatbot" scope):
- POST  /chatbot/conversations/                 start (welcome BOT message)
- GET   /chatbot/conversations/<id>/            conversation + messages
- POST  /chatbot/conversations/<id>/escalate/   hand over to a human
- GET   /chatbot/messages/?conversation_id=     messages, oldest first
- POST  /chatbot/messages/                      user message → bot reply

Staff roles (manager, admin, super_admin):
- GET   /chatbot/conversations/?status=         newest 50
- PATCH /chatbot/conversations/<id>/            {status}
- POST  /chatbot/messages/admin/                admin reply
"""

from __future__ import annotations

from django.db.models import Count
from django.shortcuts import get_object_or_404
from django.utils import timezone
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import serializers, status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.throttling import AnonRateThrottle
from rest_framework.views import APIView

from chatbot.models import Conversation
from chatbot.serializers import (
    ChatMessageSerializer,
    ConversationCreateSerializer,
    ConversationDetailSerializer,
    ConversationSerializer,
    ConversationStatusSerializer,
    MessageCreateSerializer,
)
from chatbot.services.conversations import (
    ConversationClosedError,
    escalate,
    post_admin_message,
    post_user_message,
    start_conversation,
)
from permissions.roles import IsStaffRole
from users.models import Session
from users.services.sessions import session_token_from_request

STAFF_LIST_LIMIT = 50


class ChatbotThrottle(AnonRateThrottle):
    scope = "chatbot"


class ConversationListView(APIView):
    throttle_classes = [ChatbotThrottle]

    def get_permissions(self):
        if self.request.method == "POST":
            return [AllowAny()]
        return [IsAuthenticated(), IsStaffRole()]

    @extend_schema(
        parameters=[OpenApiParameter("status", str, required=False)],
        responses={200: ConversationSerializer(many=True)},
    )
    def get(self, request):
        qs = Conversation.objects.annotate(message_count=Count("messages")).order_by("-updated_at")
        status_filter = (request.query_params.get("status") or "").strip().upper()
        if status_filter:
            if status_filter not in {value for value, _ in Conversation.STATUS_CHOICES}:
                raise serializers.ValidationError({"status": ["Invalid status."]})
            qs = qs.filter(status=status_filter)
        return Response(ConversationSerializer(qs[:STAFF_LIST_LIMIT], many=True).data)

    @extend_schema(request=ConversationCreateSerializer, responses={201: ConversationDetailSerializer})
    def post(self, request):
        serializer = ConversationCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        session = None
        token = session_token_from_request(request) or data.get("session_token")
        if token:
            session = Session.objects.filter(session_token=token, expires_at__gt=timezone.now()).first()

        conversation = start_conversation(
            user=request.user,
            session=session,
            email=data.get("email", ""),
            subject=data.get("subject", ""),
        )
        return Response(ConversationDetailSerializer(conversation).data, status=status.HTTP_201_CREATED)


class ConversationDetailView(APIView):
    throttle_classes = [ChatbotThrottle]

    def get_permissions(self):
        if self.request.method == "GET":
            return [AllowAny()]
        return [IsAuthenticated(), IsStaffRole()]

    @extend_schema(responses={200: ConversationDetailSerializer})
    def get(self, request, conversation_id):
        conversation = get_object_or_404(
            Conversation.objects.prefetch_related("messages"),
            pk=conversation_id,
        )
        return Response(ConversationDetailSerializer(conversation).data)

    @extend_schema(request=ConversationStatusSerializer, responses={200: ConversationSerializer})
    def patch(self, request, conversation_id):
        conversation = get_object_or_404(Conversation, pk=conversation_id)
        serializer = ConversationStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        conversation.status = serializer.validated_data["status"]
        conversation.save(update_fields=["status", "updated_at"])
        return Response(ConversationSerializer(conversation).data)


class ConversationEscalateView(APIView):
    permission_classes = [AllowAny]
    throttle_classes = [ChatbotThrottle]

    @extend_schema(request=None, responses={200: ConversationSerializer})
    def post(self, request, conversation_id):
        conversation = escalate(get_object_or_404(Conversation, pk=conversation_id))
        return Response(ConversationSerializer(conversation).data)


class MessageView(APIView):
    permission_classes = [AllowAny]
    throttle_classes = [ChatbotThrottle]

    @extend_schema(
        parameters=[OpenApiParameter("conversation_id", str, required=True)],
        responses={200: ChatMessageSerializer(many=True)},
    )
    def get(self, request):
        conversation_id = (request.query_params.get("conversation_id") or "").strip()
        if not conversation_id:
            raise serializers.ValidationError({"conversation_id": ["This field is required."]})
        field = serializers.UUIDField()
        conversation = get_object_or_404(Conversation, pk=field.run_validation(conversation_id))
        return Response(ChatMessageSerializer(conversation.messages.all(), many=True).data)

    @extend_schema(request=MessageCreateSerializer, responses={201: dict})
    def post(self, request):
        serializer = MessageCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        conversation = get_object_or_404(Conversation, pk=data["conversation_id"])
        try:
            exchange = post_user_message(conversation, data["content"])
        except ConversationClosedError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(
            {
                "user_message": ChatMessageSerializer(exchange.user_message).data,
                "bot_message": ChatMessageSerializer(exchange.bot_message).data,
                "needs_human_support": exchange.reply.needs_human_support,
                "context": exchange.reply.context,
                "ready_to_submit": exchange.reply.ready_to_submit,
                "contact_message_id": str(exchange.contact_message.id) if exchange.contact_message else None,
            },
            status=status.HTTP_201_CREATED,
        )


class AdminMessageView(APIView):
    permission_classes = [IsAuthenticated, IsStaffRole]

    @extend_schema(request=MessageCreateSerializer, responses={201: ChatMessageSerializer})
    def post(self, request):
        serializer = MessageCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        conversation = get_object_or_404(Conversation, pk=data["conversation_id"])
        message = post_admin_message(conversation, data["content"], admin=request.user)
        return Response(ChatMessageSerializer(message).data, status=status.HTTP_201_CREATED)
