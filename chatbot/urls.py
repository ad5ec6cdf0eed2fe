# chatbot/urls.py

from django.urls import path

from chatbot.views import (
    AdminMessageView,
    ConversationDetailView,
    ConversationEscalateView,
    ConversationListView,
    MessageView,
)

app_name = "chatbot"

urlpatterns = [
    path("chatbot/conversations/", ConversationListView.as_view(), name="conversation-list"),
    path(
        "chatbot/conversations/<uuid:conversation_id>/",
        ConversationDetailView.as_view(),
        name="conversation-detail",
    ),
    path(
        "chatbot/conversations/<uuid:conversation_id>/escalate/",
        ConversationEscalateView.as_view(),
        name="conversation-escalate",
    ),
    path("chatbot/messages/", MessageView.as_view(), name="message-list"),
    path("chatbot/messages/admin/", AdminMessageView.as_view(), name="message-admin"),
]
