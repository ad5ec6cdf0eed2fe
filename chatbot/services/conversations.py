# chatbot/services/conversations.py

"""
CONVERSATION SERVICE

Stores messages around the pure keyword engine:
- the USER message is saved, the engine runs on the prior history,
  the BOT reply is saved with the context it leaves the conversation in
- needs_human_support on an ACTIVE conversation → PENDING_ADMIN
- ready_to_submit → email/subject kept on the conversation and a
  ContactMessage filed for the back office
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from django.db import transaction

from chatbot.models import ChatMessage, Conversation
from chatbot.services import engine
from contact.models import ContactMessage
from contact.services import file_message

logger = logging.getLogger(__name__)

RECENT_HISTORY = 10
CHATBOT_SENDER_NAME = "Chatbot"


class ConversationClosedError(Exception):
    """Messages cannot be posted to a CLOSED conversation."""


@dataclass
class Exchange:
    user_message: ChatMessage
    bot_message: ChatMessage
    reply: engine.BotReply
    contact_message: Optional[ContactMessage] = None


@transaction.atomic
def start_conversation(*, user=None, session=None, email: str = "", subject: str = "") -> Conversation:
    conversation = Conversation.objects.create(
        user=user if getattr(user, "is_authenticated", False) else None,
        session=session,
        email=email or "",
        subject=subject or "",
    )
    ChatMessage.objects.create(
        conversation=conversation,
        content=engine.WELCOME,
        message_type=ChatMessage.TYPE_BOT,
        context=engine.CTX_INITIAL,
    )
    logger.info("Conversation started", extra={"conversation_id": str(conversation.id)})
    return conversation


def recent_history(conversation: Conversation) -> list[ChatMessage]:
    recent = ChatMessage.objects.filter(conversation=conversation).order_by("-position")[:RECENT_HISTORY]
    return list(reversed(recent))


def _file_contact(conversation: Conversation, collected: dict) -> ContactMessage:
    user = conversation.user
    email = collected.get("email") or conversation.email or (user.email if user else "")
    return file_message(
        user=user,
        first_name=(user.first_name if user else "") or CHATBOT_SENDER_NAME,
        last_name=(user.last_name if user else "") or CHATBOT_SENDER_NAME,
        email=email,
        subject=collected.get("subject") or engine.DEFAULT_SUBJECT,
        message=collected.get("message") or "",
    )


@transaction.atomic
def post_user_message(conversation: Conversation, content: str) -> Exchange:
    conversation = Conversation.objects.select_for_update().select_related("user").get(pk=conversation.pk)
    if conversation.status == Conversation.STATUS_CLOSED:
        raise ConversationClosedError("This conversation is closed.")

    history = recent_history(conversation)
    user_message = ChatMessage.objects.create(
        conversation=conversation,
        content=content,
        message_type=ChatMessage.TYPE_USER,
    )

    reply = engine.reply(content, history)
    bot_message = ChatMessage.objects.create(
        conversation=conversation,
        content=reply.text,
        message_type=ChatMessage.TYPE_BOT,
        context=reply.context,
    )

    fields = ["updated_at"]
    if reply.needs_human_support and conversation.status == Conversation.STATUS_ACTIVE:
        conversation.status = Conversation.STATUS_PENDING_ADMIN
        fields.append("status")

    contact_message = None
    if reply.ready_to_submit and reply.collected:
        if reply.collected.get("email"):
            conversation.email = reply.collected["email"]
            fields.append("email")
        conversation.subject = reply.collected.get("subject") or engine.DEFAULT_SUBJECT
        fields.append("subject")
        contact_message = _file_contact(conversation, reply.collected)

    conversation.save(update_fields=fields)

    logger.info(
        "Chatbot replied",
        extra={
            "conversation_id": str(conversation.id),
            "context": reply.context,
            "needs_human_support": reply.needs_human_support,
        },
    )
    return Exchange(user_message, bot_message, reply, contact_message)


def post_admin_message(conversation: Conversation, content: str, *, admin=None) -> ChatMessage:
    message = ChatMessage.objects.create(
        conversation=conversation,
        content=content,
        message_type=ChatMessage.TYPE_ADMIN,
    )
    conversation.save(update_fields=["updated_at"])
    logger.info(
        "Admin replied in conversation",
        extra={
            "conversation_id": str(conversation.id),
            "by": str(admin.id) if admin is not None else None,
        },
    )
    return message


@transaction.atomic
def escalate(conversation: Conversation) -> Conversation:
    conversation.status = Conversation.STATUS_PENDING_ADMIN
    conversation.save(update_fields=["status", "updated_at"])
    ChatMessage.objects.create(
        conversation=conversation,
        content=engine.ESCALATION_NOTICE,
        message_type=ChatMessage.TYPE_BOT,
        context=engine.CTX_INITIAL,
    )
    logger.info("Conversation escalated", extra={"conversation_id": str(conversation.id)})
    return conversation
