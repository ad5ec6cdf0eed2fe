# chatbot/admin.py

from django.contrib import admin

from chatbot.models import ChatMessage, Conversation


class ChatMessageInline(admin.TabularInline):
    model = ChatMessage
    extra = 0
    readonly_fields = ("message_type", "content", "context", "created_at")
    can_delete = False


@admin.register(Conversation)
class ConversationAdmin(admin.ModelAdmin):
    list_display = ("id", "email", "subject", "status", "updated_at")
    list_filter = ("status",)
    search_fields = ("email", "subject")
    inlines = [ChatMessageInline]
