# contact/admin.py

from django.contrib import admin

from contact.models import ContactMessage


@admin.register(ContactMessage)
class ContactMessageAdmin(admin.ModelAdmin):
    list_display = ("email", "subject", "sent_date", "is_read", "is_responded")
    list_filter = ("is_read", "is_responded")
    search_fields = ("email", "subject", "first_name", "last_name")
    readonly_fields = ("sent_date", "response_date")
