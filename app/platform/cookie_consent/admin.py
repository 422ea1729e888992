"""
Django Admin for the consent audit log
"""

from django.contrib import admin
from .models import ConsentLogEntry


@admin.register(ConsentLogEntry)
class ConsentLogEntryAdmin(admin.ModelAdmin):
    list_display = ['created_at', 'category', 'granted', 'action', 'ip_address', 'session_key']
    list_filter = ['category', 'granted', 'action']
    search_fields = ['category', 'ip_address', 'session_key']
    readonly_fields = [
        'id', 'category', 'granted', 'action', 'ip_address', 'user_agent',
        'session_key', 'metadata', 'created_at', 'updated_at',
    ]
    date_hierarchy = 'created_at'

    # The audit trail is append-only
    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False
