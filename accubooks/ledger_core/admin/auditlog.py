from django.contrib import admin

from ledger_core.models import AuditLog

from .mixins import TenantAdminMixin
from .ReadOnly import ReadOnlyAdmin


@admin.register(AuditLog)
class AuditLogAdmin(TenantAdminMixin, ReadOnlyAdmin):
    """Who recorded what; rows are written by services.audit_helper only."""

    list_display = ("created_at", "company", "user", "action", "object_type", "object_id")
    list_filter = ("action", "object_type")
    search_fields = ("object_id", "user__email", "company__name")
    date_hierarchy = "created_at"
    list_select_related = ("company", "user")
    ordering = ("-created_at",)
