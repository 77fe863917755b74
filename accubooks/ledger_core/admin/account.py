from django.contrib import admin

from ledger_core.models import Account

from .mixins import TenantAdminMixin


# Register `Account` model
@admin.register(Account)
class AccountAdmin(TenantAdminMixin, admin.ModelAdmin):
    list_display = ("id", "company", "code", "name", "ac_type", "is_active")
    list_filter = ("company", "ac_type", "is_active")
    search_fields = ("code", "name")
    # accounts grouped by company, then sorted by code
    ordering = ("company", "code")
    fields = ("company", "code", "name", "ac_type", "description", "is_active")
