from decimal import Decimal

from django.contrib import admin
from django.db.models import Prefetch
from django.utils.html import format_html

from ledger_core.models import JournalEntry, JournalLine

from .inlines import JournalLineInline
from .mixins import TenantAdminMixin
from .ReadOnly import ReadOnlyAdmin


# Register `JournalEntry` model
@admin.register(JournalEntry)
class JournalEntryAdmin(TenantAdminMixin, ReadOnlyAdmin):
    """
    Entries are created through the API only, where they are validated and
    committed atomically. The admin shows them with their lines.
    """

    list_display = (
        "id",
        "company",
        "date",
        "reference",
        "created_by",
        "balanced",
    )
    list_filter = ("company", "date")
    search_fields = ("reference", "description", "id")
    inlines = [JournalLineInline]

    # Fetch lines and their accounts up front
    def get_queryset(self, request):
        qs = super().get_queryset(request)
        journalline_qs = JournalLine.objects.select_related("account")
        return qs.select_related("company", "created_by").prefetch_related(
            Prefetch("lines", queryset=journalline_qs)
        )

    """ Computed column for balance check """
    # Show total debits / total credits for each journal
    def balanced(self, obj):
        lines = obj.lines.all()
        d = sum((line.debit_amount for line in lines), Decimal("0.00"))
        c = sum((line.credit_amount for line in lines), Decimal("0.00"))
        # format: bold debits / small credits
        return format_html("<b>{}</b> / <small>{}</small>", d, c)

    # set column header in admin
    balanced.short_description = "Debits / Credits"
