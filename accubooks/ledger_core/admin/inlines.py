from django.contrib import admin

from ledger_core.models import InvoiceLine, JournalLine

from .forms import InvoiceLineForm

# ---------- Inline admin classes ----------


class JournalLineInline(admin.TabularInline):
    """Show JournalLine rows on the JournalEntry page; lines never change."""

    model = JournalLine
    extra = 0
    fields = ("line_no", "account", "description", "debit_amount", "credit_amount")
    readonly_fields = fields
    ordering = ("line_no",)
    can_delete = False

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related("account")

    def has_add_permission(self, request, obj=None):
        return False


class InvoiceLineInline(admin.TabularInline):
    """Shows invoice lines under an Invoice page"""

    model = InvoiceLine
    form = InvoiceLineForm
    extra = 0
    fields = ("line_no", "description", "quantity", "unit_price", "line_total", "account")
    # `line_total` is computed automatically, so it's read-only
    readonly_fields = ("line_total",)
    ordering = ("line_no",)

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related("account")
