from django.contrib import admin

from ledger_core.models import Customer, Expense, Invoice, Vendor

from .inlines import InvoiceLineInline
from .mixins import TenantAdminMixin


@admin.register(Customer)
class CustomerAdmin(TenantAdminMixin, admin.ModelAdmin):
    list_display = ("id", "company", "name", "email", "phone")
    list_filter = ("company",)
    search_fields = ("name", "email")


@admin.register(Vendor)
class VendorAdmin(TenantAdminMixin, admin.ModelAdmin):
    list_display = ("id", "company", "name", "email", "phone")
    list_filter = ("company",)
    search_fields = ("name", "email")


@admin.register(Invoice)
class InvoiceAdmin(TenantAdminMixin, admin.ModelAdmin):
    list_display = (
        "id", "company", "invoice_number", "customer",
        "date", "due_date", "status", "total",
    )
    list_filter = ("company", "status", "date")
    search_fields = ("invoice_number", "customer__name")
    readonly_fields = ("subtotal", "total")
    inlines = [InvoiceLineInline]

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related("company", "customer")

    # Lines are saved after the header; refresh the totals from them
    def save_related(self, request, form, formsets, change):
        super().save_related(request, form, formsets, change)
        invoice = form.instance
        invoice.recalc_totals(invoice.lines.all())
        invoice.save(update_fields=["subtotal", "total"])


@admin.register(Expense)
class ExpenseAdmin(TenantAdminMixin, admin.ModelAdmin):
    list_display = ("id", "company", "date", "description", "vendor", "amount", "category")
    list_filter = ("company", "category", "date")
    search_fields = ("description", "vendor__name")
    readonly_fields = ("created_by",)

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related("company", "vendor", "account")
