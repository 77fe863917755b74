from decimal import Decimal

from django.db.models import Count, Sum

from ..models import Account, Expense, Invoice, JournalEntry
from .access import TenantContext


def financial_metrics(tenant: TenantContext) -> dict:
    """Dashboard figures for one company. Amounts are decimal strings."""
    invoices = Invoice.objects.for_company(tenant.company_id)

    revenue = invoices.aggregate(total=Sum("total"))["total"] or Decimal("0.00")
    expenses = (
        Expense.objects.for_company(tenant.company_id)
        .aggregate(total=Sum("amount"))["total"] or Decimal("0.00")
    )
    outstanding = invoices.exclude(status="paid").aggregate(
        count=Count("id"), amount=Sum("total")
    )

    return {
        "totalRevenue": str(revenue),
        "totalExpenses": str(expenses),
        "netIncome": str(revenue - expenses),
        "outstandingInvoices": {
            "count": outstanding["count"],
            "amount": str(outstanding["amount"] or Decimal("0.00")),
        },
        "journalEntryCount": JournalEntry.objects.for_company(tenant.company_id).count(),
        "accountCount": Account.objects.for_company(tenant.company_id).count(),
    }
