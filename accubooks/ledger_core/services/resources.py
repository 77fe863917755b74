"""
Tenant-scoped list/create services.

Every function takes the TenantContext produced by the access guard; the
company id is always stamped from it and never read from the payload.
"""
from typing import Optional

from django.db import transaction

from ..exceptions import EmptyEntry, InvalidPayload
from ..forms import (AccountForm, ContactForm, ExpenseForm, InvoiceForm,
                     InvoiceLineForm, JournalEntryForm, JournalLineForm)
from ..models import Account, Customer, Expense, Invoice, JournalEntry, Vendor
from .access import TenantContext
from .posting import commit_invoice, post_journal_entry, storage_errors


def parse_limit(value) -> Optional[int]:
    """`?limit=` must be a positive integer when present."""
    if value is None or value == "":
        return None
    try:
        limit = int(value)
    except (TypeError, ValueError):
        raise InvalidPayload({"limit": ["Must be a positive integer"]})
    if limit <= 0:
        raise InvalidPayload({"limit": ["Must be a positive integer"]})
    return limit


def _limited(queryset, limit):
    return queryset[:limit] if limit else queryset


# ---------- Accounts ----------
def list_accounts(tenant: TenantContext, limit=None):
    return _limited(Account.objects.for_company(tenant.company_id).order_by("code"), limit)


def create_account(tenant: TenantContext, payload, user=None) -> Account:
    data = AccountForm.parse(payload)
    with storage_errors("account", tenant.company_id), transaction.atomic():
        return Account.objects.create(
            company_id=tenant.company_id,
            code=data["code"],
            name=data["name"],
            ac_type=data["type"],
            description=data["description"],
        )


# ---------- Customers / Vendors ----------
def list_customers(tenant: TenantContext, limit=None):
    return _limited(Customer.objects.for_company(tenant.company_id).order_by("-created_at", "-id"), limit)


def create_customer(tenant: TenantContext, payload, user=None) -> Customer:
    data = ContactForm.parse(payload)
    with storage_errors("customer", tenant.company_id), transaction.atomic():
        return Customer.objects.create(company_id=tenant.company_id, **data)


def list_vendors(tenant: TenantContext, limit=None):
    return _limited(Vendor.objects.for_company(tenant.company_id).order_by("-created_at", "-id"), limit)


def create_vendor(tenant: TenantContext, payload, user=None) -> Vendor:
    data = ContactForm.parse(payload)
    with storage_errors("vendor", tenant.company_id), transaction.atomic():
        return Vendor.objects.create(company_id=tenant.company_id, **data)


# ---------- Journal entries ----------
def list_journal_entries(tenant: TenantContext, limit=None):
    queryset = (
        JournalEntry.objects.for_company(tenant.company_id)
        .select_related("created_by")
        .prefetch_related("lines__account")
        .order_by("-date", "-id")
    )
    return _limited(queryset, limit)


def create_journal_entry(tenant: TenantContext, entry_payload, lines_payload, user=None) -> JournalEntry:
    """
    Schema-check the header and each line, then hand off to the
    double-entry validator and the atomic commit. An entry without lines is
    refused as EmptyEntry before anything else is looked at.
    """
    if not lines_payload:
        raise EmptyEntry()
    header = JournalEntryForm.parse(entry_payload, prefix_errors="entry")
    if not isinstance(lines_payload, list):
        raise InvalidPayload({"lines": ["Expected a list of lines"]})

    lines = []
    for index, raw in enumerate(lines_payload):
        data = JournalLineForm.parse(raw, prefix_errors=f"lines[{index}]")
        lines.append(
            {
                "account_id": data["accountId"],
                "description": data["description"],
                "debit_amount": raw.get("debitAmount"),
                "credit_amount": raw.get("creditAmount"),
            }
        )
    return post_journal_entry(tenant, header, lines, user=user)


# ---------- Invoices ----------
def list_invoices(tenant: TenantContext, limit=None):
    queryset = (
        Invoice.objects.for_company(tenant.company_id)
        .select_related("customer")
        .prefetch_related("lines")
        .order_by("-date", "-id")
    )
    return _limited(queryset, limit)


def create_invoice(tenant: TenantContext, invoice_payload, lines_payload, user=None) -> Invoice:
    data = InvoiceForm.parse(invoice_payload, prefix_errors="invoice", company_id=tenant.company_id)
    if not isinstance(lines_payload, list) or not lines_payload:
        raise InvalidPayload({"lines": ["At least one invoice line is required"]})

    lines = []
    for index, raw in enumerate(lines_payload):
        line = InvoiceLineForm.parse(raw, prefix_errors=f"lines[{index}]", company_id=tenant.company_id)
        lines.append(
            {
                "description": line["description"],
                "quantity": line["quantity"],
                "unit_price": line["unitPrice"],
                "account": line["accountId"],
            }
        )

    header = {
        "customer": data["customerId"],
        "invoice_number": data["invoiceNumber"],
        "date": data["date"],
        "due_date": data["dueDate"],
        "status": data["status"],
        "tax_amount": data["taxAmount"],
        "description": data["description"],
    }
    return commit_invoice(tenant, header, lines, user=user)


# ---------- Expenses ----------
def list_expenses(tenant: TenantContext, limit=None):
    queryset = (
        Expense.objects.for_company(tenant.company_id)
        .select_related("vendor", "account")
        .order_by("-date", "-id")
    )
    return _limited(queryset, limit)


def create_expense(tenant: TenantContext, payload, user=None) -> Expense:
    data = ExpenseForm.parse(payload, company_id=tenant.company_id)
    with storage_errors("expense", tenant.company_id), transaction.atomic():
        expense = Expense(
            company_id=tenant.company_id,
            vendor=data["vendorId"],
            account=data["accountId"],
            date=data["date"],
            description=data["description"],
            amount=data["amount"],
            category=data["category"],
            created_by=user,
        )
        expense.save()
    return expense
