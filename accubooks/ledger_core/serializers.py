"""Model → JSON dict converters used by the views (camelCase keys)."""
from decimal import Decimal

from .services.amounts import format_amount


def _money(value):
    return None if value is None else format_amount(value)


def _date(value):
    return value.isoformat() if value else None


def user_to_dict(user):
    # never expose the password hash
    return {
        "id": user.pk,
        "username": user.username,
        "email": user.email,
        "firstName": user.first_name,
        "lastName": user.last_name,
        "role": user.role,
    }


def company_to_dict(company):
    return {
        "id": company.pk,
        "name": company.name,
        "slug": company.slug,
        "currencyCode": company.currency_code,
        "createdAt": _date(company.created_at),
    }


def account_to_dict(account):
    return {
        "id": account.pk,
        "companyId": account.company_id,
        "code": account.code,
        "name": account.name,
        "type": account.ac_type,
        "description": account.description,
        "isActive": account.is_active,
    }


def journal_line_to_dict(line):
    return {
        "id": line.pk,
        "lineNo": line.line_no,
        "accountId": line.account_id,
        "description": line.description,
        "debitAmount": _money(line.debit_amount),
        "creditAmount": _money(line.credit_amount),
    }


def journal_entry_to_dict(entry):
    lines = list(entry.lines.all())
    return {
        "id": entry.pk,
        "companyId": entry.company_id,
        "date": _date(entry.date),
        "reference": entry.reference,
        "description": entry.description,
        "createdBy": entry.created_by_id,
        "createdAt": _date(entry.created_at),
        "lines": [journal_line_to_dict(line) for line in lines],
        "totalDebit": _money(sum((line.debit_amount for line in lines), Decimal("0.00"))),
        "totalCredit": _money(sum((line.credit_amount for line in lines), Decimal("0.00"))),
    }


def contact_to_dict(contact):
    # Customers and vendors share the same shape
    return {
        "id": contact.pk,
        "companyId": contact.company_id,
        "name": contact.name,
        "email": contact.email,
        "phone": contact.phone,
        "address": contact.address,
    }


def invoice_line_to_dict(line):
    return {
        "id": line.pk,
        "lineNo": line.line_no,
        "description": line.description,
        "quantity": str(line.quantity),
        "unitPrice": str(line.unit_price),
        "lineTotal": _money(line.line_total),
        "accountId": line.account_id,
    }


def invoice_to_dict(invoice):
    return {
        "id": invoice.pk,
        "companyId": invoice.company_id,
        "customerId": invoice.customer_id,
        "invoiceNumber": invoice.invoice_number,
        "date": _date(invoice.date),
        "dueDate": _date(invoice.due_date),
        "status": invoice.status,
        "subtotal": _money(invoice.subtotal),
        "taxAmount": _money(invoice.tax_amount),
        "total": _money(invoice.total),
        "description": invoice.description,
        "lines": [invoice_line_to_dict(line) for line in invoice.lines.all()],
    }


def expense_to_dict(expense):
    return {
        "id": expense.pk,
        "companyId": expense.company_id,
        "vendorId": expense.vendor_id,
        "accountId": expense.account_id,
        "date": _date(expense.date),
        "description": expense.description,
        "amount": _money(expense.amount),
        "category": expense.category,
        "createdBy": expense.created_by_id,
    }
