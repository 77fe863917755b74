"""
Request payload schemas.

Each form is the explicit field set for one JSON body. Field names follow the
JSON API (camelCase). Foreign keys are limited to the acting company's rows, so
a foreign id from another tenant fails as an unknown choice.
"""
from decimal import Decimal

from django import forms

from .exceptions import InvalidPayload
from .models import AC_TYPES, Account, Customer, Vendor
from .models.invoice import INV_STATUS_CHOICES


class SchemaForm(forms.Form):
    """Base form: `parse()` returns cleaned_data or raises InvalidPayload."""

    @classmethod
    def parse(cls, data, prefix_errors=None, **kwargs):
        if not isinstance(data, dict):
            raise InvalidPayload({"__all__": ["Expected a JSON object"]})
        form = cls(data=data, **kwargs)
        if not form.is_valid():
            errors = {
                field: [str(message) for message in messages]
                for field, messages in form.errors.items()
            }
            if prefix_errors:
                errors = {f"{prefix_errors}.{field}": msgs for field, msgs in errors.items()}
            raise InvalidPayload(errors)
        return form.cleaned_data


class TenantSchemaForm(SchemaForm):
    """Restricts every ModelChoiceField to the given company's rows."""

    def __init__(self, *args, company_id=None, **kwargs):
        super().__init__(*args, **kwargs)
        for field in self.fields.values():
            if isinstance(field, forms.ModelChoiceField):
                field.queryset = field.queryset.model.objects.for_company(company_id)


# ---------- Identity ----------
class RegisterForm(SchemaForm):
    email = forms.EmailField()
    username = forms.CharField(max_length=150)
    password = forms.CharField(min_length=8, strip=False)
    firstName = forms.CharField(max_length=150, required=False)
    lastName = forms.CharField(max_length=150, required=False)
    role = forms.ChoiceField(choices=[("user", "User"), ("admin", "Admin")], required=False)


class LoginForm(SchemaForm):
    email = forms.EmailField()
    password = forms.CharField(strip=False)


class CompanyForm(SchemaForm):
    name = forms.CharField(max_length=200)
    currencyCode = forms.CharField(max_length=10, required=False)


# ---------- Chart of accounts ----------
class AccountForm(SchemaForm):
    code = forms.CharField(max_length=32)
    name = forms.CharField(max_length=200)
    type = forms.ChoiceField(choices=AC_TYPES)
    description = forms.CharField(required=False)


# ---------- Journal entries ----------
class JournalEntryForm(SchemaForm):
    date = forms.DateField()
    description = forms.CharField(required=False)
    reference = forms.CharField(max_length=200, required=False)


class JournalLineForm(SchemaForm):
    # amounts are parsed by the double-entry validator, not here
    accountId = forms.IntegerField(min_value=1)
    description = forms.CharField(max_length=400, required=False)


# ---------- Customers / Vendors ----------
class ContactForm(SchemaForm):
    name = forms.CharField(max_length=200)
    email = forms.EmailField(required=False)
    phone = forms.CharField(max_length=32, required=False)
    address = forms.CharField(required=False)


# ---------- Invoices ----------
class InvoiceForm(TenantSchemaForm):
    customerId = forms.ModelChoiceField(queryset=Customer.objects.none())
    invoiceNumber = forms.CharField(max_length=64)
    date = forms.DateField()
    dueDate = forms.DateField(required=False)
    status = forms.ChoiceField(choices=INV_STATUS_CHOICES, required=False)
    taxAmount = forms.DecimalField(
        max_digits=18, decimal_places=2, min_value=Decimal("0"), required=False
    )
    description = forms.CharField(required=False)

    def clean(self):
        cleaned = super().clean()
        date, due_date = cleaned.get("date"), cleaned.get("dueDate")
        if date and due_date and due_date < date:
            self.add_error("dueDate", "Due date cannot be before the invoice date.")
        return cleaned


class InvoiceLineForm(TenantSchemaForm):
    description = forms.CharField(max_length=400)
    quantity = forms.DecimalField(
        max_digits=14, decimal_places=4, min_value=Decimal("0")
    )
    unitPrice = forms.DecimalField(
        max_digits=18, decimal_places=4, min_value=Decimal("0")
    )
    accountId = forms.ModelChoiceField(queryset=Account.objects.none(), required=False)


# ---------- Expenses ----------
class ExpenseForm(TenantSchemaForm):
    date = forms.DateField()
    description = forms.CharField()
    amount = forms.DecimalField(
        max_digits=18, decimal_places=2, min_value=Decimal("0.01")
    )
    category = forms.CharField(max_length=100, required=False)
    vendorId = forms.ModelChoiceField(queryset=Vendor.objects.none(), required=False)
    accountId = forms.ModelChoiceField(queryset=Account.objects.none(), required=False)
