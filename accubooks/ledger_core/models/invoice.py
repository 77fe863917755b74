from decimal import ROUND_HALF_UP, Decimal

from django.core.exceptions import ValidationError
from django.db import models

from ..managers import TenantManager
from .account import Account
from .customer import Customer
from .entitymembership import Company

INV_STATUS_CHOICES = [
    ("draft", "Draft"),
    ("sent", "Sent"),
    ("paid", "Paid"),
    ("overdue", "Overdue"),
]


class Invoice(models.Model):  # Represents a customer invoice

    # Invoice belongs to one company (multi-tenant)
    company = models.ForeignKey(
        Company, on_delete=models.CASCADE, related_name="invoices"
    )

    customer = models.ForeignKey(
        Customer,
        # prevent deleting customer who has an invoice
        on_delete=models.PROTECT,
        related_name="invoices",
    )

    # human-readable (e.g. "INV-2025-001")
    invoice_number = models.CharField(max_length=64)
    date = models.DateField()  # issue date
    due_date = models.DateField(null=True, blank=True)

    status = models.CharField(
        max_length=10, choices=INV_STATUS_CHOICES, default="draft"
    )
    """ Workflow:
        draft = not yet sent.
        sent = issued but not paid.
        paid = fully settled.
        overdue = past due_date and unpaid. """

    # Sum of all line totals
    subtotal = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00")
    )
    tax_amount = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00")
    )
    # subtotal + tax_amount
    total = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00")
    )
    description = models.TextField(blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)

    # Enforce tenant scoping
    objects = TenantManager()

    class Meta:
        indexes = [
            models.Index(fields=["company", "invoice_number"], name="inv_company_number_idx"),
            models.Index(fields=["company", "customer"], name="inv_company_customer_idx"),
        ]

        constraints = [
            # Within one company, each invoice number must be unique
            # Across companies, duplicates are allowed
            models.UniqueConstraint(
                fields=["company", "invoice_number"],
                name="uq_invoice_company_number"
            ),
            models.CheckConstraint(
                condition=models.Q(tax_amount__gte=0),
                name="inv_non_negative_tax",
            ),
        ]

    def __str__(self):
        return f"Inv {self.invoice_number or self.pk}"

    def recalc_totals(self, lines):
        """Set subtotal/total from the given (unsaved or saved) lines."""
        self.subtotal = sum((line.line_total for line in lines), Decimal("0.00"))
        self.total = self.subtotal + (self.tax_amount or Decimal("0.00"))

    def clean(self):
        # Ensure customer chosen belongs to the same company
        if self.customer_id and self.customer.company_id != self.company_id:
            raise ValidationError("Customer must belong to the same company.")

    def save(self, *args, **kwargs):
        self.full_clean()  # run validations before saving
        return super().save(*args, **kwargs)


class InvoiceLine(models.Model):
    # Each line describes a product/service sold on the invoice

    # Line belongs to both company and parent invoice
    company = models.ForeignKey(Company, on_delete=models.CASCADE)
    invoice = models.ForeignKey(
        Invoice, on_delete=models.CASCADE, related_name="lines")
    line_no = models.PositiveIntegerField()

    description = models.CharField(max_length=400)

    # Core pricing logic: quantity × unit_price = line_total
    quantity = models.DecimalField(
        max_digits=14, decimal_places=4, default=Decimal("1")
    )
    unit_price = models.DecimalField(
        max_digits=18, decimal_places=4, default=Decimal("0.00")
    )
    line_total = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00")
    )

    # Optional revenue account for this line
    account = models.ForeignKey(
        Account,
        null=True,
        blank=True,
        # You can’t delete an account if lines still point to it
        on_delete=models.PROTECT,
        related_name="invoice_lines",
    )

    # Enforce tenant scoping
    objects = TenantManager()

    class Meta:
        ordering = ("invoice", "line_no")
        indexes = [
            models.Index(fields=["company", "invoice"], name="invl_company_invoice_idx"),
        ]

        # Ensure quantity & unit_price are never negative
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gte=0) &
                models.Q(unit_price__gte=0),
                name="invl_non_negative_amounts",
            ),
            models.UniqueConstraint(
                fields=["invoice", "line_no"], name="uq_invl_invoice_line_no"
            ),
        ]

    def __str__(self):
        return f"Invoice: {self.invoice_id} - {self.description} - Total: {self.line_total}"

    def compute_line_total(self):
        total = (self.quantity or Decimal("0")) * (self.unit_price or Decimal("0"))
        return total.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)

    """ Ensure individual line amounts are valid """

    def clean(self):
        if self.quantity is not None and self.quantity < 0:
            raise ValidationError("Quantity must be >= 0")
        if self.unit_price is not None and self.unit_price < 0:
            raise ValidationError("Unit price must be >= 0")

        # Tenant safety
        if self.invoice_id and self.invoice.company_id != self.company_id:
            raise ValidationError("InvoiceLine.company must match Invoice.company")
        if self.account_id and self.account.company_id != self.company_id:
            raise ValidationError("InvoiceLine.company must match Account.company")

    def save(self, *args, **kwargs):
        # compute line_total always
        self.line_total = self.compute_line_total()
        self.full_clean()
        return super().save(*args, **kwargs)
