from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models

from ..managers import TenantManager
from .account import Account
from .entitymembership import Company


# ---------- Journal (Header) & JournalLine ----------
class JournalEntry(models.Model):  # Represents one accounting transaction
    """
    Header of a balanced transaction. Header and lines are written together by
    ledger_core.services.posting and never change afterwards.
    """

    # Multi-tenant: every entry belongs to a company
    company = models.ForeignKey(
        Company, on_delete=models.CASCADE, related_name="journal_entries"
    )
    # Business metadata
    date = models.DateField()
    reference = models.CharField(max_length=200, null=True, blank=True)
    description = models.TextField(blank=True, default="")
    # Track user who created it
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True, blank=True, on_delete=models.SET_NULL,
        related_name="journal_entries",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    # Enforce tenant scoping
    objects = TenantManager()

    class Meta:
        verbose_name_plural = "journal entries"
        # Speed up listing newest entries per company
        indexes = [
            models.Index(fields=["company", "date"], name="je_company_date_idx"),
        ]

        constraints = [
            # Within one company, each reference must be unique
            # Across companies, duplicates are allowed
            models.UniqueConstraint(
                fields=["company", "reference"], name="uq_je_company_ref"
            )
        ]

    def __str__(self):
        return f"JE {self.pk} {self.date} {self.description}"

    # Aggregate all debit and credit amounts across entry’s lines
    def compute_totals(self):
        """Return (debits, credits) summed from the stored lines."""
        aggs = self.lines.aggregate(
            total_debit=models.Sum("debit_amount"),
            total_credit=models.Sum("credit_amount"),
        )
        return (
            aggs["total_debit"] or Decimal("0.00"),
            aggs["total_credit"] or Decimal("0.00"),
        )

    def save(self, *args, **kwargs):
        # Committed entries are append-only
        if not self._state.adding:
            raise ValidationError("Journal entries cannot be modified once recorded.")
        super().save(*args, **kwargs)


class JournalLine(models.Model):  # Stores Lines ( credits / debits )
    """
    Each line belongs to a journal entry and to a GL account of the same company.
    """

    # Belongs to company & a journal entry
    company = models.ForeignKey(Company, on_delete=models.CASCADE)
    journal = models.ForeignKey(
        JournalEntry,
        on_delete=models.CASCADE,
        related_name="lines",
    )
    # Position of the line inside its entry, starting at 1
    line_no = models.PositiveIntegerField()

    # Must point to one Account (can’t delete account if lines exist → PROTECT)
    account = models.ForeignKey(
        Account, on_delete=models.PROTECT, related_name="journal_lines"
    )
    description = models.CharField(max_length=400, blank=True, default="")

    # four places: sub-cent amounts are stored exactly as validated
    debit_amount = models.DecimalField(
        max_digits=20, decimal_places=4, default=Decimal("0.00"))
    credit_amount = models.DecimalField(
        max_digits=20, decimal_places=4, default=Decimal("0.00"))

    # Enforce tenant scoping
    objects = TenantManager()

    class Meta:
        ordering = ("journal", "line_no")
        indexes = [
            models.Index(fields=["company", "account"], name="jl_company_account_idx"),
            models.Index(fields=["company", "journal"], name="jl_company_journal_idx"),
        ]

        # A line carrying both a debit and a credit is allowed;
        # only the sign of each side is checked here
        constraints = [
            models.CheckConstraint(
                condition=(
                    models.Q(debit_amount__gte=0) &
                    models.Q(credit_amount__gte=0)
                ),
                name="jl_non_negative_amounts",
            ),
            models.UniqueConstraint(
                fields=["journal", "line_no"], name="uq_jl_journal_line_no"
            ),
        ]

    def __str__(self):
        return f"{self.journal_id} | {self.account_id} | D:{self.debit_amount} C:{self.credit_amount}"

    def clean(self):
        if self.debit_amount < 0 or self.credit_amount < 0:
            raise ValidationError("Debit and credit must be >= 0")

        # Prevent “cross-company” contamination
        if self.journal_id and self.journal.company_id != self.company_id:
            raise ValidationError("JournalLine.company must match JournalEntry.company")
        if self.account_id and self.account.company_id != self.company_id:
            raise ValidationError("JournalLine.company must match Account.company")

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError("Journal lines cannot be modified once recorded.")
        self.full_clean()  # run validations before saving
        return super().save(*args, **kwargs)
