from django.db import models

from ..managers import TenantManager
from .entitymembership import Company

# Used in Account model to classify general ledger accounts
AC_TYPES = [
    ("asset", "Asset"),
    ("liability", "Liability"),
    ("equity", "Equity"),
    ("revenue", "Revenue"),
    ("expense", "Expense"),
]


class Account(models.Model):
    """
    Ledger account in a company's Chart of Accounts.
    - code should be unique per company
    - ac_type: asset / liability / equity / revenue / expense
    """

    company = models.ForeignKey(  # Each account belongs to one company
        Company,  # All reads must filter by company_id to prevent data leaks
        on_delete=models.CASCADE,
        related_name="accounts",
    )
    # Every account has a code
    # which lets you sort/group accounts consistently in reports.
    code = models.CharField(max_length=32)
    name = models.CharField(max_length=200)  # "Cash on Hand", "Rent Expense"
    ac_type = models.CharField(max_length=10, choices=AC_TYPES)
    description = models.TextField(blank=True, default="")

    # “soft deactivate” accounts without deleting history
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    # Enforce tenant scoping
    objects = TenantManager()

    class Meta:
        indexes = [
            models.Index(fields=["company", "ac_type"], name="acct_company_type_idx"),
            models.Index(fields=["company", "code"], name="acct_company_code_idx"),
        ]

        """ Each company defines its own chart of accounts.
               Codes repeat across companies but must be unique within one. """
        constraints = [
            models.UniqueConstraint(
                fields=["company", "code"], name="uq_company_account_code"
            )
        ]
        ordering = ("company", "code")

    def __str__(self):
        return f"{self.code} – {self.name}"
