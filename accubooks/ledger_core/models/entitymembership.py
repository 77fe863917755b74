from django.conf import settings
from django.contrib.auth.models import AbstractUser
from django.db import models

from ..managers import AccountUserManager, TenantManager


# ---------- Tenant / Company ----------
class Company(models.Model):

    """Tenant / Organization"""
    # Store company’s full display name
    name = models.CharField(max_length=200)

    slug = models.SlugField(  # A URL-friendly identifier
        max_length=80, unique=True  # no two companies can have the same slug
    )

    # Link to the user who created the company
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        blank=True,
        # if user is deleted, company record stays, owner is cleared
        on_delete=models.SET_NULL,
        related_name="owned_companies",
    )

    # Display currency for amounts; no conversion happens between companies
    currency_code = models.CharField(max_length=10, default="USD")

    # Store timestamp when the record is first created
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name_plural = "companies"

    def __str__(self):
        return self.name


# ---------- Custom User ----------
class User(AbstractUser):
    """
    Before you run your very first migrate,
    keep 'AUTH_USER_MODEL = "ledger_core.User"' in settings.py
    to avoid migration conflicts
    """

    ROLE_CHOICES = [
        ("user", "User"),
        ("admin", "Admin"),
    ]

    # Email is the login identifier, so it must be unique
    email = models.EmailField(unique=True)

    # Application-wide role; per-company roles live on EntityMembership
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default="user")

    objects = AccountUserManager()

    def __str__(self):
        return self.get_full_name() or self.username

    def company_ids(self):
        """Primary keys of companies this user has an active membership in."""
        return set(
            self.memberships.filter(is_active=True).values_list("company_id", flat=True)
        )


# ---------- EntityMembership ----------
class EntityMembership(models.Model):  # Bridge table between User and Company

    ROLE_CHOICES = [
        # full control (e.g., the person who created the company)
        ("owner", "Owner"),
        # can manage settings & users
        ("admin", "Admin"),
        # can post journals, invoices, expenses
        ("accountant", "Accountant"),
        ("viewer", "Viewer"),  # read-only access
    ]

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        # If user is deleted, their memberships go too
        on_delete=models.CASCADE,
        related_name="memberships",  # See all companies users belong to
    )

    company = models.ForeignKey(
        "Company", on_delete=models.CASCADE, related_name="memberships"
    )

    role = models.CharField(
        max_length=20,
        choices=ROLE_CHOICES,
        default="viewer",  # Defaults to "viewer" (safe, read-only)
    )

    # Suspend someone’s access without deleting the record
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)

    # Enforce tenant scoping
    objects = TenantManager()

    class Meta:
        # one user can only have one membership per company
        constraints = [
            models.UniqueConstraint(
                fields=["user", "company"], name="uq_user_company_membership"
            ),
        ]

        # almost every guard check filters by company and user
        indexes = [
            models.Index(fields=["company", "user"], name="em_company_user_idx"),
        ]

    def __str__(self):
        return f"{self.user} @ {self.company} ({self.role})"
