from django.contrib.auth.models import UserManager
from django.db import models


# -----------------------------------------
# Enforce tenant scoping across all models
# that belong to a company
# -----------------------------------------
class TenantQuerySet(models.QuerySet):
    def for_company(self, company):
        # accept a Company instance or a bare primary key
        if isinstance(company, models.Model):
            return self.filter(company=company)
        return self.filter(company_id=company)

    def active(self, company):
        return self.for_company(company).filter(is_active=True)
    # Enables query:
    # Account.objects.active(tenant.company_id)


# Attach TenantQuerySet to .objects
class TenantManager(models.Manager.from_queryset(TenantQuerySet)):
    pass


class AccountUserManager(UserManager):
    """User manager that also normalizes and requires email."""

    def create_user(self, username, email=None, password=None, **extra_fields):
        if not email:
            raise ValueError("The given email must be set")
        return super().create_user(username, email, password, **extra_fields)
