from django import forms
from django.contrib.auth.forms import UserChangeForm as DjangoUserChangeForm
from django.contrib.auth.forms import \
    UserCreationForm as DjangoUserCreationForm

from ledger_core.models import Invoice, InvoiceLine, User

# -----------------------------
# Custom admin forms
# ----------------------------


# Subclass `DjangoUserCreationForm` (form used when adding a new user)
class UserAdminCreationForm(DjangoUserCreationForm):
    class Meta(DjangoUserCreationForm.Meta):
        model = User  # Points `model` to custom User model
        fields = ("username", "email", "role")


# Subclass `DjangoUserChangeForm` (form used when editing an existing user)
class UserAdminChangeForm(DjangoUserChangeForm):
    class Meta(DjangoUserChangeForm.Meta):
        model = User
        fields = (
            "username",
            "email",
            "role",
            "is_active",
            "is_staff",
            "is_superuser",
        )


class InvoiceLineForm(forms.ModelForm):
    class Meta:
        model = InvoiceLine
        exclude = ("company",)  # hide company from inline form

    def clean(self):
        # stamp the parent invoice's company before model validation runs
        if getattr(self.instance, "invoice_id", None) and not getattr(
            self.instance, "company_id", None
        ):
            self.instance.company_id = (
                Invoice.objects.only("company_id")
                .get(pk=self.instance.invoice_id)
                .company_id
            )
        return super().clean()
