from django.urls import path

from . import views

# Tenant-scoped routes exist twice: with the company in the path, and without
# it (company taken from the body's companyId or the session's selection).
company_routes = [
    ("accounts", views.accounts_view, "accounts"),
    ("journal-entries", views.journal_entries_view, "journal-entries"),
    ("customers", views.customers_view, "customers"),
    ("vendors", views.vendors_view, "vendors"),
    ("invoices", views.invoices_view, "invoices"),
    ("expenses", views.expenses_view, "expenses"),
    ("metrics", views.metrics_view, "metrics"),
]

urlpatterns = [
    path("auth/register", views.register_view, name="register"),
    path("auth/login", views.login_view, name="login"),
    path("auth/logout", views.logout_view, name="logout"),
    path("auth/me", views.me_view, name="me"),
    path("companies", views.companies_view, name="companies"),
    path("companies/<int:company_id>/switch", views.switch_company_view, name="company-switch"),
]

for segment, view, name in company_routes:
    urlpatterns += [
        path(f"companies/<int:company_id>/{segment}", view, name=f"company-{name}"),
        path(segment, view, name=f"current-{name}"),
    ]
