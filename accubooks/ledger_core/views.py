import json
from functools import wraps

from django.contrib.auth import login, logout
from django.http import JsonResponse
from django.views.decorators.http import require_GET, require_http_methods, require_POST

from .exceptions import InvalidPayload, LedgerError, Unauthenticated
from .forms import LoginForm
from .serializers import (account_to_dict, company_to_dict, contact_to_dict,
                          expense_to_dict, invoice_to_dict,
                          journal_entry_to_dict, user_to_dict)
from .services import identity, resources
from .services.access import (ACTIVE_COMPANY_SESSION_KEY, authorize_company,
                              session_company_id)
from .services.metrics import financial_metrics


# ----------------------------
# Request plumbing
# ----------------------------
def json_errors(view):
    """Render LedgerError subclasses as JSON; anything else propagates."""
    @wraps(view)
    def wrapper(request, *args, **kwargs):
        try:
            return view(request, *args, **kwargs)
        except LedgerError as exc:
            return JsonResponse(exc.as_dict(), status=exc.status_code)
    return wrapper


def read_json(request):
    if hasattr(request, "_json_body"):
        return request._json_body
    if not request.body:
        body = {}
    else:
        try:
            body = json.loads(request.body)
        except (ValueError, UnicodeDecodeError):
            raise InvalidPayload({"__all__": ["Request body is not valid JSON"]})
    request._json_body = body
    return body


def login_required_json(view):
    @wraps(view)
    def wrapper(request, *args, **kwargs):
        if not request.user.is_authenticated:
            raise Unauthenticated()
        return view(request, *args, **kwargs)
    return wrapper


def _body_company_id(request):
    # a malformed body carries no company id; the view reports it after the guard
    if request.method != "POST":
        return None
    try:
        body = read_json(request)
    except InvalidPayload:
        return None
    return body.get("companyId") if isinstance(body, dict) else None


def company_required(view):
    """
    Tenant access guard for views.

    Company id comes from the URL, then the JSON body's `companyId`, then the
    session. The body is only looked at when the URL names no company, and
    membership is checked before the payload is validated. The authorized
    TenantContext is attached as `request.tenant`.
    """
    @wraps(view)
    def wrapper(request, *args, company_id=None, **kwargs):
        if not request.user.is_authenticated:
            raise Unauthenticated()
        body_company = None if company_id is not None else _body_company_id(request)
        request.tenant = authorize_company(
            request.user, company_id, body_company, session_company_id(request)
        )
        return view(request, *args, **kwargs)
    return wrapper


def _user_payload(request, user):
    companies = identity.list_companies(user)
    return {
        "user": user_to_dict(user),
        "companies": [company_to_dict(c) for c in companies],
        "currentCompanyId": request.session.get(ACTIVE_COMPANY_SESSION_KEY),
    }


# ----------------------------
# Auth
# ----------------------------
@require_POST
@json_errors
def register_view(request):
    user = identity.register_user(read_json(request))
    login(request, user)
    return JsonResponse({"user": user_to_dict(user)}, status=201)


@require_POST
@json_errors
def login_view(request):
    data = LoginForm.parse(read_json(request))
    user = identity.find_user_for_login(data["email"], data["password"])
    login(request, user)

    # select the first company by default
    companies = list(identity.list_companies(user))
    if companies:
        request.session[ACTIVE_COMPANY_SESSION_KEY] = companies[0].pk
    return JsonResponse(_user_payload(request, user))


@require_POST
def logout_view(request):
    logout(request)
    return JsonResponse({"message": "Logged out successfully"})


@require_GET
@json_errors
@login_required_json
def me_view(request):
    return JsonResponse(_user_payload(request, request.user))


# ----------------------------
# Companies
# ----------------------------
@require_http_methods(["GET", "POST"])
@json_errors
@login_required_json
def companies_view(request):
    if request.method == "GET":
        companies = identity.list_companies(request.user)
        return JsonResponse([company_to_dict(c) for c in companies], safe=False)

    company = identity.create_company(request.user, read_json(request))
    # first company becomes the selected one
    if identity.list_companies(request.user).count() == 1:
        request.session[ACTIVE_COMPANY_SESSION_KEY] = company.pk
    return JsonResponse(company_to_dict(company), status=201)


@require_POST
@json_errors
@company_required
def switch_company_view(request):
    request.session[ACTIVE_COMPANY_SESSION_KEY] = request.tenant.company_id
    return JsonResponse({"currentCompanyId": request.tenant.company_id})


# ----------------------------
# Tenant-scoped resources
# ----------------------------
def _list_response(request, list_fn, to_dict):
    limit = resources.parse_limit(request.GET.get("limit"))
    return JsonResponse([to_dict(obj) for obj in list_fn(request.tenant, limit)], safe=False)


@require_http_methods(["GET", "POST"])
@json_errors
@company_required
def accounts_view(request):
    if request.method == "GET":
        return _list_response(request, resources.list_accounts, account_to_dict)
    account = resources.create_account(request.tenant, read_json(request), user=request.user)
    return JsonResponse(account_to_dict(account), status=201)


@require_http_methods(["GET", "POST"])
@json_errors
@company_required
def journal_entries_view(request):
    if request.method == "GET":
        return _list_response(request, resources.list_journal_entries, journal_entry_to_dict)
    body = read_json(request)
    if not isinstance(body, dict):
        raise InvalidPayload({"__all__": ["Expected a JSON object"]})
    entry = resources.create_journal_entry(
        request.tenant, body.get("entry"), body.get("lines"), user=request.user
    )
    return JsonResponse(journal_entry_to_dict(entry), status=201)


@require_http_methods(["GET", "POST"])
@json_errors
@company_required
def customers_view(request):
    if request.method == "GET":
        return _list_response(request, resources.list_customers, contact_to_dict)
    customer = resources.create_customer(request.tenant, read_json(request), user=request.user)
    return JsonResponse(contact_to_dict(customer), status=201)


@require_http_methods(["GET", "POST"])
@json_errors
@company_required
def vendors_view(request):
    if request.method == "GET":
        return _list_response(request, resources.list_vendors, contact_to_dict)
    vendor = resources.create_vendor(request.tenant, read_json(request), user=request.user)
    return JsonResponse(contact_to_dict(vendor), status=201)


@require_http_methods(["GET", "POST"])
@json_errors
@company_required
def invoices_view(request):
    if request.method == "GET":
        return _list_response(request, resources.list_invoices, invoice_to_dict)
    body = read_json(request)
    if not isinstance(body, dict):
        raise InvalidPayload({"__all__": ["Expected a JSON object"]})
    invoice = resources.create_invoice(
        request.tenant, body.get("invoice"), body.get("lines"), user=request.user
    )
    return JsonResponse(invoice_to_dict(invoice), status=201)


@require_http_methods(["GET", "POST"])
@json_errors
@company_required
def expenses_view(request):
    if request.method == "GET":
        return _list_response(request, resources.list_expenses, expense_to_dict)
    expense = resources.create_expense(request.tenant, read_json(request), user=request.user)
    return JsonResponse(expense_to_dict(expense), status=201)


@require_GET
@json_errors
@company_required
def metrics_view(request):
    return JsonResponse(financial_metrics(request.tenant))
