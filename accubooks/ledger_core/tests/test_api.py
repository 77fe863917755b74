"""End-to-end checks over the JSON API with the Django test client."""
import json

import pytest

from ledger_core.models import JournalEntry, JournalLine

from .factories import add_member, make_account, make_company, make_user

pytestmark = pytest.mark.django_db


def post_json(client, url, payload):
    return client.post(url, data=json.dumps(payload), content_type="application/json")


@pytest.fixture
def member(client):
    """Logged-in user with one company and a two-account chart."""
    user = make_user("alice")
    company = make_company("Alice Co", owner=user)
    add_member(user, company, role="owner")
    cash = make_account(company, "1000", "Cash", "asset")
    rent = make_account(company, "6000", "Rent Expense", "expense")
    client.force_login(user)
    return {"user": user, "company": company, "cash": cash, "rent": rent}


def journal_payload(member, debit="500.00", credit="500.00", **entry):
    return {
        "entry": {"date": "2024-01-15", "description": "Office rent", **entry},
        "lines": [
            {"accountId": member["rent"].pk, "debitAmount": debit, "creditAmount": "0"},
            {"accountId": member["cash"].pk, "debitAmount": "0", "creditAmount": credit},
        ],
    }


# ---------- Identity ----------
def test_register_me_company_switch_flow(client):
    response = post_json(client, "/api/auth/register", {
        "email": "new@example.com", "username": "newbie", "password": "long-enough",
        "firstName": "New",
    })
    assert response.status_code == 201
    body = response.json()
    assert body["user"]["email"] == "new@example.com"
    assert "password" not in body["user"]

    me = client.get("/api/auth/me").json()
    assert me["companies"] == []
    assert me["currentCompanyId"] is None

    first = post_json(client, "/api/companies", {"name": "First Ltd"}).json()
    assert first["slug"] == "first-ltd"
    assert client.get("/api/auth/me").json()["currentCompanyId"] == first["id"]

    # a second company does not steal the selection
    second = post_json(client, "/api/companies", {"name": "Second Ltd"}).json()
    assert client.get("/api/auth/me").json()["currentCompanyId"] == first["id"]

    response = client.post(f"/api/companies/{second['id']}/switch")
    assert response.status_code == 200
    assert response.json() == {"currentCompanyId": second["id"]}
    assert [c["id"] for c in client.get("/api/companies").json()] == [first["id"], second["id"]]


def test_register_duplicate_email_rejected(client):
    make_user("taken")
    response = post_json(client, "/api/auth/register", {
        "email": "taken@example.com", "username": "someone-else", "password": "long-enough",
    })
    assert response.status_code == 400
    assert response.json()["message"] == "User already exists"
    assert "email" in response.json()["errors"]


def test_register_short_password_rejected(client):
    response = post_json(client, "/api/auth/register", {
        "email": "a@example.com", "username": "a", "password": "short",
    })
    assert response.status_code == 400
    assert "password" in response.json()["errors"]


def test_login_selects_first_company_and_logout_clears_session(client):
    user = make_user("bob", password="correct-horse")
    company = make_company("Bob Co")
    add_member(user, company)

    assert post_json(client, "/api/auth/login", {
        "email": "bob@example.com", "password": "wrong-horse",
    }).status_code == 401

    response = post_json(client, "/api/auth/login", {
        "email": "bob@example.com", "password": "correct-horse",
    })
    assert response.status_code == 200
    assert response.json()["currentCompanyId"] == company.pk

    client.post("/api/auth/logout")
    assert client.get("/api/auth/me").status_code == 401


def test_switch_to_foreign_company_forbidden(client, member):
    other = make_company("Other Co")
    response = client.post(f"/api/companies/{other.pk}/switch")
    assert response.status_code == 403
    assert response.json()["error"] == "forbidden"


# ---------- Guarded resources ----------
def test_anonymous_request_is_401(client):
    response = client.get("/api/accounts")
    assert response.status_code == 401
    assert response.json()["message"] == "Authentication required"


def test_no_company_selected_is_400(client):
    client.force_login(make_user("loner"))
    response = client.get("/api/accounts")
    assert response.status_code == 400
    assert response.json()["error"] == "missing_company_context"


def test_body_company_id_is_used_without_path(client, member):
    response = post_json(client, "/api/accounts", {
        "companyId": member["company"].pk, "code": "2000", "name": "Payables", "type": "liability",
    })
    assert response.status_code == 201
    assert response.json()["companyId"] == member["company"].pk


def test_accounts_listed_by_code_and_limited(client, member):
    url = f"/api/companies/{member['company'].pk}/accounts"
    make_account(member["company"], "3000", "Equity", "equity")

    codes = [a["code"] for a in client.get(url).json()]
    assert codes == ["1000", "3000", "6000"]
    assert len(client.get(url, {"limit": 2}).json()) == 2
    assert client.get(url, {"limit": "abc"}).status_code == 400
    assert client.get(url, {"limit": 0}).status_code == 400


def test_account_duplicate_code_is_409(client, member):
    url = f"/api/companies/{member['company'].pk}/accounts"
    response = post_json(client, url, {"code": "1000", "name": "Cash again", "type": "asset"})
    assert response.status_code == 409
    assert response.json()["error"] == "constraint_violation"


def test_account_bad_type_is_400(client, member):
    url = f"/api/companies/{member['company'].pk}/accounts"
    response = post_json(client, url, {"code": "1500", "name": "Odd", "type": "income"})
    assert response.status_code == 400
    assert "type" in response.json()["errors"]


def test_invalid_json_is_400(client, member):
    response = client.post(
        f"/api/companies/{member['company'].pk}/accounts",
        data="{not json", content_type="application/json",
    )
    assert response.status_code == 400
    assert response.json()["error"] == "invalid_payload"


# ---------- Journal entries ----------
def test_create_balanced_journal_entry(client, member):
    url = f"/api/companies/{member['company'].pk}/journal-entries"
    response = post_json(client, url, journal_payload(member, reference="RENT-01"))

    assert response.status_code == 201
    body = response.json()
    assert body["totalDebit"] == body["totalCredit"] == "500.00"
    assert [line["lineNo"] for line in body["lines"]] == [1, 2]
    assert body["createdBy"] == member["user"].pk

    listed = client.get(url).json()
    assert [entry["id"] for entry in listed] == [body["id"]]


def test_unbalanced_journal_entry_is_400_with_totals(client, member):
    url = f"/api/companies/{member['company'].pk}/journal-entries"
    response = post_json(client, url, journal_payload(member, credit="499.50"))

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "unbalanced_entry"
    assert body["total_debit"] == "500.00"
    assert body["total_credit"] == "499.50"
    assert not JournalEntry.objects.exists()


def test_journal_entry_without_lines_is_400(client, member):
    url = f"/api/companies/{member['company'].pk}/journal-entries"
    response = post_json(client, url, {"entry": {"date": "2024-01-15"}, "lines": []})
    assert response.status_code == 400
    assert response.json()["error"] == "empty_entry"


def test_journal_entry_with_no_lines_is_empty_even_without_header(client, member):
    url = f"/api/companies/{member['company'].pk}/journal-entries"
    for payload in ({"entry": {}, "lines": []}, {"entry": {}}, {}):
        response = post_json(client, url, payload)
        assert response.status_code == 400
        assert response.json()["error"] == "empty_entry"
    assert not JournalEntry.objects.exists()


def test_sub_cent_journal_entry_round_trips_over_http(client, member):
    url = f"/api/companies/{member['company'].pk}/journal-entries"
    payload = journal_payload(member, debit="0.025", credit="0.025")
    response = post_json(client, url, payload)

    assert response.status_code == 201
    assert response.json()["totalDebit"] == response.json()["totalCredit"] == "0.025"
    assert response.json()["lines"][1]["creditAmount"] == "0.025"


def test_journal_entry_missing_date_is_400(client, member):
    url = f"/api/companies/{member['company'].pk}/journal-entries"
    payload = journal_payload(member)
    del payload["entry"]["date"]
    response = post_json(client, url, payload)
    assert response.status_code == 400
    assert "entry.date" in response.json()["errors"]


def test_journal_entry_negative_amount_is_400(client, member):
    url = f"/api/companies/{member['company'].pk}/journal-entries"
    response = post_json(client, url, journal_payload(member, debit="-5", credit="-5"))
    assert response.status_code == 400
    assert response.json()["error"] == "invalid_amount"


def test_journal_entry_with_foreign_account_is_400(client, member):
    other = make_company("Other Co")
    foreign = make_account(other, "1000", "Cash", "asset")
    payload = journal_payload(member)
    payload["lines"][1]["accountId"] = foreign.pk

    response = post_json(client, f"/api/companies/{member['company'].pk}/journal-entries", payload)
    assert response.status_code == 400
    assert response.json()["error"] == "cross_tenant_reference"
    assert not JournalLine.objects.exists()


def test_journal_entries_of_other_company_not_listed(client, member):
    outsider = make_user("mallory")
    other = make_company("Other Co")
    add_member(outsider, other)
    cash = make_account(other, "1000", "Cash", "asset")
    rent = make_account(other, "6000", "Rent", "expense")
    client.force_login(outsider)
    post_json(client, f"/api/companies/{other.pk}/journal-entries", {
        "entry": {"date": "2024-02-01"},
        "lines": [
            {"accountId": rent.pk, "debitAmount": "10"},
            {"accountId": cash.pk, "creditAmount": "10"},
        ],
    })

    client.force_login(member["user"])
    url = f"/api/companies/{member['company'].pk}/journal-entries"
    assert client.get(url).json() == []
    assert client.get(f"/api/companies/{other.pk}/journal-entries").status_code == 403
