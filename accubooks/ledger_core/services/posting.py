import logging
from contextlib import contextmanager
from typing import Dict, Iterable, List, Mapping, Sequence

from django.core.exceptions import ValidationError
from django.db import DatabaseError, IntegrityError, transaction

from ..exceptions import ConstraintViolation, PersistenceFailure
from ..models import Account, Invoice, InvoiceLine, JournalEntry, JournalLine
from .access import TenantContext
from .audit_helper import log_action
from .validation import ValidatedEntry, account_ids_of, validate_journal_entry

logger = logging.getLogger(__name__)


@contextmanager
def storage_errors(operation: str, company_id: int):
    """
    Translate storage exceptions into ConstraintViolation / PersistenceFailure.

    Must wrap the atomic block (not sit inside it) so the rollback has
    already happened when the typed error reaches the caller.
    """
    try:
        yield
    except (IntegrityError, ValidationError) as exc:
        logger.exception(
            "Constraint violation while saving %s", operation,
            extra={"company_id": company_id},
        )
        raise ConstraintViolation(str(exc)) from exc
    except DatabaseError as exc:
        logger.exception(
            "Persistence failure while saving %s", operation,
            extra={"company_id": company_id},
        )
        raise PersistenceFailure(str(exc)) from exc


def load_account_companies(account_ids: Iterable) -> Dict[int, int]:
    """Map each existing account id in `account_ids` to its owning company id."""
    ids = {pk for pk in account_ids if isinstance(pk, int)}
    if not ids:
        return {}
    return dict(Account.objects.filter(pk__in=ids).values_list("pk", "company_id"))


# ----------------------------
# Journal-related workflows
# ----------------------------
def commit_journal_entry(tenant: TenantContext, validated: ValidatedEntry, user=None) -> JournalEntry:
    """
    Persist a validated header and all its lines as one atomic unit.

    Either the header, every line and the audit row are committed, or nothing
    is. Failures are never retried here.
    """
    header = validated.header
    with storage_errors("journal entry", tenant.company_id), transaction.atomic():
        entry = JournalEntry.objects.create(
            company_id=tenant.company_id,
            date=header["date"],
            description=header.get("description") or "",
            reference=header.get("reference") or None,
            created_by=user,
        )
        for line in validated.lines:
            JournalLine.objects.create(
                company_id=tenant.company_id,
                journal=entry,
                line_no=line.line_no,
                account_id=line.account_id,
                description=line.description,
                debit_amount=line.debit_amount,
                credit_amount=line.credit_amount,
            )
        log_action(
            action="create",
            instance=entry,
            user=user,
            changes={
                "lines": len(validated.lines),
                "total_debit": str(validated.total_debit),
                "total_credit": str(validated.total_credit),
            },
        )

    logger.info(
        "Journal entry %s recorded with %d lines",
        entry.pk, len(validated.lines),
        extra={"company_id": tenant.company_id, "total": str(validated.total_debit)},
    )
    return entry


def post_journal_entry(tenant: TenantContext, header: Mapping, lines: Sequence[Mapping], user=None) -> JournalEntry:
    """Load account ownership, run the double-entry checks, then commit."""
    account_companies = load_account_companies(account_ids_of(lines))
    validated = validate_journal_entry(tenant.company_id, header, lines, account_companies)
    return commit_journal_entry(tenant, validated, user=user)


# ----------------------------
# Invoice workflows
# ----------------------------
def commit_invoice(tenant: TenantContext, header: Mapping, lines: List[Mapping], user=None) -> Invoice:
    """
    Persist an invoice header with its lines atomically.
    Totals are derived from the lines; there is no balance check.
    """
    with storage_errors("invoice", tenant.company_id), transaction.atomic():
        invoice = Invoice(
            company_id=tenant.company_id,
            customer=header["customer"],
            invoice_number=header["invoice_number"],
            date=header["date"],
            due_date=header.get("due_date"),
            status=header.get("status") or "draft",
            tax_amount=header.get("tax_amount") or 0,
            description=header.get("description") or "",
        )
        invoice.save()

        created = []
        for line_no, line in enumerate(lines, start=1):
            created.append(
                InvoiceLine.objects.create(
                    company_id=tenant.company_id,
                    invoice=invoice,
                    line_no=line_no,
                    description=line["description"],
                    quantity=line["quantity"],
                    unit_price=line["unit_price"],
                    account=line.get("account"),
                )
            )

        invoice.recalc_totals(created)
        invoice.save(update_fields=["subtotal", "total"])
        log_action(
            action="create",
            instance=invoice,
            user=user,
            changes={"lines": len(created), "total": str(invoice.total)},
        )

    logger.info(
        "Invoice %s recorded with %d lines",
        invoice.invoice_number, len(lines),
        extra={"company_id": tenant.company_id},
    )
    return invoice
