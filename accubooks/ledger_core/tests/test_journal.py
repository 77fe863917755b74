import datetime
from decimal import Decimal
from unittest import mock

from django.core.exceptions import ValidationError
from django.db import DatabaseError, transaction
from django.db.models.deletion import ProtectedError
from django.test import TestCase

from ledger_core.exceptions import (ConstraintViolation, CrossTenantReference,
                                    EmptyEntry, PersistenceFailure,
                                    UnbalancedEntry)
from ledger_core.models import AuditLog, JournalEntry, JournalLine
from ledger_core.services.posting import post_journal_entry

from .factories import add_member, make_account, make_company, make_user, tenant_for

HEADER = {"date": datetime.date(2024, 1, 15), "description": "Office rent", "reference": "RENT-01"}


class JournalPostingTests(TestCase):

    def setUp(self):
        self.user = make_user("alice")
        self.company = make_company("Test Co", owner=self.user)
        add_member(self.user, self.company, role="owner")
        self.tenant = tenant_for(self.user, self.company)
        self.cash = make_account(self.company, "1000", "Cash", "asset")
        self.rent = make_account(self.company, "6000", "Rent Expense", "expense")

    def lines(self, debit="500.00", credit="500.00"):
        return [
            {"account_id": self.rent.pk, "debit_amount": debit, "credit_amount": "0"},
            {"account_id": self.cash.pk, "debit_amount": "0", "credit_amount": credit},
        ]

    """ Success tests """
    def test_balanced_entry_is_stored_with_all_lines(self):
        entry = post_journal_entry(self.tenant, HEADER, self.lines(), user=self.user)

        entry.refresh_from_db()
        self.assertEqual(entry.company_id, self.company.pk)
        self.assertEqual(entry.created_by, self.user)
        self.assertEqual(entry.lines.count(), 2)
        self.assertEqual(entry.compute_totals(), (Decimal("500.00"), Decimal("500.00")))
        self.assertEqual(list(entry.lines.values_list("line_no", flat=True)), [1, 2])

    def test_sub_cent_amounts_are_stored_as_validated(self):
        lines = [
            {"account_id": self.rent.pk, "debit_amount": "0.005"} for _ in range(5)
        ] + [{"account_id": self.cash.pk, "credit_amount": "0.025"}]
        entry = post_journal_entry(self.tenant, HEADER, lines, user=self.user)

        self.assertEqual(entry.compute_totals(), (Decimal("0.025"), Decimal("0.025")))
        self.assertEqual(
            set(entry.lines.filter(account=self.rent).values_list("debit_amount", flat=True)),
            {Decimal("0.005")},
        )

    def test_every_line_carries_the_entry_company(self):
        entry = post_journal_entry(self.tenant, HEADER, self.lines(), user=self.user)
        self.assertEqual(
            set(JournalLine.objects.filter(journal=entry).values_list("company_id", flat=True)),
            {self.company.pk},
        )

    def test_commit_writes_an_audit_row(self):
        entry = post_journal_entry(self.tenant, HEADER, self.lines(), user=self.user)
        log = AuditLog.objects.for_company(self.company).get()
        self.assertEqual(log.object_type, "JournalEntry")
        self.assertEqual(log.object_id, str(entry.pk))
        self.assertEqual(log.changes["total_debit"], "500.00")

    """ Rejection tests: nothing is written """
    def test_unbalanced_entry_writes_nothing(self):
        with self.assertRaises(UnbalancedEntry):
            post_journal_entry(self.tenant, HEADER, self.lines(credit="499.50"), user=self.user)
        self.assertFalse(JournalEntry.objects.exists())
        self.assertFalse(JournalLine.objects.exists())

    def test_empty_entry_writes_nothing(self):
        with self.assertRaises(EmptyEntry):
            post_journal_entry(self.tenant, HEADER, [], user=self.user)
        self.assertFalse(JournalEntry.objects.exists())

    def test_account_of_other_company_rejected(self):
        other = make_company("Other Co")
        foreign = make_account(other, "1000", "Cash", "asset")
        lines = self.lines()
        lines[1]["account_id"] = foreign.pk

        with self.assertRaises(CrossTenantReference):
            post_journal_entry(self.tenant, HEADER, lines, user=self.user)
        self.assertFalse(JournalEntry.objects.exists())

    """ Atomicity """
    def test_failing_second_line_rolls_back_header(self):
        original_save = JournalLine.save
        calls = {"n": 0}

        def flaky_save(line, *args, **kwargs):
            calls["n"] += 1
            if calls["n"] == 2:
                raise DatabaseError("disk full")
            return original_save(line, *args, **kwargs)

        with mock.patch.object(JournalLine, "save", flaky_save):
            with self.assertRaises(PersistenceFailure):
                post_journal_entry(self.tenant, HEADER, self.lines(), user=self.user)

        self.assertFalse(JournalEntry.objects.exists())
        self.assertFalse(JournalLine.objects.exists())
        self.assertFalse(AuditLog.objects.exists())

    def test_duplicate_reference_is_a_constraint_violation(self):
        post_journal_entry(self.tenant, HEADER, self.lines(), user=self.user)

        with self.assertRaises(ConstraintViolation) as ctx:
            post_journal_entry(self.tenant, HEADER, self.lines(), user=self.user)
        self.assertEqual(ctx.exception.status_code, 409)
        self.assertEqual(JournalEntry.objects.count(), 1)

    def test_same_reference_allowed_in_another_company(self):
        post_journal_entry(self.tenant, HEADER, self.lines(), user=self.user)

        other = make_company("Other Co")
        add_member(self.user, other)
        cash = make_account(other, "1000", "Cash", "asset")
        rent = make_account(other, "6000", "Rent", "expense")
        post_journal_entry(
            tenant_for(self.user, other),
            HEADER,
            [
                {"account_id": rent.pk, "debit_amount": "1.00"},
                {"account_id": cash.pk, "credit_amount": "1.00"},
            ],
            user=self.user,
        )
        self.assertEqual(JournalEntry.objects.filter(reference="RENT-01").count(), 2)

    """ Append-only """
    def test_recorded_entry_cannot_be_modified(self):
        entry = post_journal_entry(self.tenant, HEADER, self.lines(), user=self.user)
        entry.description = "changed"
        with self.assertRaises(ValidationError):
            entry.save()

    def test_recorded_line_cannot_be_modified(self):
        entry = post_journal_entry(self.tenant, HEADER, self.lines(), user=self.user)
        line = entry.lines.first()
        line.debit_amount = Decimal("1.00")
        with self.assertRaises(ValidationError):
            line.save()

    def test_recorded_entry_cannot_be_deleted(self):
        entry = post_journal_entry(self.tenant, HEADER, self.lines(), user=self.user)
        # own savepoint: the failed delete poisons the enclosing transaction
        with self.assertRaises(ValidationError), transaction.atomic():
            entry.delete()
        self.assertTrue(JournalEntry.objects.filter(pk=entry.pk).exists())

    def test_account_used_by_lines_cannot_be_deleted(self):
        post_journal_entry(self.tenant, HEADER, self.lines(), user=self.user)
        with self.assertRaises(ProtectedError):
            self.cash.delete()

    def test_line_must_match_account_company(self):
        entry = post_journal_entry(self.tenant, HEADER, self.lines(), user=self.user)
        foreign = make_account(make_company("Other Co"), "1000", "Cash", "asset")
        with self.assertRaises(ValidationError):
            JournalLine.objects.create(
                company=self.company, journal=entry, line_no=3,
                account=foreign, debit_amount=Decimal("1.00"),
            )
