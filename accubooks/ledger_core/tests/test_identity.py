from unittest import mock

from django.test import TestCase

from ledger_core.exceptions import ConstraintViolation
from ledger_core.models import Company, EntityMembership
from ledger_core.services import identity

from .factories import make_company, make_user


class CompanySlugTests(TestCase):
    def setUp(self):
        self.user = make_user("alice")

    def test_same_name_gets_numbered_slugs(self):
        first = identity.create_company(self.user, {"name": "Acme Ltd"})
        second = identity.create_company(self.user, {"name": "Acme Ltd"})

        self.assertEqual(first.slug, "acme-ltd")
        self.assertEqual(second.slug, "acme-ltd-1")
        self.assertEqual(
            EntityMembership.objects.get(user=self.user, company=second).role, "admin"
        )

    def test_exhausted_slugs_raise_constraint_violation(self):
        for slug in ("busy", "busy-1", "busy-2"):
            make_company("Busy", slug=slug)
        with self.assertRaises(ConstraintViolation):
            identity.unique_slug_for_company("Busy", max_tries=2)

    def test_slug_taken_between_check_and_insert_is_retried(self):
        # the first candidate is claimed by someone else after it was chosen
        make_company("Race", slug="race")
        with mock.patch.object(
            identity, "unique_slug_for_company", side_effect=["race", "race-1"]
        ):
            company = identity.create_company(self.user, {"name": "Race"})

        self.assertEqual(company.slug, "race-1")
        self.assertEqual(Company.objects.filter(name="Race").count(), 2)
        self.assertTrue(EntityMembership.objects.filter(company=company).exists())

    def test_persistent_collision_is_a_constraint_violation(self):
        make_company("Stuck", slug="stuck")
        with mock.patch.object(identity, "unique_slug_for_company", return_value="stuck"):
            with self.assertRaises(ConstraintViolation):
                identity.create_company(self.user, {"name": "Stuck"})
        self.assertEqual(Company.objects.filter(slug="stuck").count(), 1)
