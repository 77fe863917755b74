import datetime

from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from ledger_core.exceptions import LedgerError
from ledger_core.models import EntityMembership, User
from ledger_core.services import identity, resources
from ledger_core.services.access import TenantContext

DEMO_ACCOUNTS = [
    {"code": "1000", "name": "Cash", "type": "asset"},
    {"code": "1200", "name": "Accounts Receivable", "type": "asset"},
    {"code": "2000", "name": "Accounts Payable", "type": "liability"},
    {"code": "3000", "name": "Owner's Equity", "type": "equity"},
    {"code": "4000", "name": "Sales Revenue", "type": "revenue"},
    {"code": "6000", "name": "Rent Expense", "type": "expense"},
]


class Command(BaseCommand):
    help = (
        "Create a demo tenant (company), owner user, chart of accounts and an "
        "opening journal entry."
    )

    # Define command-line arguments
    def add_arguments(self, parser):
        parser.add_argument(
            "--company-name",
            default="Demo Company",
            help="Name of the demo company to create.",
        )
        parser.add_argument(
            "--username", default="demo", help="Username for the demo user."
        )
        parser.add_argument(
            "--password", default="demo1234", help="Password for the demo user."
        )

    @transaction.atomic
    def handle(self, *args, **options):
        username = options["username"]

        # 1. Owner user (reused if it already exists)
        user = User.objects.filter(username=username).first()
        if user is None:
            user = User.objects.create_user(
                username=username,
                email=f"{username}@example.com",
                password=options["password"],
            )
            self.stdout.write(self.style.SUCCESS(f"Created user: {user.username}"))

        try:
            # 2. Company; the creator becomes its owner
            company = identity.create_company(user, {"name": options["company_name"]})
            EntityMembership.objects.filter(user=user, company=company).update(role="owner")
            tenant = TenantContext(company.pk, user.pk, "owner")
            self.stdout.write(self.style.SUCCESS(f"Created company: {company} ({company.slug})"))

            # 3. Chart of accounts
            accounts = {
                row["code"]: resources.create_account(tenant, row, user=user)
                for row in DEMO_ACCOUNTS
            }
            self.stdout.write(self.style.SUCCESS(f"Created {len(accounts)} accounts"))

            # 4. Opening balance, posted through the validator
            resources.create_journal_entry(
                tenant,
                {
                    "date": datetime.date.today().isoformat(),
                    "description": "Opening capital contribution",
                    "reference": "OPEN-001",
                },
                [
                    {"accountId": accounts["1000"].pk, "debitAmount": "10000.00"},
                    {"accountId": accounts["3000"].pk, "creditAmount": "10000.00"},
                ],
                user=user,
            )
        except LedgerError as exc:
            raise CommandError(exc.message) from exc

        self.stdout.write(self.style.SUCCESS("Created opening journal entry"))
        self.stdout.write(self.style.SUCCESS("Demo tenant setup complete!"))
