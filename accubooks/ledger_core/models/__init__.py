from .account import AC_TYPES, Account
from .auditlog import AuditLog
from .customer import Customer
from .entitymembership import Company, EntityMembership, User
from .expense import Expense
from .invoice import Invoice, InvoiceLine
from .journal import JournalEntry, JournalLine
from .vendor import Vendor
