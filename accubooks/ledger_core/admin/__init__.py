from .account import AccountAdmin
from .auditlog import AuditLogAdmin
from .forms import InvoiceLineForm, UserAdminChangeForm, UserAdminCreationForm
from .inlines import InvoiceLineInline, JournalLineInline
from .invoice import CustomerAdmin, ExpenseAdmin, InvoiceAdmin, VendorAdmin
from .journal import JournalEntryAdmin
from .membership import CompanyAdmin, EntityMembershipAdmin, UserAdmin
from .mixins import TenantAdminMixin
