from decimal import Decimal


class LedgerError(Exception):
    """Base class for every failure the ledger core reports to a caller."""

    code = "ledger_error"
    status_code = 400

    def __init__(self, message=None, **details):
        self.message = message or self.default_message()
        self.details = details
        super().__init__(self.message)

    def default_message(self):
        return self.code.replace("_", " ").capitalize()

    def as_dict(self):
        body = {"error": self.code, "message": self.message}
        for key, value in self.details.items():
            # Decimal totals go out as strings so no precision is lost
            body[key] = str(value) if isinstance(value, Decimal) else value
        return body


# ---------- Authentication / Authorization ----------
class AccessError(LedgerError):
    code = "access_error"


class Unauthenticated(AccessError):
    """No authenticated user is attached to the request."""
    code = "unauthenticated"
    status_code = 401

    def default_message(self):
        return "Authentication required"


class MissingCompanyContext(AccessError):
    """No company identifier could be resolved from path, body or session."""
    code = "missing_company_context"
    status_code = 400

    def default_message(self):
        return "Company ID required"


class Forbidden(AccessError):
    """User has no active membership in the resolved company."""
    code = "forbidden"
    status_code = 403

    def default_message(self):
        return "No access to this company"


# ---------- Validation ----------
class EntryValidationError(LedgerError):
    code = "validation_error"


class EmptyEntry(EntryValidationError):
    """Raised when a JournalEntry is submitted with zero lines."""
    code = "empty_entry"

    def default_message(self):
        return "Journal entry must have at least one line"


class InvalidAmount(EntryValidationError):
    """Raised when a debit or credit is not a non-negative number."""
    code = "invalid_amount"


class UnbalancedEntry(EntryValidationError):
    """Raised when a JournalEntry fails double-entry balance check."""
    code = "unbalanced_entry"

    def __init__(self, total_debit, total_credit, message=None):
        self.total_debit = total_debit
        self.total_credit = total_credit
        super().__init__(
            message
            or f"Journal entry must balance: debits={total_debit}, credits={total_credit}",
            total_debit=total_debit,
            total_credit=total_credit,
        )


class CrossTenantReference(EntryValidationError):
    """Raised when a line points at an account owned by another company."""
    code = "cross_tenant_reference"


class InvalidPayload(EntryValidationError):
    """Raised when a request body does not match its schema."""
    code = "invalid_payload"

    def __init__(self, errors, message="Invalid payload"):
        self.errors = errors
        super().__init__(message, errors=errors)


# ---------- Persistence ----------
class StorageError(LedgerError):
    code = "storage_error"
    status_code = 500
    public_message = "Could not save the record"

    def as_dict(self):
        # underlying database detail stays in the logs
        return {"error": self.code, "message": self.public_message}


class PersistenceFailure(StorageError):
    """Wraps an unexpected database error raised during a write."""
    code = "persistence_failure"


class ConstraintViolation(StorageError):
    """Wraps an integrity error (duplicate key, foreign-key failure)."""
    code = "constraint_violation"
    status_code = 409
    public_message = "The record conflicts with existing data"
