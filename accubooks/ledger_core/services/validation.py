from decimal import Decimal
from typing import Dict, List, Mapping, NamedTuple, Optional, Sequence

from ..exceptions import CrossTenantReference, EmptyEntry, InvalidAmount, UnbalancedEntry
from .amounts import is_balanced, parse_amount, sum_amounts


class ValidatedLine(NamedTuple):
    line_no: int
    account_id: int
    debit_amount: Decimal
    credit_amount: Decimal
    description: str


class ValidatedEntry(NamedTuple):
    company_id: int
    header: dict
    lines: List[ValidatedLine]
    total_debit: Decimal
    total_credit: Decimal


# ------------------------------------
# Double-entry validation (no I/O)
# ------------------------------------
def validate_journal_entry(
    company_id: int,
    header: Mapping,
    lines: Sequence[Mapping],
    account_companies: Dict[int, int],
) -> ValidatedEntry:
    """
    Check a proposed journal entry before anything is written.

    `lines` are mappings with `account_id`, `debit_amount`, `credit_amount`
    and an optional `description`. `account_companies` maps every known
    account id to the company that owns it; the caller loads it from storage
    so this function stays pure.

    Raises EmptyEntry, InvalidAmount, UnbalancedEntry or CrossTenantReference.
    A line may carry both a debit and a credit; only the aggregate is checked.
    """
    if not lines:
        raise EmptyEntry()

    validated = []
    for index, line in enumerate(lines, start=1):
        debit = _line_amount(line, "debit_amount", index)
        credit = _line_amount(line, "credit_amount", index)
        validated.append(
            ValidatedLine(
                line_no=index,
                account_id=line.get("account_id"),
                debit_amount=debit,
                credit_amount=credit,
                description=line.get("description") or "",
            )
        )

    # Exact sums: amounts are never rounded, so these equal the stored sums
    total_debit = sum_amounts(line.debit_amount for line in validated)
    total_credit = sum_amounts(line.credit_amount for line in validated)
    if not is_balanced(total_debit, total_credit):
        raise UnbalancedEntry(total_debit, total_credit)

    for line in validated:
        owner = account_companies.get(line.account_id)
        if owner != company_id:
            raise CrossTenantReference(
                f"Line {line.line_no}: account {line.account_id} does not belong to this company",
                line=line.line_no,
                account_id=line.account_id,
            )

    return ValidatedEntry(
        company_id=company_id,
        header=dict(header),
        lines=validated,
        total_debit=total_debit,
        total_credit=total_credit,
    )


def _line_amount(line: Mapping, field: str, index: int) -> Decimal:
    raw = line.get(field)
    try:
        return parse_amount(raw)
    except ValueError as exc:
        raise InvalidAmount(
            f"Line {index}: {field} {exc}",
            line=index,
            field=field,
            value=None if raw is None else str(raw),
        )


def account_ids_of(lines: Sequence[Mapping]) -> List[Optional[int]]:
    return [line.get("account_id") for line in lines]
