from decimal import Decimal, InvalidOperation

from django.conf import settings

ZERO = Decimal("0.00")
CENT = Decimal("0.01")
# Journal amounts are stored as DecimalField(max_digits=20, decimal_places=4)
AMOUNT_PLACES = 4
MAX_AMOUNT = Decimal("9999999999999999.9999")


def balance_tolerance() -> Decimal:
    """Absolute difference allowed between total debits and credits."""
    return Decimal(str(getattr(settings, "LEDGER_BALANCE_TOLERANCE", "0.01")))


def parse_amount(value) -> Decimal:
    """
    Parse a money value into an exact Decimal.

    None and blank strings count as zero. Floats go through str() so that
    0.1 stays 0.1 instead of its binary expansion. Nothing is rounded: a value
    with more places than storage keeps is rejected, so what is checked is
    exactly what gets stored. Raises ValueError for anything non-numeric,
    non-finite, negative, too precise or too large.
    """
    if value is None:
        return ZERO
    if isinstance(value, bool):
        raise ValueError("not a number")
    if isinstance(value, str):
        value = value.strip()
        if value == "":
            return ZERO
    elif isinstance(value, float):
        value = str(value)
    try:
        amount = Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise ValueError("not a number")
    if not amount.is_finite():
        raise ValueError("not a finite number")
    if amount < 0:
        raise ValueError("must not be negative")
    if amount > MAX_AMOUNT:
        raise ValueError("is too large")
    if amount != amount.quantize(Decimal(1).scaleb(-AMOUNT_PLACES)):
        raise ValueError(f"has more than {AMOUNT_PLACES} decimal places")
    return amount


def sum_amounts(amounts) -> Decimal:
    return sum(amounts, ZERO)


def is_balanced(total_debit: Decimal, total_credit: Decimal) -> bool:
    return abs(total_debit - total_credit) <= balance_tolerance()


def format_amount(value: Decimal) -> str:
    """At least two places; extra places only when they carry digits."""
    cents = value.quantize(CENT)
    return str(cents if cents == value else value.normalize())
