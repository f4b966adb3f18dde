"""
Money arithmetic and bill status derivation.

All amounts are Decimal quantized to two places with ROUND_HALF_UP so
that total == remaining + paid holds exactly.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Iterable, Union

from app.core.exceptions import ValidationError
from app.models.enums import BillStatus

CENT = Decimal("0.01")
ZERO = Decimal("0.00")

Number = Union[Decimal, int, float, str]


def to_decimal(value: Number) -> Decimal:
    """Convert without float artefacts (0.1 -> Decimal("0.1"))."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value if value is not None else "0"))


def round_money(value: Number) -> Decimal:
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def parse_money(value: Any, message: str = "Please enter a valid amount") -> Decimal:
    """
    Money typed by a user ("1500", "99.5", Decimal).

    Raises:
        ValidationError: not a finite number ("abc", "1,000", "NaN")
    """
    try:
        amount = to_decimal(value.strip() if isinstance(value, str) else value)
        if amount.is_finite():
            return round_money(amount)
    except (InvalidOperation, ValueError, TypeError) as e:
        raise ValidationError(message) from e
    raise ValidationError(message)


def parse_count(value: Any, message: str) -> int:
    """A whole number of copies typed by a user; "2.5" and "two" are rejected."""
    if isinstance(value, bool) or isinstance(value, float) and not value.is_integer():
        raise ValidationError(message)
    try:
        return int(value.strip() if isinstance(value, str) else value)
    except (ValueError, TypeError) as e:
        raise ValidationError(message) from e


def line_total(price: Number, quantity: int) -> Decimal:
    """price x quantity. Free-issue copies are never part of the total."""
    return round_money(to_decimal(price) * quantity)


def bill_total(item_totals: Iterable[Number]) -> Decimal:
    return round_money(sum((to_decimal(t) for t in item_totals), ZERO))


def derive_status(total: Number, remain: Number, is_closed: bool = False) -> BillStatus:
    """
    Classify a bill from its balance.

    Closed overrides everything. A fully settled bill is PAID, a bill with
    some but not all of its total collected is PARTIALLY_PAID, anything
    else (nothing collected) is PENDING.
    """
    if is_closed:
        return BillStatus.CLOSED
    total = round_money(total)
    remain = round_money(remain)
    if remain <= ZERO:
        return BillStatus.PAID
    if remain < total:
        return BillStatus.PARTIALLY_PAID
    return BillStatus.PENDING


def format_money(value: Number, symbol: str = "") -> str:
    return f"{symbol}{round_money(value):,.2f}"
