"""
Draft bill pipeline: edit -> validate -> summary -> confirm -> payload.

Drafts and summaries are immutable values; every edit returns a new
draft, so nothing is shared between sessions. A summary must be
confirmed explicitly before it can be turned into a creation payload.
"""

import re
from dataclasses import dataclass, field, replace
from datetime import date as date_type
from decimal import Decimal
from typing import Any, Awaitable, Callable, List, Optional, Tuple

from app.config import settings
from app.core.exceptions import NotFoundError, ValidationError
from app.services.pricing import ZERO, bill_total, line_total, parse_count, parse_money, to_decimal
from app.utils.time import get_utc_today

# ASCII digits only
BILL_NUMBER_RE = re.compile(r"[0-9]+")
MOBILE_RE = re.compile(r"[0-9]{10}")


def is_valid_bill_number(value: Optional[str]) -> bool:
    return isinstance(value, str) and BILL_NUMBER_RE.fullmatch(value) is not None


def is_valid_mobile(value: Optional[str]) -> bool:
    return isinstance(value, str) and MOBILE_RE.fullmatch(value) is not None


def prefixed_bill_number(number: str) -> str:
    """123 -> BILL-123; already-prefixed numbers are returned as is."""
    prefix = settings.BILL_NUMBER_PREFIX
    if number.upper().startswith(prefix.upper()):
        return prefix + number[len(prefix):]
    return f"{prefix}{number}"


def strip_bill_prefix(number: str) -> str:
    prefix = settings.BILL_NUMBER_PREFIX
    if number.upper().startswith(prefix.upper()):
        return number[len(prefix):]
    return number


def _read(record: Any, *names: str) -> Any:
    """Read the first present attribute/key; records may be ORM rows or API dicts."""
    for name in names:
        if isinstance(record, dict):
            if name in record:
                return record[name]
        elif hasattr(record, name):
            return getattr(record, name)
    return None


@dataclass(frozen=True)
class PartyRef:
    id: Any
    teacher_name: str
    mobile: str
    school_name: str

    @classmethod
    def from_record(cls, record: Any) -> "PartyRef":
        return cls(
            id=_read(record, "id"),
            teacher_name=_read(record, "teacher_name", "teacherName") or "",
            mobile=_read(record, "mobile") or "",
            school_name=_read(record, "school_name", "schoolName") or "",
        )


@dataclass(frozen=True)
class DraftLineItem:
    book_id: Any = None
    book_name: str = ""
    price: Decimal = ZERO
    quantity: int = 0
    free_issue: int = 0

    @property
    def total(self) -> Decimal:
        return line_total(self.price, self.quantity)

    def select_book(self, book_id: Any, book_name: str, default_price: Any) -> "DraftLineItem":
        """Pick a book: the catalog price is copied, not referenced."""
        return replace(
            self,
            book_id=book_id,
            book_name=book_name,
            price=parse_money(default_price, "Please enter a valid price"),
        )

    def with_price(self, price: Any) -> "DraftLineItem":
        return replace(self, price=parse_money(price, "Please enter a valid price"))

    def with_quantity(self, quantity: Any) -> "DraftLineItem":
        return replace(self, quantity=parse_count(quantity, "Please enter a valid quantity"))

    def with_free_issue(self, free_issue: Any) -> "DraftLineItem":
        return replace(self, free_issue=parse_count(free_issue, "Please enter a valid free issue count"))

    def errors(self, position: int) -> List[str]:
        problems = []
        if self.book_id is None or not self.book_name:
            problems.append(f"Item {position}: select a book")
        if to_decimal(self.price) <= ZERO:
            problems.append(f"Item {position}: price must be greater than 0")
        if self.quantity <= 0:
            problems.append(f"Item {position}: quantity must be greater than 0")
        if self.free_issue < 0:
            problems.append(f"Item {position}: free issue cannot be negative")
        return problems


@dataclass(frozen=True)
class BillSummary:
    """What the user reviews before committing. Must be confirmed to submit."""
    bill_number: str
    date: date_type
    party: PartyRef
    items: Tuple[DraftLineItem, ...]
    total_amount: Decimal
    confirmed: bool = False

    @property
    def display_number(self) -> str:
        return prefixed_bill_number(self.bill_number)

    def confirm(self) -> "BillSummary":
        return replace(self, confirmed=True)

    def to_payload(self) -> dict:
        if not self.confirmed:
            raise ValidationError("Bill summary must be confirmed before submitting")
        return {
            "billNumber": self.bill_number,
            "date": self.date.isoformat(),
            "teacherId": str(self.party.id),
            "bookEntries": [
                {
                    "bookId": str(item.book_id),
                    "price": str(item.price),
                    "quantity": item.quantity,
                    "freeIssue": item.free_issue,
                }
                for item in self.items
            ],
        }


@dataclass(frozen=True)
class DraftBill:
    bill_number: str = ""
    date: Optional[date_type] = None
    mobile: str = ""
    items: Tuple[DraftLineItem, ...] = field(default_factory=lambda: (DraftLineItem(),))

    @classmethod
    def blank(cls) -> "DraftBill":
        """A new draft dated today with one empty book entry."""
        return cls(date=get_utc_today())

    @property
    def total_amount(self) -> Decimal:
        return bill_total(item.total for item in self.items)

    def with_header(self, **changes: Any) -> "DraftBill":
        """Change bill_number, date or mobile."""
        unknown = set(changes) - {"bill_number", "date", "mobile"}
        if unknown:
            raise ValueError(f"Not a header field: {', '.join(sorted(unknown))}")
        return replace(self, **changes)

    def add_item(self, item: Optional[DraftLineItem] = None) -> "DraftBill":
        return replace(self, items=self.items + (item or DraftLineItem(),))

    def update_item(self, index: int, fn: Callable[[DraftLineItem], DraftLineItem]) -> "DraftBill":
        self._check_index(index)
        items = list(self.items)
        items[index] = fn(items[index])
        return replace(self, items=tuple(items))

    def remove_item(self, index: int) -> "DraftBill":
        self._check_index(index)
        if len(self.items) == 1:
            raise ValidationError("Cannot delete the only book entry. At least one book is required.")
        return replace(self, items=self.items[:index] + self.items[index + 1:])

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self.items):
            raise NotFoundError(f"No book entry at position {index + 1}")

    def errors(self) -> List[str]:
        problems = []
        if not is_valid_bill_number(self.bill_number):
            problems.append("Bill number must contain only digits")
        if not is_valid_mobile(self.mobile):
            problems.append("Mobile number must be exactly 10 digits")
        if self.date is None:
            problems.append("Bill date is required")
        if not self.items:
            problems.append("At least one book is required")
        for position, item in enumerate(self.items, start=1):
            problems.extend(item.errors(position))
        return problems

    def check(self) -> None:
        """Raise ValidationError listing every problem; the draft is rejected as a whole."""
        problems = self.errors()
        if problems:
            raise ValidationError(problems[0], details=problems)

    async def validate(self, find_party: Callable[[str], Awaitable[Any]]) -> BillSummary:
        """
        Check the draft and resolve the teacher by mobile number.

        Args:
            find_party: async lookup returning the teacher record or None

        Raises:
            ValidationError: draft is malformed
            NotFoundError: no teacher has this mobile number
        """
        self.check()
        party = await find_party(self.mobile)
        if party is None:
            raise NotFoundError(f"No teacher found with mobile number {self.mobile}")
        return BillSummary(
            bill_number=self.bill_number,
            date=self.date,
            party=PartyRef.from_record(party),
            items=self.items,
            total_amount=self.total_amount,
        )
