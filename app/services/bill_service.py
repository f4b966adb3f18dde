"""Bill Service - bill creation, lookup and reconciliation"""

from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID
from sqlalchemy import select, func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from app.core.exceptions import ConflictError, NotFoundError, ValidationError
from app.models.billing import Bill, BillItem, Payment
from app.models.catalog import Book
from app.models.enums import BillStatus
from app.models.party import Teacher
from app.schemas.billing import BillCreate, BillDraftIn
from app.services.drafts import (
    BillSummary,
    DraftBill,
    DraftLineItem,
    prefixed_bill_number,
    strip_bill_prefix,
)
from app.services.party_service import TeacherService
from app.services.pricing import ZERO, bill_total, derive_status, line_total, round_money
from app.utils.time import get_utc_now

logger = logging.getLogger(__name__)


class BillService:
    """Service layer for bills. Items and totals never change after creation."""

    @staticmethod
    async def get_bill_by_id(db: AsyncSession, bill_id: UUID) -> Optional[Bill]:
        result = await db.execute(select(Bill).where(Bill.id == bill_id))
        return result.scalar_one_or_none()

    @staticmethod
    async def get_bill_or_404(db: AsyncSession, bill_id: UUID) -> Bill:
        bill = await BillService.get_bill_by_id(db, bill_id)
        if not bill:
            raise NotFoundError(f"Bill {bill_id} not found")
        return bill

    @staticmethod
    async def get_bill_for_update(db: AsyncSession, bill_id: UUID) -> Bill:
        """
        Re-read the bill from the database and lock its row.

        Payment writes validate against this copy, never against whatever
        the session or the caller had cached.
        """
        result = await db.execute(
            select(Bill)
            .where(Bill.id == bill_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        bill = result.scalar_one_or_none()
        if not bill:
            raise NotFoundError(f"Bill {bill_id} not found")
        return bill

    @staticmethod
    async def get_bill_by_number(db: AsyncSession, bill_number: str) -> Bill:
        """Accepts "123", "BILL-123" or "bill-123"."""
        digits = strip_bill_prefix(bill_number.strip())
        result = await db.execute(
            select(Bill).where(Bill.bill_number == prefixed_bill_number(digits))
        )
        bill = result.scalar_one_or_none()
        if not bill:
            raise NotFoundError("Bill not found")
        return bill

    @staticmethod
    async def list_bills(
        db: AsyncSession,
        query: Optional[str] = None,
        page: int = 1,
        page_size: int = 20,
    ) -> Tuple[List[Bill], int]:
        """Newest first. query matches bill number, teacher mobile or teacher name."""
        stmt = select(Bill).join(Teacher, Bill.teacher_id == Teacher.id)
        if query and query.strip():
            needle = f"%{query.strip().lower()}%"
            stmt = stmt.where(
                or_(
                    func.lower(Bill.bill_number).like(needle),
                    Teacher.mobile.like(needle),
                    func.lower(Teacher.teacher_name).like(needle),
                )
            )
        total = await db.scalar(select(func.count()).select_from(stmt.subquery()))
        result = await db.execute(
            stmt.order_by(Bill.date.desc(), Bill.created_at.desc())
            .offset((page - 1) * page_size)
            .limit(page_size)
        )
        return list(result.scalars().all()), total or 0

    @staticmethod
    async def build_summary(db: AsyncSession, draft_in: BillDraftIn) -> BillSummary:
        """
        Validate a draft and return the summary the user confirms.

        Picking a book copies its current default price; an explicit price
        in the entry overrides the copy. Nothing is written.
        """
        items = []
        for entry in draft_in.book_entries:
            item = DraftLineItem(quantity=entry.quantity, free_issue=entry.free_issue)
            if entry.book_id is not None:
                book = await db.get(Book, entry.book_id)
                if not book:
                    raise NotFoundError(f"Book {entry.book_id} not found")
                if not book.is_active:
                    raise ValidationError(f"Book '{book.name}' is no longer available")
                item = item.select_book(book.id, book.name, book.default_price)
            if entry.price is not None:
                item = item.with_price(entry.price)
            items.append(item)

        draft = DraftBill(
            bill_number=draft_in.bill_number.strip(),
            date=draft_in.date,
            mobile=draft_in.mobile.strip(),
            items=tuple(items),
        )

        async def find_party(mobile: str):
            return await TeacherService.find_by_mobile(db, mobile)

        return await draft.validate(find_party)

    @staticmethod
    async def create_bill(db: AsyncSession, data: BillCreate) -> Bill:
        """
        Persist a confirmed bill with all its items, or nothing.

        Raises:
            ValidationError: no items, inactive book
            NotFoundError: unknown teacher or book
            ConflictError: bill number already used
        """
        if not data.book_entries:
            raise ValidationError("At least one book is required")

        bill_number = prefixed_bill_number(data.bill_number)
        existing = await db.execute(select(Bill.id).where(Bill.bill_number == bill_number))
        if existing.first():
            raise ConflictError(f"Bill number {bill_number} already exists")

        teacher = await TeacherService.get_teacher_or_404(db, data.teacher_id)

        book_ids = {entry.book_id for entry in data.book_entries}
        result = await db.execute(select(Book).where(Book.id.in_(book_ids)))
        books = {book.id: book for book in result.scalars().all()}

        items = []
        for position, entry in enumerate(data.book_entries, start=1):
            book = books.get(entry.book_id)
            if not book:
                raise NotFoundError(f"Book {entry.book_id} not found")
            if not book.is_active:
                raise ValidationError(f"Book '{book.name}' is no longer available")
            price = round_money(entry.price)
            if price <= ZERO or entry.quantity <= 0:
                raise ValidationError(f"Item {position}: price and quantity must be greater than 0")
            items.append(
                BillItem(
                    position=position,
                    book_id=book.id,
                    book_name=book.name,
                    price=price,
                    quantity=entry.quantity,
                    free_issue=entry.free_issue,
                    total=line_total(price, entry.quantity),
                )
            )

        total_amount = bill_total(item.total for item in items)
        bill = Bill(
            bill_number=bill_number,
            date=data.date,
            teacher=teacher,
            total_amount=total_amount,
            remain_payment=total_amount,
            status=derive_status(total_amount, total_amount),
            is_closed=False,
            items=items,
        )
        db.add(bill)
        try:
            await db.flush()
        except IntegrityError as e:
            raise ConflictError(f"Bill number {bill_number} already exists") from e
        await db.refresh(bill)

        logger.info(
            "Bill created",
            extra={
                "bill_id": str(bill.id),
                "bill_number": bill.bill_number,
                "teacher_id": str(teacher.id),
                "item_count": len(items),
                "total_amount": str(total_amount),
            },
        )
        return bill

    @staticmethod
    async def close_bill(db: AsyncSession, bill_id: UUID) -> Bill:
        """Manual override: a closed bill accepts no payment activity."""
        bill = await BillService.get_bill_for_update(db, bill_id)
        if bill.is_closed:
            return bill
        bill.is_closed = True
        bill.closed_at = get_utc_now()
        bill.status = BillStatus.CLOSED
        await db.flush()
        await db.refresh(bill)
        logger.info("Bill closed", extra={"bill_id": str(bill.id), "remain_payment": str(bill.remain_payment)})
        return bill

    @staticmethod
    async def reopen_bill(db: AsyncSession, bill_id: UUID) -> Bill:
        bill = await BillService.get_bill_for_update(db, bill_id)
        if not bill.is_closed:
            return bill
        bill.is_closed = False
        bill.closed_at = None
        bill.status = derive_status(bill.total_amount, bill.remain_payment)
        await db.flush()
        await db.refresh(bill)
        logger.info("Bill reopened", extra={"bill_id": str(bill.id), "status": bill.status.value})
        return bill

    @staticmethod
    async def paid_amount(db: AsyncSession, bill_id: UUID) -> Tuple[Any, int]:
        """Sum and count of the bill's live (not deleted) payments."""
        result = await db.execute(
            select(func.coalesce(func.sum(Payment.amount), 0), func.count(Payment.id))
            .where(Payment.bill_id == bill_id, Payment.deleted_at.is_(None))
        )
        paid, count = result.one()
        return round_money(paid), count

    @staticmethod
    async def reconcile(db: AsyncSession, bill_id: UUID) -> Dict[str, Any]:
        """
        Re-derive the bill's balance from its items and the live ledger.

        consistent is True when total == remaining + paid, the items add
        up to the total, the balance is within [0, total] and the stored
        status matches the derived one.
        """
        bill = await BillService.get_bill_or_404(db, bill_id)
        paid, count = await BillService.paid_amount(db, bill.id)
        items_total = bill_total(item.total for item in bill.items)
        total = round_money(bill.total_amount)
        remain = round_money(bill.remain_payment)
        expected_status = derive_status(total, remain, bill.is_closed)

        consistent = (
            total == remain + paid
            and items_total == total
            and ZERO <= remain <= total
            and bill.status == expected_status
        )
        if not consistent:
            logger.warning(
                "Bill ledger inconsistent",
                extra={
                    "bill_id": str(bill.id),
                    "total_amount": str(total),
                    "remain_payment": str(remain),
                    "paid_amount": str(paid),
                    "items_total": str(items_total),
                },
            )
        return {
            "bill_id": bill.id,
            "bill_number": bill.bill_number,
            "items_total": items_total,
            "total_amount": total,
            "remain_payment": remain,
            "paid_amount": paid,
            "payment_count": count,
            "status": bill.status,
            "expected_status": expected_status,
            "consistent": consistent,
        }
