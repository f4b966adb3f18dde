"""
Payment Service - the ledger that moves a bill's balance.

Every write re-reads the bill under a row lock and is flushed through
the bill's version counter, so two sessions racing on the same bill can
never both pass a stale "amount <= remaining" check.
"""

from datetime import date
from decimal import Decimal
from typing import List, Optional, Tuple
from uuid import UUID
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError
import logging

from app.config import settings
from app.core.exceptions import ConflictError, NotFoundError, ValidationError
from app.models.billing import Bill, Payment
from app.services.bill_service import BillService
from app.services.pricing import ZERO, derive_status, format_money, round_money

logger = logging.getLogger(__name__)


class PaymentService:
    """Service layer for the payment ledger"""

    @staticmethod
    async def list_for_bill(db: AsyncSession, bill_id: UUID) -> List[Payment]:
        await BillService.get_bill_or_404(db, bill_id)
        result = await db.execute(
            select(Payment)
            .where(Payment.bill_id == bill_id, Payment.deleted_at.is_(None))
            .order_by(Payment.payment_date, Payment.created_at)
        )
        return list(result.scalars().all())

    @staticmethod
    async def _flush(db: AsyncSession, bill: Bill) -> None:
        try:
            await db.flush()
        except StaleDataError as e:
            logger.warning("Concurrent payment write rejected", extra={"bill_id": str(bill.id)})
            raise ConflictError(
                "The bill's balance changed while saving. Reload the bill and try again."
            ) from e

    @staticmethod
    async def add_payment(
        db: AsyncSession,
        bill_id: UUID,
        amount: Decimal,
        payment_date: Optional[date],
        collect_by: Optional[str] = None,
    ) -> Tuple[Payment, Bill]:
        """
        Record a payment and decrement the bill's remaining balance.

        Raises:
            NotFoundError: unknown bill
            ConflictError: bill is closed, or its balance changed concurrently
            ValidationError: amount <= 0, amount over the balance, no date
        """
        bill = await BillService.get_bill_for_update(db, bill_id)
        if bill.is_closed:
            raise ConflictError(f"Bill {bill.bill_number} is closed")

        amount = round_money(amount) if amount is not None else ZERO
        if amount <= ZERO:
            raise ValidationError("Please enter a valid amount")
        if amount > bill.remain_payment:
            logger.warning(
                "Payment exceeds remaining balance",
                extra={
                    "bill_id": str(bill.id),
                    "amount": str(amount),
                    "remain_payment": str(bill.remain_payment),
                },
            )
            raise ValidationError(
                f"Payment amount cannot exceed remaining payment "
                f"({format_money(bill.remain_payment, settings.CURRENCY_SYMBOL)})"
            )
        if payment_date is None:
            raise ValidationError("Please select a payment date")

        bill.remain_payment = round_money(bill.remain_payment - amount)
        bill.status = derive_status(bill.total_amount, bill.remain_payment)
        payment = Payment(
            bill_id=bill.id,
            amount=amount,
            payment_date=payment_date,
            collect_by=(collect_by or "").strip() or None,
        )
        db.add(payment)
        await PaymentService._flush(db, bill)
        await db.refresh(payment)

        logger.info(
            "Payment added",
            extra={
                "bill_id": str(bill.id),
                "payment_id": str(payment.id),
                "amount": str(amount),
                "remain_payment": str(bill.remain_payment),
                "status": bill.status.value,
            },
        )
        return payment, bill

    @staticmethod
    async def delete_payment(db: AsyncSession, payment_id: UUID) -> Tuple[Payment, Bill]:
        """
        Remove a payment from the ledger and credit its amount back.

        A payment that is unknown or already deleted raises NotFoundError
        and leaves every balance untouched.
        """
        result = await db.execute(
            select(Payment)
            .where(Payment.id == payment_id, Payment.deleted_at.is_(None))
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        payment = result.scalar_one_or_none()
        if not payment:
            raise NotFoundError("Payment not found or already deleted")

        bill = await BillService.get_bill_for_update(db, payment.bill_id)
        if bill.is_closed:
            raise ConflictError(f"Bill {bill.bill_number} is closed")

        restored = round_money(bill.remain_payment + payment.amount)
        if restored > bill.total_amount:
            raise ConflictError("Payment ledger does not match the bill balance")

        payment.soft_delete()
        bill.remain_payment = restored
        bill.status = derive_status(bill.total_amount, bill.remain_payment)
        await PaymentService._flush(db, bill)

        logger.info(
            "Payment deleted",
            extra={
                "bill_id": str(bill.id),
                "payment_id": str(payment.id),
                "amount": str(payment.amount),
                "remain_payment": str(bill.remain_payment),
                "status": bill.status.value,
            },
        )
        return payment, bill
