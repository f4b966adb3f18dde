"""Payment endpoints - the ledger against a bill"""

from typing import Any, List
from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession
from uuid import UUID

from app.api import deps
from app.config import settings
from app.core.rate_limit import limiter
from app.schemas.billing import BillBalance, PaymentCreate, PaymentResponse, PaymentResult
from app.schemas.responses import SuccessResponse
from app.services.payment_service import PaymentService

router = APIRouter()


def _result(payment, bill) -> PaymentResult:
    return PaymentResult(
        payment=PaymentResponse.model_validate(payment),
        bill=BillBalance.model_validate(bill),
    )


@router.get("/bill/{bill_id}", response_model=SuccessResponse[List[PaymentResponse]])
async def list_bill_payments(
    bill_id: UUID,
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    payments = await PaymentService.list_for_bill(db, bill_id)
    return SuccessResponse(data=payments)


@router.post("", response_model=SuccessResponse[PaymentResult])
@limiter.limit(settings.rate_limit)
async def add_payment(
    request: Request,
    payment_in: PaymentCreate,
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    """
    Record a payment. Fields: billId, amount, paymentDate, collectBy.
    The amount is checked against the bill's stored balance, not the caller's copy.
    """
    payment, bill = await PaymentService.add_payment(
        db,
        bill_id=payment_in.bill_id,
        amount=payment_in.amount,
        payment_date=payment_in.payment_date,
        collect_by=payment_in.collect_by,
    )
    return SuccessResponse(data=_result(payment, bill), message="Payment added successfully")


@router.delete("/{payment_id}", response_model=SuccessResponse[PaymentResult])
@limiter.limit(settings.rate_limit)
async def delete_payment(
    request: Request,
    payment_id: UUID,
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    """Delete a payment and credit its amount back to the bill."""
    payment, bill = await PaymentService.delete_payment(db, payment_id)
    return SuccessResponse(data=_result(payment, bill), message="Payment deleted successfully")
