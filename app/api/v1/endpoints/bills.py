"""Bill endpoints - summary, creation, lookup, close/reopen, reconciliation"""

from typing import Any, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from uuid import UUID

from app.api import deps
from app.schemas.billing import (
    BillCreate,
    BillDraftIn,
    BillResponse,
    BillSummaryResponse,
    ReconciliationReport,
    SummaryItem,
)
from app.schemas.party import TeacherBrief
from app.schemas.responses import PaginatedResponse, SuccessResponse
from app.services.bill_service import BillService
from app.services.drafts import BillSummary

router = APIRouter()


def _summary_response(summary: BillSummary) -> BillSummaryResponse:
    party = summary.party
    return BillSummaryResponse(
        bill_number=summary.bill_number,
        display_number=summary.display_number,
        date=summary.date,
        teacher_id=party.id,
        teacher=TeacherBrief(
            id=party.id,
            teacher_name=party.teacher_name,
            mobile=party.mobile,
            school_name=party.school_name,
        ),
        items=[
            SummaryItem(
                book_id=item.book_id,
                book_name=item.book_name,
                price=item.price,
                quantity=item.quantity,
                free_issue=item.free_issue,
                total=item.total,
            )
            for item in summary.items
        ],
        total_amount=summary.total_amount,
    )


@router.get("", response_model=PaginatedResponse[BillResponse])
async def list_bills(
    q: Optional[str] = Query(None, description="Bill number, teacher mobile or teacher name"),
    pagination: deps.Pagination = Depends(deps.get_pagination),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    bills, total = await BillService.list_bills(
        db, query=q, page=pagination.page, page_size=pagination.page_size
    )
    return PaginatedResponse(data=bills, meta=pagination.meta(total))


@router.post("/summary", response_model=SuccessResponse[BillSummaryResponse])
async def summarize_bill(
    draft_in: BillDraftIn,
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    """
    Validate a draft (bill number, mobile, book entries) and return the
    summary to confirm. Nothing is saved; submit the confirmed summary
    to POST /bills.
    """
    summary = await BillService.build_summary(db, draft_in)
    return SuccessResponse(data=_summary_response(summary), message="Review the bill before confirming")


@router.post("", response_model=SuccessResponse[BillResponse])
async def create_bill(
    bill_in: BillCreate,
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    bill = await BillService.create_bill(db, bill_in)
    return SuccessResponse(data=bill, message="Bill submitted successfully")


@router.get("/number/{bill_number}", response_model=SuccessResponse[BillResponse])
async def get_bill_by_number(
    bill_number: str,
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    bill = await BillService.get_bill_by_number(db, bill_number)
    return SuccessResponse(data=bill)


@router.get("/{bill_id}", response_model=SuccessResponse[BillResponse])
async def get_bill(
    bill_id: UUID,
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    bill = await BillService.get_bill_or_404(db, bill_id)
    return SuccessResponse(data=bill)


@router.post("/{bill_id}/close", response_model=SuccessResponse[BillResponse])
async def close_bill(
    bill_id: UUID,
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    """Close the bill. Payments can no longer be added or deleted."""
    bill = await BillService.close_bill(db, bill_id)
    return SuccessResponse(data=bill, message="Bill closed")


@router.post("/{bill_id}/reopen", response_model=SuccessResponse[BillResponse])
async def reopen_bill(
    bill_id: UUID,
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    bill = await BillService.reopen_bill(db, bill_id)
    return SuccessResponse(data=bill, message="Bill reopened")


@router.get("/{bill_id}/reconciliation", response_model=SuccessResponse[ReconciliationReport])
async def reconcile_bill(
    bill_id: UUID,
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    """Re-derive the balance from the items and the live payment ledger."""
    report = await BillService.reconcile(db, bill_id)
    return SuccessResponse(data=ReconciliationReport(**report))
