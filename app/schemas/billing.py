from typing import Optional, List
from pydantic import Field
from uuid import UUID
from datetime import datetime, date as date_type

from app.models.enums import BillStatus
from app.schemas.base import CamelModel, Money
from app.schemas.party import TeacherBrief

BILL_NUMBER_PATTERN = r"^[0-9]+$"


# --- Bill creation ---

class BookEntryCreate(CamelModel):
    book_id: UUID
    price: Money = Field(..., gt=0)
    quantity: int = Field(..., gt=0)
    free_issue: int = Field(0, ge=0)


class BillCreate(CamelModel):
    bill_number: str = Field(..., pattern=BILL_NUMBER_PATTERN, description="Digits only, prefix is added on save")
    date: date_type
    teacher_id: UUID
    book_entries: List[BookEntryCreate] = Field(..., min_length=1)


# --- Draft -> summary (checked by DraftBill, so every field is lenient here) ---

class DraftEntryIn(CamelModel):
    book_id: Optional[UUID] = None
    price: Optional[Money] = None
    quantity: int = 0
    free_issue: int = 0


class BillDraftIn(CamelModel):
    bill_number: str = ""
    date: Optional[date_type] = None
    mobile: str = ""
    book_entries: List[DraftEntryIn] = []


class SummaryItem(CamelModel):
    book_id: UUID
    book_name: str
    price: Money
    quantity: int
    free_issue: int
    total: Money


class BillSummaryResponse(CamelModel):
    bill_number: str
    display_number: str
    date: date_type
    teacher: TeacherBrief
    items: List[SummaryItem]
    total_amount: Money
    teacher_id: UUID


# --- Bill read models ---

class BillItemResponse(CamelModel):
    id: UUID
    position: int
    book_id: Optional[UUID] = None
    book_name: str
    price: Money
    quantity: int
    free_issue: int
    total: Money


class BillBalance(CamelModel):
    id: UUID
    bill_number: str
    total_amount: Money
    remain_payment: Money
    status: BillStatus


class BillResponse(BillBalance):
    date: date_type
    teacher_id: UUID
    teacher: Optional[TeacherBrief] = None
    is_closed: bool
    closed_at: Optional[datetime] = None
    items: List[BillItemResponse] = []
    created_at: datetime


class ReconciliationReport(CamelModel):
    bill_id: UUID
    bill_number: str
    items_total: Money
    total_amount: Money
    remain_payment: Money
    paid_amount: Money
    payment_count: int
    status: BillStatus
    expected_status: BillStatus
    consistent: bool


# --- Payments ---

class PaymentCreate(CamelModel):
    bill_id: UUID
    amount: Money = Field(..., gt=0)
    payment_date: date_type
    collect_by: Optional[str] = Field(None, max_length=255)


class PaymentResponse(CamelModel):
    id: UUID
    bill_id: UUID
    amount: Money
    payment_date: date_type
    collect_by: Optional[str] = None
    created_at: datetime


class PaymentResult(CamelModel):
    """Payment mutation result with the bill's balance after the change."""
    payment: PaymentResponse
    bill: BillBalance
