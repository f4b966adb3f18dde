"""Unit tests for billing and party schemas (wire format and field rules)."""

import uuid
from datetime import date
from decimal import Decimal

import pytest
from pydantic import ValidationError

from app.models.enums import BillStatus
from app.schemas.billing import BillBalance, BillCreate, PaymentCreate
from app.schemas.catalog import BookCreate
from app.schemas.party import TeacherCreate


def _entry(**overrides):
    entry = {"bookId": str(uuid.uuid4()), "price": "100.00", "quantity": 25, "freeIssue": 0}
    entry.update(overrides)
    return entry


def _bill(**overrides):
    data = {
        "billNumber": "1001",
        "date": "2026-10-01",
        "teacherId": str(uuid.uuid4()),
        "bookEntries": [_entry()],
    }
    data.update(overrides)
    return data


def test_bill_create_accepts_camel_case():
    bill = BillCreate.model_validate(_bill())
    assert bill.bill_number == "1001"
    assert bill.date == date(2026, 10, 1)
    assert bill.book_entries[0].price == Decimal("100.00")


def test_bill_create_requires_items():
    with pytest.raises(ValidationError):
        BillCreate.model_validate(_bill(bookEntries=[]))


@pytest.mark.parametrize("number", ["BILL-1001", "10a", "", "1001\n", "١٠٠١"])
def test_bill_create_rejects_non_digit_number(number):
    with pytest.raises(ValidationError):
        BillCreate.model_validate(_bill(billNumber=number))


@pytest.mark.parametrize(
    "overrides",
    [{"quantity": 0}, {"quantity": -1}, {"price": "0"}, {"price": "-10"}, {"freeIssue": -1}],
)
def test_bill_entry_rejects_non_positive_values(overrides):
    with pytest.raises(ValidationError):
        BillCreate.model_validate(_bill(bookEntries=[_entry(**overrides)]))


def test_money_rejects_more_than_two_places():
    with pytest.raises(ValidationError):
        BillCreate.model_validate(_bill(bookEntries=[_entry(price="10.005")]))


def test_payment_create_rules():
    bill_id = str(uuid.uuid4())
    payment = PaymentCreate.model_validate(
        {"billId": bill_id, "amount": "1000", "paymentDate": "2026-10-02", "collectBy": "Kamal"}
    )
    assert payment.amount == Decimal("1000")
    with pytest.raises(ValidationError):
        PaymentCreate.model_validate({"billId": bill_id, "amount": "0", "paymentDate": "2026-10-02"})
    with pytest.raises(ValidationError):
        PaymentCreate.model_validate({"billId": bill_id, "amount": "10"})


def test_teacher_mobile_must_be_ten_digits():
    TeacherCreate(teacher_name="A", mobile="0771234567", school_name="S")
    with pytest.raises(ValidationError):
        TeacherCreate(teacher_name="A", mobile="077123456", school_name="S")


@pytest.mark.parametrize("mobile", ["0771234567\n", "٠٧٧١٢٣٤٥٦٧"])
def test_teacher_mobile_rejects_non_ascii_digits(mobile):
    with pytest.raises(ValidationError):
        TeacherCreate(teacher_name="A", mobile=mobile, school_name="S")


def test_book_price_can_be_zero_but_not_negative():
    assert BookCreate(name="Atlas", default_price="0").default_price == Decimal("0")
    with pytest.raises(ValidationError):
        BookCreate(name="Atlas", default_price="-1")


def test_balance_serializes_camel_case_numbers():
    balance = BillBalance(
        id=uuid.uuid4(),
        bill_number="BILL-1001",
        total_amount=Decimal("2500.00"),
        remain_payment=Decimal("1500.00"),
        status=BillStatus.PARTIALLY_PAID,
    )
    data = balance.model_dump(mode="json", by_alias=True)
    assert data["billNumber"] == "BILL-1001"
    assert data["remainPayment"] == 1500.0
    assert data["status"] == "partially_paid"
