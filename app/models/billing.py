"""Billing Models: bills, their line items and the payment ledger"""

from sqlalchemy import Column, String, Date, DateTime, Integer, Numeric, Boolean, ForeignKey, Enum, Uuid
from sqlalchemy.orm import relationship

from app.models.base import BaseModel, SoftDeleteMixin
from app.models.enums import BillStatus


class Bill(BaseModel):
    """
    Invoice issued to one teacher.

    total_amount is fixed at creation. remain_payment and status are
    maintained by the payment ledger and must always equal what the
    live payments imply; version guards concurrent ledger writes.
    """
    __tablename__ = "bills"

    bill_number = Column(String(50), nullable=False, unique=True, index=True)
    date = Column(Date, nullable=False)
    teacher_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("teachers.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    total_amount = Column(Numeric(12, 2), nullable=False)
    remain_payment = Column(Numeric(12, 2), nullable=False)
    status = Column(
        Enum(BillStatus, name="bill_status", values_callable=lambda x: [e.value for e in x]),
        default=BillStatus.PENDING,
        nullable=False,
        index=True,
    )
    is_closed = Column(Boolean, default=False, nullable=False)
    closed_at = Column(DateTime, nullable=True)
    version = Column(Integer, nullable=False, default=1)

    __mapper_args__ = {"version_id_col": version}

    # Relationships
    teacher = relationship("Teacher", back_populates="bills", lazy="selectin")
    items = relationship(
        "BillItem",
        back_populates="bill",
        cascade="all, delete-orphan",
        order_by="BillItem.position",
        lazy="selectin",
    )
    payments = relationship("Payment", back_populates="bill")

    def __repr__(self) -> str:
        return f"<Bill {self.bill_number} {self.remain_payment}/{self.total_amount} - {self.status}>"


class BillItem(BaseModel):
    """
    One book line on a bill. Book name and price are snapshots taken at
    billing time; total is price x quantity and free_issue never counts.
    """
    __tablename__ = "bill_items"

    bill_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("bills.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    position = Column(Integer, nullable=False)
    book_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("books.id", ondelete="SET NULL"),
        nullable=True,
    )
    book_name = Column(String(255), nullable=False)
    price = Column(Numeric(12, 2), nullable=False)
    quantity = Column(Integer, nullable=False)
    free_issue = Column(Integer, nullable=False, default=0)
    total = Column(Numeric(12, 2), nullable=False)

    # Relationships
    bill = relationship("Bill", back_populates="items")

    def __repr__(self) -> str:
        return f"<BillItem {self.book_name} {self.quantity} x {self.price}>"


class Payment(BaseModel, SoftDeleteMixin):
    """
    Ledger entry against a bill. Never edited; deleting it soft-deletes
    the row and credits the amount back to the bill.
    """
    __tablename__ = "payments"

    bill_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("bills.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    amount = Column(Numeric(12, 2), nullable=False)
    payment_date = Column(Date, nullable=False)
    collect_by = Column(String(255), nullable=True)

    # Relationships
    bill = relationship("Bill", back_populates="payments")

    def __repr__(self) -> str:
        return f"<Payment {self.amount} on {self.payment_date}>"
