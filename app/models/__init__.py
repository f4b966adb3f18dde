"""Models Package - Export all models for easy imports"""

from app.models.base import BaseModel, SoftDeleteMixin, StatusMixin
from app.models.enums import BillStatus
from app.models.catalog import Book
from app.models.party import Teacher
from app.models.billing import Bill, BillItem, Payment


__all__ = [
    # Base classes
    "BaseModel",
    "SoftDeleteMixin",
    "StatusMixin",

    # Enums
    "BillStatus",

    # Catalog
    "Book",

    # Party
    "Teacher",

    # Billing
    "Bill",
    "BillItem",
    "Payment",
]
