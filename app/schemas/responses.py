"""Response envelopes shared by every endpoint"""

from typing import Any, Generic, List, TypeVar
from pydantic import BaseModel, Field

from app.core.exceptions import BillingError

T = TypeVar("T")


class SuccessResponse(BaseModel, Generic[T]):
    """
    {"success": true, "data": {...}, "message": "Payment added successfully"}
    """
    success: bool = True
    data: T
    message: str = "Operation successful"


class ErrorDetail(BaseModel):
    code: str
    message: str
    details: List[Any] = []


class ErrorResponse(BaseModel):
    """
    {"success": false,
     "error": {"code": "NOT_FOUND",
               "message": "No teacher found with mobile number 0771234567",
               "details": []}}
    """
    success: bool = False
    error: ErrorDetail

    @classmethod
    def from_error(cls, exc: BillingError) -> "ErrorResponse":
        return cls(error=ErrorDetail(code=exc.code, message=exc.message, details=exc.details))

    @classmethod
    def build(cls, code: str, message: str, details: List[Any] = None) -> "ErrorResponse":
        return cls(error=ErrorDetail(code=code, message=message, details=details or []))


class PaginationMeta(BaseModel):
    page: int = Field(..., ge=1)
    page_size: int = Field(..., ge=1, le=100)
    total: int = Field(..., ge=0)
    total_pages: int = Field(..., ge=0)

    @classmethod
    def for_page(cls, page: int, page_size: int, total: int) -> "PaginationMeta":
        return cls(
            page=page,
            page_size=page_size,
            total=total,
            total_pages=(total + page_size - 1) // page_size,
        )


class PaginatedResponse(BaseModel, Generic[T]):
    """Bill search results: data plus page, page_size, total, total_pages"""
    success: bool = True
    data: List[T]
    meta: PaginationMeta
    message: str = "Operation successful"
