from typing import Optional
from pydantic import Field
from uuid import UUID
from datetime import datetime

from app.schemas.base import CamelModel, Money


class BookBase(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    default_price: Money = Field(..., ge=0)


class BookCreate(BookBase):
    pass


class BookUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    default_price: Optional[Money] = Field(None, ge=0)
    is_active: Optional[bool] = None


class BookResponse(BookBase):
    id: UUID
    is_active: bool
    created_at: datetime
    updated_at: datetime


class BookPrice(CamelModel):
    name: str
    default_price: Money
