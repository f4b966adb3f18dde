"""Book Catalog Model"""

from sqlalchemy import Column, String, Numeric

from app.models.base import BaseModel, StatusMixin


class Book(BaseModel, StatusMixin):
    """
    Catalog entry. The default price is copied onto a bill item when the
    book is picked, so later edits never reach existing bills.
    Deleting a book only clears is_active.
    """
    __tablename__ = "books"

    name = Column(String(255), nullable=False, unique=True, index=True)
    default_price = Column(Numeric(12, 2), nullable=False, default=0)

    def __repr__(self) -> str:
        return f"<Book {self.name} @ {self.default_price}>"
