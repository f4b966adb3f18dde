"""Catalog Service - books and their default prices"""

from decimal import Decimal
from typing import List, Optional
from uuid import UUID
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from app.core.exceptions import ConflictError, NotFoundError
from app.models.catalog import Book
from app.schemas.catalog import BookCreate, BookUpdate

logger = logging.getLogger(__name__)


class BookService:
    """Service layer for the book catalog"""

    @staticmethod
    async def list_books(db: AsyncSession, active_only: bool = False) -> List[Book]:
        stmt = select(Book).order_by(Book.name)
        if active_only:
            stmt = stmt.where(Book.is_active.is_(True))
        result = await db.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def get_book_by_id(db: AsyncSession, book_id: UUID) -> Optional[Book]:
        result = await db.execute(select(Book).where(Book.id == book_id))
        return result.scalar_one_or_none()

    @staticmethod
    async def get_book_or_404(db: AsyncSession, book_id: UUID) -> Book:
        book = await BookService.get_book_by_id(db, book_id)
        if not book:
            raise NotFoundError(f"Book {book_id} not found")
        return book

    @staticmethod
    async def get_default_price(db: AsyncSession, name: str) -> Decimal:
        """Current default price of an active book, by exact name."""
        result = await db.execute(
            select(Book.default_price).where(Book.name == name, Book.is_active.is_(True))
        )
        price = result.scalar_one_or_none()
        if price is None:
            raise NotFoundError(f"Book '{name}' not found")
        return price

    @staticmethod
    async def _ensure_name_free(db: AsyncSession, name: str, exclude_id: Optional[UUID] = None) -> None:
        stmt = select(Book.id).where(func.lower(Book.name) == name.lower())
        if exclude_id is not None:
            stmt = stmt.where(Book.id != exclude_id)
        if (await db.execute(stmt)).first():
            raise ConflictError(f"A book named '{name}' already exists")

    @staticmethod
    async def create_book(db: AsyncSession, data: BookCreate) -> Book:
        name = data.name.strip()
        await BookService._ensure_name_free(db, name)
        book = Book(name=name, default_price=data.default_price, is_active=True)
        db.add(book)
        await db.flush()
        await db.refresh(book)
        logger.info("Book created", extra={"book_id": str(book.id), "default_price": str(book.default_price)})
        return book

    @staticmethod
    async def update_book(db: AsyncSession, book_id: UUID, data: BookUpdate) -> Book:
        """Price edits only affect bills drafted afterwards."""
        book = await BookService.get_book_or_404(db, book_id)
        changes = data.model_dump(exclude_unset=True)
        if "name" in changes and changes["name"] is not None:
            changes["name"] = changes["name"].strip()
            await BookService._ensure_name_free(db, changes["name"], exclude_id=book.id)
        for field, value in changes.items():
            if value is not None:
                setattr(book, field, value)
        await db.flush()
        await db.refresh(book)
        logger.info("Book updated", extra={"book_id": str(book.id), "fields": sorted(changes)})
        return book

    @staticmethod
    async def delete_book(db: AsyncSession, book_id: UUID) -> Book:
        """Soft delete: the book leaves the active catalog, bills keep their copy."""
        book = await BookService.get_book_or_404(db, book_id)
        book.is_active = False
        await db.flush()
        await db.refresh(book)
        logger.info("Book deactivated", extra={"book_id": str(book.id)})
        return book
