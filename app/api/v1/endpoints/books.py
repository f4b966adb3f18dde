"""Book endpoints - the catalog and its default prices"""

from typing import Any, List
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from uuid import UUID

from app.api import deps
from app.schemas.catalog import BookCreate, BookPrice, BookResponse, BookUpdate
from app.schemas.responses import SuccessResponse
from app.services.catalog_service import BookService

router = APIRouter()


@router.get("", response_model=SuccessResponse[List[BookResponse]])
async def list_books(
    active: bool = Query(False, description="Only books still in the catalog"),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    books = await BookService.list_books(db, active_only=active)
    return SuccessResponse(data=books)


@router.get("/price", response_model=SuccessResponse[BookPrice])
async def get_book_price(
    name: str = Query(..., min_length=1),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    """Current default price for a book, by exact name."""
    price = await BookService.get_default_price(db, name)
    return SuccessResponse(data=BookPrice(name=name, default_price=price))


@router.get("/{book_id}", response_model=SuccessResponse[BookResponse])
async def get_book(
    book_id: UUID,
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    book = await BookService.get_book_or_404(db, book_id)
    return SuccessResponse(data=book)


@router.post("", response_model=SuccessResponse[BookResponse])
async def create_book(
    book_in: BookCreate,
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    """Add a book. Fields: name, defaultPrice."""
    book = await BookService.create_book(db, book_in)
    return SuccessResponse(data=book, message=f'"{book.name}" has been added')


@router.put("/{book_id}", response_model=SuccessResponse[BookResponse])
async def update_book(
    book_id: UUID,
    book_in: BookUpdate,
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    """Edit name, default price or active flag. Existing bills are not touched."""
    book = await BookService.update_book(db, book_id, book_in)
    return SuccessResponse(data=book, message=f'"{book.name}" has been successfully updated')


@router.delete("/{book_id}", response_model=SuccessResponse[BookResponse])
async def delete_book(
    book_id: UUID,
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    book = await BookService.delete_book(db, book_id)
    return SuccessResponse(data=book, message=f'"{book.name}" has been successfully deleted')
