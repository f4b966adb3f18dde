"""Teacher endpoints - the party directory used for bill lookups"""

from typing import Any, List
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from uuid import UUID

from app.api import deps
from app.core.exceptions import NotFoundError
from app.schemas.party import TeacherCreate, TeacherResponse, TeacherUpdate
from app.schemas.responses import SuccessResponse
from app.services.party_service import TeacherService

router = APIRouter()


@router.get("", response_model=SuccessResponse[List[TeacherResponse]])
async def list_teachers(
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    """List all teachers, by name."""
    teachers = await TeacherService.list_teachers(db)
    return SuccessResponse(data=teachers)


@router.get("/mobile/{mobile}", response_model=SuccessResponse[TeacherResponse])
async def get_teacher_by_mobile(
    mobile: str,
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    """Exact lookup by 10-digit mobile number."""
    teacher = await TeacherService.find_by_mobile(db, mobile)
    if not teacher:
        raise NotFoundError(f"No teacher found with mobile number {mobile}")
    return SuccessResponse(data=teacher)


@router.get("/{teacher_id}", response_model=SuccessResponse[TeacherResponse])
async def get_teacher(
    teacher_id: UUID,
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    teacher = await TeacherService.get_teacher_or_404(db, teacher_id)
    return SuccessResponse(data=teacher)


@router.post("", response_model=SuccessResponse[TeacherResponse])
async def create_teacher(
    teacher_in: TeacherCreate,
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    """Register a teacher. Fields: teacherName, mobile, schoolName."""
    teacher = await TeacherService.create_teacher(db, teacher_in)
    return SuccessResponse(data=teacher, message="Teacher created successfully")


@router.put("/{teacher_id}", response_model=SuccessResponse[TeacherResponse])
async def update_teacher(
    teacher_id: UUID,
    teacher_in: TeacherUpdate,
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    teacher = await TeacherService.update_teacher(db, teacher_id, teacher_in)
    return SuccessResponse(data=teacher, message="Teacher updated successfully")


@router.delete("/{teacher_id}", response_model=SuccessResponse[None])
async def delete_teacher(
    teacher_id: UUID,
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    """Soft delete. Bills already issued to the teacher are kept."""
    await TeacherService.delete_teacher(db, teacher_id)
    return SuccessResponse(data=None, message="Teacher deleted successfully")
