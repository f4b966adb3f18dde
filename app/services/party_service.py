"""Party Service - teachers billed for books"""

from typing import List, Optional
from uuid import UUID
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from app.core.exceptions import ConflictError, NotFoundError, ValidationError
from app.models.party import Teacher
from app.schemas.party import TeacherCreate, TeacherUpdate
from app.services.drafts import is_valid_mobile

logger = logging.getLogger(__name__)


class TeacherService:
    """Service layer for the party directory"""

    @staticmethod
    async def list_teachers(db: AsyncSession) -> List[Teacher]:
        result = await db.execute(
            select(Teacher)
            .where(Teacher.deleted_at.is_(None))
            .order_by(Teacher.teacher_name)
        )
        return list(result.scalars().all())

    @staticmethod
    async def get_teacher_by_id(db: AsyncSession, teacher_id: UUID) -> Optional[Teacher]:
        result = await db.execute(
            select(Teacher).where(Teacher.id == teacher_id, Teacher.deleted_at.is_(None))
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def get_teacher_or_404(db: AsyncSession, teacher_id: UUID) -> Teacher:
        teacher = await TeacherService.get_teacher_by_id(db, teacher_id)
        if not teacher:
            raise NotFoundError(f"Teacher {teacher_id} not found")
        return teacher

    @staticmethod
    async def find_by_mobile(db: AsyncSession, mobile: str) -> Optional[Teacher]:
        """Exact match on a 10-digit mobile; no partial matching."""
        if not is_valid_mobile(mobile):
            raise ValidationError("Mobile number must be exactly 10 digits")
        result = await db.execute(
            select(Teacher)
            .where(Teacher.mobile == mobile, Teacher.deleted_at.is_(None))
            .order_by(Teacher.created_at)
            .limit(1)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def _ensure_mobile_free(db: AsyncSession, mobile: str, exclude_id: Optional[UUID] = None) -> None:
        stmt = select(Teacher.id).where(Teacher.mobile == mobile, Teacher.deleted_at.is_(None))
        if exclude_id is not None:
            stmt = stmt.where(Teacher.id != exclude_id)
        if (await db.execute(stmt)).first():
            raise ConflictError(f"A teacher with mobile number {mobile} already exists")

    @staticmethod
    async def create_teacher(db: AsyncSession, data: TeacherCreate) -> Teacher:
        await TeacherService._ensure_mobile_free(db, data.mobile)
        teacher = Teacher(
            teacher_name=data.teacher_name.strip(),
            mobile=data.mobile,
            school_name=data.school_name.strip(),
        )
        db.add(teacher)
        await db.flush()
        await db.refresh(teacher)
        logger.info("Teacher created", extra={"teacher_id": str(teacher.id)})
        return teacher

    @staticmethod
    async def update_teacher(db: AsyncSession, teacher_id: UUID, data: TeacherUpdate) -> Teacher:
        teacher = await TeacherService.get_teacher_or_404(db, teacher_id)
        changes = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None}
        if "mobile" in changes:
            await TeacherService._ensure_mobile_free(db, changes["mobile"], exclude_id=teacher.id)
        for field, value in changes.items():
            setattr(teacher, field, value.strip() if isinstance(value, str) else value)
        await db.flush()
        await db.refresh(teacher)
        logger.info("Teacher updated", extra={"teacher_id": str(teacher.id), "fields": sorted(changes)})
        return teacher

    @staticmethod
    async def delete_teacher(db: AsyncSession, teacher_id: UUID) -> None:
        """Soft delete; bills already issued keep pointing at the record."""
        teacher = await TeacherService.get_teacher_or_404(db, teacher_id)
        teacher.soft_delete()
        await db.flush()
        logger.info("Teacher deleted", extra={"teacher_id": str(teacher.id)})
