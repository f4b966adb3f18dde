from typing import Optional
from pydantic import Field
from uuid import UUID
from datetime import datetime

from app.schemas.base import CamelModel

MOBILE_PATTERN = r"^[0-9]{10}$"


class TeacherBase(CamelModel):
    teacher_name: str = Field(..., min_length=1, max_length=255)
    mobile: str = Field(..., pattern=MOBILE_PATTERN, description="Exactly 10 digits")
    school_name: str = Field(..., min_length=1, max_length=255)


class TeacherCreate(TeacherBase):
    pass


class TeacherUpdate(CamelModel):
    teacher_name: Optional[str] = Field(None, min_length=1, max_length=255)
    mobile: Optional[str] = Field(None, pattern=MOBILE_PATTERN)
    school_name: Optional[str] = Field(None, min_length=1, max_length=255)


class TeacherBrief(CamelModel):
    """Minimal teacher info embedded in bill responses."""
    id: UUID
    teacher_name: str
    mobile: str
    school_name: str


class TeacherResponse(TeacherBrief):
    created_at: datetime
    updated_at: datetime
