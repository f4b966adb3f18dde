"""Party Directory Model"""

from sqlalchemy import Column, String
from sqlalchemy.orm import relationship

from app.models.base import BaseModel, SoftDeleteMixin


class Teacher(BaseModel, SoftDeleteMixin):
    """
    Billed party. Looked up by mobile number when a bill is drafted;
    a mobile is unique among teachers that are not deleted.
    """
    __tablename__ = "teachers"

    teacher_name = Column(String(255), nullable=False)
    mobile = Column(String(10), nullable=False, index=True)
    school_name = Column(String(255), nullable=False)

    # Relationships
    bills = relationship("Bill", back_populates="teacher")

    def __repr__(self) -> str:
        return f"<Teacher {self.teacher_name} ({self.mobile})>"
