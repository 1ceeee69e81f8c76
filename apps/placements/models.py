from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime
from framework.database.fields import new_uuid, utcnow


class PlacedStudent(SQLModel, table=True):
    """A student placed at a company, published by admins."""
    __tablename__ = "placed_students"

    id: str = Field(default_factory=new_uuid, primary_key=True, max_length=36)
    company_id: str = Field(foreign_key="companies.id", index=True, max_length=36)
    student_name: str = Field(max_length=255)
    batch: str = Field(index=True, max_length=32)
    linkedin_url: Optional[str] = Field(default=None, max_length=1024)
    role: Optional[str] = Field(default=None, max_length=255)
    package: Optional[str] = Field(default=None, max_length=64, description="Free text, e.g. '12 LPA'")
    img_url: Optional[str] = Field(default=None, max_length=1024)
    created_at: datetime = Field(default_factory=utcnow)
