from typing import Optional
from pydantic import BaseModel, Field, field_validator
from apps.reviews.models import ReviewStatus
from apps.reviews.schemas import _blank_to_none


class ReviewStatusUpdate(BaseModel):
    status: ReviewStatus


class CompanyCreate(BaseModel):
    """Required fields are checked by the service so the form gets one message."""
    name: Optional[str] = Field(None, max_length=255)
    slug: Optional[str] = Field(None, max_length=255)
    website: Optional[str] = Field(None, max_length=1024)
    description: Optional[str] = None
    logo_url: Optional[str] = Field(None, max_length=1024)

    @field_validator("name", "slug", "website", "description", "logo_url", mode="before")
    @classmethod
    def strip_text(cls, value):
        return _blank_to_none(value)


class PlacedStudentCreate(BaseModel):
    company_id: Optional[str] = None
    student_name: Optional[str] = Field(None, max_length=255)
    batch: Optional[str] = Field(None, max_length=32)
    linkedin_url: Optional[str] = Field(None, max_length=1024)
    role: Optional[str] = Field(None, max_length=255)
    package: Optional[str] = Field(None, max_length=64)
    img_url: Optional[str] = Field(None, max_length=1024)

    @field_validator(
        "company_id", "student_name", "batch", "linkedin_url", "role", "package", "img_url",
        mode="before"
    )
    @classmethod
    def strip_text(cls, value):
        return _blank_to_none(value)
