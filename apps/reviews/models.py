from sqlmodel import SQLModel, Field
from sqlalchemy import Column, Text
from typing import Optional
from datetime import datetime
from enum import Enum
from framework.database.fields import new_uuid, utcnow, enum_column


class ReviewType(str, Enum):
    PLACEMENT = "placement"
    WORK_EXPERIENCE = "work_experience"


class ReviewStatus(str, Enum):
    """Moderation state; every review starts PENDING."""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class RoundType(str, Enum):
    ASSESSMENT = "assessment"
    CODING = "coding"
    TECHNICAL_INTERVIEW = "technical_interview"
    HR_INTERVIEW = "hr_interview"
    OTHER = "other"


class PassStatus(str, Enum):
    PASSED = "passed"
    FAILED = "failed"
    WAITING = "waiting"


ROUND_TYPE_LABELS = {
    RoundType.ASSESSMENT.value: "Online Assessment",
    RoundType.CODING.value: "Coding Round",
    RoundType.TECHNICAL_INTERVIEW.value: "Technical Interview",
    RoundType.HR_INTERVIEW.value: "HR Interview",
    RoundType.OTHER.value: "Other",
}


def round_type_label(round_type) -> str:
    """Human label for a round type; unknown values are shown as-is."""
    value = getattr(round_type, "value", round_type)
    return ROUND_TYPE_LABELS.get(value, value)


class Review(SQLModel, table=True):
    """Review header shared by placement and work-experience reviews."""
    __tablename__ = "reviews"

    id: str = Field(default_factory=new_uuid, primary_key=True, max_length=36)
    author_id: str = Field(foreign_key="users.id", index=True, max_length=36)
    company_id: str = Field(foreign_key="companies.id", index=True, max_length=36)
    review_type: ReviewType = Field(sa_column=enum_column(ReviewType, index=True))
    status: ReviewStatus = Field(
        default=ReviewStatus.PENDING,
        sa_column=enum_column(ReviewStatus, index=True)
    )

    position_applied_for: Optional[str] = Field(default=None, max_length=255)
    batch: Optional[str] = Field(default=None, max_length=32)
    timeline: Optional[str] = Field(default=None, max_length=255)
    ctc_stipend: Optional[str] = Field(default=None, max_length=255)
    final_offer_status: Optional[str] = Field(default=None, max_length=255)
    is_anonymous: bool = Field(default=False)

    created_at: datetime = Field(default_factory=utcnow, index=True)
    updated_at: datetime = Field(default_factory=utcnow, sa_column_kwargs={"onupdate": utcnow})


class PlacementRound(SQLModel, table=True):
    __tablename__ = "placement_rounds"

    id: str = Field(default_factory=new_uuid, primary_key=True, max_length=36)
    review_id: str = Field(foreign_key="reviews.id", index=True, max_length=36)
    round_order: int
    round_type: RoundType = Field(sa_column=enum_column(RoundType))
    round_name: Optional[str] = Field(default=None, max_length=255)
    difficulty: Optional[int] = Field(default=None, description="1 (easy) .. 10 (hard)")
    topics_covered: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    sections: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    pass_status: Optional[PassStatus] = Field(default=None, sa_column=enum_column(PassStatus, nullable=True))
    tips: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    created_at: datetime = Field(default_factory=utcnow)


class WorkExperienceDetail(SQLModel, table=True):
    __tablename__ = "work_experience_details"

    id: str = Field(default_factory=new_uuid, primary_key=True, max_length=36)
    review_id: str = Field(foreign_key="reviews.id", index=True, max_length=36)
    job_title: str = Field(max_length=255)
    department: Optional[str] = Field(default=None, max_length=255)
    work_life_balance: Optional[int] = Field(default=None, description="1..5")
    culture_rating: Optional[int] = Field(default=None, description="1..5")
    learning_opportunities: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    growth_prospects: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    pros: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    cons: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    overall_experience: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    created_at: datetime = Field(default_factory=utcnow)
