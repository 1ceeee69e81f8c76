from typing import List, Optional
from pydantic import BaseModel, Field, field_validator
from .models import RoundType, PassStatus


def _blank_to_none(value):
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


class RoundSubmission(BaseModel):
    """One interview round; round_order is assigned from list position on submit."""
    round_type: RoundType = RoundType.ASSESSMENT
    round_order: Optional[int] = None
    round_name: Optional[str] = Field(None, max_length=255)
    difficulty: Optional[int] = Field(None, ge=1, le=10, description="1 (easy) .. 10 (hard)")
    topics_covered: Optional[str] = None
    sections: Optional[str] = None
    pass_status: Optional[PassStatus] = None
    tips: Optional[str] = None

    @field_validator("round_name", "topics_covered", "sections", "tips", mode="before")
    @classmethod
    def strip_text(cls, value):
        return _blank_to_none(value)

    @field_validator("pass_status", mode="before")
    @classmethod
    def empty_pass_status(cls, value):
        return _blank_to_none(value)


class ReviewSubmission(BaseModel):
    """Fields shared by both review forms. Required ones are checked by the service."""
    company_id: Optional[str] = None
    position_applied_for: Optional[str] = Field(None, max_length=255)
    batch: Optional[str] = Field(None, max_length=32)
    timeline: Optional[str] = Field(None, max_length=255)
    ctc_stipend: Optional[str] = Field(None, max_length=255)
    is_anonymous: bool = False

    @field_validator("company_id", "position_applied_for", "batch", "timeline", "ctc_stipend", mode="before")
    @classmethod
    def strip_text(cls, value):
        return _blank_to_none(value)


class PlacementReviewSubmission(ReviewSubmission):
    final_offer_status: Optional[str] = Field(None, max_length=255)
    rounds: List[RoundSubmission] = Field(default_factory=list)

    @field_validator("final_offer_status", mode="before")
    @classmethod
    def strip_offer_status(cls, value):
        return _blank_to_none(value)


class WorkReviewSubmission(ReviewSubmission):
    job_title: Optional[str] = Field(None, max_length=255)
    department: Optional[str] = Field(None, max_length=255)
    work_life_balance: Optional[int] = Field(5, ge=1, le=5)
    culture_rating: Optional[int] = Field(5, ge=1, le=5)
    learning_opportunities: Optional[str] = None
    growth_prospects: Optional[str] = None
    pros: Optional[str] = None
    cons: Optional[str] = None
    overall_experience: Optional[str] = None

    @field_validator(
        "job_title", "department", "learning_opportunities", "growth_prospects",
        "pros", "cons", "overall_experience", mode="before"
    )
    @classmethod
    def strip_details(cls, value):
        return _blank_to_none(value)
