from typing import Dict, List, Optional
from framework.exceptions.handler import BusinessException, NotFoundException
from framework.logging.logger import get_logger
from framework.repository.unit_of_work import UnitOfWork
from framework.security import CurrentUser
from apps.companies.models import Company
from apps.companies.repository import CompanyRepository
from apps.identity.models import Profile
from apps.identity.repository import ProfileRepository
from .models import (
    Review,
    ReviewType,
    ReviewStatus,
    PlacementRound,
    WorkExperienceDetail,
    round_type_label,
)
from .repository import ReviewRepository, PlacementRoundRepository, WorkExperienceDetailRepository
from .schemas import PlacementReviewSubmission, WorkReviewSubmission

logger = get_logger("review_service")

ANONYMOUS = "Anonymous"
SUBMITTED_MESSAGE = "Review submitted successfully! It will be visible after admin approval."
MISSING_FIELDS_MESSAGE = "Please fill in all required fields"
DEFAULT_RATING = 5


def author_display_name(review: Review, profile: Optional[Profile]) -> Optional[str]:
    """Name shown for a review's author; anonymity always wins."""
    if review.is_anonymous:
        return ANONYMOUS
    return profile.full_name if profile else None


def public_review(review: Review, profile: Optional[Profile]) -> dict:
    """Review as readers see it: no author id, display name instead."""
    data = review.model_dump(exclude={"author_id"})
    data["author_name"] = author_display_name(review, profile)
    return data


def round_view(round_: PlacementRound) -> dict:
    data = round_.model_dump()
    data["round_type_label"] = round_type_label(round_.round_type)
    return data


def require_fields(**fields) -> None:
    """Raise the form error when any required value is missing or blank."""
    missing = [name for name, value in fields.items() if value is None or not str(value).strip()]
    if missing:
        raise BusinessException(MISSING_FIELDS_MESSAGE, code=422, detail={"missing": missing})


class ReviewService:
    """Review submission (always pending) and reading of approved reviews."""

    def __init__(self, uow: UnitOfWork, current_user: CurrentUser):
        self.uow = uow
        self.current_user = current_user

    async def _get_company(self, company_id: str) -> Company:
        company = await self.uow.get_repository(CompanyRepository).get_by_id(company_id)
        if not company:
            raise NotFoundException("Company not found")
        return company

    def _new_review(self, review_type: ReviewType, data, final_offer_status: Optional[str] = None) -> Review:
        # Status is never taken from the client
        return Review(
            company_id=data.company_id,
            author_id=self.current_user.id,
            review_type=review_type,
            status=ReviewStatus.PENDING,
            position_applied_for=data.position_applied_for,
            batch=data.batch,
            timeline=data.timeline,
            ctc_stipend=data.ctc_stipend,
            final_offer_status=final_offer_status,
            is_anonymous=data.is_anonymous,
        )

    async def submit_placement_review(self, data: PlacementReviewSubmission) -> Review:
        """Insert a pending placement review and its rounds, numbered 1..n in submitted order."""
        require_fields(
            company_id=data.company_id,
            position_applied_for=data.position_applied_for,
            batch=data.batch,
        )
        if not data.rounds:
            raise BusinessException("Add at least one interview round", code=422)
        company = await self._get_company(data.company_id)

        review_repo = self.uow.get_repository(ReviewRepository)
        round_repo = self.uow.get_repository(PlacementRoundRepository)
        try:
            review = self._new_review(ReviewType.PLACEMENT, data, data.final_offer_status)
            await review_repo.create(review)
            await self.uow.flush()
            rounds = [
                PlacementRound(
                    review_id=review.id,
                    **submitted.model_dump(exclude={"round_order"}),
                    round_order=index,
                )
                for index, submitted in enumerate(data.rounds, start=1)
            ]
            await round_repo.create_many(rounds)
            await self.uow.commit()
        except BusinessException:
            await self.uow.rollback()
            raise
        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to submit placement review: {str(e)}")
            raise BusinessException("Error submitting review", code=500)

        logger.info(
            f"Placement review {review.id} submitted | Company: {company.slug} | "
            f"Rounds: {len(rounds)} | User: {self.current_user.email}"
        )
        return review

    async def submit_work_review(self, data: WorkReviewSubmission) -> Review:
        """Insert a pending work-experience review and its detail row."""
        require_fields(company_id=data.company_id, job_title=data.job_title, batch=data.batch)
        company = await self._get_company(data.company_id)

        review_repo = self.uow.get_repository(ReviewRepository)
        detail_repo = self.uow.get_repository(WorkExperienceDetailRepository)
        try:
            review = self._new_review(ReviewType.WORK_EXPERIENCE, data)
            await review_repo.create(review)
            await self.uow.flush()
            await detail_repo.create(WorkExperienceDetail(
                review_id=review.id,
                job_title=data.job_title,
                department=data.department,
                work_life_balance=data.work_life_balance or DEFAULT_RATING,
                culture_rating=data.culture_rating or DEFAULT_RATING,
                learning_opportunities=data.learning_opportunities,
                growth_prospects=data.growth_prospects,
                pros=data.pros,
                cons=data.cons,
                overall_experience=data.overall_experience,
            ))
            await self.uow.commit()
        except BusinessException:
            await self.uow.rollback()
            raise
        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to submit work review: {str(e)}")
            raise BusinessException("Error submitting review", code=500)

        logger.info(
            f"Work review {review.id} submitted | Company: {company.slug} | User: {self.current_user.email}"
        )
        return review

    async def list_company_reviews(self, slug: str, review_type: ReviewType) -> dict:
        """Approved reviews of one type for the company, newest first."""
        company = await self.uow.get_repository(CompanyRepository).get_by_slug(slug)
        if not company:
            raise NotFoundException("Company not found")
        reviews = await self.uow.get_repository(ReviewRepository).list_for_company(company.id, review_type)
        profiles = await self.uow.get_repository(ProfileRepository).get_many(
            [review.author_id for review in reviews if not review.is_anonymous]
        )
        return {
            "company": company,
            "reviews": [public_review(review, profiles.get(review.author_id)) for review in reviews],
        }

    async def _get_approved(self, review_id: str, review_type: ReviewType) -> Review:
        review = await self.uow.get_repository(ReviewRepository).get_by_id(review_id)
        if not review or review.status != ReviewStatus.APPROVED or review.review_type != review_type:
            raise NotFoundException("Review not found")
        return review

    async def get_rounds(self, review_id: str) -> List[dict]:
        review = await self._get_approved(review_id, ReviewType.PLACEMENT)
        rounds = await self.uow.get_repository(PlacementRoundRepository).list_for_review(review.id)
        return [round_view(round_) for round_ in rounds]

    async def get_work_details(self, review_id: str) -> WorkExperienceDetail:
        review = await self._get_approved(review_id, ReviewType.WORK_EXPERIENCE)
        details = await self.uow.get_repository(WorkExperienceDetailRepository).get_for_review(review.id)
        if not details:
            raise NotFoundException("Review details not found")
        return details

    async def list_my_reviews(self) -> List[dict]:
        """The caller's own reviews in every moderation state."""
        reviews = await self.uow.get_repository(ReviewRepository).list_by_author(self.current_user.id)
        companies: Dict[str, Company] = await self.uow.get_repository(CompanyRepository).get_many(
            [review.company_id for review in reviews]
        )
        result = []
        for review in reviews:
            data = review.model_dump(exclude={"author_id"})
            company = companies.get(review.company_id)
            data["company_name"] = company.name if company else None
            result.append(data)
        return result
