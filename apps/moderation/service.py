from typing import Dict, List
from framework.exceptions.handler import BusinessException, ConflictException, NotFoundException
from framework.logging.logger import get_logger
from framework.repository.unit_of_work import UnitOfWork
from framework.security import CurrentUser
from apps.companies.models import Company
from apps.companies.repository import CompanyRepository
from apps.identity.repository import ProfileRepository
from apps.placements.models import PlacedStudent
from apps.placements.repository import PlacedStudentRepository
from apps.reviews.models import Review, ReviewStatus, ReviewType, PlacementRound, WorkExperienceDetail
from apps.reviews.repository import ReviewRepository, PlacementRoundRepository, WorkExperienceDetailRepository
from apps.reviews.service import ANONYMOUS, round_view
from .schemas import CompanyCreate, PlacedStudentCreate

logger = get_logger("moderation_service")

MODERATION_TARGETS = (ReviewStatus.APPROVED, ReviewStatus.REJECTED)
UNKNOWN_USER = "Unknown User"


def normalise_slug(slug: str) -> str:
    """'Acme Corp' -> 'acme-corp'."""
    return "-".join(slug.strip().lower().split())


class ModerationService:
    """Admin operations: review moderation, company and placed-student management."""

    def __init__(self, uow: UnitOfWork, admin: CurrentUser):
        self.uow = uow
        self.admin = admin

    @property
    def reviews(self) -> ReviewRepository:
        return self.uow.get_repository(ReviewRepository)

    @property
    def companies(self) -> CompanyRepository:
        return self.uow.get_repository(CompanyRepository)

    @property
    def placed_students(self) -> PlacedStudentRepository:
        return self.uow.get_repository(PlacedStudentRepository)

    # --- Reviews ---

    async def _admin_view(self, reviews: List[Review]) -> List[dict]:
        companies = await self.companies.get_many([review.company_id for review in reviews])
        profiles = await self.uow.get_repository(ProfileRepository).get_many(
            [review.author_id for review in reviews if not review.is_anonymous]
        )
        result = []
        for review in reviews:
            data = review.model_dump(exclude={"author_id"})
            company = companies.get(review.company_id)
            data["company_name"] = company.name if company else None
            if review.is_anonymous:
                data["author"] = {"full_name": ANONYMOUS, "email": None}
            else:
                profile = profiles.get(review.author_id)
                data["author"] = {
                    "full_name": profile.full_name if profile and profile.full_name else UNKNOWN_USER,
                    "email": profile.email if profile else None,
                }
            result.append(data)
        return result

    async def list_reviews(
        self,
        status: ReviewStatus = ReviewStatus.PENDING,
        limit: int = 100,
        offset: int = 0
    ) -> List[dict]:
        reviews = await self.reviews.list_by_status(status, limit=limit, offset=offset)
        return await self._admin_view(reviews)

    async def _get_review(self, review_id: str) -> Review:
        review = await self.reviews.get_by_id(review_id)
        if not review:
            raise NotFoundException("Review not found")
        return review

    async def review_detail(self, review_id: str) -> dict:
        """Review with rounds (placement) or experience details (work), in any status."""
        review = await self._get_review(review_id)
        data = (await self._admin_view([review]))[0]
        if review.review_type == ReviewType.PLACEMENT:
            rounds = await self.uow.get_repository(PlacementRoundRepository).list_for_review(review.id)
            data["rounds"] = [round_view(round_) for round_ in rounds]
        else:
            data["details"] = await self.uow.get_repository(WorkExperienceDetailRepository).get_for_review(
                review.id
            )
        return data

    async def update_review_status(self, review_id: str, status: ReviewStatus) -> Review:
        """Approve or reject a pending review."""
        if status not in MODERATION_TARGETS:
            raise BusinessException("Status must be approved or rejected", code=422)
        review = await self._get_review(review_id)
        if review.status != ReviewStatus.PENDING:
            raise ConflictException("Only pending reviews can be moderated")

        # Conditional write: a concurrent decision on the same review wins only once
        if not await self.reviews.transition_status(review.id, ReviewStatus.PENDING, status):
            await self.uow.rollback()
            raise ConflictException("Only pending reviews can be moderated")
        review.status = status
        await self.uow.commit()
        logger.info(f"Review {review.id} {status.value} by {self.admin.email}")
        return review

    # --- Companies ---

    async def list_companies(self) -> List[Company]:
        return await self.companies.list_by_name()

    async def add_company(self, data: CompanyCreate) -> Company:
        if not data.name or not data.slug:
            raise BusinessException("Company name and slug are required", code=422)
        slug = normalise_slug(data.slug)
        if await self.companies.get_by_slug(slug):
            raise ConflictException(f"A company with slug '{slug}' already exists")

        company = Company(
            name=data.name,
            slug=slug,
            website=data.website,
            description=data.description,
            logo_url=data.logo_url,
        )
        await self.companies.create(company)
        await self.uow.commit()
        logger.info(f"Company {slug} added by {self.admin.email}")
        return company

    async def delete_company(self, company_id: str) -> Dict[str, int]:
        """Delete a company with its reviews (and their rounds and details) and placed students."""
        company = await self.companies.get_by_id(company_id)
        if not company:
            raise NotFoundException("Company not found")

        try:
            review_ids = await self.reviews.list_ids_for_company(company.id)
            rounds = await self.uow.get_repository(PlacementRoundRepository).delete_where(
                PlacementRound.review_id, review_ids
            )
            details = await self.uow.get_repository(WorkExperienceDetailRepository).delete_where(
                WorkExperienceDetail.review_id, review_ids
            )
            reviews = await self.reviews.delete_where(Review.id, review_ids)
            students = await self.placed_students.delete_where(
                PlacedStudent.company_id, [company.id]
            )
            await self.companies.delete(company.id)
            await self.uow.commit()
        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to delete company {company.slug}: {str(e)}")
            raise BusinessException("Error deleting company", code=500)

        logger.info(
            f"Company {company.slug} deleted by {self.admin.email} | Reviews: {reviews} | "
            f"Rounds: {rounds} | Details: {details} | Placed students: {students}"
        )
        return {"reviews": reviews, "rounds": rounds, "details": details, "placed_students": students}

    # --- Placed students ---

    async def list_placed_students(self, limit: int = 500, offset: int = 0) -> List[dict]:
        students = await self.placed_students.list_recent(limit=limit, offset=offset)
        companies = await self.companies.get_many([student.company_id for student in students])
        result = []
        for student in students:
            data = student.model_dump()
            company = companies.get(student.company_id)
            data["company_name"] = company.name if company else None
            result.append(data)
        return result

    async def add_placed_student(self, data: PlacedStudentCreate) -> PlacedStudent:
        if not data.company_id or not data.student_name or not data.batch:
            raise BusinessException("Company, Name, and Batch are required", code=422)
        company = await self.companies.get_by_id(data.company_id)
        if not company:
            raise NotFoundException("Company not found")

        student = PlacedStudent(**data.model_dump())
        await self.placed_students.create(student)
        await self.uow.commit()
        logger.info(f"Placed student {student.student_name} ({student.batch}) added at {company.slug}")
        return student

    async def delete_placed_student(self, student_id: str) -> None:
        if not await self.placed_students.delete(student_id):
            raise NotFoundException("Placed student not found")
        await self.uow.commit()
        logger.info(f"Placed student {student_id} deleted by {self.admin.email}")
