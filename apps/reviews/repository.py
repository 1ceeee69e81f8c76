"""Review module repository implementations."""

from typing import Optional, List
from sqlalchemy import update as sa_update
from sqlmodel import select, func
from framework.repository.base import BaseRepository
from .models import Review, ReviewType, ReviewStatus, PlacementRound, WorkExperienceDetail


class ReviewRepository(BaseRepository[Review]):
    """Review repository."""

    def __init__(self, session):
        super().__init__(session, Review)

    async def list_for_company(
        self,
        company_id: str,
        review_type: ReviewType,
        status: ReviewStatus = ReviewStatus.APPROVED
    ) -> List[Review]:
        """Reviews of one type for a company, newest first."""
        statement = select(Review).where(
            Review.company_id == company_id,
            Review.review_type == review_type,
            Review.status == status
        ).order_by(Review.created_at.desc())
        result = await self.session.exec(statement)
        return list(result.all())

    async def count_by_type(
        self,
        company_id: str,
        status: ReviewStatus = ReviewStatus.APPROVED
    ) -> dict[str, int]:
        """Review counts per review type for a company; every type is present."""
        statement = select(Review.review_type, func.count(Review.id)).where(
            Review.company_id == company_id,
            Review.status == status
        ).group_by(Review.review_type)
        result = await self.session.exec(statement)
        counts = {review_type.value: 0 for review_type in ReviewType}
        for review_type, total in result.all():
            counts[ReviewType(review_type).value] = total
        return counts

    async def list_by_status(
        self,
        status: ReviewStatus,
        limit: int = 100,
        offset: int = 0
    ) -> List[Review]:
        """Reviews in one moderation state, newest first."""
        statement = (
            select(Review)
            .where(Review.status == status)
            .order_by(Review.created_at.desc())
            .limit(limit)
            .offset(offset)
        )
        result = await self.session.exec(statement)
        return list(result.all())

    async def transition_status(
        self,
        review_id: str,
        from_status: ReviewStatus,
        to_status: ReviewStatus
    ) -> bool:
        """Move a review between states only if it is still in from_status; False when it was not."""
        statement = (
            sa_update(Review)
            .where(Review.id == review_id, Review.status == from_status)
            .values(status=to_status)
            .execution_options(synchronize_session="fetch")
        )
        result = await self.session.execute(statement)
        return result.rowcount == 1

    async def list_by_author(self, author_id: str) -> List[Review]:
        return await self.find_all(order_by=Review.created_at.desc(), author_id=author_id)

    async def list_ids_for_company(self, company_id: str) -> List[str]:
        statement = select(Review.id).where(Review.company_id == company_id)
        result = await self.session.exec(statement)
        return list(result.all())


class PlacementRoundRepository(BaseRepository[PlacementRound]):
    """Placement round repository."""

    def __init__(self, session):
        super().__init__(session, PlacementRound)

    async def list_for_review(self, review_id: str) -> List[PlacementRound]:
        """Rounds of a review in interview order."""
        return await self.find_all(order_by=PlacementRound.round_order, review_id=review_id)


class WorkExperienceDetailRepository(BaseRepository[WorkExperienceDetail]):
    """Work experience detail repository."""

    def __init__(self, session):
        super().__init__(session, WorkExperienceDetail)

    async def get_for_review(self, review_id: str) -> Optional[WorkExperienceDetail]:
        return await self.find_one(review_id=review_id)
