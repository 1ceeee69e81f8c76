from fastapi import APIRouter, Depends
from framework.repository.unit_of_work import UnitOfWork, get_uow
from framework.response import ResponseModel
from framework.security import CurrentUser, get_current_user
from ..models import ReviewType
from ..schemas import PlacementReviewSubmission, WorkReviewSubmission
from ..service import ReviewService, SUBMITTED_MESSAGE

router = APIRouter()


def get_review_service(
    uow: UnitOfWork = Depends(get_uow),
    current_user: CurrentUser = Depends(get_current_user)
) -> ReviewService:
    """Dependency: create ReviewService."""
    return ReviewService(uow, current_user)


@router.post("/placement")
async def submit_placement_review(
    payload: PlacementReviewSubmission,
    service: ReviewService = Depends(get_review_service)
):
    """Submit a placement review with its interview rounds; it stays pending until approved."""
    review = await service.submit_placement_review(payload)
    return ResponseModel.success(data={"id": review.id, "status": review.status}, message=SUBMITTED_MESSAGE)


@router.post("/work")
async def submit_work_review(
    payload: WorkReviewSubmission,
    service: ReviewService = Depends(get_review_service)
):
    """Submit a work-experience review; it stays pending until approved."""
    review = await service.submit_work_review(payload)
    return ResponseModel.success(data={"id": review.id, "status": review.status}, message=SUBMITTED_MESSAGE)


@router.get("/mine")
async def my_reviews(service: ReviewService = Depends(get_review_service)):
    reviews = await service.list_my_reviews()
    return ResponseModel.success(data=reviews)


@router.get("/company/{slug}/placement")
async def company_placement_reviews(
    slug: str,
    service: ReviewService = Depends(get_review_service)
):
    result = await service.list_company_reviews(slug, ReviewType.PLACEMENT)
    return ResponseModel.success(data=result)


@router.get("/company/{slug}/work")
async def company_work_reviews(
    slug: str,
    service: ReviewService = Depends(get_review_service)
):
    result = await service.list_company_reviews(slug, ReviewType.WORK_EXPERIENCE)
    return ResponseModel.success(data=result)


@router.get("/{review_id}/rounds")
async def review_rounds(
    review_id: str,
    service: ReviewService = Depends(get_review_service)
):
    """Rounds of an approved placement review in interview order."""
    rounds = await service.get_rounds(review_id)
    return ResponseModel.success(data=rounds)


@router.get("/{review_id}/details")
async def review_details(
    review_id: str,
    service: ReviewService = Depends(get_review_service)
):
    """Experience details of an approved work review."""
    details = await service.get_work_details(review_id)
    return ResponseModel.success(data=details)
