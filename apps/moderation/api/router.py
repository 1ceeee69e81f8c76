from fastapi import APIRouter, Depends, Query
from framework.repository.unit_of_work import UnitOfWork, get_uow
from framework.response import ResponseModel
from framework.security import CurrentUser
from apps.identity.dependencies import require_admin
from apps.reviews.models import ReviewStatus
from ..schemas import ReviewStatusUpdate, CompanyCreate, PlacedStudentCreate
from ..service import ModerationService

router = APIRouter()


def get_moderation_service(
    uow: UnitOfWork = Depends(get_uow),
    admin: CurrentUser = Depends(require_admin)
) -> ModerationService:
    """Dependency: create ModerationService (admin role required)."""
    return ModerationService(uow, admin)


@router.get("/reviews")
async def list_reviews(
    status: ReviewStatus = Query(ReviewStatus.PENDING),
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    service: ModerationService = Depends(get_moderation_service)
):
    """Moderation queue; pending reviews by default."""
    reviews = await service.list_reviews(status, limit=limit, offset=offset)
    return ResponseModel.success(data=reviews)


@router.get("/reviews/{review_id}")
async def review_detail(
    review_id: str,
    service: ModerationService = Depends(get_moderation_service)
):
    detail = await service.review_detail(review_id)
    return ResponseModel.success(data=detail)


@router.patch("/reviews/{review_id}/status")
async def update_review_status(
    review_id: str,
    data: ReviewStatusUpdate,
    service: ModerationService = Depends(get_moderation_service)
):
    review = await service.update_review_status(review_id, data.status)
    return ResponseModel.success(
        data={"id": review.id, "status": review.status},
        message=f"Review {review.status.value} successfully"
    )


@router.get("/companies")
async def list_companies(service: ModerationService = Depends(get_moderation_service)):
    companies = await service.list_companies()
    return ResponseModel.success(data=companies)


@router.post("/companies")
async def add_company(
    data: CompanyCreate,
    service: ModerationService = Depends(get_moderation_service)
):
    company = await service.add_company(data)
    return ResponseModel.success(data=company, message="Company added successfully")


@router.delete("/companies/{company_id}")
async def delete_company(
    company_id: str,
    service: ModerationService = Depends(get_moderation_service)
):
    """Delete a company and everything attached to it."""
    removed = await service.delete_company(company_id)
    return ResponseModel.success(data={"id": company_id, "removed": removed}, message="Company deleted")


@router.get("/placed-students")
async def list_placed_students(
    limit: int = Query(500, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    service: ModerationService = Depends(get_moderation_service)
):
    students = await service.list_placed_students(limit=limit, offset=offset)
    return ResponseModel.success(data=students)


@router.post("/placed-students")
async def add_placed_student(
    data: PlacedStudentCreate,
    service: ModerationService = Depends(get_moderation_service)
):
    student = await service.add_placed_student(data)
    return ResponseModel.success(data=student, message="Placed student added successfully")


@router.delete("/placed-students/{student_id}")
async def delete_placed_student(
    student_id: str,
    service: ModerationService = Depends(get_moderation_service)
):
    await service.delete_placed_student(student_id)
    return ResponseModel.success(data={"id": student_id}, message="Placed student removed")
