from typing import Optional
from fastapi import APIRouter, Depends, Query
from framework.repository.unit_of_work import UnitOfWork, get_uow
from framework.response import ResponseModel
from framework.security import CurrentUser, get_current_user
from ..service import PlacementService

router = APIRouter()


def get_placement_service(uow: UnitOfWork = Depends(get_uow)) -> PlacementService:
    """Dependency: create PlacementService."""
    return PlacementService(uow)


@router.get("/stats")
async def placement_stats(
    batch: Optional[str] = Query(None, max_length=32),
    current_user: CurrentUser = Depends(get_current_user),
    service: PlacementService = Depends(get_placement_service)
):
    """Placement statistics for a batch (latest batch by default)."""
    stats = await service.placement_stats(batch)
    return ResponseModel.success(data=stats)


@router.get("/company/{company_id}")
async def company_placed_students(
    company_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: PlacementService = Depends(get_placement_service)
):
    """Students placed at a company, latest batch first."""
    students = await service.list_for_company(company_id)
    return ResponseModel.success(data=students)
