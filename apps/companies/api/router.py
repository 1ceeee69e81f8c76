from typing import Optional
from fastapi import APIRouter, Depends, Query
from framework.repository.unit_of_work import UnitOfWork, get_uow
from framework.response import ResponseModel
from framework.security import CurrentUser, get_current_user
from ..service import CompanyService

router = APIRouter()


def get_company_service(uow: UnitOfWork = Depends(get_uow)) -> CompanyService:
    """Dependency: create CompanyService."""
    return CompanyService(uow)


@router.get("")
async def list_companies(
    search: Optional[str] = Query(None, max_length=255),
    current_user: CurrentUser = Depends(get_current_user),
    service: CompanyService = Depends(get_company_service)
):
    """All companies ordered by name; `search` filters on the name."""
    companies = await service.list_companies(search)
    return ResponseModel.success(data=companies)


@router.get("/{slug}")
async def get_company(
    slug: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: CompanyService = Depends(get_company_service)
):
    """Company detail with approved review counts."""
    company = await service.get_company_detail(slug)
    return ResponseModel.success(data=company)
