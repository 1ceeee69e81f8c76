import re
from typing import List, Optional
from framework.exceptions.handler import NotFoundException
from framework.logging.logger import get_logger
from framework.repository.unit_of_work import UnitOfWork
from apps.companies.repository import CompanyRepository
from .models import PlacedStudent
from .repository import PlacedStudentRepository

logger = get_logger("placement_service")

UNKNOWN_COMPANY = "Unknown"
NOT_AVAILABLE = "N/A"

# "12 LPA", "12.5lpa", "18" (bare numbers are read as LPA)
_LPA_PATTERN = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*(?:lpa)?\s*$", re.IGNORECASE)


def package_in_lpa(package: Optional[str]) -> Optional[float]:
    """Numeric value of a package quoted in LPA; None for anything else (monthly stipends, ranges)."""
    if not package:
        return None
    match = _LPA_PATTERN.match(package)
    return float(match.group(1)) if match else None


def highest_package(students: List[PlacedStudent]) -> str:
    best = None
    for student in students:
        value = package_in_lpa(student.package)
        if value is not None and (best is None or value > best[0]):
            best = (value, student.package.strip())
    return best[1] if best else NOT_AVAILABLE


class PlacementService:
    """Placed-student listings and batch statistics."""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def list_for_company(self, company_id: str) -> List[PlacedStudent]:
        company = await self.uow.get_repository(CompanyRepository).get_by_id(company_id)
        if not company:
            raise NotFoundException("Company not found")
        return await self.uow.get_repository(PlacedStudentRepository).list_for_company(company.id)

    async def placement_stats(self, batch: Optional[str] = None) -> dict:
        """
        Per-batch placement summary.

        Batches are listed newest first; the requested batch is used when given,
        otherwise the latest one. Companies are ranked by number of placed students.
        """
        students = await self.uow.get_repository(PlacedStudentRepository).list_all()
        batches = sorted({student.batch for student in students}, reverse=True)
        selected = batch or (batches[0] if batches else None)

        selected_students = [student for student in students if student.batch == selected]
        companies = await self.uow.get_repository(CompanyRepository).get_many(
            [student.company_id for student in selected_students]
        )

        per_company = {}
        student_names = set()
        for student in selected_students:
            company = companies.get(student.company_id)
            name = company.name if company else UNKNOWN_COMPANY
            entry = per_company.setdefault(name, {
                "name": name,
                "slug": company.slug if company else "",
                "logo_url": company.logo_url if company else None,
                "count": 0,
            })
            entry["count"] += 1
            student_names.add(student.student_name)

        ranked = sorted(per_company.values(), key=lambda entry: (-entry["count"], entry["name"]))
        logger.debug(f"Placement stats | Batch: {selected} | Students: {len(selected_students)}")
        return {
            "batches": batches,
            "selected_batch": selected,
            "companies": ranked,
            "summary": {
                "total_placed": len(student_names),
                "total_companies": len(per_company),
                "highest_package": highest_package(selected_students),
            },
        }
