"""
Company directory tests.
"""
import pytest
from httpx import AsyncClient

from apps.reviews.models import ReviewType, ReviewStatus


@pytest.mark.asyncio
async def test_list_companies_ordered_by_name(client: AsyncClient, company_factory):
    await company_factory("Zeta Labs", "zeta-labs")
    await company_factory("Acme Corp", "acme-corp")
    await company_factory("Midway Systems", "midway-systems")

    response = await client.get("/api/v1/companies")
    assert response.status_code == 200
    names = [company["name"] for company in response.json()["data"]]
    assert names == ["Acme Corp", "Midway Systems", "Zeta Labs"]


@pytest.mark.asyncio
async def test_search_is_case_insensitive(client: AsyncClient, company_factory):
    await company_factory("Acme Corp", "acme-corp")
    await company_factory("Zeta Labs", "zeta-labs")

    response = await client.get("/api/v1/companies", params={"search": "LABS"})
    assert [company["slug"] for company in response.json()["data"]] == ["zeta-labs"]

    response = await client.get("/api/v1/companies", params={"search": "nothing-matches"})
    assert response.json()["data"] == []


@pytest.mark.asyncio
async def test_company_detail_counts_only_approved_reviews(
    client: AsyncClient, student, company, review_factory
):
    await review_factory(student, company, ReviewType.PLACEMENT, ReviewStatus.APPROVED)
    await review_factory(student, company, ReviewType.PLACEMENT, ReviewStatus.APPROVED, minutes=1)
    await review_factory(student, company, ReviewType.PLACEMENT, ReviewStatus.PENDING, minutes=2)
    await review_factory(student, company, ReviewType.WORK_EXPERIENCE, ReviewStatus.REJECTED, minutes=3)

    response = await client.get(f"/api/v1/companies/{company.slug}")
    data = response.json()["data"]
    assert data["name"] == "Acme Corp"
    assert data["website"] == "https://acme.example.com"
    assert data["review_counts"] == {"placement": 2, "work_experience": 0}


@pytest.mark.asyncio
async def test_unknown_company_is_404(client: AsyncClient):
    response = await client.get("/api/v1/companies/does-not-exist")
    assert response.status_code == 404
    body = response.json()
    assert body["code"] == 404
    assert body["message"] == "Company not found"
