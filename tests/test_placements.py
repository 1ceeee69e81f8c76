"""
Placed student listing and placement statistics tests.
"""
import pytest
from httpx import AsyncClient

from apps.placements.service import package_in_lpa


@pytest.mark.parametrize("package, expected", [
    ("12 LPA", 12.0),
    ("12.5lpa", 12.5),
    (" 18 ", 18.0),
    ("50k/month", None),
    ("10-12 LPA", None),
    ("", None),
    (None, None),
])
def test_package_in_lpa(package, expected):
    assert package_in_lpa(package) == expected


@pytest.mark.asyncio
async def test_list_for_company_latest_batch_first(
    client: AsyncClient, company, company_factory, placed_student_factory
):
    other = await company_factory("Zeta Labs", "zeta-labs")
    await placed_student_factory(company, "Bala", "2023")
    await placed_student_factory(company, "Chitra", "2025")
    await placed_student_factory(company, "Arun", "2025")
    await placed_student_factory(other, "Dev", "2025")

    response = await client.get(f"/api/v1/placements/company/{company.id}")
    students = response.json()["data"]
    assert [(s["student_name"], s["batch"]) for s in students] == [
        ("Arun", "2025"), ("Chitra", "2025"), ("Bala", "2023")
    ]


@pytest.mark.asyncio
async def test_list_for_unknown_company(client: AsyncClient):
    response = await client.get("/api/v1/placements/company/no-such-company")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_stats_default_to_latest_batch(
    client: AsyncClient, company, company_factory, placed_student_factory
):
    zeta = await company_factory("Zeta Labs", "zeta-labs", logo_url="https://cdn.example/zeta.png")
    await placed_student_factory(company, "Arun", "2025", package="12 LPA")
    await placed_student_factory(zeta, "Bala", "2025", package="18.5 LPA")
    await placed_student_factory(zeta, "Chitra", "2025", package="50k/month")
    await placed_student_factory(zeta, "Arun", "2025")
    await placed_student_factory(company, "Old Timer", "2023", package="40 LPA")

    response = await client.get("/api/v1/placements/stats")
    data = response.json()["data"]
    assert data["batches"] == ["2025", "2023"]
    assert data["selected_batch"] == "2025"
    assert data["companies"] == [
        {"name": "Zeta Labs", "slug": "zeta-labs", "logo_url": "https://cdn.example/zeta.png", "count": 3},
        {"name": "Acme Corp", "slug": "acme-corp", "logo_url": None, "count": 1},
    ]
    # Distinct names: Arun is counted once
    assert data["summary"] == {"total_placed": 3, "total_companies": 2, "highest_package": "18.5 LPA"}


@pytest.mark.asyncio
async def test_stats_for_requested_batch(client: AsyncClient, company, placed_student_factory):
    await placed_student_factory(company, "Arun", "2025", package="12 LPA")
    await placed_student_factory(company, "Old Timer", "2023", package="stipend only")

    response = await client.get("/api/v1/placements/stats", params={"batch": "2023"})
    data = response.json()["data"]
    assert data["selected_batch"] == "2023"
    assert [entry["name"] for entry in data["companies"]] == ["Acme Corp"]
    assert data["summary"] == {"total_placed": 1, "total_companies": 1, "highest_package": "N/A"}


@pytest.mark.asyncio
async def test_stats_unknown_company(client: AsyncClient, async_session, placed_student_factory, company):
    student = await placed_student_factory(company, "Arun", "2025")
    student.company_id = "deleted-company"
    async_session.add(student)
    await async_session.commit()

    response = await client.get("/api/v1/placements/stats")
    assert response.json()["data"]["companies"][0]["name"] == "Unknown"


@pytest.mark.asyncio
async def test_stats_without_data(client: AsyncClient):
    response = await client.get("/api/v1/placements/stats")
    data = response.json()["data"]
    assert data == {
        "batches": [],
        "selected_batch": None,
        "companies": [],
        "summary": {"total_placed": 0, "total_companies": 0, "highest_package": "N/A"},
    }
