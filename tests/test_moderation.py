"""
Admin moderation tests: review queue, status transitions, companies, placed students.
"""
import pytest
from datetime import timedelta
from httpx import AsyncClient
from sqlalchemy import text
from sqlmodel import select, func
from sqlmodel.ext.asyncio.session import AsyncSession

from apps.companies.models import Company
from apps.identity.models import Profile
from apps.placements.models import PlacedStudent
from apps.reviews.models import Review, ReviewStatus, ReviewType, PlacementRound, WorkExperienceDetail
from apps.moderation.service import normalise_slug
from conftest import BASE_TIME


async def _count(session: AsyncSession, model) -> int:
    return (await session.exec(select(func.count()).select_from(model))).one()


@pytest.mark.asyncio
@pytest.mark.parametrize("method, path", [
    ("GET", "/api/v1/admin/reviews"),
    ("PATCH", "/api/v1/admin/reviews/some-id/status"),
    ("GET", "/api/v1/admin/companies"),
    ("POST", "/api/v1/admin/companies"),
    ("DELETE", "/api/v1/admin/companies/some-id"),
    ("GET", "/api/v1/admin/placed-students"),
    ("DELETE", "/api/v1/admin/placed-students/some-id"),
])
async def test_non_admin_is_forbidden(client: AsyncClient, method: str, path: str):
    response = await client.request(method, path, json={"status": "approved"})
    assert response.status_code == 403
    body = response.json()
    assert body["code"] == 403
    assert body["message"] == "Access denied. Admin privileges required."


@pytest.mark.asyncio
async def test_queue_lists_pending_by_default(
    admin_client: AsyncClient, student, company, review_factory
):
    pending = await review_factory(student, company, status=ReviewStatus.PENDING, minutes=1)
    hidden = await review_factory(
        student, company, review_type=ReviewType.WORK_EXPERIENCE,
        status=ReviewStatus.PENDING, is_anonymous=True, minutes=2
    )
    await review_factory(student, company, status=ReviewStatus.APPROVED, minutes=3)

    response = await admin_client.get("/api/v1/admin/reviews")
    reviews = response.json()["data"]
    assert [review["id"] for review in reviews] == [hidden.id, pending.id]
    assert reviews[0]["author"] == {"full_name": "Anonymous", "email": None}
    assert reviews[1]["author"] == {"full_name": "Asha Rao", "email": student.email}
    assert {review["company_name"] for review in reviews} == {"Acme Corp"}

    response = await admin_client.get("/api/v1/admin/reviews", params={"status": "approved"})
    assert len(response.json()["data"]) == 1


@pytest.mark.asyncio
async def test_queue_labels_author_without_profile(
    admin_client: AsyncClient, async_session: AsyncSession, user_factory, company, review_factory
):
    author = await user_factory("ghost@example.com", full_name="Ghost")
    await async_session.delete(await async_session.get(Profile, author.id))
    await async_session.commit()
    await review_factory(author, company, status=ReviewStatus.PENDING)

    response = await admin_client.get("/api/v1/admin/reviews")
    reviews = response.json()["data"]
    assert len(reviews) == 1
    assert reviews[0]["author"] == {"full_name": "Unknown User", "email": None}


@pytest.mark.asyncio
async def test_review_detail(admin_client: AsyncClient, student, company, review_factory):
    placement = await review_factory(student, company, status=ReviewStatus.PENDING)
    work = await review_factory(student, company, review_type=ReviewType.WORK_EXPERIENCE, status=ReviewStatus.PENDING)

    data = (await admin_client.get(f"/api/v1/admin/reviews/{placement.id}")).json()["data"]
    assert [r["round_order"] for r in data["rounds"]] == [1, 2]
    assert "details" not in data

    data = (await admin_client.get(f"/api/v1/admin/reviews/{work.id}")).json()["data"]
    assert data["details"]["job_title"] == "Backend Intern"
    assert "rounds" not in data

    assert (await admin_client.get("/api/v1/admin/reviews/missing")).status_code == 404


@pytest.mark.asyncio
async def test_approve_makes_review_public(
    admin_client: AsyncClient, client: AsyncClient, student, company, review_factory
):
    review = await review_factory(student, company, status=ReviewStatus.PENDING)
    listing = f"/api/v1/reviews/company/{company.slug}/placement"
    assert (await client.get(listing)).json()["data"]["reviews"] == []

    response = await admin_client.patch(f"/api/v1/admin/reviews/{review.id}/status", json={"status": "approved"})
    body = response.json()
    assert body["data"] == {"id": review.id, "status": "approved"}
    assert body["message"] == "Review approved successfully"

    reviews = (await client.get(listing)).json()["data"]["reviews"]
    assert [r["id"] for r in reviews] == [review.id]


@pytest.mark.asyncio
async def test_only_pending_reviews_transition(
    admin_client: AsyncClient, async_session: AsyncSession, student, company, review_factory
):
    review = await review_factory(student, company, status=ReviewStatus.PENDING)

    response = await admin_client.patch(f"/api/v1/admin/reviews/{review.id}/status", json={"status": "rejected"})
    assert response.json()["data"]["status"] == "rejected"

    response = await admin_client.patch(f"/api/v1/admin/reviews/{review.id}/status", json={"status": "approved"})
    assert response.status_code == 409
    assert response.json()["message"] == "Only pending reviews can be moderated"

    refreshed = await async_session.get(Review, review.id)
    assert refreshed.status == ReviewStatus.REJECTED


@pytest.mark.asyncio
async def test_decision_on_already_decided_review_conflicts(
    admin_client: AsyncClient, async_session: AsyncSession, student, company, review_factory
):
    review = await review_factory(student, company, status=ReviewStatus.PENDING)
    # Another admin approves it behind this session's back; the loaded object still says pending
    await async_session.execute(text("UPDATE reviews SET status = 'approved' WHERE id = :id"), {"id": review.id})
    await async_session.commit()

    response = await admin_client.patch(f"/api/v1/admin/reviews/{review.id}/status", json={"status": "rejected"})
    assert response.status_code == 409
    assert response.json()["message"] == "Only pending reviews can be moderated"

    status = (await async_session.exec(select(Review.status).where(Review.id == review.id))).one()
    assert status == ReviewStatus.APPROVED


@pytest.mark.asyncio
async def test_status_target_must_be_a_decision(admin_client: AsyncClient, student, company, review_factory):
    review = await review_factory(student, company, status=ReviewStatus.PENDING)
    response = await admin_client.patch(f"/api/v1/admin/reviews/{review.id}/status", json={"status": "pending"})
    assert response.json()["code"] == 422

    response = await admin_client.patch(f"/api/v1/admin/reviews/{review.id}/status", json={"status": "published"})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_status_of_unknown_review(admin_client: AsyncClient):
    response = await admin_client.patch("/api/v1/admin/reviews/missing/status", json={"status": "approved"})
    assert response.status_code == 404


@pytest.mark.parametrize("raw, expected", [
    ("Acme Corp", "acme-corp"),
    ("  Big   Tech  Inc ", "big-tech-inc"),
    ("already-slugged", "already-slugged"),
])
def test_normalise_slug(raw, expected):
    assert normalise_slug(raw) == expected


@pytest.mark.asyncio
async def test_add_company(admin_client: AsyncClient, async_session: AsyncSession):
    response = await admin_client.post("/api/v1/admin/companies", json={
        "name": "Big Tech", "slug": "Big Tech", "website": "https://bigtech.example.com"
    })
    body = response.json()
    assert body["message"] == "Company added successfully"
    assert body["data"]["slug"] == "big-tech"

    response = await admin_client.get("/api/v1/admin/companies")
    assert [c["slug"] for c in response.json()["data"]] == ["big-tech"]

    # Slugs stay unique
    response = await admin_client.post("/api/v1/admin/companies", json={"name": "Big Tech 2", "slug": "big-tech"})
    assert response.status_code == 409
    assert await _count(async_session, Company) == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("payload", [{"name": "No Slug"}, {"slug": "no-name"}, {"name": " ", "slug": " "}])
async def test_add_company_requires_name_and_slug(admin_client: AsyncClient, async_session: AsyncSession, payload):
    response = await admin_client.post("/api/v1/admin/companies", json=payload)
    body = response.json()
    assert body["code"] == 422
    assert body["message"] == "Company name and slug are required"
    assert await _count(async_session, Company) == 0


@pytest.mark.asyncio
async def test_delete_company_cascades(
    admin_client: AsyncClient, async_session: AsyncSession,
    student, company, company_factory, review_factory, placed_student_factory
):
    other = await company_factory("Zeta Labs", "zeta-labs")
    await review_factory(student, company)
    await review_factory(student, company, review_type=ReviewType.WORK_EXPERIENCE)
    await placed_student_factory(company, "Arun", "2025")
    kept_review = await review_factory(student, other)
    await placed_student_factory(other, "Bala", "2025")

    response = await admin_client.delete(f"/api/v1/admin/companies/{company.id}")
    body = response.json()
    assert body["message"] == "Company deleted"
    assert body["data"]["removed"] == {"reviews": 2, "rounds": 2, "details": 1, "placed_students": 1}

    assert (await async_session.exec(select(Company.id))).all() == [other.id]
    assert (await async_session.exec(select(Review.id))).all() == [kept_review.id]
    assert await _count(async_session, PlacementRound) == 2
    assert await _count(async_session, WorkExperienceDetail) == 0
    assert await _count(async_session, PlacedStudent) == 1


@pytest.mark.asyncio
async def test_delete_unknown_company(admin_client: AsyncClient):
    response = await admin_client.delete("/api/v1/admin/companies/missing")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_placed_students_crud(admin_client: AsyncClient, async_session: AsyncSession, company):
    response = await admin_client.post("/api/v1/admin/placed-students", json={
        "company_id": company.id,
        "student_name": "Arun",
        "batch": "2025",
        "package": "12 LPA",
        "role": "SDE",
    })
    body = response.json()
    assert body["message"] == "Placed student added successfully"
    student_id = body["data"]["id"]

    response = await admin_client.get("/api/v1/admin/placed-students")
    students = response.json()["data"]
    assert [(s["id"], s["company_name"], s["package"]) for s in students] == [(student_id, "Acme Corp", "12 LPA")]

    response = await admin_client.delete(f"/api/v1/admin/placed-students/{student_id}")
    assert response.json()["data"] == {"id": student_id}
    assert await _count(async_session, PlacedStudent) == 0

    response = await admin_client.delete(f"/api/v1/admin/placed-students/{student_id}")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_placed_students_newest_first(admin_client: AsyncClient, company, placed_student_factory):
    await placed_student_factory(company, "First", "2024", created_at=BASE_TIME)
    await placed_student_factory(company, "Second", "2025", created_at=BASE_TIME + timedelta(days=1))

    response = await admin_client.get("/api/v1/admin/placed-students")
    assert [s["student_name"] for s in response.json()["data"]] == ["Second", "First"]


@pytest.mark.asyncio
@pytest.mark.parametrize("missing", ["company_id", "student_name", "batch"])
async def test_placed_student_requires_fields(
    admin_client: AsyncClient, async_session: AsyncSession, company, missing
):
    payload = {"company_id": company.id, "student_name": "Arun", "batch": "2025"}
    payload.pop(missing)
    response = await admin_client.post("/api/v1/admin/placed-students", json=payload)
    body = response.json()
    assert body["code"] == 422
    assert body["message"] == "Company, Name, and Batch are required"
    assert await _count(async_session, PlacedStudent) == 0


@pytest.mark.asyncio
async def test_placed_student_for_unknown_company(admin_client: AsyncClient):
    response = await admin_client.post("/api/v1/admin/placed-students", json={
        "company_id": "missing", "student_name": "Arun", "batch": "2025"
    })
    assert response.status_code == 404
