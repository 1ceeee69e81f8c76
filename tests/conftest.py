"""Test config and shared fixtures."""
import pytest
from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator, Callable, Optional
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from main import app
from framework.database.manager import get_db
from framework.security import create_access_token, get_password_hash
from apps.identity.models import User, Profile, UserRole, AppRole, AuthProvider
from apps.companies.models import Company
from apps.reviews.models import (
    Review,
    ReviewType,
    ReviewStatus,
    RoundType,
    PlacementRound,
    WorkExperienceDetail,
)
from apps.placements.models import PlacedStudent


# In-memory SQLite for tests
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
TEST_PASSWORD = "secret123"
BASE_TIME = datetime(2025, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture(scope="function")
async def async_session() -> AsyncGenerator[AsyncSession, None]:
    """Create async test database session over a fresh schema."""
    # Import all models so they are registered in metadata
    import apps.models  # noqa: F401

    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False
    )

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    async_session_maker = sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False
    )

    async with async_session_maker() as session:
        yield session
        await session.rollback()

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def user_factory(async_session: AsyncSession) -> Callable:
    """Create a confirmed email/password user with profile and roles."""
    async def _create(
        email: str,
        full_name: Optional[str] = None,
        roles=(AppRole.USER,),
        email_confirmed: bool = True,
        password: Optional[str] = TEST_PASSWORD,
    ) -> User:
        user = User(
            email=email,
            hashed_password=get_password_hash(password) if password else None,
            provider=AuthProvider.EMAIL,
            email_confirmed=email_confirmed,
        )
        async_session.add(user)
        await async_session.flush()
        async_session.add(Profile(id=user.id, full_name=full_name, email=email, batch="2025"))
        for role in roles:
            async_session.add(UserRole(user_id=user.id, role=role))
        await async_session.commit()
        return user
    return _create


@pytest.fixture
async def student(user_factory) -> User:
    return await user_factory("asha@example.com", full_name="Asha Rao")


@pytest.fixture
async def admin_user(user_factory) -> User:
    return await user_factory("admin@example.com", full_name="Site Admin", roles=(AppRole.USER, AppRole.ADMIN))


def auth_headers(user: User) -> dict:
    """Bearer header for a user, as issued by sign-in."""
    token = create_access_token({"sub": user.id, "email": user.email, "role": "user"})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def app_transport(async_session: AsyncSession) -> AsyncGenerator[ASGITransport, None]:
    """ASGI transport with the DB session dependency pointed at the test session."""
    async def _get_db():
        yield async_session

    app.dependency_overrides[get_db] = _get_db
    yield ASGITransport(app=app)
    app.dependency_overrides.clear()


@pytest.fixture
async def anon_client(app_transport: ASGITransport) -> AsyncGenerator[AsyncClient, None]:
    """Client without credentials."""
    async with AsyncClient(transport=app_transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def client(app_transport: ASGITransport, student: User) -> AsyncGenerator[AsyncClient, None]:
    """Client signed in as a regular student."""
    async with AsyncClient(
        transport=app_transport, base_url="http://test", headers=auth_headers(student)
    ) as ac:
        yield ac


@pytest.fixture
async def admin_client(app_transport: ASGITransport, admin_user: User) -> AsyncGenerator[AsyncClient, None]:
    """Client signed in as an admin."""
    async with AsyncClient(
        transport=app_transport, base_url="http://test", headers=auth_headers(admin_user)
    ) as ac:
        yield ac


@pytest.fixture
def company_factory(async_session: AsyncSession) -> Callable:
    async def _create(name: str, slug: str, **kwargs) -> Company:
        company = Company(name=name, slug=slug, **kwargs)
        async_session.add(company)
        await async_session.commit()
        return company
    return _create


@pytest.fixture
async def company(company_factory) -> Company:
    return await company_factory("Acme Corp", "acme-corp", website="https://acme.example.com")


@pytest.fixture
def review_factory(async_session: AsyncSession) -> Callable:
    """Create a review row directly (bypassing the pending-only submit path)."""
    async def _create(
        author: User,
        company: Company,
        review_type: ReviewType = ReviewType.PLACEMENT,
        status: ReviewStatus = ReviewStatus.APPROVED,
        minutes: int = 0,
        **kwargs
    ) -> Review:
        review = Review(
            author_id=author.id,
            company_id=company.id,
            review_type=review_type,
            status=status,
            batch=kwargs.pop("batch", "2025"),
            position_applied_for=kwargs.pop("position_applied_for", "SDE Intern"),
            created_at=BASE_TIME + timedelta(minutes=minutes),
            **kwargs
        )
        async_session.add(review)
        await async_session.flush()
        if review_type == ReviewType.PLACEMENT:
            async_session.add_all([
                PlacementRound(review_id=review.id, round_order=2, round_type=RoundType.TECHNICAL_INTERVIEW),
                PlacementRound(review_id=review.id, round_order=1, round_type=RoundType.ASSESSMENT),
            ])
        else:
            async_session.add(WorkExperienceDetail(
                review_id=review.id,
                job_title="Backend Intern",
                work_life_balance=4,
                culture_rating=5,
            ))
        await async_session.commit()
        return review
    return _create


@pytest.fixture
def placed_student_factory(async_session: AsyncSession) -> Callable:
    async def _create(company: Company, student_name: str, batch: str, **kwargs) -> PlacedStudent:
        student = PlacedStudent(
            company_id=company.id,
            student_name=student_name,
            batch=batch,
            created_at=kwargs.pop("created_at", BASE_TIME),
            **kwargs
        )
        async_session.add(student)
        await async_session.commit()
        return student
    return _create
