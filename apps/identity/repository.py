"""Identity module repository implementations."""

from typing import Optional
from sqlmodel import select
from framework.repository.base import BaseRepository
from .models import User, Profile, UserRole, AppRole


class UserRepository(BaseRepository[User]):
    """User repository."""

    def __init__(self, session):
        super().__init__(session, User)

    async def get_by_email(self, email: str) -> Optional[User]:
        """Find user by email (emails are stored lower-cased)."""
        return await self.find_one(email=email.strip().lower())


class ProfileRepository(BaseRepository[Profile]):
    """Profile repository; profile id equals the user id."""

    def __init__(self, session):
        super().__init__(session, Profile)

    async def get_many(self, ids: list[str]) -> dict[str, Profile]:
        """Profiles for a set of user ids, keyed by id."""
        if not ids:
            return {}
        statement = select(Profile).where(Profile.id.in_(list(set(ids))))
        result = await self.session.exec(statement)
        return {profile.id: profile for profile in result.all()}


class UserRoleRepository(BaseRepository[UserRole]):
    """User role repository."""

    def __init__(self, session):
        super().__init__(session, UserRole)

    async def has_role(self, user_id: str, role: AppRole) -> bool:
        return await self.find_one(user_id=user_id, role=role) is not None

    async def list_roles(self, user_id: str) -> list[AppRole]:
        rows = await self.find_all(user_id=user_id)
        return [AppRole(row.role) for row in rows]
