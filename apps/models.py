"""
Model registration for migrations: import all models that should be migrated by Alembic here.
When adding/removing apps, add/remove the corresponding imports here; no need to change alembic/env.py.
"""
from apps.identity.models import User, Profile, UserRole
from apps.companies.models import Company
from apps.reviews.models import Review, PlacementRound, WorkExperienceDetail
from apps.placements.models import PlacedStudent

__all__ = [
    "User",
    "Profile",
    "UserRole",
    "Company",
    "Review",
    "PlacementRound",
    "WorkExperienceDetail",
    "PlacedStudent",
]
