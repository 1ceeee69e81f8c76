from sqlmodel import SQLModel, Field
from sqlalchemy import UniqueConstraint
from typing import Optional
from datetime import datetime
from enum import Enum
from framework.database.fields import new_uuid, utcnow, enum_column


class AppRole(str, Enum):
    USER = "user"
    ADMIN = "admin"


class AuthProvider(str, Enum):
    EMAIL = "email"
    GOOGLE = "google"


class User(SQLModel, table=True):
    """Sign-in identity. Display data lives in Profile."""
    __tablename__ = "users"
    id: str = Field(default_factory=new_uuid, primary_key=True, max_length=36)
    email: str = Field(unique=True, index=True, max_length=320)
    hashed_password: Optional[str] = Field(default=None, max_length=255)  # None for OAuth-only accounts
    provider: AuthProvider = Field(
        default=AuthProvider.EMAIL,
        sa_column=enum_column(AuthProvider)
    )
    email_confirmed: bool = Field(default=False)
    created_at: datetime = Field(default_factory=utcnow)
    last_sign_in_at: Optional[datetime] = Field(default=None)


class Profile(SQLModel, table=True):
    __tablename__ = "profiles"
    id: str = Field(foreign_key="users.id", primary_key=True, max_length=36)
    full_name: Optional[str] = Field(default=None, max_length=255)
    email: Optional[str] = Field(default=None, max_length=320)
    batch: Optional[str] = Field(default=None, max_length=32)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow, sa_column_kwargs={"onupdate": utcnow})


class UserRole(SQLModel, table=True):
    __tablename__ = "user_roles"
    __table_args__ = (UniqueConstraint("user_id", "role", name="uq_user_roles_user_id_role"),)
    id: str = Field(default_factory=new_uuid, primary_key=True, max_length=36)
    user_id: str = Field(foreign_key="users.id", index=True, max_length=36)
    role: AppRole = Field(default=AppRole.USER, sa_column=enum_column(AppRole))
    created_at: datetime = Field(default_factory=utcnow)
