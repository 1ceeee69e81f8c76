from sqlmodel import SQLModel, Field
from sqlalchemy import Column, Text
from typing import Optional
from datetime import datetime
from framework.database.fields import new_uuid, utcnow


class Company(SQLModel, table=True):
    __tablename__ = "companies"

    id: str = Field(default_factory=new_uuid, primary_key=True, max_length=36)
    name: str = Field(index=True, max_length=255)
    slug: str = Field(unique=True, index=True, max_length=255, description="URL key, e.g. acme-corp")
    description: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    logo_url: Optional[str] = Field(default=None, max_length=1024)
    website: Optional[str] = Field(default=None, max_length=1024)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow, sa_column_kwargs={"onupdate": utcnow})
