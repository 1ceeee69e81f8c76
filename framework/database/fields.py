"""Column helpers shared by all app models."""
import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Type
from sqlalchemy import Column, Enum as SAEnum


def new_uuid() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def enum_column(enum_cls: Type[Enum], nullable: bool = False, index: bool = False, **kwargs) -> Column:
    """String-backed enum column that stores member values (not names), portable across MySQL and SQLite."""
    return Column(
        SAEnum(
            enum_cls,
            values_callable=lambda members: [m.value for m in members],
            native_enum=False,
            validate_strings=True,
            length=32,
        ),
        nullable=nullable,
        index=index,
        **kwargs,
    )
