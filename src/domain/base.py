"""Shared base for persisted domain entities"""

from datetime import datetime, timezone
from typing import Optional
from sqlalchemy import BigInteger, DateTime, Integer
from sqlmodel import Column, Field, SQLModel

# SQLite only auto-increments INTEGER PRIMARY KEY columns
BigIntPrimaryKey = BigInteger().with_variant(Integer(), "sqlite")


class BaseModel(SQLModel):
    """Base class for all SQLModel entities in the domain layer"""
    pass


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def timestamp_field(description: Optional[str] = None, nullable: bool = False):
    """Timezone-aware timestamp column; required ones default to the current UTC time"""
    default = {"default": None} if nullable else {"default_factory": utc_now}
    return Field(
        sa_column=Column(DateTime(timezone=True), nullable=nullable),
        description=description,
        **default,
    )
