"""Photo Job Domain Entity

A batch of photos submitted for generation by a user.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import Integer, Numeric, String, Text
from src.domain.base import BaseModel, BigIntPrimaryKey, timestamp_field

GROUP_NAME_MAX_LENGTH = 140


class JobStatus(str, Enum):
    """Photo job states"""
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class PhotoJob(BaseModel, table=True):
    """
    Photo Job - One generation request and its result archive

    Domain Rules:
    - Owned by exactly one user; only the owner may read, rename or delete it
    - group_name is an optional user label of at most 140 characters
    - cost is 1.00 per photo
    """

    __tablename__ = "photo_jobs"
    __table_args__ = (
        Index('ix_photo_jobs_user_created', 'user_id', 'created_at'),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(BigIntPrimaryKey, primary_key=True, autoincrement=True),
    )

    user_id: Optional[str] = Field(
        default=None,
        sa_column=Column(String(36), nullable=True),
    )

    prompt: str = Field(
        default="",
        sa_column=Column(Text, nullable=False, default=""),
    )

    photo_count: int = Field(
        sa_column=Column(Integer, nullable=False),
    )

    cost: Decimal = Field(
        default=Decimal("0.00"),
        sa_column=Column(Numeric(10, 2), nullable=False, default=0),
    )

    status: JobStatus = Field(
        default=JobStatus.PENDING,
        sa_column=Column(String(50), nullable=False, default=JobStatus.PENDING.value),
    )

    download_url: Optional[str] = Field(
        default=None,
        sa_column=Column(Text, nullable=True),
    )

    group_name: Optional[str] = Field(
        default=None,
        sa_column=Column(String(GROUP_NAME_MAX_LENGTH), nullable=True),
    )

    created_at: datetime = timestamp_field()

    updated_at: datetime = timestamp_field()
