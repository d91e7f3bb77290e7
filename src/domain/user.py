"""Auth Domain Entities

Users and their browser sessions. Both tables are written by the external
auth provider; this service only reads them to resolve the caller.
"""

import uuid
from datetime import datetime
from typing import Optional
from sqlmodel import Field, Column
from sqlalchemy import DateTime, ForeignKey, String
from src.domain.base import BaseModel, BigIntPrimaryKey, timestamp_field


class User(BaseModel, table=True):
    """
    Registered user

    Domain Rules:
    - Email is unique and compared case-insensitively
    - Users are never deleted by billing flows
    """

    __tablename__ = "auth_users"

    id: str = Field(
        default_factory=lambda: str(uuid.uuid4()),
        sa_column=Column(String(36), primary_key=True),
        description="User identifier (uuid)"
    )

    name: Optional[str] = Field(default=None, max_length=255)

    email: str = Field(
        sa_column=Column(String(255), nullable=False, unique=True, index=True),
        description="Login email (unique)"
    )

    email_verified: Optional[datetime] = timestamp_field(nullable=True)

    created_at: datetime = timestamp_field()

    updated_at: datetime = timestamp_field()


class AuthSession(BaseModel, table=True):
    """Browser session issued by the auth provider, keyed by its cookie token"""

    __tablename__ = "auth_sessions"

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(BigIntPrimaryKey, primary_key=True, autoincrement=True),
    )

    user_id: str = Field(
        sa_column=Column(String(36), ForeignKey("auth_users.id", ondelete="CASCADE"), nullable=False, index=True),
    )

    expires: datetime = Field(
        sa_column=Column(DateTime(timezone=True), nullable=False),
        description="Session expiry (UTC)"
    )

    session_token: str = Field(
        sa_column=Column(String(255), nullable=False, unique=True, index=True),
    )

    created_at: datetime = timestamp_field()
