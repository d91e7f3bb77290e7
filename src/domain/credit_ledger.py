"""Credit Ledger Domain Entity

Tracks the credit balance and free-tier usage per user. Each user has at
most one ledger row; it is created lazily on the first purchase.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from sqlmodel import Field, Column
from sqlalchemy import CheckConstraint, Integer, Numeric, String
from src.domain.base import BaseModel, BigIntPrimaryKey, timestamp_field


class CreditLedger(BaseModel, table=True):
    """
    Credit Ledger - Tracks user credit balance

    Domain Rules:
    - One ledger per user (user_id is unique)
    - Credits must be non-negative
    - Credits only increase through checkout fulfillment
    - free_used counts trial photos already consumed
    """

    __tablename__ = "user_credits"
    __table_args__ = (
        CheckConstraint('credits >= 0', name='credits_non_negative'),
        CheckConstraint('free_used >= 0', name='free_used_non_negative'),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(BigIntPrimaryKey, primary_key=True, autoincrement=True),
        description="Unique ledger identifier (auto-increment)"
    )

    user_id: str = Field(
        sa_column=Column(String(36), nullable=False, unique=True, index=True),
        description="User ID (unique - one ledger per user)"
    )

    credits: Decimal = Field(
        default=Decimal("0.00"),
        sa_column=Column(Numeric(10, 2), nullable=False, default=0),
        description="Current credit balance (must be >= 0, precision: 10,2)"
    )

    free_used: int = Field(
        default=0,
        sa_column=Column(Integer, nullable=False, default=0),
        description="Number of free trial photos already used"
    )

    created_at: datetime = timestamp_field("Ledger creation timestamp")

    updated_at: datetime = timestamp_field("Last balance update timestamp")

    class Config:
        """SQLModel configuration"""
        json_schema_extra = {
            "example": {
                "id": 1,
                "user_id": "0f8fad5b-d9cb-469f-a165-70867728950e",
                "credits": "25.00",
                "free_used": 3,
                "created_at": "2024-01-01T00:00:00Z",
                "updated_at": "2024-01-01T00:00:00Z"
            }
        }
