"""Purchase Domain Entity

One row per fulfilled checkout session. The unique constraint on
stripe_session_id is what makes fulfillment happen at most once.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column
from sqlalchemy import Integer, Numeric, String
from src.domain.base import BaseModel, BigIntPrimaryKey, timestamp_field


class PurchaseStatus(str, Enum):
    """Purchase lifecycle states"""
    PENDING = "pending"
    PAID = "paid"


class Purchase(BaseModel, table=True):
    """
    Purchase - Immutable record of a fulfilled checkout session

    Domain Rules:
    - stripe_session_id is unique (prevents double crediting)
    - Inserted in the same transaction as the ledger increment
    - Never updated once inserted with status "paid"
    """

    __tablename__ = "purchases"

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(BigIntPrimaryKey, primary_key=True, autoincrement=True),
        description="Unique purchase identifier (auto-increment)"
    )

    user_id: str = Field(
        sa_column=Column(String(36), nullable=False, index=True),
        description="Purchasing user"
    )

    stripe_session_id: str = Field(
        sa_column=Column(String(255), nullable=False, unique=True, index=True),
        description="Gateway checkout session ID (unique)"
    )

    product_lookup_key: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), nullable=True),
        description="Lookup key of the purchased price"
    )

    quantity: int = Field(
        default=1,
        sa_column=Column(Integer, nullable=False, default=1),
    )

    amount_cents: int = Field(
        default=0,
        sa_column=Column(Integer, nullable=False, default=0),
        description="Amount charged, in the currency's minor unit"
    )

    currency: str = Field(
        default="usd",
        sa_column=Column(String(10), nullable=False, default="usd"),
    )

    credits_purchased: Decimal = Field(
        sa_column=Column(Numeric(10, 2), nullable=False),
        description="Credits granted by this purchase"
    )

    status: PurchaseStatus = Field(
        default=PurchaseStatus.PENDING,
        sa_column=Column(String(50), nullable=False, default=PurchaseStatus.PENDING.value),
    )

    created_at: datetime = timestamp_field("Fulfillment timestamp (immutable)")
