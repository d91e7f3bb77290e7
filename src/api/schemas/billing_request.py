"""Request schemas for Billing and Job APIs

Pydantic models for validating incoming HTTP requests. Field names follow
the web client's camelCase.
"""

from typing import Optional
from pydantic import BaseModel, Field, field_validator


class CreateCheckoutRequestSchema(BaseModel):
    """
    Request schema for creating a checkout session

    Used for POST /billing/create-checkout endpoint.
    """

    lookup_key: str = Field(
        ...,
        alias="lookupKey",
        min_length=1,
        description="Lookup key of the price to buy (required, non-empty)"
    )

    quantity: int = Field(
        default=1,
        ge=1,
        le=500,
        description="Units to purchase (1-500, default 1)"
    )

    redirect_url: Optional[str] = Field(
        default=None,
        alias="redirectURL",
        description="Page to return to after checkout (absolute or app-relative)"
    )

    @field_validator('lookup_key')
    @classmethod
    def validate_lookup_key(cls, v):
        """Reject whitespace-only lookup keys"""
        if not v.strip():
            raise ValueError("Lookup key is required")
        return v.strip()

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "lookupKey": "PACK_20_CREDITS",
                "quantity": 1,
                "redirectURL": "/upload"
            }
        }


class RenameJobRequestSchema(BaseModel):
    """
    Request schema for renaming a job group

    Used for PATCH /jobs/{job_id}. An empty string clears the name.
    """

    group_name: Optional[str] = Field(
        default=None,
        alias="groupName",
        description="New group label (max 140 characters)"
    )

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "groupName": "Living room shoot"
            }
        }
