"""Pydantic schemas for account endpoints."""
from typing import Literal

from pydantic import BaseModel, Field

# Cancellation feedback values accepted by the billing provider
CancellationFeedback = Literal[
    "customer_service",
    "low_quality",
    "missing_features",
    "other",
    "switched_service",
    "too_complex",
    "too_expensive",
    "unused",
]


class CancellationDetails(BaseModel):
    """Why the user is leaving; forwarded to the billing provider."""

    comment: str | None = Field(default=None, max_length=5000)
    feedback: CancellationFeedback | None = None


class DeleteAccountRequest(BaseModel):
    """Schema for deleting the current user's account."""

    password: str = ""
    cancellation_details: CancellationDetails | None = None
