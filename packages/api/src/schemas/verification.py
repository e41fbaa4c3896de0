# This project was developed with assistance from AI tools.
"""Founder verification gate schemas."""

from datetime import datetime
from typing import Literal

from db.enums import DocumentReviewStatus, VerificationStatus

from . import ApiModel, SuccessResponse


class DocumentEntry(ApiModel):
    """One slot of the founder document checklist."""

    key: str
    required: bool
    uploaded: bool = False
    filename: str | None = None
    status: DocumentReviewStatus | None = None
    uploaded_at: datetime | None = None
    reviewed_by: str | None = None
    reviewed_at: datetime | None = None
    rejection_reason: str | None = None


class VerificationStatusResponse(SuccessResponse):
    verification_status: VerificationStatus
    feedback: str | None = None
    documents: list[DocumentEntry]
    missing_documents: list[str] = []


class DocumentsSubmittedResponse(VerificationStatusResponse):
    message: str = "Documents submitted for verification"


class FounderVerificationItem(ApiModel):
    user_id: int
    username: str
    name: str
    email: str
    anonymous_id: str
    verification_status: VerificationStatus
    feedback: str | None = None
    documents: list[DocumentEntry]
    updated_at: datetime | None = None


class FounderVerificationQueueResponse(SuccessResponse):
    founders: list[FounderVerificationItem]


class FounderVerificationEnvelope(SuccessResponse):
    founder: FounderVerificationItem


class DocumentReviewRequest(ApiModel):
    status: DocumentReviewStatus
    rejection_reason: str | None = None


class VerificationDecisionRequest(ApiModel):
    status: VerificationStatus
    feedback: str | None = None


class DocumentUrlResponse(SuccessResponse):
    url: str
    expires_in: int


class FounderDashboardResponse(SuccessResponse):
    """Which founder dashboard the client may render.

    ``full`` lists the product-management sections; ``restricted`` names the
    single screen an unverified founder gets instead.
    """

    view: Literal["full", "restricted"]
    verification_status: VerificationStatus
    sections: list[str] = []
    screen: str | None = None
    feedback: str | None = None
