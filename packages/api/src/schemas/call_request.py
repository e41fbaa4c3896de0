# This project was developed with assistance from AI tools.
"""Call (video meeting) request schemas."""

from datetime import datetime

from db.enums import CallRequestStatus, UserRole
from pydantic import Field

from . import ApiModel, SuccessResponse


class CallRequestCreate(ApiModel):
    topic: str = Field(min_length=1, max_length=255)
    message: str = Field(min_length=1)
    proposed_date: datetime
    target_role: UserRole | None = None
    target_id: int | None = None


class CallRequestUpdate(ApiModel):
    """Admin status change. Scheduling goes through ``POST /api/zoom/schedule``."""

    status: CallRequestStatus
    admin_notes: str | None = None


class ScheduleCallRequest(ApiModel):
    request_id: int
    scheduled_for: datetime
    duration: int = Field(gt=0, le=480, description="Minutes.")
    join_url: str | None = Field(default=None, max_length=500)


class CallRequestResponse(ApiModel):
    id: int
    requester_id: int
    requester_role: UserRole
    target_role: UserRole | None = None
    target_id: int | None = None
    topic: str
    message: str
    proposed_date: datetime
    status: CallRequestStatus
    admin_notes: str | None = None
    reviewed_by: str | None = None
    scheduled_for: datetime | None = None
    duration_minutes: int | None = None
    join_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class CallRequestAdminView(CallRequestResponse):
    """Admin queue entry with the requester's account details."""

    requester_username: str | None = None
    requester_email: str | None = None

    @classmethod
    def from_record(cls, record) -> "CallRequestAdminView":
        base = CallRequestResponse.model_validate(record).model_dump()
        return cls(
            **base,
            requester_username=record.requester.username,
            requester_email=record.requester.email,
        )


class CallRequestEnvelope(SuccessResponse):
    request: CallRequestResponse


class CallRequestListResponse(SuccessResponse):
    requests: list[CallRequestResponse]


class CallRequestAdminListResponse(SuccessResponse):
    requests: list[CallRequestAdminView]
