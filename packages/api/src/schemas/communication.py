# This project was developed with assistance from AI tools.
"""Mentor communication schemas."""

from datetime import datetime

from db.enums import CallRequestStatus, UserRole
from pydantic import Field

from . import ApiModel, SuccessResponse


class MentorMessageCreate(ApiModel):
    receiver_id: int
    message: str = ""
    type: str | None = Field(default=None, max_length=50, description="Free label, e.g. 'intro'.")


class MentorMessageStatusUpdate(ApiModel):
    status: CallRequestStatus
    admin_notes: str | None = None


class MentorMessageResponse(ApiModel):
    """What sender and receiver see. Admin notes stay admin-side."""

    id: int
    sender_id: int
    sender_name: str
    sender_role: UserRole
    receiver_id: int
    receiver_name: str
    message: str
    type: str | None = None
    status: CallRequestStatus
    created_at: datetime | None = None

    @classmethod
    def from_record(cls, record) -> "MentorMessageResponse":
        return cls(
            id=record.id,
            sender_id=record.sender_id,
            sender_name=record.sender.name,
            sender_role=record.sender_role,
            receiver_id=record.receiver_id,
            receiver_name=record.receiver.name,
            message=record.message,
            type=record.message_type,
            status=record.status,
            created_at=record.created_at,
        )


class MentorMessageAdminView(MentorMessageResponse):
    admin_notes: str | None = None
    reviewed_by: str | None = None

    @classmethod
    def from_record(cls, record) -> "MentorMessageAdminView":
        base = MentorMessageResponse.from_record(record).model_dump()
        return cls(**base, admin_notes=record.admin_notes, reviewed_by=record.reviewed_by)


class MentorMessageEnvelope(SuccessResponse):
    communication: MentorMessageResponse


class MentorMessageListResponse(SuccessResponse):
    communications: list[MentorMessageResponse]


class MentorMessageAdminListResponse(SuccessResponse):
    communications: list[MentorMessageAdminView]
