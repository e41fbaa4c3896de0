# This project was developed with assistance from AI tools.
"""Service booking schemas."""

from datetime import datetime

from db.enums import ServiceRequestStatus
from pydantic import Field

from . import ApiModel, SuccessResponse


class ServiceRequestCreate(ApiModel):
    service_type: str = Field(min_length=1, max_length=255)
    preferred_date: datetime
    preferred_time: str = Field(min_length=1, max_length=50)
    location: str = Field(min_length=1, max_length=255)
    notes: str | None = None


class ServiceRequestStatusUpdate(ApiModel):
    status: ServiceRequestStatus


class ServiceRequestResponse(ApiModel):
    id: int
    user_id: int
    user_name: str
    service_type: str
    preferred_date: datetime
    preferred_time: str
    location: str
    notes: str | None = None
    status: ServiceRequestStatus
    created_at: datetime | None = None

    @classmethod
    def from_record(cls, record) -> "ServiceRequestResponse":
        return cls(
            id=record.id,
            user_id=record.user_id,
            user_name=record.user.name,
            service_type=record.service_type,
            preferred_date=record.preferred_date,
            preferred_time=record.preferred_time,
            location=record.location,
            notes=record.notes,
            status=record.status,
            created_at=record.created_at,
        )


class ServiceRequestEnvelope(SuccessResponse):
    request: ServiceRequestResponse


class ServiceRequestListResponse(SuccessResponse):
    requests: list[ServiceRequestResponse]
