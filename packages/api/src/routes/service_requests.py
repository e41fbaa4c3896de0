# This project was developed with assistance from AI tools.
"""Service bookings.

``router`` (mounted at ``/api/service-requests``) is the requesting user's
side; ``admin_router`` (at ``/api/admin/service-requests``) the admin's.
"""

from db import get_db
from db.enums import ServiceRequestStatus, UserRole
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ..middleware.auth import CurrentUser, require_roles
from ..schemas.account import MessageResponse
from ..schemas.service_request import (
    ServiceRequestCreate,
    ServiceRequestEnvelope,
    ServiceRequestListResponse,
    ServiceRequestResponse,
    ServiceRequestStatusUpdate,
)
from ..services import service_request as service_request_service
from ._errors import not_found, workflow_errors

router = APIRouter(dependencies=[Depends(require_roles(*UserRole.self_service_roles()))])
admin_router = APIRouter(
    dependencies=[Depends(require_roles(UserRole.ADMIN, UserRole.SUPERADMIN))]
)


@router.post("", response_model=ServiceRequestEnvelope, status_code=201)
async def create_service_request(
    body: ServiceRequestCreate,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> ServiceRequestEnvelope:
    with workflow_errors():
        record = await service_request_service.create_service_request(
            session,
            user,
            service_type=body.service_type,
            preferred_date=body.preferred_date,
            preferred_time=body.preferred_time,
            location=body.location,
            notes=body.notes,
        )
    return ServiceRequestEnvelope(request=ServiceRequestResponse.from_record(record))


@router.get("/my", response_model=ServiceRequestListResponse)
async def my_service_requests(
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> ServiceRequestListResponse:
    records = await service_request_service.list_my_service_requests(session, user)
    return ServiceRequestListResponse(
        requests=[ServiceRequestResponse.from_record(r) for r in records]
    )


@admin_router.get("", response_model=ServiceRequestListResponse)
async def all_service_requests(
    status: ServiceRequestStatus | None = Query(default=None),
    session: AsyncSession = Depends(get_db),
) -> ServiceRequestListResponse:
    records = await service_request_service.list_service_requests(session, status)
    return ServiceRequestListResponse(
        requests=[ServiceRequestResponse.from_record(r) for r in records]
    )


@admin_router.patch("/{request_id}", response_model=ServiceRequestEnvelope)
async def update_service_request(
    request_id: int,
    body: ServiceRequestStatusUpdate,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> ServiceRequestEnvelope:
    with workflow_errors():
        record = await service_request_service.update_service_request(
            session, user, request_id, body.status
        )
    if record is None:
        raise not_found("Service request")
    return ServiceRequestEnvelope(request=ServiceRequestResponse.from_record(record))


@admin_router.delete("/{request_id}", response_model=MessageResponse)
async def delete_service_request(
    request_id: int,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> MessageResponse:
    with workflow_errors():
        deleted = await service_request_service.delete_service_request(session, user, request_id)
    if not deleted:
        raise not_found("Service request")
    return MessageResponse(message="Service request deleted successfully")
