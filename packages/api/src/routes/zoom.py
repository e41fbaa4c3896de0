# This project was developed with assistance from AI tools.
"""Video call requests. The admin supplies the meeting link when scheduling."""

from db import get_db
from db.enums import CallRequestStatus, UserRole
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ..middleware.auth import CurrentUser, require_roles
from ..schemas.call_request import (
    CallRequestAdminListResponse,
    CallRequestAdminView,
    CallRequestCreate,
    CallRequestEnvelope,
    CallRequestListResponse,
    CallRequestResponse,
    CallRequestUpdate,
    ScheduleCallRequest,
)
from ..services import call_request as call_service
from ._errors import not_found, workflow_errors

router = APIRouter()

_ADMIN_ROLES = (UserRole.ADMIN, UserRole.SUPERADMIN)


@router.post(
    "/request",
    response_model=CallRequestEnvelope,
    status_code=201,
    dependencies=[Depends(require_roles(UserRole.FOUNDER, UserRole.INVESTOR))],
)
async def request_call(
    body: CallRequestCreate,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> CallRequestEnvelope:
    record = await call_service.create_call_request(
        session,
        user,
        topic=body.topic,
        message=body.message,
        proposed_date=body.proposed_date,
        target_role=body.target_role,
        target_id=body.target_id,
    )
    return CallRequestEnvelope(request=CallRequestResponse.model_validate(record))


@router.get("/requests/my", response_model=CallRequestListResponse)
async def my_requests(
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> CallRequestListResponse:
    records = await call_service.list_my_call_requests(session, user)
    return CallRequestListResponse(
        requests=[CallRequestResponse.model_validate(r) for r in records]
    )


@router.get(
    "/requests/admin",
    response_model=CallRequestAdminListResponse,
    dependencies=[Depends(require_roles(*_ADMIN_ROLES))],
)
async def admin_requests(
    status: CallRequestStatus | None = Query(default=None),
    session: AsyncSession = Depends(get_db),
) -> CallRequestAdminListResponse:
    records = await call_service.list_call_requests(session, status)
    return CallRequestAdminListResponse(
        requests=[CallRequestAdminView.from_record(r) for r in records]
    )


@router.get(
    "/requests/all",
    response_model=CallRequestAdminListResponse,
    dependencies=[Depends(require_roles(UserRole.SUPERADMIN))],
)
async def all_requests(session: AsyncSession = Depends(get_db)) -> CallRequestAdminListResponse:
    records = await call_service.list_call_requests(session)
    return CallRequestAdminListResponse(
        requests=[CallRequestAdminView.from_record(r) for r in records]
    )


@router.put(
    "/requests/{request_id}",
    response_model=CallRequestEnvelope,
    dependencies=[Depends(require_roles(*_ADMIN_ROLES))],
)
async def update_request(
    request_id: int,
    body: CallRequestUpdate,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> CallRequestEnvelope:
    with workflow_errors():
        record = await call_service.update_call_request(
            session, user, request_id, body.status, body.admin_notes
        )
    if record is None:
        raise not_found("Call request")
    return CallRequestEnvelope(request=CallRequestResponse.model_validate(record))


@router.post(
    "/schedule",
    response_model=CallRequestEnvelope,
    dependencies=[Depends(require_roles(*_ADMIN_ROLES))],
)
async def schedule_call(
    body: ScheduleCallRequest,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> CallRequestEnvelope:
    with workflow_errors():
        record = await call_service.schedule_call(
            session,
            user,
            body.request_id,
            scheduled_for=body.scheduled_for,
            duration_minutes=body.duration,
            join_url=body.join_url,
        )
    if record is None:
        raise not_found("Call request")
    return CallRequestEnvelope(request=CallRequestResponse.model_validate(record))
