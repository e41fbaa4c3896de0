# This project was developed with assistance from AI tools.
"""Mentor messages. Every message is released by an admin before delivery."""

from db import get_db
from db.enums import CallRequestStatus, UserRole
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ..middleware.auth import CurrentUser, require_roles
from ..schemas.communication import (
    MentorMessageAdminListResponse,
    MentorMessageAdminView,
    MentorMessageCreate,
    MentorMessageEnvelope,
    MentorMessageListResponse,
    MentorMessageResponse,
    MentorMessageStatusUpdate,
)
from ..services import mentor as mentor_service
from ._errors import not_found, workflow_errors

router = APIRouter()

_ADMIN_ROLES = (UserRole.ADMIN, UserRole.SUPERADMIN)
_PARTICIPANT_ROLES = tuple(UserRole.self_service_roles())


@router.post(
    "/mentor",
    response_model=MentorMessageEnvelope,
    status_code=201,
    dependencies=[Depends(require_roles(*_PARTICIPANT_ROLES))],
)
async def send_mentor_message(
    body: MentorMessageCreate,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> MentorMessageEnvelope:
    with workflow_errors():
        record = await mentor_service.send_message(
            session,
            user,
            receiver_id=body.receiver_id,
            message=body.message,
            message_type=body.type,
        )
    if record is None:
        raise not_found("Receiver")
    return MentorMessageEnvelope(communication=MentorMessageResponse.from_record(record))


@router.get(
    "/mentor",
    response_model=MentorMessageListResponse,
    dependencies=[Depends(require_roles(*_PARTICIPANT_ROLES))],
)
async def my_mentor_messages(
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> MentorMessageListResponse:
    records = await mentor_service.list_for_user(session, user)
    return MentorMessageListResponse(
        communications=[MentorMessageResponse.from_record(r) for r in records]
    )


@router.get(
    "/mentor/admin",
    response_model=MentorMessageAdminListResponse,
    dependencies=[Depends(require_roles(*_ADMIN_ROLES))],
)
async def review_queue(
    status: CallRequestStatus | None = Query(default=None),
    session: AsyncSession = Depends(get_db),
) -> MentorMessageAdminListResponse:
    records = await mentor_service.list_for_review(session, status)
    return MentorMessageAdminListResponse(
        communications=[MentorMessageAdminView.from_record(r) for r in records]
    )


@router.put(
    "/mentor/{message_id}/status",
    response_model=MentorMessageEnvelope,
    dependencies=[Depends(require_roles(*_ADMIN_ROLES))],
)
async def update_mentor_message(
    message_id: int,
    body: MentorMessageStatusUpdate,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> MentorMessageEnvelope:
    with workflow_errors():
        record = await mentor_service.update_status(
            session, user, message_id, body.status, body.admin_notes
        )
    if record is None:
        raise not_found("Mentor message")
    return MentorMessageEnvelope(communication=MentorMessageResponse.from_record(record))
