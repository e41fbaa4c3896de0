# This project was developed with assistance from AI tools.
"""Call request workflow.

Founders and investors ask for a video call; every step after that is an
admin decision:

    pending -> approved | rejected
    approved -> scheduled | rejected
    scheduled -> completed

The meeting link is entered by the admin when scheduling; no meeting is
created through an external API.
"""

import logging

from db import CallRequest
from db.enums import CallRequestStatus, UserRole
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from ..schemas.auth import UserContext
from .audit import write_audit_event
from .notifications import ADMIN_TOPIC, notify, user_topic
from .transitions import WorkflowValidationError, check_transition, commit_transition

logger = logging.getLogger(__name__)

_VALID = CallRequestStatus.valid_transitions()


async def create_call_request(
    session: AsyncSession,
    user: UserContext,
    *,
    topic: str,
    message: str,
    proposed_date,
    target_role: UserRole | None = None,
    target_id: int | None = None,
) -> CallRequest:
    record = CallRequest(
        requester_id=user.user_id,
        requester_role=user.role,
        target_role=target_role,
        target_id=target_id,
        topic=topic.strip(),
        message=message.strip(),
        proposed_date=proposed_date,
        status=CallRequestStatus.PENDING,
    )
    session.add(record)
    await session.flush()

    await write_audit_event(
        session,
        event_type="call_requested",
        user=user,
        target_type="call_request",
        target_id=record.id,
    )
    await session.commit()
    logger.info("Call request %s created by %s", record.id, user.user_id)

    notify(ADMIN_TOPIC, "call-requested", {"requestId": record.id})
    return record


async def list_my_call_requests(session: AsyncSession, user: UserContext) -> list[CallRequest]:
    stmt = (
        select(CallRequest)
        .where(CallRequest.requester_id == user.user_id)
        .order_by(CallRequest.created_at.desc())
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def list_call_requests(
    session: AsyncSession,
    status: CallRequestStatus | None = None,
) -> list[CallRequest]:
    """Admin / superadmin listing with the requester loaded."""
    stmt = (
        select(CallRequest)
        .options(joinedload(CallRequest.requester))
        .order_by(CallRequest.created_at.desc())
    )
    if status is not None:
        stmt = stmt.where(CallRequest.status == status)
    result = await session.execute(stmt)
    return list(result.unique().scalars().all())


async def _get(session: AsyncSession, request_id: int) -> CallRequest | None:
    result = await session.execute(select(CallRequest).where(CallRequest.id == request_id))
    return result.scalar_one_or_none()


async def update_call_request(
    session: AsyncSession,
    user: UserContext,
    request_id: int,
    new_status: CallRequestStatus,
    admin_notes: str | None = None,
) -> CallRequest | None:
    """Admin approves, rejects or completes a request."""
    if new_status == CallRequestStatus.SCHEDULED:
        raise WorkflowValidationError("Use the schedule endpoint to schedule a call")

    record = await _get(session, request_id)
    if record is None:
        return None

    previous = record.status
    check_transition(previous, new_status, _VALID, label=f"Call request {request_id}")

    record.status = new_status
    if admin_notes is not None:
        record.admin_notes = admin_notes.strip() or None
    record.reviewed_by = str(user.user_id)

    await write_audit_event(
        session,
        event_type=f"call_request_{new_status.value}",
        user=user,
        target_type="call_request",
        target_id=record.id,
        event_data={"from_status": previous.value},
    )
    await commit_transition(session, f"Call request {request_id}")

    notify(
        user_topic(record.requester_id),
        "call-request-updated",
        {"requestId": record.id, "status": new_status.value},
    )
    return record


async def schedule_call(
    session: AsyncSession,
    user: UserContext,
    request_id: int,
    *,
    scheduled_for,
    duration_minutes: int,
    join_url: str | None = None,
) -> CallRequest | None:
    """Attach a time (and optionally a meeting link) to an approved request."""
    record = await _get(session, request_id)
    if record is None:
        return None

    check_transition(
        record.status, CallRequestStatus.SCHEDULED, _VALID, label=f"Call request {request_id}"
    )

    record.status = CallRequestStatus.SCHEDULED
    record.scheduled_for = scheduled_for
    record.duration_minutes = duration_minutes
    record.join_url = (join_url or "").strip() or None
    record.reviewed_by = str(user.user_id)

    await write_audit_event(
        session,
        event_type="call_scheduled",
        user=user,
        target_type="call_request",
        target_id=record.id,
        event_data={"scheduled_for": scheduled_for.isoformat(), "duration": duration_minutes},
    )
    await commit_transition(session, f"Call request {request_id}")
    logger.info("Call request %s scheduled for %s", request_id, scheduled_for)

    topics = [user_topic(record.requester_id)]
    if record.target_id is not None:
        topics.append(user_topic(record.target_id))
    notify(
        topics,
        "call-scheduled",
        {
            "requestId": record.id,
            "scheduledFor": scheduled_for.isoformat(),
            "duration": duration_minutes,
            "joinUrl": record.join_url,
        },
    )
    return record
