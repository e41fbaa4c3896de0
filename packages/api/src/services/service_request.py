# This project was developed with assistance from AI tools.
"""Service bookings (consultations, site visits ...) handled by admins.

    pending -> approved | canceled
    approved -> completed | canceled
"""

import logging

from db import ServiceRequest
from db.enums import ServiceRequestStatus
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from ..schemas.auth import UserContext
from .audit import write_audit_event
from .notifications import ADMIN_TOPIC, notify, user_topic
from .transitions import check_transition, commit_transition, require_text

logger = logging.getLogger(__name__)

_VALID = ServiceRequestStatus.valid_transitions()


def _base_query():
    return select(ServiceRequest).options(joinedload(ServiceRequest.user))


async def _get(session: AsyncSession, request_id: int) -> ServiceRequest | None:
    result = await session.execute(_base_query().where(ServiceRequest.id == request_id))
    return result.unique().scalar_one_or_none()


async def create_service_request(
    session: AsyncSession,
    user: UserContext,
    *,
    service_type: str,
    preferred_date,
    preferred_time: str,
    location: str,
    notes: str | None = None,
) -> ServiceRequest:
    record = ServiceRequest(
        user_id=user.user_id,
        service_type=require_text(service_type, "Service type"),
        preferred_date=preferred_date,
        preferred_time=require_text(preferred_time, "Preferred time"),
        location=require_text(location, "Location"),
        notes=(notes or "").strip() or None,
        status=ServiceRequestStatus.PENDING,
    )
    session.add(record)
    await session.flush()

    await write_audit_event(
        session,
        event_type="service_requested",
        user=user,
        target_type="service_request",
        target_id=record.id,
        event_data={"service_type": record.service_type},
    )
    request_id = record.id  # capture before commit
    await session.commit()
    logger.info("Service request %s created by %s", request_id, user.user_id)

    notify(ADMIN_TOPIC, "service-requested", {"requestId": request_id})
    return await _get(session, request_id)


async def list_my_service_requests(
    session: AsyncSession,
    user: UserContext,
) -> list[ServiceRequest]:
    stmt = (
        _base_query()
        .where(ServiceRequest.user_id == user.user_id)
        .order_by(ServiceRequest.created_at.desc())
    )
    result = await session.execute(stmt)
    return list(result.unique().scalars().all())


async def list_service_requests(
    session: AsyncSession,
    status: ServiceRequestStatus | None = None,
) -> list[ServiceRequest]:
    stmt = _base_query().order_by(ServiceRequest.created_at.desc())
    if status is not None:
        stmt = stmt.where(ServiceRequest.status == status)
    result = await session.execute(stmt)
    return list(result.unique().scalars().all())


async def update_service_request(
    session: AsyncSession,
    user: UserContext,
    request_id: int,
    new_status: ServiceRequestStatus,
) -> ServiceRequest | None:
    record = await _get(session, request_id)
    if record is None:
        return None

    previous = record.status
    check_transition(previous, new_status, _VALID, label=f"Service request {request_id}")
    record.status = new_status

    await write_audit_event(
        session,
        event_type=f"service_request_{new_status.value}",
        user=user,
        target_type="service_request",
        target_id=record.id,
        event_data={"from_status": previous.value},
    )
    await commit_transition(session, f"Service request {request_id}")

    notify(
        user_topic(record.user_id),
        "service-request-updated",
        {"requestId": record.id, "status": new_status.value},
    )
    return record


async def delete_service_request(
    session: AsyncSession,
    user: UserContext,
    request_id: int,
) -> bool:
    """Admin removes a booking outright. False when it does not exist."""
    record = await _get(session, request_id)
    if record is None:
        return False

    await session.delete(record)
    await write_audit_event(
        session,
        event_type="service_request_deleted",
        user=user,
        target_type="service_request",
        target_id=request_id,
        event_data={"status": record.status.value},
    )
    await commit_transition(session, f"Service request {request_id}")
    logger.info("Service request %s deleted by %s", request_id, user.user_id)
    return True
