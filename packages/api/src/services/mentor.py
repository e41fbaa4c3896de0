# This project was developed with assistance from AI tools.
"""Mentor communication.

A mentor and another user exchange messages, but like every cross-party
contact a message waits for an admin before the receiver sees it. Review
follows the call request table:

    pending -> approved | rejected
    approved -> scheduled | rejected
    scheduled -> completed

The sender always sees their own messages; the receiver only once a
message is past review.
"""

import logging

from db import MentorCommunication, User
from db.enums import CallRequestStatus, UserRole
from sqlalchemy import and_, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from ..schemas.auth import UserContext
from .audit import write_audit_event
from .notifications import ADMIN_TOPIC, notify, user_topic
from .transitions import WorkflowValidationError, check_transition, commit_transition, require_text

logger = logging.getLogger(__name__)

_VALID = CallRequestStatus.valid_transitions()

RELEASED_STATUSES = frozenset(
    {CallRequestStatus.APPROVED, CallRequestStatus.SCHEDULED, CallRequestStatus.COMPLETED}
)


def _base_query():
    return select(MentorCommunication).options(
        joinedload(MentorCommunication.sender),
        joinedload(MentorCommunication.receiver),
    )


async def _get(session: AsyncSession, message_id: int) -> MentorCommunication | None:
    result = await session.execute(_base_query().where(MentorCommunication.id == message_id))
    return result.unique().scalar_one_or_none()


async def send_message(
    session: AsyncSession,
    user: UserContext,
    *,
    receiver_id: int,
    message: str | None,
    message_type: str | None = None,
) -> MentorCommunication | None:
    """Queue a message for admin review.

    One side of the exchange must be a mentor and neither side staff.
    Returns None when the receiver does not exist.
    """
    text = require_text(message, "Message")
    if receiver_id == user.user_id:
        raise WorkflowValidationError("You cannot message yourself")

    receiver = (
        await session.execute(select(User).where(User.id == receiver_id))
    ).scalar_one_or_none()
    if receiver is None:
        return None
    if receiver.role in UserRole.staff_roles():
        raise WorkflowValidationError("Staff are contacted through the admin channels")
    if UserRole.MENTOR not in (user.role, receiver.role):
        raise WorkflowValidationError("Mentor messages need a mentor on one side")

    record = MentorCommunication(
        sender_id=user.user_id,
        receiver_id=receiver.id,
        sender_role=user.role,
        message=text,
        message_type=(message_type or "").strip() or None,
        status=CallRequestStatus.PENDING,
    )
    session.add(record)
    await session.flush()

    await write_audit_event(
        session,
        event_type="mentor_message_sent",
        user=user,
        target_type="mentor_communication",
        target_id=record.id,
        event_data={"receiver_id": receiver.id},
    )
    message_id = record.id  # capture before commit
    await session.commit()
    logger.info("Mentor message %s from %s to %s", message_id, user.user_id, receiver.id)

    notify(ADMIN_TOPIC, "mentor-message-submitted", {"messageId": message_id})
    return await _get(session, message_id)


async def list_for_user(session: AsyncSession, user: UserContext) -> list[MentorCommunication]:
    """Messages the user sent, plus released ones they received. Newest first."""
    stmt = _base_query().where(
        or_(
            MentorCommunication.sender_id == user.user_id,
            and_(
                MentorCommunication.receiver_id == user.user_id,
                MentorCommunication.status.in_(RELEASED_STATUSES),
            ),
        )
    )
    result = await session.execute(stmt.order_by(MentorCommunication.created_at.desc()))
    return list(result.unique().scalars().all())


async def list_for_review(
    session: AsyncSession,
    status: CallRequestStatus | None = None,
) -> list[MentorCommunication]:
    stmt = _base_query().order_by(MentorCommunication.created_at.desc())
    if status is not None:
        stmt = stmt.where(MentorCommunication.status == status)
    result = await session.execute(stmt)
    return list(result.unique().scalars().all())


async def update_status(
    session: AsyncSession,
    user: UserContext,
    message_id: int,
    new_status: CallRequestStatus,
    admin_notes: str | None = None,
) -> MentorCommunication | None:
    """Admin moves a message through review."""
    record = await _get(session, message_id)
    if record is None:
        return None

    previous = record.status
    check_transition(previous, new_status, _VALID, label=f"Mentor message {message_id}")

    record.status = new_status
    if admin_notes is not None:
        record.admin_notes = admin_notes.strip() or None
    record.reviewed_by = str(user.user_id)

    await write_audit_event(
        session,
        event_type=f"mentor_message_{new_status.value}",
        user=user,
        target_type="mentor_communication",
        target_id=record.id,
        event_data={"from_status": previous.value},
    )
    await commit_transition(session, f"Mentor message {message_id}")

    topics = [user_topic(record.sender_id)]
    if new_status == CallRequestStatus.APPROVED:
        topics.append(user_topic(record.receiver_id))
    notify(topics, "mentor-message-updated", {"messageId": record.id, "status": new_status.value})
    return record
