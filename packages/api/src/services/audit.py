# This project was developed with assistance from AI tools.
"""Admin action log.

Every workflow transition (query mediation, verification, product review,
call requests, account administration) appends one ``AuditEvent`` in the
same unit of work as the change it records, so the log and the state can
never disagree. Rows are INSERT + SELECT only.
"""

import logging

from db import AuditEvent
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..schemas.auth import UserContext

logger = logging.getLogger(__name__)

ADMIN_ACTIONS_LIMIT = 500


async def write_audit_event(
    session: AsyncSession,
    *,
    event_type: str,
    user: UserContext | None = None,
    target_type: str | None = None,
    target_id: int | None = None,
    event_data: dict | None = None,
) -> AuditEvent:
    """Stage an audit event in the caller's transaction.

    Nothing is flushed here: the pending change and its event reach the
    database together when the caller commits, so a version conflict on
    the changed row surfaces from ``commit_transition``.

    Args:
        session: Database session.
        event_type: Event category (e.g. 'query_forwarded', 'founder_verified').
        user: Actor, or None for system actions (CLI).
        target_type: Kind of record acted on ('query', 'product', 'user', 'call_request').
        target_id: Primary key of that record.
        event_data: Arbitrary JSON-serializable payload.
    """
    audit = AuditEvent(
        event_type=event_type,
        user_id=str(user.user_id) if user is not None else None,
        user_role=user.role.value if user is not None else None,
        target_type=target_type,
        target_id=target_id,
        event_data=event_data,
    )
    session.add(audit)
    return audit


async def list_admin_actions(
    session: AsyncSession,
    *,
    limit: int = ADMIN_ACTIONS_LIMIT,
) -> list[AuditEvent]:
    """Return the most recent events, newest first."""
    stmt = (
        select(AuditEvent)
        .order_by(AuditEvent.timestamp.desc(), AuditEvent.id.desc())
        .limit(min(limit, ADMIN_ACTIONS_LIMIT))
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())
