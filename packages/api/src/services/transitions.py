# This project was developed with assistance from AI tools.
"""State-machine helpers shared by the workflow services.

Each workflow (query mediation, founder verification, product review, call
requests) checks the current status against its enum's ``valid_transitions``
table before mutating, and commits through ``commit_transition`` so that a
write against a row another request changed in the meantime (version column
mismatch) surfaces as the same conflict as a wrong-status request.
"""

import logging
from enum import Enum

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

logger = logging.getLogger(__name__)


class InvalidTransitionError(ValueError):
    """Raised when the record's current status does not allow the operation."""

    pass


class WorkflowValidationError(ValueError):
    """Raised when required input is missing or malformed. Nothing is written."""

    pass


def check_transition(
    current: Enum,
    target: Enum,
    valid: dict,
    *,
    label: str,
) -> None:
    """Raise InvalidTransitionError unless ``current -> target`` is allowed."""
    allowed = valid.get(current, frozenset())
    if target not in allowed:
        raise InvalidTransitionError(
            f"Cannot move {label} from '{current.value}' to '{target.value}'. "
            f"Allowed: {sorted(s.value for s in allowed) if allowed else 'none (terminal status)'}."
        )


def require_text(value: str | None, field: str) -> str:
    """Return ``value`` stripped, or raise WorkflowValidationError if blank."""
    text = (value or "").strip()
    if not text:
        raise WorkflowValidationError(f"{field} is required")
    return text


def normalize_tag_set(values: list[str] | None) -> list[str]:
    """Collapse a tag selection to a sorted list of distinct, non-blank values."""
    return sorted({v.strip() for v in values or [] if v and v.strip()})


async def commit_transition(session: AsyncSession, label: str) -> None:
    """Commit, mapping a lost optimistic-lock race to InvalidTransitionError."""
    try:
        await session.commit()
    except StaleDataError as exc:
        await session.rollback()
        logger.warning("Concurrent modification of %s; transition discarded", label)
        raise InvalidTransitionError(
            f"{label} was modified by another request. Reload and try again."
        ) from exc
