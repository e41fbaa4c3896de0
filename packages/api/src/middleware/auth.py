# This project was developed with assistance from AI tools.
"""
Cookie session authentication.

Login stores a signed HS256 token in an http-only cookie. Every protected
route resolves the caller through ``get_current_user``, which validates the
token and reloads the account so role and verification status are always
current (an admin approval takes effect on the founder's next request).

Set AUTH_DISABLED=true to bypass validation (tests / local dev).
"""

import logging
from typing import Annotated

import jwt
from db import User, get_db
from db.enums import UserRole, VerificationStatus
from fastapi import Depends, HTTPException, Request, WebSocket, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.auth import build_data_scope, decode_session_token
from ..core.config import settings
from ..schemas.auth import DataScope, UserContext

logger = logging.getLogger(__name__)

_DISABLED_USER = UserContext(
    user_id=0,
    role=UserRole.SUPERADMIN,
    email="dev@venture-bridge.local",
    name="Dev User",
    username="dev",
    anonymous_id="dev",
    data_scope=DataScope(full_access=True),
)


def user_context_from_account(user: User) -> UserContext:
    """Project a stored account onto the per-request context."""
    return UserContext(
        user_id=user.id,
        role=user.role,
        email=user.email,
        name=user.name,
        username=user.username,
        anonymous_id=user.anonymous_id,
        verification_status=user.verification_status,
        data_scope=build_data_scope(user.role, user.id),
    )


async def resolve_session(token: str | None, session: AsyncSession) -> UserContext | None:
    """Return the caller for a session token, or None when it is missing/invalid.

    Shared by the HTTP dependency and the notification WebSocket.
    """
    if not token:
        return None
    try:
        payload = decode_session_token(token)
        user_id = int(payload.sub)
    except (jwt.InvalidTokenError, ValueError):
        return None

    result = await session.execute(select(User).where(User.id == user_id))
    account = result.scalar_one_or_none()
    if account is None:
        return None
    return user_context_from_account(account)


# ---------------------------------------------------------------------------
# FastAPI dependencies
# ---------------------------------------------------------------------------


async def get_current_user(
    request: Request,
    session: AsyncSession = Depends(get_db),
) -> UserContext:
    """FastAPI dependency: validate the session cookie and return UserContext.

    When AUTH_DISABLED=true, returns a dev superadmin without validation.
    """
    if settings.AUTH_DISABLED:
        return _DISABLED_USER

    token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not logged in",
        )

    user = await resolve_session(token, session)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Session is invalid or has expired",
        )
    return user


async def get_optional_user(
    request: Request,
    session: AsyncSession = Depends(get_db),
) -> UserContext | None:
    """Like ``get_current_user`` but returns None for anonymous callers."""
    if settings.AUTH_DISABLED:
        return _DISABLED_USER
    return await resolve_session(request.cookies.get(settings.SESSION_COOKIE_NAME), session)


async def get_websocket_user(websocket: WebSocket, session: AsyncSession) -> UserContext | None:
    """Authenticate a WebSocket handshake from the same session cookie."""
    if settings.AUTH_DISABLED:
        return _DISABLED_USER
    return await resolve_session(websocket.cookies.get(settings.SESSION_COOKIE_NAME), session)


# Type alias for use in route signatures
CurrentUser = Annotated[UserContext, Depends(get_current_user)]
OptionalUser = Annotated[UserContext | None, Depends(get_optional_user)]


def require_roles(*allowed_roles: UserRole):
    """Dependency factory: restrict a route to specific roles.

    Usage:
        @router.get("/admin-only", dependencies=[Depends(require_roles(UserRole.ADMIN))])
    """

    async def _check(user: CurrentUser) -> UserContext:
        if user.role not in allowed_roles:
            logger.warning(
                "RBAC denied: user=%s role=%s attempted route requiring %s",
                user.user_id,
                user.role.value,
                [r.value for r in allowed_roles],
            )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient permissions",
            )
        return user

    return _check


async def require_verified_founder(user: CurrentUser) -> UserContext:
    """Dependency: founder whose documents have been approved by an admin."""
    if user.role != UserRole.FOUNDER:
        logger.warning(
            "RBAC denied: user=%s role=%s attempted founder-only route",
            user.user_id,
            user.role.value,
        )
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Insufficient permissions",
        )
    if user.verification_status != VerificationStatus.APPROVED:
        logger.warning(
            "Verification gate: founder=%s status=%s",
            user.user_id,
            user.verification_status.value if user.verification_status else None,
        )
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Founder verification must be approved first",
        )
    return user


VerifiedFounder = Annotated[UserContext, Depends(require_verified_founder)]
