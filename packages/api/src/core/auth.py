# This project was developed with assistance from AI tools.
"""Pure auth utility functions with no FastAPI or HTTP dependencies.

Used by the middleware layer (cookie session auth), the account service
(registration / login) and the ``create_superadmin`` CLI. Keeping them
separate from ``middleware/auth.py`` avoids pulling FastAPI/Starlette
imports into code that runs outside the request lifecycle.
"""

import secrets
from datetime import UTC, datetime, timedelta

import bcrypt
import jwt
from db.enums import UserRole

from ..schemas.auth import DataScope, SessionPayload
from .config import settings

SESSION_ALGORITHM = "HS256"


def build_data_scope(role: UserRole, user_id: int) -> DataScope:
    """Build data scope rules based on the user's role."""
    if role in UserRole.staff_roles():
        return DataScope(full_access=True)
    return DataScope(own_data_only=True, user_id=user_id)


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Constant-time check of a password against its bcrypt hash."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False


def generate_anonymous_id() -> str:
    """Public alias shown to the other party instead of name/email."""
    return secrets.token_hex(6)


def create_session_token(user_id: int, role: UserRole, *, now: datetime | None = None) -> str:
    """Sign a session token for the cookie set at login."""
    issued = now or datetime.now(UTC)
    claims = {
        "sub": str(user_id),
        "role": role.value,
        "iat": issued,
        "exp": issued + timedelta(seconds=settings.SESSION_TTL_SECONDS),
    }
    return jwt.encode(claims, settings.SESSION_SECRET_KEY, algorithm=SESSION_ALGORITHM)


def decode_session_token(token: str) -> SessionPayload:
    """Validate signature and expiry. Raises ``jwt.InvalidTokenError`` on failure."""
    payload = jwt.decode(token, settings.SESSION_SECRET_KEY, algorithms=[SESSION_ALGORITHM])
    return SessionPayload(**payload)
