# This project was developed with assistance from AI tools.
"""Account service: registration, login and staff account management."""

import logging

from db import User
from db.enums import UserRole, VerificationStatus
from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.auth import generate_anonymous_id, hash_password, verify_password
from ..schemas.auth import UserContext
from .audit import write_audit_event
from .notifications import notify, role_topic
from .transitions import commit_transition

logger = logging.getLogger(__name__)


class DuplicateAccountError(ValueError):
    """Raised when the username or email is already registered."""

    pass


def next_step_for(account: User) -> str:
    """Where the client goes right after registration."""
    if account.role == UserRole.FOUNDER:
        return "founder-documents"
    return "dashboard"


async def _find_by_login(session: AsyncSession, login: str) -> User | None:
    value = login.strip()
    result = await session.execute(
        select(User).where(
            or_(User.username == value, func.lower(User.email) == value.lower())
        )
    )
    return result.scalars().first()


async def create_account(
    session: AsyncSession,
    *,
    username: str,
    email: str,
    name: str,
    password: str,
    role: UserRole,
    actor: UserContext | None = None,
) -> User:
    """Insert a new account. Founders start at ``not_submitted``.

    Raises DuplicateAccountError when the username or email is taken.
    """
    username = username.strip()
    email = email.strip().lower()

    result = await session.execute(
        select(User).where(or_(User.username == username, func.lower(User.email) == email))
    )
    if result.scalars().first() is not None:
        raise DuplicateAccountError("Username or email already registered")

    account = User(
        username=username,
        email=email,
        name=name.strip(),
        password_hash=hash_password(password),
        role=role,
        anonymous_id=generate_anonymous_id(),
        verification_status=(
            VerificationStatus.NOT_SUBMITTED if role == UserRole.FOUNDER else None
        ),
        documents={},
        documents_meta={},
    )
    session.add(account)
    try:
        await session.flush()
    except IntegrityError as exc:
        # Lost a race with a concurrent registration of the same name
        await session.rollback()
        raise DuplicateAccountError("Username or email already registered") from exc

    await write_audit_event(
        session,
        event_type="admin_created" if role in UserRole.staff_roles() else "user_registered",
        user=actor,
        target_type="user",
        target_id=account.id,
        event_data={"role": role.value},
    )
    await session.commit()
    logger.info("Account %s created with role %s", account.id, role.value)
    if role in UserRole.staff_roles():
        notify(
            role_topic(UserRole.SUPERADMIN),
            "admin-created",
            {"adminId": account.id, "createdBy": actor.username if actor is not None else None},
        )
    return account


async def authenticate(session: AsyncSession, login: str, password: str) -> User | None:
    """Return the account for valid credentials, else None."""
    account = await _find_by_login(session, login)
    if account is None or not verify_password(password, account.password_hash):
        logger.warning("Failed login attempt for '%s'", login)
        return None
    return account


async def get_account(session: AsyncSession, user_id: int) -> User | None:
    result = await session.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def list_users(session: AsyncSession, role: UserRole | None = None) -> list[User]:
    stmt = select(User).order_by(User.created_at.desc())
    if role is not None:
        stmt = stmt.where(User.role == role)
    result = await session.execute(stmt)
    return list(result.scalars().all())


# ---------------------------------------------------------------------------
# Staff accounts
# ---------------------------------------------------------------------------


async def list_admins(session: AsyncSession) -> list[User]:
    return await list_users(session, UserRole.ADMIN)


async def _get_admin(session: AsyncSession, admin_id: int) -> User | None:
    result = await session.execute(
        select(User).where(User.id == admin_id, User.role == UserRole.ADMIN)
    )
    return result.scalar_one_or_none()


async def update_admin(
    session: AsyncSession,
    actor: UserContext,
    admin_id: int,
    *,
    name: str | None = None,
    email: str | None = None,
    password: str | None = None,
) -> User | None:
    """Superadmin edits an admin's profile or resets their password.

    The role itself is not editable here. Returns None when ``admin_id`` is
    not an admin account; raises DuplicateAccountError when the new email
    belongs to someone else.
    """
    account = await _get_admin(session, admin_id)
    if account is None:
        return None

    changed = []
    if email is not None and email.strip().lower() != account.email:
        email = email.strip().lower()
        result = await session.execute(
            select(User).where(func.lower(User.email) == email, User.id != account.id)
        )
        if result.scalars().first() is not None:
            raise DuplicateAccountError("Email already registered")
        account.email = email
        changed.append("email")
    if name is not None and name.strip() and name.strip() != account.name:
        account.name = name.strip()
        changed.append("name")
    if password is not None:
        account.password_hash = hash_password(password)
        changed.append("password")

    if not changed:
        return account

    await write_audit_event(
        session,
        event_type="admin_updated",
        user=actor,
        target_type="user",
        target_id=account.id,
        event_data={"fields": changed},
    )
    try:
        await commit_transition(session, f"Admin {account.id}")
    except IntegrityError as exc:
        await session.rollback()
        raise DuplicateAccountError("Email already registered") from exc
    logger.info("Admin %s updated by %s (%s)", account.id, actor.user_id, ", ".join(changed))

    notify(
        role_topic(UserRole.SUPERADMIN),
        "admin-updated",
        {"adminId": account.id, "updatedBy": actor.username or str(actor.user_id)},
    )
    return account


async def delete_admin(session: AsyncSession, actor: UserContext, admin_id: int) -> bool:
    """Remove an admin account. False when ``admin_id`` is not an admin."""
    account = await _get_admin(session, admin_id)
    if account is None:
        return False

    admin_name = account.name
    await session.delete(account)
    await write_audit_event(
        session,
        event_type="admin_deleted",
        user=actor,
        target_type="user",
        target_id=admin_id,
        event_data={"username": account.username},
    )
    await commit_transition(session, f"Admin {admin_id}")
    logger.info("Admin %s deleted by %s", admin_id, actor.user_id)

    notify(
        role_topic(UserRole.SUPERADMIN),
        "admin-deleted",
        {
            "adminId": admin_id,
            "adminName": admin_name,
            "deletedBy": actor.username or str(actor.user_id),
        },
    )
    return True
