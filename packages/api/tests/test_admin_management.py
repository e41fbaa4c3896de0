# This project was developed with assistance from AI tools.
"""Tests for superadmin management of admin accounts."""

from unittest.mock import patch

import pytest
from db import AuditEvent
from db.enums import UserRole
from sqlalchemy.orm.exc import StaleDataError

from src.core.auth import verify_password
from src.services.account import DuplicateAccountError, delete_admin, update_admin
from src.services.transitions import InvalidTransitionError

from .factories import make_mock_account, make_result, make_session, make_user_context


def _superadmin():
    return make_user_context(user_id=10, role=UserRole.SUPERADMIN)


def _audit_events(session) -> list[AuditEvent]:
    return [c.args[0] for c in session.add.call_args_list if isinstance(c.args[0], AuditEvent)]


@pytest.mark.asyncio
async def test_update_admin_changes_profile_and_password():
    account = make_mock_account(id=9, role=UserRole.ADMIN)
    session = make_session(make_result(single=account), make_result(single=None))

    with patch("src.services.account.notify") as mock_notify:
        result = await update_admin(
            session,
            _superadmin(),
            9,
            name=" Ava Admin ",
            email=" Ava@Venture-Bridge.example ",
            password="a-new-long-password",
        )

    assert result is account
    assert account.name == "Ava Admin"
    assert account.email == "ava@venture-bridge.example"
    assert verify_password("a-new-long-password", account.password_hash)
    session.commit.assert_awaited_once()

    (event,) = _audit_events(session)
    assert event.event_type == "admin_updated"
    assert event.event_data == {"fields": ["email", "name", "password"]}
    mock_notify.assert_called_once_with(
        "role:superadmin", "admin-updated", {"adminId": 9, "updatedBy": "user10"}
    )


@pytest.mark.asyncio
async def test_update_admin_email_taken():
    account = make_mock_account(id=9, role=UserRole.ADMIN)
    other = make_mock_account(id=12, role=UserRole.INVESTOR)
    session = make_session(make_result(single=account), make_result(single=other))

    with pytest.raises(DuplicateAccountError):
        await update_admin(session, _superadmin(), 9, email="user12@example.com")

    assert account.email == "user9@example.com"
    session.commit.assert_not_awaited()


@pytest.mark.asyncio
async def test_update_admin_without_changes_writes_nothing():
    account = make_mock_account(id=9, role=UserRole.ADMIN)
    session = make_session(make_result(single=account))

    result = await update_admin(session, _superadmin(), 9, name="User 9")

    assert result is account
    assert _audit_events(session) == []
    session.commit.assert_not_awaited()


@pytest.mark.asyncio
async def test_update_admin_only_targets_admins():
    """A non-admin id (investor, superadmin ...) is filtered out by the query."""
    session = make_session(make_result(single=None))
    assert await update_admin(session, _superadmin(), 1, name="Hijacked") is None


@pytest.mark.asyncio
async def test_update_admin_concurrent_edit_is_conflict():
    account = make_mock_account(id=9, role=UserRole.ADMIN)
    session = make_session(make_result(single=account))
    session.commit.side_effect = StaleDataError("UPDATE statement on table 'users'")

    with patch("src.services.account.notify") as mock_notify:
        with pytest.raises(InvalidTransitionError, match="modified by another request"):
            await update_admin(session, _superadmin(), 9, name="Renamed")

    session.rollback.assert_awaited_once()
    mock_notify.assert_not_called()


@pytest.mark.asyncio
async def test_delete_admin_removes_account_and_notifies():
    account = make_mock_account(id=9, role=UserRole.ADMIN)
    session = make_session(make_result(single=account))

    with patch("src.services.account.notify") as mock_notify:
        assert await delete_admin(session, _superadmin(), 9) is True

    session.delete.assert_awaited_once_with(account)
    session.commit.assert_awaited_once()
    (event,) = _audit_events(session)
    assert event.event_type == "admin_deleted"
    assert event.target_id == 9
    mock_notify.assert_called_once_with(
        "role:superadmin",
        "admin-deleted",
        {"adminId": 9, "adminName": "User 9", "deletedBy": "user10"},
    )


@pytest.mark.asyncio
async def test_delete_missing_admin():
    session = make_session(make_result(single=None))
    assert await delete_admin(session, _superadmin(), 404) is False
    session.delete.assert_not_awaited()
