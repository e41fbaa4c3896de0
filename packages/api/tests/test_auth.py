# This project was developed with assistance from AI tools.
"""Tests for cookie session authentication and RBAC dependencies."""

from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock, MagicMock

import jwt
import pytest
from db import get_db
from db.enums import UserRole, VerificationStatus
from fastapi import Depends, FastAPI
from fastapi.testclient import TestClient

from src.core.auth import (
    build_data_scope,
    create_session_token,
    decode_session_token,
    generate_anonymous_id,
    hash_password,
    verify_password,
)
from src.core.config import settings
from src.middleware.auth import (
    CurrentUser,
    VerifiedFounder,
    get_current_user,
    require_roles,
    resolve_session,
)
from src.routes.auth import _read_limited
from src.services.verification import DocumentUploadError

from .factories import make_mock_account, make_result, make_session, make_user_context

# ---------------------------------------------------------------------------
# Pure helpers
# ---------------------------------------------------------------------------


def test_password_hash_round_trip():
    hashed = hash_password("correct horse battery")
    assert hashed != "correct horse battery"
    assert verify_password("correct horse battery", hashed)
    assert not verify_password("wrong password", hashed)


def test_verify_password_malformed_hash_is_false():
    assert verify_password("anything", "not-a-bcrypt-hash") is False


def test_anonymous_ids_are_distinct():
    ids = {generate_anonymous_id() for _ in range(50)}
    assert len(ids) == 50
    assert all(len(i) == 12 for i in ids)


def test_session_token_carries_user_and_role():
    token = create_session_token(42, UserRole.FOUNDER)
    payload = decode_session_token(token)
    assert payload.sub == "42"
    assert payload.role == UserRole.FOUNDER


def test_expired_session_token_rejected():
    issued = datetime.now(UTC) - timedelta(seconds=settings.SESSION_TTL_SECONDS + 60)
    token = create_session_token(42, UserRole.FOUNDER, now=issued)
    with pytest.raises(jwt.ExpiredSignatureError):
        decode_session_token(token)


def test_build_data_scope_by_role():
    assert build_data_scope(UserRole.ADMIN, 1).full_access is True
    assert build_data_scope(UserRole.SUPERADMIN, 1).full_access is True
    scope = build_data_scope(UserRole.INVESTOR, 7)
    assert scope.own_data_only is True
    assert scope.user_id == 7
    assert scope.full_access is False


# ---------------------------------------------------------------------------
# Session resolution
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_resolve_session_reloads_account():
    account = make_mock_account(id=2, verification_status=VerificationStatus.APPROVED)
    session = make_session(make_result(single=account))

    user = await resolve_session(create_session_token(2, UserRole.FOUNDER), session)

    assert user.user_id == 2
    assert user.role == UserRole.FOUNDER
    assert user.is_verified_founder
    assert user.data_scope.own_data_only is True


@pytest.mark.asyncio
async def test_resolve_session_garbage_token():
    session = make_session()
    assert await resolve_session("garbage", session) is None
    session.execute.assert_not_awaited()


@pytest.mark.asyncio
async def test_resolve_session_deleted_account():
    session = make_session(make_result(single=None))
    assert await resolve_session(create_session_token(2, UserRole.FOUNDER), session) is None


# ---------------------------------------------------------------------------
# HTTP dependencies
# ---------------------------------------------------------------------------


def _app(session=None):
    app = FastAPI()

    @app.get("/me")
    async def me(user: CurrentUser):
        return {"user_id": user.user_id, "role": user.role.value}

    @app.get("/admin-only", dependencies=[Depends(require_roles(UserRole.ADMIN))])
    async def admin_only():
        return {"ok": True}

    @app.get("/verified")
    async def verified(user: VerifiedFounder):
        return {"user_id": user.user_id}

    async def fake_db():
        yield session or make_session()

    app.dependency_overrides[get_db] = fake_db
    return app


def test_missing_cookie_returns_401(monkeypatch):
    monkeypatch.setattr(settings, "AUTH_DISABLED", False)
    resp = TestClient(_app()).get("/me")
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Not logged in"


def test_invalid_cookie_returns_401(monkeypatch):
    monkeypatch.setattr(settings, "AUTH_DISABLED", False)
    client = TestClient(_app())
    client.cookies.set(settings.SESSION_COOKIE_NAME, "tampered")
    assert client.get("/me").status_code == 401


def test_valid_cookie_resolves_user(monkeypatch):
    monkeypatch.setattr(settings, "AUTH_DISABLED", False)
    account = make_mock_account(id=1, role=UserRole.INVESTOR)
    client = TestClient(_app(make_session(make_result(single=account))))
    client.cookies.set(settings.SESSION_COOKIE_NAME, create_session_token(1, UserRole.INVESTOR))

    resp = client.get("/me")

    assert resp.status_code == 200
    assert resp.json() == {"user_id": 1, "role": "investor"}


def test_auth_disabled_returns_dev_superadmin(monkeypatch):
    monkeypatch.setattr(settings, "AUTH_DISABLED", True)
    resp = TestClient(_app()).get("/me")
    assert resp.status_code == 200
    assert resp.json()["role"] == "superadmin"


def test_require_roles_denies_other_roles():
    app = _app()
    app.dependency_overrides[get_current_user] = lambda: make_user_context(
        user_id=1, role=UserRole.INVESTOR
    )
    resp = TestClient(app).get("/admin-only")
    assert resp.status_code == 403


def test_require_roles_allows_listed_role():
    app = _app()
    app.dependency_overrides[get_current_user] = lambda: make_user_context(
        user_id=9, role=UserRole.ADMIN
    )
    assert TestClient(app).get("/admin-only").status_code == 200


@pytest.mark.parametrize(
    "role,status,expected",
    [
        (UserRole.FOUNDER, VerificationStatus.APPROVED, 200),
        (UserRole.FOUNDER, VerificationStatus.PENDING_VERIFICATION, 403),
        (UserRole.FOUNDER, VerificationStatus.REJECTED, 403),
        (UserRole.INVESTOR, None, 403),
    ],
)
def test_verified_founder_gate(role, status, expected):
    app = _app()
    app.dependency_overrides[get_current_user] = lambda: make_user_context(
        user_id=2, role=role, verification_status=status
    )
    assert TestClient(app).get("/verified").status_code == expected


def _chunked_upload(*chunks: bytes) -> MagicMock:
    upload = MagicMock()
    upload.filename = "deck.pdf"
    upload.read = AsyncMock(side_effect=[*chunks, b""])
    return upload


@pytest.mark.asyncio
async def test_read_limited_stops_at_first_chunk_over_limit():
    upload = _chunked_upload(b"a" * 6, b"b" * 6, b"c" * 6)

    with pytest.raises(DocumentUploadError, match="pitchDeck"):
        await _read_limited(upload, "pitchDeck", max_bytes=10)

    assert upload.read.await_count == 2


@pytest.mark.asyncio
async def test_read_limited_returns_whole_body_within_limit():
    upload = _chunked_upload(b"a" * 6, b"b" * 4)
    assert await _read_limited(upload, "pitchDeck", max_bytes=10) == b"a" * 6 + b"b" * 4
