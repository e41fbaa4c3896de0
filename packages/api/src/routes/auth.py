# This project was developed with assistance from AI tools.
"""Registration, cookie session login/logout and founder document submission."""

import logging

from db import get_db
from db.enums import UserRole
from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.datastructures import UploadFile

from ..core.auth import create_session_token
from ..core.config import settings
from ..middleware.auth import CurrentUser, require_roles
from ..schemas.account import (
    AuthResponse,
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    UserResponse,
)
from ..schemas.verification import DocumentsSubmittedResponse
from ..services import account as account_service
from ..services import verification as verification_service
from ..services.account import DuplicateAccountError
from ..services.verification import DocumentUploadError
from ._errors import not_found, workflow_errors

logger = logging.getLogger(__name__)

router = APIRouter()


def _set_session_cookie(response: Response, account) -> None:
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=create_session_token(account.id, account.role),
        max_age=settings.SESSION_TTL_SECONDS,
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite="lax",
        path="/",
    )


_READ_CHUNK = 1024 * 1024


async def _read_limited(upload: UploadFile, key: str, max_bytes: int) -> bytes:
    """Read an upload in chunks, stopping as soon as it passes ``max_bytes``."""
    chunks: list[bytes] = []
    total = 0
    while chunk := await upload.read(_READ_CHUNK):
        total += len(chunk)
        if total > max_bytes:
            raise DocumentUploadError(
                f"{key} ({upload.filename}) exceeds the {settings.UPLOAD_MAX_SIZE_MB} MB limit"
            )
        chunks.append(chunk)
    return b"".join(chunks)


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
)
async def register(
    body: RegisterRequest,
    response: Response,
    session: AsyncSession = Depends(get_db),
) -> AuthResponse:
    """Self-service sign-up. Logs the new user in."""
    try:
        account = await account_service.create_account(
            session,
            username=body.username,
            email=body.email,
            name=body.name,
            password=body.password,
            role=body.role,
        )
    except DuplicateAccountError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc

    _set_session_cookie(response, account)
    return AuthResponse(
        user=UserResponse.from_account(account),
        next_step=account_service.next_step_for(account),
    )


@router.post("/login", response_model=AuthResponse)
async def login(
    body: LoginRequest,
    response: Response,
    session: AsyncSession = Depends(get_db),
) -> AuthResponse:
    account = await account_service.authenticate(session, body.username, body.password)
    if account is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password",
        )
    _set_session_cookie(response, account)
    return AuthResponse(user=UserResponse.from_account(account))


@router.post("/logout", response_model=MessageResponse)
async def logout(response: Response) -> MessageResponse:
    response.delete_cookie(settings.SESSION_COOKIE_NAME, path="/")
    return MessageResponse(message="Logged out")


@router.get("/user", response_model=AuthResponse)
async def current_user(
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> AuthResponse:
    """The logged-in account. 401 (from the auth dependency) when there is none."""
    account = await account_service.get_account(session, user.user_id)
    if account is None:
        raise not_found("Account")
    return AuthResponse(user=UserResponse.from_account(account))


@router.post(
    "/auth/founder-documents",
    response_model=DocumentsSubmittedResponse,
    dependencies=[Depends(require_roles(UserRole.FOUNDER))],
)
async def submit_founder_documents(
    request: Request,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> DocumentsSubmittedResponse:
    """Multipart upload, one file per document key (``idDocument``, ``pitchDeck`` ...)."""
    form = await request.form()
    max_bytes = settings.UPLOAD_MAX_SIZE_MB * 1024 * 1024
    uploads: dict[str, tuple[str, str, bytes]] = {}
    try:
        for key, value in form.multi_items():
            if isinstance(value, UploadFile):
                uploads[key] = (
                    value.filename or key,
                    value.content_type or "",
                    await _read_limited(value, key, max_bytes),
                )
        with workflow_errors():
            account = await verification_service.submit_documents(session, user, uploads)
    except DocumentUploadError as exc:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=str(exc),
        ) from exc

    if account is None:
        raise not_found("Founder account")

    return DocumentsSubmittedResponse(
        verification_status=account.verification_status,
        feedback=account.verification_feedback,
        documents=verification_service.document_entries(account),
        missing_documents=verification_service.missing_documents(account.documents),
    )
