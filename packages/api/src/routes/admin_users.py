# This project was developed with assistance from AI tools.
"""Admin user management and founder verification review.

``router`` is mounted at ``/api/admin`` (admin + superadmin), ``users_router``
at ``/api/users`` (admin + superadmin) and ``superadmin_router`` at
``/api/superadmin``.
"""

import logging

from db import User, get_db
from db.enums import UserRole
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..middleware.auth import CurrentUser, require_roles
from ..schemas.account import (
    AdminActionItem,
    AdminActionsResponse,
    AdminEnvelope,
    AdminListResponse,
    CreateAdminRequest,
    MessageResponse,
    UpdateAdminRequest,
    UserListResponse,
    UserResponse,
)
from ..schemas.verification import (
    DocumentReviewRequest,
    DocumentUrlResponse,
    FounderVerificationEnvelope,
    FounderVerificationItem,
    FounderVerificationQueueResponse,
    VerificationDecisionRequest,
)
from ..services import account as account_service
from ..services import verification as verification_service
from ..services.account import DuplicateAccountError
from ..services.audit import ADMIN_ACTIONS_LIMIT, list_admin_actions
from ._errors import not_found, workflow_errors

logger = logging.getLogger(__name__)

_DOCUMENT_URL_TTL = 900

router = APIRouter(dependencies=[Depends(require_roles(UserRole.ADMIN, UserRole.SUPERADMIN))])
superadmin_router = APIRouter(dependencies=[Depends(require_roles(UserRole.SUPERADMIN))])
users_router = APIRouter(dependencies=[Depends(require_roles(UserRole.ADMIN, UserRole.SUPERADMIN))])


def _verification_item(account: User) -> FounderVerificationItem:
    return FounderVerificationItem(
        user_id=account.id,
        username=account.username,
        name=account.name,
        email=account.email,
        anonymous_id=account.anonymous_id,
        verification_status=verification_service.current_status(account),
        feedback=account.verification_feedback,
        documents=verification_service.document_entries(account),
        updated_at=account.updated_at,
    )


@router.get("/users", response_model=UserListResponse)
async def list_users(
    role: UserRole | None = Query(default=None),
    session: AsyncSession = Depends(get_db),
) -> UserListResponse:
    accounts = await account_service.list_users(session, role)
    return UserListResponse(users=[UserResponse.from_account(a) for a in accounts])


@router.get("/founder-verifications", response_model=FounderVerificationQueueResponse)
async def founder_verifications(
    session: AsyncSession = Depends(get_db),
) -> FounderVerificationQueueResponse:
    """Founders waiting on a verification decision, oldest submission first."""
    accounts = await verification_service.list_pending_founders(session)
    return FounderVerificationQueueResponse(founders=[_verification_item(a) for a in accounts])


@router.put(
    "/users/{user_id}/documents/{doc_key}/verify",
    response_model=FounderVerificationEnvelope,
)
async def review_document(
    user_id: int,
    doc_key: str,
    body: DocumentReviewRequest,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> FounderVerificationEnvelope:
    with workflow_errors():
        account = await verification_service.review_document(
            session, user, user_id, doc_key, body.status, body.rejection_reason
        )
    if account is None:
        raise not_found("Document")
    return FounderVerificationEnvelope(founder=_verification_item(account))


@router.get(
    "/users/{user_id}/documents/{doc_key}/url",
    response_model=DocumentUrlResponse,
)
async def document_url(
    user_id: int,
    doc_key: str,
    session: AsyncSession = Depends(get_db),
) -> DocumentUrlResponse:
    url = await verification_service.get_document_url(
        session, user_id, doc_key, expires_in=_DOCUMENT_URL_TTL
    )
    if url is None:
        raise not_found("Document")
    return DocumentUrlResponse(url=url, expires_in=_DOCUMENT_URL_TTL)


@router.put("/users/{user_id}/verify", response_model=FounderVerificationEnvelope)
async def decide_verification(
    user_id: int,
    body: VerificationDecisionRequest,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> FounderVerificationEnvelope:
    """Approve or reject a pending founder. Rejection requires feedback."""
    with workflow_errors():
        account = await verification_service.decide_verification(
            session, user, user_id, body.status, body.feedback
        )
    if account is None:
        raise not_found("Founder")
    return FounderVerificationEnvelope(founder=_verification_item(account))


# ---------------------------------------------------------------------------
# Superadmin
# ---------------------------------------------------------------------------


@superadmin_router.post("/admins", response_model=UserResponse, status_code=201)
async def create_admin(
    body: CreateAdminRequest,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> UserResponse:
    try:
        account = await account_service.create_account(
            session,
            username=body.username,
            email=body.email,
            name=body.name,
            password=body.password,
            role=UserRole.ADMIN,
            actor=user,
        )
    except DuplicateAccountError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    logger.info("Admin %s created by superadmin %s", account.id, user.user_id)
    return UserResponse.from_account(account)


@superadmin_router.get("/admin-actions", response_model=AdminActionsResponse)
async def admin_actions(
    limit: int = Query(default=ADMIN_ACTIONS_LIMIT, ge=1, le=ADMIN_ACTIONS_LIMIT),
    session: AsyncSession = Depends(get_db),
) -> AdminActionsResponse:
    """Audit log, newest first."""
    events = await list_admin_actions(session, limit=limit)
    actions = [AdminActionItem.model_validate(e) for e in events]
    return AdminActionsResponse(count=len(actions), actions=actions)


@superadmin_router.get("/admins", response_model=AdminListResponse)
async def list_admins(session: AsyncSession = Depends(get_db)) -> AdminListResponse:
    accounts = await account_service.list_admins(session)
    return AdminListResponse(admins=[UserResponse.from_account(a) for a in accounts])


@superadmin_router.patch("/admins/{admin_id}", response_model=AdminEnvelope)
async def update_admin(
    admin_id: int,
    body: UpdateAdminRequest,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> AdminEnvelope:
    try:
        with workflow_errors():
            account = await account_service.update_admin(
                session,
                user,
                admin_id,
                name=body.name,
                email=body.email,
                password=body.password,
            )
    except DuplicateAccountError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    if account is None:
        raise not_found("Admin")
    return AdminEnvelope(admin=UserResponse.from_account(account))


@superadmin_router.delete("/admins/{admin_id}", response_model=MessageResponse)
async def delete_admin(
    admin_id: int,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> MessageResponse:
    with workflow_errors():
        deleted = await account_service.delete_admin(session, user, admin_id)
    if not deleted:
        raise not_found("Admin")
    return MessageResponse(message="Admin deleted successfully")


@users_router.get("/admins", response_model=AdminListResponse)
async def admin_directory(session: AsyncSession = Depends(get_db)) -> AdminListResponse:
    """Admin accounts, for staff assigning or handing over work."""
    accounts = await account_service.list_admins(session)
    return AdminListResponse(admins=[UserResponse.from_account(a) for a in accounts])
