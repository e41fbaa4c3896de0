# This project was developed with assistance from AI tools.
"""Founder self-service: verification status and dashboard gating."""

from db import get_db
from db.enums import UserRole
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..middleware.auth import CurrentUser, require_roles
from ..schemas.verification import FounderDashboardResponse, VerificationStatusResponse
from ..services import verification as verification_service
from ._errors import not_found

router = APIRouter(dependencies=[Depends(require_roles(UserRole.FOUNDER))])


@router.get("/verification", response_model=VerificationStatusResponse)
async def verification_status(
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> VerificationStatusResponse:
    account = await verification_service.get_founder_account(session, user)
    if account is None:
        raise not_found("Founder account")
    return VerificationStatusResponse(
        verification_status=verification_service.current_status(account),
        feedback=account.verification_feedback,
        documents=verification_service.document_entries(account),
        missing_documents=verification_service.missing_documents(account.documents),
    )


@router.get("/dashboard", response_model=FounderDashboardResponse)
async def founder_dashboard(
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> FounderDashboardResponse:
    """Read the status from the database, not the session, so approval takes effect at once."""
    account = await verification_service.get_founder_account(session, user)
    if account is None:
        raise not_found("Founder account")
    decision = verification_service.resolve_founder_dashboard(
        account.verification_status, account.verification_feedback
    )
    return FounderDashboardResponse(**decision)
