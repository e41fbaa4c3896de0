# This project was developed with assistance from AI tools.
"""Mediated investor/founder query routes.

Every record passes through an admin before the other party sees any text.
Investors and founders only ever get their own role-specific projection;
admins get the full record with advisory contact-info flags.
"""

from db import get_db
from db.enums import QueryStatus, UserRole
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..middleware.auth import CurrentUser, VerifiedFounder, require_roles
from ..schemas.query import (
    AdminFounderResponsesResponse,
    AdminQueryResponse,
    AdminRequestsResponse,
    AllQueriesResponse,
    ApproveQueryRequest,
    ApproveTextRequest,
    ExpressInterestRequest,
    FounderRequestsResponse,
    FounderRespondResponse,
    FounderResponseRequest,
    InvestorInterestsResponse,
    InvestorQueryAdminView,
    InvestorQueryCreatedResponse,
    InvestorQueryFounderView,
    InvestorQueryInvestorView,
    QueryOptionsResponse,
    RejectQueryRequest,
    RevealConsentResponse,
)
from ..services import query as query_service
from ..services.contact_flags import CONTACT_INFO_WARNING
from ._errors import not_found, workflow_errors

router = APIRouter()

_ADMIN_ROLES = (UserRole.ADMIN, UserRole.SUPERADMIN)


def _admin_view(record) -> InvestorQueryAdminView:
    return InvestorQueryAdminView.from_record(record, query_service.contact_info_flags(record))


@router.get("/options", response_model=QueryOptionsResponse)
async def query_options(user: CurrentUser) -> QueryOptionsResponse:
    return QueryOptionsResponse(
        primary_intents=list(query_service.PRIMARY_INTENTS),
        other_intent=query_service.OTHER_INTENT,
        areas_of_interest=list(query_service.AREAS_OF_INTEREST),
        founder_topics=list(query_service.FOUNDER_TOPICS),
    )


# ---------------------------------------------------------------------------
# Investor
# ---------------------------------------------------------------------------


@router.post(
    "/investor/express-interest",
    response_model=InvestorQueryCreatedResponse,
    status_code=201,
    dependencies=[Depends(require_roles(UserRole.INVESTOR))],
)
async def express_interest(
    body: ExpressInterestRequest,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> InvestorQueryCreatedResponse:
    with workflow_errors():
        record = await query_service.submit_investor_query(
            session,
            user,
            product_id=body.product_id,
            primary_intent=body.primary_intent,
            other_intent=body.other_intent,
            areas_of_interest=body.areas_of_interest,
            original_question=body.original_question,
        )
    if record is None:
        raise not_found("Product")
    return InvestorQueryCreatedResponse(
        query=InvestorQueryInvestorView.from_record(record),
        contact_info_warning=CONTACT_INFO_WARNING,
    )


@router.get(
    "/investor/my-interests",
    response_model=InvestorInterestsResponse,
    dependencies=[Depends(require_roles(UserRole.INVESTOR))],
)
async def my_interests(
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> InvestorInterestsResponse:
    records = await query_service.list_investor_interests(session, user)
    return InvestorInterestsResponse(
        queries=[InvestorQueryInvestorView.from_record(q) for q in records]
    )


# ---------------------------------------------------------------------------
# Founder
# ---------------------------------------------------------------------------


@router.get(
    "/founder/responses",
    response_model=FounderRequestsResponse,
    dependencies=[Depends(require_roles(UserRole.FOUNDER))],
)
async def founder_requests(
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> FounderRequestsResponse:
    records = await query_service.list_founder_requests(session, user)
    return FounderRequestsResponse(
        requests=[InvestorQueryFounderView.from_record(q) for q in records]
    )


@router.post(
    "/founder/respond-to-request",
    response_model=FounderRespondResponse,
)
async def respond_to_request(
    body: FounderResponseRequest,
    user: VerifiedFounder,
    session: AsyncSession = Depends(get_db),
) -> FounderRespondResponse:
    """Founder reply. Goes to the admin queue, not to the investor."""
    with workflow_errors():
        record = await query_service.submit_founder_response(
            session,
            user,
            query_id=body.query_id,
            selected_topics=body.founder_selected_topics,
            response_text=body.founder_original_question,
        )
    if record is None:
        raise not_found("Query")
    return FounderRespondResponse(
        query=InvestorQueryFounderView.from_record(record),
        contact_info_warning=CONTACT_INFO_WARNING,
    )


# ---------------------------------------------------------------------------
# Admin
# ---------------------------------------------------------------------------


@router.get(
    "/admin/pending",
    response_model=AdminRequestsResponse,
    dependencies=[Depends(require_roles(*_ADMIN_ROLES))],
)
async def admin_pending(session: AsyncSession = Depends(get_db)) -> AdminRequestsResponse:
    records = await query_service.list_by_status(session, QueryStatus.PENDING_ADMIN_REVIEW)
    return AdminRequestsResponse(requests=[_admin_view(q) for q in records])


@router.get(
    "/admin/investor-requests",
    response_model=AdminRequestsResponse,
    dependencies=[Depends(require_roles(*_ADMIN_ROLES))],
)
async def admin_investor_requests(
    session: AsyncSession = Depends(get_db),
) -> AdminRequestsResponse:
    records = await query_service.list_by_status(session, QueryStatus.PENDING_ADMIN_REVIEW)
    return AdminRequestsResponse(requests=[_admin_view(q) for q in records])


@router.get(
    "/admin/founder-responses",
    response_model=AdminFounderResponsesResponse,
    dependencies=[Depends(require_roles(*_ADMIN_ROLES))],
)
async def admin_founder_responses(
    session: AsyncSession = Depends(get_db),
) -> AdminFounderResponsesResponse:
    records = await query_service.list_by_status(session, QueryStatus.PENDING_RESPONSE_REVIEW)
    return AdminFounderResponsesResponse(responses=[_admin_view(q) for q in records])


async def _approve_investor_text(session, user, query_id: int, text: str) -> AdminQueryResponse:
    with workflow_errors():
        record = await query_service.approve_investor_query(session, user, query_id, text)
    if record is None:
        raise not_found("Query")
    return AdminQueryResponse(query=_admin_view(record))


@router.post(
    "/admin/send-to-founder/{query_id}",
    response_model=AdminQueryResponse,
    dependencies=[Depends(require_roles(*_ADMIN_ROLES))],
)
async def send_to_founder(
    query_id: int,
    body: ApproveTextRequest,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> AdminQueryResponse:
    """Forward the (possibly edited) investor question to the founder."""
    return await _approve_investor_text(session, user, query_id, body.approved_text)


@router.post(
    "/admin/approve",
    response_model=AdminQueryResponse,
    dependencies=[Depends(require_roles(*_ADMIN_ROLES))],
)
async def approve_query(
    body: ApproveQueryRequest,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> AdminQueryResponse:
    return await _approve_investor_text(session, user, body.query_id, body.approved_text)


@router.post(
    "/admin/approve-founder-response/{query_id}",
    response_model=AdminQueryResponse,
    dependencies=[Depends(require_roles(*_ADMIN_ROLES))],
)
async def approve_founder_response(
    query_id: int,
    body: ApproveTextRequest,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> AdminQueryResponse:
    with workflow_errors():
        record = await query_service.approve_founder_response(
            session, user, query_id, body.approved_text
        )
    if record is None:
        raise not_found("Query")
    return AdminQueryResponse(query=_admin_view(record))


@router.post(
    "/admin/reject/{query_id}",
    response_model=AdminQueryResponse,
    dependencies=[Depends(require_roles(*_ADMIN_ROLES))],
)
async def reject_query(
    query_id: int,
    user: CurrentUser,
    body: RejectQueryRequest | None = None,
    session: AsyncSession = Depends(get_db),
) -> AdminQueryResponse:
    with workflow_errors():
        record = await query_service.reject_query(
            session, user, query_id, body.reason if body else None
        )
    if record is None:
        raise not_found("Query")
    return AdminQueryResponse(query=_admin_view(record))


@router.get(
    "/superadmin/all",
    response_model=AllQueriesResponse,
    dependencies=[Depends(require_roles(UserRole.SUPERADMIN))],
)
async def all_queries(session: AsyncSession = Depends(get_db)) -> AllQueriesResponse:
    records = await query_service.list_all_queries(session)
    return AllQueriesResponse(queries=[_admin_view(q) for q in records])


# ---------------------------------------------------------------------------
# Identity reveal
# ---------------------------------------------------------------------------


@router.post(
    "/{query_id}/reveal-consent",
    response_model=RevealConsentResponse,
    dependencies=[Depends(require_roles(UserRole.INVESTOR, UserRole.FOUNDER))],
)
async def reveal_consent(
    query_id: int,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> RevealConsentResponse:
    """Record the caller's consent to share name and email with the counterpart."""
    with workflow_errors():
        record = await query_service.give_reveal_consent(session, user, query_id)
    if record is None:
        raise not_found("Query")
    if user.role == UserRole.FOUNDER:
        return RevealConsentResponse(query=InvestorQueryFounderView.from_record(record))
    return RevealConsentResponse(query=InvestorQueryInvestorView.from_record(record))
