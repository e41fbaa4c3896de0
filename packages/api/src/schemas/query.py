# This project was developed with assistance from AI tools.
"""Investor query (mediation record) request/response schemas.

Each party gets its own projection of an ``InvestorQuery``:

- investors never see the founder's raw reply, only the admin-approved one,
  and only once it has been delivered;
- founders never see the investor's raw question, only the admin-approved
  text;
- admins see everything plus advisory contact-info flags.

Counterpart names/emails appear only after both parties consented to reveal
their identities; until then each side sees the other's anonymous id.
"""

from datetime import datetime

from db.enums import QuerySource, QueryStatus
from pydantic import Field

from . import ApiModel, SuccessResponse

# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class ExpressInterestRequest(ApiModel):
    """Investor query against an approved product."""

    product_id: int
    product_name: str | None = Field(default=None, description="Informational only.")
    primary_intent: str = ""
    other_intent: str | None = Field(
        default=None,
        description="Free text required when primaryIntent is 'Other'.",
    )
    areas_of_interest: list[str] = Field(default_factory=list)
    original_question: str = ""


class InterestFormRequest(ApiModel):
    """Simpler expression of interest: a product and a free message."""

    product_id: int
    message_from_investor: str = ""


class ApproveTextRequest(ApiModel):
    approved_text: str = ""


class ApproveQueryRequest(ApproveTextRequest):
    """Same as ApproveTextRequest with the record id in the body."""

    query_id: int


class FounderResponseRequest(ApiModel):
    query_id: int
    founder_selected_topics: list[str] = Field(default_factory=list)
    founder_original_question: str = ""


class RejectQueryRequest(ApiModel):
    reason: str | None = Field(default=None, description="Kept admin-side; never shown to either party.")


# ---------------------------------------------------------------------------
# Projections
# ---------------------------------------------------------------------------


class _QueryViewBase(ApiModel):
    id: int
    product_id: int
    product_name: str
    source: QuerySource
    primary_intent: str
    areas_of_interest: list[str] = []
    status: QueryStatus
    identities_revealed: bool = False
    counterpart_name: str | None = None
    counterpart_email: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class InvestorQueryInvestorView(_QueryViewBase):
    """What the investor who asked sees."""

    founder_anonymous_id: str
    original_question: str
    founder_selected_topics: list[str] = []
    founder_response: str | None = None
    reveal_consent_given: bool = False

    @classmethod
    def from_record(cls, q) -> "InvestorQueryInvestorView":
        delivered = q.status == QueryStatus.DELIVERED_TO_INVESTOR
        revealed = bool(q.investor_reveal_consent and q.founder_reveal_consent)
        # The founder having replied is not the investor's business until delivery
        status = (
            QueryStatus.FORWARDED_TO_FOUNDER
            if q.status == QueryStatus.PENDING_RESPONSE_REVIEW
            else q.status
        )
        return cls(
            id=q.id,
            product_id=q.product_id,
            product_name=q.product.name,
            source=q.source,
            primary_intent=q.investor_primary_intent,
            areas_of_interest=list(q.investor_areas_of_interest or []),
            status=status,
            identities_revealed=revealed,
            counterpart_name=q.founder.name if revealed else None,
            counterpart_email=q.founder.email if revealed else None,
            created_at=q.created_at,
            updated_at=q.updated_at,
            founder_anonymous_id=q.founder.anonymous_id,
            original_question=q.investor_original_question,
            founder_selected_topics=list(q.founder_selected_topics or []) if delivered else [],
            founder_response=q.founder_response_admin_approved_text if delivered else None,
            reveal_consent_given=bool(q.investor_reveal_consent),
        )


class InvestorQueryFounderView(_QueryViewBase):
    """What the founder who owns the product sees."""

    investor_anonymous_id: str
    approved_question: str | None = None
    founder_selected_topics: list[str] = []
    founder_original_question: str | None = None
    founder_response_approved_text: str | None = None
    reveal_consent_given: bool = False

    @classmethod
    def from_record(cls, q) -> "InvestorQueryFounderView":
        revealed = bool(q.investor_reveal_consent and q.founder_reveal_consent)
        return cls(
            id=q.id,
            product_id=q.product_id,
            product_name=q.product.name,
            source=q.source,
            primary_intent=q.investor_primary_intent,
            areas_of_interest=list(q.investor_areas_of_interest or []),
            status=q.status,
            identities_revealed=revealed,
            counterpart_name=q.investor.name if revealed else None,
            counterpart_email=q.investor.email if revealed else None,
            created_at=q.created_at,
            updated_at=q.updated_at,
            investor_anonymous_id=q.investor.anonymous_id,
            approved_question=q.investor_query_admin_approved_text,
            founder_selected_topics=list(q.founder_selected_topics or []),
            founder_original_question=q.founder_original_question,
            founder_response_approved_text=q.founder_response_admin_approved_text,
            reveal_consent_given=bool(q.founder_reveal_consent),
        )


class InvestorQueryAdminView(ApiModel):
    """Full record for the mediating admin, including raw texts."""

    id: int
    product_id: int
    product_name: str
    investor_anonymous_id: str
    founder_anonymous_id: str
    source: QuerySource
    primary_intent: str
    areas_of_interest: list[str] = []
    investor_original_question: str
    investor_query_admin_approved_text: str | None = None
    investor_reviewed_by: str | None = None
    founder_selected_topics: list[str] = []
    founder_original_question: str | None = None
    founder_response_admin_approved_text: str | None = None
    founder_response_reviewed_by: str | None = None
    status: QueryStatus
    rejection_reason: str | None = None
    identities_revealed: bool = False
    contact_info_flags: dict[str, list[str]] = Field(
        default_factory=dict,
        description="Kinds of contact info spotted in each raw text. Advisory only.",
    )
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_record(cls, q, contact_info_flags: dict[str, list[str]] | None = None):
        return cls(
            id=q.id,
            product_id=q.product_id,
            product_name=q.product.name,
            investor_anonymous_id=q.investor.anonymous_id,
            founder_anonymous_id=q.founder.anonymous_id,
            source=q.source,
            primary_intent=q.investor_primary_intent,
            areas_of_interest=list(q.investor_areas_of_interest or []),
            investor_original_question=q.investor_original_question,
            investor_query_admin_approved_text=q.investor_query_admin_approved_text,
            investor_reviewed_by=q.investor_reviewed_by,
            founder_selected_topics=list(q.founder_selected_topics or []),
            founder_original_question=q.founder_original_question,
            founder_response_admin_approved_text=q.founder_response_admin_approved_text,
            founder_response_reviewed_by=q.founder_response_reviewed_by,
            status=q.status,
            rejection_reason=q.rejection_reason,
            identities_revealed=bool(q.investor_reveal_consent and q.founder_reveal_consent),
            contact_info_flags=contact_info_flags or {},
            created_at=q.created_at,
            updated_at=q.updated_at,
        )


# ---------------------------------------------------------------------------
# Envelopes
# ---------------------------------------------------------------------------


class InvestorQueryCreatedResponse(SuccessResponse):
    query: InvestorQueryInvestorView
    contact_info_warning: str


class InvestorInterestsResponse(SuccessResponse):
    queries: list[InvestorQueryInvestorView]


class FounderRequestsResponse(SuccessResponse):
    requests: list[InvestorQueryFounderView]


class FounderRespondResponse(SuccessResponse):
    query: InvestorQueryFounderView
    contact_info_warning: str


class AdminQueryResponse(SuccessResponse):
    query: InvestorQueryAdminView


class AdminRequestsResponse(SuccessResponse):
    requests: list[InvestorQueryAdminView]


class AdminFounderResponsesResponse(SuccessResponse):
    responses: list[InvestorQueryAdminView]


class AllQueriesResponse(SuccessResponse):
    queries: list[InvestorQueryAdminView]


class RevealConsentResponse(SuccessResponse):
    query: InvestorQueryInvestorView | InvestorQueryFounderView


class QueryOptionsResponse(SuccessResponse):
    """Choice lists for the investor and founder forms."""

    primary_intents: list[str]
    other_intent: str
    areas_of_interest: list[str]
    founder_topics: list[str]
