# This project was developed with assistance from AI tools.
"""Investor query mediation workflow.

An investor's question about a product never reaches the founder directly:

    pending_admin_review --(admin approves text)--> forwarded_to_founder
    forwarded_to_founder --(founder replies)------> pending_response_review
    pending_response_review --(admin approves)----> delivered_to_investor
    pending_admin_review | pending_response_review --(admin rejects)--> rejected

Every handler loads the record, checks its current status against
``QueryStatus.valid_transitions()`` and only then mutates it. The version
column turns a concurrent writer that passed the same check into a conflict
at commit. Approved texts are always exactly what the admin submitted; the
raw texts are kept for the admin but never projected to the other party.

Not-found and out-of-scope records both return None (the route maps to 404).
"""

import logging

from db import InvestorQuery, Product
from db.enums import ProductStatus, QuerySource, QueryStatus, UserRole
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from ..schemas.auth import UserContext
from .audit import write_audit_event
from .contact_flags import detect_contact_info
from .notifications import ADMIN_TOPIC, notify, user_topic
from .scope import apply_data_scope
from .transitions import (
    InvalidTransitionError,
    WorkflowValidationError,
    check_transition,
    commit_transition,
    normalize_tag_set,
    require_text,
)

logger = logging.getLogger(__name__)

PRIMARY_INTENTS = (
    "Equity Investment",
    "Debt Funding",
    "Strategic Partnership",
    "Clinical Trials",
    "Technology Licensing",
    "Acquisition Interest",
    "Mentorship/Advisory",
)
OTHER_INTENT = "Other"
INTEREST_FORM_INTENT = "Expression of Interest"

AREAS_OF_INTEREST = (
    "Financials & Valuation",
    "Market Opportunity & Size",
    "Team & Experience",
    "Technology & IP",
    "Product Roadmap",
    "Customer Acquisition",
    "Regulatory & Legal",
    "Exit Strategy",
    "Sustainability & ESG",
    "Partnerships & Channels",
    "Competitor Analysis",
)

FOUNDER_TOPICS = (
    "Clarify Investor Requirements",
    "Investment Criteria",
    "Value-Add Beyond Funding",
    "Time Horizon",
    "Portfolio Companies",
    "Decision Process",
    "Market Insights",
    "Next Steps",
)

_VALID = QueryStatus.valid_transitions()


def normalize_primary_intent(primary_intent: str | None, other_intent: str | None = None) -> str:
    """Validate the investor's primary intent and return its stored form.

    ``Other`` needs accompanying free text, given either separately or in
    the ``"Other: <text>"`` form older clients send. Stored as ``Other: <text>``.
    """
    intent = (primary_intent or "").strip()
    if not intent:
        raise WorkflowValidationError("Primary intent is required")

    if intent == OTHER_INTENT or intent.startswith(f"{OTHER_INTENT}:"):
        inline = intent[len(OTHER_INTENT) :].lstrip(":").strip()
        detail = inline or (other_intent or "").strip()
        if not detail:
            raise WorkflowValidationError("Please describe your intent when choosing 'Other'")
        return f"{OTHER_INTENT}: {detail}"

    if intent not in PRIMARY_INTENTS:
        raise WorkflowValidationError(
            f"Unknown primary intent '{intent}'. "
            f"Choose one of {', '.join(PRIMARY_INTENTS)} or '{OTHER_INTENT}'."
        )
    return intent


def contact_info_flags(q: InvestorQuery) -> dict[str, list[str]]:
    """Advisory hints for the reviewing admin, keyed by raw text field."""
    flags = {}
    investor = detect_contact_info(q.investor_original_question)
    if investor:
        flags["investorOriginalQuestion"] = investor
    founder = detect_contact_info(q.founder_original_question)
    if founder:
        flags["founderOriginalQuestion"] = founder
    return flags


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------


def _base_query():
    return select(InvestorQuery).options(
        joinedload(InvestorQuery.product),
        joinedload(InvestorQuery.investor),
        joinedload(InvestorQuery.founder),
    )


def _owner_column(user: UserContext):
    if user.role == UserRole.FOUNDER:
        return InvestorQuery.founder_id
    return InvestorQuery.investor_id


async def get_query(
    session: AsyncSession,
    user: UserContext,
    query_id: int,
) -> InvestorQuery | None:
    """Return a record if the caller is a party to it (or staff)."""
    stmt = _base_query().where(InvestorQuery.id == query_id)
    stmt = apply_data_scope(stmt, user.data_scope, _owner_column(user))
    result = await session.execute(stmt)
    return result.unique().scalar_one_or_none()


async def _list(session: AsyncSession, stmt) -> list[InvestorQuery]:
    result = await session.execute(stmt.order_by(InvestorQuery.created_at.desc()))
    return list(result.unique().scalars().all())


async def list_investor_interests(session: AsyncSession, user: UserContext) -> list[InvestorQuery]:
    """All records the investor created, any status."""
    stmt = _base_query().where(InvestorQuery.investor_id == user.user_id)
    return await _list(session, stmt)


async def list_founder_requests(session: AsyncSession, user: UserContext) -> list[InvestorQuery]:
    """Records forwarded to the founder. Unreviewed or rejected-before-forwarding ones never show."""
    stmt = _base_query().where(
        InvestorQuery.founder_id == user.user_id,
        InvestorQuery.status.in_(QueryStatus.founder_visible_statuses()),
    )
    return await _list(session, stmt)


async def list_by_status(session: AsyncSession, status: QueryStatus) -> list[InvestorQuery]:
    """Admin queue for one review stage."""
    return await _list(session, _base_query().where(InvestorQuery.status == status))


async def list_all_queries(session: AsyncSession) -> list[InvestorQuery]:
    """Superadmin oversight: every record."""
    return await _list(session, _base_query())


# ---------------------------------------------------------------------------
# Creation
# ---------------------------------------------------------------------------


async def _create(
    session: AsyncSession,
    user: UserContext,
    *,
    product_id: int,
    source: QuerySource,
    primary_intent: str,
    areas_of_interest: list[str],
    original_question: str,
) -> InvestorQuery | None:
    result = await session.execute(
        select(Product).where(
            Product.id == product_id,
            Product.status == ProductStatus.APPROVED,
        )
    )
    product = result.scalar_one_or_none()
    if product is None:
        return None

    record = InvestorQuery(
        product_id=product.id,
        investor_id=user.user_id,
        founder_id=product.founder_id,
        source=source,
        investor_primary_intent=primary_intent,
        investor_areas_of_interest=areas_of_interest,
        investor_original_question=original_question,
        founder_selected_topics=[],
        status=QueryStatus.PENDING_ADMIN_REVIEW,
    )
    session.add(record)
    await session.flush()

    # Column arithmetic so concurrent submissions never lose an increment
    await session.execute(
        update(Product)
        .where(Product.id == product.id)
        .values(interest_count=Product.interest_count + 1)
    )

    await write_audit_event(
        session,
        event_type="investor_query_submitted",
        user=user,
        target_type="query",
        target_id=record.id,
        event_data={"product_id": product.id, "source": source.value},
    )
    query_id = record.id  # capture before commit
    await session.commit()
    logger.info("Query %s created by investor %s for product %s", query_id, user.user_id, product.id)

    notify(
        ADMIN_TOPIC,
        "investor-interest-submitted",
        {"queryId": query_id, "productId": product.id, "source": source.value},
    )
    # Re-query with eager loading to avoid lazy-load in async context
    return await get_query(session, user, query_id)


async def submit_investor_query(
    session: AsyncSession,
    user: UserContext,
    *,
    product_id: int,
    primary_intent: str | None,
    other_intent: str | None = None,
    areas_of_interest: list[str] | None = None,
    original_question: str | None,
) -> InvestorQuery | None:
    """Create a record in ``pending_admin_review``.

    Raises WorkflowValidationError before anything is written when the
    intent or question is missing. Returns None when the product does not
    exist or is not approved.
    """
    intent = normalize_primary_intent(primary_intent, other_intent)
    question = require_text(original_question, "Question")
    return await _create(
        session,
        user,
        product_id=product_id,
        source=QuerySource.QUERY,
        primary_intent=intent,
        areas_of_interest=normalize_tag_set(areas_of_interest),
        original_question=question,
    )


async def submit_interest_form(
    session: AsyncSession,
    user: UserContext,
    *,
    product_id: int,
    message: str | None,
) -> InvestorQuery | None:
    """The short interest form feeds the same mediation workflow."""
    text = require_text(message, "Message")
    return await _create(
        session,
        user,
        product_id=product_id,
        source=QuerySource.INTEREST_FORM,
        primary_intent=INTEREST_FORM_INTENT,
        areas_of_interest=[],
        original_question=text,
    )


# ---------------------------------------------------------------------------
# Transitions
# ---------------------------------------------------------------------------


async def approve_investor_query(
    session: AsyncSession,
    user: UserContext,
    query_id: int,
    approved_text: str | None,
) -> InvestorQuery | None:
    """Admin forwards the (possibly edited) investor text to the founder."""
    text = require_text(approved_text, "Approved text")
    record = await get_query(session, user, query_id)
    if record is None:
        return None

    check_transition(record.status, QueryStatus.FORWARDED_TO_FOUNDER, _VALID, label=f"Query {query_id}")

    record.investor_query_admin_approved_text = text
    record.investor_reviewed_by = str(user.user_id)
    record.status = QueryStatus.FORWARDED_TO_FOUNDER

    await write_audit_event(
        session,
        event_type="investor_query_forwarded",
        user=user,
        target_type="query",
        target_id=record.id,
        event_data={"edited": text != record.investor_original_question.strip()},
    )
    await commit_transition(session, f"Query {query_id}")
    logger.info("Query %s forwarded to founder %s", query_id, record.founder_id)

    notify(
        user_topic(record.founder_id),
        "investor-query-approved",
        {"queryId": record.id, "productId": record.product_id},
    )
    return record


async def submit_founder_response(
    session: AsyncSession,
    user: UserContext,
    *,
    query_id: int,
    selected_topics: list[str] | None,
    response_text: str | None,
) -> InvestorQuery | None:
    """Founder replies to a forwarded record; the reply goes to admin review.

    The verification gate is enforced by the route dependency.
    """
    text = require_text(response_text, "Response")
    record = await get_query(session, user, query_id)
    if record is None:
        return None

    check_transition(
        record.status, QueryStatus.PENDING_RESPONSE_REVIEW, _VALID, label=f"Query {query_id}"
    )

    record.founder_selected_topics = normalize_tag_set(selected_topics)
    record.founder_original_question = text
    record.status = QueryStatus.PENDING_RESPONSE_REVIEW

    await write_audit_event(
        session,
        event_type="founder_response_submitted",
        user=user,
        target_type="query",
        target_id=record.id,
        event_data={"topics": record.founder_selected_topics},
    )
    await commit_transition(session, f"Query {query_id}")
    logger.info("Founder %s responded to query %s", user.user_id, query_id)

    notify(ADMIN_TOPIC, "founder-response-submitted", {"queryId": record.id})
    return record


async def approve_founder_response(
    session: AsyncSession,
    user: UserContext,
    query_id: int,
    approved_text: str | None,
) -> InvestorQuery | None:
    """Admin delivers the (possibly edited) founder reply to the investor."""
    text = require_text(approved_text, "Approved text")
    record = await get_query(session, user, query_id)
    if record is None:
        return None

    check_transition(
        record.status, QueryStatus.DELIVERED_TO_INVESTOR, _VALID, label=f"Query {query_id}"
    )

    record.founder_response_admin_approved_text = text
    record.founder_response_reviewed_by = str(user.user_id)
    record.status = QueryStatus.DELIVERED_TO_INVESTOR

    await write_audit_event(
        session,
        event_type="founder_response_delivered",
        user=user,
        target_type="query",
        target_id=record.id,
    )
    await commit_transition(session, f"Query {query_id}")
    logger.info("Query %s delivered to investor %s", query_id, record.investor_id)

    notify(
        user_topic(record.investor_id),
        "founder-response-approved",
        {"queryId": record.id, "productId": record.product_id},
    )
    return record


async def reject_query(
    session: AsyncSession,
    user: UserContext,
    query_id: int,
    reason: str | None = None,
) -> InvestorQuery | None:
    """Admin rejects at either review point. Terminal.

    Only a generic signal goes out: to the investor when rejected before
    forwarding, to both parties when the founder's reply is rejected.
    """
    record = await get_query(session, user, query_id)
    if record is None:
        return None

    previous = record.status
    check_transition(previous, QueryStatus.REJECTED, _VALID, label=f"Query {query_id}")

    record.status = QueryStatus.REJECTED
    record.rejection_reason = (reason or "").strip() or None

    await write_audit_event(
        session,
        event_type="query_rejected",
        user=user,
        target_type="query",
        target_id=record.id,
        event_data={"from_status": previous.value},
    )
    await commit_transition(session, f"Query {query_id}")
    logger.info("Query %s rejected at %s", query_id, previous.value)

    recipients = [user_topic(record.investor_id)]
    if previous == QueryStatus.PENDING_RESPONSE_REVIEW:
        recipients.append(user_topic(record.founder_id))
    notify(recipients, "query-rejected", {"queryId": record.id})
    return record


async def give_reveal_consent(
    session: AsyncSession,
    user: UserContext,
    query_id: int,
) -> InvestorQuery | None:
    """Record one party's consent to reveal identities on a delivered record.

    Identities are shown once both the investor and the founder consented.
    """
    record = await get_query(session, user, query_id)
    if record is None:
        return None
    if user.role not in (UserRole.INVESTOR, UserRole.FOUNDER):
        raise InvalidTransitionError("Only the investor or founder of a query can reveal identities")
    if record.status != QueryStatus.DELIVERED_TO_INVESTOR:
        raise InvalidTransitionError(
            f"Identities can only be revealed once the exchange is delivered "
            f"(query {query_id} is '{record.status.value}')."
        )

    if user.role == UserRole.INVESTOR:
        record.investor_reveal_consent = True
        counterpart = record.founder_id
    else:
        record.founder_reveal_consent = True
        counterpart = record.investor_id

    await write_audit_event(
        session,
        event_type="identity_reveal_consent",
        user=user,
        target_type="query",
        target_id=record.id,
    )
    await commit_transition(session, f"Query {query_id}")

    if record.investor_reveal_consent and record.founder_reveal_consent:
        notify(
            [user_topic(record.investor_id), user_topic(record.founder_id)],
            "identities-revealed",
            {"queryId": record.id},
        )
    else:
        notify(user_topic(counterpart), "reveal-consent-requested", {"queryId": record.id})
    return record
