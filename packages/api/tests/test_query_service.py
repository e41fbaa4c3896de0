# This project was developed with assistance from AI tools.
"""Tests for the investor query mediation workflow."""

from unittest.mock import MagicMock, patch

import pytest
from db import InvestorQuery
from db.enums import QuerySource, QueryStatus, UserRole, VerificationStatus
from sqlalchemy.orm.exc import StaleDataError

from src.services.query import (
    INTEREST_FORM_INTENT,
    approve_founder_response,
    approve_investor_query,
    contact_info_flags,
    give_reveal_consent,
    normalize_primary_intent,
    reject_query,
    submit_founder_response,
    submit_interest_form,
    submit_investor_query,
)
from src.services.transitions import InvalidTransitionError, WorkflowValidationError

from .factories import (
    make_mock_product,
    make_mock_query,
    make_result,
    make_session,
    make_user_context,
)


def _investor():
    return make_user_context(user_id=1, role=UserRole.INVESTOR)


def _founder(status=VerificationStatus.APPROVED):
    return make_user_context(user_id=2, role=UserRole.FOUNDER, verification_status=status)


def _admin():
    return make_user_context(user_id=9, role=UserRole.ADMIN)


# ---------------------------------------------------------------------------
# Primary intent
# ---------------------------------------------------------------------------


def test_normalize_primary_intent_known_value():
    assert normalize_primary_intent("Debt Funding") == "Debt Funding"


def test_normalize_primary_intent_other_with_separate_text():
    assert normalize_primary_intent("Other", "Board seat") == "Other: Board seat"


def test_normalize_primary_intent_legacy_inline_form():
    assert normalize_primary_intent("Other: Joint venture") == "Other: Joint venture"


def test_normalize_primary_intent_other_without_text_rejected():
    with pytest.raises(WorkflowValidationError, match="describe your intent"):
        normalize_primary_intent("Other", "   ")


def test_normalize_primary_intent_blank_rejected():
    with pytest.raises(WorkflowValidationError, match="Primary intent is required"):
        normalize_primary_intent("")


def test_normalize_primary_intent_unknown_rejected():
    with pytest.raises(WorkflowValidationError, match="Unknown primary intent"):
        normalize_primary_intent("Crypto Airdrop")


# ---------------------------------------------------------------------------
# Submission
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_submit_investor_query_creates_pending_record():
    product = make_mock_product(id=10, founder_id=2)
    created = make_mock_query(id=501)
    session = make_session(
        make_result(single=product),  # approved product lookup
        make_result(),  # interest_count increment
        make_result(single=created),  # re-query with eager loading
    )

    with patch("src.services.query.notify") as mock_notify:
        result = await submit_investor_query(
            session,
            _investor(),
            product_id=10,
            primary_intent="Equity Investment",
            areas_of_interest=["Team & Experience", "Financials & Valuation", "Team & Experience"],
            original_question="  What is your runway?  ",
        )

    assert result is created
    added = [c.args[0] for c in session.add.call_args_list]
    record = next(obj for obj in added if isinstance(obj, InvestorQuery))
    assert record.status == QueryStatus.PENDING_ADMIN_REVIEW
    assert record.source == QuerySource.QUERY
    assert record.investor_id == 1
    assert record.founder_id == 2
    assert record.investor_original_question == "What is your runway?"
    assert record.investor_areas_of_interest == ["Financials & Valuation", "Team & Experience"]
    assert session.execute.await_count == 3
    session.commit.assert_awaited_once()
    mock_notify.assert_called_once()
    assert mock_notify.call_args.args[0] == "role:admin"
    assert mock_notify.call_args.args[1] == "investor-interest-submitted"


@pytest.mark.asyncio
async def test_submit_investor_query_missing_question_writes_nothing():
    session = make_session()

    with pytest.raises(WorkflowValidationError, match="Question is required"):
        await submit_investor_query(
            session,
            _investor(),
            product_id=10,
            primary_intent="Equity Investment",
            original_question="   ",
        )

    session.execute.assert_not_awaited()
    session.add.assert_not_called()
    session.commit.assert_not_awaited()


@pytest.mark.asyncio
async def test_submit_investor_query_unapproved_product_returns_none():
    session = make_session(make_result(single=None))

    result = await submit_investor_query(
        session,
        _investor(),
        product_id=10,
        primary_intent="Equity Investment",
        original_question="Hello?",
    )

    assert result is None
    session.add.assert_not_called()
    session.commit.assert_not_awaited()


@pytest.mark.asyncio
async def test_submit_interest_form_uses_same_workflow():
    product = make_mock_product(id=10, founder_id=2)
    session = make_session(
        make_result(single=product),
        make_result(),
        make_result(single=make_mock_query(source=QuerySource.INTEREST_FORM)),
    )

    with patch("src.services.query.notify"):
        await submit_interest_form(session, _investor(), product_id=10, message="Keen to learn more")

    record = next(
        c.args[0] for c in session.add.call_args_list if isinstance(c.args[0], InvestorQuery)
    )
    assert record.source == QuerySource.INTEREST_FORM
    assert record.investor_primary_intent == INTEREST_FORM_INTENT
    assert record.investor_original_question == "Keen to learn more"
    assert record.status == QueryStatus.PENDING_ADMIN_REVIEW


@pytest.mark.asyncio
async def test_submit_interest_form_requires_message():
    with pytest.raises(WorkflowValidationError):
        await submit_interest_form(make_session(), _investor(), product_id=10, message="")


# ---------------------------------------------------------------------------
# Admin approval of the investor text
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_approve_investor_query_forwards_exact_text():
    record = make_mock_query(status=QueryStatus.PENDING_ADMIN_REVIEW)
    session = make_session(make_result(single=record))

    with patch("src.services.query.notify") as mock_notify:
        result = await approve_investor_query(
            session, _admin(), 100, "What is your monthly burn?"
        )

    assert result.status == QueryStatus.FORWARDED_TO_FOUNDER
    assert result.investor_query_admin_approved_text == "What is your monthly burn?"
    assert result.investor_reviewed_by == "9"
    session.commit.assert_awaited_once()
    mock_notify.assert_called_once_with(
        "user:2", "investor-query-approved", {"queryId": 100, "productId": 10}
    )


@pytest.mark.asyncio
async def test_approve_investor_query_empty_text_is_validation_error():
    record = make_mock_query(status=QueryStatus.PENDING_ADMIN_REVIEW)
    session = make_session(make_result(single=record))

    with pytest.raises(WorkflowValidationError, match="Approved text is required"):
        await approve_investor_query(session, _admin(), 100, "  ")

    assert record.status == QueryStatus.PENDING_ADMIN_REVIEW
    session.commit.assert_not_awaited()


@pytest.mark.asyncio
async def test_approve_investor_query_wrong_status_conflicts():
    record = make_mock_query(status=QueryStatus.FORWARDED_TO_FOUNDER)
    session = make_session(make_result(single=record))

    with pytest.raises(InvalidTransitionError, match="forwarded_to_founder"):
        await approve_investor_query(session, _admin(), 100, "Edited text")

    assert record.investor_query_admin_approved_text is None
    session.commit.assert_not_awaited()


@pytest.mark.asyncio
async def test_approve_investor_query_not_found():
    session = make_session(make_result(single=None))
    assert await approve_investor_query(session, _admin(), 404, "text") is None


@pytest.mark.asyncio
async def test_concurrent_approval_surfaces_as_conflict():
    """Nothing is flushed before commit, so a stale version surfaces there as a conflict."""
    record = make_mock_query(status=QueryStatus.PENDING_ADMIN_REVIEW)
    session = make_session(make_result(single=record))
    session.commit.side_effect = StaleDataError("version mismatch")

    with patch("src.services.query.notify") as mock_notify:
        with pytest.raises(InvalidTransitionError, match="modified by another request"):
            await approve_investor_query(session, _admin(), 100, "Approved")

    session.flush.assert_not_awaited()
    session.rollback.assert_awaited_once()
    mock_notify.assert_not_called()


# ---------------------------------------------------------------------------
# Founder response
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_founder_response_moves_to_response_review():
    record = make_mock_query(status=QueryStatus.FORWARDED_TO_FOUNDER, approved_question="Burn?")
    session = make_session(make_result(single=record))

    with patch("src.services.query.notify") as mock_notify:
        result = await submit_founder_response(
            session,
            _founder(),
            query_id=100,
            selected_topics=["Time Horizon", "Investment Criteria"],
            response_text="About 80k per month.",
        )

    assert result.status == QueryStatus.PENDING_RESPONSE_REVIEW
    assert result.founder_original_question == "About 80k per month."
    assert result.founder_selected_topics == ["Investment Criteria", "Time Horizon"]
    assert mock_notify.call_args.args[:2] == ("role:admin", "founder-response-submitted")


@pytest.mark.asyncio
async def test_founder_response_requires_text():
    session = make_session()
    with pytest.raises(WorkflowValidationError, match="Response is required"):
        await submit_founder_response(
            session, _founder(), query_id=100, selected_topics=[], response_text=""
        )
    session.execute.assert_not_awaited()


@pytest.mark.asyncio
async def test_founder_response_on_unforwarded_record_conflicts():
    record = make_mock_query(status=QueryStatus.PENDING_ADMIN_REVIEW)
    session = make_session(make_result(single=record))

    with pytest.raises(InvalidTransitionError):
        await submit_founder_response(
            session, _founder(), query_id=100, selected_topics=[], response_text="Hi"
        )
    assert record.status == QueryStatus.PENDING_ADMIN_REVIEW


@pytest.mark.asyncio
async def test_founder_response_on_someone_elses_record_not_found():
    """Scope filtering leaves no row for a founder who does not own the record."""
    session = make_session(make_result(single=None))
    result = await submit_founder_response(
        session, _founder(), query_id=100, selected_topics=[], response_text="Hi"
    )
    assert result is None


# ---------------------------------------------------------------------------
# Delivery and rejection
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_approve_founder_response_delivers_to_investor():
    record = make_mock_query(
        status=QueryStatus.PENDING_RESPONSE_REVIEW, founder_response="80k a month, call me"
    )
    session = make_session(make_result(single=record))

    with patch("src.services.query.notify") as mock_notify:
        result = await approve_founder_response(session, _admin(), 100, "About 80k per month.")

    assert result.status == QueryStatus.DELIVERED_TO_INVESTOR
    assert result.founder_response_admin_approved_text == "About 80k per month."
    assert result.founder_response_reviewed_by == "9"
    mock_notify.assert_called_once_with(
        "user:1", "founder-response-approved", {"queryId": 100, "productId": 10}
    )


@pytest.mark.asyncio
async def test_approve_founder_response_wrong_status_conflicts():
    record = make_mock_query(status=QueryStatus.FORWARDED_TO_FOUNDER)
    session = make_session(make_result(single=record))
    with pytest.raises(InvalidTransitionError):
        await approve_founder_response(session, _admin(), 100, "text")


@pytest.mark.asyncio
async def test_reject_before_forwarding_signals_investor_only():
    record = make_mock_query(status=QueryStatus.PENDING_ADMIN_REVIEW)
    session = make_session(make_result(single=record))

    with patch("src.services.query.notify") as mock_notify:
        result = await reject_query(session, _admin(), 100, "Contains a phone number")

    assert result.status == QueryStatus.REJECTED
    assert result.rejection_reason == "Contains a phone number"
    mock_notify.assert_called_once_with(["user:1"], "query-rejected", {"queryId": 100})


@pytest.mark.asyncio
async def test_reject_founder_response_signals_both_parties():
    record = make_mock_query(status=QueryStatus.PENDING_RESPONSE_REVIEW)
    session = make_session(make_result(single=record))

    with patch("src.services.query.notify") as mock_notify:
        await reject_query(session, _admin(), 100)

    topics = mock_notify.call_args.args[0]
    assert topics == ["user:1", "user:2"]
    # Generic signal only, no text
    assert mock_notify.call_args.args[2] == {"queryId": 100}


@pytest.mark.asyncio
async def test_reject_terminal_record_conflicts():
    for status in (QueryStatus.DELIVERED_TO_INVESTOR, QueryStatus.REJECTED):
        record = make_mock_query(status=status)
        session = make_session(make_result(single=record))
        with pytest.raises(InvalidTransitionError, match="terminal"):
            await reject_query(session, _admin(), 100)


@pytest.mark.asyncio
async def test_reject_forwarded_record_conflicts():
    """While the founder holds the record there is nothing for the admin to reject."""
    record = make_mock_query(status=QueryStatus.FORWARDED_TO_FOUNDER)
    session = make_session(make_result(single=record))
    with pytest.raises(InvalidTransitionError):
        await reject_query(session, _admin(), 100)


# ---------------------------------------------------------------------------
# Identity reveal
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_reveal_consent_first_party_asks_counterpart():
    record = make_mock_query(status=QueryStatus.DELIVERED_TO_INVESTOR)
    session = make_session(make_result(single=record))

    with patch("src.services.query.notify") as mock_notify:
        await give_reveal_consent(session, _investor(), 100)

    assert record.investor_reveal_consent is True
    assert record.founder_reveal_consent is False
    mock_notify.assert_called_once_with("user:2", "reveal-consent-requested", {"queryId": 100})


@pytest.mark.asyncio
async def test_reveal_consent_second_party_reveals():
    record = make_mock_query(status=QueryStatus.DELIVERED_TO_INVESTOR, investor_consent=True)
    session = make_session(make_result(single=record))

    with patch("src.services.query.notify") as mock_notify:
        await give_reveal_consent(session, _founder(), 100)

    assert record.founder_reveal_consent is True
    assert mock_notify.call_args.args[1] == "identities-revealed"


@pytest.mark.asyncio
async def test_reveal_consent_before_delivery_conflicts():
    record = make_mock_query(status=QueryStatus.PENDING_RESPONSE_REVIEW)
    session = make_session(make_result(single=record))
    with pytest.raises(InvalidTransitionError, match="delivered"):
        await give_reveal_consent(session, _investor(), 100)


@pytest.mark.asyncio
async def test_reveal_consent_by_admin_conflicts():
    record = make_mock_query(status=QueryStatus.DELIVERED_TO_INVESTOR)
    session = make_session(make_result(single=record))
    with pytest.raises(InvalidTransitionError):
        await give_reveal_consent(session, _admin(), 100)


# ---------------------------------------------------------------------------
# Contact-info flags
# ---------------------------------------------------------------------------


def test_contact_info_flags_per_field():
    record = MagicMock()
    record.investor_original_question = "Email me at vc@fund.example or visit www.fund.example"
    record.founder_original_question = "Call +1 415 555 0100"
    flags = contact_info_flags(record)
    assert flags == {
        "investorOriginalQuestion": ["email", "url"],
        "founderOriginalQuestion": ["phone"],
    }


def test_contact_info_flags_clean_text():
    record = MagicMock()
    record.investor_original_question = "What is your go-to-market plan?"
    record.founder_original_question = None
    assert contact_info_flags(record) == {}
