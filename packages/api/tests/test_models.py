# This project was developed with assistance from AI tools.
"""
Domain model structure tests
"""

from db.enums import (
    CallRequestStatus,
    ProductStatus,
    QueryStatus,
    ServiceRequestStatus,
    VerificationStatus,
)


def test_query_relationships():
    """InvestorQuery loads its product and both parties."""
    from db import InvestorQuery

    rel_names = {r.key for r in InvestorQuery.__mapper__.relationships}
    assert {"product", "investor", "founder"} <= rel_names


def test_workflow_tables_use_optimistic_versioning():
    """Every mutable workflow row is guarded by a version column."""
    from db import (
        CallRequest,
        InvestorQuery,
        MentorCommunication,
        Product,
        ServiceRequest,
        User,
    )

    for model in (User, Product, InvestorQuery, CallRequest, MentorCommunication, ServiceRequest):
        assert model.__mapper__.version_id_col is not None, model.__name__
        assert model.__mapper__.version_id_col.name == "version"


def test_audit_event_has_no_version_column():
    from db import AuditEvent

    assert AuditEvent.__mapper__.version_id_col is None


def test_identities_revealed_needs_both_consents():
    from db import InvestorQuery

    q = InvestorQuery(investor_reveal_consent=True, founder_reveal_consent=False)
    assert q.identities_revealed is False
    q.founder_reveal_consent = True
    assert q.identities_revealed is True


def test_terminal_statuses_have_no_outgoing_transitions():
    for enum_cls in (QueryStatus, CallRequestStatus, ServiceRequestStatus):
        valid = enum_cls.valid_transitions()
        for status in enum_cls.terminal_statuses():
            assert valid[status] == frozenset()


def test_every_status_has_a_transition_entry():
    for enum_cls in (
        QueryStatus,
        CallRequestStatus,
        ServiceRequestStatus,
        ProductStatus,
        VerificationStatus,
    ):
        assert set(enum_cls.valid_transitions()) == set(enum_cls)


def test_founder_visible_statuses_exclude_unreviewed_and_rejected():
    visible = QueryStatus.founder_visible_statuses()
    assert QueryStatus.PENDING_ADMIN_REVIEW not in visible
    assert QueryStatus.REJECTED not in visible
