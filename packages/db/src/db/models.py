# This project was developed with assistance from AI tools.
"""
Venture Bridge -- domain models

Founder/investor matchmaking models covering accounts, founder verification
documents, product listings, admin-mediated investor queries, call requests,
mentor messages, service bookings and the admin action log.

Workflow records carry a ``version`` column wired as the mapper's
``version_id_col``: a flush against a row that changed since it was loaded
raises ``StaleDataError`` instead of overwriting it.
"""

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    func,
)
from sqlalchemy.orm import relationship

from .database import Base
from .enums import (
    CallRequestStatus,
    ProductStatus,
    QuerySource,
    QueryStatus,
    ServiceRequestStatus,
    UserRole,
    VerificationStatus,
)


class User(Base):
    """Account for every role. ``userType`` is exposed as an alias of ``role``."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(150), unique=True, nullable=False, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    name = Column(String(200), nullable=False)
    password_hash = Column(String(255), nullable=False)
    role = Column(Enum(UserRole, name="user_role", native_enum=False), nullable=False)
    anonymous_id = Column(String(32), unique=True, nullable=False, index=True)
    verification_status = Column(
        Enum(VerificationStatus, name="verification_status", native_enum=False),
        nullable=True,
    )
    verification_feedback = Column(Text, nullable=True)
    documents = Column(JSON, nullable=False, default=dict)
    documents_meta = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
    version = Column(Integer, nullable=False)

    products = relationship("Product", back_populates="founder", passive_deletes=True)

    __mapper_args__ = {"version_id_col": version, "eager_defaults": True}

    def __repr__(self):
        return f"<User(id={self.id}, username='{self.username}', role='{self.role}')>"


class Product(Base):
    """Founder-submitted product/project listing."""

    __tablename__ = "products"

    id = Column(Integer, primary_key=True, autoincrement=True)
    founder_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    name = Column(String(255), nullable=False)
    category = Column(String(100), nullable=False)
    use_case = Column(Text, nullable=True)
    description = Column(Text, nullable=False)
    business_model = Column(Text, nullable=True)
    pricing = Column(Text, nullable=True)
    stage = Column(String(100), nullable=True)
    funding_required = Column(Numeric(14, 2), nullable=True)
    tags = Column(JSON, nullable=False, default=list)
    benefits = Column(JSON, nullable=False, default=list)
    status = Column(
        Enum(ProductStatus, name="product_status", native_enum=False),
        nullable=False,
        default=ProductStatus.PENDING,
        index=True,
    )
    admin_notes = Column(Text, nullable=True)
    interest_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
    version = Column(Integer, nullable=False)

    founder = relationship("User", back_populates="products")
    queries = relationship("InvestorQuery", back_populates="product", cascade="all, delete-orphan")

    __mapper_args__ = {"version_id_col": version, "eager_defaults": True}

    def __repr__(self):
        return f"<Product(id={self.id}, name='{self.name}', status='{self.status}')>"


class InvestorQuery(Base):
    """One admin-mediated investor/founder exchange about a product."""

    __tablename__ = "investor_queries"

    id = Column(Integer, primary_key=True, autoincrement=True)
    product_id = Column(
        Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    investor_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    founder_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    source = Column(
        Enum(QuerySource, name="query_source", native_enum=False),
        nullable=False,
        default=QuerySource.QUERY,
    )
    investor_primary_intent = Column(String(255), nullable=False)
    investor_areas_of_interest = Column(JSON, nullable=False, default=list)
    investor_original_question = Column(Text, nullable=False)
    investor_query_admin_approved_text = Column(Text, nullable=True)
    investor_reviewed_by = Column(String(255), nullable=True)
    founder_selected_topics = Column(JSON, nullable=False, default=list)
    founder_original_question = Column(Text, nullable=True)
    founder_response_admin_approved_text = Column(Text, nullable=True)
    founder_response_reviewed_by = Column(String(255), nullable=True)
    status = Column(
        Enum(QueryStatus, name="query_status", native_enum=False),
        nullable=False,
        default=QueryStatus.PENDING_ADMIN_REVIEW,
        index=True,
    )
    rejection_reason = Column(Text, nullable=True)
    investor_reveal_consent = Column(Boolean, nullable=False, default=False)
    founder_reveal_consent = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
    version = Column(Integer, nullable=False)

    product = relationship("Product", back_populates="queries")
    investor = relationship("User", foreign_keys=[investor_id])
    founder = relationship("User", foreign_keys=[founder_id])

    __mapper_args__ = {"version_id_col": version, "eager_defaults": True}

    @property
    def identities_revealed(self) -> bool:
        return bool(self.investor_reveal_consent and self.founder_reveal_consent)

    def __repr__(self):
        return f"<InvestorQuery(id={self.id}, status='{self.status}')>"


class CallRequest(Base):
    """Admin-gated request for a video call with the other party."""

    __tablename__ = "call_requests"

    id = Column(Integer, primary_key=True, autoincrement=True)
    requester_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    requester_role = Column(Enum(UserRole, name="requester_role", native_enum=False), nullable=False)
    target_role = Column(Enum(UserRole, name="target_role", native_enum=False), nullable=True)
    target_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    topic = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    proposed_date = Column(DateTime(timezone=True), nullable=False)
    status = Column(
        Enum(CallRequestStatus, name="call_request_status", native_enum=False),
        nullable=False,
        default=CallRequestStatus.PENDING,
        index=True,
    )
    admin_notes = Column(Text, nullable=True)
    reviewed_by = Column(String(255), nullable=True)
    scheduled_for = Column(DateTime(timezone=True), nullable=True)
    duration_minutes = Column(Integer, nullable=True)
    join_url = Column(String(500), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
    version = Column(Integer, nullable=False)

    requester = relationship("User", foreign_keys=[requester_id])

    __mapper_args__ = {"version_id_col": version, "eager_defaults": True}

    def __repr__(self):
        return f"<CallRequest(id={self.id}, status='{self.status}')>"


class MentorCommunication(Base):
    """Message between a mentor and another user, released by an admin."""

    __tablename__ = "mentor_communications"

    id = Column(Integer, primary_key=True, autoincrement=True)
    sender_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    receiver_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    sender_role = Column(Enum(UserRole, name="sender_role", native_enum=False), nullable=False)
    message = Column(Text, nullable=False)
    message_type = Column(String(50), nullable=True)
    status = Column(
        Enum(CallRequestStatus, name="mentor_communication_status", native_enum=False),
        nullable=False,
        default=CallRequestStatus.PENDING,
        index=True,
    )
    admin_notes = Column(Text, nullable=True)
    reviewed_by = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
    version = Column(Integer, nullable=False)

    sender = relationship("User", foreign_keys=[sender_id])
    receiver = relationship("User", foreign_keys=[receiver_id])

    __mapper_args__ = {"version_id_col": version, "eager_defaults": True}

    def __repr__(self):
        return f"<MentorCommunication(id={self.id}, status='{self.status}')>"


class ServiceRequest(Base):
    """A user's booking of a platform service (consultation, site visit ...)."""

    __tablename__ = "service_requests"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    service_type = Column(String(255), nullable=False)
    preferred_date = Column(DateTime(timezone=True), nullable=False)
    preferred_time = Column(String(50), nullable=False)
    location = Column(String(255), nullable=False)
    notes = Column(Text, nullable=True)
    status = Column(
        Enum(ServiceRequestStatus, name="service_request_status", native_enum=False),
        nullable=False,
        default=ServiceRequestStatus.PENDING,
        index=True,
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
    version = Column(Integer, nullable=False)

    user = relationship("User")

    __mapper_args__ = {"version_id_col": version, "eager_defaults": True}

    def __repr__(self):
        return f"<ServiceRequest(id={self.id}, status='{self.status}')>"


class AuditEvent(Base):
    """Append-only admin action log. INSERT + SELECT only."""

    __tablename__ = "audit_events"

    id = Column(Integer, primary_key=True, autoincrement=True)
    timestamp = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    user_id = Column(String(255), nullable=True)
    user_role = Column(String(50), nullable=True)
    event_type = Column(String(100), nullable=False, index=True)
    target_type = Column(String(50), nullable=True)
    target_id = Column(Integer, nullable=True, index=True)
    event_data = Column(JSON, nullable=True)

    def __repr__(self):
        return f"<AuditEvent(id={self.id}, type='{self.event_type}')>"
