# This project was developed with assistance from AI tools.
"""
Domain enums for the founder/investor matchmaking lifecycle.

Shared domain types used by both SQLAlchemy models (db package)
and Pydantic schemas (api package).
"""

import enum


class UserRole(str, enum.Enum):
    SUPERADMIN = "superadmin"
    ADMIN = "admin"
    FOUNDER = "founder"
    INVESTOR = "investor"
    ORGANIZATION = "organization"
    MENTOR = "mentor"
    OTHER = "other"

    @classmethod
    def staff_roles(cls) -> frozenset["UserRole"]:
        """Roles that mediate cross-party communication."""
        return frozenset({cls.ADMIN, cls.SUPERADMIN})

    @classmethod
    def self_service_roles(cls) -> frozenset["UserRole"]:
        """Roles a visitor may pick at registration."""
        return frozenset(
            {cls.FOUNDER, cls.INVESTOR, cls.ORGANIZATION, cls.MENTOR, cls.OTHER}
        )


class VerificationStatus(str, enum.Enum):
    NOT_SUBMITTED = "not_submitted"
    PENDING_VERIFICATION = "pending_verification"
    APPROVED = "approved"
    REJECTED = "rejected"

    @classmethod
    def valid_transitions(cls) -> dict["VerificationStatus", frozenset["VerificationStatus"]]:
        """Allowed moves of the founder verification gate."""
        return {
            cls.NOT_SUBMITTED: frozenset({cls.PENDING_VERIFICATION}),
            cls.PENDING_VERIFICATION: frozenset(
                {cls.PENDING_VERIFICATION, cls.APPROVED, cls.REJECTED}
            ),
            cls.REJECTED: frozenset({cls.PENDING_VERIFICATION}),
            cls.APPROVED: frozenset(),
        }


class DocumentReviewStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class ProductStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"

    @classmethod
    def valid_transitions(cls) -> dict["ProductStatus", frozenset["ProductStatus"]]:
        """Admin review moves. A founder edit always returns the listing to PENDING."""
        return {
            cls.PENDING: frozenset({cls.APPROVED, cls.REJECTED}),
            cls.APPROVED: frozenset(),
            cls.REJECTED: frozenset(),
        }


class QueryStatus(str, enum.Enum):
    PENDING_ADMIN_REVIEW = "pending_admin_review"
    FORWARDED_TO_FOUNDER = "forwarded_to_founder"
    PENDING_RESPONSE_REVIEW = "pending_response_review"
    DELIVERED_TO_INVESTOR = "delivered_to_investor"
    REJECTED = "rejected"

    @classmethod
    def terminal_statuses(cls) -> frozenset["QueryStatus"]:
        """Statuses after which no further transition occurs."""
        return frozenset({cls.DELIVERED_TO_INVESTOR, cls.REJECTED})

    @classmethod
    def review_statuses(cls) -> frozenset["QueryStatus"]:
        """Statuses where an admin holds the record."""
        return frozenset({cls.PENDING_ADMIN_REVIEW, cls.PENDING_RESPONSE_REVIEW})

    @classmethod
    def founder_visible_statuses(cls) -> frozenset["QueryStatus"]:
        """Statuses in which the founder sees the record at all."""
        return frozenset(
            {cls.FORWARDED_TO_FOUNDER, cls.PENDING_RESPONSE_REVIEW, cls.DELIVERED_TO_INVESTOR}
        )

    @classmethod
    def valid_transitions(cls) -> dict["QueryStatus", frozenset["QueryStatus"]]:
        """Allowed transitions of the mediation workflow."""
        return {
            cls.PENDING_ADMIN_REVIEW: frozenset({cls.FORWARDED_TO_FOUNDER, cls.REJECTED}),
            cls.FORWARDED_TO_FOUNDER: frozenset({cls.PENDING_RESPONSE_REVIEW}),
            cls.PENDING_RESPONSE_REVIEW: frozenset({cls.DELIVERED_TO_INVESTOR, cls.REJECTED}),
            cls.DELIVERED_TO_INVESTOR: frozenset(),
            cls.REJECTED: frozenset(),
        }


class QuerySource(str, enum.Enum):
    QUERY = "query"
    INTEREST_FORM = "interest_form"


class CallRequestStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    SCHEDULED = "scheduled"
    COMPLETED = "completed"

    @classmethod
    def terminal_statuses(cls) -> frozenset["CallRequestStatus"]:
        return frozenset({cls.REJECTED, cls.COMPLETED})

    @classmethod
    def valid_transitions(cls) -> dict["CallRequestStatus", frozenset["CallRequestStatus"]]:
        """Allowed call request transitions, each one admin-gated."""
        return {
            cls.PENDING: frozenset({cls.APPROVED, cls.REJECTED}),
            cls.APPROVED: frozenset({cls.SCHEDULED, cls.REJECTED}),
            cls.SCHEDULED: frozenset({cls.COMPLETED}),
            cls.REJECTED: frozenset(),
            cls.COMPLETED: frozenset(),
        }


class ServiceRequestStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    COMPLETED = "completed"
    CANCELED = "canceled"

    @classmethod
    def terminal_statuses(cls) -> frozenset["ServiceRequestStatus"]:
        return frozenset({cls.COMPLETED, cls.CANCELED})

    @classmethod
    def valid_transitions(cls) -> dict["ServiceRequestStatus", frozenset["ServiceRequestStatus"]]:
        """Admin handling of a service booking."""
        return {
            cls.PENDING: frozenset({cls.APPROVED, cls.CANCELED}),
            cls.APPROVED: frozenset({cls.COMPLETED, cls.CANCELED}),
            cls.COMPLETED: frozenset(),
            cls.CANCELED: frozenset(),
        }
