# This project was developed with assistance from AI tools.
"""initial marketplace schema

Revision ID: 3b1f0c2d9e47
Revises:
Create Date: 2026-10-19 09:12:41.508113

"""

import sqlalchemy as sa
from alembic import op

revision = "3b1f0c2d9e47"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False
        ),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False
        ),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("username", sa.String(150), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("role", sa.String(50), nullable=False),
        sa.Column("anonymous_id", sa.String(32), nullable=False),
        sa.Column("verification_status", sa.String(50), nullable=True),
        sa.Column("verification_feedback", sa.Text(), nullable=True),
        sa.Column("documents", sa.JSON(), nullable=False),
        sa.Column("documents_meta", sa.JSON(), nullable=False),
        *_timestamps(),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("username"),
        sa.UniqueConstraint("email"),
        sa.UniqueConstraint("anonymous_id"),
    )
    op.create_index("ix_users_username", "users", ["username"])
    op.create_index("ix_users_email", "users", ["email"])
    op.create_index("ix_users_anonymous_id", "users", ["anonymous_id"])

    op.create_table(
        "products",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("founder_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("category", sa.String(100), nullable=False),
        sa.Column("use_case", sa.Text(), nullable=True),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("business_model", sa.Text(), nullable=True),
        sa.Column("pricing", sa.Text(), nullable=True),
        sa.Column("stage", sa.String(100), nullable=True),
        sa.Column("funding_required", sa.Numeric(14, 2), nullable=True),
        sa.Column("tags", sa.JSON(), nullable=False),
        sa.Column("benefits", sa.JSON(), nullable=False),
        sa.Column("status", sa.String(50), nullable=False, server_default="pending"),
        sa.Column("admin_notes", sa.Text(), nullable=True),
        sa.Column("interest_count", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["founder_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_products_founder_id", "products", ["founder_id"])
    op.create_index("ix_products_status", "products", ["status"])

    op.create_table(
        "investor_queries",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("product_id", sa.Integer(), nullable=False),
        sa.Column("investor_id", sa.Integer(), nullable=False),
        sa.Column("founder_id", sa.Integer(), nullable=False),
        sa.Column("source", sa.String(50), nullable=False, server_default="query"),
        sa.Column("investor_primary_intent", sa.String(255), nullable=False),
        sa.Column("investor_areas_of_interest", sa.JSON(), nullable=False),
        sa.Column("investor_original_question", sa.Text(), nullable=False),
        sa.Column("investor_query_admin_approved_text", sa.Text(), nullable=True),
        sa.Column("investor_reviewed_by", sa.String(255), nullable=True),
        sa.Column("founder_selected_topics", sa.JSON(), nullable=False),
        sa.Column("founder_original_question", sa.Text(), nullable=True),
        sa.Column("founder_response_admin_approved_text", sa.Text(), nullable=True),
        sa.Column("founder_response_reviewed_by", sa.String(255), nullable=True),
        sa.Column("status", sa.String(50), nullable=False, server_default="pending_admin_review"),
        sa.Column("rejection_reason", sa.Text(), nullable=True),
        sa.Column("investor_reveal_consent", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("founder_reveal_consent", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["product_id"], ["products.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["investor_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["founder_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_investor_queries_product_id", "investor_queries", ["product_id"])
    op.create_index("ix_investor_queries_investor_id", "investor_queries", ["investor_id"])
    op.create_index("ix_investor_queries_founder_id", "investor_queries", ["founder_id"])
    op.create_index("ix_investor_queries_status", "investor_queries", ["status"])

    op.create_table(
        "call_requests",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("requester_id", sa.Integer(), nullable=False),
        sa.Column("requester_role", sa.String(50), nullable=False),
        sa.Column("target_role", sa.String(50), nullable=True),
        sa.Column("target_id", sa.Integer(), nullable=True),
        sa.Column("topic", sa.String(255), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("proposed_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("status", sa.String(50), nullable=False, server_default="pending"),
        sa.Column("admin_notes", sa.Text(), nullable=True),
        sa.Column("reviewed_by", sa.String(255), nullable=True),
        sa.Column("scheduled_for", sa.DateTime(timezone=True), nullable=True),
        sa.Column("duration_minutes", sa.Integer(), nullable=True),
        sa.Column("join_url", sa.String(500), nullable=True),
        *_timestamps(),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["requester_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["target_id"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_call_requests_requester_id", "call_requests", ["requester_id"])
    op.create_index("ix_call_requests_status", "call_requests", ["status"])

    op.create_table(
        "audit_events",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column(
            "timestamp", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False
        ),
        sa.Column("user_id", sa.String(255), nullable=True),
        sa.Column("user_role", sa.String(50), nullable=True),
        sa.Column("event_type", sa.String(100), nullable=False),
        sa.Column("target_type", sa.String(50), nullable=True),
        sa.Column("target_id", sa.Integer(), nullable=True),
        sa.Column("event_data", sa.JSON(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_audit_events_event_type", "audit_events", ["event_type"])
    op.create_index("ix_audit_events_target_id", "audit_events", ["target_id"])


def downgrade() -> None:
    op.drop_table("audit_events")
    op.drop_table("call_requests")
    op.drop_table("investor_queries")
    op.drop_table("products")
    op.drop_table("users")
