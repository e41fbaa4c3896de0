# This project was developed with assistance from AI tools.
"""
SQLAdmin configuration for database administration UI

Access the admin panel at: http://localhost:8000/admin

When AUTH_DISABLED=false, requires admin credentials via login form.
When AUTH_DISABLED=true, admin panel is open (dev mode).

Workflow state (query status, verification, product review) is changed
through the API so transitions are validated and audited; the panel only
allows editing of descriptive fields.
"""

from db import AuditEvent, CallRequest, InvestorQuery, Product, User
from sqladmin import Admin, ModelView
from sqladmin.authentication import AuthenticationBackend
from sqlalchemy import create_engine
from starlette.requests import Request
from starlette.responses import Response

from .core.config import settings

# SQLAdmin requires a sync engine; derive from the async DATABASE_URL
_sync_url = settings.DATABASE_URL.replace("+asyncpg", "+psycopg2")
engine = create_engine(_sync_url, echo=False)


class AdminAuth(AuthenticationBackend):
    """Session-based auth gate for SQLAdmin.

    When AUTH_DISABLED=true, authenticate() always returns True (dev mode).
    Otherwise, requires login with credentials from SQLADMIN_USER / SQLADMIN_PASSWORD env vars.
    """

    async def login(self, request: Request) -> bool:
        form = await request.form()
        username = form.get("username")
        password = form.get("password")
        if username == settings.SQLADMIN_USER and password == settings.SQLADMIN_PASSWORD:
            request.session.update({"admin_authenticated": True})
            return True
        return False

    async def logout(self, request: Request) -> bool:
        request.session.clear()
        return True

    async def authenticate(self, request: Request) -> Response | bool:
        if settings.AUTH_DISABLED:
            return True
        return request.session.get("admin_authenticated", False)


class UserAdmin(ModelView, model=User):
    column_list = [
        User.id,
        User.username,
        User.email,
        User.role,
        User.anonymous_id,
        User.verification_status,
        User.created_at,
    ]
    column_searchable_list = [User.username, User.email, User.anonymous_id]
    column_sortable_list = [User.id, User.username, User.role, User.created_at]
    column_default_sort = [(User.created_at, True)]
    column_details_exclude_list = [User.password_hash]
    form_excluded_columns = [
        User.password_hash,
        User.verification_status,
        User.documents,
        User.documents_meta,
        User.version,
    ]
    can_create = False
    name = "User"
    name_plural = "Users"
    icon = "fa-solid fa-user"


class ProductAdmin(ModelView, model=Product):
    column_list = [
        Product.id,
        Product.name,
        Product.category,
        Product.founder_id,
        Product.status,
        Product.interest_count,
        Product.created_at,
    ]
    column_searchable_list = [Product.name, Product.category]
    column_sortable_list = [Product.id, Product.name, Product.status, Product.created_at]
    column_default_sort = [(Product.created_at, True)]
    form_excluded_columns = [Product.status, Product.interest_count, Product.version]
    can_create = False
    name = "Product"
    name_plural = "Products"
    icon = "fa-solid fa-box"


class InvestorQueryAdmin(ModelView, model=InvestorQuery):
    column_list = [
        InvestorQuery.id,
        InvestorQuery.product_id,
        InvestorQuery.investor_id,
        InvestorQuery.founder_id,
        InvestorQuery.source,
        InvestorQuery.status,
        InvestorQuery.created_at,
    ]
    column_sortable_list = [InvestorQuery.id, InvestorQuery.status, InvestorQuery.created_at]
    column_default_sort = [(InvestorQuery.created_at, True)]
    can_create = False
    can_edit = False
    can_delete = False
    name = "Investor Query"
    name_plural = "Investor Queries"
    icon = "fa-solid fa-comments"


class CallRequestAdmin(ModelView, model=CallRequest):
    column_list = [
        CallRequest.id,
        CallRequest.requester_id,
        CallRequest.requester_role,
        CallRequest.topic,
        CallRequest.status,
        CallRequest.scheduled_for,
        CallRequest.created_at,
    ]
    column_searchable_list = [CallRequest.topic]
    column_sortable_list = [CallRequest.id, CallRequest.status, CallRequest.created_at]
    column_default_sort = [(CallRequest.created_at, True)]
    can_create = False
    can_edit = False
    name = "Call Request"
    name_plural = "Call Requests"
    icon = "fa-solid fa-video"


class AuditEventAdmin(ModelView, model=AuditEvent):
    column_list = [
        AuditEvent.id,
        AuditEvent.timestamp,
        AuditEvent.event_type,
        AuditEvent.user_id,
        AuditEvent.user_role,
        AuditEvent.target_type,
        AuditEvent.target_id,
    ]
    column_sortable_list = [AuditEvent.id, AuditEvent.timestamp, AuditEvent.event_type]
    column_default_sort = [(AuditEvent.timestamp, True)]
    can_create = False
    can_edit = False
    can_delete = False
    name = "Audit Event"
    name_plural = "Audit Events"
    icon = "fa-solid fa-shield-alt"


def setup_admin(app):
    """Set up SQLAdmin and mount it to the FastAPI app."""
    auth_backend = AdminAuth(
        secret_key=settings.SQLADMIN_SECRET_KEY,
    )
    admin = Admin(app, engine, title="VentureBridge Admin", authentication_backend=auth_backend)

    admin.add_view(UserAdmin)
    admin.add_view(ProductAdmin)
    admin.add_view(InvestorQueryAdmin)
    admin.add_view(CallRequestAdmin)
    admin.add_view(AuditEventAdmin)

    return admin
