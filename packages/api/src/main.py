# This project was developed with assistance from AI tools.
"""FastAPI application entry point."""

import logging
import uuid
from contextlib import asynccontextmanager

from db import get_db_service
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .admin import setup_admin
from .core.config import settings
from .routes import (
    admin_users,
    auth,
    communication,
    founder,
    health,
    matchmaking,
    navigation,
    notifications,
    products,
    query,
    service_requests,
    zoom,
)
from .schemas.error import ErrorResponse
from .services.notifications import init_notification_hub
from .services.storage import init_document_store

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Application startup/shutdown lifecycle."""
    init_document_store(settings)
    init_notification_hub()
    logger.info("%s started (auth_disabled=%s)", settings.APP_NAME, settings.AUTH_DISABLED)
    yield
    await get_db_service().close()


app = FastAPI(
    title="VentureBridge API",
    description="Founder/investor matchmaking with admin-mediated anonymous communication",
    version="0.1.0",
    lifespan=lifespan,
)

# Configure CORS; the session cookie needs credentials
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_HOSTS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type"],
)

_HTTP_STATUS_TITLES: dict[int, str] = {
    400: "Bad Request",
    401: "Unauthorized",
    403: "Forbidden",
    404: "Not Found",
    409: "Conflict",
    413: "Payload Too Large",
    422: "Unprocessable Entity",
    500: "Internal Server Error",
    503: "Service Unavailable",
}


def _problem(request: Request, status_code: int, detail: str, headers=None) -> JSONResponse:
    """Problem Details body that also carries the legacy success/message pair."""
    body = ErrorResponse(
        type="about:blank",
        title=_HTTP_STATUS_TITLES.get(status_code, "Error"),
        status=status_code,
        detail=detail,
        message=detail,
        request_id=request.headers.get("x-request-id") or str(uuid.uuid4()),
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(), headers=headers)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return _problem(request, exc.status_code, str(exc.detail), getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return _problem(request, 422, str(exc.errors()))


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    """Log and return 500 without leaking internals."""
    response = _problem(request, 500, "An unexpected error occurred.")
    logger.exception("Unhandled %s on %s %s", type(exc).__name__, request.method, request.url.path)
    return response


# Include routers
app.include_router(health.router, prefix="/health", tags=["health"])
app.include_router(auth.router, prefix="/api", tags=["auth"])
app.include_router(query.router, prefix="/api/query", tags=["query"])
app.include_router(matchmaking.router, prefix="/api/matchmaking", tags=["matchmaking"])
app.include_router(products.router, prefix="/api/products", tags=["products"])
app.include_router(founder.router, prefix="/api/founder", tags=["founder"])
app.include_router(admin_users.router, prefix="/api/admin", tags=["admin"])
app.include_router(
    service_requests.admin_router, prefix="/api/admin/service-requests", tags=["admin"]
)
app.include_router(admin_users.superadmin_router, prefix="/api/superadmin", tags=["superadmin"])
app.include_router(admin_users.users_router, prefix="/api/users", tags=["admin"])
app.include_router(zoom.router, prefix="/api/zoom", tags=["calls"])
app.include_router(communication.router, prefix="/api/communication", tags=["communication"])
app.include_router(
    service_requests.router, prefix="/api/service-requests", tags=["service-requests"]
)
app.include_router(notifications.router, prefix="/api/notifications", tags=["notifications"])
app.include_router(navigation.router, prefix="/api/navigation", tags=["navigation"])

# Setup SQLAdmin dashboard at /admin
setup_admin(app)


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint"""
    return {"message": "Welcome to the VentureBridge API"}
