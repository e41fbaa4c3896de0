# This project was developed with assistance from AI tools.
__version__ = "0.1.0"

from .database import Base, DatabaseService, get_db, get_db_service
from .enums import (
    CallRequestStatus,
    DocumentReviewStatus,
    ProductStatus,
    QuerySource,
    QueryStatus,
    ServiceRequestStatus,
    UserRole,
    VerificationStatus,
)
from .models import (
    AuditEvent,
    CallRequest,
    InvestorQuery,
    MentorCommunication,
    Product,
    ServiceRequest,
    User,
)

__all__ = [
    "Base",
    "DatabaseService",
    "get_db",
    "get_db_service",
    "__version__",
    # Enums
    "CallRequestStatus",
    "DocumentReviewStatus",
    "ProductStatus",
    "QuerySource",
    "QueryStatus",
    "ServiceRequestStatus",
    "UserRole",
    "VerificationStatus",
    # Models
    "AuditEvent",
    "CallRequest",
    "InvestorQuery",
    "MentorCommunication",
    "Product",
    "ServiceRequest",
    "User",
]
