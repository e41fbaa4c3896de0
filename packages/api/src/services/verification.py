# This project was developed with assistance from AI tools.
"""Founder verification gate.

    not_submitted --(founder uploads checklist)--> pending_verification
    pending_verification --(admin)--> approved | rejected
    rejected --(founder resubmits)--> pending_verification

Only an approved founder may manage products or answer investor queries;
the routes enforce that with ``require_verified_founder``. Status never
regresses on its own: it moves only on a founder submission or an admin
decision.
"""

import logging
from datetime import UTC, datetime

from botocore.exceptions import ClientError
from db import User
from db.enums import DocumentReviewStatus, UserRole, VerificationStatus
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.config import settings
from ..schemas.auth import UserContext
from ..schemas.verification import DocumentEntry
from .audit import write_audit_event
from .notifications import ADMIN_TOPIC, notify, user_topic
from .storage import ALLOWED_CONTENT_TYPES, get_document_store
from .transitions import (
    InvalidTransitionError,
    WorkflowValidationError,
    check_transition,
    commit_transition,
)

logger = logging.getLogger(__name__)

REQUIRED_DOCUMENTS = (
    "idDocument",
    "businessDocument",
    "pitchDeck",
    "certificationOfIncorporation",
    "companyOverview",
    "memorandumOfAssociation",
    "businessPlan",
    "financialModel",
    "intellectualProperty",
    "executiveSummary",
    "marketAnalysis",
)
OPTIONAL_DOCUMENTS = ("productRoadmap", "useOfInvestments")
DOCUMENT_KEYS = REQUIRED_DOCUMENTS + OPTIONAL_DOCUMENTS

FULL_DASHBOARD_SECTIONS = (
    "products",
    "add-product",
    "investor-interests",
    "responses",
    "documents",
    "zoom-calls",
)

_RESTRICTED_SCREENS = {
    VerificationStatus.NOT_SUBMITTED: "onboarding",
    VerificationStatus.PENDING_VERIFICATION: "pending-verification",
    VerificationStatus.REJECTED: "verification-rejected",
}

_VALID = VerificationStatus.valid_transitions()


class DocumentUploadError(Exception):
    """Raised when an uploaded file exceeds the size limit."""

    pass


def current_status(account) -> VerificationStatus:
    return account.verification_status or VerificationStatus.NOT_SUBMITTED


def missing_documents(documents: dict | None) -> list[str]:
    present = set(documents or {})
    return [key for key in REQUIRED_DOCUMENTS if key not in present]


def document_entries(account) -> list[DocumentEntry]:
    """Checklist view of a founder's documents, object keys left out."""
    documents = account.documents or {}
    meta = account.documents_meta or {}
    entries = []
    for key in DOCUMENT_KEYS:
        item = meta.get(key, {})
        entries.append(
            DocumentEntry(
                key=key,
                required=key in REQUIRED_DOCUMENTS,
                uploaded=key in documents,
                filename=item.get("filename"),
                status=item.get("status"),
                uploaded_at=item.get("uploaded_at"),
                reviewed_by=item.get("reviewed_by"),
                reviewed_at=item.get("reviewed_at"),
                rejection_reason=item.get("rejection_reason"),
            )
        )
    return entries


def resolve_founder_dashboard(
    status: VerificationStatus | None,
    feedback: str | None = None,
) -> dict:
    """Decide which founder dashboard may be rendered.

    Anything but APPROVED gets exactly one restricted screen and never the
    product-management sections.
    """
    status = status or VerificationStatus.NOT_SUBMITTED
    if status == VerificationStatus.APPROVED:
        return {
            "view": "full",
            "verification_status": status,
            "sections": list(FULL_DASHBOARD_SECTIONS),
            "screen": None,
            "feedback": None,
        }
    return {
        "view": "restricted",
        "verification_status": status,
        "sections": [],
        "screen": _RESTRICTED_SCREENS[status],
        "feedback": feedback if status == VerificationStatus.REJECTED else None,
    }


async def _get_founder(session: AsyncSession, founder_id: int) -> User | None:
    result = await session.execute(
        select(User).where(User.id == founder_id, User.role == UserRole.FOUNDER)
    )
    return result.scalar_one_or_none()


async def get_founder_account(session: AsyncSession, user: UserContext) -> User | None:
    return await _get_founder(session, user.user_id)


async def _discard_objects(store, object_keys: list[str]) -> None:
    try:
        await store.delete_documents(object_keys)
    except ClientError:
        logger.exception("Could not delete orphaned objects %s", object_keys)


async def submit_documents(
    session: AsyncSession,
    user: UserContext,
    uploads: dict[str, tuple[str, str, bytes]],
) -> User | None:
    """Store uploaded documents and move the founder to pending verification.

    Args:
        uploads: doc key -> (filename, content_type, data). Merged with any
            earlier upload; together they must cover every required key.

    Raises WorkflowValidationError (nothing stored) for unknown keys, bad
    file types or an incomplete checklist, DocumentUploadError for oversized
    files and InvalidTransitionError once the founder is already approved.
    """
    account = await _get_founder(session, user.user_id)
    if account is None:
        return None

    status = current_status(account)
    check_transition(status, VerificationStatus.PENDING_VERIFICATION, _VALID, label="Verification")

    unknown = sorted(set(uploads) - set(DOCUMENT_KEYS))
    if unknown:
        raise WorkflowValidationError(f"Unknown document keys: {', '.join(unknown)}")
    if not uploads:
        raise WorkflowValidationError("At least one document must be uploaded")

    missing = missing_documents({**(account.documents or {}), **uploads})
    if missing:
        raise WorkflowValidationError(f"Missing required documents: {', '.join(missing)}")

    max_bytes = settings.UPLOAD_MAX_SIZE_MB * 1024 * 1024
    for key, (filename, content_type, data) in uploads.items():
        if content_type not in ALLOWED_CONTENT_TYPES:
            raise WorkflowValidationError(f"Unsupported file type for {key}: {content_type}")
        if len(data) > max_bytes:
            raise DocumentUploadError(
                f"{key} ({filename}) exceeds the {settings.UPLOAD_MAX_SIZE_MB} MB limit"
            )

    store = get_document_store()
    now = datetime.now(UTC).isoformat()
    documents = dict(account.documents or {})
    meta = dict(account.documents_meta or {})
    stored_before = set(documents.values())
    written: list[str] = []
    try:
        for key, (filename, content_type, data) in uploads.items():
            object_key = await store.put_document(account.id, key, filename, data, content_type)
            written.append(object_key)
            documents[key] = object_key
            meta[key] = {
                "filename": filename,
                "status": DocumentReviewStatus.PENDING.value,
                "uploaded_at": now,
                "reviewed_by": None,
                "reviewed_at": None,
                "rejection_reason": None,
            }

        # New dicts so the JSON columns are flagged dirty
        account.documents = documents
        account.documents_meta = meta
        account.verification_status = VerificationStatus.PENDING_VERIFICATION
        account.verification_feedback = None

        await write_audit_event(
            session,
            event_type="founder_documents_submitted",
            user=user,
            target_type="user",
            target_id=account.id,
            event_data={"documents": sorted(uploads), "from_status": status.value},
        )
        await commit_transition(session, f"User {account.id}")
    except Exception:
        # Overwritten keys still back the previous submission; only new ones are orphans
        await _discard_objects(store, [k for k in written if k not in stored_before])
        raise
    logger.info("Founder %s submitted %d documents", account.id, len(uploads))

    notify(ADMIN_TOPIC, "founder-documents-submitted", {"userId": account.id})
    return account


async def list_pending_founders(session: AsyncSession) -> list[User]:
    stmt = (
        select(User)
        .where(
            User.role == UserRole.FOUNDER,
            User.verification_status == VerificationStatus.PENDING_VERIFICATION,
        )
        .order_by(User.updated_at.asc())
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def get_document_url(
    session: AsyncSession,
    founder_id: int,
    doc_key: str,
    expires_in: int = 900,
) -> str | None:
    """Presigned link so a reviewer can open one stored document."""
    account = await _get_founder(session, founder_id)
    if account is None or doc_key not in (account.documents or {}):
        return None
    return await get_document_store().presigned_url(account.documents[doc_key], expires_in)


async def review_document(
    session: AsyncSession,
    user: UserContext,
    founder_id: int,
    doc_key: str,
    decision: DocumentReviewStatus,
    rejection_reason: str | None = None,
) -> User | None:
    """Admin marks a single document approved or rejected."""
    if decision == DocumentReviewStatus.PENDING:
        raise WorkflowValidationError("Document review must be 'approved' or 'rejected'")
    reason = (rejection_reason or "").strip() or None
    if decision == DocumentReviewStatus.REJECTED and reason is None:
        raise WorkflowValidationError("A rejection reason is required")

    account = await _get_founder(session, founder_id)
    if account is None or doc_key not in (account.documents or {}):
        return None
    if current_status(account) != VerificationStatus.PENDING_VERIFICATION:
        raise InvalidTransitionError(
            f"Documents can only be reviewed while verification is pending "
            f"(currently '{current_status(account).value}')."
        )

    meta = dict(account.documents_meta or {})
    meta[doc_key] = {
        **meta.get(doc_key, {}),
        "status": decision.value,
        "reviewed_by": str(user.user_id),
        "reviewed_at": datetime.now(UTC).isoformat(),
        "rejection_reason": reason,
    }
    account.documents_meta = meta

    await write_audit_event(
        session,
        event_type=f"founder_document_{decision.value}",
        user=user,
        target_type="user",
        target_id=account.id,
        event_data={"document": doc_key, "reason": reason},
    )
    await commit_transition(session, f"User {account.id}")

    notify(
        user_topic(account.id),
        "document-reviewed",
        {"document": doc_key, "status": decision.value},
    )
    return account


async def decide_verification(
    session: AsyncSession,
    user: UserContext,
    founder_id: int,
    decision: VerificationStatus,
    feedback: str | None = None,
) -> User | None:
    """Admin approves or rejects a pending founder. Rejection needs feedback."""
    if decision not in (VerificationStatus.APPROVED, VerificationStatus.REJECTED):
        raise WorkflowValidationError("Verification decision must be 'approved' or 'rejected'")
    text = (feedback or "").strip() or None
    if decision == VerificationStatus.REJECTED and text is None:
        raise WorkflowValidationError("Feedback is required when rejecting a founder")

    account = await _get_founder(session, founder_id)
    if account is None:
        return None

    previous = current_status(account)
    check_transition(previous, decision, _VALID, label="Verification")

    account.verification_status = decision
    account.verification_feedback = text

    await write_audit_event(
        session,
        event_type=f"founder_{decision.value}",
        user=user,
        target_type="user",
        target_id=account.id,
        event_data={"feedback": text},
    )
    await commit_transition(session, f"User {account.id}")
    logger.info("Founder %s verification %s by %s", account.id, decision.value, user.user_id)

    notify(
        user_topic(account.id),
        "verification-updated",
        {"status": decision.value, "feedback": text},
    )
    return account
