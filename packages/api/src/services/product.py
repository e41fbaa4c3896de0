# This project was developed with assistance from AI tools.
"""Product listing service.

Founders submit listings (pending), admins approve or reject them, and only
approved listings ever reach the investor catalog. Rejected listings are
kept so the founder can edit and resubmit; any founder edit returns the
listing to pending.
"""

import logging

from db import Product
from db.enums import ProductStatus
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from ..schemas.auth import UserContext
from .audit import write_audit_event
from .notifications import ADMIN_TOPIC, notify, user_topic
from .transitions import WorkflowValidationError, check_transition, commit_transition, normalize_tag_set

logger = logging.getLogger(__name__)

_UPDATABLE_FIELDS = {
    "name",
    "category",
    "use_case",
    "description",
    "business_model",
    "pricing",
    "stage",
    "funding_required",
    "tags",
    "benefits",
}


def _clean_benefits(values: list[str] | None) -> list[str]:
    # Benefits are an ordered list, unlike tags
    return [v.strip() for v in values or [] if v and v.strip()]


async def create_product(
    session: AsyncSession,
    user: UserContext,
    **fields,
) -> Product:
    """Create a pending listing owned by the (verified) founder."""
    product = Product(
        founder_id=user.user_id,
        status=ProductStatus.PENDING,
        interest_count=0,
        **{k: v for k, v in fields.items() if k in _UPDATABLE_FIELDS},
    )
    product.tags = normalize_tag_set(fields.get("tags"))
    product.benefits = _clean_benefits(fields.get("benefits"))
    session.add(product)
    await session.flush()

    await write_audit_event(
        session,
        event_type="product_submitted",
        user=user,
        target_type="product",
        target_id=product.id,
        event_data={"name": product.name},
    )
    await session.commit()
    logger.info("Product %s submitted by founder %s", product.id, user.user_id)

    notify(ADMIN_TOPIC, "product-submitted", {"productId": product.id})
    return product


async def list_founder_products(session: AsyncSession, user: UserContext) -> list[Product]:
    stmt = (
        select(Product)
        .where(Product.founder_id == user.user_id)
        .order_by(Product.created_at.desc())
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def update_product(
    session: AsyncSession,
    user: UserContext,
    product_id: int,
    **updates,
) -> Product | None:
    """Edit the founder's own listing and send it back to review.

    Returns None if the product does not exist or belongs to someone else.
    """
    result = await session.execute(
        select(Product).where(Product.id == product_id, Product.founder_id == user.user_id)
    )
    product = result.scalar_one_or_none()
    if product is None:
        return None

    for field, value in updates.items():
        if field not in _UPDATABLE_FIELDS:
            continue
        if field == "tags":
            value = normalize_tag_set(value)
        elif field == "benefits":
            value = _clean_benefits(value)
        setattr(product, field, value)

    previous = product.status
    product.status = ProductStatus.PENDING

    await write_audit_event(
        session,
        event_type="product_resubmitted",
        user=user,
        target_type="product",
        target_id=product.id,
        event_data={"from_status": previous.value, "fields": sorted(updates)},
    )
    await commit_transition(session, f"Product {product_id}")
    logger.info("Product %s edited by founder %s (was %s)", product_id, user.user_id, previous.value)

    notify(ADMIN_TOPIC, "product-submitted", {"productId": product.id})
    return product


async def list_catalog(session: AsyncSession) -> list[Product]:
    """Approved listings only, with the founder loaded for the anonymous label."""
    stmt = (
        select(Product)
        .options(joinedload(Product.founder))
        .where(Product.status == ProductStatus.APPROVED)
        .order_by(Product.created_at.desc())
    )
    result = await session.execute(stmt)
    return list(result.unique().scalars().all())


async def list_pending_products(session: AsyncSession) -> list[Product]:
    stmt = (
        select(Product)
        .where(Product.status == ProductStatus.PENDING)
        .order_by(Product.created_at.asc())
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def review_product(
    session: AsyncSession,
    user: UserContext,
    product_id: int,
    decision: ProductStatus,
    admin_notes: str | None = None,
) -> Product | None:
    """Admin approves or rejects a pending listing."""
    if decision == ProductStatus.PENDING:
        raise WorkflowValidationError("Review decision must be 'approved' or 'rejected'")

    result = await session.execute(select(Product).where(Product.id == product_id))
    product = result.scalar_one_or_none()
    if product is None:
        return None

    check_transition(
        product.status,
        decision,
        ProductStatus.valid_transitions(),
        label=f"Product {product_id}",
    )

    product.status = decision
    product.admin_notes = (admin_notes or "").strip() or None

    await write_audit_event(
        session,
        event_type=f"product_{decision.value}",
        user=user,
        target_type="product",
        target_id=product.id,
        event_data={"notes": product.admin_notes},
    )
    await commit_transition(session, f"Product {product_id}")
    logger.info("Product %s %s by %s", product_id, decision.value, user.user_id)

    notify(
        user_topic(product.founder_id),
        "product-reviewed",
        {"productId": product.id, "status": decision.value},
    )
    return product
