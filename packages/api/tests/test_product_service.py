# This project was developed with assistance from AI tools.
"""Tests for product listing service and catalog projection."""

from unittest.mock import patch

import pytest
from db import Product
from db.enums import ProductStatus, UserRole, VerificationStatus

from src.schemas.products import CatalogProduct
from src.services.product import (
    create_product,
    list_catalog,
    review_product,
    update_product,
)
from src.services.transitions import InvalidTransitionError, WorkflowValidationError

from .factories import make_mock_product, make_result, make_session, make_user_context


def _founder():
    return make_user_context(
        user_id=2, role=UserRole.FOUNDER, verification_status=VerificationStatus.APPROVED
    )


def _admin():
    return make_user_context(user_id=9, role=UserRole.ADMIN)


@pytest.mark.asyncio
async def test_create_product_is_pending_and_notifies_admins():
    session = make_session()

    with patch("src.services.product.notify") as mock_notify:
        product = await create_product(
            session,
            _founder(),
            name="CardioSense",
            category="MedTech",
            description="Wearable ECG patch",
            tags=["wearables", " cardiology ", "wearables", ""],
            benefits=["Early detection", " "],
            status=ProductStatus.APPROVED,  # ignored
        )

    assert isinstance(product, Product)
    assert product.status == ProductStatus.PENDING
    assert product.founder_id == 2
    assert product.interest_count == 0
    assert product.tags == ["cardiology", "wearables"]
    assert product.benefits == ["Early detection"]
    session.commit.assert_awaited_once()
    mock_notify.assert_called_once_with("role:admin", "product-submitted", {"productId": 501})


@pytest.mark.asyncio
async def test_update_product_sends_listing_back_to_review():
    product = make_mock_product(status=ProductStatus.REJECTED)
    session = make_session(make_result(single=product))

    with patch("src.services.product.notify"):
        result = await update_product(
            session, _founder(), 10, description="Now with FDA clearance", founder_id=99
        )

    assert result.status == ProductStatus.PENDING
    assert result.description == "Now with FDA clearance"
    # Ownership is not an editable field
    assert result.founder_id == 2


@pytest.mark.asyncio
async def test_update_product_of_another_founder_not_found():
    session = make_session(make_result(single=None))
    assert await update_product(session, _founder(), 10, name="Hijack") is None
    session.commit.assert_not_awaited()


@pytest.mark.asyncio
async def test_review_product_approves_pending():
    product = make_mock_product(status=ProductStatus.PENDING)
    session = make_session(make_result(single=product))

    with patch("src.services.product.notify") as mock_notify:
        result = await review_product(
            session, _admin(), 10, ProductStatus.APPROVED, "  Looks good  "
        )

    assert result.status == ProductStatus.APPROVED
    assert result.admin_notes == "Looks good"
    mock_notify.assert_called_once_with(
        "user:2", "product-reviewed", {"productId": 10, "status": "approved"}
    )


@pytest.mark.asyncio
async def test_review_product_only_from_pending():
    product = make_mock_product(status=ProductStatus.APPROVED)
    session = make_session(make_result(single=product))

    with pytest.raises(InvalidTransitionError):
        await review_product(session, _admin(), 10, ProductStatus.REJECTED)
    assert product.status == ProductStatus.APPROVED


@pytest.mark.asyncio
async def test_review_product_pending_is_not_a_decision():
    with pytest.raises(WorkflowValidationError):
        await review_product(make_session(), _admin(), 10, ProductStatus.PENDING)


@pytest.mark.asyncio
async def test_list_catalog_returns_rows():
    products = [make_mock_product(id=10), make_mock_product(id=11)]
    session = make_session(make_result(items=products))
    assert await list_catalog(session) == products


def test_catalog_projection_hides_founder_identity():
    product = make_mock_product()
    item = CatalogProduct.from_product(product)
    dumped = item.model_dump(by_alias=True)
    assert dumped["founderLabel"] == "Product by Founder #anon0002"
    assert dumped["anonymousId"] == "anon0002"
    assert "founderId" not in dumped
    assert "user2@example.com" not in item.model_dump_json()
