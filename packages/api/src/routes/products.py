# This project was developed with assistance from AI tools.
"""Product listing routes: founder submission, investor catalog, admin review."""

from db import get_db
from db.enums import UserRole
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..middleware.auth import CurrentUser, VerifiedFounder, require_roles
from ..schemas.products import (
    CatalogProduct,
    CatalogResponse,
    ProductCreate,
    ProductEnvelope,
    ProductListResponse,
    ProductResponse,
    ProductReviewRequest,
    ProductUpdate,
)
from ..services import product as product_service
from ._errors import not_found, workflow_errors

router = APIRouter()


@router.post("", response_model=ProductEnvelope, status_code=201)
async def submit_product(
    body: ProductCreate,
    user: VerifiedFounder,
    session: AsyncSession = Depends(get_db),
) -> ProductEnvelope:
    product = await product_service.create_product(session, user, **body.model_dump())
    return ProductEnvelope(product=ProductResponse.model_validate(product))


@router.get(
    "/mine",
    response_model=ProductListResponse,
    dependencies=[Depends(require_roles(UserRole.FOUNDER))],
)
async def my_products(
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> ProductListResponse:
    products = await product_service.list_founder_products(session, user)
    return ProductListResponse(products=[ProductResponse.model_validate(p) for p in products])


@router.put("/{product_id}", response_model=ProductEnvelope)
async def edit_product(
    product_id: int,
    body: ProductUpdate,
    user: VerifiedFounder,
    session: AsyncSession = Depends(get_db),
) -> ProductEnvelope:
    """Partial edit of the founder's own listing. Sends it back to review."""
    with workflow_errors():
        product = await product_service.update_product(
            session, user, product_id, **body.model_dump(exclude_unset=True)
        )
    if product is None:
        raise not_found("Product")
    return ProductEnvelope(product=ProductResponse.model_validate(product))


@router.get(
    "/catalog",
    response_model=CatalogResponse,
    dependencies=[Depends(require_roles(UserRole.INVESTOR, UserRole.ADMIN, UserRole.SUPERADMIN))],
)
async def catalog(session: AsyncSession = Depends(get_db)) -> CatalogResponse:
    products = await product_service.list_catalog(session)
    return CatalogResponse(products=[CatalogProduct.from_product(p) for p in products])


@router.get(
    "/admin/pending",
    response_model=ProductListResponse,
    dependencies=[Depends(require_roles(UserRole.ADMIN, UserRole.SUPERADMIN))],
)
async def pending_products(session: AsyncSession = Depends(get_db)) -> ProductListResponse:
    products = await product_service.list_pending_products(session)
    return ProductListResponse(products=[ProductResponse.model_validate(p) for p in products])


@router.post(
    "/admin/{product_id}/review",
    response_model=ProductEnvelope,
    dependencies=[Depends(require_roles(UserRole.ADMIN, UserRole.SUPERADMIN))],
)
async def review_product(
    product_id: int,
    body: ProductReviewRequest,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> ProductEnvelope:
    with workflow_errors():
        product = await product_service.review_product(
            session, user, product_id, body.status, body.admin_notes
        )
    if product is None:
        raise not_found("Product")
    return ProductEnvelope(product=ProductResponse.model_validate(product))
