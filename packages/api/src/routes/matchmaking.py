# This project was developed with assistance from AI tools.
"""Investor matchmaking: browse approved products and send an interest form."""

from db import get_db
from db.enums import UserRole
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..middleware.auth import CurrentUser, require_roles
from ..schemas.products import CatalogProduct, CatalogResponse
from ..schemas.query import (
    InterestFormRequest,
    InvestorQueryCreatedResponse,
    InvestorQueryInvestorView,
)
from ..services import product as product_service
from ..services import query as query_service
from ..services.contact_flags import CONTACT_INFO_WARNING
from ._errors import not_found, workflow_errors

router = APIRouter(dependencies=[Depends(require_roles(UserRole.INVESTOR))])


@router.get("/products", response_model=CatalogResponse)
async def matchmaking_products(session: AsyncSession = Depends(get_db)) -> CatalogResponse:
    products = await product_service.list_catalog(session)
    return CatalogResponse(products=[CatalogProduct.from_product(p) for p in products])


@router.post("/interest-forms", response_model=InvestorQueryCreatedResponse, status_code=201)
async def submit_interest_form(
    body: InterestFormRequest,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> InvestorQueryCreatedResponse:
    """Short-form interest. Enters the same admin review queue as a full query."""
    with workflow_errors():
        record = await query_service.submit_interest_form(
            session,
            user,
            product_id=body.product_id,
            message=body.message_from_investor,
        )
    if record is None:
        raise not_found("Product")
    return InvestorQueryCreatedResponse(
        query=InvestorQueryInvestorView.from_record(record),
        contact_info_warning=CONTACT_INFO_WARNING,
    )
