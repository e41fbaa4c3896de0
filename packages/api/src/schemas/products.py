# This project was developed with assistance from AI tools.
"""Product listing schemas."""

from datetime import datetime
from decimal import Decimal

from db.enums import ProductStatus
from pydantic import Field

from . import ApiModel, SuccessResponse


class ProductCreate(ApiModel):
    """Founder submission. Lands in the admin review queue as pending."""

    name: str = Field(min_length=1, max_length=255)
    category: str = Field(min_length=1, max_length=100)
    use_case: str | None = None
    description: str = Field(min_length=1)
    business_model: str | None = None
    pricing: str | None = None
    stage: str | None = Field(default=None, max_length=100)
    funding_required: Decimal | None = Field(default=None, ge=0)
    tags: list[str] = Field(default_factory=list)
    benefits: list[str] = Field(default_factory=list)


class ProductUpdate(ApiModel):
    """Partial edit. Any edit sends the listing back to review."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    category: str | None = Field(default=None, min_length=1, max_length=100)
    use_case: str | None = None
    description: str | None = Field(default=None, min_length=1)
    business_model: str | None = None
    pricing: str | None = None
    stage: str | None = Field(default=None, max_length=100)
    funding_required: Decimal | None = Field(default=None, ge=0)
    tags: list[str] | None = None
    benefits: list[str] | None = None


class ProductReviewRequest(ApiModel):
    status: ProductStatus = Field(description="approved or rejected")
    admin_notes: str | None = None


class ProductResponse(ApiModel):
    """Full listing as its founder and admins see it."""

    id: int
    founder_id: int
    name: str
    category: str
    use_case: str | None = None
    description: str
    business_model: str | None = None
    pricing: str | None = None
    stage: str | None = None
    funding_required: Decimal | None = None
    tags: list[str] = []
    benefits: list[str] = []
    status: ProductStatus
    admin_notes: str | None = None
    interest_count: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None


class CatalogProduct(ApiModel):
    """Investor-facing listing. The founder is known only by an anonymous label."""

    id: int
    name: str
    category: str
    use_case: str | None = None
    description: str
    business_model: str | None = None
    pricing: str | None = None
    stage: str | None = None
    funding_required: Decimal | None = None
    tags: list[str] = []
    benefits: list[str] = []
    interest_count: int = 0
    anonymous_id: str
    founder_label: str

    @classmethod
    def from_product(cls, product) -> "CatalogProduct":
        anonymous_id = product.founder.anonymous_id
        return cls(
            id=product.id,
            name=product.name,
            category=product.category,
            use_case=product.use_case,
            description=product.description,
            business_model=product.business_model,
            pricing=product.pricing,
            stage=product.stage,
            funding_required=product.funding_required,
            tags=list(product.tags or []),
            benefits=list(product.benefits or []),
            interest_count=product.interest_count or 0,
            anonymous_id=anonymous_id,
            founder_label=f"Product by Founder #{anonymous_id}",
        )


class ProductEnvelope(SuccessResponse):
    product: ProductResponse


class ProductListResponse(SuccessResponse):
    products: list[ProductResponse]


class CatalogResponse(SuccessResponse):
    products: list[CatalogProduct]
