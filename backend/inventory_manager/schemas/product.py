from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


# ── Product ──
class ProductBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    category_id: Optional[int] = None
    purchase_price: float = Field(..., ge=0)
    selling_price: float = Field(..., ge=0)
    remaining_stock: int = 0  # may go negative, see ProductService
    min_stock_level: int = Field(default=10, ge=0)
    image_url: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("name must not be blank")
        return v

    @field_validator("remaining_stock", mode="before")
    @classmethod
    def default_stock(cls, v):
        return 0 if v is None else v

    @field_validator("min_stock_level", mode="before")
    @classmethod
    def default_min_stock(cls, v):
        return 10 if v is None or v == "" else v

    @field_validator("image_url", mode="before")
    @classmethod
    def empty_image_is_none(cls, v):
        return v or None


class ProductCreate(ProductBase):
    pass


class ProductUpdate(ProductBase):
    """Full replacement of the mutable fields; ``id`` travels in the body."""
    id: int


class ProductRecord(ProductBase):
    """Stored shape, identical on every backend."""
    id: int
    created_at: datetime
    updated_at: datetime
    model_config = {"from_attributes": True}


class ProductResponse(ProductRecord):
    category_name: str


# ── Listing ──
class Pagination(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    current_page: int
    total_pages: int
    total_items: int
    items_per_page: int
    has_next_page: bool
    has_prev_page: bool

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        total_pages = -(-total // limit)
        return cls(
            current_page=page,
            total_pages=total_pages,
            total_items=total,
            items_per_page=limit,
            has_next_page=page < total_pages,
            has_prev_page=page > 1,
        )

    @classmethod
    def single_page(cls, page: int, limit: int, total: int) -> "Pagination":
        """Shape an unpaginated result (offline listing) into the paged contract."""
        return cls(
            current_page=page,
            total_pages=1,
            total_items=total,
            items_per_page=limit,
            has_next_page=False,
            has_prev_page=False,
        )


class ProductPage(BaseModel):
    items: list[ProductResponse]
    pagination: Pagination


# ── Envelopes ──
class ProductListResponse(BaseModel):
    success: bool = True
    products: list[ProductResponse]
    pagination: Pagination


class ProductDetailResponse(BaseModel):
    success: bool = True
    product: ProductResponse


class ProductCreatedResponse(BaseModel):
    success: bool = True
    id: int


# ── Stock movements ──
class StockMovementCreate(BaseModel):
    movement_type: str = Field(..., pattern="^(IN|OUT|ADJUSTMENT)$")
    quantity: int = Field(..., ge=0)
    reason: str | None = Field(None, max_length=255)
    created_by: str = "system"
