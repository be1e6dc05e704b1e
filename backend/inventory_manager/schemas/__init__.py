from inventory_manager.schemas.category import (
    CategoryResponse, CategoryListResponse,
)
from inventory_manager.schemas.product import (
    ProductCreate, ProductUpdate, ProductRecord, ProductResponse,
    Pagination, ProductPage, ProductListResponse, ProductDetailResponse,
    ProductCreatedResponse, StockMovementCreate,
)
from inventory_manager.schemas.common import (
    SuccessResponse, UploadResponse, ImageDeleteRequest, HealthResponse,
)

__all__ = [
    "CategoryResponse", "CategoryListResponse",
    "ProductCreate", "ProductUpdate", "ProductRecord", "ProductResponse",
    "Pagination", "ProductPage", "ProductListResponse", "ProductDetailResponse",
    "ProductCreatedResponse", "StockMovementCreate",
    "SuccessResponse", "UploadResponse", "ImageDeleteRequest", "HealthResponse",
]
