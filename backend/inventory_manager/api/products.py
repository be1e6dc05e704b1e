from fastapi import APIRouter, Body, Depends, Query

from inventory_manager.core.deps import get_product_service, get_query_engine
from inventory_manager.core.errors import ValidationError
from inventory_manager.schemas.common import SuccessResponse
from inventory_manager.schemas.product import (
    ProductCreatedResponse, ProductDetailResponse, ProductListResponse,
)
from inventory_manager.services.products import ProductService
from inventory_manager.services.query import ProductQuery, QueryEngine

router = APIRouter(prefix="/api/products", tags=["products"])


def _product_id(raw: str | None) -> int:
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise ValidationError("Invalid product ID")


@router.get("", response_model=ProductListResponse)
async def list_products(
    search: str = "",
    category: str = "all",
    page: int = 1,
    limit: int = 50,
    sort_by: str = Query("created_at", alias="sortBy"),
    sort_order: str = Query("DESC", alias="sortOrder"),
    queries: QueryEngine = Depends(get_query_engine),
):
    query = ProductQuery.parse(
        search=search, category=category, page=page, limit=limit,
        sort_by=sort_by, sort_order=sort_order,
    )
    result = await queries.list_products(query)
    return ProductListResponse(products=result.items, pagination=result.pagination)


@router.get("/{product_id}", response_model=ProductDetailResponse)
async def get_product(product_id: str, queries: QueryEngine = Depends(get_query_engine)):
    product = await queries.get_product(_product_id(product_id))
    return ProductDetailResponse(product=product)


@router.post("", response_model=ProductCreatedResponse)
async def create_product(
    body: dict = Body(...),
    service: ProductService = Depends(get_product_service),
):
    product_id = await service.create_product(body)
    return ProductCreatedResponse(id=product_id)


@router.put("", response_model=SuccessResponse, response_model_exclude_none=True)
async def update_product(
    body: dict = Body(...),
    service: ProductService = Depends(get_product_service),
):
    await service.update_product(body)
    return SuccessResponse()


@router.delete("", response_model=SuccessResponse, response_model_exclude_none=True)
async def delete_product(
    id: str | None = None,
    service: ProductService = Depends(get_product_service),
):
    result = await service.delete_product(_product_id(id))
    return SuccessResponse(warnings=result.warnings or None)
