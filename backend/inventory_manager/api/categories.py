"""Category endpoints. Categories are seeded; there is no write path."""

from fastapi import APIRouter, Depends

from inventory_manager.core.deps import get_query_engine
from inventory_manager.schemas.category import CategoryListResponse
from inventory_manager.services.query import QueryEngine

router = APIRouter(prefix="/api/categories", tags=["categories"])


@router.get("", response_model=CategoryListResponse)
async def list_categories(queries: QueryEngine = Depends(get_query_engine)):
    """List all categories ordered by name."""
    return CategoryListResponse(categories=await queries.list_categories())
