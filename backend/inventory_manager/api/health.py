from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from inventory_manager.core.deps import get_backend
from inventory_manager.core.errors import ConnectivityError
from inventory_manager.schemas.common import HealthResponse
from inventory_manager.services.backend import Backend

router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(backend: Backend = Depends(get_backend)):
    try:
        await backend.store.ping()
    except ConnectivityError as exc:
        return JSONResponse(
            status_code=500,
            content={"success": False, "error": "Database connection failed", "details": exc.message},
        )
    return HealthResponse(
        message=f"{backend.store.label} database connected successfully",
        database=backend.store.label,
        config=backend.config,
    )
