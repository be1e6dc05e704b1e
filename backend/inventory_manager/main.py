import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from inventory_manager import __version__
from inventory_manager.api import categories, health, products, upload
from inventory_manager.core.config import Settings, settings as default_settings
from inventory_manager.core.errors import ConnectivityError, InventoryError
from inventory_manager.core.logging import configure_logging
from inventory_manager.services.backend import build_backend

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    backend = build_backend(settings)

    # --- Startup ---
    # Refuse to serve without a reachable database.
    try:
        await backend.store.ping()
    except ConnectivityError as e:
        logger.critical("Server cannot start without a database connection: %s", e)
        await backend.store.close()
        raise
    await backend.store.initialize()
    app.state.backend = backend
    logger.info("Database mode: %s", backend.store.label)

    yield

    # --- Shutdown ---
    await backend.store.close()


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or default_settings
    configure_logging(level=logging.DEBUG if settings.DEBUG else logging.INFO)

    app = FastAPI(
        title=settings.PROJECT_NAME,
        description="Gestion de stock - Droguerie: produits, catégories et images",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials="*" not in settings.CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Routers
    app.include_router(categories.router)
    app.include_router(products.router)
    app.include_router(upload.router)
    app.include_router(health.router)

    # Serve uploaded images
    uploads_dir = Path(settings.UPLOAD_DIR)
    uploads_dir.mkdir(parents=True, exist_ok=True)
    app.mount("/uploads", StaticFiles(directory=uploads_dir), name="uploads")

    @app.exception_handler(InventoryError)
    async def inventory_error_handler(request: Request, exc: InventoryError):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return _error(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        err = exc.errors()[0]
        loc = ".".join(str(p) for p in err["loc"] if p not in ("body", "query", "path"))
        return _error(400, f"{loc}: {err['msg']}" if loc else err["msg"])

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return _error(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return _error(500, str(exc))

    return app


app = create_app()
