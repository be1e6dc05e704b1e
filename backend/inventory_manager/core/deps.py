"""Dependency injection: hands the application's backend to route handlers."""

from fastapi import Depends, Request

from inventory_manager.services.backend import Backend
from inventory_manager.services.products import ProductService
from inventory_manager.services.query import QueryEngine


def get_backend(request: Request) -> Backend:
    """Backend built once in the lifespan and kept on ``app.state``."""
    return request.app.state.backend


def get_query_engine(backend: Backend = Depends(get_backend)) -> QueryEngine:
    return backend.queries


def get_product_service(backend: Backend = Depends(get_backend)) -> ProductService:
    return backend.products
