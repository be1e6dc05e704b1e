"""SQLAlchemy models for the relational backend."""

from inventory_manager.models.category import Category
from inventory_manager.models.product import Product
from inventory_manager.models.stock_movement import StockMovement, MovementType

__all__ = [
    "Category",
    "Product",
    "StockMovement",
    "MovementType",
]
