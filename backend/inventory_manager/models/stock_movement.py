"""Stock movement ledger: one row per stock change of a product."""

import enum

from sqlalchemy import String, Text, Integer, Enum, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from inventory_manager.db.base import Base
from inventory_manager.models.mixins import IntegerPrimaryKeyMixin, CreatedAtMixin


class MovementType(str, enum.Enum):
    IN = "IN"
    OUT = "OUT"
    ADJUSTMENT = "ADJUSTMENT"


class StockMovement(IntegerPrimaryKeyMixin, CreatedAtMixin, Base):
    __tablename__ = "stock_movements"

    product_id: Mapped[int] = mapped_column(
        ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True
    )
    movement_type: Mapped[MovementType] = mapped_column(Enum(MovementType), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    reason: Mapped[str | None] = mapped_column(String(255))
    reference_number: Mapped[str | None] = mapped_column(String(100))
    notes: Mapped[str | None] = mapped_column(Text)
    created_by: Mapped[str] = mapped_column(String(100), default="system", nullable=False)

    product = relationship("Product", back_populates="movements")

    def __repr__(self) -> str:
        return f"<StockMovement {self.movement_type} {self.quantity} product={self.product_id}>"
