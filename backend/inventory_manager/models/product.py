"""Product model."""

from decimal import Decimal

from sqlalchemy import String, Text, Numeric, Integer, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

from inventory_manager.db.base import Base
from inventory_manager.models.mixins import IntegerPrimaryKeyMixin, TimestampMixin


class Product(IntegerPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "products"
    __table_args__ = (
        Index("idx_stock_level", "remaining_stock", "min_stock_level"),
        {"mysql_charset": "utf8mb4", "mysql_collate": "utf8mb4_unicode_ci"},
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    description: Mapped[str | None] = mapped_column(Text)
    purchase_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    selling_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    remaining_stock: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    min_stock_level: Mapped[int] = mapped_column(Integer, default=10, nullable=False)
    image_url: Mapped[str | None] = mapped_column(String(500))

    category_id: Mapped[int | None] = mapped_column(
        ForeignKey("categories.id", ondelete="SET NULL"), index=True
    )

    category = relationship("Category", back_populates="products")
    movements = relationship(
        "StockMovement", back_populates="product", cascade="all, delete-orphan", passive_deletes=True
    )

    def __repr__(self) -> str:
        return f"<Product {self.id}: {self.name}>"
