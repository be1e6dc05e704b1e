"""Category model."""

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from inventory_manager.db.base import Base
from inventory_manager.models.mixins import IntegerPrimaryKeyMixin, CreatedAtMixin


class Category(IntegerPrimaryKeyMixin, CreatedAtMixin, Base):
    __tablename__ = "categories"
    __table_args__ = {"mysql_charset": "utf8mb4", "mysql_collate": "utf8mb4_unicode_ci"}

    name: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    description: Mapped[str | None] = mapped_column(Text)

    products = relationship("Product", back_populates="category", passive_deletes=True)

    def __repr__(self) -> str:
        return f"<Category {self.id}: {self.name}>"
