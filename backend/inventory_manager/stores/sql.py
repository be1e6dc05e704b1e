"""Relational store over the SQLAlchemy async engine (MySQL in production)."""

import logging
from contextlib import asynccontextmanager
from decimal import Decimal
from typing import AsyncIterator

from sqlalchemy import delete, func, select, text
from sqlalchemy.exc import DBAPIError, TimeoutError as PoolTimeoutError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from inventory_manager.core.errors import ConnectivityError
from inventory_manager.db.base import Base
from inventory_manager.db.seed import DEFAULT_CATEGORIES, default_categories, default_products
from inventory_manager.models import Category, MovementType, Product, StockMovement
from inventory_manager.schemas.category import CategoryResponse
from inventory_manager.schemas.product import ProductRecord, StockMovementCreate
from inventory_manager.stores.base import RecordStore

logger = logging.getLogger(__name__)


def product_record(product: Product) -> ProductRecord:
    return ProductRecord(
        id=product.id,
        name=product.name,
        description=product.description,
        category_id=product.category_id,
        purchase_price=float(product.purchase_price),
        selling_price=float(product.selling_price),
        remaining_stock=product.remaining_stock,
        min_stock_level=product.min_stock_level,
        image_url=product.image_url,
        created_at=product.created_at,
        updated_at=product.updated_at,
    )


def _columns(record: ProductRecord, exclude: set[str] | None = None) -> dict:
    values = record.model_dump(exclude={"id"} | (exclude or set()))
    for price in ("purchase_price", "selling_price"):
        values[price] = Decimal(str(values[price])).quantize(Decimal("0.01"))
    return values


def _movement(product_id: int, movement: StockMovementCreate) -> StockMovement:
    return StockMovement(
        product_id=product_id,
        movement_type=MovementType(movement.movement_type),
        quantity=movement.quantity,
        reason=movement.reason,
        created_by=movement.created_by,
    )


class SqlRecordStore(RecordStore):
    label = "MySQL"

    def __init__(self, engine: AsyncEngine, label: str | None = None):
        self.engine = engine
        self.session_factory = async_sessionmaker(engine, expire_on_commit=False)
        if label:
            self.label = label

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Session whose driver-level failures surface as ``ConnectivityError``."""
        try:
            async with self.session_factory() as session:
                yield session
        except (DBAPIError, PoolTimeoutError) as exc:
            if isinstance(exc, DBAPIError) and not exc.connection_invalidated and not _is_connect_error(exc):
                raise
            raise ConnectivityError(f"Database unavailable: {exc}") from exc

    async def ping(self) -> None:
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except (DBAPIError, PoolTimeoutError, OSError) as exc:
            raise ConnectivityError(f"Database connection failed: {exc}") from exc

    async def initialize(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

        async with self.session() as session, session.begin():
            existing = set((await session.execute(select(Category.name))).scalars())
            seeds = default_categories()
            for category in seeds:
                if category.name not in existing:
                    session.add(Category(
                        name=category.name,
                        description=category.description,
                        created_at=category.created_at,
                    ))
            await session.flush()

            count = (await session.execute(select(func.count(Product.id)))).scalar_one()
            if count:
                return

            # Seed products reference seed category ids; map them through names.
            ids_by_name = dict((await session.execute(select(Category.name, Category.id))).all())
            seed_names = {c["id"]: c["name"] for c in DEFAULT_CATEGORIES}
            products = default_products()
            for record in products:
                values = _columns(record, exclude={"category_id"})
                values["category_id"] = ids_by_name.get(seed_names.get(record.category_id))
                session.add(Product(**values))
            logger.info("Seeded %d default products into %s", len(products), self.label)

    async def list_categories(self) -> list[CategoryResponse]:
        async with self.session() as session:
            result = await session.execute(select(Category).order_by(Category.name, Category.id))
            return [CategoryResponse.model_validate(c) for c in result.scalars().all()]

    async def list_products(self) -> list[ProductRecord]:
        async with self.session() as session:
            result = await session.execute(select(Product))
            return [product_record(p) for p in result.scalars().all()]

    async def get_product(self, product_id: int) -> ProductRecord | None:
        async with self.session() as session:
            product = await session.get(Product, product_id)
            return product_record(product) if product else None

    async def insert_product(
        self, record: ProductRecord, movement: StockMovementCreate | None = None
    ) -> int:
        async with self.session() as session, session.begin():
            product = Product(**_columns(record))
            session.add(product)
            await session.flush()
            if movement is not None:
                session.add(_movement(product.id, movement))
        return product.id

    async def replace_product(
        self, product_id: int, record: ProductRecord, movement: StockMovementCreate | None = None
    ) -> bool:
        async with self.session() as session, session.begin():
            product = await session.get(Product, product_id)
            if product is None:
                return False
            for key, value in _columns(record, exclude={"created_at"}).items():
                setattr(product, key, value)
            if movement is not None:
                session.add(_movement(product_id, movement))
        return True

    async def remove_product(self, product_id: int) -> bool:
        async with self.session() as session, session.begin():
            # Explicit for SQLite, which does not enforce ON DELETE CASCADE by default.
            await session.execute(delete(StockMovement).where(StockMovement.product_id == product_id))
            result = await session.execute(delete(Product).where(Product.id == product_id))
            return result.rowcount > 0

    async def list_movements(self, product_id: int) -> list[StockMovement]:
        async with self.session() as session:
            result = await session.execute(
                select(StockMovement)
                .where(StockMovement.product_id == product_id)
                .order_by(StockMovement.id)
            )
            return list(result.scalars().all())

    async def close(self) -> None:
        await self.engine.dispose()


def _is_connect_error(exc: DBAPIError) -> bool:
    # MySQL client error codes: 2002/2003 cannot connect, 2006 gone away, 2013 lost connection.
    args = getattr(exc.orig, "args", ())
    return bool(args) and args[0] in (2002, 2003, 2006, 2013)
