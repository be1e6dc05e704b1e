"""Query Engine: join, search, filter, sort and paginate the product collection.

``QueryEngine`` works in memory over any ``RecordStore``. ``SqlQueryEngine``
pushes the same steps down to SQL: one list of predicates feeds both the
count query and the page query, so ``totalItems`` and the page always agree.
"""

from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, field_validator
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import func, select

from inventory_manager.core.errors import NotFoundError, ValidationError
from inventory_manager.models import Category, Product
from inventory_manager.schemas.category import CategoryResponse
from inventory_manager.schemas.product import (
    Pagination, ProductPage, ProductRecord, ProductResponse,
)
from inventory_manager.stores.base import RecordStore
from inventory_manager.stores.sql import SqlRecordStore, product_record

SORT_FIELDS = ("name", "created_at", "updated_at", "remaining_stock", "selling_price")
DEFAULT_SORT = "created_at"
DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 100


class ProductQuery(BaseModel):
    """Listing request. Out-of-range values are normalized, not rejected."""

    search: str = ""
    category: str = "all"
    page: int = 1
    limit: int = DEFAULT_PAGE_SIZE
    sort_by: str = DEFAULT_SORT
    sort_order: Literal["ASC", "DESC"] = "DESC"

    @field_validator("search", mode="before")
    @classmethod
    def _search(cls, v):
        return v or ""

    @field_validator("category", mode="before")
    @classmethod
    def _category(cls, v):
        v = "all" if v is None or v == "" else str(v).strip()
        if v != "all" and not v.lstrip("-").isdigit():
            raise ValueError(f"Invalid category filter: {v!r}")
        return v

    @field_validator("page")
    @classmethod
    def _page(cls, v: int) -> int:
        return max(1, v)

    @field_validator("limit")
    @classmethod
    def _limit(cls, v: int) -> int:
        return min(MAX_PAGE_SIZE, max(1, v))

    @field_validator("sort_by", mode="before")
    @classmethod
    def _sort_by(cls, v):
        return v if v in SORT_FIELDS else DEFAULT_SORT

    @field_validator("sort_order", mode="before")
    @classmethod
    def _sort_order(cls, v):
        return "ASC" if str(v or "").upper() == "ASC" else "DESC"

    @classmethod
    def parse(cls, **params) -> "ProductQuery":
        try:
            return cls(**{k: v for k, v in params.items() if v is not None})
        except PydanticValidationError as exc:
            raise ValidationError(_first_error(exc)) from exc

    @property
    def category_id(self) -> int | None:
        return None if self.category == "all" else int(self.category)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def _first_error(exc: PydanticValidationError) -> str:
    err = exc.errors()[0]
    msg = err["msg"].removeprefix("Value error, ")
    loc = ".".join(str(p) for p in err["loc"])
    return f"{loc}: {msg}" if loc else msg


# ── In-memory steps ──

def join_categories(
    products: list[ProductRecord], categories: list[CategoryResponse], placeholder: str
) -> list[ProductResponse]:
    names = {c.id: c.name for c in categories}
    return [
        ProductResponse(**p.model_dump(), category_name=names.get(p.category_id, placeholder))
        for p in products
    ]


def matches_search(product: ProductRecord, search: str) -> bool:
    if not search:
        return True
    needle = search.casefold()
    return needle in product.name.casefold() or needle in (product.description or "").casefold()


def _aware(value: datetime) -> datetime:
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def _sort_value(product: ProductRecord, field: str):
    value = getattr(product, field)
    if isinstance(value, str):
        return value.casefold()
    if isinstance(value, datetime):
        return _aware(value)
    return value


def sort_products(items: list, field: str, order: str) -> list:
    """Sort by ``field``; equal values keep ascending id order in both directions."""
    by_id = sorted(items, key=lambda p: p.id)
    return sorted(by_id, key=lambda p: _sort_value(p, field), reverse=(order == "DESC"))


class QueryEngine:
    def __init__(self, store: RecordStore, placeholder: str = "Unknown"):
        self.store = store
        self.placeholder = placeholder

    async def list_categories(self) -> list[CategoryResponse]:
        return await self.store.list_categories()

    async def _joined(self) -> list[ProductResponse]:
        return join_categories(
            await self.store.list_products(), await self.store.list_categories(), self.placeholder
        )

    async def get_product(self, product_id: int) -> ProductResponse:
        record = await self.store.get_product(product_id)
        if record is None:
            raise NotFoundError("Product not found")
        return join_categories([record], await self.store.list_categories(), self.placeholder)[0]

    async def filter_products(self, search: str = "", category: str = "all") -> list[ProductResponse]:
        """Every match, newest first. Used where listings are not paginated."""
        query = ProductQuery.parse(search=search, category=category)
        items = [
            p for p in await self._joined()
            if matches_search(p, query.search)
            and (query.category_id is None or p.category_id == query.category_id)
        ]
        return sort_products(items, "created_at", "DESC")

    async def list_products(self, query: ProductQuery) -> ProductPage:
        matched = await self.filter_products(query.search, query.category)
        ordered = sort_products(matched, query.sort_by, query.sort_order)
        return ProductPage(
            items=ordered[query.offset:query.offset + query.limit],
            pagination=Pagination.build(query.page, query.limit, len(ordered)),
        )


def _escape_like(s: str) -> str:
    """Escape SQL LIKE wildcards in user input."""
    return s.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class SqlQueryEngine(QueryEngine):
    store: SqlRecordStore

    def _conditions(self, query: ProductQuery) -> list:
        conditions = []
        if query.search:
            like = f"%{_escape_like(query.search)}%"
            conditions.append(
                Product.name.ilike(like, escape="\\") | Product.description.ilike(like, escape="\\")
            )
        if query.category_id is not None:
            conditions.append(Product.category_id == query.category_id)
        return conditions

    def _response(self, product: Product, category_name: str | None) -> ProductResponse:
        return ProductResponse(
            **product_record(product).model_dump(),
            category_name=category_name or self.placeholder,
        )

    async def get_product(self, product_id: int) -> ProductResponse:
        async with self.store.session() as session:
            row = (await session.execute(
                select(Product, Category.name)
                .outerjoin(Category, Product.category_id == Category.id)
                .where(Product.id == product_id)
            )).first()
        if row is None:
            raise NotFoundError("Product not found")
        return self._response(*row)

    async def list_products(self, query: ProductQuery) -> ProductPage:
        conditions = self._conditions(query)
        count_query = select(func.count(Product.id)).where(*conditions)

        column = getattr(Product, query.sort_by)
        page_query = (
            select(Product, Category.name)
            .outerjoin(Category, Product.category_id == Category.id)
            .where(*conditions)
            .order_by(column.asc() if query.sort_order == "ASC" else column.desc(), Product.id.asc())
            .offset(query.offset)
            .limit(query.limit)
        )

        async with self.store.session() as session:
            total = (await session.execute(count_query)).scalar() or 0
            rows = (await session.execute(page_query)).all()

        return ProductPage(
            items=[self._response(product, name) for product, name in rows],
            pagination=Pagination.build(query.page, query.limit, total),
        )
