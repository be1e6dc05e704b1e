"""Record Store: durable read/write of the category and product collections.

Stores hold no business logic. Validation, timestamps and defaults belong to
``ProductService``; filtering and paging belong to ``QueryEngine``.
"""

import abc
import logging

from inventory_manager.schemas.category import CategoryResponse
from inventory_manager.schemas.product import ProductRecord, StockMovementCreate

logger = logging.getLogger(__name__)


class RecordStore(abc.ABC):
    """Persistence over one physical medium."""

    #: Shown by the health endpoint.
    label = "store"

    async def ping(self) -> None:
        """Raise ``ConnectivityError`` when the medium cannot be reached."""

    @abc.abstractmethod
    async def initialize(self) -> None:
        """Seed the default data set into an empty medium. Idempotent."""

    @abc.abstractmethod
    async def list_categories(self) -> list[CategoryResponse]:
        """All categories, ordered by name."""

    @abc.abstractmethod
    async def list_products(self) -> list[ProductRecord]:
        """All products, in no particular order."""

    @abc.abstractmethod
    async def get_product(self, product_id: int) -> ProductRecord | None:
        ...

    @abc.abstractmethod
    async def insert_product(
        self, record: ProductRecord, movement: StockMovementCreate | None = None
    ) -> int:
        """Store a new product and return its assigned id. ``record.id`` is ignored."""

    @abc.abstractmethod
    async def replace_product(
        self, product_id: int, record: ProductRecord, movement: StockMovementCreate | None = None
    ) -> bool:
        """Overwrite a product. False when ``product_id`` does not exist."""

    @abc.abstractmethod
    async def remove_product(self, product_id: int) -> bool:
        """Delete a product. False when ``product_id`` does not exist."""

    async def close(self) -> None:
        pass

    def _skip_movement(self, product_id: int, movement: StockMovementCreate | None) -> None:
        if movement is not None:
            logger.debug(
                "%s keeps no stock ledger, dropping %s %s for product %s",
                self.label, movement.movement_type, movement.quantity, product_id,
            )
