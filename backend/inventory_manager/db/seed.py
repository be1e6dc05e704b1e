"""Default categories and products written to an empty medium.

┌────┬──────────────────────┬─────────────┬───────┬───────┬───────┐
│ id │ Product              │ Category    │ Buy   │ Sell  │ Stock │
├────┼──────────────────────┼─────────────┼───────┼───────┼───────┤
│ 1  │ Marteau 500g         │ Outils      │ 25.00 │ 35.00 │  15   │
│ 2  │ Tournevis cruciforme │ Outils      │  8.00 │ 12.00 │  25   │
│ 3  │ Ampoule LED 9W       │ Électricité │  5.00 │  8.50 │  50   │
│ 4  │ Interrupteur simple  │ Électricité │  3.50 │  6.00 │  30   │
│ 5  │ Robinet mélangeur    │ Plomberie   │ 45.00 │ 75.00 │   8   │
│ 6  │ Peinture blanc mat   │ Peinture    │ 18.00 │ 28.00 │  12   │
│ 7  │ Sécateur             │ Jardinage   │ 15.00 │ 22.00 │   6   │
└────┴──────────────────────┴─────────────┴───────┴───────┴───────┘
"""

from datetime import datetime, timezone

from inventory_manager.schemas.category import CategoryResponse
from inventory_manager.schemas.product import ProductRecord

DEFAULT_CATEGORIES: list[dict] = [
    {"id": 1, "name": "Outils", "description": "Outils de bricolage et construction"},
    {"id": 2, "name": "Électricité", "description": "Matériel électrique et éclairage"},
    {"id": 3, "name": "Plomberie", "description": "Équipements de plomberie"},
    {"id": 4, "name": "Peinture", "description": "Peintures et accessoires"},
    {"id": 5, "name": "Jardinage", "description": "Outils et produits de jardinage"},
]

DEFAULT_PRODUCTS: list[dict] = [
    {
        "id": 1, "name": "Marteau 500g", "description": "Marteau à panne fendue 500g",
        "category_id": 1, "purchase_price": 25.00, "selling_price": 35.00, "remaining_stock": 15,
    },
    {
        "id": 2, "name": "Tournevis cruciforme", "description": "Tournevis cruciforme PH2",
        "category_id": 1, "purchase_price": 8.00, "selling_price": 12.00, "remaining_stock": 25,
    },
    {
        "id": 3, "name": "Ampoule LED 9W", "description": "Ampoule LED E27 9W blanc chaud",
        "category_id": 2, "purchase_price": 5.00, "selling_price": 8.50, "remaining_stock": 50,
    },
    {
        "id": 4, "name": "Interrupteur simple", "description": "Interrupteur va-et-vient blanc",
        "category_id": 2, "purchase_price": 3.50, "selling_price": 6.00, "remaining_stock": 30,
    },
    {
        "id": 5, "name": "Robinet mélangeur", "description": "Robinet mélangeur cuisine chromé",
        "category_id": 3, "purchase_price": 45.00, "selling_price": 75.00, "remaining_stock": 8,
    },
    {
        "id": 6, "name": "Peinture blanc mat", "description": "Peinture acrylique blanc mat 2.5L",
        "category_id": 4, "purchase_price": 18.00, "selling_price": 28.00, "remaining_stock": 12,
    },
    {
        "id": 7, "name": "Sécateur", "description": "Sécateur lames franches 20cm",
        "category_id": 5, "purchase_price": 15.00, "selling_price": 22.00, "remaining_stock": 6,
    },
]


def default_categories(now: datetime | None = None) -> list[CategoryResponse]:
    now = now or datetime.now(timezone.utc)
    return [CategoryResponse(**c, created_at=now) for c in DEFAULT_CATEGORIES]


def default_products(now: datetime | None = None) -> list[ProductRecord]:
    now = now or datetime.now(timezone.utc)
    return [
        ProductRecord(**p, min_stock_level=10, created_at=now, updated_at=now)
        for p in DEFAULT_PRODUCTS
    ]
