# basket_service/domain/pricing.py
"""
Silnik cen koszyka.

Czyste funkcje: subtotal liczony z aktualnych cen katalogu, potem
total = subtotal - discount - points * 0.1 + shipping.
Total NIE jest obcinany do zera, o tym decyduje wywolujacy.
"""
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Iterable, Mapping, Protocol

from basket_service.domain.errors import CatalogUnavailable
from basket_service.utils.logging import get_logger

logger = get_logger(__name__)

# 1 punkt = 0.1 jednostki waluty
POINT_VALUE = Decimal("0.1")
ZERO = Decimal("0.00")


@dataclass(frozen=True)
class CatalogEntry:
    price: Decimal
    discount_price: Decimal | None = None
    is_active: bool = True
    is_published: bool = True

    @property
    def eligible(self) -> bool:
        return self.is_active and self.is_published


class CatalogLookup(Protocol):
    def lookup(self, product_ids: set[int]) -> Mapping[int, CatalogEntry]:
        ...


class PricedItem(Protocol):
    product_id: int
    quantity: int


@dataclass(frozen=True)
class BasketTotals:
    subtotal: Decimal
    discount: Decimal
    points_discount: Decimal
    shipping_cost: Decimal
    total: Decimal
    computed_at: datetime

    def as_columns(self) -> dict:
        """Pola koszyka podmieniane jednym zapisem."""
        return {
            "subtotal": self.subtotal,
            "discount": self.discount,
            "shipping_cost": self.shipping_cost,
            "total": self.total,
            "last_updated": self.computed_at,
        }


def effective_price(entry: CatalogEntry) -> Decimal:
    # cena promocyjna wygrywa, 0/None traktujemy jak brak promocji
    if entry.discount_price:
        return Decimal(entry.discount_price)
    return Decimal(entry.price)


def points_value(points_to_use: int) -> Decimal:
    if points_to_use < 0:
        raise ValueError("points_to_use must not be negative")
    return POINT_VALUE * points_to_use


def price_items(items: Iterable[PricedItem], catalog_lookup: CatalogLookup) -> Decimal:
    """
    Subtotal z aktualnych danych katalogu (jeden batch lookup).

    Produkty nieobecne albo nieaktywne/nieopublikowane daja 0,
    nie sa usuwane z listy i nie rzucaja bledu.
    """
    items = list(items)
    if not items:
        return ZERO

    product_ids = {i.product_id for i in items}
    try:
        entries = catalog_lookup.lookup(product_ids)
    except CatalogUnavailable:
        raise
    except Exception as e:
        logger.error(f"Catalog lookup failed for {sorted(product_ids)}: {e}")
        raise CatalogUnavailable(str(e)) from e

    subtotal = ZERO
    for item in items:
        entry = entries.get(item.product_id)
        if entry is None or not entry.eligible:
            logger.info(f"Product {item.product_id} excluded from subtotal (not eligible)")
            continue
        subtotal += effective_price(entry) * item.quantity

    return subtotal


def totals_from_subtotal(
    subtotal: Decimal,
    discount: Decimal,
    points_to_use: int,
    shipping_cost: Decimal,
    now: datetime | None = None,
) -> BasketTotals:
    discount = Decimal(discount)
    shipping_cost = Decimal(shipping_cost)
    points_discount = points_value(points_to_use)

    total = subtotal - discount - points_discount + shipping_cost

    return BasketTotals(
        subtotal=subtotal,
        discount=discount,
        points_discount=points_discount,
        shipping_cost=shipping_cost,
        total=total,
        computed_at=now or datetime.now(timezone.utc),
    )


def recompute_totals(
    items: Iterable[PricedItem],
    catalog_lookup: CatalogLookup,
    discount: Decimal,
    points_to_use: int,
    shipping_cost: Decimal,
    now: datetime | None = None,
) -> BasketTotals:
    subtotal = price_items(items, catalog_lookup)
    return totals_from_subtotal(subtotal, discount, points_to_use, shipping_cost, now)
