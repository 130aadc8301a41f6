# basket_service/services/basket_service.py
from contextlib import contextmanager
from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from basket_service.data.models.basket import BasketModel
from basket_service.data.models.basket_item import BasketItemModel
from basket_service.domain.coupons import CENT, coupon_rejection, resolve_coupon_discount
from basket_service.domain.errors import (
    BasketBusy,
    BasketItemNotFound,
    BasketNotFound,
    ConcurrencyConflict,
    CouponInvalid,
    ProductUnavailable,
)
from basket_service.domain.pricing import (
    ZERO,
    BasketTotals,
    CatalogLookup,
    points_value,
    price_items,
    recompute_totals,
    totals_from_subtotal,
)
from basket_service.repos.basket_repo import BasketRepo
from basket_service.repos.coupon_repo import CouponRepo
from basket_service.services.lock_service import LockService
from basket_service.utils.settings import BASKET_LOCK_TTL_SECONDS
from basket_service.utils.logging import get_logger

logger = get_logger(__name__)


class BasketService:
    """
    Use case'y dla domeny koszyka (jeden koszyk na uzytkownika).
    commands (add, update, remove, clear, pricing, coupon) modyfikuja stan
    pod lockiem uzytkownika i z optimistic locking na polu version,
    query (get) tylko przelicza i nic nie zapisuje
    """

    def __init__(
        self,
        db: Session,
        catalog: CatalogLookup,
        lock_service: LockService,
    ):
        self.repo = BasketRepo(db)
        self.coupon_repo = CouponRepo(db)
        self.catalog = catalog
        self.lock_service = lock_service

    #query - odczyt
    def get_basket(self, user_id: int) -> Dict[str, Any]:
        basket = self._get_or_create(user_id)
        totals = self._recompute(
            basket,
            coupon_id=basket.coupon_id,
            points_to_use=basket.points_to_use,
            shipping_cost=basket.shipping_cost,
        )
        return self._to_dict(basket, totals)

    #commands
    def add_item(
        self,
        user_id: int,
        product_id: int,
        quantity: int = 1,
        options: dict | None = None,
    ) -> Dict[str, Any]:

        if quantity <= 0:
            raise ValueError("Quantity must be greater than 0")

        with self._basket_lock(user_id):
            logger.info(f"Sprawdzanie produktu {product_id} w katalogu")
            entry = self.catalog.lookup({product_id}).get(product_id)
            if entry is None or not entry.eligible:
                raise ProductUnavailable(product_id)

            basket = self._get_or_create(user_id)
            existing = self._find_by_product(basket, product_id)

            if existing:
                logger.info(
                    f"Produkt {product_id} juz jest w koszyku, zwiekszam ilosc "
                    f"z {existing.quantity} do {existing.quantity + quantity}"
                )
                existing.quantity += quantity
            else:
                logger.info(f"Dodaje produkt {product_id} do koszyka {basket.id}")
                basket.items.append(
                    BasketItemModel(
                        product_id=product_id,
                        quantity=quantity,
                        options=options,
                        added_at=datetime.now(timezone.utc),
                    )
                )

            return self._save(basket)

    def update_item_quantity(
        self,
        user_id: int,
        item_id: int,
        quantity: int | None,
        options: dict | None = None,
    ) -> Dict[str, Any]:

        with self._basket_lock(user_id):
            basket = self._require_basket(user_id)
            item = self._find_item(basket, item_id)

            #ilosc <= 0 to usuniecie pozycji, nie blad
            if quantity is not None and quantity <= 0:
                logger.info(f"Ilosc {quantity} dla pozycji {item_id}, usuwam z koszyka")
                basket.items.remove(item)
            else:
                if quantity is not None:
                    item.quantity = quantity
                if options is not None:
                    item.options = options

            return self._save(basket)

    def remove_item(self, user_id: int, item_id: int) -> Dict[str, Any]:

        with self._basket_lock(user_id):
            basket = self._require_basket(user_id)
            item = self._find_item(basket, item_id)

            logger.info(f"Usuwanie pozycji {item_id} z koszyka {basket.id}")
            basket.items.remove(item)

            return self._save(basket)

    def clear(self, user_id: int) -> Dict[str, Any]:

        with self._basket_lock(user_id):
            basket = self._require_basket(user_id)

            logger.info(f"Czyszczenie koszyka {basket.id}")
            basket.items.clear()

            #stan zerowy z definicji, bez przeliczania
            self._write(
                basket,
                {
                    "subtotal": ZERO,
                    "discount": ZERO,
                    "points_to_use": 0,
                    "shipping_cost": ZERO,
                    "total": ZERO,
                    "coupon_id": None,
                    "last_updated": datetime.now(timezone.utc),
                },
            )
            return self._to_dict(basket)

    def set_pricing(
        self,
        user_id: int,
        points_to_use: int | None = None,
        shipping_cost: Decimal | None = None,
    ) -> Dict[str, Any]:

        if points_to_use is not None and points_to_use < 0:
            raise ValueError("points_to_use must not be negative")
        if shipping_cost is not None and Decimal(shipping_cost) < 0:
            raise ValueError("shipping_cost must not be negative")

        with self._basket_lock(user_id):
            basket = self._get_or_create(user_id)

            extra = {}
            if points_to_use is not None:
                extra["points_to_use"] = points_to_use
            if shipping_cost is not None:
                #kolumna Numeric(12, 2), odpowiedz musi sie zgadzac z tym co zapisane
                extra["shipping_cost"] = Decimal(shipping_cost).quantize(CENT, rounding=ROUND_HALF_UP)

            return self._save(basket, **extra)

    def apply_coupon(self, user_id: int, code: str) -> Dict[str, Any]:

        with self._basket_lock(user_id):
            coupon = self.coupon_repo.get_by_code(code)
            if not coupon:
                raise CouponInvalid(f"Coupon {code} not found")

            basket = self._get_or_create(user_id)
            subtotal = price_items(basket.items, self.catalog)

            reason = coupon_rejection(coupon, subtotal, datetime.now(timezone.utc))
            if reason:
                raise CouponInvalid(reason)

            logger.info(f"Kupon {coupon.code} dodany do koszyka {basket.id}")
            return self._save(basket, coupon_id=coupon.id)

    def remove_coupon(self, user_id: int) -> Dict[str, Any]:

        with self._basket_lock(user_id):
            basket = self._require_basket(user_id)
            logger.info(f"Odpinanie kuponu od koszyka {basket.id}")
            return self._save(basket, coupon_id=None)

    #helpers
    @contextmanager
    def _basket_lock(self, user_id: int):
        token = self.lock_service.new_token()
        locked = self.lock_service.acquire_basket_lock(
            user_id=user_id,
            token=token,
            ttl=BASKET_LOCK_TTL_SECONDS,
        )
        if not locked:
            raise BasketBusy("Basket is being modified by another request")

        try:
            yield
        finally:
            self.lock_service.release_basket_lock(user_id, token)

    def _get_or_create(self, user_id: int) -> BasketModel:
        basket = self.repo.get_by_user(user_id)
        if basket:
            return basket

        logger.info(f"Tworze nowy koszyk dla uzytkownika {user_id}")
        try:
            return self.repo.create_basket(
                BasketModel(
                    user_id=user_id,
                    subtotal=ZERO,
                    discount=ZERO,
                    points_to_use=0,
                    shipping_cost=ZERO,
                    total=ZERO,
                    version=1,
                    last_updated=datetime.now(timezone.utc),
                )
            )
        except IntegrityError:
            #rownolegly request tego samego uzytkownika utworzyl koszyk pierwszy
            logger.info(f"Koszyk uzytkownika {user_id} utworzony rownolegle, odczytuje ponownie")
            self.repo.rollback()
            return self.repo.get_by_user(user_id)

    def _require_basket(self, user_id: int) -> BasketModel:
        basket = self.repo.get_by_user(user_id)
        if not basket:
            raise BasketNotFound(user_id)
        return basket

    @staticmethod
    def _find_item(basket: BasketModel, item_id: int) -> BasketItemModel:
        for item in basket.items:
            if item.id == item_id:
                return item
        raise BasketItemNotFound(item_id)

    @staticmethod
    def _find_by_product(basket: BasketModel, product_id: int) -> BasketItemModel | None:
        for item in basket.items:
            if item.product_id == product_id:
                return item
        return None

    def _recompute(
        self,
        basket: BasketModel,
        coupon_id: int | None,
        points_to_use: int,
        shipping_cost: Decimal,
    ) -> BasketTotals:
        now = datetime.now(timezone.utc)

        if coupon_id is None:
            return recompute_totals(basket.items, self.catalog, ZERO, points_to_use, shipping_cost, now)

        #kupon procentowy zalezy od swiezego subtotal
        subtotal = price_items(basket.items, self.catalog)
        coupon = self.coupon_repo.get_coupon(coupon_id)
        discount = resolve_coupon_discount(coupon, subtotal, now) if coupon else ZERO
        return totals_from_subtotal(subtotal, discount, points_to_use, shipping_cost, now)

    def _save(self, basket: BasketModel, **changes) -> Dict[str, Any]:
        """Przelicza totals z nowymi wejsciami (coupon_id, points_to_use, shipping_cost) i zapisuje."""
        inputs = {
            "coupon_id": basket.coupon_id,
            "points_to_use": basket.points_to_use,
            "shipping_cost": basket.shipping_cost,
            **changes,
        }

        try:
            totals = self._recompute(basket, **inputs)
        except Exception as e:
            #nic nie zapisujemy, totals zostaja z ostatniego udanego przeliczenia
            logger.error(f"Przeliczenie koszyka {basket.id} nie powiodlo sie: {e}")
            self.repo.rollback()
            raise

        self._write(basket, {**inputs, **totals.as_columns()})
        return self._to_dict(basket, totals)

    def _write(self, basket: BasketModel, new_data: dict) -> None:
        old_version = basket.version

        # Optimistic locking
        rowcount = self.repo.update_basket_version(
            basket_id=basket.id,
            old_version=old_version,
            new_data=new_data,
        )

        if rowcount == 0:
            self.repo.rollback()
            raise ConcurrencyConflict(
                "Basket was modified by another operation"
            )

        self.repo.commit()

        logger.info(f"Koszyk {basket.id} zapisany, nowa wersja: {old_version + 1}")

    @staticmethod
    def _to_dict(basket: BasketModel, totals: BasketTotals | None = None) -> Dict[str, Any]:
        subtotal = totals.subtotal if totals else basket.subtotal
        discount = totals.discount if totals else basket.discount
        shipping = totals.shipping_cost if totals else basket.shipping_cost
        total = totals.total if totals else basket.total
        last_updated = totals.computed_at if totals else basket.last_updated

        #dict przeksztalcany w jsona
        return {
            "basket_id": basket.id,
            "user_id": basket.user_id,
            "items": [
                {
                    "id": i.id,
                    "product_id": i.product_id,
                    "quantity": i.quantity,
                    "options": i.options,
                    "added_at": i.added_at,
                }
                for i in basket.items
            ],
            "subtotal": subtotal,
            "discount": discount,
            "points_to_use": basket.points_to_use,
            "points_discount": points_value(basket.points_to_use),
            "shipping_cost": shipping,
            "total": total,
            "coupon_id": basket.coupon_id,
            "version": basket.version,
            "last_updated": last_updated,
        }
