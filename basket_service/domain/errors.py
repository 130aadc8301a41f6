# basket_service/domain/errors.py


class BasketError(Exception):
    """Bazowy wyjatek domeny koszyka."""


class ProductUnavailable(BasketError):
    """Produkt nie istnieje, jest nieaktywny albo nieopublikowany."""

    def __init__(self, product_id: int):
        self.product_id = product_id
        super().__init__(f"Product {product_id} is not available for sale")


class CatalogUnavailable(BasketError):
    """Batch lookup do katalogu sie nie powiodl, totals zostaja bez zmian."""


class BasketNotFound(BasketError):
    def __init__(self, user_id: int):
        self.user_id = user_id
        super().__init__(f"Basket for user {user_id} not found")


class BasketItemNotFound(BasketError):
    def __init__(self, item_id: int):
        self.item_id = item_id
        super().__init__(f"Basket item {item_id} not found")


class CouponInvalid(BasketError):
    pass


class BasketBusy(BasketError):
    """Inna operacja trzyma lock koszyka tego uzytkownika."""


class ConcurrencyConflict(BasketError):
    """Wersja koszyka zmienila sie miedzy odczytem a zapisem."""
