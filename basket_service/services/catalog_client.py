# basket_service/services/catalog_client.py
from decimal import Decimal
from typing import Dict

import requests
from requests import RequestException

from basket_service.domain.errors import CatalogUnavailable
from basket_service.domain.pricing import CatalogEntry
from basket_service.utils.retry import http_retry
from basket_service.utils.settings import CATALOG_SERVICE_URL, CATALOG_TIMEOUT_SECONDS
from basket_service.utils.logging import get_logger

logger = get_logger(__name__)


def _to_entry(payload: dict) -> CatalogEntry:
    discount_price = payload.get("discount_price")
    return CatalogEntry(
        price=Decimal(str(payload["price"])),
        discount_price=Decimal(str(discount_price)) if discount_price is not None else None,
        is_active=bool(payload.get("is_active", False)),
        is_published=bool(payload.get("is_published", False)),
    )


class CatalogClient:
    """
    Batch lookup cen i dostepnosci w catalog-service.
    Id ktorych katalog nie zwrocil sa po prostu nieobecne w wyniku.
    """

    def __init__(self, base_url: str | None = None, timeout: float | None = None):
        self.base_url = (base_url or CATALOG_SERVICE_URL).rstrip("/")
        self.timeout = timeout or CATALOG_TIMEOUT_SECONDS

    @http_retry()
    def fetch_products(self, product_ids: set[int]) -> list[dict]:
        url = f"{self.base_url}/products/batch"
        ids = ",".join(str(pid) for pid in sorted(product_ids))
        logger.info(f"CatalogClient GET {url}?ids={ids}")

        resp = requests.get(url, params={"ids": ids}, timeout=self.timeout)
        resp.raise_for_status()
        return resp.json()

    def lookup(self, product_ids: set[int]) -> Dict[int, CatalogEntry]:
        if not product_ids:
            return {}

        try:
            products = self.fetch_products(product_ids)
        except RequestException as e:
            logger.error(f"Catalog service unavailable: {e}")
            raise CatalogUnavailable("Catalog service is unavailable") from e

        return {int(p["id"]): _to_entry(p) for p in products}
