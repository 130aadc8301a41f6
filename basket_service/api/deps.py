# basket_service/api/deps.py
from fastapi import Depends
from sqlalchemy.orm import Session

from basket_service.data.database import get_db
from basket_service.services.basket_service import BasketService
from basket_service.services.catalog_client import CatalogClient
from basket_service.services.lock_service import LockService


def get_catalog() -> CatalogClient:
    return CatalogClient()


def get_lock_service() -> LockService:
    return LockService()


def get_basket_service(
    db: Session = Depends(get_db),
    catalog=Depends(get_catalog),
    lock_service: LockService = Depends(get_lock_service),
) -> BasketService:
    return BasketService(
        db=db,
        catalog=catalog,
        lock_service=lock_service,
    )
