# basket_service/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict
from typing import Any, Dict, List
from decimal import Decimal
from datetime import datetime


class ItemIn(BaseModel):
    """Schema dla dodawania produktu do koszyka."""

    product_id: int = Field(..., gt=0, description="ID produktu (musi być > 0)")
    quantity: int = Field(1, gt=0, description="Ilość produktu (musi być > 0)")
    options: Dict[str, Any] | None = Field(None, description="Wybrane warianty, bez walidacji")


class ItemUpdateIn(BaseModel):
    """Schema dla zmiany pozycji. quantity <= 0 usuwa pozycje."""

    quantity: int | None = None
    options: Dict[str, Any] | None = None


class PricingIn(BaseModel):
    """Punkty do wykorzystania i koszt dostawy."""

    points_to_use: int | None = Field(None, ge=0, le=1_000_000)
    shipping_cost: Decimal | None = Field(None, ge=0, le=Decimal("1000000"))


class CouponIn(BaseModel):
    code: str = Field(..., min_length=1, max_length=64)


class BasketItemOut(BaseModel):
    """Schema dla pozycji koszyka (response)."""

    id: int
    product_id: int
    quantity: int
    options: Dict[str, Any] | None = None
    added_at: datetime


class BasketOut(BaseModel):
    """Schema dla koszyka (response)."""

    basket_id: int
    user_id: int
    items: List[BasketItemOut]
    subtotal: Decimal
    discount: Decimal
    points_to_use: int
    points_discount: Decimal
    shipping_cost: Decimal
    total: Decimal
    coupon_id: int | None = None
    version: int
    last_updated: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class BasketEnvelope(BaseModel):
    """Odpowiedz w formacie { success, message, data }."""

    success: bool = True
    message: str | None = None
    data: BasketOut
