# basket_service/domain/coupons.py
from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP

from basket_service.data.models.coupon import CouponModel

PERCENTAGE = "percentage"
AMOUNT = "amount"
CENT = Decimal("0.01")


def _aware(value: datetime) -> datetime:
    # sqlite zwraca naive datetime
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def coupon_rejection(coupon: CouponModel, subtotal: Decimal, now: datetime) -> str | None:
    """Powod odrzucenia kuponu albo None jesli kupon mozna zastosowac."""
    if not coupon.is_active:
        return "Coupon is not active"

    if _aware(coupon.start_date) > now or _aware(coupon.end_date) < now:
        return "Coupon is outside its validity period"

    if coupon.usage_limit is not None and coupon.used_count >= coupon.usage_limit:
        return "Coupon usage limit reached"

    if coupon.min_purchase_amount and subtotal < coupon.min_purchase_amount:
        return f"Minimum purchase amount is {coupon.min_purchase_amount}"

    return None


def resolve_coupon_discount(coupon: CouponModel, subtotal: Decimal, now: datetime) -> Decimal:
    """
    Kwota rabatu dla danego subtotal.

    percentage -> subtotal * value / 100, amount -> value,
    nigdy wiecej niz subtotal. Kupon niespelniajacy warunkow daje 0.
    """
    if coupon_rejection(coupon, subtotal, now):
        return Decimal("0.00")

    value = Decimal(coupon.discount_value)
    if coupon.discount_type == PERCENTAGE:
        discount = subtotal * value / 100
    elif coupon.discount_type == AMOUNT:
        discount = value
    else:
        raise ValueError(f"Unknown discount type: {coupon.discount_type}")

    discount = min(discount, subtotal)
    return max(discount, Decimal("0.00")).quantize(CENT, rounding=ROUND_HALF_UP)
