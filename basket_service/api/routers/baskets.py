# basket_service/api/routers/baskets.py
from fastapi import APIRouter, Depends, HTTPException, Query

from basket_service.api.deps import get_basket_service
from basket_service.domain.errors import (
    BasketBusy,
    BasketItemNotFound,
    BasketNotFound,
    CatalogUnavailable,
    ConcurrencyConflict,
    CouponInvalid,
    ProductUnavailable,
)
from basket_service.domain.schemas import (
    BasketEnvelope,
    CouponIn,
    ItemIn,
    ItemUpdateIn,
    PricingIn,
)
from basket_service.services.basket_service import BasketService

router = APIRouter(prefix="/baskets", tags=["baskets"])


def _run(command, message: str | None = None):
    try:
        return {"success": True, "message": message, "data": command()}
    except (BasketNotFound, BasketItemNotFound) as e:
        raise HTTPException(status_code=404, detail=str(e))
    except (BasketBusy, ConcurrencyConflict) as e:
        raise HTTPException(status_code=409, detail=str(e))
    except CatalogUnavailable as e:
        raise HTTPException(status_code=503, detail=str(e))
    except (ProductUnavailable, CouponInvalid, ValueError) as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("", response_model=BasketEnvelope)
def get_basket(
    user_id: int = Query(..., gt=0),
    svc: BasketService = Depends(get_basket_service),
):
    return _run(lambda: svc.get_basket(user_id))


@router.post("/items", response_model=BasketEnvelope)
def add_item(
    payload: ItemIn,
    user_id: int = Query(..., gt=0),
    svc: BasketService = Depends(get_basket_service),
):
    return _run(
        lambda: svc.add_item(
            user_id=user_id,
            product_id=payload.product_id,
            quantity=payload.quantity,
            options=payload.options,
        ),
        "Product added to basket",
    )


@router.put("/items/{item_id}", response_model=BasketEnvelope)
def update_item(
    item_id: int,
    payload: ItemUpdateIn,
    user_id: int = Query(..., gt=0),
    svc: BasketService = Depends(get_basket_service),
):
    return _run(
        lambda: svc.update_item_quantity(user_id, item_id, payload.quantity, payload.options),
        "Basket updated",
    )


@router.delete("/items/{item_id}", response_model=BasketEnvelope)
def remove_item(
    item_id: int,
    user_id: int = Query(..., gt=0),
    svc: BasketService = Depends(get_basket_service),
):
    return _run(lambda: svc.remove_item(user_id, item_id), "Product removed from basket")


@router.delete("", response_model=BasketEnvelope)
def clear_basket(
    user_id: int = Query(..., gt=0),
    svc: BasketService = Depends(get_basket_service),
):
    return _run(lambda: svc.clear(user_id), "Basket cleared")


@router.put("/pricing", response_model=BasketEnvelope)
def set_pricing(
    payload: PricingIn,
    user_id: int = Query(..., gt=0),
    svc: BasketService = Depends(get_basket_service),
):
    return _run(
        lambda: svc.set_pricing(user_id, payload.points_to_use, payload.shipping_cost),
        "Basket updated",
    )


@router.post("/coupon", response_model=BasketEnvelope)
def apply_coupon(
    payload: CouponIn,
    user_id: int = Query(..., gt=0),
    svc: BasketService = Depends(get_basket_service),
):
    return _run(lambda: svc.apply_coupon(user_id, payload.code), "Coupon applied")


@router.delete("/coupon", response_model=BasketEnvelope)
def remove_coupon(
    user_id: int = Query(..., gt=0),
    svc: BasketService = Depends(get_basket_service),
):
    return _run(lambda: svc.remove_coupon(user_id), "Coupon removed")
