#import wszystkich modeli zeby SQLAlchemy zarejestrowal je w Base.metadata

from basket_service.data.models.basket import BasketModel
from basket_service.data.models.basket_item import BasketItemModel
from basket_service.data.models.coupon import CouponModel

__all__ = ["BasketModel", "BasketItemModel", "CouponModel"]
