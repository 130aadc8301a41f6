# basket_service/repos/coupon_repo.py
from sqlalchemy import select
from sqlalchemy.orm import Session

from basket_service.data.models.coupon import CouponModel


class CouponRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_coupon(self, coupon_id: int) -> CouponModel | None:
        return self.db.get(CouponModel, coupon_id)

    def get_by_code(self, code: str) -> CouponModel | None:
        return self.db.execute(
            select(CouponModel).where(CouponModel.code == code.strip().upper())
        ).scalar_one_or_none()

    def create_coupon(self, coupon: CouponModel) -> CouponModel:
        coupon.code = coupon.code.strip().upper()
        self.db.add(coupon)
        self.db.commit()
        self.db.refresh(coupon)
        return coupon
