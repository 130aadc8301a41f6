# basket_service/data/seed.py
from datetime import datetime, timezone, timedelta
from decimal import Decimal

from basket_service.data.database import Base, SessionLocal, engine
from basket_service.data.models import CouponModel
from basket_service.repos.coupon_repo import CouponRepo


def seed():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        # not forcing: only seed if empty
        if db.query(CouponModel).first():
            return
        now = datetime.now(timezone.utc)
        repo = CouponRepo(db)
        repo.create_coupon(CouponModel(
            code="welcome10", discount_type="percentage", discount_value=Decimal("10"),
            start_date=now, end_date=now + timedelta(days=90), usage_limit=1000,
        ))
        repo.create_coupon(CouponModel(
            code="minus20", discount_type="amount", discount_value=Decimal("20"),
            min_purchase_amount=Decimal("100"), start_date=now, end_date=now + timedelta(days=30),
        ))
    finally:
        db.close()


if __name__ == "__main__":
    seed()
