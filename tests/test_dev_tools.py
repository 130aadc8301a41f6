from decimal import Decimal

from fastapi.testclient import TestClient

from basket_service.catalog_service.main import app as catalog_app
from basket_service.data.database import SessionLocal
from basket_service.data.seed import seed
from basket_service.repos.coupon_repo import CouponRepo


def test_mock_catalog_batch_skips_unknown_ids():
    client = TestClient(catalog_app)

    resp = client.get("/products/batch", params={"ids": "2,1,42"})

    assert resp.status_code == 200
    assert [p["id"] for p in resp.json()] == [1, 2]
    assert resp.json()[1]["discount_price"] == 40.0


def test_mock_catalog_rejects_bad_ids():
    resp = TestClient(catalog_app).get("/products/batch", params={"ids": "a,b"})
    assert resp.status_code == 400


def test_seed_inserts_coupons_once():
    seed()
    seed()

    db = SessionLocal()
    try:
        repo = CouponRepo(db)
        assert repo.get_by_code("welcome10").discount_type == "percentage"
        assert repo.get_by_code("MINUS20").min_purchase_amount == Decimal("100")
    finally:
        db.close()
