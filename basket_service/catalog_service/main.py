# basket_service/catalog_service/main.py
from fastapi import FastAPI, HTTPException, Query

app = FastAPI(title="Catalog Service (dev mock)")


PRODUCTS = {
    1: {"id": 1, "name": "Hair Serum", "price": 100.00, "discount_price": None, "is_active": True, "is_published": True},
    2: {"id": 2, "name": "Nail Polish", "price": 50.00, "discount_price": 40.00, "is_active": True, "is_published": True},
    3: {"id": 3, "name": "Face Mask", "price": 75.50, "discount_price": None, "is_active": True, "is_published": False},
    4: {"id": 4, "name": "Shampoo", "price": 30.00, "discount_price": None, "is_active": False, "is_published": True},
}


@app.get("/products/batch")
def get_products(ids: str = Query(..., description="Lista id oddzielona przecinkami")):
    try:
        wanted = {int(pid) for pid in ids.split(",") if pid.strip()}
    except ValueError:
        raise HTTPException(status_code=400, detail="ids must be comma separated integers")
    # nieznane id po prostu pomijamy
    return [PRODUCTS[pid] for pid in sorted(wanted) if pid in PRODUCTS]

