# pharmacart/product_service/main.py
from fastapi import FastAPI, HTTPException

app = FastAPI(title="Product Service (dev mock)")


PRODUCTS = {
    1: {
        "id": 1,
        "title": "Paracetamol 500mg",
        "slug": "paracetamol-500mg",
        "is_visible": True,
        "is_prescription_required": False,
        "variants": [
            {"id": 11, "sku": "PCM-10", "pack_size": "10 tablets", "price": "40.00", "sale_price": "35.00",
             "margin": "10", "is_stock_available": True, "min_order_quantity": 1, "max_order_quantity": 20},
            {"id": 12, "sku": "PCM-30", "pack_size": "30 tablets", "price": "110.00", "sale_price": None,
             "margin": "10", "is_stock_available": True, "min_order_quantity": 1, "max_order_quantity": 10},
        ],
    },
    2: {
        "id": 2,
        "title": "Imatinib 400mg",
        "slug": "imatinib-400mg",
        "is_visible": True,
        "is_prescription_required": True,
        "variants": [
            {"id": 21, "sku": "IMT-30", "pack_size": "30 tablets", "price": "2000.00", "sale_price": None,
             "margin": "15", "is_stock_available": True, "min_order_quantity": 1, "max_order_quantity": 5},
        ],
    },
    3: {
        "id": 3,
        "title": "Vitamin D3 60000 IU",
        "slug": "vitamin-d3-60000",
        "is_visible": True,
        "is_prescription_required": False,
        "variants": [
            {"id": 31, "sku": "VD3-4", "pack_size": "4 capsules", "price": "120.00", "sale_price": "99.00",
             "margin": "20", "is_stock_available": False, "min_order_quantity": 1, "max_order_quantity": 12},
        ],
    },
}

@app.get("/products/{product_id}")
def get_product(product_id: int):
    product = PRODUCTS.get(product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product
