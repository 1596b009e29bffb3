import logging
from typing import List, Union

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

import config
from database import db, Store
from receipts import render_receipt
from restock import GeminiRestockSuggester, RestockSuggester, get_restock_suggestions
from sales import cart_total, process_sale, totals_agree
from schemas import (
    Item, ItemIn, Receipt, ReceiptSettings, RestockError, RestockSuggestionsOut,
    SaleIn, SaleResult, SaleTransaction,
)

logging.basicConfig(
    level=getattr(logging, config.LOG_LEVEL, logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="LankaPOS API", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_store() -> Store:
    return db


def get_suggester() -> RestockSuggester:
    return GeminiRestockSuggester()


@app.get("/")
def read_root():
    return {"name": "LankaPOS API", "status": "ok"}


@app.get("/api/health")
def health():
    return {"status": "ok"}


@app.post("/api/seed")
def seed_demo(store: Store = Depends(get_store)):
    """Reset the store to the demo catalog and default receipt settings."""
    store.reset()
    logger.info("Store reset to demo data")
    return {
        "status": "ok",
        "items": len(store.list_items()),
        "sales": len(store.list_sales()),
    }


# Items

@app.get("/api/items", response_model=List[Item])
def list_items(store: Store = Depends(get_store)):
    return store.list_items()


@app.get("/api/items/{item_id}", response_model=Item)
def get_item(item_id: str, store: Store = Depends(get_store)):
    item = store.get_item(item_id)
    if item is None:
        raise HTTPException(status_code=404, detail=f"Item not found: {item_id}")
    return item


@app.post("/api/items", response_model=Item, status_code=201)
def create_item(item: ItemIn, store: Store = Depends(get_store)):
    return store.add_item(item)


# Sales

@app.get("/api/sales", response_model=List[SaleTransaction])
def list_sales(store: Store = Depends(get_store)):
    return store.list_sales()


@app.get("/api/sales/{sale_id}", response_model=SaleTransaction)
def get_sale(sale_id: str, store: Store = Depends(get_store)):
    sale = store.get_sale(sale_id)
    if sale is None:
        raise HTTPException(status_code=404, detail=f"Sale not found: {sale_id}")
    return sale


@app.get("/api/sales/{sale_id}/receipt", response_model=Receipt)
def get_receipt(sale_id: str, store: Store = Depends(get_store)):
    sale = store.get_sale(sale_id)
    if sale is None:
        raise HTTPException(status_code=404, detail=f"Sale not found: {sale_id}")
    return Receipt(sale_id=sale.id, lines=render_receipt(sale, config.CURRENCY))


@app.post("/api/sales", response_model=SaleResult, status_code=201)
def create_sale(sale: SaleIn, store: Store = Depends(get_store)):
    if not sale.items:
        raise HTTPException(status_code=400, detail="Cart is empty")

    # Validate cart lines against the catalog
    for line in sale.items:
        if store.get_item(line.id) is None:
            raise HTTPException(status_code=400, detail=f"Unknown item: {line.id}")

    expected = cart_total(sale.items)
    if not totals_agree(expected, sale.total_amount):
        raise HTTPException(
            status_code=400,
            detail=f"Total {sale.total_amount:.2f} does not match cart total {expected:.2f}",
        )

    record, alerts = process_sale(store, sale.items, sale.total_amount)
    return SaleResult(sale=record, low_stock_alerts=alerts)


# Settings

@app.get("/api/settings/receipt", response_model=ReceiptSettings)
def read_receipt_settings(store: Store = Depends(get_store)):
    return store.get_receipt_settings()


@app.patch("/api/settings/receipt", response_model=ReceiptSettings)
def update_receipt_settings(settings: ReceiptSettings, store: Store = Depends(get_store)):
    return store.update_receipt_settings(settings.model_dump(exclude_unset=True))


@app.get("/api/settings/low-stock-threshold")
def read_low_stock_threshold(store: Store = Depends(get_store)):
    return {"low_stock_threshold": store.low_stock_threshold}


# Restock suggestions

@app.get("/api/restock-suggestions", response_model=Union[RestockSuggestionsOut, RestockError])
def restock_suggestions(
    store: Store = Depends(get_store),
    suggester: RestockSuggester = Depends(get_suggester),
):
    result = get_restock_suggestions(store, suggester)
    if isinstance(result, RestockError):
        return JSONResponse(status_code=502, content=result.model_dump())
    return result


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=config.PORT)
