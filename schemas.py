"""
Schemas for LankaPOS

Each Pydantic model describes one record kept by the in-memory store or one
payload exchanged over the API. Items, sales and receipt settings are held
by ``database.Store``; the request/response models wrap them for the routes.
"""
from typing import Optional, List
from pydantic import BaseModel, Field
from datetime import datetime

# Core domain models

class Item(BaseModel):
    id: str = Field(..., description="Catalog identifier e.g., ITM001")
    name: str = Field(..., description="Item name")
    price: float = Field(..., gt=0, description="Unit price")
    stock: int = Field(0, ge=0, description="Units on hand")
    category: Optional[str] = Field(None, description="Category name")

class ItemIn(BaseModel):
    name: str = Field(..., min_length=3, description="Item name")
    price: float = Field(..., gt=0, description="Unit price")
    stock: int = Field(..., ge=0, description="Initial stock")
    category: Optional[str] = None

class CartItem(Item):
    # stock is whatever the client saw when the line was added
    quantity_in_cart: int = Field(..., ge=1)

class ReceiptSettings(BaseModel):
    shop_name: Optional[str] = None
    shop_address: Optional[str] = None
    shop_contact: Optional[str] = None
    item_id: Optional[bool] = None
    item_name: Optional[bool] = None
    item_price: Optional[bool] = None
    item_quantity: Optional[bool] = None
    item_subtotal: Optional[bool] = None
    item_category: Optional[bool] = None
    discount: Optional[bool] = None
    grand_total: Optional[bool] = None
    timestamp: Optional[bool] = None

class SaleLineItem(BaseModel):
    item_id: str
    name: str
    quantity: int = Field(..., ge=1)
    price_per_unit: float
    subtotal: float
    category: Optional[str] = None

class SaleTransaction(BaseModel):
    id: str
    items: List[SaleLineItem]
    total_amount: float
    timestamp: datetime
    receipt_settings_snapshot: ReceiptSettings

# API payloads

class SaleIn(BaseModel):
    items: List[CartItem]
    total_amount: float = Field(..., ge=0)

class SaleResult(BaseModel):
    sale: SaleTransaction
    low_stock_alerts: List[str] = []

class Receipt(BaseModel):
    sale_id: str
    lines: List[str]

class RestockSuggestionsOut(BaseModel):
    restock_suggestions: str = Field(..., description="JSON array of {itemName, suggestedRestockQuantity}")

class RestockError(BaseModel):
    error: str
