"""
In-memory store for LankaPOS.

Holds the item catalog, the receipt settings and the append-only sale log.
Nothing is persisted: a fresh ``Store`` (or ``reset()``) brings back the demo
catalog. Every read hands out a copy, so callers can never reach the live
records; mutations go through the methods below and run under the store lock.
"""
import itertools
import logging
import threading
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import ContextManager, Dict, Iterator, List, Optional

from config import LOW_STOCK_THRESHOLD
from schemas import Item, ItemIn, ReceiptSettings, SaleLineItem, SaleTransaction

logger = logging.getLogger(__name__)

DEFAULT_ITEMS = [
    {"id": "ITM001", "name": "Keerisamba Rice 1kg", "price": 250, "stock": 100, "category": "Groceries"},
    {"id": "ITM002", "name": "Red Dhal 1kg", "price": 450, "stock": 80, "category": "Groceries"},
    {"id": "ITM003", "name": "Anchor Full Cream Milk Powder 400g", "price": 980, "stock": 50, "category": "Dairy"},
    {"id": "ITM004", "name": "White Sugar 1kg", "price": 280, "stock": 120, "category": "Groceries"},
    {"id": "ITM005", "name": "Laojee Tea Leaves 200g", "price": 350, "stock": 70, "category": "Beverages"},
    {"id": "ITM006", "name": "Sunlight Soap Bar", "price": 80, "stock": 150, "category": "Household"},
    {"id": "ITM007", "name": "Coca-Cola 1.5L", "price": 300, "stock": 60, "category": "Beverages"},
]

DEFAULT_RECEIPT_SETTINGS = {
    "shop_name": "LankaPOS Grocery",
    "shop_address": "123 Galle Road, Colombo 3",
    "shop_contact": "011-2345678",
    "item_id": True,
    "item_name": True,
    "item_price": True,
    "item_quantity": True,
    "item_subtotal": True,
    "grand_total": True,
    "timestamp": True,
}


class Store:
    """Catalog, receipt settings and sale log for one shop."""

    def __init__(
        self,
        items: Optional[List[dict]] = None,
        receipt_settings: Optional[dict] = None,
        low_stock_threshold: int = 10,
        lock: Optional[ContextManager] = None,
    ) -> None:
        self._seed_items = DEFAULT_ITEMS if items is None else items
        self._seed_settings = DEFAULT_RECEIPT_SETTINGS if receipt_settings is None else receipt_settings
        self._low_stock_threshold = low_stock_threshold
        self._lock = lock if lock is not None else threading.RLock()
        self.reset()

    def reset(self) -> None:
        """Drop all sales and restore the seed catalog and settings."""
        with self._lock:
            self._items: Dict[str, Item] = {}
            for data in self._seed_items:
                item = Item(**data)
                self._items[item.id] = item
            self._sales: List[SaleTransaction] = []
            self._receipt_settings = ReceiptSettings(**self._seed_settings)
            # ids come from counters, so they are never handed out twice
            self._item_ids = itertools.count(len(self._items) + 1)
            self._sale_ids = itertools.count(1)

    @contextmanager
    def transaction(self) -> Iterator["Store"]:
        """Hold the store lock across several operations."""
        with self._lock:
            yield self

    @property
    def low_stock_threshold(self) -> int:
        return self._low_stock_threshold

    # Items

    def list_items(self) -> List[Item]:
        with self._lock:
            return [item.model_copy(deep=True) for item in self._items.values()]

    def get_item(self, item_id: str) -> Optional[Item]:
        with self._lock:
            item = self._items.get(item_id)
            return item.model_copy(deep=True) if item else None

    def add_item(self, data: ItemIn) -> Item:
        with self._lock:
            item_id = "ITM%03d" % next(self._item_ids)
            while item_id in self._items:
                item_id = "ITM%03d" % next(self._item_ids)
            item = Item(id=item_id, **data.model_dump())
            self._items[item_id] = item
            logger.info("Added item %s (%s)", item_id, item.name)
            return item.model_copy(deep=True)

    def decrement_stock(self, item_id: str, quantity: int) -> Optional[Item]:
        """Take ``quantity`` units off an item's stock, stopping at zero."""
        with self._lock:
            item = self._items.get(item_id)
            if item is None:
                return None
            item.stock = max(item.stock - quantity, 0)
            return item.model_copy(deep=True)

    # Sales

    def add_sale(self, items: List[SaleLineItem], total_amount: float) -> SaleTransaction:
        with self._lock:
            sale = SaleTransaction(
                id="SALE%04d" % next(self._sale_ids),
                items=[line.model_copy(deep=True) for line in items],
                total_amount=total_amount,
                timestamp=datetime.now(timezone.utc),
                receipt_settings_snapshot=self._receipt_settings.model_copy(deep=True),
            )
            self._sales.append(sale)
            return sale.model_copy(deep=True)

    def list_sales(self) -> List[SaleTransaction]:
        with self._lock:
            return [sale.model_copy(deep=True) for sale in self._sales]

    def recent_sales(self, limit: int) -> List[SaleTransaction]:
        with self._lock:
            if limit <= 0:
                return []
            return [sale.model_copy(deep=True) for sale in self._sales[-limit:]]

    def get_sale(self, sale_id: str) -> Optional[SaleTransaction]:
        with self._lock:
            for sale in self._sales:
                if sale.id == sale_id:
                    return sale.model_copy(deep=True)
            return None

    # Receipt settings

    def get_receipt_settings(self) -> ReceiptSettings:
        with self._lock:
            return self._receipt_settings.model_copy(deep=True)

    def update_receipt_settings(self, changes: dict) -> ReceiptSettings:
        """Merge ``changes`` over the current settings; missing keys are kept."""
        with self._lock:
            merged = {**self._receipt_settings.model_dump(), **changes}
            self._receipt_settings = ReceiptSettings(**merged)
            return self._receipt_settings.model_copy(deep=True)


db = Store(low_stock_threshold=LOW_STOCK_THRESHOLD)
