"""
Sale processing: turn a cart into a recorded transaction, take the sold
units off the shelf and report items that are running low.
"""
import logging
from typing import List, Optional, Tuple

from database import Store
from schemas import CartItem, SaleLineItem, SaleTransaction

logger = logging.getLogger(__name__)


def cart_total(cart_items: List[CartItem]) -> float:
    return round(sum(round(c.price * c.quantity_in_cart, 2) for c in cart_items), 2)


def totals_agree(a: float, b: float) -> bool:
    """True when two money amounts are equal to the cent."""
    return round(a, 2) == round(b, 2)


def stock_alert(name: str, stock: int, threshold: int) -> Optional[str]:
    """Return the alert for an item left with ``stock`` units, or None."""
    if stock == 0:
        return f"{name} is out of stock!"
    if 0 < stock <= threshold:
        return f"{name} is running low (Stock: {stock})!"
    return None


def process_sale(store: Store, cart_items: List[CartItem], total_amount: float) -> Tuple[SaleTransaction, List[str]]:
    """
    Record a sale for ``cart_items`` and decrement stock for every line.

    The cart must not be empty; callers reject empty carts before getting
    here. Stock never drops below zero even if a line asks for more than is
    on hand. Returns the stored transaction and the low-stock alerts raised
    by the sale.
    """
    lines = [
        SaleLineItem(
            item_id=c.id,
            name=c.name,
            quantity=c.quantity_in_cart,
            price_per_unit=c.price,
            subtotal=round(c.price * c.quantity_in_cart, 2),
            category=c.category,
        )
        for c in cart_items
    ]
    # recorded total is exactly the sum of the stored cent-rounded subtotals
    computed_total = sum(line.subtotal for line in lines)
    if not totals_agree(computed_total, total_amount):
        logger.warning("Sale total %.2f does not match cart lines (%.2f); recording line total",
                       total_amount, computed_total)

    alerts: List[str] = []
    with store.transaction():
        sale = store.add_sale(lines, computed_total)
        threshold = store.low_stock_threshold
        for c in cart_items:
            updated = store.decrement_stock(c.id, c.quantity_in_cart)
            if updated is None:
                logger.warning("Sale %s: item %s is not in the catalog, stock unchanged", sale.id, c.id)
                continue
            alert = stock_alert(updated.name, updated.stock, threshold)
            if alert:
                alerts.append(alert)

    logger.info("Processed sale %s: %d line(s), total %.2f", sale.id, len(lines), sale.total_amount)
    for alert in alerts:
        logger.warning("Low stock alert: %s", alert)
    return sale, alerts
