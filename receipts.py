"""Plain-text receipts rendered from the settings captured with each sale."""
from typing import List

from schemas import SaleLineItem, SaleTransaction


def format_money(amount: float, currency: str = "LKR") -> str:
    return f"{currency} {amount:.2f}"


def _item_line(line: SaleLineItem, settings, currency: str) -> str:
    parts = []
    if settings.item_name:
        parts.append(line.name)
    if settings.item_id:
        parts.append(f"({line.item_id})")
    if settings.item_category and line.category:
        parts.append(f"[{line.category}]")
    if settings.item_quantity:
        parts.append(f"{line.quantity} x")
    if settings.item_price:
        parts.append(format_money(line.price_per_unit, currency))
    if settings.item_subtotal:
        if parts:
            parts.append("=")
        parts.append(format_money(line.subtotal, currency))
    return " ".join(parts)


def render_receipt(sale: SaleTransaction, currency: str = "LKR") -> List[str]:
    """
    Render ``sale`` as receipt lines.

    Uses ``sale.receipt_settings_snapshot`` rather than the live settings so
    old receipts look the same after the shop changes its settings. Item
    lines with every field switched off are left out.
    """
    settings = sale.receipt_settings_snapshot
    lines: List[str] = []
    for header in (settings.shop_name, settings.shop_address, settings.shop_contact):
        if header:
            lines.append(header)
    if settings.timestamp:
        lines.append("Date: " + sale.timestamp.strftime("%Y-%m-%d %H:%M:%S"))
    lines.append(f"Sale: {sale.id}")
    for line in sale.items:
        text = _item_line(line, settings, currency)
        if text:
            lines.append(text)
    if settings.grand_total:
        lines.append("Total: " + format_money(sale.total_amount, currency))
    return lines
