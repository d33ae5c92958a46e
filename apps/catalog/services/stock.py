"""
Stock levels of variants.

A variant is out of stock at zero units, low on stock while its quantity
is at or below its minimum, and in stock above that.
"""

OUT_OF_STOCK = 'out_of_stock'
LOW_STOCK = 'low_stock'
IN_STOCK = 'in_stock'

STOCK_STATUS_CHOICES = [
    (IN_STOCK, 'In Stock'),
    (LOW_STOCK, 'Low Stock'),
    (OUT_OF_STOCK, 'Out of Stock'),
]

DEFAULT_MIN_QTY = 10

# Upper bound of PositiveIntegerField on every supported database
MAX_QTY = 2147483647


def stock_status(qty, min_qty=DEFAULT_MIN_QTY):
    if qty <= 0:
        return OUT_OF_STOCK
    if qty <= min_qty:
        return LOW_STOCK
    return IN_STOCK


def adjustment_reason(delta, reason=''):
    """Reason recorded in the variant history for a manual stock change."""
    reason = (reason or '').strip()
    if reason:
        return reason[:100]
    return 'Manual restock' if delta > 0 else 'Manual adjustment'
