"""
Price list rows and CSV export.

Rows are built from products and their variants with the override rule
applied: a variant price is its own override when set, else the product's
global price.
"""

from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional

import tablib

PRICE_TYPES = ('retail', 'wholesale', 'club')


def _row_price(row: Dict[str, Any], price_type: str) -> Decimal:
    if price_type == 'wholesale':
        return row['wholesale'] or Decimal('0')
    if price_type == 'club':
        # Club lists fall back to wholesale when no club price is set
        return row['club'] or row['wholesale'] or Decimal('0')
    return row['retail'] or Decimal('0')


def _matches(product, category, brand, search):
    if category and product.category != category:
        return False
    if brand and product.brand != brand:
        return False
    if search:
        needle = search.lower()
        haystacks = (product.title, product.article, product.brand)
        if not any(needle in (value or '').lower() for value in haystacks):
            return False
    return True


def build_price_list(
    products: Iterable,
    price_type: str = 'retail',
    include_variations: bool = True,
    category: Optional[str] = None,
    brand: Optional[str] = None,
    search: Optional[str] = None
) -> List[Dict[str, Any]]:
    """
    Build price list rows for the given products.

    Args:
        products: Product instances (archived ones are skipped)
        price_type: 'retail', 'wholesale' or 'club'
        include_variations: one row per variant when True, otherwise one
            row per product with the article standing in for the SKU
        category, brand: exact filters
        search: case-insensitive match on title, article or brand

    Returns:
        List of row dicts sorted by title, then SKU. Each row carries the
        resolved 'price' for price_type next to the raw price columns.
    """
    if price_type not in PRICE_TYPES:
        raise ValueError(f"Unknown price type: {price_type!r}")

    rows = []
    for product in products:
        if product.archived or not _matches(product, category, brand, search):
            continue

        variants = list(product.variants.all()) if include_variations else []
        if variants:
            for variant in variants:
                rows.append({
                    'article': product.article,
                    'title': product.title,
                    'sku': variant.sku,
                    'category': product.category,
                    'brand': product.brand,
                    'wholesale': variant.effective_wholesale,
                    'retail': variant.effective_retail,
                    'club': variant.effective_club,
                    'qty': variant.qty,
                    'attributes': dict(variant.attributes or {}),
                })
        else:
            rows.append({
                'article': product.article,
                'title': product.title,
                'sku': product.article,
                'category': product.category,
                'brand': product.brand,
                'wholesale': product.wholesale,
                'retail': product.retail,
                'club': product.club,
                'qty': 0,
                'attributes': {},
            })

    rows.sort(key=lambda row: (row['title'].lower(), row['sku'].lower()))
    for row in rows:
        row['price'] = _row_price(row, price_type)
    return rows


def export_price_list_csv(
    rows: List[Dict[str, Any]],
    price_type: str = 'retail',
    include_sku: bool = True
) -> str:
    """Render price list rows as CSV. Wholesale and club lists get an RRP column."""
    needs_rrp = price_type in ('wholesale', 'club')

    headers = ['Article', 'Product Name']
    if include_sku:
        headers.append('SKU')
    headers.extend(['Category', 'PRICE'])
    if needs_rrp:
        headers.append('RRP')
    headers.append('Stock')

    dataset = tablib.Dataset(headers=headers)
    for row in rows:
        values = [row['article'], row['title']]
        if include_sku:
            values.append(row['sku'])
        values.extend([row['category'], f"{row['price']:.2f}"])
        if needs_rrp:
            values.append(f"{row['retail'] or Decimal('0'):.2f}")
        values.append(row['qty'])
        dataset.append(values)

    return dataset.export('csv')
