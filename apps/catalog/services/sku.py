"""
SKU derivation for product variants.

A variant SKU is the product article followed by one canonical token per
attribute value, in the product's attribute order:

    build_sku('BGC-1011', {'Size': '10oz', 'Color': 'RED'}, ['Size', 'Color'])
    -> 'BGC-1011-10-RED'
"""

import re
from typing import Dict, List, Optional

_NON_ALNUM = re.compile(r'[^A-Z0-9]')
_HYPHEN_RUN = re.compile(r'-+')


def format_attribute_token(value: Optional[str], attribute_name: Optional[str]) -> str:
    """
    Canonicalize one attribute value into a SKU token.

    Only the Size attribute gets unit handling: a trailing "oz" is dropped
    ("10oz" -> "10"). Everything that is not A-Z or 0-9 becomes a hyphen,
    hyphen runs collapse and edge hyphens are stripped.
    """
    token = (value or '').strip()

    if (attribute_name or '').lower() == 'size' and token.lower().endswith('oz'):
        token = token[:-2]

    token = _NON_ALNUM.sub('-', token.upper())
    token = _HYPHEN_RUN.sub('-', token)
    return token.strip('-')


def build_sku(
    article: Optional[str],
    attribute_values: Dict[str, str],
    attribute_order: List[str]
) -> str:
    """
    Build a variant SKU from the article code and its attribute values.

    Attributes without a value are left out. The order of attribute_order
    decides the token order, so callers keep one stable order per product.
    """
    parts = [(article or '').strip()]

    for attribute_name in attribute_order:
        value = attribute_values.get(attribute_name)
        if value:
            parts.append(format_attribute_token(value, attribute_name))

    return '-'.join(parts)
