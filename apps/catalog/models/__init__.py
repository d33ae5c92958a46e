"""
Catalog models for products with generated variants.

Model Hierarchy:
- Product: Base product with article code, ordered attribute names and
  global prices (e.g., "BGC-1011" with attributes ["Size", "Color"])
- Variant: Individual SKU with quantity and optional price overrides
"""

from .product import Product
from .variant import Variant

__all__ = [
    'Product',
    'Variant',
]
