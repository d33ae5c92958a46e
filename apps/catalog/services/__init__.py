from .sku import format_attribute_token, build_sku
from .variant_engine import (
    PRICE_FIELDS,
    AttributeSchema,
    VariantDraft,
    VariantSummary,
    calculate_variant_summary,
    extract_attribute_values,
    generate_variant_combinations,
    merge_variants,
    parse_attribute_values,
    regenerate_variants,
    resolve_override,
    validate_sku_uniqueness,
)
from .stock import IN_STOCK, LOW_STOCK, OUT_OF_STOCK, stock_status
from .validation import validate_product, validate_variants

__all__ = [
    'IN_STOCK',
    'LOW_STOCK',
    'OUT_OF_STOCK',
    'PRICE_FIELDS',
    'AttributeSchema',
    'VariantDraft',
    'VariantSummary',
    'build_sku',
    'calculate_variant_summary',
    'extract_attribute_values',
    'format_attribute_token',
    'generate_variant_combinations',
    'merge_variants',
    'parse_attribute_values',
    'regenerate_variants',
    'resolve_override',
    'stock_status',
    'validate_product',
    'validate_sku_uniqueness',
    'validate_variants',
]
