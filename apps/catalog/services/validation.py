"""
Advisory validation for the product editor.

Every check returns messages instead of raising; the caller decides whether
they block a save.
"""

from typing import Any, Dict, List

from .variant_engine import PRICE_FIELDS, VariantDraft, to_decimal, validate_sku_uniqueness

PRICE_LABELS = {
    'wholesale': 'Wholesale',
    'retail': 'Retail',
    'club': 'Club Price',
    'cost_before': 'Cost Before',
    'cost_after': 'Cost After',
}

REQUIRED_FIELDS = (
    ('article', 'Article'),
    ('title', 'Title'),
    ('category', 'Category'),
)


def validate_product(product_data: Dict[str, Any], variants: List[VariantDraft]) -> List[str]:
    """
    Validate a product together with its variant working set.

    Args:
        product_data: mapping with article, title, category and the global
            prices (missing prices count as zero)
        variants: the drafts about to be persisted

    Returns:
        List of human readable error messages, empty when the product can
        be saved.
    """
    errors = []

    for key, label in REQUIRED_FIELDS:
        if not str(product_data.get(key) or '').strip():
            errors.append(f'{label} is required')

    for name in PRICE_FIELDS:
        value = to_decimal(product_data.get(name))
        if value is not None and value < 0:
            errors.append(f'{PRICE_LABELS[name]} must be ≥ 0')

    if not variants:
        errors.append('At least one variant must exist')

    errors.extend(validate_variants(variants))
    return errors


def validate_variants(variants: List[VariantDraft]) -> List[str]:
    """Row-level checks (1-based positions) followed by SKU uniqueness."""
    errors = []

    for index, variant in enumerate(variants, start=1):
        if not variant.sku:
            errors.append(f'Variant {index}: SKU is required')
        if variant.qty < 0:
            errors.append(f'Variant {index}: Quantity must be ≥ 0')
        for name, value in variant.overrides().items():
            value = to_decimal(value)
            if value is None:
                errors.append(f'Variant {index}: {PRICE_LABELS[name]} must be a number')
            elif value < 0:
                errors.append(f'Variant {index}: {PRICE_LABELS[name]} must be ≥ 0')

    errors.extend(validate_sku_uniqueness(variants))
    return errors
