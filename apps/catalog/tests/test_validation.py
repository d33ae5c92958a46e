from decimal import Decimal

from apps.catalog.services.validation import validate_product, validate_variants
from apps.catalog.services.variant_engine import VariantDraft

PRODUCT = {
    'article': 'BGC-1011',
    'title': 'Boxing Gloves Classic',
    'category': 'Gloves',
    'wholesale': '55',
    'retail': '79.99',
}


def test_valid_product_has_no_errors():
    assert validate_product(PRODUCT, [VariantDraft(sku='BGC-1011-10-RED')]) == []


def test_required_fields():
    errors = validate_product({'article': '  ', 'title': None}, [VariantDraft(sku='A')])

    assert errors == ['Article is required', 'Title is required', 'Category is required']


def test_negative_global_prices():
    data = dict(PRODUCT, club=-1, cost_after=Decimal('-0.01'))

    errors = validate_product(data, [VariantDraft(sku='A')])

    assert errors == ['Club Price must be ≥ 0', 'Cost After must be ≥ 0']


def test_needs_at_least_one_variant():
    assert validate_product(PRODUCT, []) == ['At least one variant must exist']


def test_variant_rows_and_duplicates():
    variants = [
        VariantDraft(sku='A', qty=-1),
        VariantDraft(sku='A', retail=Decimal('-5')),
        VariantDraft(sku=''),
    ]

    errors = validate_variants(variants)

    assert errors == [
        'Variant 1: Quantity must be ≥ 0',
        'Variant 2: Retail must be ≥ 0',
        'Variant 3: SKU is required',
        'Duplicate SKU: A (appears 2 times)',
    ]


def test_non_finite_prices_do_not_raise():
    data = dict(PRODUCT, retail='NaN')
    variants = [VariantDraft(sku='A', club=Decimal('Infinity'))]

    errors = validate_product(data, variants)

    assert errors == ['Variant 1: Club Price must be a number']
