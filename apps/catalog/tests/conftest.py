from decimal import Decimal

import pytest
from rest_framework.test import APIClient

from apps.catalog.services.variant_engine import generate_variant_combinations
from apps.catalog.services.variant_store import VariantStore

GLOVES = {
    'article': 'BGC-1011',
    'title': 'Boxing Gloves Classic',
    'category': 'Gloves',
    'brand': 'greenhil',
    'attributes': ['Size', 'Color'],
    'wholesale': Decimal('55.00'),
    'retail': Decimal('79.99'),
    'club': Decimal('67.99'),
    'cost_before': Decimal('42.00'),
    'cost_after': Decimal('48.00'),
}


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def gloves(db):
    """Product with Size [10oz, 12oz] x Color [RED, BLUE] variants, qty 0."""
    variants = generate_variant_combinations(
        GLOVES['article'],
        GLOVES['attributes'],
        {'Size': ['10oz', '12oz'], 'Color': ['RED', 'BLUE']},
    )
    return VariantStore.save_product(dict(GLOVES), variants)
