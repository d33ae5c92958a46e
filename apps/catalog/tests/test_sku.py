import pytest

from apps.catalog.services.sku import build_sku, format_attribute_token


@pytest.mark.parametrize('value, attribute, expected', [
    ('10oz', 'Size', '10'),
    ('10OZ', 'size', '10'),
    (' 16 oz ', 'SIZE', '16'),
    ('10oz', 'Weight', '10OZ'),
    ('Black & Red', 'Color', 'BLACK-RED'),
    ('  multi   space ', 'Material', 'MULTI-SPACE'),
    ('--Navy--Blue--', 'Color', 'NAVY-BLUE'),
    ('2.5 m', 'Length', '2-5-M'),
    ('Açaí', 'Flavor', 'A-A'),
])
def test_format_attribute_token(value, attribute, expected):
    assert format_attribute_token(value, attribute) == expected


@pytest.mark.parametrize('value', ['', '   ', '&&&', None])
def test_format_attribute_token_degenerate_input_gives_empty_token(value):
    assert format_attribute_token(value, 'Color') == ''


def test_size_rule_only_strips_trailing_oz():
    assert format_attribute_token('oz10', 'Size') == 'OZ10'
    assert format_attribute_token('oz', 'Size') == ''


def test_build_sku_example():
    sku = build_sku('BGC-1011', {'Size': '10oz', 'Color': 'RED'}, ['Size', 'Color'])
    assert sku == 'BGC-1011-10-RED'


def test_build_sku_follows_attribute_order():
    values = {'Size': '10oz', 'Color': 'RED'}
    assert build_sku('BGC-1011', values, ['Color', 'Size']) == 'BGC-1011-RED-10'


def test_build_sku_skips_missing_values_and_trims_article():
    sku = build_sku('  A-1 ', {'Size': '12oz', 'Color': ''}, ['Size', 'Color', 'Material'])
    assert sku == 'A-1-12'


def test_build_sku_is_deterministic():
    values = {'Size': '14oz', 'Color': 'Black & White'}
    first = build_sku('BGC-1011', values, ['Size', 'Color'])
    assert first == build_sku('BGC-1011', dict(values), ['Size', 'Color'])
    assert first == 'BGC-1011-14-BLACK-WHITE'
