import pytest

from apps.catalog.models import Variant

GENERATE_URL = '/api/products/generate-variants/'


@pytest.mark.django_db
class TestGenerateVariants:

    def test_generates_combinations_with_summary(self, api_client):
        response = api_client.post(GENERATE_URL, {
            'article': 'BGC-1011',
            'attributes': ['Size', 'Color'],
            'attribute_values': {'Size': ['10oz', '12oz'], 'Color': 'RED, BLUE'},
            'default_qty': 2,
            'cost_after': '48.00',
        }, format='json')

        assert response.status_code == 200
        assert [v['sku'] for v in response.data['variants']] == [
            'BGC-1011-10-RED', 'BGC-1011-10-BLUE', 'BGC-1011-12-RED', 'BGC-1011-12-BLUE',
        ]
        assert response.data['variants'][0]['attributes'] == {'Size': '10oz', 'Color': 'RED'}
        assert response.data['variants'][0]['retail'] is None
        assert response.data['errors'] == []
        assert response.data['summary'] == {
            'total_units': 8, 'total_value': '384.00', 'variant_count': 4,
        }
        assert not Variant.objects.exists()

    def test_keeps_existing_variants(self, api_client):
        response = api_client.post(GENERATE_URL, {
            'article': 'BGC-1011',
            'attributes': ['Size', 'Color'],
            'attribute_values': {'Size': ['10oz', '12oz'], 'Color': ['RED', 'BLUE']},
            'default_qty': 1,
            'existing_variants': [
                {'sku': 'BGC-1011-10-RED', 'qty': 5, 'retail': '70.00'},
                {'sku': 'BGC-1011-16-RED', 'qty': 9},
            ],
        }, format='json')

        variants = response.data['variants']
        assert len(variants) == 4
        assert (variants[0]['qty'], variants[0]['retail']) == (5, '70.00')
        assert [v['qty'] for v in variants[1:]] == [1, 1, 1]

    def test_reports_duplicate_skus(self, api_client):
        response = api_client.post(GENERATE_URL, {
            'article': 'A-1',
            'attributes': ['Color'],
            'attribute_values': {'Color': ['Red', 'RED']},
        }, format='json')

        assert response.status_code == 200
        assert response.data['errors'] == ['Duplicate SKU: A-1-RED (appears 2 times)']

    def test_no_attributes_returns_existing(self, api_client):
        response = api_client.post(GENERATE_URL, {
            'article': 'A-1',
            'existing_variants': [{'sku': 'A-1', 'qty': 3}],
        }, format='json')

        assert [(v['sku'], v['qty']) for v in response.data['variants']] == [('A-1', 3)]


@pytest.mark.django_db
def test_validate_skus(api_client):
    response = api_client.post('/api/products/validate-skus/', {
        'variants': [{'sku': 'X'}, {'sku': 'Y'}, {'sku': 'X'}, {'sku': 'X'}],
    }, format='json')

    assert response.data == {'errors': ['Duplicate SKU: X (appears 3 times)']}


@pytest.mark.django_db
class TestProductVariants:

    def test_detail_includes_variants_and_summary(self, api_client, gloves):
        response = api_client.get('/api/products/BGC-1011/')

        assert response.status_code == 200
        assert len(response.data['variants']) == 4
        assert response.data['variants'][0]['effective_retail'] == '79.99'
        assert response.data['summary']['variant_count'] == 4

    def test_put_variants_saves_working_set(self, api_client, gloves):
        response = api_client.put('/api/products/BGC-1011/variants/', {
            'variants': [
                {'sku': 'BGC-1011-10-RED', 'attributes': {'Size': '10oz', 'Color': 'RED'}, 'qty': 2},
                {'sku': 'BGC-1011-10-BLUE', 'attributes': {'Size': '10oz', 'Color': 'BLUE'},
                 'qty': 1, 'cost_after': '10.00'},
            ],
        }, format='json')

        assert response.status_code == 200
        assert [v['sku'] for v in response.data] == ['BGC-1011-10-RED', 'BGC-1011-10-BLUE']
        assert gloves.variants.count() == 2

        summary = api_client.get('/api/products/BGC-1011/summary/')
        assert summary.data == {'total_units': 3, 'total_value': '106.00', 'variant_count': 2}

    def test_put_variants_rejects_duplicates(self, api_client, gloves):
        response = api_client.put('/api/products/BGC-1011/variants/', {
            'variants': [{'sku': 'DUP', 'qty': 1}, {'sku': 'DUP', 'qty': 2}],
        }, format='json')

        assert response.status_code == 400
        assert response.data == {'errors': ['Duplicate SKU: DUP (appears 2 times)']}
        assert gloves.variants.count() == 4

    def test_regenerate_is_not_persisted(self, api_client, gloves):
        response = api_client.post('/api/products/BGC-1011/regenerate/', {
            'attribute_values': {'Size': ['10oz'], 'Color': ['RED', 'BLACK']},
            'default_qty': 2,
        }, format='json')

        assert [v['sku'] for v in response.data['variants']] == ['BGC-1011-10-RED', 'BGC-1011-10-BLACK']
        assert response.data['summary']['total_units'] == 2
        assert gloves.variants.count() == 4


@pytest.mark.django_db
class TestVariantList:

    def test_filter_by_attribute(self, api_client, gloves):
        response = api_client.get('/api/variants/', {'attribute': 'Color:BLUE'})

        assert response.data['count'] == 2
        assert [v['sku'] for v in response.data['results']] == ['BGC-1011-10-BLUE', 'BGC-1011-12-BLUE']

    def test_filter_by_override(self, api_client, gloves):
        variant = gloves.variants.get(sku='BGC-1011-12-RED')
        variant.club = '60.00'
        variant.save()

        response = api_client.get('/api/variants/', {'has_override': 'club'})

        assert [v['sku'] for v in response.data['results']] == ['BGC-1011-12-RED']


@pytest.mark.django_db
class TestPriceListEndpoint:

    def test_downloads_csv(self, api_client, gloves):
        response = api_client.get('/api/price-list/', {'price_type': 'wholesale'})

        assert response.status_code == 200
        assert response['Content-Type'] == 'text/csv'
        assert 'price-list-wholesale-All-Categories-' in response['Content-Disposition']
        lines = response.content.decode().splitlines()
        assert lines[0] == 'Article,Product Name,SKU,Category,PRICE,RRP,Stock'
        assert len(lines) == 5

    def test_rejects_unknown_price_type(self, api_client):
        response = api_client.get('/api/price-list/', {'price_type': 'vip'})

        assert response.status_code == 400


@pytest.mark.django_db
class TestRequestValidation:

    def test_scalar_attribute_values_are_rejected(self, api_client):
        response = api_client.post(GENERATE_URL, {
            'article': 'A-1',
            'attributes': ['Size'],
            'attribute_values': {'Size': 10},
        }, format='json')

        assert response.status_code == 400
        assert 'attribute_values' in response.data

    def test_quantity_out_of_range_is_rejected(self, api_client):
        response = api_client.post(GENERATE_URL, {
            'article': 'A-1',
            'attributes': ['Color'],
            'attribute_values': {'Color': ['RED']},
            'existing_variants': [{'sku': 'A-1-RED', 'qty': 10 ** 13, 'cost_after': '99999999.99'}],
        }, format='json')

        assert response.status_code == 400
        assert 'existing_variants' in response.data

    def test_large_stock_value_is_reported(self, api_client):
        response = api_client.post(GENERATE_URL, {
            'article': 'A-1',
            'attributes': ['Color'],
            'attribute_values': {'Color': ['RED']},
            'existing_variants': [{'sku': 'A-1-RED', 'qty': 2147483647, 'cost_after': '99999999.99'}],
        }, format='json')

        assert response.status_code == 200
        assert response.data['summary']['total_value'] == '214748364678525163.53'

    def test_put_empty_working_set_is_rejected(self, api_client, gloves):
        response = api_client.put('/api/products/BGC-1011/variants/', {'variants': []}, format='json')

        assert response.status_code == 400
        assert response.data == {'errors': ['At least one variant must exist']}
        assert gloves.variants.count() == 4


@pytest.mark.django_db
class TestStock:

    @pytest.fixture
    def stocked(self, gloves):
        gloves.variants.filter(sku='BGC-1011-10-RED').update(qty=5)
        gloves.variants.filter(sku='BGC-1011-10-BLUE').update(qty=20)
        return gloves

    def test_filter_by_stock_status(self, api_client, stocked):
        def skus(status):
            response = api_client.get('/api/variants/', {'stock_status': status})
            return [v['sku'] for v in response.data['results']]

        assert skus('low_stock') == ['BGC-1011-10-RED']
        assert skus('in_stock') == ['BGC-1011-10-BLUE']
        assert skus('out_of_stock') == ['BGC-1011-12-RED', 'BGC-1011-12-BLUE']

    def test_stock_summary(self, api_client, stocked):
        response = api_client.get('/api/variants/stock-summary/', {'product': 'BGC-1011'})

        assert response.data == {
            'variant_count': 4,
            'total_units': 25,
            'in_stock': 1,
            'low_stock': 1,
            'out_of_stock': 2,
        }

    def test_adjust_stock(self, api_client, stocked):
        variant = stocked.variants.get(sku='BGC-1011-10-RED')

        response = api_client.post(
            f'/api/variants/{variant.pk}/adjust-stock/',
            {'delta': 10, 'reason': 'Restock from supplier'},
            format='json'
        )

        assert response.status_code == 200
        assert response.data['qty'] == 15
        assert response.data['stock_status'] == 'in_stock'
        assert variant.history.first().history_change_reason == 'Restock from supplier'

    def test_adjust_stock_rejects_negative_result(self, api_client, stocked):
        variant = stocked.variants.get(sku='BGC-1011-10-RED')

        response = api_client.post(f'/api/variants/{variant.pk}/adjust-stock/', {'delta': -6}, format='json')

        assert response.status_code == 400
        assert response.data == {'errors': ['Cannot remove 6 units of BGC-1011-10-RED: only 5 in stock']}

    def test_adjust_stock_rejects_zero_delta(self, api_client, stocked):
        variant = stocked.variants.get(sku='BGC-1011-10-RED')

        response = api_client.post(f'/api/variants/{variant.pk}/adjust-stock/', {'delta': 0}, format='json')

        assert response.status_code == 400
        assert 'delta' in response.data
