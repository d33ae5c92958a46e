from decimal import Decimal

import pytest

from apps.catalog.models import Product, Variant
from apps.catalog.services.variant_engine import VariantDraft
from apps.catalog.services.variant_store import VariantStore, VariantValidationError


@pytest.mark.django_db
class TestSaveProduct:

    def test_creates_product_and_variants_in_order(self, gloves):
        assert gloves.article == 'BGC-1011'
        assert gloves.attributes == ['Size', 'Color']
        assert list(gloves.variants.values_list('sku', 'position')) == [
            ('BGC-1011-10-RED', 0),
            ('BGC-1011-10-BLUE', 1),
            ('BGC-1011-12-RED', 2),
            ('BGC-1011-12-BLUE', 3),
        ]

    def test_invalid_product_writes_nothing(self):
        with pytest.raises(VariantValidationError) as exc_info:
            VariantStore.save_product({'article': 'X-1', 'title': 'X'}, [VariantDraft(sku='X-1-A')])

        assert exc_info.value.errors == ['Category is required']
        assert not Product.objects.exists()

    def test_history_is_recorded(self, gloves):
        assert gloves.history.count() == 1
        assert Variant.history.filter(sku='BGC-1011-10-RED').count() == 1


@pytest.mark.django_db
class TestSaveVariants:

    def test_updates_by_sku_and_removes_obsolete(self, gloves):
        red = gloves.variants.get(sku='BGC-1011-10-RED')
        drafts = [
            VariantDraft(sku='BGC-1011-10-RED', attributes={'Size': '10oz', 'Color': 'RED'}, qty=5),
            VariantDraft(sku='BGC-1011-14-RED', attributes={'Size': '14oz', 'Color': 'RED'}, qty=1),
        ]

        saved = VariantStore.save_variants(gloves, drafts)

        assert [v.sku for v in saved] == ['BGC-1011-10-RED', 'BGC-1011-14-RED']
        assert saved[0].pk == red.pk
        assert saved[0].qty == 5
        assert not Variant.objects.filter(sku='BGC-1011-12-BLUE').exists()

    def test_duplicate_skus_are_rejected_before_writing(self, gloves):
        drafts = [VariantDraft(sku='DUP'), VariantDraft(sku='DUP')]

        with pytest.raises(VariantValidationError) as exc_info:
            VariantStore.save_variants(gloves, drafts)

        assert exc_info.value.errors == ['Duplicate SKU: DUP (appears 2 times)']
        assert gloves.variants.count() == 4

    def test_override_model_round_trips(self, gloves):
        drafts = gloves.variant_drafts()
        drafts[0].retail = Decimal('0.00')
        drafts[1].cost_after = Decimal('50.00')

        VariantStore.save_variants(gloves, drafts)
        first, second, third = list(gloves.variants.all())[:3]

        assert first.retail == Decimal('0.00')
        assert first.effective_retail == Decimal('0.00')
        assert second.effective_cost_after == Decimal('50.00')
        assert third.retail is None
        assert third.effective_retail == Decimal('79.99')
        assert not third.has_overrides


@pytest.mark.django_db
class TestRegenerate:

    def test_rebuilds_values_from_stored_variants(self, gloves):
        variant = gloves.variants.get(sku='BGC-1011-12-BLUE')
        variant.qty = 8
        variant.save()

        drafts = VariantStore.regenerate(gloves)

        assert [d.sku for d in drafts] == [v.sku for v in gloves.variants.all()]
        assert drafts[3].qty == 8

    def test_new_values_keep_edits(self, gloves):
        variant = gloves.variants.get(sku='BGC-1011-10-RED')
        variant.qty = 3
        variant.wholesale = Decimal('50.00')
        variant.save()

        drafts = VariantStore.regenerate(
            gloves,
            default_qty=2,
            attribute_values={'Size': ['10oz'], 'Color': ['RED', 'BLACK']},
        )

        assert [(d.sku, d.qty) for d in drafts] == [('BGC-1011-10-RED', 3), ('BGC-1011-10-BLACK', 2)]
        assert drafts[0].wholesale == Decimal('50.00')
        # not persisted
        assert gloves.variants.count() == 4

    def test_summary_uses_global_cost_for_inherited_rows(self, gloves):
        drafts = gloves.variant_drafts()
        drafts[0].qty = 2
        drafts[0].cost_after = Decimal('10.00')
        drafts[1].qty = 3
        VariantStore.save_variants(gloves, drafts)

        summary = gloves.variant_summary()

        assert summary.total_units == 5
        assert summary.total_value == Decimal('164.00')
        assert summary.variant_count == 4


@pytest.mark.django_db
class TestEmptyWorkingSet:

    def test_save_variants_rejects_empty_set(self, gloves):
        with pytest.raises(VariantValidationError) as exc_info:
            VariantStore.save_variants(gloves, [])

        assert exc_info.value.errors == ['At least one variant must exist']
        assert gloves.variants.count() == 4

    def test_new_attribute_without_values_keeps_variants(self, gloves):
        gloves.attributes = ['Size', 'Color', 'Material']
        gloves.save()

        drafts = VariantStore.regenerate(gloves)

        assert drafts == []
        with pytest.raises(VariantValidationError):
            VariantStore.save_variants(gloves, drafts)
        assert gloves.variants.count() == 4


@pytest.mark.django_db
class TestAdjustStock:

    def test_add_and_remove_units(self, gloves):
        variant = gloves.variants.get(sku='BGC-1011-10-RED')

        VariantStore.adjust_stock(variant, 12, 'Restock from supplier')
        VariantStore.adjust_stock(variant, -3)

        variant.refresh_from_db()
        assert variant.qty == 9
        assert variant.stock_status == 'low_stock'
        reasons = list(variant.history.values_list('history_change_reason', flat=True)[:2])
        assert reasons == ['Manual adjustment', 'Restock from supplier']

    def test_rejects_negative_stock(self, gloves):
        variant = gloves.variants.get(sku='BGC-1011-10-RED')
        VariantStore.adjust_stock(variant, 2)

        with pytest.raises(VariantValidationError) as exc_info:
            VariantStore.adjust_stock(variant, -3)

        assert exc_info.value.errors == ['Cannot remove 3 units of BGC-1011-10-RED: only 2 in stock']
        variant.refresh_from_db()
        assert variant.qty == 2
