from decimal import Decimal

from rest_framework import serializers

from apps.catalog.models import Product, Variant
from apps.catalog.services.stock import MAX_QTY
from apps.catalog.services.variant_engine import PRICE_FIELDS, VariantDraft


def _override_field():
    return serializers.DecimalField(
        max_digits=10, decimal_places=2, min_value=Decimal('0'),
        required=False, allow_null=True
    )


def _qty_field(**kwargs):
    return serializers.IntegerField(min_value=0, max_value=MAX_QTY, **kwargs)


class AttributeValuesField(serializers.Field):
    """
    Candidate values of one attribute: a list of values or the editor's
    comma-separated text.
    """
    default_error_messages = {
        'invalid': 'Expected a list of values or a comma-separated string.',
    }

    def to_internal_value(self, data):
        if isinstance(data, str):
            return data
        if isinstance(data, (list, tuple)) and all(
            isinstance(value, (str, int, float)) and not isinstance(value, bool)
            for value in data
        ):
            return [str(value) for value in data]
        self.fail('invalid')

    def to_representation(self, value):
        return value


# =============================================================================
# Variant Draft Serializers (in-memory working set)
# =============================================================================

class VariantDraftSerializer(serializers.Serializer):
    """
    Wire shape of a variant draft.
    Price fields left out or null inherit the product's global price.
    """
    sku = serializers.CharField(allow_blank=True, trim_whitespace=True)
    attributes = serializers.DictField(child=serializers.CharField(allow_blank=True), required=False)
    qty = _qty_field(required=False, default=0)
    wholesale = _override_field()
    retail = _override_field()
    club = _override_field()
    cost_before = _override_field()
    cost_after = _override_field()

    def to_representation(self, instance):
        if isinstance(instance, VariantDraft):
            instance = {
                'sku': instance.sku,
                'attributes': instance.attributes,
                'qty': instance.qty,
                **{name: getattr(instance, name) for name in PRICE_FIELDS},
            }
        return super().to_representation(instance)


def drafts_from(items):
    """Convert validated draft payloads into VariantDraft objects."""
    return [VariantDraft.from_dict(item) for item in items]


class GenerateVariantsSerializer(serializers.Serializer):
    """
    Request body for stateless generation.

    Example:
    {
        "article": "BGC-1011",
        "attributes": ["Size", "Color"],
        "attribute_values": {"Size": ["10oz", "12oz"], "Color": "RED, BLUE"},
        "default_qty": 0,
        "existing_variants": [{"sku": "BGC-1011-10-RED", "qty": 5}]
    }
    """
    article = serializers.CharField(allow_blank=True, trim_whitespace=False)
    attributes = serializers.ListField(child=serializers.CharField(), required=False, default=list)
    attribute_values = serializers.DictField(child=AttributeValuesField(), required=False, default=dict)
    default_qty = _qty_field(required=False, default=None, allow_null=True)
    existing_variants = VariantDraftSerializer(many=True, required=False, default=list)
    cost_after = serializers.DecimalField(
        max_digits=10, decimal_places=2, required=False, allow_null=True, default=None
    )


class RegenerateSerializer(serializers.Serializer):
    default_qty = _qty_field(required=False, default=None, allow_null=True)
    attribute_values = serializers.DictField(
        child=AttributeValuesField(), required=False, allow_null=True, default=None
    )


class VariantListPayloadSerializer(serializers.Serializer):
    variants = VariantDraftSerializer(many=True)


class SummarySerializer(serializers.Serializer):
    total_units = serializers.IntegerField()
    total_value = serializers.DecimalField(max_digits=None, decimal_places=2)
    variant_count = serializers.IntegerField()


# =============================================================================
# Variant Serializers (persisted rows)
# =============================================================================

class VariantSerializer(serializers.ModelSerializer):
    """Persisted variant with its resolved prices."""
    product_article = serializers.CharField(source='product.article', read_only=True)
    effective_wholesale = serializers.DecimalField(max_digits=10, decimal_places=2, read_only=True)
    effective_retail = serializers.DecimalField(max_digits=10, decimal_places=2, read_only=True)
    effective_club = serializers.DecimalField(max_digits=10, decimal_places=2, read_only=True)
    effective_cost_before = serializers.DecimalField(max_digits=10, decimal_places=2, read_only=True)
    effective_cost_after = serializers.DecimalField(max_digits=10, decimal_places=2, read_only=True)
    stock_status = serializers.CharField(read_only=True)

    class Meta:
        model = Variant
        fields = [
            'id', 'product', 'product_article', 'sku', 'attributes', 'qty', 'min_qty',
            'stock_status', 'position',
            'wholesale', 'retail', 'club', 'cost_before', 'cost_after',
            'effective_wholesale', 'effective_retail', 'effective_club',
            'effective_cost_before', 'effective_cost_after',
            'created_at', 'updated_at'
        ]
        read_only_fields = ['product', 'sku', 'attributes', 'position']


class StockAdjustmentSerializer(serializers.Serializer):
    """
    Manual stock change: positive delta adds units, negative removes them.

    Example: {"delta": -2, "reason": "Damaged in storage"}
    """
    delta = serializers.IntegerField(min_value=-MAX_QTY, max_value=MAX_QTY)
    reason = serializers.CharField(max_length=100, required=False, allow_blank=True, default='')

    def validate_delta(self, value):
        if value == 0:
            raise serializers.ValidationError('Delta must not be zero.')
        return value


class StockSummarySerializer(serializers.Serializer):
    variant_count = serializers.IntegerField()
    total_units = serializers.IntegerField()
    in_stock = serializers.IntegerField()
    low_stock = serializers.IntegerField()
    out_of_stock = serializers.IntegerField()


# =============================================================================
# Product Serializers
# =============================================================================

class ProductSerializer(serializers.ModelSerializer):
    """Base product serializer."""
    attributes = serializers.ListField(child=serializers.CharField(), required=False)

    class Meta:
        model = Product
        fields = [
            'id', 'article', 'title', 'category', 'brand', 'taxable',
            'media_main', 'archived', 'attributes',
            'wholesale', 'retail', 'club', 'cost_before', 'cost_after',
            'created_at', 'updated_at'
        ]

    def validate_attributes(self, value):
        names = []
        for name in value:
            name = name.strip()
            if name and name not in names:
                names.append(name)
        return names


class ProductListSerializer(serializers.ModelSerializer):
    """Product list with counts."""
    variant_count = serializers.IntegerField(read_only=True)

    class Meta:
        model = Product
        fields = [
            'id', 'article', 'title', 'category', 'brand',
            'archived', 'variant_count', 'retail'
        ]


class ProductDetailSerializer(serializers.ModelSerializer):
    """Full product with variants and summary."""
    variants = VariantSerializer(many=True, read_only=True)
    summary = serializers.SerializerMethodField()

    class Meta:
        model = Product
        fields = [
            'id', 'article', 'title', 'category', 'brand', 'taxable',
            'media_main', 'archived', 'attributes',
            'wholesale', 'retail', 'club', 'cost_before', 'cost_after',
            'variants', 'summary', 'created_at', 'updated_at'
        ]

    def get_summary(self, obj):
        return SummarySerializer(obj.variant_summary().to_dict()).data
