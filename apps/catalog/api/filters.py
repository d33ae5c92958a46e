from django.db.models import F
from django_filters import rest_framework as filters

from apps.catalog.models import Product, Variant
from apps.catalog.services.stock import (
    IN_STOCK,
    LOW_STOCK,
    OUT_OF_STOCK,
    STOCK_STATUS_CHOICES,
)
from apps.catalog.services.variant_engine import PRICE_FIELDS


class ProductFilter(filters.FilterSet):
    """Filter for products."""

    brand = filters.ChoiceFilter(choices=Product.BRAND_CHOICES)
    category = filters.CharFilter(field_name='category', lookup_expr='iexact')

    class Meta:
        model = Product
        fields = ['brand', 'category', 'archived', 'taxable']


class VariantFilter(filters.FilterSet):
    """Filter for variants with support for attribute values and overrides."""

    product = filters.CharFilter(field_name='product__article')
    product_id = filters.NumberFilter(field_name='product__id')
    sku = filters.CharFilter(field_name='sku', lookup_expr='icontains')

    # Stock filters
    min_qty = filters.NumberFilter(field_name='qty', lookup_expr='gte')
    max_qty = filters.NumberFilter(field_name='qty', lookup_expr='lte')
    stock_status = filters.ChoiceFilter(method='filter_stock_status', choices=STOCK_STATUS_CHOICES)

    # Attribute filters
    attribute = filters.CharFilter(method='filter_by_attribute')

    # Override filters
    has_override = filters.ChoiceFilter(
        method='filter_has_override',
        choices=[(name, name) for name in PRICE_FIELDS]
    )

    class Meta:
        model = Variant
        fields = ['product', 'product_id', 'sku']

    def filter_by_attribute(self, queryset, name, value):
        """
        Filter by attribute in format: attribute_name:value
        Example: ?attribute=Size:10oz
        """
        if ':' not in value:
            return queryset

        attr_name, attr_value = value.split(':', 1)
        return queryset.filter(**{f'attributes__{attr_name}': attr_value})

    def filter_stock_status(self, queryset, name, value):
        if value == OUT_OF_STOCK:
            return queryset.filter(qty=0)
        if value == LOW_STOCK:
            return queryset.filter(qty__gt=0, qty__lte=F('min_qty'))
        if value == IN_STOCK:
            return queryset.filter(qty__gt=F('min_qty'))
        return queryset

    def filter_has_override(self, queryset, name, value):
        return queryset.filter(**{f'{value}__isnull': False})
