import logging

from django.conf import settings
from django.db.models import Count, F, Q, Sum
from django.http import HttpResponse
from django.utils import timezone
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import filters, mixins, status, viewsets
from rest_framework.decorators import action, api_view
from rest_framework.response import Response

from apps.catalog.models import Product, Variant
from apps.catalog.services.price_list import PRICE_TYPES, build_price_list, export_price_list_csv
from apps.catalog.services.variant_engine import (
    AttributeSchema,
    calculate_variant_summary,
    regenerate_variants,
    validate_sku_uniqueness,
)
from apps.catalog.services.variant_store import VariantStore, VariantValidationError
from .filters import ProductFilter, VariantFilter
from .serializers import (
    GenerateVariantsSerializer,
    ProductDetailSerializer,
    ProductListSerializer,
    ProductSerializer,
    RegenerateSerializer,
    StockAdjustmentSerializer,
    StockSummarySerializer,
    SummarySerializer,
    VariantDraftSerializer,
    VariantListPayloadSerializer,
    VariantSerializer,
    drafts_from,
)

logger = logging.getLogger(__name__)


def _default_qty(value):
    if value is None:
        return getattr(settings, 'CATALOG_DEFAULT_VARIANT_QTY', 0)
    return value


class ProductViewSet(viewsets.ModelViewSet):
    """
    API endpoint for products.

    list: List all products
    retrieve: Get product detail with variants and summary
    create: Create a new product
    update: Update a product
    delete: Delete a product
    """
    queryset = Product.objects.all()
    lookup_field = 'article'
    lookup_value_regex = '[^/]+'
    filterset_class = ProductFilter
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    search_fields = ['article', 'title', 'brand']
    ordering_fields = ['title', 'article', 'created_at']
    ordering = ['title']

    def get_serializer_class(self):
        if self.action == 'list':
            return ProductListSerializer
        elif self.action == 'retrieve':
            return ProductDetailSerializer
        return ProductSerializer

    def get_queryset(self):
        queryset = super().get_queryset()
        if self.action == 'retrieve':
            queryset = queryset.prefetch_related('variants')
        return queryset

    @action(detail=False, methods=['post'], url_path='generate-variants')
    def generate_variants(self, request):
        """
        Generate variants for an attribute schema and merge them with the
        caller's current working set. Nothing is persisted.

        Returns:
        {
            "variants": [...],
            "errors": ["Duplicate SKU: ..."],
            "summary": {"total_units": 0, "total_value": "0.00", "variant_count": 4}
        }
        """
        serializer = GenerateVariantsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        schema = AttributeSchema()
        for name in data['attributes']:
            schema.add_attribute(name)
        for name in schema.names:
            schema.set_values(name, data['attribute_values'].get(name) or [])

        existing = drafts_from(data['existing_variants'])

        variants = regenerate_variants(
            data['article'], schema, existing, _default_qty(data['default_qty'])
        )
        return Response(_working_set_payload(variants, data.get('cost_after')))

    @action(detail=False, methods=['post'], url_path='validate-skus')
    def validate_skus(self, request):
        """Check SKU uniqueness of a posted working set."""
        serializer = VariantListPayloadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        variants = drafts_from(serializer.validated_data['variants'])
        return Response({'errors': validate_sku_uniqueness(variants)})

    @action(detail=True, methods=['post'])
    def regenerate(self, request, article=None):
        """Merged variants for a stored product; the caller saves them via PUT variants."""
        product = self.get_object()
        serializer = RegenerateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        variants = VariantStore.regenerate(
            product,
            default_qty=_default_qty(data['default_qty']),
            attribute_values=data['attribute_values'],
        )
        return Response(_working_set_payload(variants, product.cost_after))

    @action(detail=True, methods=['put'])
    def variants(self, request, article=None):
        """
        Replace the product's variants with the posted working set.

        Expected payload:
        {
            "variants": [
                {"sku": "BGC-1011-10-RED", "attributes": {"Size": "10oz", "Color": "RED"}, "qty": 5},
                {"sku": "BGC-1011-10-BLUE", "attributes": {"Size": "10oz", "Color": "BLUE"}, "qty": 0, "retail": "69.99"}
            ]
        }
        """
        product = self.get_object()
        serializer = VariantListPayloadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        variants = drafts_from(serializer.validated_data['variants'])

        try:
            saved = VariantStore.save_variants(product, variants)
        except VariantValidationError as e:
            return Response({'errors': e.errors}, status=status.HTTP_400_BAD_REQUEST)

        return Response(VariantSerializer(saved, many=True).data)

    @action(detail=True, methods=['get'])
    def summary(self, request, article=None):
        """Total units, stock value and variant count of the stored variants."""
        product = self.get_object()
        return Response(SummarySerializer(product.variant_summary().to_dict()).data)


class VariantViewSet(mixins.ListModelMixin,
                     mixins.RetrieveModelMixin,
                     mixins.UpdateModelMixin,
                     viewsets.GenericViewSet):
    """
    API endpoint for persisted variants.

    Supports filtering by product article, SKU, attribute value, quantity
    range and price overrides. Variants are created and removed through
    the product's variants endpoint.
    """
    queryset = Variant.objects.select_related('product')
    serializer_class = VariantSerializer
    filterset_class = VariantFilter
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    search_fields = ['sku', 'product__title', 'product__article']
    ordering_fields = ['sku', 'qty', 'position', 'created_at']
    ordering = ['product', 'position']

    @action(detail=True, methods=['post'], url_path='adjust-stock')
    def adjust_stock(self, request, pk=None):
        """
        Manually add or remove units.

        Expected payload:
        {
            "delta": 5,
            "reason": "Restock from supplier"
        }
        """
        variant = self.get_object()
        serializer = StockAdjustmentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            VariantStore.adjust_stock(
                variant,
                serializer.validated_data['delta'],
                serializer.validated_data['reason'],
            )
        except VariantValidationError as e:
            return Response({'errors': e.errors}, status=status.HTTP_400_BAD_REQUEST)

        return Response(VariantSerializer(variant).data)

    @action(detail=False, methods=['get'], url_path='stock-summary')
    def stock_summary(self, request):
        """Stock status counts over the filtered variants."""
        queryset = self.filter_queryset(self.get_queryset()).order_by()
        totals = queryset.aggregate(
            variant_count=Count('id'),
            total_units=Sum('qty'),
            in_stock=Count('id', filter=Q(qty__gt=F('min_qty'))),
            low_stock=Count('id', filter=Q(qty__gt=0, qty__lte=F('min_qty'))),
            out_of_stock=Count('id', filter=Q(qty=0)),
        )
        totals['total_units'] = totals['total_units'] or 0
        return Response(StockSummarySerializer(totals).data)


@api_view(['GET'])
def price_list(request):
    """
    Download the price list as CSV.

    Query params:
    - price_type: retail (default), wholesale or club
    - include_variations: true (default) / false
    - category, brand, search: optional filters
    """
    params = request.query_params
    price_type = params.get('price_type', 'retail')
    include_variations = params.get('include_variations', 'true').lower() not in ('false', '0', 'no')

    if price_type not in PRICE_TYPES:
        return Response(
            {'error': f"price_type must be one of {', '.join(PRICE_TYPES)}"},
            status=status.HTTP_400_BAD_REQUEST
        )

    products = Product.objects.filter(archived=False).prefetch_related('variants')
    rows = build_price_list(
        products,
        price_type=price_type,
        include_variations=include_variations,
        category=params.get('category') or None,
        brand=params.get('brand') or None,
        search=params.get('search') or None,
    )
    content = export_price_list_csv(rows, price_type=price_type, include_sku=include_variations)

    category_text = (params.get('category') or 'All Categories').replace(' ', '-')
    filename = f"price-list-{price_type}-{category_text}-{timezone.now().date().isoformat()}.csv"

    response = HttpResponse(content, content_type='text/csv')
    response['Content-Disposition'] = f'attachment; filename="{filename}"'
    logger.info("Exported %s price list with %d rows", price_type, len(rows))
    return response


def _working_set_payload(variants, global_cost_after=None):
    summary = calculate_variant_summary(variants, global_cost_after)
    return {
        'variants': VariantDraftSerializer(variants, many=True).data,
        'errors': validate_sku_uniqueness(variants),
        'summary': SummarySerializer(summary.to_dict()).data,
    }
