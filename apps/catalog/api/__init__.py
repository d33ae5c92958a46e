from .serializers import (
    ProductSerializer,
    ProductListSerializer,
    ProductDetailSerializer,
    VariantSerializer,
    VariantDraftSerializer,
    GenerateVariantsSerializer,
    RegenerateSerializer,
    SummarySerializer,
)

__all__ = [
    'ProductSerializer',
    'ProductListSerializer',
    'ProductDetailSerializer',
    'VariantSerializer',
    'VariantDraftSerializer',
    'GenerateVariantsSerializer',
    'RegenerateSerializer',
    'SummarySerializer',
]
