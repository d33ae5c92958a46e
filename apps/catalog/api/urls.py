from django.urls import path, include
from rest_framework.routers import DefaultRouter

from .views import (
    ProductViewSet,
    VariantViewSet,
    price_list,
)

router = DefaultRouter()
router.register(r'products', ProductViewSet, basename='product')
router.register(r'variants', VariantViewSet, basename='variant')

urlpatterns = [
    path('price-list/', price_list, name='price-list'),
    path('', include(router.urls)),
]
