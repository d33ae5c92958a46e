from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models
from simple_history.models import HistoricalRecords

from apps.catalog.services import stock
from apps.catalog.services.variant_engine import (
    PRICE_FIELDS,
    VariantDraft,
    resolve_override,
)


def _override_field(verbose_name):
    # Null means the variant inherits the product's global value
    return models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal('0.00'))],
        verbose_name=verbose_name,
        help_text='Leave empty to use the product price'
    )


class Variant(models.Model):
    """
    Individual SKU of a product with its own stock and optional price overrides.
    Each variant is one combination of the product's attribute values.
    """
    product = models.ForeignKey(
        'catalog.Product',
        on_delete=models.CASCADE,
        related_name='variants',
        verbose_name='Product'
    )
    sku = models.CharField(
        max_length=100,
        verbose_name='SKU'
    )
    attributes = models.JSONField(
        default=dict,
        blank=True,
        verbose_name='Attributes',
        help_text='Attribute name -> value, e.g. {"Size": "10oz", "Color": "RED"}'
    )
    qty = models.PositiveIntegerField(
        default=0,
        verbose_name='Quantity'
    )
    min_qty = models.PositiveIntegerField(
        default=stock.DEFAULT_MIN_QTY,
        verbose_name='Minimum quantity',
        help_text='Low stock at or below this quantity'
    )
    position = models.PositiveIntegerField(
        default=0,
        verbose_name='Position'
    )

    # Price overrides
    wholesale = _override_field('Wholesale')
    retail = _override_field('Retail')
    club = _override_field('Club price')
    cost_before = _override_field('Cost before')
    cost_after = _override_field('Cost after')

    # Timestamps
    created_at = models.DateTimeField(
        auto_now_add=True,
        verbose_name='Created at'
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        verbose_name='Updated at'
    )

    # History tracking
    history = HistoricalRecords()

    class Meta:
        ordering = ['position', 'id']
        unique_together = ['product', 'sku']
        verbose_name = 'Variant'
        verbose_name_plural = 'Variants'

    def __str__(self):
        return self.sku

    def _effective(self, price_field):
        return resolve_override(getattr(self, price_field), getattr(self.product, price_field))

    @property
    def effective_wholesale(self):
        return self._effective('wholesale')

    @property
    def effective_retail(self):
        return self._effective('retail')

    @property
    def effective_club(self):
        return self._effective('club')

    @property
    def effective_cost_before(self):
        return self._effective('cost_before')

    @property
    def effective_cost_after(self):
        return self._effective('cost_after')

    @property
    def stock_status(self):
        return stock.stock_status(self.qty, self.min_qty)

    @property
    def has_overrides(self):
        return any(getattr(self, name) is not None for name in PRICE_FIELDS)

    def to_draft(self):
        return VariantDraft(
            sku=self.sku,
            attributes=dict(self.attributes or {}),
            qty=self.qty,
            **{name: getattr(self, name) for name in PRICE_FIELDS}
        )

    def apply_draft(self, draft):
        """Copy the editable fields of a draft onto this row (not saved)."""
        self.sku = draft.sku
        self.attributes = dict(draft.attributes)
        self.qty = draft.qty
        for name in PRICE_FIELDS:
            setattr(self, name, getattr(draft, name))
