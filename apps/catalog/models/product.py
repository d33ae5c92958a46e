from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models
from simple_history.models import HistoricalRecords

from apps.catalog.services.variant_engine import (
    PRICE_FIELDS,
    AttributeSchema,
    calculate_variant_summary,
    extract_attribute_values,
)


class Product(models.Model):
    """
    Base product identified by its article code.
    Example: "BGC-1011" (Boxing Gloves Classic) with Size/Color variants.
    Global prices apply to every variant that does not override them.
    """
    BRAND_CHOICES = [
        ('greenhil', 'Greenhil'),
        ('harican', 'Harican'),
        ('byko', 'Byko'),
    ]

    article = models.CharField(
        max_length=100,
        unique=True,
        verbose_name='Article'
    )
    title = models.CharField(
        max_length=255,
        verbose_name='Title'
    )
    category = models.CharField(
        max_length=100,
        verbose_name='Category'
    )
    brand = models.CharField(
        max_length=20,
        choices=BRAND_CHOICES,
        default='greenhil',
        verbose_name='Brand'
    )
    taxable = models.BooleanField(
        default=True,
        verbose_name='Taxable'
    )
    media_main = models.URLField(
        max_length=500,
        blank=True,
        verbose_name='Main image URL'
    )
    archived = models.BooleanField(
        default=False,
        verbose_name='Archived'
    )

    # Ordered attribute names, e.g. ["Size", "Color"]; order drives SKU tokens
    attributes = models.JSONField(
        default=list,
        blank=True,
        verbose_name='Attributes'
    )

    # Global pricing
    wholesale = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0.00'))],
        verbose_name='Wholesale'
    )
    retail = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0.00'))],
        verbose_name='Retail'
    )
    club = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0.00'))],
        verbose_name='Club price'
    )
    cost_before = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0.00'))],
        verbose_name='Cost before'
    )
    cost_after = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0.00'))],
        verbose_name='Cost after'
    )

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
        ordering = ['title']
        verbose_name = 'Product'
        verbose_name_plural = 'Products'

    def __str__(self):
        return f"{self.article} - {self.title}"

    def save(self, *args, **kwargs):
        self.article = (self.article or '').strip()
        super().save(*args, **kwargs)

    @property
    def variant_count(self):
        return self.variants.count()

    def global_prices(self):
        """Return dict of {price_field: global value}"""
        return {name: getattr(self, name) for name in PRICE_FIELDS}

    def variant_drafts(self):
        return [variant.to_draft() for variant in self.variants.all()]

    def attribute_schema(self, drafts=None):
        """Attribute schema rebuilt from the stored variants."""
        names = list(self.attributes or [])
        if drafts is None:
            drafts = self.variant_drafts()
        return AttributeSchema(
            names=names,
            values=extract_attribute_values(drafts, names),
        )

    def variant_summary(self):
        return calculate_variant_summary(self.variant_drafts(), self.cost_after)
