"""
Django signals for the catalog app.
Logs price override changes on variants and global price changes on products.
"""

import logging

from django.db.models.signals import pre_save
from django.dispatch import receiver

from .models import Product, Variant
from .services.variant_engine import PRICE_FIELDS

logger = logging.getLogger(__name__)


@receiver(pre_save, sender=Variant)
def log_override_changes(sender, instance, **kwargs):
    """
    Log when a variant starts, stops or changes overriding a product price.
    """
    if not instance.pk:
        # New variant, nothing to compare against
        return

    try:
        old_instance = Variant.objects.get(pk=instance.pk)
    except Variant.DoesNotExist:
        return

    for name in PRICE_FIELDS:
        old_value = getattr(old_instance, name)
        new_value = getattr(instance, name)
        if old_value == new_value:
            continue
        if new_value is None:
            logger.info("Variant %s now inherits %s (was %s)", instance.sku, name, old_value)
        else:
            logger.info("Variant %s overrides %s: %s -> %s", instance.sku, name, old_value, new_value)


@receiver(pre_save, sender=Product)
def log_global_price_changes(sender, instance, **kwargs):
    """
    Log global price changes; variants without an override follow them.
    """
    if not instance.pk:
        return

    try:
        old_instance = Product.objects.get(pk=instance.pk)
    except Product.DoesNotExist:
        return

    for name in PRICE_FIELDS:
        old_value = getattr(old_instance, name)
        new_value = getattr(instance, name)
        if old_value != new_value:
            inheriting = instance.variants.filter(**{f'{name}__isnull': True}).count()
            logger.info(
                "Product %s %s: %s -> %s (%d variants inherit)",
                instance.article, name, old_value, new_value, inheriting
            )
