"""
Persistence for variant working sets.

The editor holds its variants in memory as VariantDraft objects; this
service validates a working set and writes it to the Product/Variant tables
in one transaction, keyed by SKU.
"""

import logging
from typing import Any, Dict, List, Optional

from django.db import transaction

from apps.catalog.models import Product, Variant
from apps.catalog.services.stock import MAX_QTY, adjustment_reason
from apps.catalog.services.validation import validate_product, validate_variants
from apps.catalog.services.variant_engine import (
    PRICE_FIELDS,
    AttributeSchema,
    VariantDraft,
    regenerate_variants,
    to_decimal,
)

logger = logging.getLogger(__name__)

PRODUCT_FIELDS = ('article', 'title', 'category', 'brand', 'taxable', 'media_main', 'archived')


class VariantValidationError(Exception):
    """Raised before any write when a working set fails validation."""

    def __init__(self, errors):
        self.errors = list(errors)
        super().__init__('; '.join(self.errors))


class VariantStore:
    """
    Writes variant drafts for a product.
    Rows are matched by SKU: known SKUs are updated in place, new ones are
    created and SKUs missing from the working set are deleted.
    """

    @staticmethod
    def save_variants(product: Product, variants: List[VariantDraft]):
        """
        Persist a product's full variant working set.

        Raises:
            VariantValidationError: an empty working set, duplicate SKUs
                or invalid rows; nothing is written in that case.

        Returns:
            QuerySet of the product's variants in working-set order.
        """
        errors = validate_variants(variants)
        if not variants:
            errors.insert(0, 'At least one variant must exist')
        if errors:
            logger.warning("Rejected variants for %s: %s", product.article, errors)
            raise VariantValidationError(errors)

        with transaction.atomic():
            existing = {v.sku: v for v in product.variants.all()}
            new_skus = [draft.sku for draft in variants]

            skus_to_delete = set(existing) - set(new_skus)
            if skus_to_delete:
                Variant.objects.filter(product=product, sku__in=skus_to_delete).delete()
                logger.info(
                    "Deleted %d obsolete variants of %s", len(skus_to_delete), product.article
                )

            created_count = 0
            for position, draft in enumerate(variants):
                variant = existing.get(draft.sku)
                if variant is None:
                    variant = Variant(product=product)
                    created_count += 1
                variant.apply_draft(draft)
                variant.position = position
                variant.save()

        logger.info(
            "Saved %d variants of %s (%d created)",
            len(variants), product.article, created_count
        )
        return product.variants.all()

    @staticmethod
    def save_product(
        data: Dict[str, Any],
        variants: List[VariantDraft],
        product: Optional[Product] = None
    ) -> Product:
        """
        Create or update a product together with its variants.

        Args:
            data: product fields (article, title, category, brand, taxable,
                media_main, archived, attributes and the global prices)
            variants: the variant working set
            product: existing product to update, or None to create one
        """
        errors = validate_product(data, variants)
        if errors:
            logger.warning("Rejected product %r: %s", data.get('article'), errors)
            raise VariantValidationError(errors)

        with transaction.atomic():
            if product is None:
                product = Product()

            for name in PRODUCT_FIELDS:
                if name in data:
                    value = data[name]
                    setattr(product, name, value.strip() if isinstance(value, str) else value)

            if 'attributes' in data:
                product.attributes = list(data['attributes'] or [])

            for name in PRICE_FIELDS:
                if name in data:
                    setattr(product, name, to_decimal(data[name]) or 0)

            product.save()
            VariantStore.save_variants(product, variants)

        return product

    @staticmethod
    def regenerate(
        product: Product,
        default_qty: int = 0,
        attribute_values: Optional[Dict[str, List[str]]] = None
    ) -> List[VariantDraft]:
        """
        Merged drafts for a stored product, not persisted.

        Without attribute_values the candidate values are rebuilt from the
        stored variants.
        """
        drafts = product.variant_drafts()
        schema = product.attribute_schema(drafts)
        if attribute_values is not None:
            schema = AttributeSchema(names=schema.names)
            for name in schema.names:
                schema.set_values(name, attribute_values.get(name) or [])

        return regenerate_variants(product.article, schema, drafts, default_qty)

    @staticmethod
    def adjust_stock(variant: Variant, delta: int, reason: str = '') -> Variant:
        """
        Add (positive delta) or remove (negative delta) units of a variant.

        The reason is stored as the history change reason.

        Raises:
            VariantValidationError: the adjustment would leave negative stock.
        """
        new_qty = variant.qty + delta
        if new_qty < 0:
            raise VariantValidationError([
                f'Cannot remove {-delta} units of {variant.sku}: only {variant.qty} in stock'
            ])
        if new_qty > MAX_QTY:
            raise VariantValidationError([f'Quantity of {variant.sku} must be ≤ {MAX_QTY}'])

        variant.qty = new_qty
        variant._change_reason = adjustment_reason(delta, reason)
        variant.save(update_fields=['qty', 'updated_at'])

        logger.info(
            "Adjusted stock of %s by %+d to %d (%s)",
            variant.sku, delta, new_qty, variant._change_reason
        )
        return variant
