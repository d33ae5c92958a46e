"""
Variant generation engine.

Pure functions over in-memory variant drafts: expand a product's attribute
schema into every variant combination, merge a fresh generation with the
working set the editor already holds, check SKU uniqueness and aggregate
stock value. Nothing here touches the database; persistence lives in
variant_store.

Price fields on a draft follow an override model: None means "inherit the
product's global price", any Decimal (including zero) is an explicit
override.
"""

import itertools
import logging
from collections import Counter
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Iterable, List, Optional, Union

from .sku import build_sku

logger = logging.getLogger(__name__)

PRICE_FIELDS = ('wholesale', 'retail', 'club', 'cost_before', 'cost_after')

# Incoming payloads may still use the editor's camelCase keys.
_CAMEL_CASE_KEYS = {
    'costBefore': 'cost_before',
    'costAfter': 'cost_after',
}


def to_decimal(value: Any) -> Optional[Decimal]:
    """Convert a raw price to Decimal; blank or unparseable input gives None."""
    if value is None or value == '':
        return None
    if isinstance(value, Decimal):
        return value if value.is_finite() else None
    try:
        result = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    # NaN and Infinity parse but cannot be compared or stored
    return result if result.is_finite() else None


def to_qty(value: Any) -> int:
    if value is None or value == '':
        return 0
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def resolve_override(override: Optional[Decimal], global_value: Any = None) -> Decimal:
    """Return the override when set, else the global value, else zero."""
    if override is not None:
        return override
    resolved = to_decimal(global_value)
    return resolved if resolved is not None else Decimal('0')


@dataclass
class VariantDraft:
    """
    One variant of a product before (or after) it is persisted.

    attributes keeps insertion order; generated drafts list their
    attributes in the product's attribute order.
    """
    sku: str
    attributes: Dict[str, str] = field(default_factory=dict)
    qty: int = 0
    wholesale: Optional[Decimal] = None
    retail: Optional[Decimal] = None
    club: Optional[Decimal] = None
    cost_before: Optional[Decimal] = None
    cost_after: Optional[Decimal] = None

    def is_overridden(self, price_field: str) -> bool:
        return getattr(self, price_field) is not None

    def overrides(self) -> Dict[str, Decimal]:
        return {
            name: getattr(self, name)
            for name in PRICE_FIELDS
            if getattr(self, name) is not None
        }

    def effective(self, price_field: str, product_prices: Dict[str, Any]) -> Decimal:
        """Price for price_field after applying the inherit-from-product rule."""
        return resolve_override(getattr(self, price_field), product_prices.get(price_field))

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'sku': self.sku,
            'attributes': dict(self.attributes),
            'qty': self.qty,
        }
        data.update(self.overrides())
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'VariantDraft':
        """
        Build a draft from a plain mapping (API payload, fixture, JSON).

        Unknown keys are ignored. Unset, blank or malformed prices come back
        as None so they keep inheriting from the product.
        """
        normalized = {_CAMEL_CASE_KEYS.get(key, key): value for key, value in data.items()}
        attributes = normalized.get('attributes') or {}
        return cls(
            sku=str(normalized.get('sku') or '').strip(),
            attributes={str(k): str(v) for k, v in attributes.items()},
            qty=to_qty(normalized.get('qty')),
            **{name: to_decimal(normalized.get(name)) for name in PRICE_FIELDS}
        )


@dataclass
class AttributeSchema:
    """
    Ordered attribute names of a product plus the candidate values of each.

    The order of names is the SKU token order.
    """
    names: List[str] = field(default_factory=list)
    values: Dict[str, List[str]] = field(default_factory=dict)

    def add_attribute(self, name: str) -> bool:
        name = (name or '').strip()
        if not name or name in self.names:
            return False
        self.names.append(name)
        self.values[name] = []
        return True

    def remove_attribute(self, name: str) -> bool:
        if name not in self.names:
            return False
        self.names.remove(name)
        self.values.pop(name, None)
        return True

    def set_values(self, name: str, values: Union[str, Iterable[str]]) -> None:
        if isinstance(values, str):
            self.values[name] = parse_attribute_values(values)
        elif isinstance(values, (list, tuple)):
            self.values[name] = [str(v).strip() for v in values if v is not None and str(v).strip()]
        else:
            self.values[name] = []

    def is_empty(self) -> bool:
        return not self.names

    def missing_values(self) -> List[str]:
        """Attribute names without any candidate value; they block generation."""
        return [name for name in self.names if not self.values.get(name)]


@dataclass
class VariantSummary:
    total_units: int = 0
    total_value: Decimal = Decimal('0')
    variant_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'total_units': self.total_units,
            'total_value': self.total_value,
            'variant_count': self.variant_count,
        }


def parse_attribute_values(text: Optional[str]) -> List[str]:
    """Split comma-separated editor input into trimmed, non-empty values."""
    if not text:
        return []
    return [part.strip() for part in text.split(',') if part.strip()]


def generate_variant_combinations(
    article: str,
    attributes: List[str],
    attribute_values: Dict[str, Iterable[str]],
    default_qty: int = 0
) -> List[VariantDraft]:
    """
    Expand the attribute schema into one draft per value combination.

    Combinations follow nested-loop order over attributes, so the last
    attribute varies fastest. Blank values are skipped and kept values are
    trimmed; an attribute with no usable values yields no variants at all.

    Example:
        generate_variant_combinations(
            'BGC-1011', ['Size', 'Color'],
            {'Size': ['10oz', '12oz'], 'Color': ['RED', 'BLUE']}
        )
        -> SKUs BGC-1011-10-RED, BGC-1011-10-BLUE, BGC-1011-12-RED, BGC-1011-12-BLUE

    Returns:
        List of VariantDraft with qty=default_qty and no price overrides.
    """
    if not attributes:
        return []

    value_lists = []
    for attribute_name in attributes:
        raw_values = attribute_values.get(attribute_name) or []
        value_lists.append([
            str(value).strip() for value in raw_values
            if value is not None and str(value).strip()
        ])

    variants = []
    for combination in itertools.product(*value_lists):
        chosen = dict(zip(attributes, combination))
        variants.append(VariantDraft(
            sku=build_sku(article, chosen, attributes),
            attributes=chosen,
            qty=default_qty,
        ))

    logger.debug(
        "Generated %d variant combinations for article %r over %s",
        len(variants), article, attributes
    )
    return variants


def merge_variants(
    existing_variants: List[VariantDraft],
    new_variants: List[VariantDraft]
) -> List[VariantDraft]:
    """
    Substitute already-known records into a fresh generation, keyed by SKU.

    The result always has the length and order of new_variants: variants
    whose SKU is no longer produced drop out, edited ones survive as-is.
    """
    existing_by_sku = {variant.sku: variant for variant in existing_variants}
    return [existing_by_sku.get(variant.sku, variant) for variant in new_variants]


def validate_sku_uniqueness(variants: Iterable[VariantDraft]) -> List[str]:
    """Return one message per SKU that occurs more than once."""
    counts = Counter(variant.sku for variant in variants)
    return [
        f"Duplicate SKU: {sku} (appears {count} times)"
        for sku, count in counts.items()
        if count > 1
    ]


def calculate_variant_summary(
    variants: List[VariantDraft],
    global_cost_after: Any = None
) -> VariantSummary:
    """
    Total units, stock value and variant count of a working set.

    Stock value uses each variant's cost_after override, falling back to
    global_cost_after (or zero when that is unset too).
    """
    total_units = 0
    total_value = Decimal('0')

    for variant in variants:
        qty = variant.qty or 0
        total_units += qty
        total_value += qty * resolve_override(variant.cost_after, global_cost_after)

    return VariantSummary(
        total_units=total_units,
        total_value=total_value,
        variant_count=len(variants),
    )


def extract_attribute_values(
    variants: Iterable[VariantDraft],
    attributes: List[str]
) -> Dict[str, List[str]]:
    """
    Rebuild the candidate values of each declared attribute from variants.

    Used when a stored product is reopened for editing. Values keep their
    first-seen order; attribute keys the product does not declare are
    ignored.
    """
    value_map: Dict[str, List[str]] = {name: [] for name in attributes}

    for variant in variants:
        for name, value in variant.attributes.items():
            if name in value_map and value not in value_map[name]:
                value_map[name].append(value)

    return value_map


def regenerate_variants(
    article: str,
    schema: AttributeSchema,
    existing_variants: List[VariantDraft],
    default_qty: int = 0
) -> List[VariantDraft]:
    """
    Re-run generation for a schema edit, keeping the user's edited records.

    A schema without attributes leaves the working set untouched.
    """
    if schema.is_empty():
        return list(existing_variants)

    fresh = generate_variant_combinations(article, schema.names, schema.values, default_qty)
    return merge_variants(existing_variants, fresh)
