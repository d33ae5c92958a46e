import json
from pathlib import Path

from django.core.management.base import BaseCommand, CommandError

from apps.catalog.models import Product
from apps.catalog.services.variant_engine import VariantDraft, generate_variant_combinations
from apps.catalog.services.variant_store import VariantStore, VariantValidationError

DEFAULT_FIXTURE = Path(__file__).resolve().parents[2] / 'fixtures' / 'demo_products.json'


class Command(BaseCommand):
    help = 'Load demo products from a JSON file and generate their variants.'

    def add_arguments(self, parser):
        parser.add_argument(
            '--file',
            default=str(DEFAULT_FIXTURE),
            help='JSON file with a list of products (default: bundled demo data)'
        )
        parser.add_argument(
            '--replace',
            action='store_true',
            help='Overwrite products whose article already exists'
        )

    def handle(self, *args, **options):
        path = Path(options['file'])
        try:
            items = json.loads(path.read_text(encoding='utf-8'))
        except (OSError, ValueError) as e:
            raise CommandError(f'Could not read {path}: {e}')

        created = updated = skipped = 0
        for item in items:
            article = (item.get('article') or '').strip()
            product = Product.objects.filter(article=article).first()
            if product and not options['replace']:
                self.stdout.write(self.style.WARNING(f'Skipping existing product {article}'))
                skipped += 1
                continue

            variants = generate_variant_combinations(
                article,
                item.get('attributes', []),
                item.get('attribute_values', {}),
                item.get('default_qty', 0),
            )
            variants = _apply_overrides(variants, item.get('overrides') or {})

            try:
                VariantStore.save_product(item, variants, product=product)
            except VariantValidationError as e:
                raise CommandError(f'{article}: {"; ".join(e.errors)}')

            if product is None:
                created += 1
                verb = 'created'
            else:
                updated += 1
                verb = 'updated'
            self.stdout.write(self.style.SUCCESS(f'{article}: {verb} with {len(variants)} variants'))

        self.stdout.write(self.style.SUCCESS(
            f'Seeded {created} products, updated {updated} ({skipped} skipped)'
        ))


def _apply_overrides(variants, overrides):
    """Merge per-SKU edits (qty, price overrides) from the fixture into drafts."""
    result = []
    for variant in variants:
        edits = overrides.get(variant.sku)
        if edits:
            variant = VariantDraft.from_dict({**variant.to_dict(), **edits})
        result.append(variant)
    return result
