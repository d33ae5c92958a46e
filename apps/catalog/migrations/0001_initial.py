from decimal import Decimal

import django.core.validators
import django.db.models.deletion
import simple_history.models
from django.conf import settings
from django.db import migrations, models


def _price(verbose_name):
    return models.DecimalField(
        decimal_places=2,
        default=Decimal('0.00'),
        max_digits=10,
        validators=[django.core.validators.MinValueValidator(Decimal('0.00'))],
        verbose_name=verbose_name,
    )


def _override(verbose_name):
    return models.DecimalField(
        blank=True,
        decimal_places=2,
        help_text='Leave empty to use the product price',
        max_digits=10,
        null=True,
        validators=[django.core.validators.MinValueValidator(Decimal('0.00'))],
        verbose_name=verbose_name,
    )


def _history_fields():
    return [
        ('history_id', models.AutoField(primary_key=True, serialize=False)),
        ('history_date', models.DateTimeField(db_index=True)),
        ('history_change_reason', models.CharField(max_length=100, null=True)),
        ('history_type', models.CharField(
            choices=[('+', 'Created'), ('~', 'Changed'), ('-', 'Deleted')], max_length=1
        )),
        ('history_user', models.ForeignKey(
            null=True,
            on_delete=django.db.models.deletion.SET_NULL,
            related_name='+',
            to=settings.AUTH_USER_MODEL,
        )),
    ]


def _history_options(name):
    return {
        'verbose_name': f'historical {name}',
        'verbose_name_plural': f'historical {name}s',
        'ordering': ('-history_date', '-history_id'),
        'get_latest_by': ('history_date', 'history_id'),
    }


BRAND_CHOICES = [('greenhil', 'Greenhil'), ('harican', 'Harican'), ('byko', 'Byko')]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Product',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('article', models.CharField(max_length=100, unique=True, verbose_name='Article')),
                ('title', models.CharField(max_length=255, verbose_name='Title')),
                ('category', models.CharField(max_length=100, verbose_name='Category')),
                ('brand', models.CharField(choices=BRAND_CHOICES, default='greenhil', max_length=20, verbose_name='Brand')),
                ('taxable', models.BooleanField(default=True, verbose_name='Taxable')),
                ('media_main', models.URLField(blank=True, max_length=500, verbose_name='Main image URL')),
                ('archived', models.BooleanField(default=False, verbose_name='Archived')),
                ('attributes', models.JSONField(blank=True, default=list, verbose_name='Attributes')),
                ('wholesale', _price('Wholesale')),
                ('retail', _price('Retail')),
                ('club', _price('Club price')),
                ('cost_before', _price('Cost before')),
                ('cost_after', _price('Cost after')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Created at')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Updated at')),
            ],
            options={
                'verbose_name': 'Product',
                'verbose_name_plural': 'Products',
                'ordering': ['title'],
            },
        ),
        migrations.CreateModel(
            name='Variant',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('sku', models.CharField(max_length=100, verbose_name='SKU')),
                ('attributes', models.JSONField(
                    blank=True,
                    default=dict,
                    help_text='Attribute name -> value, e.g. {"Size": "10oz", "Color": "RED"}',
                    verbose_name='Attributes',
                )),
                ('qty', models.PositiveIntegerField(default=0, verbose_name='Quantity')),
                ('position', models.PositiveIntegerField(default=0, verbose_name='Position')),
                ('wholesale', _override('Wholesale')),
                ('retail', _override('Retail')),
                ('club', _override('Club price')),
                ('cost_before', _override('Cost before')),
                ('cost_after', _override('Cost after')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Created at')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Updated at')),
                ('product', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='variants',
                    to='catalog.product',
                    verbose_name='Product',
                )),
            ],
            options={
                'verbose_name': 'Variant',
                'verbose_name_plural': 'Variants',
                'ordering': ['position', 'id'],
                'unique_together': {('product', 'sku')},
            },
        ),
        migrations.CreateModel(
            name='HistoricalProduct',
            fields=[
                ('id', models.BigIntegerField(auto_created=True, blank=True, db_index=True, verbose_name='ID')),
                ('article', models.CharField(db_index=True, max_length=100, verbose_name='Article')),
                ('title', models.CharField(max_length=255, verbose_name='Title')),
                ('category', models.CharField(max_length=100, verbose_name='Category')),
                ('brand', models.CharField(choices=BRAND_CHOICES, default='greenhil', max_length=20, verbose_name='Brand')),
                ('taxable', models.BooleanField(default=True, verbose_name='Taxable')),
                ('media_main', models.URLField(blank=True, max_length=500, verbose_name='Main image URL')),
                ('archived', models.BooleanField(default=False, verbose_name='Archived')),
                ('attributes', models.JSONField(blank=True, default=list, verbose_name='Attributes')),
                ('wholesale', _price('Wholesale')),
                ('retail', _price('Retail')),
                ('club', _price('Club price')),
                ('cost_before', _price('Cost before')),
                ('cost_after', _price('Cost after')),
                ('created_at', models.DateTimeField(blank=True, editable=False, verbose_name='Created at')),
                ('updated_at', models.DateTimeField(blank=True, editable=False, verbose_name='Updated at')),
            ] + _history_fields(),
            options=_history_options('Product'),
            bases=(simple_history.models.HistoricalChanges, models.Model),
        ),
        migrations.CreateModel(
            name='HistoricalVariant',
            fields=[
                ('id', models.BigIntegerField(auto_created=True, blank=True, db_index=True, verbose_name='ID')),
                ('sku', models.CharField(max_length=100, verbose_name='SKU')),
                ('attributes', models.JSONField(
                    blank=True,
                    default=dict,
                    help_text='Attribute name -> value, e.g. {"Size": "10oz", "Color": "RED"}',
                    verbose_name='Attributes',
                )),
                ('qty', models.PositiveIntegerField(default=0, verbose_name='Quantity')),
                ('position', models.PositiveIntegerField(default=0, verbose_name='Position')),
                ('wholesale', _override('Wholesale')),
                ('retail', _override('Retail')),
                ('club', _override('Club price')),
                ('cost_before', _override('Cost before')),
                ('cost_after', _override('Cost after')),
                ('created_at', models.DateTimeField(blank=True, editable=False, verbose_name='Created at')),
                ('updated_at', models.DateTimeField(blank=True, editable=False, verbose_name='Updated at')),
                ('product', models.ForeignKey(
                    blank=True,
                    db_constraint=False,
                    null=True,
                    on_delete=django.db.models.deletion.DO_NOTHING,
                    related_name='+',
                    to='catalog.product',
                    verbose_name='Product',
                )),
            ] + _history_fields(),
            options=_history_options('Variant'),
            bases=(simple_history.models.HistoricalChanges, models.Model),
        ),
    ]
