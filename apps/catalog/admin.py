from django.contrib import admin, messages
from django.utils.html import format_html
from import_export import resources, fields
from import_export.admin import ImportExportModelAdmin
from import_export.widgets import ForeignKeyWidget
from adminsortable2.admin import SortableAdminBase, SortableInlineAdminMixin
from simple_history.admin import SimpleHistoryAdmin

from .models import Product, Variant
from .services.variant_store import VariantStore, VariantValidationError


# =============================================================================
# Import/Export Resources
# =============================================================================

class VariantResource(resources.ModelResource):
    """Resource for importing/exporting variants with their resolved prices."""

    product_article = fields.Field(
        column_name='product_article',
        attribute='product',
        widget=ForeignKeyWidget(Product, 'article')
    )
    effective_wholesale = fields.Field(column_name='effective_wholesale', readonly=True)
    effective_retail = fields.Field(column_name='effective_retail', readonly=True)
    effective_club = fields.Field(column_name='effective_club', readonly=True)
    effective_cost_after = fields.Field(column_name='effective_cost_after', readonly=True)

    class Meta:
        model = Variant
        import_id_fields = ['product_article', 'sku']
        fields = (
            'product_article', 'sku', 'attributes', 'qty', 'min_qty',
            'wholesale', 'retail', 'club', 'cost_before', 'cost_after',
            'effective_wholesale', 'effective_retail', 'effective_club',
            'effective_cost_after'
        )
        export_order = fields

    def dehydrate_effective_wholesale(self, variant):
        return variant.effective_wholesale

    def dehydrate_effective_retail(self, variant):
        return variant.effective_retail

    def dehydrate_effective_club(self, variant):
        return variant.effective_club

    def dehydrate_effective_cost_after(self, variant):
        return variant.effective_cost_after


# =============================================================================
# Inlines
# =============================================================================

class VariantInline(SortableInlineAdminMixin, admin.TabularInline):
    model = Variant
    extra = 0
    fields = ['sku', 'attributes_display', 'qty', 'wholesale', 'retail', 'club', 'cost_after']
    readonly_fields = ['sku', 'attributes_display']
    show_change_link = True

    def has_add_permission(self, request, obj=None):
        return False

    def attributes_display(self, obj):
        return ' / '.join(f'{k}: {v}' for k, v in (obj.attributes or {}).items()) or '-'
    attributes_display.short_description = 'Attributes'


# =============================================================================
# Model Admins
# =============================================================================

@admin.register(Product)
class ProductAdmin(SortableAdminBase, SimpleHistoryAdmin):
    list_display = ['article', 'title', 'category', 'brand', 'variant_count', 'archived', 'created_at']
    list_filter = ['brand', 'category', 'archived', 'taxable']
    search_fields = ['article', 'title', 'category']
    readonly_fields = ['variant_count', 'created_at', 'updated_at']
    inlines = [VariantInline]

    fieldsets = (
        (None, {
            'fields': ('article', 'title', 'category', 'brand', 'taxable', 'media_main', 'archived')
        }),
        ('Attributes', {
            'fields': ('attributes',)
        }),
        ('Global pricing', {
            'fields': ('wholesale', 'retail', 'club', 'cost_before', 'cost_after')
        }),
        ('Information', {
            'fields': ('variant_count', 'created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    actions = ['regenerate_variants', 'archive_products']

    @admin.action(description='Regenerate variants (keeps edited quantities and prices)')
    def regenerate_variants(self, request, queryset):
        for product in queryset:
            missing = product.attribute_schema().missing_values()
            if missing:
                self.message_user(
                    request,
                    f'{product.article}: no values for {", ".join(missing)}, variants left unchanged',
                    level=messages.WARNING
                )
                continue
            variants = VariantStore.regenerate(product)
            try:
                VariantStore.save_variants(product, variants)
            except VariantValidationError as e:
                self.message_user(
                    request, f'{product.article}: {"; ".join(e.errors)}', level=messages.ERROR
                )
                continue
            self.message_user(request, f'{product.article}: {len(variants)} variants.')

    @admin.action(description='Archive selected products')
    def archive_products(self, request, queryset):
        count = queryset.update(archived=True)
        self.message_user(request, f'{count} products archived.')


@admin.register(Variant)
class VariantAdmin(ImportExportModelAdmin, SimpleHistoryAdmin):
    resource_class = VariantResource
    list_display = [
        'sku', 'product', 'qty', 'stock_status', 'effective_retail', 'effective_wholesale',
        'effective_cost_after', 'override_status'
    ]
    list_filter = ['product__brand', 'product']
    list_editable = ['qty']
    search_fields = ['sku', 'product__title', 'product__article']
    autocomplete_fields = ['product']
    readonly_fields = [
        'created_at', 'updated_at', 'effective_wholesale', 'effective_retail',
        'effective_club', 'effective_cost_before', 'effective_cost_after'
    ]
    list_per_page = 50

    fieldsets = (
        (None, {
            'fields': ('product', 'sku', 'attributes', 'qty', 'min_qty', 'position')
        }),
        ('Price overrides', {
            'fields': ('wholesale', 'retail', 'club', 'cost_before', 'cost_after')
        }),
        ('Effective prices', {
            'fields': (
                'effective_wholesale', 'effective_retail', 'effective_club',
                'effective_cost_before', 'effective_cost_after'
            ),
            'classes': ('collapse',)
        }),
        ('Information', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    def override_status(self, obj):
        if obj.has_overrides:
            return format_html('<span style="color: {};">{}</span>', 'orange', 'Custom')
        return format_html('<span style="color: {};">{}</span>', 'green', 'Inherited')
    override_status.short_description = 'Pricing'


# =============================================================================
# Admin Site Configuration
# =============================================================================

admin.site.site_header = 'Catalog Admin'
admin.site.site_title = 'Catalog'
admin.site.index_title = 'Products and variants'
