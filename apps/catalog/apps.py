from django.apps import AppConfig


class CatalogConfig(AppConfig):
    """
    Catalog of products and their generated variants.

    Products declare ordered attributes (Size, Color, ...) and global
    prices; variants are generated from the attribute values, carry their
    own quantity and may override any global price.
    """

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.catalog'
    verbose_name = 'Catalog'

    def ready(self):
        import apps.catalog.signals  # noqa: F401
