from django.apps import AppConfig


class InventoryConfig(AppConfig):
    name = 'apps.inventory'
    verbose_name = 'Products & Stock'

    def ready(self):
        import apps.inventory.signals
