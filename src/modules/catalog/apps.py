from django.apps import AppConfig


class CatalogConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "modules.catalog"
    label = "catalog"

    def ready(self) -> None:
        from modules.catalog.events import (
            ProductCreated,
            ProductDeactivated,
            ProductUpdated,
        )
        from modules.catalog.handlers import (
            product_created_handler,
            product_deactivated_handler,
            product_updated_handler,
        )
        from shared.infrastructure.bus import event_bus

        event_bus.subscribe(ProductCreated, product_created_handler)
        event_bus.subscribe(ProductUpdated, product_updated_handler)
        event_bus.subscribe(ProductDeactivated, product_deactivated_handler)
