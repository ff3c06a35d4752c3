from __future__ import annotations

from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand

from modules.catalog.services import CatalogService
from shared.domain.result import ErrorCode

SEED_PRODUCTS = [
    ("KB-MECH-01", "Mechanical Keyboard", "Tenkeyless, brown switches", Decimal("89.90"), "USD"),
    ("MS-WL-02", "Wireless Mouse", "Ergonomic, 2.4 GHz", Decimal("29.99"), "USD"),
    ("MN-27-4K", "27in 4K Monitor", "IPS panel, USB-C", Decimal("349.00"), "USD"),
    ("HD-USB-03", "USB-C Hub", "7-in-1 adapter", Decimal("39.50"), "USD"),
    ("CB-HDMI-2M", "HDMI Cable 2m", None, Decimal("9.90"), "USD"),
    ("SSD-1TB", "NVMe SSD 1TB", "PCIe 4.0", Decimal("79.00"), "EUR"),
    ("WC-1080P", "Webcam 1080p", "Built-in microphone", Decimal("49.90"), "EUR"),
    ("HS-BT-05", "Bluetooth Headset", "Noise cancelling", Decimal("119.00"), "EUR"),
]


class Command(BaseCommand):
    help = "Seed the catalog with development products and users."

    def handle(self, *args, **options):
        self.stdout.write("Seeding catalog data...")
        users_created = self._seed_users()
        created, skipped = self._seed_products()
        self.stdout.write(
            self.style.SUCCESS(
                "Seed completed: "
                f"users={users_created}, "
                f"products_created={created}, "
                f"products_skipped={skipped}"
            )
        )

    def _seed_users(self) -> int:
        User = get_user_model()
        created = 0
        if not User.objects.filter(username="admin").exists():
            User.objects.create_superuser("admin", password="admin123")
            created += 1
        if not User.objects.filter(username="catalog").exists():
            User.objects.create_user("catalog", password="catalog123")
            created += 1
        return created

    def _seed_products(self) -> tuple[int, int]:
        service = CatalogService.from_settings()
        created = skipped = 0
        for sku, name, description, price, currency in SEED_PRODUCTS:
            result = service.create_product(
                {
                    "sku": sku,
                    "name": name,
                    "description": description,
                    "price": price,
                    "currency": currency,
                }
            )
            if result.is_success:
                created += 1
            elif result.error.code is ErrorCode.CONFLICT:
                skipped += 1
            else:
                self.stderr.write(f"{sku}: {result.error.message}")
        return created, skipped
