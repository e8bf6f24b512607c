from __future__ import annotations

from django.core.management.base import BaseCommand

from modules.core.providers import MEMORY, close_mongo_client, repository_backend
from modules.core.seeding import sample_customers, sample_products, seed_repository
from modules.customers.providers import build_customer_repository
from modules.products.providers import build_product_repository


class Command(BaseCommand):
    help = "Seed the catalog backend with sample customers and products."

    def handle(self, *args, **options):
        backend = repository_backend()
        if backend == MEMORY:
            self.stdout.write(
                self.style.WARNING(
                    "The memory backend is process-local; use SEED_SAMPLE_DATA=true "
                    "to preload a running server instead."
                )
            )
        self.stdout.write(f"Seeding {backend} catalog...")

        try:
            customers = seed_repository(build_customer_repository(), sample_customers())
            products = seed_repository(build_product_repository(), sample_products())
        finally:
            close_mongo_client()

        self.stdout.write(
            self.style.SUCCESS(
                f"Seed completed: customers={customers}, products={products}"
            )
        )
