"""Sample catalog data for local development and demos.

Loaded by ``manage.py seed_data`` (any backend) and, when
``CATALOG["SEED_SAMPLE_DATA"]`` is on, into a fresh in-memory repository.
Includes the inactive and fault-key records used for resilience testing.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable, List

import structlog

from modules.core.context import RequestContext, background_context
from modules.core.dtos import Entity
from modules.core.exceptions import AlreadyExists
from modules.core.repositories.interfaces import IRepository
from modules.customers.dtos import Address, Customer, Preferences
from modules.products.dtos import Product

logger = structlog.get_logger(__name__)


def _date(year: int, month: int, day: int) -> datetime:
    return datetime(year, month, day, tzinfo=timezone.utc)


def sample_customers() -> List[Customer]:
    return [
        Customer(
            customer_id="customer-1",
            name="Juan Pérez García",
            email="juan.perez@email.com",
            phone="+34 600 123 456",
            registration_date=_date(2023, 1, 15),
            preferences=Preferences(newsletter=True, notifications=True),
            address=Address(
                street="Calle Mayor 123", city="Madrid", postal_code="28001", country="España"
            ),
        ),
        Customer(
            customer_id="customer-2",
            name="María González López",
            email="maria.gonzalez@email.com",
            phone="+34 600 234 567",
            registration_date=_date(2023, 2, 20),
            preferences=Preferences(newsletter=True),
            address=Address(
                street="Avenida Libertad 456",
                city="Barcelona",
                postal_code="08001",
                country="España",
            ),
        ),
        Customer(
            customer_id="customer-3",
            name="Carlos Rodríguez Silva",
            email="carlos.rodriguez@email.com",
            phone="+34 600 345 678",
            active=False,
            registration_date=_date(2022, 12, 10),
            last_login=_date(2024, 1, 15),
            address=Address(
                street="Plaza España 789", city="Valencia", postal_code="46001", country="España"
            ),
        ),
        Customer(
            customer_id="customer-inactive",
            name="Cliente Inactivo",
            email="inactive@email.com",
            phone="+34 600 456 789",
            active=False,
            registration_date=_date(2022, 6, 1),
            last_login=_date(2023, 6, 1),
            address=Address(
                street="Calle Inactiva 000", city="Sevilla", postal_code="41001", country="España"
            ),
        ),
        Customer(
            customer_id="customer-premium",
            name="Ana Premium VIP",
            email="ana.premium@email.com",
            phone="+34 600 567 890",
            customer_tier="VIP",
            loyalty_points=15750,
            registration_date=_date(2020, 3, 15),
            preferences=Preferences(newsletter=True, notifications=True),
            address=Address(
                street="Paseo de la Castellana 100",
                city="Madrid",
                postal_code="28046",
                country="España",
            ),
        ),
        Customer(
            customer_id="customer-error",
            name="Cliente que causa error",
            email="error@test.com",
            phone="+34 600 000 000",
            address=Address(
                street="Error Street 404",
                city="Test City",
                postal_code="00000",
                country="Test Country",
            ),
        ),
    ]


_PRODUCTS = [
    ("product-1", "Laptop Gaming MSI", "High-performance gaming laptop with RTX graphics", 1299.99, "laptops", 15),
    ("product-2", "Mouse Gamer Logitech", "Wireless gaming mouse with RGB lighting", 59.99, "peripherals", 50),
    ("product-3", "Teclado Mecánico RGB", "Mechanical keyboard with customizable RGB lighting", 129.99, "peripherals", 30),
    ("product-4", "Monitor 4K 27 pulgadas", "Ultra HD 4K monitor for gaming and productivity", 399.99, "monitors", 20),
    ("product-5", "Auriculares Gaming", "Professional gaming headset with noise cancellation", 89.99, "peripherals", 40),
    ("product-6", "SSD NVMe 1TB Samsung", "High-speed NVMe SSD for ultra-fast data transfer", 149.99, "storage", 25),
    ("product-7", "Webcam 4K Logitech", "Ultra HD webcam for streaming and video calls", 199.99, "peripherals", 35),
    ("product-8", "Tarjeta Gráfica RTX 4060", "High-performance graphics card for gaming", 899.99, "components", 10),
    ("product-9", "Silla Gaming Ergonómica", "Ergonomic gaming chair with lumbar support", 299.99, "furniture", 15),
]


def sample_products() -> List[Product]:
    products = [
        Product(
            product_id=key,
            name=name,
            description=description,
            price=price,
            category=category,
            stock=stock,
        )
        for key, name, description, price, category, stock in _PRODUCTS
    ]
    products.append(
        Product(
            product_id="product-error",
            name="Producto que causa error",
            description="Test product that simulates errors",
            price=999.99,
            category="testing",
            stock=0,
            active=False,
        )
    )
    return products


def seed_repository(
    repository: IRepository,
    entities: Iterable[Entity],
    ctx: RequestContext | None = None,
) -> int:
    """Store each entity whose key is free; returns how many were created."""
    ctx = ctx or background_context()
    created = 0
    for entity in entities:
        try:
            repository.create(ctx, entity)
        except AlreadyExists:
            continue
        created += 1
    logger.info("catalog.seeded", entity=repository.entity_name, created=created)
    return created
