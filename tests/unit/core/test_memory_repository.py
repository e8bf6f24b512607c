"""Unit tests for the in-memory repositories.

Covers:
- CRUD semantics and timestamp stamping.
- count/get_all consistency and page concatenation.
- Defensive copies in both directions.
- Cancellation before any read or mutation.
- Concurrent creates of distinct and identical keys.
"""

from __future__ import annotations

import threading

import pytest

from modules.core.context import RequestContext
from modules.core.exceptions import AlreadyExists, Cancelled, NotFound
from modules.customers.dtos import Customer
from modules.customers.filters import CustomerFilter
from modules.customers.repositories.memory_repository import CustomerMemoryRepository
from modules.products.dtos import Product
from modules.products.filters import ProductFilter
from modules.products.repositories.memory_repository import ProductMemoryRepository

pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _customer(key: str, **overrides) -> Customer:
    defaults = {"customer_id": key, "name": f"Customer {key}", "email": f"{key}@email.com"}
    defaults.update(overrides)
    return Customer(**defaults)


def _product(key: str, **overrides) -> Product:
    defaults = {"product_id": key, "name": f"Product {key}", "price": 10.0, "stock": 1}
    defaults.update(overrides)
    return Product(**defaults)


@pytest.fixture()
def repo() -> CustomerMemoryRepository:
    return CustomerMemoryRepository()


@pytest.fixture()
def product_repo(ctx) -> ProductMemoryRepository:
    repository = ProductMemoryRepository()
    for i, (category, price, active) in enumerate(
        [
            ("laptops", 1299.99, True),
            ("peripherals", 59.99, True),
            ("peripherals", 129.99, True),
            ("monitors", 399.99, True),
            ("testing", 999.99, False),
        ]
    ):
        repository.create(
            ctx, _product(f"p-{i}", category=category, price=price, active=active)
        )
    return repository


# ===========================================================================
# Identity
# ===========================================================================


class TestRepositoryIdentity:
    def test_entity_names(self):
        assert CustomerMemoryRepository().entity_name == "customer"
        assert ProductMemoryRepository().entity_name == "product"

    def test_key_of(self, repo):
        assert repo.key_of(_customer("customer-1")) == "customer-1"


# ===========================================================================
# Create / Get
# ===========================================================================


class TestCreateAndGet:
    def test_create_stamps_equal_timestamps(self, repo, ctx):
        created = repo.create(ctx, _customer("customer-1"))
        assert created.created_at is not None
        assert created.created_at == created.updated_at

    def test_get_returns_stored_fields(self, repo, ctx):
        repo.create(ctx, _customer("customer-1", customer_tier="VIP", loyalty_points=10))
        fetched = repo.get_by_id(ctx, "customer-1")
        assert fetched.name == "Customer customer-1"
        assert fetched.customer_tier == "VIP"
        assert fetched.loyalty_points == 10
        assert fetched.created_at == fetched.updated_at

    def test_get_missing_raises_not_found(self, repo, ctx):
        with pytest.raises(NotFound) as exc_info:
            repo.get_by_id(ctx, "ghost")
        assert exc_info.value.message == "customer with ID ghost not found"

    def test_duplicate_create_leaves_original(self, repo, ctx):
        repo.create(ctx, _customer("customer-1", name="Original"))
        with pytest.raises(AlreadyExists):
            repo.create(ctx, _customer("customer-1", name="Impostor"))
        assert repo.get_by_id(ctx, "customer-1").name == "Original"
        assert repo.count(ctx, CustomerFilter()) == 1

    def test_create_does_not_mutate_input(self, repo, ctx):
        customer = _customer("customer-1")
        repo.create(ctx, customer)
        assert customer.created_at is None


# ===========================================================================
# Defensive copies
# ===========================================================================


class TestDefensiveCopies:
    def test_mutating_input_after_create(self, repo, ctx):
        customer = _customer("customer-1")
        repo.create(ctx, customer)
        customer.name = "Changed"
        customer.address.city = "Elsewhere"
        stored = repo.get_by_id(ctx, "customer-1")
        assert stored.name == "Customer customer-1"
        assert stored.address.city == ""

    def test_mutating_returned_entity(self, repo, ctx):
        repo.create(ctx, _customer("customer-1"))
        fetched = repo.get_by_id(ctx, "customer-1")
        fetched.preferences.newsletter = True
        fetched.active = False
        again = repo.get_by_id(ctx, "customer-1")
        assert again.preferences.newsletter is False
        assert again.active is True

    def test_mutating_listed_entity(self, repo, ctx):
        repo.create(ctx, _customer("customer-1"))
        listed = repo.get_all(ctx, CustomerFilter())
        listed[0].name = "Changed"
        assert repo.get_by_id(ctx, "customer-1").name == "Customer customer-1"


# ===========================================================================
# Update / Delete
# ===========================================================================


class TestUpdate:
    def test_update_keeps_created_at(self, repo, ctx):
        created = repo.create(ctx, _customer("customer-1"))
        updated = repo.update(ctx, _customer("customer-1", name="Renamed"))
        assert updated.name == "Renamed"
        assert updated.created_at == created.created_at
        assert updated.updated_at >= created.updated_at

    def test_update_ignores_caller_timestamps(self, repo, ctx):
        created = repo.create(ctx, _customer("customer-1"))
        replacement = _customer("customer-1")
        replacement.created_at = None
        assert repo.update(ctx, replacement).created_at == created.created_at

    def test_update_missing_raises_not_found(self, repo, ctx):
        with pytest.raises(NotFound):
            repo.update(ctx, _customer("ghost"))
        assert repo.count(ctx, CustomerFilter()) == 0


class TestDelete:
    def test_delete_then_get_raises(self, repo, ctx):
        repo.create(ctx, _customer("customer-1"))
        repo.delete(ctx, "customer-1")
        with pytest.raises(NotFound):
            repo.get_by_id(ctx, "customer-1")

    def test_delete_missing_raises_not_found(self, repo, ctx):
        with pytest.raises(NotFound):
            repo.delete(ctx, "ghost")


# ===========================================================================
# Listing
# ===========================================================================


class TestListing:
    def test_count_matches_unpaginated_get_all(self, product_repo, ctx):
        for filters in (
            ProductFilter(),
            ProductFilter(active=True),
            ProductFilter(category="peripherals"),
            ProductFilter(min_price=100.0, max_price=500.0),
            ProductFilter(category="nothing"),
        ):
            assert len(product_repo.get_all(ctx, filters)) == product_repo.count(ctx, filters)

    def test_pages_concatenate_exactly_once(self, product_repo, ctx):
        everything = [p.product_id for p in product_repo.get_all(ctx, ProductFilter())]
        paged = []
        for page in range(3):
            paged.extend(
                p.product_id
                for p in product_repo.get_all(ctx, ProductFilter(page=page, page_size=2))
            )
        assert paged == everything

    def test_page_past_end_is_empty(self, product_repo, ctx):
        assert product_repo.get_all(ctx, ProductFilter(page=10, page_size=2)) == []

    def test_price_range_inclusive(self, product_repo, ctx):
        result = product_repo.get_all(ctx, ProductFilter(min_price=59.99, max_price=129.99))
        assert sorted(p.product_id for p in result) == ["p-1", "p-2"]

    def test_count_active_only(self, product_repo, ctx):
        assert product_repo.count(ctx, ProductFilter(active=True)) == 4

    def test_email_filter(self, repo, ctx):
        repo.create(ctx, _customer("a", email="Juan.Perez@email.com"))
        repo.create(ctx, _customer("b", email="maria@email.com"))
        result = repo.get_all(ctx, CustomerFilter(email="juan.perez"))
        assert [c.customer_id for c in result] == ["a"]


# ===========================================================================
# Cancellation
# ===========================================================================


class TestCancellation:
    @pytest.fixture()
    def cancelled(self):
        ctx = RequestContext(request_id="cancelled")
        ctx.cancel()
        return ctx

    def test_cancelled_create_stores_nothing(self, repo, ctx, cancelled):
        with pytest.raises(Cancelled):
            repo.create(cancelled, _customer("customer-1"))
        assert repo.count(ctx, CustomerFilter()) == 0

    def test_cancelled_delete_keeps_entity(self, repo, ctx, cancelled):
        repo.create(ctx, _customer("customer-1"))
        with pytest.raises(Cancelled):
            repo.delete(cancelled, "customer-1")
        assert repo.get_by_id(ctx, "customer-1").customer_id == "customer-1"

    @pytest.mark.parametrize(
        "call",
        [
            lambda r, c: r.get_by_id(c, "x"),
            lambda r, c: r.get_all(c, CustomerFilter()),
            lambda r, c: r.count(c, CustomerFilter()),
            lambda r, c: r.update(c, _customer("x")),
            lambda r, c: r.health_check(c),
        ],
    )
    def test_every_operation_observes_cancellation(self, repo, cancelled, call):
        with pytest.raises(Cancelled):
            call(repo, cancelled)


# ===========================================================================
# Concurrency
# ===========================================================================


class TestConcurrency:
    def test_parallel_creates_of_distinct_keys(self, repo, ctx):
        def worker(offset):
            for i in range(50):
                repo.create(ctx, _customer(f"c-{offset}-{i}"))

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=10)
        assert repo.count(ctx, CustomerFilter()) == 200

    def test_parallel_creates_of_same_key_admit_one(self, repo, ctx):
        outcomes = []
        lock = threading.Lock()

        def worker():
            try:
                repo.create(ctx, _customer("contested"))
                result = "created"
            except AlreadyExists:
                result = "exists"
            with lock:
                outcomes.append(result)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=10)
        assert outcomes.count("created") == 1
        assert outcomes.count("exists") == 7
