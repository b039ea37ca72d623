"""
Pytest fixtures and configuration for the bakery backend tests

Provides:
- database fixtures for integration tests (skipped without DATABASE_URL)
- an in-memory transactional store with per-row locks, used to check the
  order engine's all-or-nothing and concurrency behavior without PostgreSQL
"""
import os
import threading
from contextlib import contextmanager
from decimal import Decimal
from pathlib import Path

import pytest
from dotenv import load_dotenv

from panaderia.domain.product import Product
from panaderia.services.order_service import OrderService

# Load environment variables for tests
load_dotenv()

SCHEMA_FILE = Path(__file__).resolve().parent.parent / "migrations" / "001_initial_schema.sql"


# ============================================================================
# In-memory store
# ============================================================================

class InMemoryStore:
    """
    Committed state of `pan` and `pedidos`, plus one lock per product row

    transaction() behaves like Database.transaction(): changes are private
    to the transaction until commit, discarded on exception, and row locks
    are held until the scope ends.
    """

    def __init__(self, products):
        self.products = {p.id: p for p in products}
        self.ledger = []
        self.transactions_opened = 0
        self.transactions_closed = 0
        self._row_locks = {p.id: threading.Lock() for p in products}
        self._state_lock = threading.Lock()
        self._next_line_id = 1

    def stock(self, product_id):
        return self.products[product_id].available_quantity

    def next_line_id(self):
        with self._state_lock:
            line_id = self._next_line_id
            self._next_line_id += 1
            return line_id

    @contextmanager
    def transaction(self):
        tx = FakeTransaction(self)
        with self._state_lock:
            self.transactions_opened += 1
        try:
            yield tx
            tx.commit()
        finally:
            tx.release()
            with self._state_lock:
                self.transactions_closed += 1


class FakeTransaction:
    def __init__(self, store):
        self.store = store
        self.locked = []
        self.stock_changes = {}
        self.pending_lines = []

    def lock(self, product_id):
        if product_id in self.store._row_locks and product_id not in self.locked:
            self.store._row_locks[product_id].acquire()
            self.locked.append(product_id)

    def current_stock(self, product_id):
        if product_id in self.stock_changes:
            return self.stock_changes[product_id]
        return self.store.stock(product_id)

    def commit(self):
        with self.store._state_lock:
            for product_id, quantity in self.stock_changes.items():
                product = self.store.products[product_id]
                self.store.products[product_id] = product.model_copy(update={"available_quantity": quantity})
            self.store.ledger.extend(self.pending_lines)

    def release(self):
        for product_id in reversed(self.locked):
            self.store._row_locks[product_id].release()
        self.locked = []


class FakeInventory:
    """InventoryRepository contract over a FakeTransaction"""

    def __init__(self, tx):
        self.tx = tx

    def lock_products(self, product_ids):
        existing = []
        for product_id in sorted(set(product_ids)):
            if product_id in self.tx.store.products:
                self.tx.lock(product_id)
                existing.append(product_id)
        return existing

    def read_for_update(self, product_id):
        if product_id not in self.tx.store.products:
            return None
        self.tx.lock(product_id)
        product = self.tx.store.products[product_id]
        return product.model_copy(update={"available_quantity": self.tx.current_stock(product_id)})

    def decrement(self, product_id, amount):
        if product_id not in self.tx.store.products:
            return False
        current = self.tx.current_stock(product_id)
        if current < amount:
            return False
        self.tx.stock_changes[product_id] = current - amount
        return True


class FakeLedger:
    """OrderRepository contract over a FakeTransaction"""

    def __init__(self, tx):
        self.tx = tx

    def append(self, line):
        line_id = self.tx.store.next_line_id()
        self.tx.pending_lines.append(line.model_copy(update={"id": line_id}))
        return line_id


@pytest.fixture
def make_product():
    def _make(product_id, quantity, name=None, price="2.50"):
        return Product(
            id=product_id,
            name=name or f"Pan {product_id}",
            description=None,
            unit_price=Decimal(price),
            available_quantity=quantity,
            image_url=None,
        )
    return _make


@pytest.fixture
def store(make_product):
    """Catalog: 1 Baguette (10), 2 Croissant (2), 3 Concha (5)"""
    return InMemoryStore([
        make_product(1, 10, "Baguette", "1.50"),
        make_product(2, 2, "Croissant", "2.00"),
        make_product(3, 5, "Concha", "0.80"),
    ])


@pytest.fixture
def order_service(store):
    return OrderService(store, inventory_factory=FakeInventory, ledger_factory=FakeLedger)


# ============================================================================
# Database fixtures (integration)
# ============================================================================

@pytest.fixture(scope="session")
def database_url():
    """
    Provides the database URL for tests

    Scope: session (created once per test session)
    """
    url = os.getenv("DATABASE_URL")
    if not url:
        pytest.skip("DATABASE_URL not configured")
    return url


@pytest.fixture(scope="session")
def database(database_url):
    """
    Opened Database with the schema applied

    Scope: session (one pool for all integration tests)
    """
    from panaderia.core.database import Database

    db = Database(database_url, min_conn=1, max_conn=5, lock_timeout_ms=5000)
    db.open()
    with db.transaction() as conn:
        cursor = conn.cursor()
        cursor.execute(SCHEMA_FILE.read_text())
        cursor.close()
    yield db
    db.close()


@pytest.fixture
def sample_cart_data():
    """
    Provides a sample cart request body
    """
    return {
        "productos": [
            {"id": 1, "nombre": "Baguette", "precio": 1.5, "cantidad": 4},
            {"id": 3, "nombre": "Concha", "precio": 0.8, "cantidad": 2},
        ]
    }
