"""
Unit tests for ProductRepository and UserRepository

These tests validate repository logic without requiring a database connection.
"""
import pytest
from unittest.mock import MagicMock
from decimal import Decimal

from panaderia.domain.product import Product, ProductInput
from panaderia.repositories.product_repository import ProductRepository
from panaderia.repositories.user_repository import UserRepository


def pan_row(product_id=1, nombre='Baguette', cantidad=10):
    return {
        'id': product_id,
        'nombre': nombre,
        'descripcion': None,
        'precio': Decimal('1.50'),
        'cantidad': cantidad,
        'imagen_url': None,
    }


@pytest.fixture
def mock_db():
    """Database whose transaction() yields a mocked connection"""
    db = MagicMock()
    conn = MagicMock()
    cursor = MagicMock()
    db.transaction.return_value.__enter__.return_value = conn
    conn.cursor.return_value = cursor
    return db, cursor


class TestProductRepository:

    def test_find_all_returns_products(self, mock_db):
        db, cursor = mock_db
        cursor.fetchall.return_value = [pan_row(1, 'Baguette'), pan_row(2, 'Croissant', 0)]

        products = ProductRepository(db).find_all()

        assert [p.name for p in products] == ['Baguette', 'Croissant']
        assert all(isinstance(p, Product) for p in products)
        assert products[1].in_stock is False
        assert 'ORDER BY id' in cursor.execute.call_args.args[0]
        cursor.close.assert_called_once()

    def test_find_by_id_returns_none_when_not_found(self, mock_db):
        db, cursor = mock_db
        cursor.fetchone.return_value = None

        assert ProductRepository(db).find_by_id(999) is None

    def test_to_dict_uses_storefront_keys(self, mock_db):
        db, cursor = mock_db
        cursor.fetchone.return_value = pan_row()

        data = ProductRepository(db).find_by_id(1).to_dict()

        assert data == {
            'id': 1,
            'nombre': 'Baguette',
            'descripcion': None,
            'precio': 1.5,
            'cantidad': 10,
            'imagen_url': None,
        }

    def test_create_returns_new_id(self, mock_db):
        db, cursor = mock_db
        cursor.fetchone.return_value = {'id': 8}
        data = ProductInput(nombre='Rosca', descripcion='', precio=Decimal('12'), cantidad=3)

        assert ProductRepository(db).create(data) == 8
        params = cursor.execute.call_args.args[1]
        assert params == ('Rosca', None, Decimal('12'), 3, None)

    def test_update_returns_false_for_missing_product(self, mock_db):
        db, cursor = mock_db
        cursor.rowcount = 0
        data = ProductInput(nombre='Rosca', precio=Decimal('12'), cantidad=3)

        assert ProductRepository(db).update(404, data) is False

    def test_delete_returns_deleted_product(self, mock_db):
        db, cursor = mock_db
        cursor.fetchone.return_value = pan_row(5, 'Bolillo')

        deleted = ProductRepository(db).delete(5)

        assert deleted.id == 5
        assert deleted.name == 'Bolillo'

    def test_delete_returns_none_when_not_found(self, mock_db):
        db, cursor = mock_db
        cursor.fetchone.return_value = None

        assert ProductRepository(db).delete(5) is None


class TestUserRepository:

    def test_find_by_username(self, mock_db):
        db, cursor = mock_db
        cursor.fetchone.return_value = {'id': 1, 'username': 'ana', 'password': 'hash', 'admin': True}

        user = UserRepository(db).find_by_username('ana')

        assert user['admin'] is True
        assert cursor.execute.call_args.args[1] == ('ana',)

    def test_create_returns_none_on_duplicate_username(self, mock_db):
        db, cursor = mock_db
        cursor.fetchone.return_value = None

        assert UserRepository(db).create('ana', 'hash') is None
        assert 'ON CONFLICT (username) DO NOTHING' in cursor.execute.call_args.args[0]
