"""
Inventory Repository - stock rows of table `pan` inside an order transaction

Bound to a connection that is already inside Database.transaction(); it
never commits, rolls back or closes. Every read here takes a row lock
(SELECT ... FOR UPDATE) held until the surrounding transaction ends, so a
competing order waits and then sees the decremented stock.
"""
from typing import Iterable, List, Optional

from panaderia.domain.product import Product
from panaderia.repositories.product_repository import ProductRepository


class InventoryRepository:
    """
    Stock store for the order engine

    All SQL that reads or changes `pan.cantidad` for an order is here.
    """

    def __init__(self, conn):
        self.conn = conn

    def lock_products(self, product_ids: Iterable[int]) -> List[int]:
        """
        Lock the rows of all given products in ascending id order

        Taking locks in one global order means two carts that share products
        cannot deadlock on each other. Ids without a row are ignored here.

        Returns:
            Ids that exist (and are now locked)
        """
        ids = sorted(set(product_ids))
        if not ids:
            return []

        cursor = self.conn.cursor()
        try:
            cursor.execute("""
                SELECT id
                FROM pan
                WHERE id = ANY(%s)
                ORDER BY id
                FOR UPDATE
            """, (ids,))
            return [row['id'] for row in cursor.fetchall()]
        finally:
            cursor.close()

    def read_for_update(self, product_id: int) -> Optional[Product]:
        """
        Read one product with an exclusive row lock

        Args:
            product_id: Product ID

        Returns:
            Product or None if not found
        """
        cursor = self.conn.cursor()
        try:
            cursor.execute("""
                SELECT id, nombre, descripcion, precio, cantidad, imagen_url
                FROM pan
                WHERE id = %s
                FOR UPDATE
            """, (product_id,))

            row = cursor.fetchone()
            if not row:
                return None

            return ProductRepository._map_row_to_product(row)
        finally:
            cursor.close()

    def decrement(self, product_id: int, amount: int) -> bool:
        """
        Take `amount` units from stock

        The WHERE clause refuses to go below zero, so a False return means
        the product is missing or has less than `amount` units.
        """
        if amount <= 0:
            raise ValueError(f"amount must be positive, got {amount}")

        cursor = self.conn.cursor()
        try:
            cursor.execute("""
                UPDATE pan
                SET cantidad = cantidad - %s
                WHERE id = %s AND cantidad >= %s
            """, (amount, product_id, amount))
            return cursor.rowcount == 1
        finally:
            cursor.close()
