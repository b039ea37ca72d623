"""
Product Repository - Data Access Layer for the catalog

Handles catalog reads (public) and admin CRUD on table `pan`.
Returns Product domain models, not raw dictionaries.
"""
from typing import List, Optional

from panaderia.core.database import Database
from panaderia.domain.product import Product, ProductInput


class ProductRepository:
    """
    Repository for Product data access

    Each method runs in its own short transaction on the given Database.
    Stock changes made by orders go through InventoryRepository instead.
    """

    def __init__(self, db: Database):
        self.db = db

    @staticmethod
    def _map_row_to_product(row: dict) -> Product:
        """Map a `pan` row (Spanish column names) to the Product domain model"""
        return Product(
            id=row['id'],
            name=row['nombre'],
            description=row.get('descripcion'),
            unit_price=row['precio'],
            available_quantity=row['cantidad'],
            image_url=row.get('imagen_url'),
        )

    def find_all(self) -> List[Product]:
        """
        List the whole catalog ordered by id

        Returns:
            List of products
        """
        with self.db.transaction() as conn:
            cursor = conn.cursor()
            try:
                cursor.execute("""
                    SELECT id, nombre, descripcion, precio, cantidad, imagen_url
                    FROM pan
                    ORDER BY id
                """)
                return [self._map_row_to_product(row) for row in cursor.fetchall()]
            finally:
                cursor.close()

    def find_by_id(self, product_id: int) -> Optional[Product]:
        """
        Find product by ID

        Returns:
            Product or None if not found
        """
        with self.db.transaction() as conn:
            cursor = conn.cursor()
            try:
                cursor.execute("""
                    SELECT id, nombre, descripcion, precio, cantidad, imagen_url
                    FROM pan
                    WHERE id = %s
                """, (product_id,))

                row = cursor.fetchone()
                if not row:
                    return None

                return self._map_row_to_product(row)
            finally:
                cursor.close()

    def create(self, data: ProductInput) -> int:
        """
        Insert a product

        Returns:
            New product ID
        """
        with self.db.transaction() as conn:
            cursor = conn.cursor()
            try:
                cursor.execute("""
                    INSERT INTO pan (nombre, descripcion, precio, cantidad, imagen_url)
                    VALUES (%s, %s, %s, %s, %s)
                    RETURNING id
                """, (
                    data.nombre,
                    data.descripcion or None,
                    data.precio,
                    data.cantidad,
                    data.imagen_url or None,
                ))
                return cursor.fetchone()['id']
            finally:
                cursor.close()

    def update(self, product_id: int, data: ProductInput) -> bool:
        """
        Replace all editable fields of a product

        Returns:
            False if the product does not exist
        """
        with self.db.transaction() as conn:
            cursor = conn.cursor()
            try:
                cursor.execute("""
                    UPDATE pan
                    SET nombre = %s, descripcion = %s, precio = %s, cantidad = %s, imagen_url = %s
                    WHERE id = %s
                """, (
                    data.nombre,
                    data.descripcion or None,
                    data.precio,
                    data.cantidad,
                    data.imagen_url or None,
                    product_id,
                ))
                return cursor.rowcount == 1
            finally:
                cursor.close()

    def delete(self, product_id: int) -> Optional[Product]:
        """
        Delete a product

        Past order lines keep their name snapshot, so nothing else changes.

        Returns:
            The deleted product, or None if it did not exist
        """
        with self.db.transaction() as conn:
            cursor = conn.cursor()
            try:
                cursor.execute("""
                    DELETE FROM pan
                    WHERE id = %s
                    RETURNING id, nombre, descripcion, precio, cantidad, imagen_url
                """, (product_id,))

                row = cursor.fetchone()
                if not row:
                    return None

                return self._map_row_to_product(row)
            finally:
                cursor.close()
