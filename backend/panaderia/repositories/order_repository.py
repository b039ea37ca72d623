"""
Order Repository - append-only ledger of order lines (table `pedidos`)

Like InventoryRepository it works on the caller's transaction connection,
so ledger inserts and stock decrements commit or roll back together.
"""
from panaderia.domain.order import OrderLine


class OrderRepository:
    """Ledger writer: lines are inserted, never updated or deleted"""

    def __init__(self, conn):
        self.conn = conn

    def append(self, line: OrderLine) -> int:
        """
        Insert an order line

        Args:
            line: Snapshot of name, unit price and quantity

        Returns:
            ID of the new ledger row
        """
        cursor = self.conn.cursor()
        try:
            cursor.execute("""
                INSERT INTO pedidos (nombre, precio, cantidad)
                VALUES (%s, %s, %s)
                RETURNING id
            """, (line.product_name, line.unit_price, line.quantity))
            return cursor.fetchone()['id']
        finally:
            cursor.close()
