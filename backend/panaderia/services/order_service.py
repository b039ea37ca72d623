"""
Order Service
Places a cart as one all-or-nothing reservation: stock check, ledger lines
and stock decrements commit together or not at all.

Concurrency is handled entirely by PostgreSQL row locks. Two requests for
the same product serialize on that product's row; the second one reads
the stock left by the first.
"""
import logging
from typing import Callable, Iterable, List

from panaderia.core.database import Database
from panaderia.domain.errors import (
    OrderError,
    EmptyCart,
    ProductNotFound,
    InsufficientStock,
)
from panaderia.domain.order import CartLine, OrderLine, OrderResult
from panaderia.domain.product import Product
from panaderia.repositories.inventory_repository import InventoryRepository
from panaderia.repositories.order_repository import OrderRepository

logger = logging.getLogger(__name__)


class OrderService:
    """
    Reservation engine for cart submissions

    Handles:
    - Empty cart rejection (before any DB access)
    - Row locking of every product in the cart
    - Per-line stock validation, in the order received
    - Ledger append + stock decrement per line
    - Commit / rollback through Database.transaction()

    The engine does not retry. InfrastructureFailure tells the caller a
    retry may work; every other OrderError is final for that cart.
    """

    def __init__(
        self,
        db: Database,
        trust_client_prices: bool = True,
        inventory_factory: Callable = InventoryRepository,
        ledger_factory: Callable = OrderRepository,
    ):
        self.db = db
        self.trust_client_prices = trust_client_prices
        self.inventory_factory = inventory_factory
        self.ledger_factory = ledger_factory

    def _snapshot(self, line: CartLine, product: Product) -> OrderLine:
        """Build the ledger line; name and price come from the cart unless catalog pricing is on"""
        if self.trust_client_prices:
            return OrderLine(
                product_name=line.name_at_request,
                unit_price=line.price_at_request,
                quantity=line.requested_quantity,
            )
        return OrderLine(
            product_name=product.name,
            unit_price=product.unit_price,
            quantity=line.requested_quantity,
        )

    def place_order(self, cart_lines: Iterable[CartLine]) -> OrderResult:
        """
        Reserve stock for a cart and record its order lines

        Args:
            cart_lines: Ordered cart lines (requested_quantity > 0 each)

        Returns:
            OrderResult with one ledger id per cart line

        Raises:
            EmptyCart: cart has no lines
            ProductNotFound: a line names a product that does not exist
            InsufficientStock: a line asks for more than is available
            InfrastructureFailure: pool, connection, lock timeout or commit fault
        """
        lines: List[CartLine] = list(cart_lines or [])
        if not lines:
            logger.warning("[PEDIDO] Rechazado: carrito vacío")
            raise EmptyCart()

        order_line_ids: List[int] = []

        try:
            with self.db.transaction() as conn:
                inventory = self.inventory_factory(conn)
                ledger = self.ledger_factory(conn)

                inventory.lock_products(line.product_id for line in lines)

                for line in lines:
                    product = inventory.read_for_update(line.product_id)
                    if product is None:
                        raise ProductNotFound(line.product_id)

                    if not product.can_fulfill(line.requested_quantity):
                        raise InsufficientStock(
                            product.id,
                            product.available_quantity,
                            line.requested_quantity,
                            product_name=product.name,
                        )

                    order_line_ids.append(ledger.append(self._snapshot(line, product)))

                    # The row is locked by us, so this only fails if the lock was lost
                    if not inventory.decrement(product.id, line.requested_quantity):
                        raise InsufficientStock(
                            product.id,
                            product.available_quantity,
                            line.requested_quantity,
                            product_name=product.name,
                        )

        except OrderError as e:
            logger.warning(f"[PEDIDO] Rechazado ({e.kind}): {e.message}")
            raise

        product_ids = list(dict.fromkeys(line.product_id for line in lines))
        logger.info(
            f"[PEDIDO] Se guardó pedido con {len(lines)} productos y se actualizó el stock "
            f"(productos: {product_ids})"
        )

        return OrderResult(
            lines_processed=len(lines),
            order_line_ids=order_line_ids,
            product_ids=product_ids,
        )
