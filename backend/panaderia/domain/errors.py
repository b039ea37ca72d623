"""
Order placement errors

Every failed cart submission ends in exactly one of these exceptions.
Business-rule errors (EmptyCart, ProductNotFound, InsufficientStock) are
deterministic outcomes of the submitted cart and must not be retried.
InfrastructureFailure wraps connection/transaction faults and is the only
retryable kind. StorageFailure wraps any other statement the database
rejects.

The API layer renders them as {"error": message} with `status_code`.
"""
from typing import Optional


class OrderError(Exception):
    """Base class for all order placement failures"""

    kind = "order_error"
    status_code = 500
    retryable = False

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"error": self.message}


class EmptyCart(OrderError):
    """The cart has no lines; raised before any store access."""

    kind = "empty_cart"
    status_code = 400

    def __init__(self):
        super().__init__("El carrito está vacío")


class ProductNotFound(OrderError):
    kind = "product_not_found"
    status_code = 404

    def __init__(self, product_id: int):
        self.product_id = product_id
        super().__init__(f"Producto con ID {product_id} no encontrado")


class InsufficientStock(OrderError):
    """Requested quantity exceeds the available stock of one product."""

    kind = "insufficient_stock"
    status_code = 409

    def __init__(self, product_id: int, available: int, requested: int,
                 product_name: Optional[str] = None):
        self.product_id = product_id
        self.available = available
        self.requested = requested
        self.product_name = product_name
        label = product_name or f"producto {product_id}"
        super().__init__(
            f"Stock insuficiente para {label}. "
            f"Disponible: {available}, Solicitado: {requested}"
        )

    @property
    def shortfall(self) -> int:
        return self.requested - self.available


class InfrastructureFailure(OrderError):
    """
    Connection, lock timeout, deadlock or commit failure.

    The transaction has been rolled back; the caller may retry the whole cart.
    """

    kind = "infrastructure_failure"
    status_code = 503
    retryable = True

    def __init__(self, cause: Exception, message: str = "Error al guardar el pedido, intenta de nuevo"):
        self.cause = cause
        super().__init__(message)


class StorageFailure(OrderError):
    """
    The database rejected a statement (value out of range, constraint
    violation). The transaction has been rolled back; retrying the same
    cart fails the same way.
    """

    kind = "storage_failure"
    status_code = 500

    def __init__(self, cause: Exception, message: str = "Error al guardar el pedido"):
        self.cause = cause
        super().__init__(message)
