"""
Cart API Endpoint
Turns a submitted cart into order lines and stock decrements

Failures are raised as OrderError and rendered by the handler in main.py:
    EmptyCart 400, ProductNotFound 404, InsufficientStock 409,
    InfrastructureFailure 503 (+ Retry-After)
"""
from fastapi import APIRouter, Depends

from panaderia.core.config import settings
from panaderia.core.database import Database, get_database
from panaderia.domain.order import CartRequest
from panaderia.services.order_service import OrderService

router = APIRouter(prefix="/api/carrito", tags=["Carrito"])


def get_order_service(db: Database = Depends(get_database)) -> OrderService:
    return OrderService(db, trust_client_prices=settings.TRUST_CLIENT_PRICES)


@router.post("/guardar")
def save_cart(cart: CartRequest, service: OrderService = Depends(get_order_service)):
    """
    Place an order for the cart (public, no login required)

    Body:
        {"productos": [{"id": 1, "nombre": "Baguette", "precio": 1.5, "cantidad": 2}]}

    Plain `def`: FastAPI runs it in the threadpool, so each request holds
    its own pooled connection while it waits on row locks.
    """
    result = service.place_order(cart.productos)
    return result.to_dict()
