"""
Order Domain Models

CartLine is what the shopper submits; OrderLine is what the ledger keeps
(table `pedidos`). OrderResult is the outcome of a successful placement.
"""
from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, List
from datetime import datetime
from decimal import Decimal


class CartLine(BaseModel):
    """
    One requested product in a cart submission

    JSON keys follow the storefront: id, nombre, precio, cantidad.
    Name and price are as the client saw them at request time.
    """

    product_id: int = Field(..., alias="id", description="Product ID")
    name_at_request: str = Field(..., alias="nombre", description="Product name shown to the shopper", max_length=255)
    price_at_request: Decimal = Field(
        ..., alias="precio", description="Unit price shown to the shopper", ge=0, max_digits=10, decimal_places=2
    )
    requested_quantity: int = Field(..., alias="cantidad", description="Units requested", gt=0)

    model_config = ConfigDict(populate_by_name=True)


class CartRequest(BaseModel):
    """Request body of POST /api/carrito/guardar"""

    productos: List[CartLine] = Field(default_factory=list)


class OrderLine(BaseModel):
    """
    Order line snapshot - immutable once appended to the ledger

    product_name is a copy, not a foreign key: deleting or renaming the
    product later does not change past orders.
    """

    id: Optional[int] = Field(None, description="Ledger ID, assigned on append")
    product_name: str = Field(..., description="Product name at order time")
    unit_price: Decimal = Field(..., description="Price per unit", ge=0)
    quantity: int = Field(..., description="Units ordered", gt=0)
    created_at: Optional[datetime] = Field(None, description="Set by the database")

    model_config = ConfigDict(from_attributes=True, frozen=True)

    @property
    def subtotal(self) -> Decimal:
        return self.unit_price * self.quantity


class OrderResult(BaseModel):
    """Successful placement: one ledger line per cart line"""

    lines_processed: int
    order_line_ids: List[int] = Field(default_factory=list)
    product_ids: List[int] = Field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "success": True,
            "mensaje": "Pedido guardado correctamente y stock actualizado",
            "lineas": self.lines_processed,
        }
