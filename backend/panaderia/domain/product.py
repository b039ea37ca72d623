"""
Product Domain Model

Represents a bakery product (a row of table `pan`).
This is the single source of truth for product data structure.
"""
from pydantic import BaseModel, Field, ConfigDict, field_serializer
from typing import Optional
from decimal import Decimal


class Product(BaseModel):
    """
    Product domain model - represents a product in the catalog

    Fields:
        id: Internal product ID (primary key)
        name: Product name (`nombre`)
        description: Product description (optional)
        unit_price: Selling price (`precio`)
        available_quantity: Units in stock (`cantidad`), never negative
        image_url: Image path or URL (optional)
    """

    id: int = Field(..., description="Internal product ID")
    name: str = Field(..., description="Product name")
    description: Optional[str] = Field(None, description="Product description")
    unit_price: Decimal = Field(..., description="Sale price", ge=0)
    available_quantity: int = Field(0, description="Units in stock", ge=0)
    image_url: Optional[str] = Field(None, description="Image path or URL")

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("unit_price")
    def _serialize_price(self, value: Decimal) -> float:
        return float(value)

    @property
    def in_stock(self) -> bool:
        return self.available_quantity > 0

    def can_fulfill(self, quantity: int) -> bool:
        """Check whether `quantity` units can be taken from current stock"""
        return self.available_quantity >= quantity

    def to_dict(self) -> dict:
        """
        Convert to the storefront JSON shape (Spanish column names, as the
        front end reads them)
        """
        return {
            "id": self.id,
            "nombre": self.name,
            "descripcion": self.description,
            "precio": float(self.unit_price),
            "cantidad": self.available_quantity,
            "imagen_url": self.image_url,
        }


class ProductInput(BaseModel):
    """Admin payload for creating or updating a product"""

    nombre: str = Field(..., min_length=1, max_length=255)
    descripcion: Optional[str] = None
    precio: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    cantidad: int = Field(..., ge=0)
    imagen_url: Optional[str] = Field(None, max_length=500)
