"""
Domain Layer - Business Entities

This layer contains Pydantic models representing business entities
and the order placement error taxonomy.
"""
from panaderia.domain.product import Product, ProductInput
from panaderia.domain.order import CartLine, CartRequest, OrderLine, OrderResult
from panaderia.domain.errors import (
    OrderError,
    EmptyCart,
    ProductNotFound,
    InsufficientStock,
    InfrastructureFailure,
    StorageFailure,
)

__all__ = [
    'Product',
    'ProductInput',
    'CartLine',
    'CartRequest',
    'OrderLine',
    'OrderResult',
    'OrderError',
    'EmptyCart',
    'ProductNotFound',
    'InsufficientStock',
    'InfrastructureFailure',
    'StorageFailure',
]
