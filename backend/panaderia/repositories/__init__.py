"""
Repository Layer - Data Access

This layer handles all database queries and returns domain models.
Repositories abstract away SQL details from business logic.

ProductRepository and UserRepository take a Database and open their own
short transactions. InventoryRepository and OrderRepository take a
connection that is already inside an order transaction.
"""
from panaderia.repositories.product_repository import ProductRepository
from panaderia.repositories.inventory_repository import InventoryRepository
from panaderia.repositories.order_repository import OrderRepository
from panaderia.repositories.user_repository import UserRepository

__all__ = [
    'ProductRepository',
    'InventoryRepository',
    'OrderRepository',
    'UserRepository',
]
