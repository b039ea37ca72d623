"""
Service Layer - business operations over repositories
"""
from panaderia.services.order_service import OrderService

__all__ = ['OrderService']
