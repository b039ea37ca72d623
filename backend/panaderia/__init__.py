"""
Panadería backend: catálogo, usuarios y reserva atómica de stock para pedidos
"""
__version__ = "1.0.0"
