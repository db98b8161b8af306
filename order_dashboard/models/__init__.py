"""
Modelos de base de datos
"""
from .order import Order

__all__ = [
    "Order",
]
