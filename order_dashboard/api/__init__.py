"""
APIs REST
"""
from .orders import bp as orders_bp
from .analytics import bp as analytics_bp

__all__ = [
    "orders_bp",
    "analytics_bp",
]
