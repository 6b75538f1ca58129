"""POS API package."""

from pos.api.errors import register_pos_exception_handlers
from pos.api.routes import checkout_router, customer_router, product_router, sales_router

__all__ = [
    "product_router",
    "customer_router",
    "checkout_router",
    "sales_router",
    "register_pos_exception_handlers",
]
