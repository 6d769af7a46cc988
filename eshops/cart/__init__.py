"""Cart package: models, session storage, and order store."""
from .models import Customer, LineItem, Order, OrderSummary
from .service import ORDER_KEY, OrderStore, create_order_store
from .storage import RedisSessionStorage, SessionStorage

__all__ = [
    "Customer",
    "LineItem",
    "Order",
    "OrderSummary",
    "ORDER_KEY",
    "OrderStore",
    "create_order_store",
    "RedisSessionStorage",
    "SessionStorage",
]
