"""
EShops Cart

Client-side order/cart support for EShops storefronts:
- cart: order models, session storage and the OrderStore
- services.catalog: async client for the EShops REST API
- db: Upstash Redis client used as session storage

Imports are lazy so importing the package does not require Redis settings.
"""

__all__ = [
    "OrderStore",
    "create_order_store",
    "EShopsClient",
]


def __getattr__(name):
    if name == "OrderStore":
        from eshops.cart import OrderStore
        return OrderStore
    elif name == "create_order_store":
        from eshops.cart import create_order_store
        return create_order_store
    elif name == "EShopsClient":
        from eshops.services.catalog import EShopsClient
        return EShopsClient
    raise AttributeError(f"module 'eshops' has no attribute '{name}'")
