"""Order store: the session cart and its persistence."""
import json
from dataclasses import replace
from typing import Any, Optional

from eshops.errors import (
    ERROR_CATALOG_LOOKUP,
    ERROR_STORAGE_WRITE,
    CatalogLookupError,
    CatalogOfflineError,
    CheckoutNotReadyError,
    PersistenceError,
)
from eshops.logging import get_logger, sanitize_id_for_logging
from eshops.services.money import to_money
from .models import Customer, LineItem, Order
from .storage import RedisSessionStorage, SessionStorage, get_redis_sync

logger = get_logger(__name__)

# Storage slot holding the whole order
ORDER_KEY = "pedido"


class OrderStore:
    """
    Owns the cart of one client session.

    - Restores the order from session storage on construction, or creates
      and persists an empty one
    - Every mutation recomputes the summary and rewrites the snapshot
      before returning
    - Adding an existing product merges quantities, so a product appears
      at most once

    If a write fails, the in-memory order is rolled back to the last
    persisted snapshot and PersistenceError is raised.
    """

    def __init__(self, storage: SessionStorage, catalog=None):
        self._storage = storage
        self._catalog = catalog
        self._snapshot: Optional[str] = None

        order = self._restore()
        if order is None:
            self._order = Order()
            self._save()
        else:
            self._order = order

    @property
    def order(self) -> Order:
        return self._order

    # ==================== PERSISTENCE ====================

    def _restore(self) -> Optional[Order]:
        """Load the persisted order; None when absent or unreadable."""
        try:
            data = self._storage.get(ORDER_KEY)
        except Exception as e:
            logger.warning("Failed to read order from session storage: %s", e)
            return None

        if not data:
            return None

        try:
            order = Order.from_dict(json.loads(data))
        except (json.JSONDecodeError, KeyError, TypeError, ValueError, AttributeError) as e:
            logger.warning("Corrupted order snapshot, starting a new order: %s", e)
            return None

        self._snapshot = data
        logger.debug("Order restored with %s item(s)", len(order.items))
        return order

    def _save(self) -> None:
        payload = json.dumps(self._order.to_dict())
        try:
            self._storage.set(ORDER_KEY, payload)
        except Exception as e:
            logger.error("Failed to persist order: %s", e)
            if self._snapshot is not None:
                self._reset_to(Order.from_dict(json.loads(self._snapshot)))
            raise PersistenceError(f"{ERROR_STORAGE_WRITE}: {e}") from e
        self._snapshot = payload

    def _reset_to(self, order: Order) -> None:
        # In place: callers may hold a reference from `store.order`
        self._order.customer = order.customer
        self._order.items = order.items
        self._order.summary = order.summary

    def _recompute(self) -> None:
        self._order.recompute()

    def _commit(self) -> None:
        self._recompute()
        self._save()

    # ==================== CART ====================

    def add_item(self, item: LineItem) -> Order:
        """
        Add a line item to the cart.

        A product already in the cart gets the quantities added together and
        its price, title and image refreshed from the new item.

        Args:
            item: Line item with a positive quantity and non-negative price

        Returns:
            The updated order
        """
        if not isinstance(item.quantity, int) or item.quantity < 1:
            raise ValueError("quantity must be a positive integer")
        unit_price = to_money(item.unit_price)
        if unit_price < 0:
            raise ValueError("unit_price must be a non-negative number")

        existing = self._order.find_item(item.product_id)
        if existing:
            existing.quantity += item.quantity
            existing.unit_price = unit_price
            existing.title = item.title
            existing.image_url = item.image_url
        else:
            self._order.items.append(replace(item))

        self._commit()
        return self._order

    async def add_item_by_id(self, catalog_id: int | str) -> Order:
        """
        Look a product up in the catalog and add one unit of it.

        Raises:
            CatalogOfflineError: no catalog attached or it is offline
            CatalogLookupError: the lookup failed; the cart is unchanged
        """
        if self._catalog is None or not self._catalog.is_online:
            raise CatalogOfflineError()

        try:
            product = await self._catalog.get_product(catalog_id)
        except CatalogLookupError:
            raise
        except Exception as e:
            logger.error(
                "Catalog lookup for %s failed: %s", sanitize_id_for_logging(catalog_id), e
            )
            raise CatalogLookupError(f"{ERROR_CATALOG_LOOKUP}: {e!s}") from e

        item = LineItem(
            product_id=product.product_id,
            title=product.title,
            image_url=product.image_url,
            unit_price=product.unit_price,
            quantity=1,
        )
        return self.add_item(item)

    def update_quantity(self, product_id, quantity: int) -> Order:
        """Set the quantity of a product; zero or less removes it."""
        if not isinstance(quantity, int):
            raise ValueError("quantity must be an integer")

        if quantity <= 0:
            return self.remove_item(product_id)

        item = self._order.find_item(product_id)
        if item:
            item.quantity = quantity

        self._commit()
        return self._order

    def remove_item(self, product_id) -> Order:
        self._order.items = [item for item in self._order.items if item.product_id != product_id]
        self._commit()
        return self._order

    def clear_cart(self) -> Order:
        """Remove every line item. The discount is kept."""
        self._order.items = []
        logger.info("Cart cleared")
        self._commit()
        return self._order

    def set_discount(self, amount, reason: str) -> Order:
        """
        Apply a discount to the order total.

        The reason must name a discount rule known to the backend; it is not
        validated here, and neither is the amount against the subtotal.
        """
        amount = to_money(amount)
        if amount < 0:
            raise ValueError("discount amount must be non-negative")

        self._order.summary.discount = amount
        self._order.summary.discount_reason = reason
        self._commit()
        return self._order

    def clear(self) -> Order:
        """Reset the whole order, customer and discount included."""
        self._reset_to(Order())
        self._commit()
        return self._order

    # ==================== CUSTOMER ====================

    def set_customer(self, customer: Customer) -> None:
        self._order.customer = replace(customer)
        self._save()

    def clear_customer(self) -> None:
        self._order.customer = Customer()
        self._save()

    # ==================== QUERIES ====================

    def has_complete_customer(self) -> bool:
        return self._order.customer.is_complete

    def has_items(self) -> bool:
        return len(self._order.items) > 0

    def can_checkout(self) -> bool:
        return self.has_items() and self.has_complete_customer()

    # ==================== CHECKOUT ====================

    async def submit_order(self) -> Any:
        """
        Send the order to the EShops API.

        The cart is left as is; callers clear it once the response is handled.

        Raises:
            CheckoutNotReadyError: no items or incomplete customer
            CatalogOfflineError: no catalog attached or it is offline
            OrderSubmissionError: the API rejected the order
        """
        if not self.can_checkout():
            raise CheckoutNotReadyError()
        if self._catalog is None or not self._catalog.is_online:
            raise CatalogOfflineError()

        return await self._catalog.submit_order(self._order.to_dict())


def create_order_store(session_id: str, catalog=None) -> OrderStore:
    """
    Build the order store for one client session on Upstash Redis.

    Call once per session and pass the store to whatever needs the cart.
    """
    storage = RedisSessionStorage(get_redis_sync(), session_id)
    return OrderStore(storage, catalog=catalog)
