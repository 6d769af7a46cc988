"""
EShops exceptions and shared error messages.

Messages are kept as constants so the same text is not repeated across
modules and tests.
"""

# Catalog
ERROR_CATALOG_OFFLINE = "Catalog API is offline"
ERROR_CATALOG_LOOKUP = "Catalog lookup failed"
ERROR_PRODUCT_NOT_FOUND = "Product not found"

# Cart
ERROR_STORAGE_WRITE = "Order could not be persisted"
ERROR_CHECKOUT_NOT_READY = "Order has no items or customer data is incomplete"
ERROR_ORDER_SUBMISSION = "Order submission failed"


class EShopsError(Exception):
    """Base class for every error raised by this package."""


class PersistenceError(EShopsError):
    """Writing the order snapshot to session storage failed."""


class CatalogLookupError(EShopsError):
    """Product data could not be fetched from the catalog API."""


class CatalogOfflineError(CatalogLookupError):
    """No request was made because the catalog API is not reachable."""

    def __init__(self, message: str = ERROR_CATALOG_OFFLINE):
        super().__init__(message)


class CheckoutNotReadyError(EShopsError):
    """The order cannot be submitted yet."""

    def __init__(self, message: str = ERROR_CHECKOUT_NOT_READY):
        super().__init__(message)


class OrderSubmissionError(EShopsError):
    """The remote API rejected or never received the order."""
