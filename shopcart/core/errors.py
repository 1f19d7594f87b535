from __future__ import annotations
from typing import Any, Dict, Optional


class CartError(Exception):
    """
    Base class for every rejected cart operation.
    `message` is safe to show to the user; `details` carries the ids/amounts involved.
    """
    message = "Cart operation failed"

    def __init__(self, message: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        self.message = message or self.message
        self.details: Dict[str, Any] = dict(details or {})
        super().__init__(self.message)


class QuantityExceeded(CartError):
    message = "Requested quantity is out of stock"

    def __init__(self, product_id: int, requested: int, available: int):
        super().__init__(details={"product_id": product_id, "requested": requested, "available": available})
        self.product_id = product_id
        self.requested = requested
        self.available = available


class ProductNotFound(CartError):
    message = "Error removing product"

    def __init__(self, product_id: int):
        super().__init__(details={"product_id": product_id})
        self.product_id = product_id


class InvalidAmount(CartError):
    message = "Error updating product amount"

    def __init__(self, product_id: int, amount: Any):
        super().__init__(details={"product_id": product_id, "amount": amount})
        self.product_id = product_id
        self.amount = amount


class LookupFailure(CartError):
    """Any catalog/stock failure. Network errors and missing records are not told apart."""

    def __init__(self, message: str, product_id: int, cause: Optional[BaseException] = None):
        super().__init__(message, details={"product_id": product_id})
        self.product_id = product_id
        self.cause = cause


class PersistenceFailure(CartError):
    message = "Could not save cart"


class ServiceError(Exception):
    """Raised by the remote catalog/stock clients."""
    pass
