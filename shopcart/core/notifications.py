from __future__ import annotations
import logging
from typing import Callable, List, Optional

from shopcart.core.cart_controller import CartController
from shopcart.core.errors import CartError
from shopcart.models.cart import Cart

logger = logging.getLogger(__name__)

Sink = Callable[[str], None]


def log_sink(message: str) -> None:
    logger.warning("cart: %s", message)


class CartNotifier:
    """
    UI-facing wrapper around a CartController. Every CartError raised by an
    operation is turned into a message for `sink` (a toast, a status line...)
    and the call returns False instead of raising.
    """

    def __init__(self, controller: CartController, sink: Optional[Sink] = None):
        self.controller = controller
        self.sink = sink or log_sink
        self.last_error: Optional[CartError] = None

    @property
    def cart(self) -> Cart:
        return self.controller.cart

    def _reject(self, error: CartError) -> bool:
        self.last_error = error
        logger.info("Rejected %s %s", type(error).__name__, error.details)
        self.sink(error.message)
        return False

    async def add_product(self, product_id: int) -> bool:
        try:
            await self.controller.add_product(product_id)
        except CartError as e:
            return self._reject(e)
        self.last_error = None
        return True

    def remove_product(self, product_id: int) -> bool:
        try:
            self.controller.remove_product(product_id)
        except CartError as e:
            return self._reject(e)
        self.last_error = None
        return True

    async def update_product_amount(self, product_id: int, amount: int) -> bool:
        try:
            await self.controller.update_product_amount(product_id, amount)
        except CartError as e:
            return self._reject(e)
        self.last_error = None
        return True


class MessageLog:
    """Collects sink messages in order; handy for tests and headless sessions."""

    def __init__(self):
        self.messages: List[str] = []

    def __call__(self, message: str) -> None:
        self.messages.append(message)
