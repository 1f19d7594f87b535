from __future__ import annotations
import logging
from typing import Any, Callable, List, Optional

from shopcart.config import settings as default_settings
from shopcart.core.errors import (
    InvalidAmount,
    LookupFailure,
    PersistenceFailure,
    ProductNotFound,
    QuantityExceeded,
    ServiceError,
)
from shopcart.database import FileBackedStore
from shopcart.models.cart import Cart, CartItem
from shopcart.models.product import StockRecord
from shopcart.services.api import ApiClient, ProductCatalogService, StockService

logger = logging.getLogger(__name__)

ADD_FAILED = "Error adding product"
UPDATE_FAILED = "Error updating product amount"

Subscriber = Callable[[Cart], None]


class CartController:
    """
    Owns the current Cart and keeps it mirrored to a durable key-value store.

    Mutations:
      - add_product(id)                    async, +1 after a stock check
      - remove_product(id)                 sync, drops the whole line
      - update_product_amount(id, amount)  async, absolute set after a stock check

    Each returns the new Cart or raises a CartError subclass; on error neither the
    in-memory cart nor the store is touched. Successful mutations write a full
    snapshot first, then swap the in-memory value and call subscribers.

    Operations are not serialized: an async operation computes its result from the
    cart it saw when it started, so overlapping calls can overwrite each other.

    Usage:
      async with CartController.from_settings() as controller:
          await controller.add_product(1)
          controller.cart.total()
    """

    def __init__(
        self,
        store: Any,
        stock: StockService,
        catalog: ProductCatalogService,
        storage_key: Optional[str] = None,
        api_client: Optional[ApiClient] = None,
    ):
        self.store = store
        self.stock = stock
        self.catalog = catalog
        self.storage_key = storage_key or default_settings.CART_STORAGE_KEY
        self._api_client = api_client
        self._subscribers: List[Subscriber] = []
        self._cart = self._load()

    @classmethod
    def from_settings(cls, cfg=None, store: Any = None, transport=None) -> "CartController":
        """
        Wire a controller from Settings: file store under DATA_DIR and one shared
        ApiClient for both remote services. `transport` is passed to httpx (tests).
        """
        cfg = cfg or default_settings
        client = ApiClient(base_url=cfg.API_BASE_URL, timeout=cfg.HTTP_TIMEOUT, transport=transport)
        if store is None:
            store = FileBackedStore(data_dir=cfg.DATA_DIR, filename=cfg.STORE_FILE)
        return cls(
            store=store,
            stock=StockService(client),
            catalog=ProductCatalogService(client),
            storage_key=cfg.CART_STORAGE_KEY,
            api_client=client,
        )

    @property
    def cart(self) -> Cart:
        return self._cart

    def _load(self) -> Cart:
        try:
            blob = self.store.get(self.storage_key)
            if not blob:
                return Cart()
            cart = Cart.from_json(blob)
        except (ValueError, TypeError, KeyError) as e:
            # a broken store file (pandas ParserError) or a bad blob: start empty
            logger.warning("Discarding unreadable cart snapshot under %s: %s", self.storage_key, e)
            return Cart()
        logger.info("Loaded cart with %d item(s) from %s", len(cart), self.storage_key)
        return cart

    def _commit(self, new_cart: Cart) -> Cart:
        if new_cart is self._cart:
            return new_cart
        try:
            self.store.set(self.storage_key, new_cart.to_json())
        except (OSError, ValueError) as e:
            # filelock.Timeout is an OSError too
            raise PersistenceFailure(details={"key": self.storage_key}) from e
        self._cart = new_cart
        for fn in list(self._subscribers):
            try:
                fn(new_cart)
            except Exception:
                logger.exception("Cart subscriber %r failed", fn)
        return new_cart

    async def _stock_for(self, product_id: int, failure_message: str) -> StockRecord:
        try:
            return await self.stock.get(product_id)
        except ServiceError as e:
            raise LookupFailure(failure_message, product_id, cause=e) from e

    def subscribe(self, fn: Subscriber) -> Callable[[], None]:
        """Register `fn(cart)` for every committed cart. Returns an unsubscribe callable."""
        self._subscribers.append(fn)

        def _unsubscribe() -> None:
            if fn in self._subscribers:
                self._subscribers.remove(fn)

        return _unsubscribe

    # --- mutations ---

    async def add_product(self, product_id: int) -> Cart:
        cart = self._cart
        existing = cart.find(product_id)
        current_amount = existing.amount if existing else 0
        stock = await self._stock_for(product_id, ADD_FAILED)

        amount = current_amount + 1
        if amount > stock.amount:
            raise QuantityExceeded(product_id, amount, stock.amount)

        if existing:
            new_cart = cart.with_amount(product_id, amount)
        else:
            try:
                product = await self.catalog.get(product_id)
            except ServiceError as e:
                raise LookupFailure(ADD_FAILED, product_id, cause=e) from e
            item = CartItem(id=product_id, name=product.name, price=product.price, image_url=product.image_url, amount=1)
            new_cart = cart.with_item(item)
        return self._commit(new_cart)

    def remove_product(self, product_id: int) -> Cart:
        cart = self._cart
        if product_id not in cart:
            raise ProductNotFound(product_id)
        return self._commit(cart.without(product_id))

    async def update_product_amount(self, product_id: int, amount: int) -> Cart:
        if isinstance(amount, bool) or not isinstance(amount, int) or amount < 1:
            raise InvalidAmount(product_id, amount)
        cart = self._cart
        stock = await self._stock_for(product_id, UPDATE_FAILED)
        if amount > stock.amount:
            raise QuantityExceeded(product_id, amount, stock.amount)
        if product_id not in cart:
            # absent ids are ignored here, unlike add/remove
            return cart
        return self._commit(cart.with_amount(product_id, amount))

    # --- lifecycle ---

    def flush(self) -> None:
        """Rewrite the current snapshot unconditionally."""
        try:
            self.store.set(self.storage_key, self._cart.to_json())
        except (OSError, ValueError) as e:
            raise PersistenceFailure(details={"key": self.storage_key}) from e

    async def aclose(self) -> None:
        try:
            self.flush()
        finally:
            if self._api_client is not None:
                await self._api_client.aclose()
            self._subscribers.clear()
        logger.info("Cart controller closed (%d item(s))", len(self._cart))

    async def __aenter__(self) -> "CartController":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()
