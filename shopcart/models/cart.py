# shopcart/models/cart.py
from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import Iterator, List, Dict, Any, Optional, Tuple
import json

from shopcart.models.product import Product, as_int


@dataclass(frozen=True)
class CartItem:
    id: int
    name: str
    price: float
    image_url: str = ""
    amount: int = 1

    def __post_init__(self):
        if isinstance(self.amount, bool) or not isinstance(self.amount, int):
            raise ValueError(f"amount must be an integer, got {self.amount!r}")
        if self.amount < 1:
            raise ValueError(f"amount must be >= 1, got {self.amount}")

    @classmethod
    def from_product(cls, product: Product, amount: int = 1) -> "CartItem":
        return cls(id=product.id, name=product.name, price=product.price, image_url=product.image_url, amount=amount)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "CartItem":
        if not isinstance(d, dict):
            raise ValueError("Cannot construct CartItem from %r" % type(d).__name__)
        product = Product.from_dict(d)
        return cls.from_product(product, amount=as_int(d.get("amount", 1), "amount"))

    def to_dict(self) -> Dict[str, Any]:
        # wire format shared with the storefront: camelCase imageUrl
        return {
            "id": self.id,
            "name": self.name,
            "price": self.price,
            "imageUrl": self.image_url,
            "amount": self.amount,
        }

    def subtotal(self) -> float:
        return float(self.price) * int(self.amount)


@dataclass(frozen=True)
class Cart:
    """
    Immutable, ordered collection of CartItem, unique by id.
    Every helper that changes something returns a new Cart; serialized as a JSON
    array of CartItem dicts (one blob per cart).
    """
    items: Tuple[CartItem, ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, "items", tuple(self.items))
        seen = set()
        for it in self.items:
            if it.id in seen:
                raise ValueError(f"Duplicate cart item id {it.id}")
            seen.add(it.id)

    def __iter__(self) -> Iterator[CartItem]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def __contains__(self, product_id: object) -> bool:
        return self.find(product_id) is not None

    def find(self, product_id: object) -> Optional[CartItem]:
        for it in self.items:
            if it.id == product_id:
                return it
        return None

    # --- serialization ---

    @classmethod
    def from_json(cls, blob: str) -> "Cart":
        raw = json.loads(blob)
        if not isinstance(raw, list):
            raise ValueError("Cart blob must be a JSON array")
        return cls(items=tuple(CartItem.from_dict(it) for it in raw))

    def to_json(self) -> str:
        return json.dumps(self.to_list(), ensure_ascii=False)

    def to_list(self) -> List[Dict[str, Any]]:
        return [it.to_dict() for it in self.items]

    # --- transitions (each returns a new Cart) ---

    def with_item(self, item: CartItem) -> "Cart":
        if item.id in self:
            raise ValueError(f"Item {item.id} already in cart")
        return Cart(items=self.items + (item,))

    def with_amount(self, product_id: int, amount: int) -> "Cart":
        return Cart(items=tuple(replace(it, amount=amount) if it.id == product_id else it for it in self.items))

    def without(self, product_id: int) -> "Cart":
        return Cart(items=tuple(it for it in self.items if it.id != product_id))

    # business helpers
    @property
    def size(self) -> int:
        """Distinct products in the cart (what the storefront header shows)."""
        return len(self.items)

    def count_items(self) -> int:
        return int(sum(it.amount for it in self.items))

    def total(self) -> float:
        return float(sum(it.subtotal() for it in self.items))
