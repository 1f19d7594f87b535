# shopcart/models/product.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Any, Optional


def _require(d: Dict[str, Any], *keys: str) -> Any:
    for k in keys:
        if k in d and d[k] is not None:
            return d[k]
    raise ValueError(f"Missing field: {keys[0]}")


def as_int(value: Any, field: str) -> int:
    # reject bools and fractional values like 1.5
    if isinstance(value, bool):
        raise ValueError(f"{field} must be an integer")
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(f"{field} must be an integer")
        return int(value)
    if isinstance(value, int):
        return value
    return int(str(value).strip())


@dataclass(frozen=True)
class Product:
    """
    Catalog record. The catalog API returns `title`/`image`; older fixtures use
    `name`/`imageUrl`, both are accepted.
    """
    id: int
    name: str
    price: float
    image_url: str = ""

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Product":
        if not isinstance(d, dict):
            raise ValueError("Cannot construct Product from %r" % type(d).__name__)
        return cls(
            id=as_int(_require(d, "id"), "id"),
            name=str(_require(d, "name", "title")),
            price=float(_require(d, "price")),
            image_url=str(d.get("imageUrl") or d.get("image_url") or d.get("image") or ""),
        )


@dataclass(frozen=True)
class StockRecord:
    id: int
    amount: int

    @classmethod
    def from_dict(cls, d: Dict[str, Any], product_id: Optional[int] = None) -> "StockRecord":
        if not isinstance(d, dict):
            raise ValueError("Cannot construct StockRecord from %r" % type(d).__name__)
        raw_id = d.get("id", product_id)
        if raw_id is None:
            raise ValueError("Missing field: id")
        return cls(id=as_int(raw_id, "id"), amount=as_int(_require(d, "amount"), "amount"))
