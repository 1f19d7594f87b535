from typing import List, Union
from pydantic import BaseModel, ConfigDict, Field

from shopcart.models.cart import Cart


class CartItemSchema(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    name: str
    price: float
    image_url: str = Field("", alias="imageUrl")
    amount: int = Field(..., ge=1)
    subtotal: float


class CartSchema(BaseModel):
    items: List[CartItemSchema] = []
    size: int = 0
    count: int = 0
    total: float = 0.0

    @classmethod
    def from_cart(cls, cart: Cart) -> "CartSchema":
        return cls(
            items=[CartItemSchema(**it.to_dict(), subtotal=it.subtotal()) for it in cart],
            size=cart.size,
            count=cart.count_items(),
            total=cart.total(),
        )


class UpdateAmountSchema(BaseModel):
    # accepts 1.5 etc. so the controller rejects it as InvalidAmount (400), not a 422
    amount: Union[int, float]
