from fastapi import APIRouter, Body, Depends, HTTPException, status

from shopcart.api.deps import get_controller
from shopcart.api.schemas.cart import CartSchema, UpdateAmountSchema
from shopcart.core.cart_controller import CartController
from shopcart.core.errors import (
    CartError,
    InvalidAmount,
    LookupFailure,
    PersistenceFailure,
    ProductNotFound,
    QuantityExceeded,
)

router = APIRouter(prefix="/api/cart", tags=["cart"])

_STATUS_FOR = {
    QuantityExceeded: status.HTTP_409_CONFLICT,
    ProductNotFound: status.HTTP_404_NOT_FOUND,
    InvalidAmount: status.HTTP_400_BAD_REQUEST,
    LookupFailure: status.HTTP_502_BAD_GATEWAY,
    PersistenceFailure: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def _http_error(err: CartError) -> HTTPException:
    code = _STATUS_FOR.get(type(err), status.HTTP_400_BAD_REQUEST)
    return HTTPException(status_code=code, detail={"error": type(err).__name__, "message": err.message, **err.details})


@router.get("", response_model=CartSchema)
def get_cart(controller: CartController = Depends(get_controller)):
    """
    Current cart with per-line subtotals and totals.
    """
    return CartSchema.from_cart(controller.cart)


@router.post("/items/{product_id}", response_model=CartSchema)
async def add_product(product_id: int, controller: CartController = Depends(get_controller)):
    """
    Add one unit of `product_id`. 409 when stock is exhausted, 502 when the
    catalog or stock lookup fails.
    """
    try:
        cart = await controller.add_product(product_id)
    except CartError as e:
        raise _http_error(e)
    return CartSchema.from_cart(cart)


@router.delete("/items/{product_id}", response_model=CartSchema)
def remove_product(product_id: int, controller: CartController = Depends(get_controller)):
    try:
        cart = controller.remove_product(product_id)
    except CartError as e:
        raise _http_error(e)
    return CartSchema.from_cart(cart)


@router.put("/items/{product_id}", response_model=CartSchema)
async def update_product_amount(
    product_id: int,
    payload: UpdateAmountSchema = Body(...),
    controller: CartController = Depends(get_controller),
):
    """
    Set the amount of a cart line to exactly `amount`. Ids not in the cart are
    ignored and the unchanged cart is returned.
    """
    try:
        cart = await controller.update_product_amount(product_id, payload.amount)
    except CartError as e:
        raise _http_error(e)
    return CartSchema.from_cart(cart)
