# shopcart/api/deps.py
from fastapi import HTTPException, Request, status

from shopcart.core.cart_controller import CartController


def get_controller(request: Request) -> CartController:
    """
    Dependency that returns the CartController created in the app lifespan.
    Usage:
        controller = Depends(get_controller)
    """
    controller = getattr(request.app.state, "cart_controller", None)
    if controller is None:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Cart not initialized")
    return controller
