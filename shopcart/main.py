# shopcart/main.py
from fastapi import FastAPI
import logging
from contextlib import asynccontextmanager
from typing import Callable, Optional

from shopcart.config import settings
from shopcart.core.cart_controller import CartController
from shopcart.api.routes import cart as cart_routes


logger = logging.getLogger("uvicorn.error")

ControllerFactory = Callable[[], CartController]


def create_app(controller_factory: Optional[ControllerFactory] = None) -> FastAPI:
    factory = controller_factory or CartController.from_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Load the cart from the local store before serving, flush it and close
        the API client on shutdown.
        """
        logging.getLogger("shopcart").setLevel(settings.LOG_LEVEL.upper())
        controller = factory()
        app.state.cart_controller = controller
        logger.info("Cart ready: %d item(s), API at %s", len(controller.cart), settings.API_BASE_URL)
        try:
            yield
        finally:
            await controller.aclose()
            app.state.cart_controller = None
            logger.info("Shutting down cart service")

    app = FastAPI(title="Shop Cart", version="0.1.0", lifespan=lifespan)
    app.include_router(cart_routes.router)

    @app.get("/", tags=["root"])
    async def root():
        return {"status": "ok", "service": "Shop Cart"}

    return app


app = create_app()
