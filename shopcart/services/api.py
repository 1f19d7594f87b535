"""
Read-only clients for the storefront API.

The API is json-server shaped:
    GET /products/{id} -> {"id", "title", "price", "image"}
    GET /stock/{id}    -> {"id", "amount"}

Every failure (connection error, non-2xx status, body that is not the expected
record) surfaces as ServiceError; callers do not need to know which one happened.
"""
import logging
from typing import Any, Dict, Optional

import httpx

from shopcart.config import settings
from shopcart.core.errors import ServiceError
from shopcart.models.product import Product, StockRecord

logger = logging.getLogger(__name__)


class ApiClient:
    """Lazily-created shared httpx.AsyncClient with a base URL and timeout."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url or settings.API_BASE_URL
        self.timeout = timeout if timeout is not None else settings.HTTP_TIMEOUT
        self._transport = transport
        self._http_client: Optional[httpx.AsyncClient] = None

    async def _get_http_client(self) -> httpx.AsyncClient:
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(self.timeout),
                transport=self._transport,
            )
        return self._http_client

    async def get_json(self, path: str) -> Dict[str, Any]:
        client = await self._get_http_client()
        try:
            response = await client.get(path)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            raise ServiceError(f"GET {path} returned {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise ServiceError(f"GET {path} failed: {e}") from e
        except ValueError as e:
            # body was not JSON
            raise ServiceError(f"GET {path} returned a malformed body") from e
        if not isinstance(data, dict) or not data:
            # json-server answers unknown ids with {} on some versions
            raise ServiceError(f"GET {path} returned no record")
        return data

    async def aclose(self) -> None:
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None


class StockService:
    def __init__(self, client: ApiClient):
        self.client = client

    async def get(self, product_id: int) -> StockRecord:
        data = await self.client.get_json(f"/stock/{product_id}")
        try:
            return StockRecord.from_dict(data, product_id=product_id)
        except (ValueError, TypeError) as e:
            raise ServiceError(f"Malformed stock record for product {product_id}: {e}") from e


class ProductCatalogService:
    def __init__(self, client: ApiClient):
        self.client = client

    async def get(self, product_id: int) -> Product:
        data = await self.client.get_json(f"/products/{product_id}")
        try:
            return Product.from_dict(data)
        except (ValueError, TypeError) as e:
            raise ServiceError(f"Malformed product record for product {product_id}: {e}") from e
