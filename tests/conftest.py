# tests/conftest.py
import asyncio
import os
import sys
import tempfile
import shutil
from pathlib import Path

import httpx
import pytest
from fastapi.testclient import TestClient

# ensure project root is importable
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

# point DATA_DIR at a temp dir before anything builds a store from settings
_tmp_data_dir = tempfile.mkdtemp(prefix="test_data_")
from shopcart import config as app_config  # keep after tmpdir creation
_orig_settings_data_dir = app_config.settings.DATA_DIR
app_config.settings.DATA_DIR = Path(_tmp_data_dir)

from shopcart.core.cart_controller import CartController  # noqa: E402
from shopcart.database import FileBackedStore  # noqa: E402
from shopcart.main import create_app  # noqa: E402


@pytest.fixture(scope="session", autouse=True)
def temp_data_dir():
    """
    Isolated DATA_DIR for the whole session; restored and removed afterwards.
    """
    try:
        yield Path(_tmp_data_dir)
    finally:
        app_config.settings.DATA_DIR = _orig_settings_data_dir
        shutil.rmtree(_tmp_data_dir, ignore_errors=True)


class FakeStorefrontApi:
    """
    In-process stand-in for the json-server catalog/stock API.
    `products` and `stock` are keyed by int id; ids listed in `down` answer with
    a connection error. `calls` records every path requested.
    """

    def __init__(self):
        self.products = {}
        self.stock = {}
        self.down = set()
        self.calls = []

    def add(self, product_id, title="Sneaker", price=139.9, stock=3, image=None):
        self.products[product_id] = {
            "id": product_id,
            "title": title,
            "price": price,
            "image": image or f"https://cdn.example.test/{product_id}.jpg",
        }
        self.stock[product_id] = {"id": product_id, "amount": stock}

    async def handler(self, request: httpx.Request) -> httpx.Response:
        # yield once so overlapping operations interleave like real I/O
        await asyncio.sleep(0)
        path = request.url.path
        self.calls.append(path)
        parts = path.strip("/").split("/")
        if len(parts) != 2 or parts[0] not in ("products", "stock"):
            return httpx.Response(404, json={})
        try:
            pid = int(parts[1])
        except ValueError:
            return httpx.Response(404, json={})
        if pid in self.down:
            raise httpx.ConnectError("connection refused", request=request)
        table = self.products if parts[0] == "products" else self.stock
        if pid not in table:
            return httpx.Response(404, json={})
        return httpx.Response(200, json=table[pid])

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def fake_api():
    return FakeStorefrontApi()


@pytest.fixture
def store(tmp_path):
    return FileBackedStore(data_dir=tmp_path, filename="storage.csv")


@pytest.fixture
def make_controller(store, fake_api):
    """
    Build a controller over the shared store + fake API.
    Calling it twice simulates a reload of the same session.
    Usage: controller = make_controller()
    """
    def _fn():
        return CartController.from_settings(store=store, transport=fake_api.transport())
    return _fn


@pytest.fixture
def controller(make_controller):
    return make_controller()


@pytest.fixture
def client(make_controller):
    with TestClient(create_app(make_controller)) as c:
        yield c
