# tests/conftest.py
from typing import Any, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from catalog_api import CatalogApiError, get_catalog_client
from config import settings
from main import app
from schemas import Product

USER_NAME = "Maria"


def sample_products() -> List[Dict[str, Any]]:
    return [
        {
            "id": "p-1",
            "name": "A",
            "sku": "SKU-A",
            "price": 10,
            "isFavorite": True,
            "created_at": "01/01/2026",
            "updated_at": "02/01/2026",
            "updated_by": "Ana",
        },
        {
            "id": "p-2",
            "name": "B",
            "sku": "SKU-B",
            "price": 5,
            "isFavorite": False,
            "created_at": "03/01/2026",
            "updated_at": "03/01/2026",
            "updated_by": "Ana",
        },
    ]


class FakeCatalogClient:
    """
    In-memory stand-in for CatalogApiClient that understands the json-server
    query parameters the app sends.
    """

    def __init__(self, products: Optional[List[Dict[str, Any]]] = None):
        self.store: Dict[str, Dict[str, Any]] = {p["id"]: dict(p) for p in (products or [])}
        self.calls: List[tuple] = []
        self.fail_reads = False
        self.fail_writes = False

    def list_products(self, **params: Any) -> List[Product]:
        self.calls.append(("list", dict(params)))
        if self.fail_reads:
            raise CatalogApiError("GET /products failed: connection refused")
        params = dict(params)
        sort = params.pop("_sort", None)
        name_like = params.pop("name_like", None)
        items = list(self.store.values())
        if name_like is not None:
            items = [item for item in items if name_like.lower() in item["name"].lower()]
        for key, value in params.items():
            items = [item for item in items if str(item.get(key)).lower() == str(value).lower()]
        if sort:
            items = sorted(items, key=lambda item: item[sort])
        return [Product.model_validate(item) for item in items]

    def get_product(self, product_id: str) -> Product:
        self.calls.append(("get", product_id))
        if self.fail_reads:
            raise CatalogApiError("GET failed", status_code=500)
        if product_id not in self.store:
            raise CatalogApiError("GET /products/x failed with HTTP 404", status_code=404)
        return Product.model_validate(self.store[product_id])

    def create_product(self, body: Dict[str, Any]) -> Product:
        self.calls.append(("create", body))
        if self.fail_writes:
            raise CatalogApiError("POST /products failed with HTTP 500", status_code=500)
        self.store[body["id"]] = dict(body)
        return Product.model_validate(body)

    def replace_product(self, product_id: str, body: Dict[str, Any]) -> Product:
        self.calls.append(("replace", product_id, body))
        if self.fail_writes:
            raise CatalogApiError("PUT /products failed with HTTP 500", status_code=500)
        self.store[product_id] = dict(body)
        return Product.model_validate(body)

    def writes(self) -> List[tuple]:
        return [call for call in self.calls if call[0] in ("create", "replace")]


@pytest.fixture
def fake_client() -> FakeCatalogClient:
    return FakeCatalogClient(sample_products())


@pytest.fixture
def client(fake_client):
    app.dependency_overrides[get_catalog_client] = lambda: fake_client
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def signed_in_client(client):
    client.cookies.set(settings.session_cookie_name, USER_NAME)
    return client
