# catalog_api.py
import logging
from urllib.parse import quote
from typing import Any, Dict, List, Optional

import requests
from pydantic import ValidationError

from config import settings
from schemas import Product

logger = logging.getLogger("catalog.api")

PRODUCTS_PATH = "/products"


def _product_path(product_id: str) -> str:
    return f"{PRODUCTS_PATH}/{quote(str(product_id), safe='')}"


class CatalogApiError(Exception):
    """Any failure talking to the products API: network, HTTP status or payload shape."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class CatalogApiClient:
    """
    Thin client for the remote json-server style /products resource.
    """
    def __init__(self, base_url: str, timeout: float = 10.0, session: Optional[requests.Session] = None):
        if not base_url:
            raise ValueError("API base URL is required.")
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.headers = {"Content-Type": "application/json", "Accept": "application/json"}

    # -------------------- internal helpers --------------------
    def _request(self, method: str, path: str, params: Optional[Dict[str, Any]] = None,
                 body: Optional[Dict[str, Any]] = None) -> Any:
        url = f"{self.base_url}{path}"
        logger.debug("%s %s params=%s", method, url, params)
        try:
            response = self.session.request(
                method, url, params=params, json=body, headers=self.headers, timeout=self.timeout
            )
            response.raise_for_status()
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            raise CatalogApiError(f"{method} {path} failed with HTTP {status}", status_code=status) from e
        except requests.exceptions.RequestException as e:
            raise CatalogApiError(f"{method} {path} failed: {e}") from e

        try:
            return response.json()
        except ValueError as e:
            raise CatalogApiError(f"{method} {path} returned a body that is not JSON",
                                  status_code=response.status_code) from e

    @staticmethod
    def _to_product(data: Any) -> Product:
        try:
            return Product.model_validate(data)
        except ValidationError as e:
            raise CatalogApiError(f"Unexpected product payload: {e.error_count()} error(s)") from e

    # -------------------- products resource --------------------
    def list_products(self, **params: Any) -> List[Product]:
        """
        GET /products with json-server query parameters (_sort, name_like, <field>=<value>).
        Parameters whose value is None are not sent.
        """
        query = {key: value for key, value in params.items() if value is not None}
        data = self._request("GET", PRODUCTS_PATH, params=query or None)
        if not isinstance(data, list):
            raise CatalogApiError("Expected a list of products")
        return [self._to_product(item) for item in data]

    def get_product(self, product_id: str) -> Product:
        return self._to_product(self._request("GET", _product_path(product_id)))

    def create_product(self, body: Dict[str, Any]) -> Product:
        return self._to_product(self._request("POST", PRODUCTS_PATH, body=body))

    def replace_product(self, product_id: str, body: Dict[str, Any]) -> Product:
        return self._to_product(self._request("PUT", _product_path(product_id), body=body))


# --- Dependency for FastAPI ---
def get_catalog_client():
    """
    FastAPI dependency that provides an API client (and its HTTP session) per request.
    """
    client = CatalogApiClient(settings.api_base_url, timeout=settings.api_timeout)
    try:
        yield client
    finally:
        client.session.close()
