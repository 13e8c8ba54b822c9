# services/product_list.py
import logging
import threading
from typing import Any, Callable, List, Optional

from catalog_api import CatalogApiClient, CatalogApiError
from schemas import Product

logger = logging.getLogger("catalog.list")

SORTABLE_FIELDS = ("price", "name")
FAVORITE_FIELD = "isFavorite"


def _query_value(value: Any) -> Any:
    # json-server compares query strings against JSON values ("true", not "True")
    if isinstance(value, bool):
        return "true" if value else "false"
    return value


class ProductListController:
    """
    Owns the product collection shown on the home page and the current
    search/sort/filter intent.

    Every operation bumps a generation counter before querying the API; a
    response is applied only while its generation is still the latest one, so
    the most recently issued request always wins. Failures are logged and
    leave `products` as it was.
    """

    def __init__(self, client: CatalogApiClient):
        self.client = client
        self.products: List[Product] = []
        self.search_term = ""
        self.is_loading = False
        self._generation = 0
        self._lock = threading.Lock()

    # -------------------- internal helpers --------------------
    def _run(self, action: str, fetch: Callable[[], List[Product]],
             search_term: Optional[str] = None) -> bool:
        with self._lock:
            self._generation += 1
            generation = self._generation
            self.is_loading = True

        products = None
        latest = False
        try:
            products = fetch()
        except CatalogApiError as e:
            logger.error("Product list %s failed: %s", action, e)
        finally:
            with self._lock:
                latest = generation == self._generation
                if latest:
                    self.is_loading = False
                    if products is not None:
                        self.products = products
                        if search_term is not None:
                            self.search_term = search_term

        if not latest:
            logger.debug("Discarding stale %s response (generation %d)", action, generation)
            return False
        if products is None:
            return False
        logger.debug("Product list %s applied, %d product(s)", action, len(products))
        return True

    # -------------------- operations --------------------
    def load_all(self) -> bool:
        """Initial load: every product, sorted by name."""
        return self._run("load_all", lambda: self.client.list_products(_sort="name"))

    def search(self, term: str) -> bool:
        return self._run("search", lambda: self.client.list_products(name_like=term), search_term=term)

    def filter_by(self, field: str, value: Any = True) -> bool:
        if not field:
            raise ValueError("A filter field is required.")
        params = {field: _query_value(value)}
        return self._run(f"filter_by({field})", lambda: self.client.list_products(**params))

    def filter_favorites(self) -> bool:
        return self.filter_by(FAVORITE_FIELD, True)

    def order_by(self, field: str) -> bool:
        if field not in SORTABLE_FIELDS:
            raise ValueError(f"Cannot sort products by {field!r}; expected one of {SORTABLE_FIELDS}")
        return self._run(f"order_by({field})", lambda: self.client.list_products(_sort=field))

    def clear_filters(self) -> bool:
        return self._run("clear_filters", lambda: self.client.list_products(), search_term="")
