# crud/product.py

from catalog_api import CatalogApiClient
from schemas import Product


class ProductRepository:
    """
    Persistence collaborator of the product editor. All writes send the full
    product object, as the remote API expects.
    """
    def __init__(self, client: CatalogApiClient):
        self.client = client

    def register(self, product: Product) -> Product:
        """POST /products with a freshly built product."""
        return self.client.create_product(product.to_payload())

    def update(self, product_id: str, product: Product) -> Product:
        """PUT /products/{id}; the body carries the same id."""
        if product.id != product_id:
            raise ValueError(f"Product id mismatch: {product_id!r} != {product.id!r}")
        return self.client.replace_product(product_id, product.to_payload())

    def get(self, product_id: str) -> Product:
        return self.client.get_product(product_id)
