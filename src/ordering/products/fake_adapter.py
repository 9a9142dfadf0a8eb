"""In-memory product lookup for development and tests."""

from ordering.products.port import ProductLookup, ProductRecord


class FakeProductLookup(ProductLookup):
    def __init__(self, products: list[ProductRecord] | None = None) -> None:
        self.products: dict[str, ProductRecord] = {}
        for product in products or []:
            self.put(product)

    def put(self, product: ProductRecord) -> ProductRecord:
        self.products[str(product.id)] = product
        return product

    def remove(self, product_id: str) -> None:
        self.products.pop(str(product_id), None)

    def find_product(self, product_id: str) -> ProductRecord | None:
        return self.products.get(str(product_id))
