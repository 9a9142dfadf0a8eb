"""Product lookup backed by the catalogue domain's repositories."""

from protean.exceptions import ObjectNotFoundError

from catalogue.category.category import Category
from catalogue.domain import catalogue
from catalogue.product.product import Product
from ordering.products.port import ProductLookup, ProductRecord


class CatalogueProductLookup(ProductLookup):
    def find_product(self, product_id: str) -> ProductRecord | None:
        with catalogue.domain_context():
            try:
                product = catalogue.repository_for(Product).get(str(product_id))
            except ObjectNotFoundError:
                return None

            category_name = "Uncategorized"
            if product.category_id:
                try:
                    category_name = catalogue.repository_for(Category).get(str(product.category_id)).name
                except ObjectNotFoundError:
                    pass

            return ProductRecord(
                id=str(product.id),
                name=product.name,
                price_min=product.price.min,
                price_max=product.price.max,
                currency=product.price.currency or "INR",
                moq_quantity=product.moq.quantity if product.moq else None,
                moq_unit=product.moq.unit if product.moq else None,
                images=tuple(product.image_urls),
                description=product.description,
                category_name=category_name,
                is_active=bool(product.is_active),
            )
