"""Tests for the ordering core's catalogue-backed product lookup."""

from catalogue.category.category import Category
from catalogue.product.product import Product
from ordering.products.catalogue_adapter import CatalogueProductLookup
from protean import current_domain


class TestCatalogueProductLookup:
    def test_reads_current_record(self, product):
        record = CatalogueProductLookup().find_product(str(product.id))

        assert record.name == "Organic Turmeric Powder"
        assert record.price_min == 100.0
        assert record.price_max == 140.0
        assert record.currency == "INR"
        assert record.moq_quantity == 10
        assert record.moq_unit == "kg"
        assert record.primary_image == "turmeric-1.jpg"
        assert record.category_name == "Ayurveda & Herbal"
        assert record.is_active is True

    def test_unknown_product(self):
        assert CatalogueProductLookup().find_product("prod-404") is None

    def test_inactive_product_is_reported(self, product):
        product.is_active = False
        current_domain.repository_for(Product).add(product)

        assert CatalogueProductLookup().find_product(str(product.id)).is_active is False

    def test_missing_category_falls_back(self, product, category):
        current_domain.repository_for(Category)._dao.delete(category)

        assert CatalogueProductLookup().find_product(str(product.id)).category_name == "Uncategorized"
