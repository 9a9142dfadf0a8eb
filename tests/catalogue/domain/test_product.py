"""Tests for the Product aggregate and its value objects."""

import pytest
from catalogue.product.product import OrderQuantity, PriceRange, Product
from protean import current_domain
from protean.exceptions import ValidationError


class TestPriceRange:
    def test_defaults_to_rupees(self):
        assert PriceRange(min=10.0, max=20.0).currency == "INR"

    def test_min_above_max_rejected(self):
        with pytest.raises(ValidationError):
            PriceRange(min=30.0, max=20.0)

    def test_negative_price_rejected(self):
        with pytest.raises(ValidationError):
            PriceRange(min=-1.0, max=20.0)


class TestOrderQuantity:
    def test_requires_positive_quantity(self):
        with pytest.raises(ValidationError):
            OrderQuantity(quantity=0, unit="kg")


class TestProductImages:
    def test_primary_image_is_first(self, product):
        assert product.image_urls == ["turmeric-1.jpg", "turmeric-2.jpg"]
        assert product.primary_image == "turmeric-1.jpg"

    def test_no_images(self, category):
        product = Product(
            name="Loom Kit",
            slug="loom-kit",
            description="Spares",
            category_id=category.id,
            price=PriceRange(min=2000.0, max=2500.0),
            moq=OrderQuantity(quantity=1, unit="set"),
        )
        assert product.image_urls == []
        assert product.primary_image is None


class TestProductRepository:
    def test_find_by_slug(self, product):
        found = current_domain.repository_for(Product).find_by_slug_or_id("organic-turmeric-powder")
        assert found.id == product.id

    def test_find_by_id(self, product):
        found = current_domain.repository_for(Product).find_by_slug_or_id(str(product.id))
        assert found.name == "Organic Turmeric Powder"

    def test_find_unknown(self, product):
        assert current_domain.repository_for(Product).find_by_slug_or_id("nothing-here") is None

    def test_search_matches_name_and_description(self, product):
        repo = current_domain.repository_for(Product)
        assert [p.id for p in repo.search("TURMERIC")] == [product.id]
        assert [p.id for p in repo.search("curcumin")] == [product.id]
        assert repo.search("saffron") == []

    def test_search_skips_inactive(self, product):
        product.is_active = False
        repo = current_domain.repository_for(Product)
        repo.add(product)
        assert repo.search("turmeric") == []
