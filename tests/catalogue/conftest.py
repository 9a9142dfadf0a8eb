import os

import pytest


@pytest.fixture(scope="session")
def _catalogue_domain(request):
    """Initialize the catalogue domain once per session."""
    os.environ["PROTEAN_ENV"] = request.config.option.env

    from catalogue.domain import catalogue

    catalogue.init()
    return catalogue


@pytest.fixture(scope="session", autouse=True)
def setup_db(_catalogue_domain):
    from shared.db import drop_db, setup_db

    setup_db(_catalogue_domain)

    yield

    drop_db(_catalogue_domain)


@pytest.fixture(autouse=True)
def run_around_tests(_catalogue_domain):
    """Push domain context before each test, cleanup after."""
    ctx = _catalogue_domain.domain_context()
    ctx.push()

    yield

    from protean import current_domain

    for _, provider in current_domain.providers.items():
        provider._data_reset()

    current_domain.event_store.store._data_reset()
    ctx.pop()


@pytest.fixture()
def category():
    from catalogue.category.category import Category
    from protean import current_domain

    category = Category(name="Ayurveda & Herbal", slug="ayurveda-herbal")
    current_domain.repository_for(Category).add(category)
    return category


@pytest.fixture()
def product(category):
    from catalogue.product.product import OrderQuantity, PriceRange, Product
    from protean import current_domain

    product = Product(
        name="Organic Turmeric Powder",
        slug="organic-turmeric-powder",
        description="Lakadong turmeric, 7% curcumin",
        category_id=category.id,
        price=PriceRange(min=100.0, max=140.0),
        moq=OrderQuantity(quantity=10, unit="kg"),
        images='["turmeric-1.jpg", "turmeric-2.jpg"]',
    )
    current_domain.repository_for(Product).add(product)
    return product
