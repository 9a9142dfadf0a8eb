import os

import pytest


@pytest.fixture(scope="session")
def _sourcing_domain(request):
    """Initialize the sourcing domain once per session."""
    os.environ["PROTEAN_ENV"] = request.config.option.env

    from sourcing.domain import sourcing

    sourcing.init()
    return sourcing


@pytest.fixture(scope="session", autouse=True)
def setup_db(_sourcing_domain):
    from shared.db import drop_db, setup_db

    setup_db(_sourcing_domain)

    yield

    drop_db(_sourcing_domain)


@pytest.fixture(autouse=True)
def run_around_tests(_sourcing_domain):
    """Push domain context before each test, cleanup after."""
    ctx = _sourcing_domain.domain_context()
    ctx.push()

    yield

    from protean import current_domain

    for _, provider in current_domain.providers.items():
        provider._data_reset()

    for _, broker in current_domain.brokers.items():
        broker._data_reset()

    current_domain.event_store.store._data_reset()
    ctx.pop()


@pytest.fixture()
def enquiry_details():
    return {
        "product_id": "prod-turmeric",
        "name": "Ravi Kumar",
        "email": "ravi@example.com",
        "phone": "9876543210",
        "message": "Need 500 kg, please share bulk pricing.",
    }


@pytest.fixture()
def supplier_details():
    return {
        "company_name": "Kerala Spice Exports",
        "contact_person": "Meera Nair",
        "email": "Meera@KeralaSpice.in",
        "phone": "9847000000",
        "business_type": "exporter",
    }
