import os

import pytest
from ordering.config import reset_settings
from ordering.products import ProductRecord, reset_product_lookup, set_product_lookup
from ordering.products.fake_adapter import FakeProductLookup
from payments.gateway import reset_gateway, set_gateway
from payments.gateway.fake_adapter import FakeGateway

SIGNING_SECRET = "test-signing-secret"


@pytest.fixture(scope="session")
def _ordering_domain(request):
    """Initialize the ordering domain once per session."""
    os.environ["PROTEAN_ENV"] = request.config.option.env

    from ordering.domain import ordering

    ordering.init()
    return ordering


@pytest.fixture(scope="session", autouse=True)
def setup_db(_ordering_domain):
    from shared.db import drop_db, setup_db

    setup_db(_ordering_domain)

    yield

    drop_db(_ordering_domain)


@pytest.fixture(autouse=True)
def run_around_tests(_ordering_domain):
    """Push domain context before each test, cleanup after."""
    ctx = _ordering_domain.domain_context()
    ctx.push()

    yield

    from protean import current_domain

    for _, provider in current_domain.providers.items():
        provider._data_reset()

    for _, broker in current_domain.brokers.items():
        broker._data_reset()

    current_domain.event_store.store._data_reset()
    ctx.pop()


@pytest.fixture(autouse=True)
def products():
    """In-memory catalogue with a few products, active unless noted."""
    lookup = FakeProductLookup(
        [
            ProductRecord(
                id="prod-turmeric",
                name="Organic Turmeric Powder",
                price_min=100.0,
                price_max=140.0,
                moq_quantity=10,
                moq_unit="kg",
                images=("turmeric-1.jpg", "turmeric-2.jpg"),
                description="Lakadong turmeric, 7% curcumin",
                category_name="Ayurveda & Herbal",
            ),
            ProductRecord(
                id="prod-loom",
                name="Power Loom Spare Kit",
                price_min=2000.0,
                price_max=2500.0,
                images=("loom.jpg",),
                category_name="Machinery",
            ),
            ProductRecord(
                id="prod-retired",
                name="Discontinued Fabric Roll",
                price_min=500.0,
                price_max=500.0,
                is_active=False,
            ),
        ]
    )
    set_product_lookup(lookup)
    yield lookup
    reset_product_lookup()


@pytest.fixture(autouse=True)
def gateway():
    fake = FakeGateway(secret=SIGNING_SECRET)
    set_gateway(fake)
    yield fake
    reset_gateway()


@pytest.fixture(autouse=True)
def _settings():
    reset_settings()
    yield
    reset_settings()


@pytest.fixture()
def shipping_address():
    return {
        "full_name": "Asha Rao",
        "phone": "9876543210",
        "address_line1": "12 MG Road",
        "city": "Bengaluru",
        "state": "Karnataka",
        "pincode": "560001",
    }


@pytest.fixture()
def place_order(shipping_address):
    """Fill the buyer's cart and check out; returns the checkout result."""
    import json

    from ordering.cart.items import AddToCart
    from ordering.order.checkout import InitiateCheckout, PlaceCashOnDeliveryOrder
    from protean import current_domain

    def _place(customer_id="cust-001", quantity=3, product_id="prod-turmeric", cod=False):
        current_domain.process(
            AddToCart(customer_id=customer_id, product_id=product_id, quantity=quantity),
            asynchronous=False,
        )
        command_cls = PlaceCashOnDeliveryOrder if cod else InitiateCheckout
        return current_domain.process(
            command_cls(customer_id=customer_id, shipping_address=json.dumps(shipping_address)),
            asynchronous=False,
        )

    return _place
