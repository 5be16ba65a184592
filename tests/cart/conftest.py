import os

import pytest

from shared.storage import MemoryStorage


@pytest.fixture(scope="session")
def _cart_domain(request):
    """Initialize the cart domain once per session."""
    os.environ["PROTEAN_ENV"] = request.config.option.env

    from shared.utils.domains import get_domain

    return get_domain("cart")


@pytest.fixture(autouse=True)
def run_around_tests(_cart_domain):
    """Push the cart domain context around each test."""
    ctx = _cart_domain.domain_context()
    ctx.push()

    yield

    ctx.pop()


@pytest.fixture()
def storage():
    return MemoryStorage()


@pytest.fixture()
def make_item():
    from cart.cart import CartLineItem

    def _make(product_id="a", name="Pad Thai", price=12.5, image_url="/a.jpg", quantity=1):
        return CartLineItem(
            product_id=product_id,
            name=name,
            price=price,
            image_url=image_url,
            quantity=quantity,
        )

    return _make
