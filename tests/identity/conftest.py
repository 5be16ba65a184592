import os

import pytest

from shared.storage import MemoryStorage


@pytest.fixture(scope="session")
def _identity_domain(request):
    """Initialize the identity domain once per session."""
    os.environ["PROTEAN_ENV"] = request.config.option.env

    from shared.utils.domains import get_domain

    return get_domain("identity")


@pytest.fixture(autouse=True)
def run_around_tests(_identity_domain):
    """Push the identity domain context around each test."""
    ctx = _identity_domain.domain_context()
    ctx.push()

    yield

    ctx.pop()


@pytest.fixture()
def storage():
    return MemoryStorage()


@pytest.fixture()
def user_record():
    return {"id": "u1", "name": "Ana", "email": "ana@example.com", "role": "admin"}
