import os

import pytest


@pytest.fixture(scope="session")
def _menu_domain(request):
    """Initialize the menu domain once per session."""
    os.environ["PROTEAN_ENV"] = request.config.option.env

    from shared.utils.domains import get_domain

    return get_domain("menu")


@pytest.fixture(autouse=True)
def run_around_tests(_menu_domain):
    """Push the menu domain context around each test."""
    ctx = _menu_domain.domain_context()
    ctx.push()

    yield

    ctx.pop()


@pytest.fixture()
def catalog_payload():
    """A ``GET /api/products`` response with three dishes."""
    return [
        {
            "id": "p1",
            "name": "Pad Thai",
            "description": "Rice noodles, tamarind, peanuts",
            "price": 12.5,
            "imageUrl": "/api/products/p1/image",
            "reviews": [
                {
                    "id": "r1",
                    "rating": 5,
                    "comment": "Perfect",
                    "userId": "u1",
                    "createdAt": "2024-03-01T12:00:00+00:00",
                    "user": {"name": "Ana"},
                },
                {
                    "id": "r2",
                    "rating": 3,
                    "comment": "Too sweet",
                    "userId": "u2",
                    "createdAt": "2024-03-02T12:00:00+00:00",
                    "user": {"name": "Ben"},
                },
            ],
        },
        {
            "id": "p2",
            "name": "Green Curry",
            "description": "Coconut milk, thai basil",
            "price": 11.0,
            "imageUrl": "/api/products/p2/image",
            "reviews": [
                {"id": "r3", "rating": 5, "comment": "Great", "userId": "u1", "user": {"name": "Ana"}},
                {"id": "r4", "rating": 4, "comment": "Good", "userId": "u3", "user": {"name": "Cy"}},
                {"id": "r5", "rating": 4, "comment": "Nice", "userId": "u2"},
            ],
        },
        {
            "id": "p3",
            "name": "Mango Sticky Rice",
            "description": "Sweet sticky rice with fresh mango",
            "price": 6.75,
            "imageUrl": "/api/products/p3/image",
            "reviews": [],
        },
    ]


@pytest.fixture()
def products(catalog_payload):
    from menu.product import parse_products

    return parse_products(catalog_payload)


@pytest.fixture()
def signed_in_session():
    """An AuthSession for Ana, signed in with ``jwt-token``."""
    from identity.session import AuthSession
    from shared.storage import MemoryStorage
    from shared.utils.domains import get_domain

    session = AuthSession(MemoryStorage())
    with get_domain("identity").domain_context():
        session.login("jwt-token", {"id": "u1", "name": "Ana", "email": "ana@example.com"})
    return session


@pytest.fixture()
def signed_out_session():
    from identity.session import AuthSession
    from shared.storage import MemoryStorage

    return AuthSession(MemoryStorage())


class FakeResponse:
    def __init__(self, status_code, body=None):
        self.status_code = status_code
        self._body = body

    def json(self):
        if self._body is None:
            raise ValueError("Response has no JSON body")
        return self._body


class RecordingTransport:
    """Stands in for ``shared.http.post``: records calls, replays canned responses."""

    def __init__(self, responses):
        self.responses = list(responses)
        self.calls = []

    def __call__(self, url, **kwargs):
        self.calls.append((url, kwargs))
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture()
def make_response():
    return FakeResponse


@pytest.fixture()
def transport():
    def _transport(*responses):
        return RecordingTransport(responses)

    return _transport
