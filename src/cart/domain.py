"""Cart bounded context: the client-side shopping cart.

Holds the line items a visitor has picked from the menu until they proceed
to checkout. The cart lives on the client: it is persisted as a snapshot in
durable key-value storage, never in the server database.
"""

from protean.domain import Domain

from shared.utils.logging import get_logger

logger = get_logger(__name__)

cart = Domain(name="cart")
