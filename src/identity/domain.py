"""Identity bounded context: the signed-in user on the storefront client.

Registration and login happen on the server; this context only keeps the
token and profile the server returned, so that the menu can attach the
token to review submissions and show who is signed in.
"""

from protean.domain import Domain

from shared.utils.logging import get_logger

logger = get_logger(__name__)

identity = Domain(name="identity")
