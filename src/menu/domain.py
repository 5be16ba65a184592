"""Menu bounded context: the public catalog as seen by the storefront.

Products and their reviews arrive from the catalog API; this context turns
the payload into domain objects and derives what the menu page shows:
rating summaries, search and sort, and schema.org structured data.
"""

from protean.domain import Domain

from shared.utils.logging import get_logger

logger = get_logger(__name__)

menu = Domain(name="menu")
