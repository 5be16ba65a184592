"""CartStore, the single owner of the visitor's cart.

UI components receive the store instance; they never hold cart state of
their own. Every mutation runs on the ``Cart`` aggregate and is followed by
``save()``, which writes a full snapshot to the injected storage backend.
The open/closed flag of the cart panel is ephemeral and never persisted.

The cart domain must be initialized and its context active while the store
is in use (``manage.py`` and the test suite take care of that).
"""

import structlog
from protean.exceptions import ValidationError

from cart.cart import Cart, CartLineItem, copy_line_item
from cart.snapshot import decode_items, encode_items
from shared.config import settings

logger = structlog.get_logger(__name__)


class CartStore:
    def __init__(self, storage, key=None, on_checkout=None):
        self.storage = storage
        self.key = key or settings.cart_key
        self.on_checkout = on_checkout
        self.is_open = False
        self._cart = self._restore()

    def _restore(self):
        raw = self.storage.read(self.key)
        if raw is None:
            return Cart()

        try:
            restored = Cart(items=decode_items(raw))
        except ValidationError as exc:
            logger.warning("Discarding malformed cart snapshot", key=self.key, errors=exc.messages)
            return Cart()

        logger.debug("Cart restored", key=self.key, line_items=len(restored.items))
        return restored

    # -------------------------------------------------------------------
    # Read side
    # -------------------------------------------------------------------
    @property
    def items(self):
        return [copy_line_item(item) for item in self._cart.items]

    @property
    def item_count(self):
        return self._cart.item_count

    @property
    def total(self):
        return self._cart.total

    def get(self, product_id):
        """Return a copy of the line item for ``product_id``, or None."""
        item = self._cart.find_item(product_id)
        return copy_line_item(item) if item is not None else None

    # -------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------
    def add_item(self, item):
        self._cart.add_item(item)
        logger.debug("Added to cart", product_id=str(item.product_id), item_count=self.item_count)
        self.save()

    def add_product(self, product):
        """Add one unit of a menu product."""
        self.add_item(
            CartLineItem(
                product_id=str(product.product_id),
                name=product.name,
                price=product.price,
                image_url=product.image_url,
                quantity=1,
            )
        )

    def remove_item(self, product_id):
        self._cart.remove_item(product_id)
        logger.debug("Removed from cart", product_id=str(product_id), item_count=self.item_count)
        self.save()

    def update_quantity(self, product_id, quantity):
        self._cart.update_quantity(product_id, quantity)
        logger.debug(
            "Cart quantity updated",
            product_id=str(product_id),
            quantity=quantity,
            item_count=self.item_count,
        )
        self.save()

    def save(self):
        self.storage.write(self.key, encode_items(self._cart.items))

    # -------------------------------------------------------------------
    # Cart panel
    # -------------------------------------------------------------------
    def set_open(self, is_open):
        self.is_open = bool(is_open)

    def checkout(self):
        """Close the cart panel and hand over to the checkout page.

        Returns False, and does nothing, when the cart is empty.
        """
        if not self._cart.items:
            logger.info("Checkout requested with an empty cart")
            return False

        self.set_open(False)
        logger.info("Proceeding to checkout", item_count=self.item_count, total=self.total)
        if self.on_checkout is not None:
            self.on_checkout()
        return True
