"""Cart aggregate with its line items.

The aggregate owns the merge/remove/update rules. It knows nothing about
storage; ``CartStore`` decides when a snapshot is written.
"""

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Float, HasMany, Identifier, Integer, String

from cart.domain import cart


@cart.entity(part_of="Cart")
class CartLineItem:
    product_id = Identifier(required=True)
    name = String(required=True, max_length=255)
    price = Float(required=True, min_value=0.0)
    image_url = String(max_length=500, default="")
    quantity = Integer(min_value=1, default=1)

    @property
    def subtotal(self):
        return self.price * self.quantity


def copy_line_item(item, **changes):
    """Build a new line item with the same values as ``item``, overridden by ``changes``."""
    values = {
        "product_id": str(item.product_id),
        "name": item.name,
        "price": item.price,
        "image_url": item.image_url,
        "quantity": item.quantity,
    }
    values.update(changes)
    return CartLineItem(**values)


@cart.aggregate
class Cart:
    items = HasMany(CartLineItem)

    @invariant.post
    def one_line_item_per_product(self):
        product_ids = [str(item.product_id) for item in self.items]
        if len(product_ids) != len(set(product_ids)):
            raise ValidationError({"items": ["A product can appear only once in the cart"]})

    @property
    def item_count(self):
        return sum(item.quantity for item in self.items)

    @property
    def total(self):
        return sum(item.subtotal for item in self.items)

    def find_item(self, product_id):
        return next((i for i in self.items if str(i.product_id) == str(product_id)), None)

    def add_item(self, item):
        """Add a line item, or bump the quantity of the product already in the cart.

        When the product is already present its quantity goes up by exactly one,
        whatever quantity ``item`` carries. The cart keeps its own copy of
        ``item``, so later changes never reach the caller's object.
        """
        existing = self.find_item(item.product_id)
        if existing:
            existing.quantity += 1
        else:
            self.add_items(copy_line_item(item))

    def remove_item(self, product_id):
        item = self.find_item(product_id)
        if item is not None:
            self.remove_items(item)

    def update_quantity(self, product_id, quantity):
        """Set a line item's quantity; anything below one removes the item."""
        if quantity < 1:
            self.remove_item(product_id)
            return

        item = self.find_item(product_id)
        if item is not None:
            item.quantity = quantity
