"""Cart snapshot codec.

A snapshot is a JSON array of line-item records, in cart order::

    [{"id": "a", "name": "Pad Thai", "price": 12.5, "imageUrl": "/a.jpg", "quantity": 2}]

Every decoding problem is reported as a ``ValidationError`` keyed by
``"snapshot"``.
"""

import json

from protean.exceptions import ValidationError

from cart.cart import CartLineItem

RECORD_KEYS = ("id", "name", "price", "imageUrl", "quantity")


def _malformed(message):
    return ValidationError({"snapshot": [message]})


def _is_number(value):
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def to_record(item):
    return {
        "id": str(item.product_id),
        "name": item.name,
        "price": item.price,
        "imageUrl": item.image_url,
        "quantity": item.quantity,
    }


def encode_items(items):
    return json.dumps([to_record(item) for item in items])


def decode_items(text):
    """Rebuild line items from snapshot text, preserving their order."""
    try:
        records = json.loads(text)
    except (json.JSONDecodeError, TypeError):
        raise _malformed("Snapshot is not valid JSON") from None

    if not isinstance(records, list):
        raise _malformed(f"Snapshot must be a list of line items, got {type(records).__name__}")

    items = []
    seen = set()
    for position, record in enumerate(records):
        if not isinstance(record, dict):
            raise _malformed(f"Line item {position} is not an object")

        missing = [key for key in RECORD_KEYS if key not in record]
        if missing:
            raise _malformed(f"Line item {position} is missing {', '.join(missing)}")

        if not isinstance(record["id"], str) or not record["id"]:
            raise _malformed(f"Line item {position} has an invalid id")

        if not _is_number(record["price"]):
            raise _malformed(f"Line item {position} has a non-numeric price")

        if not isinstance(record["quantity"], int) or isinstance(record["quantity"], bool):
            raise _malformed(f"Line item {position} has a non-integer quantity")

        if record["id"] in seen:
            raise _malformed(f"Line item {position} repeats id {record['id']!r}")
        seen.add(record["id"])

        try:
            items.append(
                CartLineItem(
                    product_id=record["id"],
                    name=record["name"],
                    price=record["price"],
                    image_url=record["imageUrl"],
                    quantity=record["quantity"],
                )
            )
        except ValidationError as exc:
            raise _malformed(f"Line item {position} is invalid: {exc.messages}") from exc

    return items
