"""Product aggregate and Review entity, built from the catalog API payload."""

from datetime import datetime

import structlog
from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String, Text

from menu.domain import menu
from shared.config import settings

logger = structlog.get_logger(__name__)

HIGH_RATING = 4


def _parse_timestamp(value):
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)


@menu.entity(part_of="Product")
class Review:
    review_id = Identifier(identifier=True, required=True)
    rating = Integer(required=True, min_value=1, max_value=5)
    comment = Text()
    user_id = Identifier()
    user_name = String(max_length=255)
    created_at = DateTime()

    @classmethod
    def from_payload(cls, data):
        user = data.get("user") or {}
        return cls(
            review_id=data["id"],
            rating=data["rating"],
            comment=data.get("comment"),
            user_id=data.get("userId"),
            user_name=user.get("name"),
            created_at=_parse_timestamp(data.get("createdAt")),
        )

    @property
    def is_high_rating(self):
        return self.rating >= HIGH_RATING


@menu.aggregate
class Product:
    product_id = Identifier(identifier=True, required=True)
    name = String(required=True, max_length=255)
    description = Text()
    price = Float(required=True, min_value=0.0)
    image_url = String(max_length=500)
    reviews = HasMany(Review)

    @invariant.post
    def name_must_not_be_blank(self):
        if not self.name or not self.name.strip():
            raise ValidationError({"name": ["Product name must not be blank"]})

    @classmethod
    def from_payload(cls, data):
        """Build a product from one entry of ``GET /api/products``."""
        product_id = data["id"]
        return cls(
            product_id=product_id,
            name=data["name"],
            description=data.get("description") or "",
            price=data["price"],
            image_url=data.get("imageUrl") or settings.api.image_url(product_id),
            reviews=[Review.from_payload(review) for review in data.get("reviews") or []],
        )

    @property
    def rating_total(self):
        return sum(review.rating for review in self.reviews)

    @property
    def average_rating(self):
        if not self.reviews:
            return 0
        return self.rating_total / len(self.reviews)

    @property
    def is_highly_rated(self):
        return self.average_rating >= HIGH_RATING

    @property
    def highly_rated_reviews(self):
        return [review for review in self.reviews if review.is_high_rating]


def parse_products(payload):
    """Convert the catalog payload into products, skipping entries that do not validate."""
    products = []
    for position, data in enumerate(payload or []):
        try:
            products.append(Product.from_payload(data))
        except (ValidationError, KeyError, TypeError, ValueError, AttributeError) as exc:
            logger.warning(
                "Skipping malformed product",
                position=position,
                product_id=data.get("id") if isinstance(data, dict) else None,
                error=str(exc),
            )
    return products
