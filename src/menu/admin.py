"""Admin product form: validate a draft, upload its image, create the product."""

import math

import requests
import structlog
from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Float, String, Text

from menu.domain import menu
from shared import http
from shared.config import settings

logger = structlog.get_logger(__name__)

CREATE_FAILED = "Failed to create product"
CREATE_SUCCEEDED = "Product created successfully!"


def _parse_price(value):
    try:
        price = float(str(value).strip())
    except (TypeError, ValueError):
        raise ValidationError({"price": [f"Price must be a number, got {value!r}"]}) from None

    if not math.isfinite(price):
        raise ValidationError({"price": [f"Price must be a number, got {value!r}"]})
    return price


@menu.value_object
class ProductDraft:
    """A new menu product as entered in the admin form."""

    name = String(required=True, max_length=255)
    description = Text(required=True)
    price = Float(required=True, min_value=0.0)
    temp_image_id = String(max_length=255, default="")

    @invariant.post
    def text_must_not_be_blank(self):
        errors = {}
        if self.name is not None and not self.name.strip():
            errors["name"] = ["Product name cannot be blank"]
        if self.description is not None and not self.description.strip():
            errors["description"] = ["Product description cannot be blank"]
        if errors:
            raise ValidationError(errors)

    @classmethod
    def from_form(cls, name, description, price, temp_image_id=""):
        """Build a draft from raw form input; ``price`` may be text such as ``"12.50"``."""
        return cls(
            name=name,
            description=description,
            price=_parse_price(price),
            temp_image_id=temp_image_id,
        )

    def with_image(self, temp_image_id):
        return ProductDraft(
            name=self.name,
            description=self.description,
            price=self.price,
            temp_image_id=temp_image_id,
        )

    def to_payload(self):
        return {
            "name": self.name,
            "description": self.description,
            "price": self.price,
            "tempImageId": self.temp_image_id or "",
        }


class ProductForm:
    """Creates products through the API.

    An image, given as a ``(filename, content, content_type)`` tuple, is
    uploaded first; the temporary image id the API returns goes into the
    product payload. ``error`` or ``success`` holds the message to show.
    """

    def __init__(self, post=None):
        self.post = post or http.post
        self.error = None
        self.success = None

    def submit(self, draft, image=None):
        self.error = None
        self.success = None

        try:
            if image is not None:
                upload = self.post(settings.api.upload, files={"image": image})
                if not http.is_success(upload):
                    return self._rejected(upload)
                draft = draft.with_image(http.json_body(upload).get("tempImageId", ""))

            response = self.post(settings.api.products, json=draft.to_payload())
        except requests.RequestException as exc:
            logger.warning("Product request failed", name=draft.name, error=str(exc))
            self.error = CREATE_FAILED
            return False

        if not http.is_success(response):
            return self._rejected(response)

        logger.info("Product created", name=draft.name, price=draft.price)
        self.success = CREATE_SUCCEEDED
        return True

    def _rejected(self, response):
        self.error = http.error_message(response, CREATE_FAILED)
        logger.warning("Product creation rejected", status=response.status_code, error=self.error)
        return False
