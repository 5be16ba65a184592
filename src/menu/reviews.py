"""Review submission from the product details panel.

Only a signed-in user can submit a review. The request carries the
session's bearer token; a 401 answer means the token is no longer valid,
so it is dropped from the session.
"""

from enum import Enum

import requests
import structlog
from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Integer, Text

from menu.domain import menu
from shared import http
from shared.config import settings

logger = structlog.get_logger(__name__)

DEFAULT_RATING = 5
SUBMIT_FAILED = "Failed to submit review"


@menu.value_object
class ReviewSubmission:
    rating = Integer(min_value=1, max_value=5, default=DEFAULT_RATING)
    comment = Text(required=True)

    @invariant.post
    def comment_must_not_be_blank(self):
        if self.comment is not None and not self.comment.strip():
            raise ValidationError({"comment": ["Review comment cannot be blank"]})

    def to_payload(self, product_id):
        return {"productId": str(product_id), "rating": self.rating, "comment": self.comment}


class ReviewOutcome(Enum):
    SUBMITTED = "submitted"
    SIGN_IN_REQUIRED = "sign-in-required"
    TOKEN_REJECTED = "token-rejected"
    FAILED = "failed"


class ReviewForm:
    """Submits reviews of one product on behalf of the signed-in user.

    ``on_sign_in`` is called when a signed-out visitor tries to submit and
    ``on_submitted`` once the API has accepted a review. After a failed
    submission ``error`` holds the message to show.
    """

    def __init__(self, session, product_id, post=None, on_sign_in=None, on_submitted=None):
        self.session = session
        self.product_id = str(product_id)
        self.post = post or http.post
        self.on_sign_in = on_sign_in
        self.on_submitted = on_submitted
        self.error = None

    def submit(self, submission):
        self.error = None

        if not self.session.is_authenticated:
            logger.info("Review needs a signed-in user", product_id=self.product_id)
            if self.on_sign_in is not None:
                self.on_sign_in()
            return ReviewOutcome.SIGN_IN_REQUIRED

        try:
            response = self.post(
                settings.api.reviews,
                json=submission.to_payload(self.product_id),
                headers=self.session.authorization_header(),
            )
        except requests.RequestException as exc:
            logger.warning("Review request failed", product_id=self.product_id, error=str(exc))
            self.error = SUBMIT_FAILED
            return ReviewOutcome.FAILED

        if http.is_success(response):
            logger.info("Review submitted", product_id=self.product_id, rating=submission.rating)
            if self.on_submitted is not None:
                self.on_submitted()
            return ReviewOutcome.SUBMITTED

        self.error = http.error_message(response, SUBMIT_FAILED)
        if response.status_code == 401:
            self.session.reject_token()
            return ReviewOutcome.TOKEN_REJECTED

        logger.warning(
            "Review rejected",
            product_id=self.product_id,
            status=response.status_code,
            error=self.error,
        )
        return ReviewOutcome.FAILED
