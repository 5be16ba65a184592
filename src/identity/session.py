"""Authenticated session store, persisted next to the cart in durable storage."""

import json

import structlog
from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import String

from identity.domain import identity
from shared.config import settings

logger = structlog.get_logger(__name__)


@identity.value_object
class AuthenticatedUser:
    """Profile of the signed-in user, as returned by the login endpoint."""

    user_id: String(required=True, max_length=255)
    name: String(max_length=255)
    email: String(required=True, max_length=254)
    role: String(max_length=50, default="user")

    @invariant.post
    def email_must_have_one_at_sign(self):
        if self.email and self.email.count("@") != 1:
            raise ValidationError({"email": [f"Invalid email address: {self.email!r}"]})

    @classmethod
    def from_record(cls, record):
        return cls(
            user_id=record["id"],
            name=record.get("name"),
            email=record["email"],
            role=record.get("role") or "user",
        )

    def to_record(self):
        return {"id": self.user_id, "name": self.name, "email": self.email, "role": self.role}


class AuthSession:
    def __init__(self, storage, token_key=None, user_key=None):
        self.storage = storage
        self.token_key = token_key or settings.token_key
        self.user_key = user_key or settings.user_key
        self.token = None
        self.user = None

    @property
    def is_authenticated(self):
        return self.token is not None and self.user is not None

    def check(self):
        """Restore the session from storage; anything unreadable leaves it signed out."""
        token = self.storage.read(self.token_key)
        raw_user = self.storage.read(self.user_key)

        if not token or raw_user is None:
            self.token = None
            self.user = None
            return False

        try:
            user = AuthenticatedUser.from_record(json.loads(raw_user))
        except (ValueError, TypeError, KeyError, AttributeError, ValidationError) as exc:
            logger.warning("Discarding malformed stored user", key=self.user_key, error=str(exc))
            self.token = None
            self.user = None
            return False

        self.token = token
        self.user = user
        return True

    def login(self, token, user):
        if isinstance(user, dict):
            user = AuthenticatedUser.from_record(user)

        self.storage.write(self.token_key, token)
        self.storage.write(self.user_key, json.dumps(user.to_record()))
        self.token = token
        self.user = user
        logger.info("Signed in", user_id=user.user_id)

    def logout(self):
        self.storage.remove(self.token_key)
        self.storage.remove(self.user_key)
        self.token = None
        self.user = None
        logger.info("Signed out")

    def reject_token(self):
        """The API refused the token: forget it but keep the stored profile."""
        self.storage.remove(self.token_key)
        self.token = None
        logger.info("Stored token rejected by the API", key=self.token_key)

    def authorization_header(self):
        if not self.is_authenticated:
            return {}
        return {"Authorization": f"Bearer {self.token}"}
