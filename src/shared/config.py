"""Client configuration: API routes, storage keys and locations.

Values are read from the environment once, at import time. Tests and tools
that need different values build their own ``Settings`` instance.
"""

import os
from pathlib import Path

from pydantic import BaseModel, ConfigDict, field_validator

from shared.storage import is_safe_key

DEFAULT_BASE_URL = "http://localhost:3000"


def resolve_base_url() -> str:
    """Pick the API base URL: explicit URL, then the Vercel deployment, then localhost."""
    api_url = os.getenv("STOREFRONT_API_URL")
    if api_url:
        return api_url.rstrip("/")

    vercel_url = os.getenv("VERCEL_URL")
    if vercel_url:
        return f"https://{vercel_url}"

    return DEFAULT_BASE_URL


class ApiRoutes(BaseModel):
    base_url: str = DEFAULT_BASE_URL

    @property
    def products(self) -> str:
        return f"{self.base_url}/api/products"

    @property
    def login(self) -> str:
        return f"{self.base_url}/api/auth/login"

    @property
    def register(self) -> str:
        return f"{self.base_url}/api/auth/register"

    @property
    def reviews(self) -> str:
        return f"{self.base_url}/api/reviews"

    @property
    def upload(self) -> str:
        return f"{self.base_url}/api/upload"

    def image_url(self, product_id: str) -> str:
        return f"{self.products}/{product_id}/image"


class Settings(BaseModel):
    model_config = ConfigDict(validate_default=True)

    storage_dir: Path = Path(os.getenv("STOREFRONT_STORAGE_DIR", ".storefront"))
    cart_key: str = os.getenv("STOREFRONT_CART_KEY", "cart")
    token_key: str = os.getenv("STOREFRONT_TOKEN_KEY", "token")
    user_key: str = os.getenv("STOREFRONT_USER_KEY", "user")
    log_dir: Path = Path(os.getenv("STOREFRONT_LOG_DIR", "logs"))
    restaurant_name: str = os.getenv("STOREFRONT_RESTAURANT_NAME", "Viriot Foods")
    api: ApiRoutes = ApiRoutes(base_url=resolve_base_url())

    @field_validator("cart_key", "token_key", "user_key")
    @classmethod
    def storage_key_must_be_a_plain_name(cls, value: str) -> str:
        if not is_safe_key(value):
            raise ValueError(f"Storage key must be a plain file name, got {value!r}")
        return value


settings = Settings()
