"""HTTP transport for calls to the storefront API."""

import requests

DEFAULT_TIMEOUT = 10


def post(url, **kwargs):
    kwargs.setdefault("timeout", DEFAULT_TIMEOUT)
    return requests.post(url, **kwargs)


def is_success(response) -> bool:
    return 200 <= response.status_code < 300


def json_body(response) -> dict:
    """The response's JSON object, or an empty dict when there is none."""
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


def error_message(response, default: str) -> str:
    """The API's ``{"error": "..."}`` message, falling back to ``default``."""
    message = json_body(response).get("error")
    return str(message) if message else default
