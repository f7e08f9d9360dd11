"""Home Assistant REST endpoints and request construction."""

import json
import urllib.parse
from typing import Any

from haremote.api.transport import HttpRequest

STATES_PATH = "/api/states"
KEY_PRESSED_PATH = "/api/events/homekit_tv_remote_key_pressed"
PLAY_PAUSE_PATH = "/api/services/media_player/media_play_pause"
TURN_OFF_PATH = "/api/services/media_player/turn_off"
VOLUME_UP_PATH = "/api/services/media_player/volume_up"
VOLUME_DOWN_PATH = "/api/services/media_player/volume_down"
SET_VALUE_PATH = "/api/services/input_number/set_value"

_ALLOWED_SCHEMES = ("http", "https")


class InvalidUrlError(ValueError):
    """Base URL and path do not compose into a well-formed address."""


def state_path(entity_id: str) -> str:
    """Return the path for a single entity's state."""
    return f"{STATES_PATH}/{urllib.parse.quote(entity_id, safe='')}"


def compose_url(base_url: str, path: str) -> str:
    """Join the configured base URL with an API path.

    A trailing slash on the base URL is dropped so "http://hub:8123/" and
    "http://hub:8123" compose the same way.

    Args:
        base_url: Configured hub address, e.g. "http://homeassistant.local:8123".
        path: Absolute API path starting with "/api".

    Returns:
        The composed URL.

    Raises:
        InvalidUrlError: If the result is not an http(s) URL with a host.
    """
    url = base_url.rstrip("/") + path
    if any(ch.isspace() for ch in url):
        raise InvalidUrlError(f"URL contains whitespace: {url!r}")
    try:
        parts = urllib.parse.urlsplit(url)
        # Accessing port validates it (raises ValueError when out of range)
        _ = parts.port
    except ValueError as e:
        raise InvalidUrlError(str(e)) from e
    if parts.scheme.lower() not in _ALLOWED_SCHEMES or not parts.hostname:
        raise InvalidUrlError(f"Not an http(s) URL: {url!r}")
    return url


def auth_headers(api_key: str) -> dict[str, str]:
    """Return the bearer authorization header."""
    return {"Authorization": f"Bearer {api_key}"}


def build_get(base_url: str, api_key: str, path: str) -> HttpRequest:
    """Build an authenticated GET request.

    Raises:
        InvalidUrlError: If the URL is malformed.
    """
    return HttpRequest(
        method="GET",
        url=compose_url(base_url, path),
        headers=auth_headers(api_key),
    )


def build_post(base_url: str, api_key: str, path: str, payload: dict[str, Any]) -> HttpRequest:
    """Build an authenticated JSON POST request.

    Raises:
        InvalidUrlError: If the URL is malformed.
        TypeError: If the payload cannot be JSON-encoded.
        ValueError: If the payload contains non-finite numbers.
    """
    url = compose_url(base_url, path)
    body = json.dumps(payload, allow_nan=False).encode("utf-8")
    headers = auth_headers(api_key)
    headers["Content-Type"] = "application/json"
    return HttpRequest(method="POST", url=url, headers=headers, body=body)
