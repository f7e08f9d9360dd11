"""Hub connection settings."""

from collections.abc import Callable
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ApiConfiguration:
    """Address and credentials of the hub.

    Attributes:
        base_url: Hub address, e.g. "http://homeassistant.local:8123".
        api_key: Long-lived access token.
    """

    base_url: str = ""
    api_key: str = ""

    @property
    def is_complete(self) -> bool:
        """Return True if both URL and key are set."""
        return bool(self.base_url) and bool(self.api_key)

    def missing_reason(self) -> str:
        """Return why the configuration is unusable, or "" if complete."""
        if not self.base_url:
            return "API URL is not configured"
        if not self.api_key:
            return "API Key is not configured"
        return ""


# Read accessor for the current configuration; called on every operation
ConfigProvider = Callable[[], ApiConfiguration]
