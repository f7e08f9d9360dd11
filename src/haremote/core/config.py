"""Configuration manager using QSettings for persistent storage."""

import logging

from PySide6.QtCore import QSettings

from haremote.api.transport import DEFAULT_TIMEOUT
from haremote.core.stores import (
    SECRET_API_KEY,
    SECRET_API_URL,
    PlayerSettingsStore,
    SecretStore,
    SettingsSecretStore,
)
from haremote.models.configuration import ApiConfiguration

logger = logging.getLogger(__name__)

# Settings keys
_KEY_TIMEOUT = "network/timeout"

_MIN_TIMEOUT = 1.0
_MAX_TIMEOUT = 60.0


class ConfigManager:
    """Wrapper around QSettings for type-safe config access.

    QSettings stores config in platform-specific locations:
    - Windows: HKEY_CURRENT_USER\\Software\\HARemote\\HARemote
    - macOS: ~/Library/Preferences/com.HARemote.HARemote.plist
    - Linux: ~/.config/HARemote/HARemote.conf

    The hub URL and API key live in a SecretStore (QSettings-backed unless
    another store is passed in).

    Example:
        config = ConfigManager()
        config.save_api_configuration(ApiConfiguration("http://hub:8123", token))
        dispatcher = CommandDispatcher(config.api_configuration)
    """

    def __init__(
        self,
        organization: str = "HARemote",
        application: str = "HARemote",
        secrets: SecretStore | None = None,
    ) -> None:
        """Initialize the config manager.

        Args:
            organization: Organization name for QSettings.
            application: Application name for QSettings.
            secrets: Store for the URL and key (defaults to QSettings).
        """
        self._settings = QSettings(organization, application)
        self._secrets = secrets or SettingsSecretStore(self._settings)
        self._players = PlayerSettingsStore(self._settings)

    @property
    def settings(self) -> QSettings:
        """Return the underlying QSettings instance."""
        return self._settings

    @property
    def secrets(self) -> SecretStore:
        """Return the secret store holding the URL and key."""
        return self._secrets

    @property
    def players(self) -> PlayerSettingsStore:
        """Return the per-player override store."""
        return self._players

    # -- API configuration ----------------------------------------------------

    def api_configuration(self) -> ApiConfiguration:
        """Return the current hub URL and key.

        Reads the secret store on every call; usable as a ConfigProvider.

        Returns:
            ApiConfiguration with empty strings for unset values.
        """
        return ApiConfiguration(
            base_url=self._secrets.get(SECRET_API_URL) or "",
            api_key=self._secrets.get(SECRET_API_KEY) or "",
        )

    def save_api_configuration(self, config: ApiConfiguration) -> None:
        """Persist the hub URL and key.

        Args:
            config: Values to store (surrounding whitespace is stripped).
        """
        self._secrets.set(SECRET_API_URL, config.base_url.strip())
        self._secrets.set(SECRET_API_KEY, config.api_key.strip())
        logger.info("Saved API configuration for %s", config.base_url.strip() or "<unset>")

    def clear_api_configuration(self) -> None:
        """Forget the hub URL and key."""
        self._secrets.delete(SECRET_API_URL)
        self._secrets.delete(SECRET_API_KEY)

    # -- Network settings -----------------------------------------------------

    def get_timeout(self) -> float:
        """Return the request timeout in seconds.

        Returns:
            Timeout (default 10, clamped to 1-60).
        """
        value = self._settings.value(_KEY_TIMEOUT, DEFAULT_TIMEOUT)
        try:
            timeout = float(value)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            logger.warning("Invalid timeout setting %r, using default", value)
            return DEFAULT_TIMEOUT
        return max(_MIN_TIMEOUT, min(_MAX_TIMEOUT, timeout))

    def set_timeout(self, seconds: float) -> None:
        """Set the request timeout.

        Args:
            seconds: Timeout in seconds (1-60).
        """
        self._settings.setValue(_KEY_TIMEOUT, max(_MIN_TIMEOUT, min(_MAX_TIMEOUT, seconds)))

    # -- General settings -----------------------------------------------------

    def clear(self) -> None:
        """Clear all settings (useful for testing or reset)."""
        self._settings.clear()

    def sync(self) -> None:
        """Force settings to be written to disk."""
        self._settings.sync()
