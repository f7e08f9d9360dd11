"""Key-value stores for secrets and per-player overrides.

Both stores sit on top of QSettings so they share the application's
platform-specific settings location.
"""

import logging
from abc import ABC, abstractmethod

from PySide6.QtCore import QSettings

logger = logging.getLogger(__name__)

SECRET_API_KEY = "apiKey"
SECRET_API_URL = "apiURL"

_SECRETS_GROUP = "secrets"


class SecretStore(ABC):
    """Persists named string secrets."""

    @abstractmethod
    def get(self, name: str) -> str | None:
        """Return the secret, or None if it was never stored."""

    @abstractmethod
    def set(self, name: str, value: str) -> None:
        """Store a secret, replacing any previous value."""

    @abstractmethod
    def delete(self, name: str) -> None:
        """Remove a secret (no-op if absent)."""


class SettingsSecretStore(SecretStore):
    """SecretStore backed by a QSettings group.

    Example:
        store = SettingsSecretStore(QSettings("HARemote", "HARemote"))
        store.set("apiKey", token)
    """

    def __init__(self, settings: QSettings) -> None:
        """Initialize the store.

        Args:
            settings: Settings instance to write into.
        """
        self._settings = settings

    @staticmethod
    def _key(name: str) -> str:
        return f"{_SECRETS_GROUP}/{name}"

    def get(self, name: str) -> str | None:
        value = self._settings.value(self._key(name), None)
        if value is None:
            return None
        return str(value)

    def set(self, name: str, value: str) -> None:
        self._settings.setValue(self._key(name), value)

    def delete(self, name: str) -> None:
        self._settings.remove(self._key(name))


class PlayerSettingsStore:
    """Per-player overrides keyed by the player's entity ID.

    Stores which entity receives volume steps ("volumeEntityId:<entityId>",
    defaulting to the player itself) and which input_number controls
    brightness ("brightnessEntityId:<entityId>", defaulting to unlinked).

    Values are read from QSettings on every call, so a change made elsewhere
    is picked up by the next command.
    """

    VOLUME_PREFIX = "volumeEntityId"
    BRIGHTNESS_PREFIX = "brightnessEntityId"

    def __init__(self, settings: QSettings) -> None:
        """Initialize the store.

        Args:
            settings: Settings instance to read and write.
        """
        self._settings = settings

    def _read(self, key: str) -> str:
        value = self._settings.value(key, "", str)
        return str(value) if value else ""

    def volume_entity_id(self, entity_id: str) -> str:
        """Return the volume target for a player (the player itself by default)."""
        return self._read(f"{self.VOLUME_PREFIX}:{entity_id}") or entity_id

    def set_volume_entity_id(self, entity_id: str, target: str) -> None:
        """Link a volume target; an empty target restores the default."""
        key = f"{self.VOLUME_PREFIX}:{entity_id}"
        target = target.strip()
        if target:
            self._settings.setValue(key, target)
        else:
            self._settings.remove(key)
        logger.debug("Volume entity for %s set to %r", entity_id, target or entity_id)

    def brightness_entity_id(self, entity_id: str) -> str:
        """Return the brightness entity for a player ("" when unlinked)."""
        return self._read(f"{self.BRIGHTNESS_PREFIX}:{entity_id}")

    def set_brightness_entity_id(self, entity_id: str, target: str) -> None:
        """Link a brightness entity; an empty target unlinks it."""
        key = f"{self.BRIGHTNESS_PREFIX}:{entity_id}"
        target = target.strip()
        if target:
            self._settings.setValue(key, target)
        else:
            self._settings.remove(key)
        logger.debug("Brightness entity for %s set to %r", entity_id, target)
