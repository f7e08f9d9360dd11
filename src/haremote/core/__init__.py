"""Core command layer.

Classes:
    PlayerCatalog: Fetches media players from the hub.
    CommandDispatcher: Sends remote-control commands.
    ConfigManager: QSettings wrapper for configuration.
    PlayerSettingsStore: Per-player linked entity overrides.
    SecretStore: Named secret persistence.
"""

from haremote.core.catalog import PlayerCatalog
from haremote.core.config import ConfigManager
from haremote.core.dispatcher import CommandDispatcher
from haremote.core.stores import PlayerSettingsStore, SecretStore, SettingsSecretStore

__all__ = [
    "CommandDispatcher",
    "ConfigManager",
    "PlayerCatalog",
    "PlayerSettingsStore",
    "SecretStore",
    "SettingsSecretStore",
]
