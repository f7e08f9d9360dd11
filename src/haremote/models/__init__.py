"""Data models for hub entities, players, and commands."""

from haremote.models.command import (
    BrightnessGet,
    BrightnessSet,
    CatalogResult,
    CatalogStatus,
    CommandOutcome,
    CommandRequest,
    KeyPress,
    PlayPause,
    PowerOff,
    RemoteKey,
    VolumeDirection,
    VolumeStep,
)
from haremote.models.configuration import ApiConfiguration, ConfigProvider
from haremote.models.entity import Entity, parse_entities
from haremote.models.player import Player, PlayerOverrides

__all__ = [
    "ApiConfiguration",
    "BrightnessGet",
    "BrightnessSet",
    "CatalogResult",
    "CatalogStatus",
    "CommandOutcome",
    "CommandRequest",
    "ConfigProvider",
    "Entity",
    "KeyPress",
    "PlayPause",
    "Player",
    "PlayerOverrides",
    "PowerOff",
    "RemoteKey",
    "VolumeDirection",
    "VolumeStep",
    "parse_entities",
]
