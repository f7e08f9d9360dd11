"""Player model: the app-level view of a media player entity."""

import uuid
from dataclasses import dataclass, field
from typing import Protocol

from haremote.models.entity import Entity

MEDIA_PLAYER_PREFIX = "media_player"


class PlayerOverrides(Protocol):
    """Read access to per-player linked entity overrides."""

    def volume_entity_id(self, entity_id: str) -> str:
        """Return the entity that receives volume steps for a player."""
        ...

    def brightness_entity_id(self, entity_id: str) -> str:
        """Return the input_number entity controlling brightness, or ""."""
        ...


def _new_player_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True, slots=True)
class Player:
    """A media player the remote can control.

    Attributes:
        entity_id: The media_player entity ID on the hub.
        display_name: Friendly name, or the entity ID when unnamed.
        volume_entity_id: Entity receiving volume steps (defaults to entity_id).
        brightness_entity_id: input_number entity for brightness ("" if unlinked).
        id: Opaque identifier, unique per derived instance.
    """

    entity_id: str
    display_name: str
    volume_entity_id: str = ""
    brightness_entity_id: str = ""
    id: str = field(default_factory=_new_player_id)

    def __post_init__(self) -> None:
        """Default the volume target to the player itself."""
        if not self.volume_entity_id:
            object.__setattr__(self, "volume_entity_id", self.entity_id)

    @property
    def has_brightness_control(self) -> bool:
        """Return True if a brightness entity is linked."""
        return bool(self.brightness_entity_id)

    @classmethod
    def from_entity(cls, entity: Entity, overrides: PlayerOverrides | None = None) -> "Player":
        """Derive a player from a hub entity.

        Args:
            entity: The media_player entity.
            overrides: Store holding linked volume/brightness entities.

        Returns:
            The derived Player.
        """
        volume_id = entity.entity_id
        brightness_id = ""
        if overrides is not None:
            volume_id = overrides.volume_entity_id(entity.entity_id)
            brightness_id = overrides.brightness_entity_id(entity.entity_id)
        return cls(
            entity_id=entity.entity_id,
            display_name=entity.friendly_name or entity.entity_id,
            volume_entity_id=volume_id,
            brightness_entity_id=brightness_id,
        )


def is_media_player(entity: Entity) -> bool:
    """Return True if the entity belongs to the media_player domain."""
    return entity.entity_id.startswith(MEDIA_PLAYER_PREFIX)
