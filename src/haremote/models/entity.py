"""Entity model: a hub object as returned by /api/states."""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, cast

from haremote.api.errors import EntityDecodeError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Entity:
    """A hub-managed entity.

    Attributes:
        entity_id: Identifier with a domain prefix, e.g. "media_player.tv".
        state: Current state string ("on", "playing", "42", ...).
        last_changed: When the state last changed (None if the hub's timestamp
            could not be parsed).
        friendly_name: Name from the entity's attributes, if any.
    """

    entity_id: str
    state: str
    last_changed: datetime | None
    friendly_name: str | None = None

    @property
    def domain(self) -> str:
        """Return the domain part of the entity ID."""
        return self.entity_id.split(".", 1)[0]

    @classmethod
    def from_dict(cls, data: object) -> "Entity":
        """Create an entity from a hub state object.

        Args:
            data: One element of the /api/states array.

        Returns:
            The parsed Entity.

        Raises:
            EntityDecodeError: If required fields are missing or mistyped.
        """
        if not isinstance(data, dict):
            raise EntityDecodeError(f"Expected entity object, got {type(data).__name__}")
        item = cast(dict[str, Any], data)

        entity_id = item.get("entity_id")
        state = item.get("state")
        last_changed = item.get("last_changed")
        if not isinstance(entity_id, str):
            raise EntityDecodeError("Entity is missing 'entity_id'")
        if not isinstance(state, str):
            raise EntityDecodeError(f"Entity {entity_id} is missing 'state'")
        if not isinstance(last_changed, str):
            raise EntityDecodeError(f"Entity {entity_id} is missing 'last_changed'")

        attributes = item.get("attributes", {})
        if not isinstance(attributes, dict):
            raise EntityDecodeError(f"Entity {entity_id} has invalid 'attributes'")
        friendly_name = cast(dict[str, Any], attributes).get("friendly_name")

        changed_at: datetime | None
        try:
            changed_at = datetime.fromisoformat(last_changed)
        except ValueError:
            logger.debug("Entity %s has unparseable last_changed %r", entity_id, last_changed)
            changed_at = None

        return cls(
            entity_id=entity_id,
            state=state,
            last_changed=changed_at,
            friendly_name=friendly_name if isinstance(friendly_name, str) else None,
        )


def parse_entities(data: object) -> list[Entity]:
    """Parse the /api/states response body.

    Args:
        data: Decoded JSON body.

    Returns:
        Entities in response order.

    Raises:
        EntityDecodeError: If the body is not an array of entity objects.
    """
    if not isinstance(data, list):
        raise EntityDecodeError(f"Expected entity array, got {type(data).__name__}")
    return [Entity.from_dict(item) for item in cast(list[object], data)]
