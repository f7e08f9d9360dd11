"""Command requests and their outcomes."""

from dataclasses import dataclass, field
from enum import Enum, StrEnum

from haremote.api.errors import ErrorKind, describe_error
from haremote.models.player import Player


class RemoteKey(StrEnum):
    """Key names accepted by the homekit_tv_remote_key_pressed event."""

    ARROW_UP = "arrow_up"
    ARROW_DOWN = "arrow_down"
    ARROW_LEFT = "arrow_left"
    ARROW_RIGHT = "arrow_right"
    SELECT = "select"
    BACK = "back"
    EXIT = "exit"
    INFORMATION = "information"
    PLAY_PAUSE = "play_pause"
    FAST_FORWARD = "fast_forward"
    REWIND = "rewind"
    NEXT_TRACK = "next_track"
    PREVIOUS_TRACK = "previous_track"


class VolumeDirection(StrEnum):
    """Direction of a single volume step."""

    UP = "up"
    DOWN = "down"

    @classmethod
    def parse(cls, value: str) -> "VolumeDirection | None":
        """Return the direction for a case-insensitive name, or None."""
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


@dataclass(frozen=True, slots=True)
class KeyPress:
    """Press a remote key on a media player."""

    key: str
    entity_id: str


@dataclass(frozen=True, slots=True)
class PlayPause:
    """Toggle playback on a media player."""

    entity_id: str


@dataclass(frozen=True, slots=True)
class PowerOff:
    """Turn a media player off."""

    entity_id: str


@dataclass(frozen=True, slots=True)
class VolumeStep:
    """Nudge a player's volume one step up or down.

    The direction is kept as given; the dispatcher validates it.
    """

    direction: str
    entity_id: str


@dataclass(frozen=True, slots=True)
class BrightnessSet:
    """Set an input_number brightness entity to a percentage (0-100)."""

    entity_id: str
    pct: int


@dataclass(frozen=True, slots=True)
class BrightnessGet:
    """Read the current value of an input_number brightness entity."""

    entity_id: str


CommandRequest = KeyPress | PlayPause | PowerOff | VolumeStep | BrightnessSet | BrightnessGet


@dataclass(frozen=True, slots=True)
class CommandOutcome:
    """Terminal result of one command.

    Attributes:
        success: Whether the hub accepted the command.
        error: Failure category, None on success.
        detail: Extra context for the failure.
        status: HTTP status for SERVER_ERROR failures.
        value: Parsed value for read commands (BrightnessGet).
    """

    success: bool
    error: ErrorKind | None = None
    detail: str = ""
    status: int | None = None
    value: int | None = None

    @classmethod
    def ok(cls, value: int | None = None) -> "CommandOutcome":
        """Create a successful outcome."""
        return cls(success=True, value=value)

    @classmethod
    def failure(
        cls,
        kind: ErrorKind,
        detail: str = "",
        status: int | None = None,
    ) -> "CommandOutcome":
        """Create a failed outcome."""
        return cls(success=False, error=kind, detail=detail, status=status)

    @property
    def message(self) -> str:
        """Return a human-readable description ("" on success)."""
        if self.error is None:
            return ""
        return describe_error(self.error, self.detail, self.status)


class CatalogStatus(Enum):
    """How a catalog fetch ended."""

    LOADED = "loaded"
    NO_PLAYERS_FOUND = "no_players_found"
    FAILED = "failed"


NO_PLAYERS_MESSAGE = "No media players found"


@dataclass(frozen=True, slots=True)
class CatalogResult:
    """Result of fetching the player catalog.

    Attributes:
        status: LOADED, NO_PLAYERS_FOUND (empty but not an error) or FAILED.
        players: Media players in hub order (empty unless LOADED).
        error: Failure category when FAILED.
        detail: Extra context for the failure.
        http_status: HTTP status for SERVER_ERROR failures.
    """

    status: CatalogStatus
    players: list[Player] = field(default_factory=list)
    error: ErrorKind | None = None
    detail: str = ""
    http_status: int | None = None

    @classmethod
    def loaded(cls, players: list[Player]) -> "CatalogResult":
        """Create a result for a fetch that found players (or none)."""
        if not players:
            return cls(status=CatalogStatus.NO_PLAYERS_FOUND)
        return cls(status=CatalogStatus.LOADED, players=list(players))

    @classmethod
    def failed(
        cls,
        kind: ErrorKind,
        detail: str = "",
        http_status: int | None = None,
    ) -> "CatalogResult":
        """Create a result for a failed fetch."""
        return cls(status=CatalogStatus.FAILED, error=kind, detail=detail, http_status=http_status)

    @property
    def is_error(self) -> bool:
        """Return True if the fetch failed."""
        return self.status is CatalogStatus.FAILED

    @property
    def message(self) -> str:
        """Return a human-readable description ("" when players were loaded)."""
        if self.status is CatalogStatus.NO_PLAYERS_FOUND:
            return NO_PLAYERS_MESSAGE
        if self.error is None:
            return ""
        return describe_error(self.error, self.detail, self.http_status)
