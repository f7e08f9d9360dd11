"""Command dispatcher: turns remote-control intents into hub requests.

Each call validates its input, sends exactly one request, and returns a
CommandOutcome. Nothing is queued or retried. The dispatcher owns the
is_processing flag and the current error message and publishes both
through Qt signals.
"""

from __future__ import annotations

import asyncio
import json
import logging
import math
from collections.abc import Callable
from dataclasses import dataclass

from PySide6.QtCore import QObject, Signal

from haremote.api import hub
from haremote.api.errors import ErrorKind, classify_error
from haremote.api.hub import InvalidUrlError
from haremote.api.transport import HttpRequest, HttpResponse, Transport, UrllibTransport
from haremote.core.inflight import InFlightTracker
from haremote.models.command import (
    BrightnessGet,
    BrightnessSet,
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
from haremote.models.player import Player, PlayerOverrides

logger = logging.getLogger(__name__)

OutcomeCallback = Callable[[CommandOutcome], None]
ResponseParser = Callable[[HttpResponse], CommandOutcome]

_OK = frozenset({200})
_OK_OR_CREATED = frozenset({200, 201})

_MIN_BRIGHTNESS = 0
_MAX_BRIGHTNESS = 100


class _Rejected(Exception):
    """Request failed validation before anything was sent."""

    def __init__(self, kind: ErrorKind, detail: str = "") -> None:
        super().__init__(detail)
        self.kind = kind
        self.detail = detail


@dataclass(frozen=True)
class _Call:
    """A validated request plus how to judge its response."""

    http: HttpRequest
    accepted: frozenset[int] = _OK
    parse: ResponseParser | None = None


def parse_brightness(response: HttpResponse) -> CommandOutcome:
    """Read an input_number state as an integer percentage.

    The body must be a JSON object whose "state" is numeric or a numeric
    string; fractional values are truncated.
    """
    try:
        data = json.loads(response.text())
    except (ValueError, RecursionError) as e:
        # RecursionError: nesting too deep for the decoder
        return CommandOutcome.failure(ErrorKind.INVALID_RESPONSE, f"Failed to parse JSON: {e}")

    if not isinstance(data, dict):
        return CommandOutcome.failure(ErrorKind.INVALID_RESPONSE, "Expected a JSON object")
    state = data.get("state")
    if isinstance(state, bool) or not isinstance(state, (str, int, float)):
        return CommandOutcome.failure(ErrorKind.INVALID_RESPONSE, f"Non-numeric state: {state!r}")
    try:
        number = float(state)
    except ValueError:
        return CommandOutcome.failure(ErrorKind.INVALID_RESPONSE, f"Non-numeric state: {state!r}")
    if not math.isfinite(number):
        return CommandOutcome.failure(ErrorKind.INVALID_RESPONSE, f"Non-numeric state: {state!r}")
    return CommandOutcome.ok(value=int(number))


class CommandDispatcher(QObject):
    """Sends remote-control commands to the hub.

    Must be used from the thread running the asyncio event loop; the HTTP
    calls themselves run in the loop's executor so several commands can be
    in flight at once.

    Example:
        dispatcher = CommandDispatcher(config.api_configuration, overrides=config.players)
        dispatcher.processing_changed.connect(button.setDisabled)
        outcome = await dispatcher.send_key(RemoteKey.SELECT, "media_player.tv")
        if not outcome.success:
            print(outcome.message)
    """

    processing_changed = Signal(bool)
    error_changed = Signal(str)  # "" when cleared

    def __init__(
        self,
        config: ConfigProvider,
        transport: Transport | None = None,
        overrides: PlayerOverrides | None = None,
        parent: QObject | None = None,
    ) -> None:
        """Initialize the dispatcher.

        Args:
            config: Returns the current hub configuration; read on every call.
            transport: Request sender (urllib-based by default).
            overrides: Per-player linked entity store for the player helpers.
            parent: Optional parent QObject.
        """
        super().__init__(parent)
        self._config = config
        self._transport = transport or UrllibTransport()
        self._overrides = overrides
        self._error_message = ""
        self._inflight = InFlightTracker(self.processing_changed.emit)

    @property
    def is_processing(self) -> bool:
        """Return True while any command is awaiting a response."""
        return self._inflight.active

    @property
    def error_message(self) -> str:
        """Return the message of the last failure ("" if cleared)."""
        return self._error_message

    def _set_error(self, message: str) -> None:
        if message != self._error_message:
            self._error_message = message
            self.error_changed.emit(message)

    # -- Core execution -------------------------------------------------------

    async def execute(self, request: CommandRequest) -> CommandOutcome:
        """Validate and send one command.

        Args:
            request: The command to send.

        Returns:
            Success, or a failure with its ErrorKind. Never raises for
            validation, network, or server failures.

        Raises:
            asyncio.CancelledError: If cancel_requests() abandoned this command.
        """
        try:
            call = self._prepare(request, self._config())
        except _Rejected as e:
            outcome = CommandOutcome.failure(e.kind, e.detail)
            logger.warning("%s not sent: %s", type(request).__name__, outcome.message)
            self._set_error(outcome.message)
            return outcome

        token = self._inflight.begin()
        self._set_error("")
        task = asyncio.ensure_future(self._perform(call))
        self._inflight.track(task)
        try:
            outcome = await task
        finally:
            self._inflight.finish(token)

        if outcome.success:
            logger.debug("%s succeeded", type(request).__name__)
        else:
            logger.warning("%s failed: %s", type(request).__name__, outcome.message)
            self._set_error(outcome.message)
        return outcome

    def submit(
        self,
        request: CommandRequest,
        callback: OutcomeCallback | None = None,
    ) -> asyncio.Task[CommandOutcome]:
        """Schedule a command and report its outcome through a callback.

        The callback runs exactly once with the outcome, unless the command
        is cancelled, in which case it never runs. Must be called from the
        event loop thread.

        Args:
            request: The command to send.
            callback: Receives the CommandOutcome.

        Returns:
            The task running the command.
        """
        task = asyncio.ensure_future(self.execute(request))
        self._inflight.track(task)

        def deliver(done: asyncio.Task[CommandOutcome]) -> None:
            if done.cancelled():
                logger.debug("%s cancelled, no outcome delivered", type(request).__name__)
                return
            if callback is not None:
                callback(done.result())

        task.add_done_callback(deliver)
        return task

    def cancel_requests(self) -> None:
        """Abandon all outstanding commands.

        Their outcomes are discarded and is_processing is forced to False.
        Safe to call when nothing is outstanding.
        """
        self._inflight.cancel_all()

    async def _perform(self, call: _Call) -> CommandOutcome:
        """Send the request and judge the response."""
        try:
            response = await self._transport.send(call.http)
        except Exception as e:  # noqa: BLE001
            return CommandOutcome.failure(classify_error(e), str(e))

        if response.status not in call.accepted:
            return CommandOutcome.failure(ErrorKind.SERVER_ERROR, status=response.status)
        if call.parse is not None:
            return call.parse(response)
        return CommandOutcome.ok()

    # -- Validation and request building ------------------------------------

    def _prepare(self, request: CommandRequest, config: ApiConfiguration) -> _Call:  # noqa: PLR0911
        """Validate a command and build its HTTP request.

        Checks, in order: URL set, key set, URL well-formed, then the
        command's own arguments.

        Raises:
            _Rejected: On the first failed check.
        """
        if not config.base_url:
            raise _Rejected(ErrorKind.MISSING_CONFIGURATION, "API URL is not configured")
        if not config.api_key:
            raise _Rejected(ErrorKind.MISSING_CONFIGURATION, "API Key is not configured")
        try:
            hub.compose_url(config.base_url, "/api")
        except InvalidUrlError as e:
            raise _Rejected(ErrorKind.INVALID_URL, str(e)) from e

        entity_id = request.entity_id.strip()
        if not entity_id:
            raise _Rejected(ErrorKind.INVALID_ARGUMENT, "entity ID is empty")

        if isinstance(request, KeyPress):
            key = str(request.key).strip()
            if not key:
                raise _Rejected(ErrorKind.INVALID_ARGUMENT, "key name is empty")
            return self._post(
                config, hub.KEY_PRESSED_PATH, {"key_name": key, "entity_id": entity_id}
            )
        if isinstance(request, PlayPause):
            return self._post(config, hub.PLAY_PAUSE_PATH, {"entity_id": entity_id})
        if isinstance(request, PowerOff):
            return self._post(config, hub.TURN_OFF_PATH, {"entity_id": entity_id})
        if isinstance(request, VolumeStep):
            direction = VolumeDirection.parse(request.direction)
            if direction is None:
                raise _Rejected(
                    ErrorKind.INVALID_ARGUMENT,
                    f"direction must be 'up' or 'down', got {request.direction!r}",
                )
            path = hub.VOLUME_UP_PATH if direction is VolumeDirection.UP else hub.VOLUME_DOWN_PATH
            return self._post(config, path, {"entity_id": entity_id})
        if isinstance(request, BrightnessSet):
            pct = request.pct
            if isinstance(pct, bool) or not isinstance(pct, int):
                raise _Rejected(ErrorKind.INVALID_ARGUMENT, f"brightness must be an int, got {pct!r}")
            if not _MIN_BRIGHTNESS <= pct <= _MAX_BRIGHTNESS:
                raise _Rejected(ErrorKind.INVALID_ARGUMENT, f"brightness {pct} outside 0-100")
            return self._post(
                config,
                hub.SET_VALUE_PATH,
                {"entity_id": entity_id, "value": pct},
                accepted=_OK_OR_CREATED,
            )
        if isinstance(request, BrightnessGet):
            try:
                http = hub.build_get(config.base_url, config.api_key, hub.state_path(entity_id))
            except InvalidUrlError as e:
                raise _Rejected(ErrorKind.INVALID_URL, str(e)) from e
            return _Call(http=http, parse=parse_brightness)
        raise _Rejected(ErrorKind.INVALID_ARGUMENT, f"unsupported command {request!r}")

    @staticmethod
    def _post(
        config: ApiConfiguration,
        path: str,
        payload: dict[str, object],
        accepted: frozenset[int] = _OK,
    ) -> _Call:
        """Build a POST call, rejecting bodies that cannot be encoded."""
        try:
            http = hub.build_post(config.base_url, config.api_key, path, payload)
        except InvalidUrlError as e:
            raise _Rejected(ErrorKind.INVALID_URL, str(e)) from e
        except (TypeError, ValueError) as e:
            raise _Rejected(ErrorKind.UNEXPECTED_ERROR, f"Error encoding command payload: {e}") from e
        return _Call(http=http, accepted=accepted)

    # -- Convenience commands -------------------------------------------------

    async def send_key(self, key: RemoteKey | str, entity_id: str) -> CommandOutcome:
        """Press a remote key on a media player."""
        return await self.execute(KeyPress(key=str(key), entity_id=entity_id))

    async def play_pause(self, entity_id: str) -> CommandOutcome:
        """Toggle play/pause on a media player."""
        return await self.execute(PlayPause(entity_id=entity_id))

    async def power_off(self, entity_id: str) -> CommandOutcome:
        """Turn a media player off."""
        return await self.execute(PowerOff(entity_id=entity_id))

    async def step_volume(self, direction: VolumeDirection | str, entity_id: str) -> CommandOutcome:
        """Step a media player's volume up or down."""
        return await self.execute(VolumeStep(direction=str(direction), entity_id=entity_id))

    async def set_brightness(self, entity_id: str, pct: int) -> CommandOutcome:
        """Set an input_number brightness entity (0-100)."""
        return await self.execute(BrightnessSet(entity_id=entity_id, pct=pct))

    async def get_brightness(self, entity_id: str) -> CommandOutcome:
        """Read an input_number brightness entity; the value is in outcome.value."""
        return await self.execute(BrightnessGet(entity_id=entity_id))

    # -- Player-level commands ------------------------------------------------

    def _volume_target(self, player: Player) -> str:
        if self._overrides is not None:
            return self._overrides.volume_entity_id(player.entity_id)
        return player.volume_entity_id

    def _brightness_target(self, player: Player) -> str:
        if self._overrides is not None:
            return self._overrides.brightness_entity_id(player.entity_id)
        return player.brightness_entity_id

    async def step_player_volume(
        self, player: Player, direction: VolumeDirection | str
    ) -> CommandOutcome:
        """Step volume on the entity currently linked to a player."""
        return await self.step_volume(direction, self._volume_target(player))

    async def set_player_brightness(self, player: Player, pct: int) -> CommandOutcome:
        """Set brightness on the entity currently linked to a player."""
        return await self.set_brightness(self._brightness_target(player), pct)

    async def get_player_brightness(self, player: Player) -> CommandOutcome:
        """Read brightness from the entity currently linked to a player."""
        return await self.get_brightness(self._brightness_target(player))
