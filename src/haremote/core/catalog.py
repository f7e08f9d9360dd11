"""Player catalog: lists media players from the hub.

The catalog owns a loading flag and the last fetched player list and
publishes both through Qt signals. Results are returned as CatalogResult
values; failures never raise.
"""

import asyncio
import json
import logging

from PySide6.QtCore import QObject, Signal

from haremote.api.errors import ErrorKind, classify_error
from haremote.api.hub import STATES_PATH, InvalidUrlError, build_get
from haremote.api.transport import HttpRequest, Transport, UrllibTransport
from haremote.core.inflight import InFlightTracker
from haremote.models.command import CatalogResult, CatalogStatus
from haremote.models.configuration import ApiConfiguration, ConfigProvider
from haremote.models.entity import parse_entities
from haremote.models.player import Player, PlayerOverrides, is_media_player

logger = logging.getLogger(__name__)


class PlayerCatalog(QObject):
    """Fetches media player entities and maps them to Players.

    Example:
        catalog = PlayerCatalog(config.api_configuration, overrides=config.players)
        catalog.loading_changed.connect(spinner.setVisible)
        result = await catalog.fetch_players()
        if result.status is CatalogStatus.NO_PLAYERS_FOUND:
            show_empty_state()
    """

    loading_changed = Signal(bool)
    players_changed = Signal(object)  # list[Player]
    error_changed = Signal(str)  # "" when cleared

    def __init__(
        self,
        config: ConfigProvider,
        transport: Transport | None = None,
        overrides: PlayerOverrides | None = None,
        parent: QObject | None = None,
    ) -> None:
        """Initialize the catalog.

        Args:
            config: Returns the current hub configuration.
            transport: Request sender (urllib-based by default).
            overrides: Per-player linked entity store applied to new Players.
            parent: Optional parent QObject.
        """
        super().__init__(parent)
        self._config = config
        self._transport = transport or UrllibTransport()
        self._overrides = overrides
        self._players: list[Player] = []
        self._error_message = ""
        self._inflight = InFlightTracker(self.loading_changed.emit)
        # Fetch numbering; a fetch older than the last applied one is not stored
        self._started = 0
        self._applied = 0

    @property
    def is_loading(self) -> bool:
        """Return True while a fetch is in flight."""
        return self._inflight.active

    @property
    def players(self) -> list[Player]:
        """Return the players from the last completed fetch."""
        return list(self._players)

    @property
    def error_message(self) -> str:
        """Return the last error or empty-state message ("" if none)."""
        return self._error_message

    def _set_error(self, message: str) -> None:
        if message != self._error_message:
            self._error_message = message
            self.error_changed.emit(message)

    def _set_players(self, players: list[Player]) -> None:
        self._players = list(players)
        self.players_changed.emit(self.players)

    async def fetch_players(self, config: ApiConfiguration | None = None) -> CatalogResult:
        """Fetch the media players known to the hub.

        Args:
            config: Configuration to use instead of the provider's current value.

        Returns:
            LOADED with players in hub order, NO_PLAYERS_FOUND when the hub
            has no media players, or FAILED with an ErrorKind.

        Raises:
            asyncio.CancelledError: If cancel_requests() abandoned this fetch.
        """
        config = config if config is not None else self._config()

        reason = config.missing_reason()
        if reason:
            return self._fail_fast(CatalogResult.failed(ErrorKind.MISSING_CONFIGURATION, reason))
        try:
            request = build_get(config.base_url, config.api_key, STATES_PATH)
        except InvalidUrlError as e:
            return self._fail_fast(CatalogResult.failed(ErrorKind.INVALID_URL, str(e)))

        self._started += 1
        generation = self._started
        token = self._inflight.begin()
        self._set_error("")
        task = asyncio.ensure_future(self._load(request))
        self._inflight.track(task)
        try:
            result = await task
        finally:
            self._inflight.finish(token)

        if generation < self._applied:
            logger.debug("Ignoring fetch %d, fetch %d already applied", generation, self._applied)
            return result
        self._applied = generation

        if result.status is CatalogStatus.FAILED:
            logger.warning("Player fetch failed: %s", result.message)
        else:
            logger.info("Fetched %d media player(s)", len(result.players))
            self._set_players(result.players)
        self._set_error(result.message)
        return result

    async def refresh(self, config: ApiConfiguration | None = None) -> CatalogResult:
        """Fetch the player list again."""
        return await self.fetch_players(config)

    def cancel_requests(self) -> None:
        """Abandon all pending fetches.

        Their results are discarded and the loading flag is forced to False.
        """
        self._inflight.cancel_all()

    def _fail_fast(self, result: CatalogResult) -> CatalogResult:
        """Report a failure detected before any request was sent."""
        logger.warning("Player fetch not sent: %s", result.message)
        self._set_error(result.message)
        return result

    async def _load(self, request: HttpRequest) -> CatalogResult:
        """Send the states request and turn the response into a result."""
        try:
            response = await self._transport.send(request)
        except Exception as e:  # noqa: BLE001
            return CatalogResult.failed(classify_error(e), str(e))

        if response.status != 200:  # noqa: PLR2004
            return CatalogResult.failed(ErrorKind.SERVER_ERROR, http_status=response.status)

        try:
            entities = parse_entities(json.loads(response.text()))
        except (ValueError, RecursionError) as e:
            # JSONDecodeError, UnicodeDecodeError and EntityDecodeError are ValueErrors;
            # RecursionError means the nesting was too deep for the decoder
            return CatalogResult.failed(classify_error(e), str(e))

        players = [Player.from_entity(e, self._overrides) for e in entities if is_media_player(e)]
        return CatalogResult.loaded(players)
