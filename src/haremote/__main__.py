"""Command-line entry point for HARemote."""

import argparse
import asyncio
import logging
import sys
from collections.abc import Sequence

from haremote.api.transport import UrllibTransport
from haremote.core.catalog import PlayerCatalog
from haremote.core.config import ConfigManager
from haremote.core.dispatcher import CommandDispatcher
from haremote.models.command import CatalogStatus, CommandOutcome, RemoteKey
from haremote.models.configuration import ApiConfiguration
from haremote.models.player import Player

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="haremote",
        description="HARemote: remote control for Home Assistant media players",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    configure = sub.add_parser("configure", help="store the hub URL and API key")
    configure.add_argument("--url", required=True, help="hub address, e.g. http://hub:8123")
    configure.add_argument("--key", required=True, help="long-lived access token")
    configure.add_argument("--timeout", type=float, default=None, help="request timeout (s)")

    sub.add_parser("show-config", help="print the stored configuration")
    sub.add_parser("players", help="list media players")

    key = sub.add_parser("key", help="press a remote key")
    key.add_argument("entity_id")
    key.add_argument("key", help=f"key name, e.g. {', '.join(k.value for k in RemoteKey)}")

    play_pause = sub.add_parser("play-pause", help="toggle playback")
    play_pause.add_argument("entity_id")

    power_off = sub.add_parser("power-off", help="turn a player off")
    power_off.add_argument("entity_id")

    volume = sub.add_parser("volume", help="step the volume of a player")
    volume.add_argument("entity_id")
    volume.add_argument("direction", help="up or down")

    brightness = sub.add_parser("brightness", help="read or set a player's brightness")
    brightness_sub = brightness.add_subparsers(dest="action", required=True)
    brightness_get = brightness_sub.add_parser("get")
    brightness_get.add_argument("entity_id")
    brightness_set = brightness_sub.add_parser("set")
    brightness_set.add_argument("entity_id")
    brightness_set.add_argument("pct", type=int, help="brightness 0-100")

    link = sub.add_parser("link", help="link volume/brightness entities to a player")
    link.add_argument("entity_id")
    link.add_argument("--volume", default=None, help="entity receiving volume steps")
    link.add_argument("--brightness", default=None, help="input_number entity for brightness")

    return parser


def _report(outcome: CommandOutcome) -> int:
    if outcome.success:
        if outcome.value is not None:
            print(outcome.value)
        return 0
    print(f"Error: {outcome.message}", file=sys.stderr)
    return 1


async def _list_players(catalog: PlayerCatalog) -> int:
    result = await catalog.fetch_players()
    if result.status is CatalogStatus.FAILED:
        print(f"Error: {result.message}", file=sys.stderr)
        return 1
    if result.status is CatalogStatus.NO_PLAYERS_FOUND:
        print(result.message)
        return 0
    for player in result.players:
        line = f"{player.entity_id}\t{player.display_name}"
        if player.volume_entity_id != player.entity_id:
            line += f"\tvolume={player.volume_entity_id}"
        if player.brightness_entity_id:
            line += f"\tbrightness={player.brightness_entity_id}"
        print(line)
    return 0


async def _run_command(args: argparse.Namespace, config: ConfigManager) -> int:  # noqa: PLR0911
    transport = UrllibTransport(timeout=config.get_timeout())
    if args.command == "players":
        catalog = PlayerCatalog(config.api_configuration, transport, overrides=config.players)
        return await _list_players(catalog)

    dispatcher = CommandDispatcher(config.api_configuration, transport, overrides=config.players)
    player = Player(entity_id=args.entity_id, display_name=args.entity_id)
    if args.command == "key":
        return _report(await dispatcher.send_key(args.key, args.entity_id))
    if args.command == "play-pause":
        return _report(await dispatcher.play_pause(args.entity_id))
    if args.command == "power-off":
        return _report(await dispatcher.power_off(args.entity_id))
    if args.command == "volume":
        return _report(await dispatcher.step_player_volume(player, args.direction))
    if args.action == "get":
        return _report(await dispatcher.get_player_brightness(player))
    return _report(await dispatcher.set_player_brightness(player, args.pct))


def main(argv: Sequence[str] | None = None) -> int:
    """Run the HARemote command-line interface.

    Args:
        argv: Arguments (defaults to sys.argv[1:]).

    Returns:
        Exit code (0 for success).
    """
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = ConfigManager()

    if args.command == "configure":
        config.save_api_configuration(ApiConfiguration(base_url=args.url, api_key=args.key))
        if args.timeout is not None:
            config.set_timeout(args.timeout)
        config.sync()
        return 0

    if args.command == "show-config":
        current = config.api_configuration()
        print(f"url: {current.base_url or '<unset>'}")
        print(f"key: {'<set>' if current.api_key else '<unset>'}")
        print(f"timeout: {config.get_timeout():g}s")
        return 0

    if args.command == "link":
        if args.volume is not None:
            config.players.set_volume_entity_id(args.entity_id, args.volume)
        if args.brightness is not None:
            config.players.set_brightness_entity_id(args.entity_id, args.brightness)
        config.sync()
        return 0

    return asyncio.run(_run_command(args, config))


if __name__ == "__main__":
    sys.exit(main())
