"""Tests for entity, player, and command models."""

from datetime import UTC, datetime

import pytest
from fakes import entity

from haremote.api.errors import EntityDecodeError, ErrorKind
from haremote.models import (
    ApiConfiguration,
    BrightnessGet,
    BrightnessSet,
    CatalogResult,
    CatalogStatus,
    CommandOutcome,
    Entity,
    KeyPress,
    Player,
    PlayPause,
    PowerOff,
    RemoteKey,
    VolumeDirection,
    VolumeStep,
    parse_entities,
)
from haremote.models.player import is_media_player


class TestEntity:
    """Tests for Entity parsing."""

    def test_from_dict(self) -> None:
        """Test parsing a full state object."""
        parsed = Entity.from_dict(entity("media_player.tv", "Living Room TV", state="playing"))
        assert parsed.entity_id == "media_player.tv"
        assert parsed.friendly_name == "Living Room TV"
        assert parsed.state == "playing"
        assert parsed.last_changed == datetime(2025, 4, 21, 10, 15, 0, 123456, tzinfo=UTC)
        assert parsed.domain == "media_player"

    def test_missing_friendly_name(self) -> None:
        """Test friendly_name is optional."""
        assert Entity.from_dict(entity("media_player.tv")).friendly_name is None

    def test_missing_attributes(self) -> None:
        """Test an entity without attributes still parses."""
        data = entity("media_player.tv")
        del data["attributes"]
        assert Entity.from_dict(data).friendly_name is None

    @pytest.mark.parametrize("field", ["entity_id", "state", "last_changed"])
    def test_missing_required_field(self, field: str) -> None:
        """Test required fields raise EntityDecodeError."""
        data = entity("media_player.tv")
        del data[field]
        with pytest.raises(EntityDecodeError):
            Entity.from_dict(data)

    def test_unparseable_timestamp_is_tolerated(self) -> None:
        """Test an unusual last_changed does not reject the entity."""
        data = entity("media_player.tv", "TV")
        data["last_changed"] = "yesterday"
        parsed = Entity.from_dict(data)
        assert parsed.last_changed is None
        assert parsed.friendly_name == "TV"

    def test_non_string_timestamp(self) -> None:
        """Test a non-string last_changed raises EntityDecodeError."""
        data = entity("media_player.tv")
        data["last_changed"] = 1713694500
        with pytest.raises(EntityDecodeError):
            Entity.from_dict(data)

    def test_parse_entities_requires_list(self) -> None:
        """Test a non-array body is rejected."""
        with pytest.raises(EntityDecodeError):
            parse_entities({"entity_id": "media_player.tv"})

    def test_parse_entities_preserves_order(self) -> None:
        """Test entities come back in response order."""
        parsed = parse_entities([entity("b.one"), entity("a.two")])
        assert [e.entity_id for e in parsed] == ["b.one", "a.two"]


class TestPlayer:
    """Tests for Player derivation."""

    def test_display_name_from_friendly_name(self) -> None:
        """Test display_name uses the friendly name."""
        player = Player.from_entity(Entity.from_dict(entity("media_player.tv", "TV")))
        assert player.display_name == "TV"

    def test_display_name_falls_back_to_entity_id(self) -> None:
        """Test display_name falls back to the entity ID."""
        player = Player.from_entity(Entity.from_dict(entity("media_player.tv")))
        assert player.display_name == "media_player.tv"

    def test_default_linked_entities(self) -> None:
        """Test volume targets the player and brightness is unlinked."""
        player = Player(entity_id="media_player.tv", display_name="TV")
        assert player.volume_entity_id == "media_player.tv"
        assert player.brightness_entity_id == ""
        assert player.has_brightness_control is False

    def test_overrides_applied(self) -> None:
        """Test linked entities come from the override store."""

        class Overrides:
            def volume_entity_id(self, entity_id: str) -> str:
                return "media_player.soundbar"

            def brightness_entity_id(self, entity_id: str) -> str:
                return "input_number.tv_brightness"

        player = Player.from_entity(Entity.from_dict(entity("media_player.tv")), Overrides())
        assert player.volume_entity_id == "media_player.soundbar"
        assert player.brightness_entity_id == "input_number.tv_brightness"
        assert player.has_brightness_control is True

    def test_ids_are_unique(self) -> None:
        """Test each derived player gets its own opaque ID."""
        source = Entity.from_dict(entity("media_player.tv"))
        assert Player.from_entity(source).id != Player.from_entity(source).id

    def test_is_media_player(self) -> None:
        """Test the media_player prefix filter."""
        assert is_media_player(Entity.from_dict(entity("media_player.tv")))
        assert not is_media_player(Entity.from_dict(entity("light.lamp")))


class TestCommandModels:
    """Tests for command enums and outcomes."""

    def test_remote_key_values(self) -> None:
        """Test key names match the hub event's key_name values."""
        assert RemoteKey.SELECT == "select"
        assert RemoteKey.ARROW_LEFT.value == "arrow_left"

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [("up", VolumeDirection.UP), ("DOWN", VolumeDirection.DOWN), (" Up ", VolumeDirection.UP)],
    )
    def test_volume_direction_parse(self, raw: str, expected: VolumeDirection) -> None:
        """Test direction parsing is case-insensitive."""
        assert VolumeDirection.parse(raw) is expected

    def test_volume_direction_parse_invalid(self) -> None:
        """Test unknown directions parse to None."""
        assert VolumeDirection.parse("sideways") is None
        assert VolumeDirection.parse("") is None

    @pytest.mark.parametrize(
        "value",
        [
            KeyPress(key="select", entity_id="media_player.tv"),
            PlayPause(entity_id="media_player.tv"),
            PowerOff(entity_id="media_player.tv"),
            VolumeStep(direction="up", entity_id="media_player.tv"),
            BrightnessSet(entity_id="input_number.b", pct=10),
            BrightnessGet(entity_id="input_number.b"),
            CommandOutcome.ok(),
            CatalogResult.loaded([]),
        ],
    )
    def test_command_models_are_slotted(self, value: object) -> None:
        """Test command values use slots and reject new attributes."""
        assert not hasattr(value, "__dict__")
        with pytest.raises((AttributeError, TypeError)):
            value.extra = 1  # type: ignore[attr-defined]

    def test_outcome_ok(self) -> None:
        """Test successful outcomes have no message."""
        outcome = CommandOutcome.ok(value=42)
        assert outcome.success is True
        assert outcome.value == 42
        assert outcome.message == ""

    def test_outcome_failure(self) -> None:
        """Test failed outcomes describe their error."""
        outcome = CommandOutcome.failure(ErrorKind.SERVER_ERROR, status=503)
        assert outcome.success is False
        assert outcome.error is ErrorKind.SERVER_ERROR
        assert outcome.message == "Server returned error: 503"

    def test_catalog_result_empty_is_not_error(self) -> None:
        """Test an empty player list is NO_PLAYERS_FOUND, not FAILED."""
        result = CatalogResult.loaded([])
        assert result.status is CatalogStatus.NO_PLAYERS_FOUND
        assert result.is_error is False
        assert result.error is None
        assert result.message == "No media players found"


class TestApiConfiguration:
    """Tests for ApiConfiguration."""

    def test_complete(self) -> None:
        """Test a configuration with URL and key is complete."""
        config = ApiConfiguration("http://hub:8123", "key")
        assert config.is_complete
        assert config.missing_reason() == ""

    def test_missing_reasons(self) -> None:
        """Test the URL is reported before the key."""
        assert ApiConfiguration("", "").missing_reason() == "API URL is not configured"
        assert ApiConfiguration("http://hub", "").missing_reason() == "API Key is not configured"
        assert not ApiConfiguration().is_complete
