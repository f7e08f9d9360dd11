"""Tests for ConfigManager and the QSettings-backed stores."""

from haremote.core.config import ConfigManager
from haremote.core.stores import SECRET_API_KEY, SECRET_API_URL, SecretStore
from haremote.models.configuration import ApiConfiguration


class MemorySecretStore(SecretStore):
    """In-memory secret store for tests."""

    def __init__(self) -> None:
        self.values: dict[str, str] = {}

    def get(self, name: str) -> str | None:
        return self.values.get(name)

    def set(self, name: str, value: str) -> None:
        self.values[name] = value

    def delete(self, name: str) -> None:
        self.values.pop(name, None)


class TestApiConfiguration:
    """Test hub URL and key storage."""

    def test_settings_identity_without_application(self, config_manager: ConfigManager) -> None:
        """Test the settings file is named by the constructor arguments alone."""
        assert config_manager.settings.organizationName() == "HARemoteTest"
        assert config_manager.settings.applicationName() == "TestConfig"

    def test_initially_empty(self, config_manager: ConfigManager) -> None:
        """Test that config starts without URL or key."""
        assert config_manager.api_configuration() == ApiConfiguration("", "")

    def test_save_and_load(self, config_manager: ConfigManager) -> None:
        """Test saving and reading back the configuration."""
        config_manager.save_api_configuration(ApiConfiguration("http://hub:8123", "token"))
        loaded = config_manager.api_configuration()
        assert loaded.base_url == "http://hub:8123"
        assert loaded.api_key == "token"

    def test_whitespace_stripped(self, config_manager: ConfigManager) -> None:
        """Test surrounding whitespace is not persisted."""
        config_manager.save_api_configuration(ApiConfiguration(" http://hub:8123 \n", " token "))
        assert config_manager.api_configuration() == ApiConfiguration("http://hub:8123", "token")

    def test_clear(self, config_manager: ConfigManager) -> None:
        """Test clearing forgets URL and key."""
        config_manager.save_api_configuration(ApiConfiguration("http://hub:8123", "token"))
        config_manager.clear_api_configuration()
        assert not config_manager.api_configuration().is_complete

    def test_custom_secret_store(self) -> None:
        """Test URL and key go to an injected secret store under their names."""
        secrets = MemorySecretStore()
        config = ConfigManager("HARemoteTest", "SecretConfig", secrets=secrets)
        config.save_api_configuration(ApiConfiguration("http://hub:8123", "token"))

        assert secrets.values == {SECRET_API_URL: "http://hub:8123", SECRET_API_KEY: "token"}
        secrets.set(SECRET_API_KEY, "rotated")
        assert config.api_configuration().api_key == "rotated"


class TestTimeout:
    """Test request timeout setting."""

    def test_default(self, config_manager: ConfigManager) -> None:
        """Test the default timeout is 10 seconds."""
        assert config_manager.get_timeout() == 10.0

    def test_set_and_clamp(self, config_manager: ConfigManager) -> None:
        """Test the timeout is stored and clamped to 1-60."""
        config_manager.set_timeout(5.5)
        assert config_manager.get_timeout() == 5.5
        config_manager.set_timeout(0)
        assert config_manager.get_timeout() == 1.0
        config_manager.set_timeout(600)
        assert config_manager.get_timeout() == 60.0

    def test_invalid_value_falls_back(self, config_manager: ConfigManager) -> None:
        """Test a corrupt stored value yields the default."""
        config_manager.settings.setValue("network/timeout", "soon")
        assert config_manager.get_timeout() == 10.0


class TestPlayerSettings:
    """Test per-player linked entity overrides."""

    def test_defaults(self, config_manager: ConfigManager) -> None:
        """Test volume defaults to the player and brightness to unlinked."""
        players = config_manager.players
        assert players.volume_entity_id("media_player.tv") == "media_player.tv"
        assert players.brightness_entity_id("media_player.tv") == ""

    def test_set_overrides(self, config_manager: ConfigManager) -> None:
        """Test overrides are stored per player."""
        players = config_manager.players
        players.set_volume_entity_id("media_player.tv", "media_player.soundbar")
        players.set_brightness_entity_id("media_player.tv", "input_number.tv_brightness")

        assert players.volume_entity_id("media_player.tv") == "media_player.soundbar"
        assert players.brightness_entity_id("media_player.tv") == "input_number.tv_brightness"
        assert players.volume_entity_id("media_player.kitchen") == "media_player.kitchen"

    def test_empty_override_restores_default(self, config_manager: ConfigManager) -> None:
        """Test clearing an override falls back to the default."""
        players = config_manager.players
        players.set_volume_entity_id("media_player.tv", "media_player.soundbar")
        players.set_volume_entity_id("media_player.tv", "  ")
        players.set_brightness_entity_id("media_player.tv", "input_number.b")
        players.set_brightness_entity_id("media_player.tv", "")

        assert players.volume_entity_id("media_player.tv") == "media_player.tv"
        assert players.brightness_entity_id("media_player.tv") == ""

    def test_stored_under_contract_keys(self, config_manager: ConfigManager) -> None:
        """Test overrides use the volumeEntityId:/brightnessEntityId: keys."""
        config_manager.players.set_volume_entity_id("media_player.tv", "media_player.soundbar")
        value = config_manager.settings.value("volumeEntityId:media_player.tv")
        assert value == "media_player.soundbar"

    def test_changes_visible_immediately(self, config_manager: ConfigManager) -> None:
        """Test values are read through, not cached."""
        players = config_manager.players
        assert players.brightness_entity_id("media_player.tv") == ""
        config_manager.settings.setValue("brightnessEntityId:media_player.tv", "input_number.x")
        assert players.brightness_entity_id("media_player.tv") == "input_number.x"
