"""Tests for hub URL composition and request building."""

import json

import pytest

from haremote.api.hub import (
    KEY_PRESSED_PATH,
    STATES_PATH,
    InvalidUrlError,
    build_get,
    build_post,
    compose_url,
    state_path,
)


class TestComposeUrl:
    """Tests for compose_url."""

    def test_simple(self) -> None:
        """Test base URL and path are joined."""
        assert compose_url("http://hub:8123", STATES_PATH) == "http://hub:8123/api/states"

    def test_trailing_slash_dropped(self) -> None:
        """Test a trailing slash on the base URL does not double up."""
        assert compose_url("https://hub.example.com/", STATES_PATH) == (
            "https://hub.example.com/api/states"
        )

    @pytest.mark.parametrize(
        "base_url",
        [
            "hub:8123",
            "ftp://hub",
            "http://",
            "http://hub name:8123",
            "http://hub:99999",
            "not a url",
        ],
    )
    def test_invalid(self, base_url: str) -> None:
        """Test malformed base URLs are rejected."""
        with pytest.raises(InvalidUrlError):
            compose_url(base_url, STATES_PATH)


class TestStatePath:
    """Tests for state_path."""

    def test_plain_entity(self) -> None:
        """Test ordinary entity IDs are used as-is."""
        assert state_path("input_number.tv_brightness") == "/api/states/input_number.tv_brightness"

    def test_entity_is_percent_encoded(self) -> None:
        """Test reserved characters cannot escape the path segment."""
        assert state_path("a/b?c") == "/api/states/a%2Fb%3Fc"


class TestBuildRequests:
    """Tests for build_get and build_post."""

    def test_get_has_bearer_header_only(self) -> None:
        """Test GET requests carry authorization but no content type."""
        request = build_get("http://hub:8123", "secret", STATES_PATH)
        assert request.method == "GET"
        assert request.url == "http://hub:8123/api/states"
        assert request.headers == {"Authorization": "Bearer secret"}
        assert request.body is None

    def test_post_has_json_body(self) -> None:
        """Test POST requests carry JSON body and content type."""
        payload = {"key_name": "select", "entity_id": "media_player.tv"}
        request = build_post("http://hub:8123", "secret", KEY_PRESSED_PATH, payload)
        assert request.method == "POST"
        assert request.headers["Authorization"] == "Bearer secret"
        assert request.headers["Content-Type"] == "application/json"
        assert request.body is not None
        assert json.loads(request.body) == payload

    def test_post_rejects_unencodable_payload(self) -> None:
        """Test payloads JSON cannot represent raise before sending."""
        with pytest.raises(TypeError):
            build_post("http://hub:8123", "secret", KEY_PRESSED_PATH, {"value": object()})
        with pytest.raises(ValueError):
            build_post("http://hub:8123", "secret", KEY_PRESSED_PATH, {"value": float("nan")})
