"""Unit tests for the HA REST client and its disconnected stand-in."""

import json
from unittest.mock import MagicMock, patch

import httpx
import pytest
from pydantic import SecretStr

from ha_lsp.exceptions import ConfigurationError, HAClientError, NotConnectedError
from ha_lsp.ha.base import HAClientConfig
from ha_lsp.ha.client import DisconnectedClient, HAClient, create_data_source
from ha_lsp.settings import Settings


def _client(handler) -> HAClient:
    client = HAClient(HAClientConfig(api_url="http://ha.test/api", token="tok"))
    client._http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return client


class TestHAClientConfig:
    """Test HAClientConfig."""

    def test_from_settings_strips_trailing_slash(self):
        """Test from settings strips trailing slash."""
        settings = Settings(ha_api_url="http://ha.test/api/", ha_token=SecretStr("tok"))

        config = HAClientConfig.from_settings(settings)

        assert config.api_url == "http://ha.test/api"
        assert config.token == "tok"
        assert config.timeout == 30

    def test_from_settings_rejects_non_http_url(self):
        """Test from settings rejects non-HTTP URL."""
        settings = Settings(ha_api_url="homeassistant.local:8123/api", ha_token=SecretStr("tok"))

        with pytest.raises(ConfigurationError, match="must be http"):
            HAClientConfig.from_settings(settings)

    def test_init_without_config_uses_settings(self):
        """Test init without config uses settings."""
        mock_settings = MagicMock()
        mock_settings.ha_api_url = "http://supervisor/core/api"
        mock_settings.ha_token.get_secret_value.return_value = "supervisor-token"
        mock_settings.request_timeout = 10

        with patch("ha_lsp.ha.base.get_settings", return_value=mock_settings):
            client = HAClient()

        assert client.config.api_url == "http://supervisor/core/api"
        assert client.config.token == "supervisor-token"


class TestRequest:
    """Test BaseHAClient request handling."""

    @pytest.mark.asyncio
    async def test_sends_bearer_token(self):
        """Test sends bearer token."""
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["auth"] = request.headers["Authorization"]
            seen["url"] = str(request.url)
            return httpx.Response(200, json=[])

        await _client(handler).fetch_states()

        assert seen["auth"] == "Bearer tok"
        assert seen["url"] == "http://ha.test/api/states"

    @pytest.mark.asyncio
    async def test_error_status_raises_with_status_code(self):
        """Test error status raises with status code."""
        client = _client(lambda request: httpx.Response(500, text="Internal error"))

        with pytest.raises(HAClientError) as exc_info:
            await client.fetch_states()

        assert exc_info.value.status_code == 500
        assert "Internal error" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_connection_failure_is_wrapped(self):
        """Test connection failure is wrapped."""
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(HAClientError, match="Connection failed"):
            await _client(handler).fetch_services()

    @pytest.mark.asyncio
    async def test_close_releases_http_client(self):
        """Test close releases HTTP client."""
        client = _client(lambda request: httpx.Response(200, json=[]))

        await client.close()

        assert client._http_client is None


class TestRegistryQueries:
    """Test registry queries."""

    @pytest.mark.asyncio
    async def test_fetch_states(self):
        """Test fetch_states."""
        payload = [
            {"entity_id": "light.kitchen", "state": "on", "attributes": {"friendly_name": "K"}},
            {"state": "orphan"},
        ]
        states = await _client(lambda r: httpx.Response(200, json=payload)).fetch_states()

        assert [s.entity_id for s in states] == ["light.kitchen"]
        assert states[0].friendly_name == "K"

    @pytest.mark.asyncio
    async def test_fetch_entity_state_unknown_returns_none(self):
        """Test fetch entity state unknown returns None."""
        client = _client(lambda r: httpx.Response(404, json={"message": "Entity not found."}))

        assert await client.fetch_entity_state("light.nope") is None

    @pytest.mark.asyncio
    async def test_fetch_services_flattens_catalog(self):
        """Test fetch services flattens catalog."""
        payload = [
            {
                "domain": "light",
                "services": {
                    "turn_on": {
                        "name": "Turn on",
                        "description": "Turn on lights",
                        "fields": {"brightness": {"description": "Level", "required": False}},
                        "target": {"entity": [{"domain": ["light"]}]},
                    },
                },
            }
        ]
        services = await _client(lambda r: httpx.Response(200, json=payload)).fetch_services()

        assert services[0].full_name == "light.turn_on"
        assert services[0].target is True
        assert services[0].fields["brightness"].description == "Level"

    @pytest.mark.asyncio
    async def test_render_template_returns_text(self):
        """Test render template returns text."""
        def handler(request: httpx.Request) -> httpx.Response:
            assert json.loads(request.content) == {"template": "{{ 1 + 1 }}"}
            return httpx.Response(200, text="2")

        assert await _client(handler).render_template("{{ 1 + 1 }}") == "2"

    @pytest.mark.asyncio
    async def test_render_template_error_carries_message(self):
        """Test render template error carries message."""
        client = _client(lambda r: httpx.Response(400, text="TemplateSyntaxError: unexpected '}'"))

        with pytest.raises(HAClientError, match="TemplateSyntaxError"):
            await client.render_template("{{ }")

    @pytest.mark.asyncio
    async def test_fetch_areas_decodes_rendered_json(self):
        """Test fetch areas decodes rendered JSON."""
        rendered = json.dumps([{"id": "kitchen", "name": "Kitchen"}, {"id": "", "name": "x"}])
        areas = await _client(lambda r: httpx.Response(200, text=rendered)).fetch_areas()

        assert [(a.id, a.name) for a in areas] == [("kitchen", "Kitchen")]

    @pytest.mark.asyncio
    async def test_fetch_devices_keeps_area_reference(self):
        """Test fetch devices keeps area reference."""
        rendered = json.dumps([{"id": "abc", "name": None, "area": "kitchen"}])
        devices = await _client(lambda r: httpx.Response(200, text=rendered)).fetch_devices()

        assert devices[0].name == "abc"
        assert devices[0].area_id == "kitchen"

    @pytest.mark.asyncio
    async def test_non_json_template_output_raises(self):
        """Test non-JSON template output raises."""
        client = _client(lambda r: httpx.Response(200, text="not json"))

        with pytest.raises(HAClientError, match="Unexpected template output"):
            await client.fetch_floors()


class TestDisconnectedClient:
    """Test DisconnectedClient."""

    @pytest.mark.asyncio
    async def test_queries_are_empty(self):
        """Test every query is empty."""
        client = DisconnectedClient()

        assert client.connected is False
        assert await client.fetch_states() == []
        assert await client.fetch_services() == []
        assert await client.fetch_labels() == []
        assert await client.fetch_entity_state("light.kitchen") is None

    @pytest.mark.asyncio
    async def test_render_template_raises_not_connected(self):
        """Test render template raises not connected."""
        with pytest.raises(NotConnectedError):
            await DisconnectedClient().render_template("{{ 1 }}")


class TestCreateDataSource:
    """Test create_data_source."""

    def test_token_selects_http_client(self):
        """Test token selects HTTP client."""
        source = create_data_source(Settings(ha_token=SecretStr("tok")))

        assert isinstance(source, HAClient)
        assert source.connected is True

    def test_missing_token_selects_disconnected_client(self):
        """Test missing token selects disconnected client."""
        source = create_data_source(Settings(ha_token=SecretStr("")))

        assert isinstance(source, DisconnectedClient)
