"""Unit tests for ha_lsp/ha/cache.py (TTLCache, RuntimeDataCache)."""

from unittest.mock import AsyncMock

import pytest

from ha_lsp.exceptions import HAClientError
from ha_lsp.ha.cache import RuntimeDataCache, TTLCache
from ha_lsp.ha.client import DisconnectedClient
from ha_lsp.ha.models import EntitySnapshot


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


class TestTTLCache:
    """Test TTLCache."""

    @pytest.mark.asyncio
    async def test_get_within_ttl_does_not_refetch(self):
        """Test get within TTL does not refetch."""
        clock = FakeClock()
        cache = TTLCache(ttl_seconds=60, clock=clock)
        fetcher = AsyncMock(return_value=["a"])

        first = await cache.get("states", fetcher)
        clock.now += 59
        second = await cache.get("states", fetcher)

        assert first is second
        fetcher.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_get_after_ttl_refetches(self):
        """Test get after TTL refetches."""
        clock = FakeClock()
        cache = TTLCache(ttl_seconds=60, clock=clock)
        fetcher = AsyncMock(side_effect=[["old"], ["new"]])

        await cache.get("states", fetcher)
        clock.now += 60
        result = await cache.get("states", fetcher)

        assert result == ["new"]
        assert fetcher.await_count == 2

    @pytest.mark.asyncio
    async def test_failed_refresh_returns_stale_value(self, caplog):
        """Test failed refresh returns stale value."""
        clock = FakeClock()
        cache = TTLCache(ttl_seconds=60, clock=clock)
        await cache.get("states", AsyncMock(return_value=["stale"]))

        clock.now += 3600
        failing = AsyncMock(side_effect=HAClientError("boom"))
        result = await cache.get("states", failing)

        assert result == ["stale"]
        failing.assert_awaited_once()
        assert "serving stale data" in caplog.text

    @pytest.mark.asyncio
    async def test_failed_fetch_without_prior_value_propagates(self):
        """Test failed fetch without prior value propagates."""
        cache = TTLCache()

        with pytest.raises(HAClientError):
            await cache.get("states", AsyncMock(side_effect=HAClientError("boom")))

    @pytest.mark.asyncio
    async def test_failed_refresh_keeps_original_timestamp(self):
        """Test failed refresh keeps original timestamp."""
        clock = FakeClock()
        cache = TTLCache(ttl_seconds=60, clock=clock)
        await cache.get("states", AsyncMock(return_value=["stale"]))
        clock.now += 120
        await cache.get("states", AsyncMock(side_effect=HAClientError("boom")))

        fetcher = AsyncMock(return_value=["fresh"])
        assert await cache.get("states", fetcher) == ["fresh"]

    @pytest.mark.asyncio
    async def test_keys_are_independent(self):
        """Test keys are independent."""
        cache = TTLCache()
        await cache.get("states", AsyncMock(return_value=["s"]))

        assert await cache.get("services", AsyncMock(return_value=["x"])) == ["x"]

    @pytest.mark.asyncio
    async def test_invalidate_clears_all_entries(self):
        """Test invalidate clears all entries."""
        cache = TTLCache()
        await cache.get("states", AsyncMock(return_value=["a"]))
        await cache.get("services", AsyncMock(return_value=["b"]))

        cache.invalidate()

        states = AsyncMock(return_value=["a2"])
        services = AsyncMock(return_value=["b2"])
        assert await cache.get("states", states) == ["a2"]
        assert await cache.get("services", services) == ["b2"]


class TestRuntimeDataCache:
    """Test RuntimeDataCache accessors and fallbacks."""

    @pytest.mark.asyncio
    async def test_entity_map_and_lookup(self, cache):
        """Test entity map and lookup."""
        entity_map = await cache.get_entity_map()

        assert set(entity_map) == {"light.kitchen", "switch.linked_kitchen", "sensor.temperature"}
        assert (await cache.get_entity("light.kitchen")).state == "on"
        assert await cache.get_entity("light.missing") is None

    @pytest.mark.asyncio
    async def test_entity_map_reused_while_states_unchanged(self, cache):
        """Test entity map reused while states unchanged."""
        first = await cache.get_entity_map()
        second = await cache.get_entity_map()

        assert first is second

    @pytest.mark.asyncio
    async def test_domains(self, cache):
        """Test entity domains."""
        assert await cache.get_domains() == ["light", "sensor", "switch"]

    @pytest.mark.asyncio
    async def test_get_service_by_full_name(self, cache):
        """Test get service by full name."""
        service = await cache.get_service("light.turn_on")

        assert service is not None
        assert service.target is True
        assert await cache.get_service("light.explode") is None

    @pytest.mark.asyncio
    async def test_services_cached(self, cache, mock_source):
        """Test services cached."""
        await cache.get_services()
        await cache.get_service("light.turn_on")

        mock_source.fetch_services.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_floors_degrade_to_empty_list(self, cache, mock_source):
        """Test floors degrade to empty list."""
        mock_source.fetch_floors.side_effect = HAClientError("floors() undefined")

        assert await cache.get_floors() == []

    @pytest.mark.asyncio
    async def test_labels_empty_fallback_is_not_cached(self, cache, mock_source):
        """Test labels empty fallback is not cached."""
        mock_source.fetch_labels.side_effect = [HAClientError("labels() undefined"), ["ok"]]

        assert await cache.get_labels() == []
        assert await cache.get_labels() == ["ok"]

    @pytest.mark.asyncio
    async def test_areas_error_propagates_without_prior_value(self, cache, mock_source):
        """Test areas error propagates without prior value."""
        mock_source.fetch_areas.side_effect = HAClientError("down")

        with pytest.raises(HAClientError):
            await cache.get_areas()

    @pytest.mark.asyncio
    async def test_fetch_entity_prefers_live_read(self, cache, mock_source):
        """Test fetch entity prefers live read."""
        live = EntitySnapshot(entity_id="light.kitchen", state="off")
        mock_source.fetch_entity_state.return_value = live

        assert await cache.fetch_entity("light.kitchen") is live

    @pytest.mark.asyncio
    async def test_fetch_entity_falls_back_to_snapshot(self, cache, mock_source):
        """Test fetch entity falls back to snapshot."""
        mock_source.fetch_entity_state.side_effect = HAClientError("timeout")

        entity = await cache.fetch_entity("light.kitchen")

        assert entity is not None
        assert entity.state == "on"

    @pytest.mark.asyncio
    async def test_render_template_is_not_cached(self, cache, mock_source):
        """Test render template is not cached."""
        await cache.render_template("{{ 1 }}")
        await cache.render_template("{{ 1 }}")

        assert mock_source.render_template.await_count == 2

    @pytest.mark.asyncio
    async def test_invalidate_forces_refetch(self, cache, mock_source):
        """Test invalidate forces refetch."""
        await cache.get_states()
        cache.invalidate()
        await cache.get_states()

        assert mock_source.fetch_states.await_count == 2

    @pytest.mark.asyncio
    async def test_warm_up_fetches_primary_queries(self, cache, mock_source):
        """Test warm up fetches primary queries."""
        await cache.warm_up()

        mock_source.fetch_states.assert_awaited_once()
        mock_source.fetch_services.assert_awaited_once()
        mock_source.fetch_areas.assert_awaited_once()
        mock_source.fetch_devices.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_warm_up_failures_are_logged_not_raised(self, cache, mock_source, caplog):
        """Test warm up failures are logged not raised."""
        mock_source.fetch_services.side_effect = HAClientError("down")

        await cache.warm_up()

        assert "Failed to warm cache" in caplog.text
        assert await cache.get_states()

    @pytest.mark.asyncio
    async def test_warm_up_skipped_when_disconnected(self):
        """Test warm up skipped when disconnected."""
        source = AsyncMock(spec=DisconnectedClient)
        source.connected = False
        cache = RuntimeDataCache(source)

        await cache.warm_up()

        source.fetch_states.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_disconnected_queries_are_empty(self, disconnected_cache):
        """Test disconnected queries are empty."""
        assert disconnected_cache.connected is False
        assert await disconnected_cache.get_states() == []
        assert await disconnected_cache.get_services() == []
        assert await disconnected_cache.get_floors() == []
