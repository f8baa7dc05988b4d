"""Stale-tolerant cache over the Home Assistant runtime data source.

Editor interactions are read-heavy and latency sensitive, so every
registry query is served from memory for ``ttl_seconds`` and, when a
refresh fails, from the last good value however old it is. Only a
query that has never succeeded propagates its error.

The cache belongs to one language-server session; nothing here is
module-global.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from ha_lsp.ha.client import RuntimeDataSource
from ha_lsp.ha.models import (
    AreaDescriptor,
    DeviceDescriptor,
    EntitySnapshot,
    FloorDescriptor,
    LabelDescriptor,
    ServiceDescriptor,
)

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 60.0


@dataclass(frozen=True)
class CacheEntry:
    value: Any
    fetched_at: float


class TTLCache:
    """Key/value cache with a time-to-live and stale-on-error fallback.

    Args:
        ttl_seconds: How long a fetched value is considered fresh.
        clock: Monotonic time source, injectable for tests.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}

    async def get(self, key: str, fetcher: Callable[[], Awaitable[Any]]) -> Any:
        """Return the value for *key*, refreshing it through *fetcher* when stale.

        Args:
            key: Cache key.
            fetcher: Idempotent no-argument coroutine function producing the value.

        Returns:
            The fresh value, or the previous value if the refresh failed.

        Raises:
            Exception: Whatever *fetcher* raised, when there is no previous value.
        """
        entry = self._entries.get(key)
        if entry is not None and (self._clock() - entry.fetched_at) < self._ttl_seconds:
            return entry.value

        try:
            value = await fetcher()
        except Exception as e:
            if entry is not None:
                logger.warning("Refreshing %s failed, serving stale data: %s", key, e)
                return entry.value
            raise

        self._entries[key] = CacheEntry(value=value, fetched_at=self._clock())
        return value

    def invalidate(self) -> None:
        """Drop every entry, forcing re-fetch on next access."""
        self._entries = {}


class RuntimeDataCache:
    """Typed, cached view of the runtime for the feature providers.

    Args:
        source: Connected or disconnected runtime data source.
        ttl_seconds: Cache time-to-live in seconds (default 60).
        clock: Monotonic time source, injectable for tests.
    """

    def __init__(
        self,
        source: RuntimeDataSource,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._source = source
        self._cache = TTLCache(ttl_seconds=ttl_seconds, clock=clock)
        self._entity_map: dict[str, EntitySnapshot] = {}
        self._entity_map_source: list[EntitySnapshot] | None = None

    @property
    def connected(self) -> bool:
        return self._source.connected

    # ------------------------------------------------------------------
    # Entities
    # ------------------------------------------------------------------

    async def get_states(self) -> list[EntitySnapshot]:
        return await self._cache.get("states", self._source.fetch_states)

    async def get_entity_map(self) -> dict[str, EntitySnapshot]:
        """Entity snapshots keyed by entity ID, rebuilt only when the state list changes."""
        states = await self.get_states()
        if states is not self._entity_map_source:
            self._entity_map = {s.entity_id: s for s in states}
            self._entity_map_source = states
        return self._entity_map

    async def get_entity(self, entity_id: str) -> EntitySnapshot | None:
        return (await self.get_entity_map()).get(entity_id)

    async def fetch_entity(self, entity_id: str) -> EntitySnapshot | None:
        """Read one entity straight from the runtime, bypassing the TTL.

        Falls back to the cached snapshot when the live read fails.
        """
        try:
            live = await self._source.fetch_entity_state(entity_id)
        except Exception as e:
            logger.debug("Live read of %s failed: %s", entity_id, e)
            live = None
        return live or await self.get_entity(entity_id)

    async def get_domains(self) -> list[str]:
        return sorted({s.domain for s in await self.get_states()})

    # ------------------------------------------------------------------
    # Services
    # ------------------------------------------------------------------

    async def get_services(self) -> list[ServiceDescriptor]:
        return await self._cache.get("services", self._source.fetch_services)

    async def get_service(self, full_name: str) -> ServiceDescriptor | None:
        for service in await self.get_services():
            if service.full_name == full_name:
                return service
        return None

    # ------------------------------------------------------------------
    # Registries
    # ------------------------------------------------------------------

    async def get_areas(self) -> list[AreaDescriptor]:
        return await self._cache.get("areas", self._source.fetch_areas)

    async def get_devices(self) -> list[DeviceDescriptor]:
        return await self._cache.get("devices", self._source.fetch_devices)

    async def get_floors(self) -> list[FloorDescriptor]:
        try:
            return await self._cache.get("floors", self._source.fetch_floors)
        except Exception as e:
            # Floors might not be available in older HA versions
            logger.debug("Floors unavailable: %s", e)
            return []

    async def get_labels(self) -> list[LabelDescriptor]:
        try:
            return await self._cache.get("labels", self._source.fetch_labels)
        except Exception as e:
            # Labels might not be available in older HA versions
            logger.debug("Labels unavailable: %s", e)
            return []

    # ------------------------------------------------------------------
    # Live queries
    # ------------------------------------------------------------------

    async def render_template(self, template: str) -> str:
        """Render a template against current runtime values. Never cached."""
        return await self._source.render_template(template)

    # ------------------------------------------------------------------
    # Cache management
    # ------------------------------------------------------------------

    def invalidate(self) -> None:
        """Clear all cached data, forcing re-fetch on next access."""
        self._cache.invalidate()

    async def warm_up(self) -> None:
        """Fetch the primary queries concurrently so the first keystroke is fast.

        Failures are logged and otherwise ignored.
        """
        if not self.connected:
            logger.info("No HA token - skipping cache warm-up")
            return

        names = ("states", "services", "areas", "devices")
        results = await asyncio.gather(
            self.get_states(),
            self.get_services(),
            self.get_areas(),
            self.get_devices(),
            return_exceptions=True,
        )
        failures = [
            f"{name}: {result}"
            for name, result in zip(names, results)
            if isinstance(result, BaseException)
        ]
        if failures:
            logger.error("Failed to warm cache: %s", "; ".join(failures))
        else:
            logger.info("HA cache warmed successfully")

    async def close(self) -> None:
        await self._source.close()
