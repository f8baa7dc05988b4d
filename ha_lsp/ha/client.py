"""Runtime data source: connected and disconnected variants.

The language server never checks for a token itself. It is handed a
``RuntimeDataSource`` once, at session start:

- ``HAClient`` talks to the HA REST API with the configured bearer token.
- ``DisconnectedClient`` is the no-op stand-in used when no token is
  configured. Registry queries answer with empty lists; template
  rendering raises ``NotConnectedError``.

Usage:
    source = create_data_source(get_settings())
    states = await source.fetch_states()
"""

import logging
from typing import Protocol

from ha_lsp.exceptions import NotConnectedError
from ha_lsp.ha.base import BaseHAClient, HAClientConfig
from ha_lsp.ha.models import (
    AreaDescriptor,
    DeviceDescriptor,
    EntitySnapshot,
    FloorDescriptor,
    LabelDescriptor,
    ServiceDescriptor,
)
from ha_lsp.ha.registry import RegistryMixin
from ha_lsp.settings import Settings

__all__ = [
    "DisconnectedClient",
    "HAClient",
    "HAClientConfig",
    "RuntimeDataSource",
    "create_data_source",
]

logger = logging.getLogger(__name__)


class RuntimeDataSource(Protocol):
    """What the cache needs from the runtime."""

    connected: bool

    async def fetch_states(self) -> list[EntitySnapshot]: ...

    async def fetch_entity_state(self, entity_id: str) -> EntitySnapshot | None: ...

    async def fetch_services(self) -> list[ServiceDescriptor]: ...

    async def fetch_areas(self) -> list[AreaDescriptor]: ...

    async def fetch_devices(self) -> list[DeviceDescriptor]: ...

    async def fetch_floors(self) -> list[FloorDescriptor]: ...

    async def fetch_labels(self) -> list[LabelDescriptor]: ...

    async def render_template(self, template: str) -> str: ...

    async def close(self) -> None: ...


class HAClient(BaseHAClient, RegistryMixin):
    """Client for the Home Assistant REST API.

    Usage:
        client = HAClient(HAClientConfig(api_url="http://ha:8123/api", token="..."))
        services = await client.fetch_services()
    """

    pass


class DisconnectedClient:
    """No-op data source for sessions without an HA credential."""

    connected = False

    async def fetch_states(self) -> list[EntitySnapshot]:
        return []

    async def fetch_entity_state(self, entity_id: str) -> EntitySnapshot | None:
        return None

    async def fetch_services(self) -> list[ServiceDescriptor]:
        return []

    async def fetch_areas(self) -> list[AreaDescriptor]:
        return []

    async def fetch_devices(self) -> list[DeviceDescriptor]:
        return []

    async def fetch_floors(self) -> list[FloorDescriptor]:
        return []

    async def fetch_labels(self) -> list[LabelDescriptor]:
        return []

    async def render_template(self, template: str) -> str:
        raise NotConnectedError("No Home Assistant token configured", "render_template")

    async def close(self) -> None:
        return None


def create_data_source(settings: Settings) -> RuntimeDataSource:
    """Pick the data source variant for the configured credential.

    Args:
        settings: Application settings

    Returns:
        ``HAClient`` when a token is present, ``DisconnectedClient`` otherwise.
    """
    if not settings.has_token:
        logger.info("No HA token configured - live features disabled")
        return DisconnectedClient()
    logger.info("HA token available - live features enabled (%s)", settings.ha_api_url)
    return HAClient(HAClientConfig.from_settings(settings))
