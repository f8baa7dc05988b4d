"""Home Assistant runtime access for the language server.

Provides the REST client, its disconnected stand-in, typed snapshots
of runtime data, and the stale-tolerant cache in front of them.
"""

from ha_lsp.ha.cache import RuntimeDataCache, TTLCache
from ha_lsp.ha.client import (
    DisconnectedClient,
    HAClient,
    HAClientConfig,
    RuntimeDataSource,
    create_data_source,
)
from ha_lsp.ha.models import (
    AreaDescriptor,
    DeviceDescriptor,
    EntitySnapshot,
    FloorDescriptor,
    LabelDescriptor,
    ServiceDescriptor,
    ServiceField,
)

__all__ = [
    "AreaDescriptor",
    "DeviceDescriptor",
    "DisconnectedClient",
    "EntitySnapshot",
    "FloorDescriptor",
    "HAClient",
    "HAClientConfig",
    "LabelDescriptor",
    "RuntimeDataCache",
    "RuntimeDataSource",
    "ServiceDescriptor",
    "ServiceField",
    "TTLCache",
    "create_data_source",
]
