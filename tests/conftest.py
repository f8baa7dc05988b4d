"""Shared test fixtures for ha-lsp.

Provides settings, canned runtime data and a mocked data source
behind a real RuntimeDataCache.
"""

from unittest.mock import AsyncMock

import pytest
from pydantic import SecretStr

from ha_lsp.ha.cache import RuntimeDataCache
from ha_lsp.ha.client import DisconnectedClient
from ha_lsp.ha.models import (
    AreaDescriptor,
    DeviceDescriptor,
    EntitySnapshot,
    FloorDescriptor,
    LabelDescriptor,
    ServiceDescriptor,
    ServiceField,
)
from ha_lsp.settings import Settings

# =============================================================================
# SETTINGS
# =============================================================================


@pytest.fixture
def test_settings() -> Settings:
    """Provide test settings with safe defaults."""
    return Settings(
        environment="testing",
        ha_api_url="http://ha.test/api",
        ha_token=SecretStr("test-token"),
        diagnostics_debounce_seconds=0.01,
    )


# =============================================================================
# RUNTIME DATA
# =============================================================================


@pytest.fixture
def entity_states() -> list[EntitySnapshot]:
    return [
        EntitySnapshot(
            entity_id="light.kitchen",
            state="on",
            attributes={"friendly_name": "Kitchen Light", "brightness": 255},
            last_changed="2026-01-01T00:00:00+00:00",
        ),
        EntitySnapshot(
            entity_id="switch.linked_kitchen",
            state="off",
            attributes={"friendly_name": "Linked Kitchen Switch"},
        ),
        EntitySnapshot(
            entity_id="sensor.temperature",
            state="21.5",
            attributes={
                "friendly_name": "Temperature",
                "device_class": "temperature",
                "unit_of_measurement": "°C",
            },
        ),
    ]


@pytest.fixture
def services() -> list[ServiceDescriptor]:
    return [
        ServiceDescriptor(
            domain="light",
            service="turn_on",
            name="Turn on",
            description="Turn on one or more lights.",
            fields={
                "brightness": ServiceField(description="Brightness level"),
                "entity_id": ServiceField(description="Lights to turn on", required=True),
            },
            target=True,
        ),
        ServiceDescriptor(domain="light", service="turn_off", name="Turn off"),
        ServiceDescriptor(domain="switch", service="turn_on", name="Turn on"),
        ServiceDescriptor(domain="script", service="reload", name="Reload"),
    ]


@pytest.fixture
def mock_source(entity_states, services) -> AsyncMock:
    """Connected data source answering from canned runtime data."""
    source = AsyncMock()
    source.connected = True
    source.fetch_states.return_value = entity_states
    source.fetch_entity_state.return_value = None
    source.fetch_services.return_value = services
    source.fetch_areas.return_value = [
        AreaDescriptor(id="kitchen", name="Kitchen"),
        AreaDescriptor(id="living_room", name="Living Room"),
    ]
    source.fetch_devices.return_value = [
        DeviceDescriptor(id="abc123", name="Hue Bridge", area_id="kitchen"),
    ]
    source.fetch_floors.return_value = [FloorDescriptor(id="ground", name="Ground Floor")]
    source.fetch_labels.return_value = [LabelDescriptor(id="critical", name="Critical")]
    source.render_template.return_value = "21.5"
    return source


@pytest.fixture
def cache(mock_source) -> RuntimeDataCache:
    return RuntimeDataCache(mock_source)


@pytest.fixture
def disconnected_cache() -> RuntimeDataCache:
    return RuntimeDataCache(DisconnectedClient())
