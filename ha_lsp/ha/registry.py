"""Registry and state queries for Home Assistant.

Provides the read-only queries the language server needs: entity
states, the service catalog, template rendering, and the
template-driven area/device/floor/label enumerations.
"""

import json
from typing import Any

from ha_lsp.exceptions import HAClientError
from ha_lsp.ha.constants import (
    AREAS_TEMPLATE,
    DEVICES_TEMPLATE,
    FLOORS_TEMPLATE,
    LABELS_TEMPLATE,
)
from ha_lsp.ha.models import (
    AreaDescriptor,
    DeviceDescriptor,
    EntitySnapshot,
    FloorDescriptor,
    LabelDescriptor,
    ServiceDescriptor,
)


class RegistryMixin:
    """Mixin providing state, service and registry queries."""

    async def fetch_states(self) -> list[EntitySnapshot]:
        """Fetch every entity state.

        Returns:
            List of entity snapshots

        Raises:
            HAClientError: If the states endpoint fails or returns garbage
        """
        states = await self._request("GET", "/states")  # type: ignore[attr-defined]
        if not isinstance(states, list):
            raise HAClientError("Failed to list entity states", "fetch_states")
        return [EntitySnapshot.from_state(s) for s in states if s.get("entity_id")]

    async def fetch_entity_state(self, entity_id: str) -> EntitySnapshot | None:
        """Fetch a single entity state, or None if HA does not know it."""
        state = await self._request("GET", f"/states/{entity_id}")  # type: ignore[attr-defined]
        if not isinstance(state, dict):
            return None
        return EntitySnapshot.from_state(state)

    async def fetch_services(self) -> list[ServiceDescriptor]:
        """Fetch the service catalog, flattened to one descriptor per service."""
        catalog = await self._request("GET", "/services")  # type: ignore[attr-defined]
        if not isinstance(catalog, list):
            raise HAClientError("Failed to list services", "fetch_services")
        return ServiceDescriptor.from_catalog(catalog)

    async def render_template(self, template: str) -> str:
        """Render a template against the live HA state.

        Args:
            template: Jinja2 template source

        Returns:
            The rendered text

        Raises:
            HAClientError: If HA rejects the template (the message carries HA's error)
        """
        result = await self._request(  # type: ignore[attr-defined]
            "POST", "/template", json={"template": template}
        )
        if result is None:
            raise HAClientError("Template endpoint not available", "render_template")
        if isinstance(result, str):
            return result
        return json.dumps(result)

    async def _render_json_list(self, template: str, tool: str) -> list[dict[str, Any]]:
        """Render a ``tojson`` template and decode the resulting list."""
        rendered = await self.render_template(template)
        try:
            data = json.loads(rendered)
        except json.JSONDecodeError as e:
            raise HAClientError(f"Unexpected template output: {rendered[:100]}", tool) from e
        if not isinstance(data, list):
            raise HAClientError("Template did not produce a list", tool)
        return [item for item in data if isinstance(item, dict) and item.get("id")]

    async def fetch_areas(self) -> list[AreaDescriptor]:
        items = await self._render_json_list(AREAS_TEMPLATE, "fetch_areas")
        return [AreaDescriptor(id=i["id"], name=i.get("name") or i["id"]) for i in items]

    async def fetch_devices(self) -> list[DeviceDescriptor]:
        items = await self._render_json_list(DEVICES_TEMPLATE, "fetch_devices")
        return [
            DeviceDescriptor(id=i["id"], name=i.get("name") or i["id"], area_id=i.get("area"))
            for i in items
        ]

    async def fetch_floors(self) -> list[FloorDescriptor]:
        items = await self._render_json_list(FLOORS_TEMPLATE, "fetch_floors")
        return [FloorDescriptor(id=i["id"], name=i.get("name") or i["id"]) for i in items]

    async def fetch_labels(self) -> list[LabelDescriptor]:
        items = await self._render_json_list(LABELS_TEMPLATE, "fetch_labels")
        return [LabelDescriptor(id=i["id"], name=i.get("name") or i["id"]) for i in items]
