"""Typed snapshots of Home Assistant runtime data.

All models are frozen: a cache refresh replaces them wholesale,
it never mutates an instance other readers may hold.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class EntitySnapshot(BaseModel):
    """State of a single entity as reported by ``/api/states``."""

    model_config = ConfigDict(frozen=True)

    entity_id: str
    state: str = "unknown"
    attributes: dict[str, Any] = Field(default_factory=dict)
    last_changed: str | None = None
    last_updated: str | None = None

    @classmethod
    def from_state(cls, raw: dict[str, Any]) -> "EntitySnapshot":
        return cls(
            entity_id=raw.get("entity_id", ""),
            state=str(raw.get("state", "unknown")),
            attributes=raw.get("attributes") or {},
            last_changed=raw.get("last_changed"),
            last_updated=raw.get("last_updated"),
        )

    @property
    def domain(self) -> str:
        return self.entity_id.split(".", 1)[0]

    @property
    def friendly_name(self) -> str:
        return str(self.attributes.get("friendly_name") or self.entity_id)

    @property
    def device_class(self) -> str | None:
        return self.attributes.get("device_class")

    @property
    def unit(self) -> str | None:
        return self.attributes.get("unit_of_measurement")


class ServiceField(BaseModel):
    """A single input field of a service."""

    model_config = ConfigDict(frozen=True)

    description: str = ""
    required: bool = False


class ServiceDescriptor(BaseModel):
    """A callable service (action), e.g. ``light.turn_on``."""

    model_config = ConfigDict(frozen=True)

    domain: str
    service: str
    name: str
    description: str = ""
    fields: dict[str, ServiceField] = Field(default_factory=dict)
    target: bool = False

    @property
    def full_name(self) -> str:
        return f"{self.domain}.{self.service}"

    @classmethod
    def from_catalog(cls, catalog: list[dict[str, Any]]) -> list["ServiceDescriptor"]:
        """Flatten the domain-grouped ``/api/services`` payload.

        Args:
            catalog: List of ``{"domain": ..., "services": {name: info}}`` entries.

        Returns:
            One descriptor per service, in catalog order.
        """
        descriptors = []
        for domain_entry in catalog:
            domain = domain_entry.get("domain", "")
            if not domain:
                continue
            for service_name, info in (domain_entry.get("services") or {}).items():
                info = info or {}
                fields = {
                    field_name: ServiceField(
                        description=(spec or {}).get("description") or "",
                        required=bool((spec or {}).get("required", False)),
                    )
                    for field_name, spec in (info.get("fields") or {}).items()
                }
                descriptors.append(
                    cls(
                        domain=domain,
                        service=service_name,
                        name=info.get("name") or service_name,
                        description=info.get("description") or "",
                        fields=fields,
                        target=bool(info.get("target")),
                    )
                )
        return descriptors


class AreaDescriptor(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str


class DeviceDescriptor(BaseModel):
    """A device; ``area_id`` is a lookup key into the area list, not ownership."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    area_id: str | None = None


class FloorDescriptor(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str


class LabelDescriptor(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
