"""Template expressions used to enumerate registries.

The REST API has no list endpoint for areas, devices, floors or labels,
so they are read by rendering a template that serialises the registry
with ``tojson``.

HA Gap: No REST registry endpoints for areas/devices/floors/labels.
Workaround: Render these templates through ``POST /api/template``.
"""

AREAS_TEMPLATE = (
    "{% set area_list = [] %}"
    "{% for area in areas() %}"
    "{% set area_list = area_list + [{'id': area, 'name': area_name(area)}] %}"
    "{% endfor %}"
    "{{ area_list | tojson }}"
)

DEVICES_TEMPLATE = (
    "{% set device_list = [] %}"
    "{% for device in devices() %}"
    "{% set device_list = device_list + [{'id': device, "
    "'name': device_attr(device, 'name'), "
    "'area': device_attr(device, 'area_id')}] %}"
    "{% endfor %}"
    "{{ device_list | tojson }}"
)

# floors() and labels() only exist on HA 2024.4+
FLOORS_TEMPLATE = (
    "{% set floor_list = [] %}"
    "{% for floor in floors() %}"
    "{% set floor_list = floor_list + [{'id': floor, 'name': floor_name(floor)}] %}"
    "{% endfor %}"
    "{{ floor_list | tojson }}"
)

LABELS_TEMPLATE = (
    "{% set label_list = [] %}"
    "{% for label in labels() %}"
    "{% set label_list = label_list + [{'id': label, 'name': label_name(label)}] %}"
    "{% endfor %}"
    "{{ label_list | tojson }}"
)
