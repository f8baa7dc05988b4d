"""Static Home Assistant vocabulary offered by completion.

Each table maps a label to its one-line detail, in display order.
"""

# Value keys that take live runtime identifiers
ENTITY_KEYS = frozenset({"entity_id", "entity", "entities"})
SERVICE_KEYS = frozenset({"service", "action"})
AREA_KEYS = frozenset({"area_id", "area"})
DEVICE_KEYS = frozenset({"device_id", "device"})
FLOOR_KEYS = frozenset({"floor_id", "floor"})
LABEL_KEYS = frozenset({"label_id", "label"})

# Template functions whose first argument is an entity ID
ENTITY_LOOKUP_FUNCTIONS = ("states", "is_state", "state_attr", "is_state_attr")

TRIGGER_PLATFORMS: dict[str, str] = {
    "state": "Trigger on entity state change",
    "numeric_state": "Trigger on numeric threshold",
    "time": "Trigger at specific time",
    "time_pattern": "Trigger on time pattern",
    "sun": "Trigger at sunrise/sunset",
    "zone": "Trigger on zone enter/leave",
    "device": "Device trigger",
    "mqtt": "MQTT message trigger",
    "webhook": "Webhook trigger",
    "event": "Event trigger",
    "homeassistant": "HA start/stop trigger",
    "template": "Template trigger",
    "calendar": "Calendar event trigger",
    "geo_location": "Geo location trigger",
    "conversation": "Voice assistant trigger",
    "persistent_notification": "Notification trigger",
}

CONDITION_TYPES: dict[str, str] = {
    "state": "Entity state condition",
    "numeric_state": "Numeric state condition",
    "time": "Time window condition",
    "sun": "Sun position condition",
    "zone": "Zone condition",
    "template": "Template condition",
    "device": "Device condition",
    "and": "All conditions must be true",
    "or": "Any condition must be true",
    "not": "Condition must be false",
    "trigger": "Check which trigger fired",
}

AUTOMATION_KEYS: dict[str, str] = {
    "alias": "Friendly name for the automation",
    "description": "Description of the automation",
    "trigger": "Trigger conditions",
    "triggers": "Trigger conditions",
    "condition": "Conditions to check",
    "conditions": "Conditions to check",
    "action": "Actions to perform",
    "actions": "Actions to perform",
    "mode": "Execution mode (single, restart, queued, parallel)",
    "max": "Max concurrent runs (for queued/parallel)",
    "max_exceeded": "Action when max exceeded",
    "variables": "Variables available in automation",
    "trace": "Trace configuration",
}

TRIGGER_KEYS: dict[str, str] = {
    "platform": "Trigger platform type",
    "trigger": "Trigger platform type",
    "entity_id": "Entity to monitor",
    "to": "State to transition to",
    "from": "State to transition from",
    "for": "Duration in state",
    "attribute": "Attribute to monitor",
    "id": "Trigger identifier",
    "variables": "Trigger-local variables",
}

ACTION_KEYS: dict[str, str] = {
    "service": "Service to call",
    "action": "Action to call (alias for service)",
    "target": "Target entities/areas/devices",
    "data": "Service data",
    "entity_id": "Entity ID (in target)",
    "delay": "Delay before next action",
    "wait_template": "Wait for template to be true",
    "wait_for_trigger": "Wait for trigger",
    "repeat": "Repeat actions",
    "choose": "Conditional actions",
    "if": "If-then-else",
    "parallel": "Run actions in parallel",
    "sequence": "Sequence of actions",
    "variables": "Set variables",
    "stop": "Stop execution",
    "event": "Fire event",
}

# label -> (detail, snippet)
TEMPLATE_FUNCTIONS: dict[str, tuple[str, str]] = {
    "states": ("Get entity state", "states('$1')"),
    "is_state": ("Check entity state", "is_state('$1', '$2')"),
    "state_attr": ("Get entity attribute", "state_attr('$1', '$2')"),
    "is_state_attr": ("Check entity attribute", "is_state_attr('$1', '$2', '$3')"),
    "now": ("Current datetime", "now()"),
    "today_at": ("Time today", "today_at('$1')"),
    "as_timestamp": ("Convert to timestamp", "as_timestamp($1)"),
    "relative_time": ("Human-readable time diff", "relative_time($1)"),
    "float": ("Convert to float", "float($1)"),
    "int": ("Convert to int", "int($1)"),
    "area_entities": ("Get area entities", "area_entities('$1')"),
    "area_devices": ("Get area devices", "area_devices('$1')"),
    "device_entities": ("Get device entities", "device_entities('$1')"),
    "device_attr": ("Get device attribute", "device_attr('$1', '$2')"),
    "floor_areas": ("Get floor areas", "floor_areas('$1')"),
    "label_entities": ("Get label entities", "label_entities('$1')"),
}
