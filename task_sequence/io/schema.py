"""JSON schema for plan configuration structure validation."""

from __future__ import annotations

PLAN_SCHEMA: dict = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "title": "Task Sequence Plan Config",
    "type": "object",
    "required": ["version", "events", "sim"],
    "properties": {
        "version": {"type": "string"},
        "constraints": {
            "type": "object",
            "properties": {
                "drain_battery": {"type": "boolean"},
                "threshold_soc": {"type": "number", "minimum": 0, "maximum": 1},
            },
            "additionalProperties": False,
        },
        "ambient_sink": {
            "type": "object",
            "required": ["name"],
            "properties": {
                "name": {"type": "string", "minLength": 1},
                "params": {
                    "type": "object",
                    "default": {},
                    "properties": {
                        "nominal_power": {"type": "number", "minimum": 0},
                        "nominal_voltage": {"type": "number", "exclusiveMinimum": 0},
                        "capacity": {"type": "number", "exclusiveMinimum": 0},
                        "drain_per_second": {"type": "number", "minimum": 0},
                    },
                },
            },
            "additionalProperties": False,
        },
        "confirmation": {
            "type": "object",
            "properties": {
                "source": {"type": "string", "minLength": 1},
                "params": {
                    "type": "object",
                    "default": {},
                    "properties": {
                        "confirm_after": {"type": ["integer", "null"], "minimum": 1},
                        "request_topic": {"type": "string", "minLength": 1},
                        "response_topic": {"type": "string", "minLength": 1},
                    },
                },
            },
            "additionalProperties": False,
        },
        "initial_state": {
            "type": "object",
            "properties": {
                "time": {"type": ["number", "null"], "minimum": 0},
                "battery_soc": {"type": ["number", "null"], "minimum": 0, "maximum": 1},
                "waypoint": {"type": ["string", "null"]},
            },
            "additionalProperties": False,
        },
        "events": {
            "type": "array",
            "minItems": 1,
            "items": {"$ref": "#/$defs/Event"},
        },
        "confirmations": {
            "type": "array",
            "items": {"$ref": "#/$defs/Confirmation"},
            "default": [],
        },
        "sim": {
            "type": "object",
            "required": ["duration"],
            "properties": {
                "duration": {"type": "number", "exclusiveMinimum": 0},
                "poll_period": {"type": ["number", "null"], "exclusiveMinimum": 0},
                "seed": {"type": "integer"},
            },
            "additionalProperties": False,
        },
    },
    "additionalProperties": False,
    "$defs": {
        "Event": {
            "type": "object",
            "required": ["id", "initial_wait_duration", "timeout_duration"],
            "properties": {
                "id": {"type": "string", "minLength": 1},
                "type": {"type": "string", "enum": ["wait_for_confirmation"]},
                "initial_wait_duration": {"type": "number"},
                "timeout_duration": {"type": "number"},
            },
            "additionalProperties": False,
        },
        "Confirmation": {
            "type": "object",
            "required": ["event_id", "at"],
            "properties": {
                "event_id": {"type": "string", "minLength": 1},
                "at": {"type": "number", "minimum": 0},
            },
            "additionalProperties": False,
        },
    },
}
