"""Configuration validation using JSON Schema."""

from __future__ import annotations

from typing import Any, Dict

import jsonschema
from jsonschema import Draft7Validator

from exceptions import ConfigValidationError
from log_config.logger import get_logger

logger = get_logger(__name__)

_POSITIVE = {"type": "number", "exclusiveMinimum": 0}

# JSON Schema for default.yaml configuration
CONFIG_SCHEMA = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "implement": {"type": "string", "enum": ["men", "women", "youth-boys", "youth-girls"]},
        "velocity": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "max_residual_m": _POSITIVE,
                "residual_scale_m": _POSITIVE,
                "window_size": {"type": "integer", "minimum": 2, "maximum": 60},
                "confidence_mode": {"type": "string", "enum": ["residual", "r_squared"]},
            },
        },
        "segmentation": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "min_points": {"type": "integer", "minimum": 10},
                "release_window": {"type": "integer", "minimum": 1, "maximum": 30},
                "landing_offset": {"type": "integer", "minimum": 1},
                "landing_window": {"type": "integer", "minimum": 1, "maximum": 30},
                "stopped_threshold_px": _POSITIVE,
            },
        },
        "turns": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "min_points": {"type": "integer", "minimum": 3},
                "min_release_index": {"type": "integer", "minimum": 1},
                "partial_turn_min_deg": {"type": "number", "minimum": 0, "maximum": 360},
                "min_radius_m": _POSITIVE,
            },
        },
        "physics": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "gravity_m_s2": _POSITIVE,
                "air_density_kg_m3": {"type": "number", "minimum": 0},
                "drag_coefficient": {"type": "number", "minimum": 0, "maximum": 2.0},
                "time_step_s": {"type": "number", "exclusiveMinimum": 0, "maximum": 0.01},
                "max_flight_time_s": {"type": "number", "exclusiveMinimum": 0, "maximum": 60},
                "trace_interval_steps": {"type": "integer", "minimum": 1},
            },
        },
        "fusion": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "velocity_offset_frames": {"type": "integer", "minimum": 1},
                "angle_offset_frames": {"type": "integer", "minimum": 1},
                "min_post_release_frames": {"type": "integer", "minimum": 1},
                "stabilization_offset_frames": {"type": "integer", "minimum": 1},
                "stabilization_window": {"type": "integer", "minimum": 1},
                "stabilization_threshold_px": _POSITIVE,
                "gravity_m_s2": _POSITIVE,
            },
        },
        "calibration": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "circle_diameter_m": _POSITIVE,
                "fallback_width_m": _POSITIVE,
                "fallback_confidence": {"type": "number", "minimum": 0.0, "maximum": 1.0},
                "min_release_height_m": {"type": "number", "minimum": 0.0},
            },
        },
    },
}


def validate_config(config: Dict[str, Any]) -> None:
    """Validate configuration against JSON Schema.

    Args:
        config: Configuration dictionary

    Raises:
        ConfigValidationError: If configuration is invalid
    """
    try:
        Draft7Validator.check_schema(CONFIG_SCHEMA)
        validator = Draft7Validator(CONFIG_SCHEMA)
        errors = list(validator.iter_errors(config))

        if errors:
            error_messages = []
            for error in errors:
                path = " -> ".join(str(p) for p in error.path) if error.path else "root"
                error_messages.append(f"{path}: {error.message}")

            logger.error(f"Configuration validation failed with {len(errors)} errors")
            for msg in error_messages:
                logger.error(f"  - {msg}")

            raise ConfigValidationError(
                f"Configuration validation failed with {len(errors)} error(s). See logs for details.",
                validation_errors=error_messages,
            )

        logger.debug("Configuration validation passed")

    except jsonschema.exceptions.SchemaError as e:
        logger.error(f"Invalid schema: {e}")
        raise ConfigValidationError(f"Invalid schema definition: {e}")


__all__ = ["validate_config", "CONFIG_SCHEMA"]
