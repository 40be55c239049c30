"""Configuration loading for hammer throw analysis."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from configs.validator import validate_config
from contracts import IMPLEMENTS, ImplementSpec, ImplementType
from exceptions import ConfigError, InvalidConfigError
from log_config.logger import get_logger
from trajectory.contracts import (
    ConfidenceMode,
    FusionParams,
    SegmentationParams,
    SimulationParams,
    TurnParams,
    VelocityFitParams,
)

logger = get_logger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).with_name("default.yaml")


@dataclass(frozen=True)
class CalibrationConfig:
    circle_diameter_m: float = 2.135
    fallback_width_m: float = 10.0
    fallback_confidence: float = 0.7
    min_release_height_m: float = 0.5


@dataclass(frozen=True)
class AppConfig:
    velocity: VelocityFitParams = field(default_factory=VelocityFitParams)
    segmentation: SegmentationParams = field(default_factory=SegmentationParams)
    turns: TurnParams = field(default_factory=TurnParams)
    physics: SimulationParams = field(default_factory=SimulationParams)
    fusion: FusionParams = field(default_factory=FusionParams)
    calibration: CalibrationConfig = field(default_factory=CalibrationConfig)
    implement: ImplementType = ImplementType.MEN

    @property
    def implement_spec(self) -> ImplementSpec:
        return IMPLEMENTS[self.implement]


def load_config(path: Optional[Path] = None) -> AppConfig:
    """Load and validate configuration from YAML file.

    Args:
        path: Path to configuration file (defaults to the bundled default.yaml)

    Returns:
        Validated AppConfig instance

    Raises:
        ConfigError: If configuration is invalid or cannot be loaded
    """
    path = path or DEFAULT_CONFIG_PATH
    try:
        logger.info(f"Loading configuration from {path}")
        if not path.exists():
            raise InvalidConfigError(f"Configuration file not found: {path}")

        data = yaml.safe_load(path.read_text()) or {}

        # Validate against JSON Schema
        validate_config(data)

        logger.debug("Parsing configuration sections")

    except yaml.YAMLError as e:
        logger.error(f"Failed to parse YAML configuration: {e}")
        raise InvalidConfigError(f"Failed to parse configuration file: {e}")

    try:
        velocity_data = dict(data.get("velocity", {}))
        if "confidence_mode" in velocity_data:
            velocity_data["confidence_mode"] = ConfidenceMode(velocity_data["confidence_mode"])

        config = AppConfig(
            velocity=VelocityFitParams(**velocity_data),
            segmentation=SegmentationParams(**data.get("segmentation", {})),
            turns=TurnParams(**data.get("turns", {})),
            physics=SimulationParams(**data.get("physics", {})),
            fusion=FusionParams(**data.get("fusion", {})),
            calibration=CalibrationConfig(**data.get("calibration", {})),
            implement=ImplementType(data.get("implement", ImplementType.MEN.value)),
        )

        logger.info(
            f"Configuration loaded successfully: {config.implement.value} implement, "
            f"Cd={config.physics.drag_coefficient}, dt={config.physics.time_step_s}s"
        )
        return config

    except ConfigError:
        raise
    except (TypeError, ValueError) as e:
        logger.error(f"Failed to construct configuration objects: {e}")
        raise InvalidConfigError(f"Failed to construct configuration: {e}")
