"""Trajectory estimation contracts."""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from contracts import Point, TimedPoint

GRAVITY_M_S2 = 9.81
AIR_DENSITY_KG_M3 = 1.225
# Above a bare sphere's ~0.47 to cover parasitic drag from the wire and handle.
DRAG_COEFFICIENT = 0.62
TIME_STEP_S = 0.001
MAX_FLIGHT_TIME_S = 10.0


class FailureCode(str, Enum):
    INSUFFICIENT_POINTS = "INSUFFICIENT_POINTS"
    DEGENERATE_FIT = "DEGENERATE_FIT"
    RELEASE_NOT_FOUND = "RELEASE_NOT_FOUND"
    LANDING_NOT_FOUND = "LANDING_NOT_FOUND"
    SIMULATION_CLAMPED = "SIMULATION_CLAMPED"
    NO_COMPARISON_BASIS = "NO_COMPARISON_BASIS"


class ConfidenceMode(str, Enum):
    RESIDUAL = "residual"
    R_SQUARED = "r_squared"


@dataclass(frozen=True)
class VelocityFitParams:
    max_residual_m: float = 0.15
    residual_scale_m: float = 0.3
    window_size: int = 6
    confidence_mode: ConfidenceMode = ConfidenceMode.RESIDUAL


@dataclass(frozen=True)
class SegmentationParams:
    min_points: int = 10
    release_window: int = 5
    landing_offset: int = 10
    landing_window: int = 3
    stopped_threshold_px: float = 2.0


@dataclass(frozen=True)
class TurnParams:
    min_points: int = 12
    min_release_index: int = 8
    partial_turn_min_deg: float = 90.0
    min_radius_m: float = 1e-6


@dataclass(frozen=True)
class SimulationParams:
    gravity_m_s2: float = GRAVITY_M_S2
    air_density_kg_m3: float = AIR_DENSITY_KG_M3
    drag_coefficient: float = DRAG_COEFFICIENT
    time_step_s: float = TIME_STEP_S
    max_flight_time_s: float = MAX_FLIGHT_TIME_S
    trace_interval_steps: int = 100


@dataclass(frozen=True)
class FusionParams:
    velocity_offset_frames: int = 3
    angle_offset_frames: int = 2
    min_post_release_frames: int = 5
    stabilization_offset_frames: int = 5
    stabilization_window: int = 3
    stabilization_threshold_px: float = 5.0
    gravity_m_s2: float = GRAVITY_M_S2


@dataclass(frozen=True)
class VelocityEstimate:
    vx: float
    vy: float
    confidence: float
    x0: float = 0.0
    y0: float = 0.0
    inlier_count: int = 0
    rejected_count: int = 0

    @property
    def speed(self) -> float:
        return math.hypot(self.vx, self.vy)

    @property
    def angle_deg(self) -> float:
        return math.degrees(math.atan2(self.vy, self.vx))

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["speed"] = self.speed
        data["angle_deg"] = self.angle_deg
        return data


@dataclass(frozen=True)
class ReleaseState:
    release_index: int
    position: Point
    velocity: VelocityEstimate
    release_height_m: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "release_index": self.release_index,
            "position": {"x": self.position.x, "y": self.position.y},
            "velocity": self.velocity.to_dict(),
            "release_height_m": self.release_height_m,
        }


@dataclass(frozen=True)
class SimulationResult:
    distance_m: float
    flight_time_s: float
    max_height_m: float
    landing_velocity_m_s: float
    trajectory: List[TimedPoint]
    clamped: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "distance_m": self.distance_m,
            "flight_time_s": self.flight_time_s,
            "max_height_m": self.max_height_m,
            "landing_velocity_m_s": self.landing_velocity_m_s,
            "clamped": self.clamped,
            "trajectory": [sample.__dict__ for sample in self.trajectory],
        }


@dataclass(frozen=True)
class TwoPointResult:
    velocity: float
    angle: float
    distance: float
    simulation: Optional[SimulationResult] = None


@dataclass(frozen=True)
class ThrowSegments:
    release_index: Optional[int]
    landing_index: Optional[int]
    point_count: int
    failure_codes: List[FailureCode] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return self.release_index is not None and self.landing_index is not None

    def swing(self, points: List[TimedPoint]) -> List[TimedPoint]:
        if self.release_index is None:
            return []
        return points[: self.release_index + 1]

    def flight(self, points: List[TimedPoint]) -> List[TimedPoint]:
        if not self.complete:
            return []
        return points[self.release_index : self.landing_index + 1]

    def rest(self, points: List[TimedPoint]) -> List[TimedPoint]:
        if self.landing_index is None:
            return []
        return points[self.landing_index :]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "release_index": self.release_index,
            "landing_index": self.landing_index,
            "point_count": self.point_count,
            "failure_codes": [code.value for code in self.failure_codes],
        }


@dataclass(frozen=True)
class TurnMetrics:
    turn_number: int
    start_index: int
    end_index: int
    duration_sec: float
    avg_tangential_velocity: float
    peak_tangential_velocity: float
    avg_tangential_acceleration: float
    peak_tangential_acceleration: float
    avg_centripetal_acceleration: float
    peak_centripetal_acceleration: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ThrowResult:
    tracked_distance: float
    predicted_distance: float
    distance_confidence: float
    release_angle: float
    release_velocity: float
    flight_time: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class ViewType(str, Enum):
    SIDE = "side"
    ANGLED = "angled"


@dataclass(frozen=True)
class CameraView:
    view_type: ViewType
    confidence: float

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.view_type.value, "confidence": self.confidence}
