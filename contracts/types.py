"""Core data contracts for calibration, tracking, and implements."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from exceptions import CalibrationError


@dataclass(frozen=True)
class Point:
    x: float
    y: float

    def distance_to(self, other: "Point") -> float:
        dx = self.x - other.x
        dy = self.y - other.y
        return float((dx * dx + dy * dy) ** 0.5)


@dataclass(frozen=True)
class TimedPoint:
    x: float
    y: float
    t: float  # seconds


@dataclass(frozen=True)
class CalibrationFrame:
    origin_pixel: Point  # throwing circle center in source video pixels
    pixels_per_meter: float
    confidence: float = 1.0

    def __post_init__(self) -> None:
        if not self.pixels_per_meter > 0:
            raise CalibrationError(f"pixels_per_meter must be positive, got {self.pixels_per_meter}")

    def to_meters(self, pixels: float) -> float:
        return pixels / self.pixels_per_meter

    def to_dict(self) -> Dict[str, Any]:
        return {
            "origin_pixel": {"x": self.origin_pixel.x, "y": self.origin_pixel.y},
            "pixels_per_meter": self.pixels_per_meter,
            "confidence": self.confidence,
        }


@dataclass(frozen=True)
class CircleDetection:
    center_x: float
    center_y: float
    radius_px: float
    confidence: float


class ImplementType(str, Enum):
    MEN = "men"
    WOMEN = "women"
    YOUTH_BOYS = "youth-boys"
    YOUTH_GIRLS = "youth-girls"


@dataclass(frozen=True)
class ImplementSpec:
    mass_kg: float
    diameter_mm: float
    name: str = "Custom"
    implement_type: Optional[ImplementType] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.implement_type.value if self.implement_type else None,
            "name": self.name,
            "mass_kg": self.mass_kg,
            "diameter_mm": self.diameter_mm,
        }


IMPLEMENTS: Dict[ImplementType, ImplementSpec] = {
    ImplementType.MEN: ImplementSpec(7.26, 110.0, "Men's", ImplementType.MEN),
    ImplementType.WOMEN: ImplementSpec(4.0, 95.0, "Women's", ImplementType.WOMEN),
    ImplementType.YOUTH_BOYS: ImplementSpec(5.0, 100.0, "Youth Boys'", ImplementType.YOUTH_BOYS),
    ImplementType.YOUTH_GIRLS: ImplementSpec(3.0, 85.0, "Youth Girls'", ImplementType.YOUTH_GIRLS),
}


def build_tracked_trajectory(
    pixels: Iterable[Union[Tuple[float, float], Point]],
    fps: float,
    frame_step: int = 1,
) -> List[TimedPoint]:
    """Attach capture timestamps to pixel positions sampled every frame_step frames."""
    if fps <= 0:
        raise ValueError(f"fps must be positive, got {fps}")
    if frame_step < 1:
        raise ValueError(f"frame_step must be >= 1, got {frame_step}")
    dt = frame_step / fps
    points: List[TimedPoint] = []
    for index, pixel in enumerate(pixels):
        if isinstance(pixel, Point):
            x, y = pixel.x, pixel.y
        else:
            x, y = pixel
        points.append(TimedPoint(x=float(x), y=float(y), t=index * dt))
    return points

