"""Shared data contracts for hammer throw analysis."""

from .types import (
    IMPLEMENTS,
    CalibrationFrame,
    CircleDetection,
    ImplementSpec,
    ImplementType,
    Point,
    TimedPoint,
    build_tracked_trajectory,
)

__all__ = [
    "IMPLEMENTS",
    "CalibrationFrame",
    "CircleDetection",
    "ImplementSpec",
    "ImplementType",
    "Point",
    "TimedPoint",
    "build_tracked_trajectory",
]
