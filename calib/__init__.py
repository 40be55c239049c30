"""Calibration module."""

from .circle import CIRCLE_DIAMETER_M, calibration_from_circle, fallback_calibration

__all__ = ["CIRCLE_DIAMETER_M", "calibration_from_circle", "fallback_calibration"]
