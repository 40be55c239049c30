"""Scale calibration from the detected throwing circle."""

from __future__ import annotations

from contracts import CalibrationFrame, CircleDetection, Point
from exceptions import InvalidCircleError
from log_config.logger import get_logger

logger = get_logger(__name__)

# Inside diameter of a regulation hammer throwing circle.
CIRCLE_DIAMETER_M = 2.135
FALLBACK_WIDTH_M = 10.0
FALLBACK_CONFIDENCE = 0.7


def calibration_from_circle(
    circle: CircleDetection,
    circle_diameter_m: float = CIRCLE_DIAMETER_M,
) -> CalibrationFrame:
    """Scale factor from the circle's pixel diameter, origin at its center."""
    if circle.radius_px <= 0:
        logger.error(f"Circle detection has non-positive radius {circle.radius_px}")
        raise InvalidCircleError(f"Circle radius must be positive, got {circle.radius_px}")
    pixels_per_meter = 2.0 * circle.radius_px / circle_diameter_m
    logger.debug(
        f"Calibrated from circle at ({circle.center_x:.1f}, {circle.center_y:.1f}): {pixels_per_meter:.2f} px/m"
    )
    return CalibrationFrame(
        origin_pixel=Point(circle.center_x, circle.center_y),
        pixels_per_meter=pixels_per_meter,
        confidence=circle.confidence,
    )


def fallback_calibration(
    frame_width: int,
    frame_height: int,
    visible_width_m: float = FALLBACK_WIDTH_M,
    confidence: float = FALLBACK_CONFIDENCE,
) -> CalibrationFrame:
    """Assume the frame spans a fixed width and the circle sits at its center."""
    logger.warning(f"No circle detected, assuming the {frame_width}px frame spans {visible_width_m:.1f}m")
    return CalibrationFrame(
        origin_pixel=Point(frame_width / 2.0, frame_height / 2.0),
        pixels_per_meter=frame_width / visible_width_m,
        confidence=confidence,
    )
