"""Fuse tracked and physics-predicted landing distance into one result."""

from __future__ import annotations

import math
from typing import Optional, Sequence

from contracts import CalibrationFrame, Point, TimedPoint
from exceptions import InsufficientDataError, MissingAnchorError
from log_config.logger import get_logger
from trajectory.confidence import ConfidenceScorer
from trajectory.contracts import FusionParams, ThrowResult
from trajectory.physics import vacuum_range

logger = get_logger(__name__)


def fold_launch_angle(angle_deg: float) -> float:
    """Fold any direction into the upward launch quadrant [0, 90]."""
    angle = abs(angle_deg)
    if angle > 90.0:
        angle = 180.0 - angle
    return angle


class DistanceFuser:
    """Cross-check the observed landing distance against a range prediction.

    Release speed and angle come from short finite differences right after
    release rather than the windowed regression, and the predicted distance
    uses the drag-free range equation, so this estimator stays independent of
    the drag simulator.
    """

    def __init__(
        self,
        params: Optional[FusionParams] = None,
        scorer: Optional[ConfidenceScorer] = None,
    ) -> None:
        self._params = params or FusionParams()
        self._scorer = scorer or ConfidenceScorer()

    def fuse(
        self,
        points: Sequence[TimedPoint],
        release_index: Optional[int],
        landing_index: Optional[int],
        calibration: CalibrationFrame,
        fps: float,
        frame_step: int = 1,
    ) -> ThrowResult:
        self._check_anchors(points, release_index, landing_index)
        params = self._params
        if len(points) <= release_index + params.min_post_release_frames:
            logger.error(
                f"Need more than {params.min_post_release_frames} frames after release at {release_index}, "
                f"trajectory has {len(points)} points"
            )
            raise InsufficientDataError(
                "Too few points after release to estimate launch velocity",
                required=release_index + params.min_post_release_frames + 1,
                available=len(points),
            )

        frame_dt = frame_step / fps
        tracked = self.tracked_distance(points[landing_index], calibration)
        velocity = self.release_velocity(points, release_index, calibration, frame_dt)
        angle = self.release_angle(points, release_index)
        predicted = vacuum_range(velocity, angle, params.gravity_m_s2)
        flight_time = self.flight_time(points, release_index, frame_dt)

        if tracked <= 0 or predicted <= 0:
            logger.warning(
                f"No basis for distance comparison: tracked={tracked:.2f}m predicted={predicted:.2f}m"
            )
        confidence = self._scorer.distance_agreement(tracked, predicted)

        logger.info(
            f"Tracked {tracked:.2f}m vs predicted {predicted:.2f}m "
            f"(v={velocity:.2f}m/s, angle={angle:.1f}deg, confidence={confidence:.2f})"
        )
        return ThrowResult(
            tracked_distance=tracked,
            predicted_distance=predicted,
            distance_confidence=confidence,
            release_angle=angle,
            release_velocity=velocity,
            flight_time=flight_time,
        )

    @staticmethod
    def tracked_distance(landing: TimedPoint, calibration: CalibrationFrame) -> float:
        pixels = Point(landing.x, landing.y).distance_to(calibration.origin_pixel)
        return calibration.to_meters(pixels)

    def release_velocity(
        self,
        points: Sequence[TimedPoint],
        release_index: int,
        calibration: CalibrationFrame,
        frame_dt: float,
    ) -> float:
        offset = self._params.velocity_offset_frames
        p1 = points[release_index]
        p2 = points[release_index + offset]
        dx = calibration.to_meters(p2.x - p1.x)
        dy = calibration.to_meters(p2.y - p1.y)
        return math.hypot(dx, dy) / (offset * frame_dt)

    def release_angle(self, points: Sequence[TimedPoint], release_index: int) -> float:
        p1 = points[release_index]
        p2 = points[release_index + self._params.angle_offset_frames]
        dx = p2.x - p1.x
        dy = p1.y - p2.y  # screen y grows downward
        return fold_launch_angle(math.degrees(math.atan2(dy, dx)))

    def flight_time(self, points: Sequence[TimedPoint], release_index: int, frame_dt: float) -> float:
        """Time until the position stabilizes, else until the trajectory ends."""
        params = self._params
        window = params.stabilization_window
        landing_frame = len(points) - 1
        for i in range(release_index + params.stabilization_offset_frames, len(points) - window):
            moved = math.hypot(points[i + window].x - points[i].x, points[i + window].y - points[i].y)
            if moved < params.stabilization_threshold_px:
                landing_frame = i
                break
        return (landing_frame - release_index) * frame_dt

    @staticmethod
    def _check_anchors(
        points: Sequence[TimedPoint],
        release_index: Optional[int],
        landing_index: Optional[int],
    ) -> None:
        if release_index is None:
            logger.error("Cannot fuse distance without a release point")
            raise MissingAnchorError("Release point was not detected", anchor="release")
        if landing_index is None:
            logger.error("Cannot fuse distance without a landing point")
            raise MissingAnchorError("Landing point was not detected", anchor="landing")
        if not 0 <= release_index < len(points):
            raise MissingAnchorError(
                f"Release index {release_index} outside trajectory of {len(points)} points", anchor="release"
            )
        if not release_index <= landing_index < len(points):
            raise MissingAnchorError(
                f"Landing index {landing_index} invalid for release {release_index} and {len(points)} points",
                anchor="landing",
            )
