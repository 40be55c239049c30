"""Angular kinematics of the pre-release swing, one summary per turn."""

from __future__ import annotations

import math
from typing import List, Optional, Sequence

import numpy as np

from contracts import CalibrationFrame, Point, TimedPoint
from log_config.logger import get_logger
from trajectory.contracts import TurnMetrics, TurnParams

logger = get_logger(__name__)

FULL_TURN_RAD = 2.0 * math.pi
# Absorbs float accumulation so an exact 2π of rotation closes the turn.
TURN_EPSILON_RAD = 1e-9


def unwrap_angles(angles: Sequence[float]) -> np.ndarray:
    """Resolve 2π jumps by taking the continuation closest to the previous value."""
    if len(angles) == 0:
        return np.zeros(0, dtype=float)
    raw = np.asarray(angles, dtype=float)
    out = np.empty_like(raw)
    out[0] = raw[0]
    for i in range(1, len(raw)):
        d = raw[i] - raw[i - 1]
        while d > math.pi:
            d -= FULL_TURN_RAD
        while d < -math.pi:
            d += FULL_TURN_RAD
        out[i] = out[i - 1] + d
    return out


class TurnAnalyzer:
    def __init__(self, params: Optional[TurnParams] = None) -> None:
        self._params = params or TurnParams()

    def analyze(
        self,
        points: Sequence[TimedPoint],
        release_index: int,
        calibration: CalibrationFrame,
        fps: float,
        frame_step: int = 1,
    ) -> List[TurnMetrics]:
        """Summarize each full rotation (and a trailing partial one) before release.

        Args:
            points: Pixel trajectory; only the slice up to release is used
            release_index: Index of the release point in points
            calibration: Circle origin and scale factor
            fps: Video frame rate
            frame_step: Frames between consecutive trajectory samples

        Returns:
            Turn metrics ordered by turn number, empty when the swing is too short
        """
        params = self._params
        if len(points) < params.min_points or release_index < params.min_release_index:
            logger.debug(
                f"Skipping turn analysis: {len(points)} points, release at {release_index}"
            )
            return []

        dt = frame_step / fps
        swing = list(points[: min(release_index + 1, len(points))])
        origin = calibration.origin_pixel

        angles = unwrap_angles([math.atan2(p.y - origin.y, p.x - origin.x) for p in swing])
        direction = 1.0 if angles[-1] - angles[0] >= 0 else -1.0

        radius_m = np.array(
            [Point(p.x, p.y).distance_to(origin) for p in swing], dtype=float
        ) / calibration.pixels_per_meter

        omega = np.concatenate([[0.0], np.diff(angles) * direction / dt])
        v_tan = np.abs(omega) * radius_m
        a_tan = np.concatenate([[0.0], np.diff(v_tan) / dt])
        a_cent = v_tan * v_tan / np.maximum(radius_m, params.min_radius_m)

        turns: List[TurnMetrics] = []
        start = 0
        for i in range(1, len(angles)):
            rotation = (angles[i] - angles[start]) * direction
            if rotation >= FULL_TURN_RAD - TURN_EPSILON_RAD:
                turns.append(_summarize(len(turns) + 1, start, i, dt, v_tan, a_tan, a_cent))
                start = i

        last = len(angles) - 1
        if start < last - 3:
            remaining = abs((angles[last] - angles[start]) * direction)
            if remaining >= math.radians(params.partial_turn_min_deg):
                turns.append(_summarize(len(turns) + 1, start, last, dt, v_tan, a_tan, a_cent))

        logger.debug(f"Detected {len(turns)} turns before release")
        return turns


def _summarize(
    turn_number: int,
    start: int,
    end: int,
    dt: float,
    v_tan: np.ndarray,
    a_tan: np.ndarray,
    a_cent: np.ndarray,
) -> TurnMetrics:
    v = v_tan[start : end + 1]
    at = a_tan[start : end + 1]
    ac = a_cent[start : end + 1]
    return TurnMetrics(
        turn_number=turn_number,
        start_index=start,
        end_index=end,
        duration_sec=(end - start) * dt,
        avg_tangential_velocity=_avg(v),
        peak_tangential_velocity=_peak(v),
        avg_tangential_acceleration=_avg(at),
        peak_tangential_acceleration=_peak(at),
        avg_centripetal_acceleration=_avg(ac),
        peak_centripetal_acceleration=_peak(ac),
    )


def _avg(values: np.ndarray) -> float:
    return float(np.mean(values)) if values.size else 0.0


def _peak(values: np.ndarray) -> float:
    return float(np.max(values)) if values.size else 0.0
