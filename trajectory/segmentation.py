"""Release and landing detection from the tracked speed profile."""

from __future__ import annotations

from typing import List, Optional, Sequence

import numpy as np

from contracts import TimedPoint
from log_config.logger import get_logger
from trajectory.contracts import FailureCode, SegmentationParams, ThrowSegments

logger = get_logger(__name__)


def step_displacements(points: Sequence[TimedPoint]) -> np.ndarray:
    """Euclidean distance covered between each consecutive pair of points."""
    if len(points) < 2:
        return np.zeros(0, dtype=float)
    xy = np.array([[p.x, p.y] for p in points], dtype=float)
    return np.hypot(np.diff(xy[:, 0]), np.diff(xy[:, 1]))


class ThrowSegmenter:
    """Split a pixel trajectory into swing, flight, and rest.

    Release is the sharpest rise in mean speed across a sliding window, which
    separates the sudden acceleration at release from the smoother circular
    swing. Landing is the first point after release where the implement has
    effectively stopped moving.
    """

    def __init__(self, params: Optional[SegmentationParams] = None) -> None:
        self._params = params or SegmentationParams()

    def segment(self, points: Sequence[TimedPoint], dt: float) -> ThrowSegments:
        params = self._params
        count = len(points)
        if count < params.min_points:
            logger.warning(f"Trajectory has {count} points, need {params.min_points} to segment")
            return ThrowSegments(
                release_index=0,
                landing_index=None,
                point_count=count,
                failure_codes=[FailureCode.INSUFFICIENT_POINTS],
            )

        displacements = step_displacements(points)
        release_index = self.detect_release(displacements / dt if dt > 0 else displacements)
        if release_index is None:
            logger.warning("No speed increase found, release point undetected")
            return ThrowSegments(
                release_index=None,
                landing_index=None,
                point_count=count,
                failure_codes=[FailureCode.RELEASE_NOT_FOUND],
            )

        landing_index = self.detect_landing(displacements, release_index, count)
        logger.debug(f"Segmented {count} points: release={release_index}, landing={landing_index}")
        return ThrowSegments(
            release_index=release_index,
            landing_index=landing_index,
            point_count=count,
        )

    def detect_release(self, speeds: np.ndarray) -> Optional[int]:
        """Index with the largest rise in mean speed, first occurrence on ties."""
        window = self._params.release_window
        best_index: Optional[int] = None
        best_increase = 0.0
        for i in range(window, len(speeds) - window):
            before = float(np.mean(speeds[i - window : i]))
            after = float(np.mean(speeds[i : i + window]))
            increase = after - before
            if increase > best_increase:
                best_increase = increase
                best_index = i
        return best_index

    def detect_landing(self, displacements: np.ndarray, release_index: int, count: int) -> int:
        """First index whose forward mean displacement drops below the stopped threshold.

        Falls back to the final index when the implement never settles, e.g.
        it rolled out of frame or the clip ended first.
        """
        params = self._params
        window = params.landing_window
        for i in range(release_index + params.landing_offset, len(displacements) - window):
            if float(np.mean(displacements[i : i + window])) < params.stopped_threshold_px:
                return i
        return count - 1


def segment_throw(
    points: List[TimedPoint],
    dt: float,
    params: Optional[SegmentationParams] = None,
) -> ThrowSegments:
    return ThrowSegmenter(params).segment(points, dt)
