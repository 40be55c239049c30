"""Heuristic classifiers for camera view and implement type."""

from __future__ import annotations

import math
from typing import Sequence, Tuple

from contracts import ImplementType, TimedPoint
from trajectory.contracts import CameraView, ViewType

ANGLED_CURVATURE_RAD = 0.1
MIN_STEP_PX = 1.0

# Typical release speeds: men 24-30 m/s, women 20-26 m/s.
MEN_CENTER_M_S = 27.0
WOMEN_CENTER_M_S = 23.0
SPEED_STD_M_S = 3.0


def classify_camera_view(points: Sequence[TimedPoint]) -> CameraView:
    """Side-on footage traces a flat path, angled footage bends it.

    Uses the mean absolute turning angle between consecutive displacement
    vectors, skipping near-stationary steps.
    """
    if len(points) < 10:
        return CameraView(view_type=ViewType.SIDE, confidence=0.5)

    total = 0.0
    for i in range(2, len(points)):
        p1, p2, p3 = points[i - 2], points[i - 1], points[i]
        v1x, v1y = p2.x - p1.x, p2.y - p1.y
        v2x, v2y = p3.x - p2.x, p3.y - p2.y
        if abs(v1x) > MIN_STEP_PX or abs(v1y) > MIN_STEP_PX:
            cross = v1x * v2y - v1y * v2x
            dot = v1x * v2x + v1y * v2y
            total += abs(math.atan2(cross, dot))

    curvature = total / (len(points) - 2)
    if curvature > ANGLED_CURVATURE_RAD:
        return CameraView(view_type=ViewType.ANGLED, confidence=min(curvature * 5.0, 0.95))
    return CameraView(view_type=ViewType.SIDE, confidence=min(0.95, 1.0 - curvature * 5.0))


def estimate_implement_type(release_velocity: float) -> Tuple[ImplementType, float]:
    """Most likely implement for a release speed and its normalized probability."""
    denom = 2.0 * SPEED_STD_M_S * SPEED_STD_M_S
    men = math.exp(-((release_velocity - MEN_CENTER_M_S) ** 2) / denom)
    women = math.exp(-((release_velocity - WOMEN_CENTER_M_S) ** 2) / denom)
    total = men + women
    if total == 0:
        # Both likelihoods underflow far from either center.
        men_type = release_velocity > (MEN_CENTER_M_S + WOMEN_CENTER_M_S) / 2.0
        return (ImplementType.MEN if men_type else ImplementType.WOMEN), 1.0
    if men > women:
        return ImplementType.MEN, men / total
    return ImplementType.WOMEN, women / total
