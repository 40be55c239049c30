"""Constant-velocity regression with single-pass outlier rejection."""

from __future__ import annotations

from dataclasses import replace
from typing import List, Optional, Sequence

import numpy as np

from contracts import TimedPoint
from exceptions import InsufficientDataError
from log_config.logger import get_logger
from trajectory.contracts import ConfidenceMode, VelocityEstimate, VelocityFitParams

logger = get_logger(__name__)


def fit_velocity(points: Sequence[TimedPoint]) -> Optional[VelocityEstimate]:
    """Least-squares fit of x(t) = vx*t + x0 and y(t) = vy*t + y0.

    Closed form from the normal equations, each axis independently. Returns
    None for fewer than two points or when every point shares a timestamp.
    The returned estimate carries no confidence yet.
    """
    n = len(points)
    if n < 2:
        return None

    t_abs = np.array([p.t for p in points], dtype=float)
    x = np.array([p.x for p in points], dtype=float)
    y = np.array([p.y for p in points], dtype=float)
    # Centered on the first timestamp so a zero-variance window gives an exact zero denominator.
    t = t_abs - t_abs[0]

    sum_t = float(t.sum())
    sum_tt = float((t * t).sum())
    sum_x = float(x.sum())
    sum_y = float(y.sum())
    sum_xt = float((x * t).sum())
    sum_yt = float((y * t).sum())

    denom = n * sum_tt - sum_t * sum_t
    if denom == 0:
        return None

    vx = (n * sum_xt - sum_t * sum_x) / denom
    vy = (n * sum_yt - sum_t * sum_y) / denom
    x0 = (sum_x - vx * sum_t) / n - vx * t_abs[0]
    y0 = (sum_y - vy * sum_t) / n - vy * t_abs[0]
    return VelocityEstimate(vx=vx, vy=vy, confidence=0.0, x0=x0, y0=y0, inlier_count=n)


def residuals(points: Sequence[TimedPoint], fit: VelocityEstimate) -> np.ndarray:
    """Euclidean distance of each point from the fitted constant-velocity line."""
    if not points:
        return np.zeros(0, dtype=float)
    t = np.array([p.t for p in points], dtype=float)
    dx = np.array([p.x for p in points], dtype=float) - (fit.x0 + fit.vx * t)
    dy = np.array([p.y for p in points], dtype=float) - (fit.y0 + fit.vy * t)
    return np.hypot(dx, dy)


def reject_outliers(
    points: Sequence[TimedPoint],
    fit: VelocityEstimate,
    max_residual_m: float = 0.15,
) -> List[TimedPoint]:
    if len(points) < 3:
        return list(points)
    errors = residuals(points, fit)
    return [p for p, err in zip(points, errors) if err <= max_residual_m]


def residual_confidence(
    points: Sequence[TimedPoint],
    fit: VelocityEstimate,
    residual_scale_m: float = 0.3,
) -> float:
    """Map mean residual to [0, 1]: 5 cm is near 1.0, 30 cm and above is 0."""
    if len(points) < 3:
        return 0.0
    mean_error = float(np.mean(residuals(points, fit)))
    confidence = 1.0 - mean_error / residual_scale_m
    return float(max(0.0, min(confidence, 1.0)))


def r_squared_confidence(points: Sequence[TimedPoint], fit: VelocityEstimate) -> float:
    """Minimum coefficient of determination over the two axes."""
    if len(points) < 3:
        return 0.0
    t = np.array([p.t for p in points], dtype=float)
    scores = []
    for values, v, v0 in (
        (np.array([p.x for p in points], dtype=float), fit.vx, fit.x0),
        (np.array([p.y for p in points], dtype=float), fit.vy, fit.y0),
    ):
        ss_res = float(np.sum((values - (v0 + v * t)) ** 2))
        ss_tot = float(np.sum((values - values.mean()) ** 2))
        if ss_tot > 0:
            scores.append(1.0 - ss_res / ss_tot)
        else:
            # A constant axis is fully explained only if the fit is flat too.
            scores.append(1.0 if ss_res <= 1e-12 else 0.0)
    return float(max(0.0, min(min(scores), 1.0)))


class VelocityEstimator:
    """Windowed velocity estimate with one outlier-rejection pass.

    The refit is not iterated to convergence; a single pass keeps latency
    bounded and an already-filtered window is a fixed point.
    """

    def __init__(self, params: Optional[VelocityFitParams] = None) -> None:
        self._params = params or VelocityFitParams()

    @property
    def params(self) -> VelocityFitParams:
        return self._params

    def estimate(self, points: Sequence[TimedPoint]) -> Optional[VelocityEstimate]:
        """Estimate velocity for a window of points in meters.

        Raises:
            InsufficientDataError: fewer than two points

        Returns:
            The estimate, or None when the window has zero time variance
        """
        if len(points) < 2:
            logger.error(f"Velocity fit needs at least 2 points, got {len(points)}")
            raise InsufficientDataError(
                f"Velocity fit needs at least 2 points, got {len(points)}",
                required=2,
                available=len(points),
            )

        initial = fit_velocity(points)
        if initial is None:
            logger.debug("Velocity window has zero time variance, no estimate")
            return None

        if len(points) < 3:
            return replace(initial, confidence=0.0, inlier_count=len(points))

        used: Sequence[TimedPoint] = points
        fit = initial
        kept = reject_outliers(points, initial, self._params.max_residual_m)
        if len(kept) < len(points):
            refit = fit_velocity(kept)
            if refit is None:
                logger.warning(
                    f"Refit after rejecting {len(points) - len(kept)} outliers failed, keeping unfiltered fit"
                )
            else:
                logger.debug(f"Rejected {len(points) - len(kept)} of {len(points)} points as outliers")
                used = kept
                fit = refit

        confidence = self._confidence(used, fit)
        return replace(
            fit,
            confidence=confidence,
            inlier_count=len(used),
            rejected_count=len(points) - len(used),
        )

    def _confidence(self, points: Sequence[TimedPoint], fit: VelocityEstimate) -> float:
        if self._params.confidence_mode == ConfidenceMode.R_SQUARED:
            return r_squared_confidence(points, fit)
        return residual_confidence(points, fit, self._params.residual_scale_m)


def fit_velocity_from_pixels(
    points: Sequence[TimedPoint],
    pixels_per_meter: float,
) -> Optional[VelocityEstimate]:
    """Regression on pixel positions converted to meters, y pointing up.

    Confidence is the minimum per-axis R². Returns None for fewer than three
    points or a zero-variance window.
    """
    if len(points) < 3:
        return None
    meters = [TimedPoint(x=p.x / pixels_per_meter, y=-p.y / pixels_per_meter, t=p.t) for p in points]
    fit = fit_velocity(meters)
    if fit is None:
        return None
    return replace(fit, confidence=r_squared_confidence(meters, fit))
