"""Confidence scoring utilities."""

from __future__ import annotations


class ConfidenceScorer:
    def distance_agreement(self, tracked_m: float, predicted_m: float) -> float:
        """Agreement of two independent distance estimates, in [0, 1].

        This says how well the estimators agree, not how accurate either is.
        Zero when either distance gives no basis for comparison.
        """
        if tracked_m <= 0 or predicted_m <= 0:
            return 0.0
        mean = (tracked_m + predicted_m) / 2.0
        score = 1.0 - abs(tracked_m - predicted_m) / mean
        return round(max(0.0, min(score, 1.0)), 2)

    def overall(self, velocity_confidence: float, calibration_confidence: float) -> float:
        return float(max(0.0, min(velocity_confidence * calibration_confidence, 1.0)))
