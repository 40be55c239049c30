"""Tests for tracked/predicted distance fusion and confidence scoring."""

from __future__ import annotations

import pytest

from contracts import CalibrationFrame, Point, TimedPoint, build_tracked_trajectory
from exceptions import InsufficientDataError, MissingAnchorError
from trajectory.confidence import ConfidenceScorer
from trajectory.fusion import DistanceFuser, fold_launch_angle
from trajectory.physics import vacuum_range
from trajectory.sim import ThrowSimConfig, simulate_throw

FPS = 60.0


@pytest.fixture
def synthetic():
    config = ThrowSimConfig()
    throw = simulate_throw(config)
    points = build_tracked_trajectory(throw.pixels, config.fps, config.frame_step)
    calibration = CalibrationFrame(origin_pixel=Point(*config.center), pixels_per_meter=config.pixels_per_meter)
    return throw, points, calibration


class TestConfidenceScorer:
    def test_identical_distances(self):
        assert ConfidenceScorer().distance_agreement(60.0, 60.0) == 1.0

    def test_monotonic_in_disagreement(self):
        scorer = ConfidenceScorer()
        # Mean held at 60 m while the gap widens.
        scores = [scorer.distance_agreement(60.0 - d, 60.0 + d) for d in (0.0, 2.5, 5.0, 7.5, 10.0)]
        assert all(a > b for a, b in zip(scores, scores[1:]))

    def test_symmetric_and_rounded(self):
        scorer = ConfidenceScorer()
        assert scorer.distance_agreement(50.0, 70.0) == scorer.distance_agreement(70.0, 50.0)
        assert scorer.distance_agreement(50.0, 70.0) == 0.67

    @pytest.mark.parametrize("tracked,predicted", [(0.0, 60.0), (60.0, 0.0), (-5.0, 60.0), (0.0, 0.0)])
    def test_no_basis_is_zero(self, tracked, predicted):
        assert ConfidenceScorer().distance_agreement(tracked, predicted) == 0.0

    def test_overall_clamped(self):
        scorer = ConfidenceScorer()
        assert scorer.overall(0.9, 0.7) == pytest.approx(0.63)
        assert scorer.overall(1.5, 1.0) == 1.0
        assert scorer.overall(-0.2, 1.0) == 0.0


class TestFoldLaunchAngle:
    @pytest.mark.parametrize(
        "raw,folded", [(40.0, 40.0), (-30.0, 30.0), (135.0, 45.0), (170.0, 10.0), (90.0, 90.0), (-150.0, 30.0)]
    )
    def test_folds_into_upward_quadrant(self, raw, folded):
        assert fold_launch_angle(raw) == pytest.approx(folded)


class TestDistanceFuser:
    def test_synthetic_throw(self, synthetic):
        throw, points, calibration = synthetic
        result = DistanceFuser().fuse(points, throw.release_index, throw.landing_index, calibration, FPS)

        landing = points[throw.landing_index]
        expected_tracked = Point(landing.x, landing.y).distance_to(calibration.origin_pixel) / 60.0
        assert result.tracked_distance == pytest.approx(expected_tracked)
        assert result.release_velocity == pytest.approx(25.0, abs=0.3)
        assert result.release_angle == pytest.approx(40.0, abs=0.5)
        assert result.predicted_distance == pytest.approx(
            vacuum_range(result.release_velocity, result.release_angle)
        )
        assert result.distance_confidence > 0.9
        assert result.flight_time == pytest.approx(
            (throw.landing_index - throw.release_index) / FPS, abs=1.5 / FPS
        )

    def test_leftward_throw_keeps_angle(self, synthetic):
        throw, points, calibration = synthetic
        mirrored = [TimedPoint(2 * calibration.origin_pixel.x - p.x, p.y, p.t) for p in points]
        forward = DistanceFuser().fuse(points, throw.release_index, throw.landing_index, calibration, FPS)
        backward = DistanceFuser().fuse(mirrored, throw.release_index, throw.landing_index, calibration, FPS)
        assert backward.release_angle == pytest.approx(forward.release_angle)
        assert backward.tracked_distance == pytest.approx(forward.tracked_distance)

    def test_frame_step_scales_velocity(self, synthetic):
        throw, points, calibration = synthetic
        single = DistanceFuser().fuse(points, throw.release_index, throw.landing_index, calibration, FPS)
        double = DistanceFuser().fuse(points, throw.release_index, throw.landing_index, calibration, FPS, 2)
        assert double.release_velocity == pytest.approx(single.release_velocity / 2.0)
        assert double.flight_time == pytest.approx(single.flight_time * 2.0)

    def test_zero_tracked_distance_has_no_confidence(self, synthetic):
        throw, points, _ = synthetic
        landing = points[throw.landing_index]
        calibration = CalibrationFrame(origin_pixel=Point(landing.x, landing.y), pixels_per_meter=60.0)
        result = DistanceFuser().fuse(points, throw.release_index, throw.landing_index, calibration, FPS)
        assert result.tracked_distance == 0.0
        assert result.distance_confidence == 0.0

    def test_missing_release(self, synthetic):
        throw, points, calibration = synthetic
        with pytest.raises(MissingAnchorError) as excinfo:
            DistanceFuser().fuse(points, None, throw.landing_index, calibration, FPS)
        assert excinfo.value.anchor == "release"

    def test_missing_landing(self, synthetic):
        throw, points, calibration = synthetic
        with pytest.raises(MissingAnchorError) as excinfo:
            DistanceFuser().fuse(points, throw.release_index, None, calibration, FPS)
        assert excinfo.value.anchor == "landing"

    def test_landing_before_release(self, synthetic):
        throw, points, calibration = synthetic
        with pytest.raises(MissingAnchorError):
            DistanceFuser().fuse(points, throw.release_index, throw.release_index - 1, calibration, FPS)

    def test_too_few_points_after_release(self):
        points = [TimedPoint(float(i), 0.0, i / FPS) for i in range(20)]
        calibration = CalibrationFrame(origin_pixel=Point(0.0, 0.0), pixels_per_meter=10.0)
        with pytest.raises(InsufficientDataError):
            DistanceFuser().fuse(points, 15, 19, calibration, FPS)

    def test_flight_time_falls_back_to_end(self):
        points = [TimedPoint(10.0 * i, 0.0, i / FPS) for i in range(30)]
        fuser = DistanceFuser()
        assert fuser.flight_time(points, 5, 1.0 / FPS) == pytest.approx(24.0 / FPS)
