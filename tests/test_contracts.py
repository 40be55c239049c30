import json

import pytest

from contracts import IMPLEMENTS, ImplementType, Point, TimedPoint, build_tracked_trajectory
from contracts.versioning import APP_VERSION, SCHEMA_VERSION, make_envelope
from trajectory.contracts import (
    FailureCode,
    ThrowResult,
    ThrowSegments,
    VelocityEstimate,
)


def test_contracts_instantiation() -> None:
    point = Point(x=3.0, y=4.0)
    sample = TimedPoint(x=3.0, y=4.0, t=0.5)
    estimate = VelocityEstimate(vx=20.0, vy=15.0, confidence=0.9)
    result = ThrowResult(
        tracked_distance=70.0,
        predicted_distance=68.0,
        distance_confidence=0.97,
        release_angle=41.0,
        release_velocity=27.0,
        flight_time=3.4,
    )

    assert point.distance_to(Point(0.0, 0.0)) == 5.0
    assert sample.t == 0.5
    assert estimate.speed == pytest.approx(25.0)
    assert result.to_dict()["release_angle"] == 41.0


def test_build_tracked_trajectory_timestamps() -> None:
    points = build_tracked_trajectory([(0, 0), Point(1.0, 2.0), (2, 4)], fps=30.0, frame_step=3)
    assert [p.t for p in points] == pytest.approx([0.0, 0.1, 0.2])
    assert (points[1].x, points[1].y) == (1.0, 2.0)
    assert all(isinstance(p, TimedPoint) and isinstance(p.x, float) for p in points)


@pytest.mark.parametrize("fps,frame_step", [(0.0, 1), (-30.0, 1), (60.0, 0)])
def test_build_tracked_trajectory_rejects_bad_timing(fps, frame_step) -> None:
    with pytest.raises(ValueError):
        build_tracked_trajectory([(0, 0)], fps=fps, frame_step=frame_step)


def test_implement_presets() -> None:
    men = IMPLEMENTS[ImplementType.MEN]
    assert (men.mass_kg, men.diameter_mm) == (7.26, 110.0)
    assert (IMPLEMENTS[ImplementType.WOMEN].mass_kg, IMPLEMENTS[ImplementType.WOMEN].diameter_mm) == (4.0, 95.0)
    assert IMPLEMENTS[ImplementType.YOUTH_BOYS].mass_kg == 5.0
    assert IMPLEMENTS[ImplementType.YOUTH_GIRLS].diameter_mm == 85.0
    assert men.to_dict()["type"] == "men"


def test_segments_serialize() -> None:
    segments = ThrowSegments(release_index=None, landing_index=None, point_count=30,
                             failure_codes=[FailureCode.RELEASE_NOT_FOUND])
    data = segments.to_dict()
    assert data["failure_codes"] == ["RELEASE_NOT_FOUND"]
    assert not segments.complete
    assert segments.flight([]) == []


def test_envelope_is_json_serializable() -> None:
    estimate = VelocityEstimate(vx=20.0, vy=15.0, confidence=0.9, inlier_count=6)
    envelope = make_envelope({"velocity": estimate.to_dict()})
    decoded = json.loads(json.dumps(envelope))
    assert decoded["schema_version"] == SCHEMA_VERSION
    assert decoded["app_version"] == APP_VERSION
    assert decoded["payload"]["velocity"]["speed"] == pytest.approx(25.0)
