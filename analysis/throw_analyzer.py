"""End-to-end throw analysis over a completed pixel trajectory."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from configs.settings import AppConfig
from contracts import (
    CalibrationFrame,
    ImplementSpec,
    ImplementType,
    Point,
    TimedPoint,
    build_tracked_trajectory,
)
from exceptions import DegenerateFitError, InsufficientDataError, MissingAnchorError
from log_config.logger import get_logger, log_performance
from trajectory.classification import classify_camera_view, estimate_implement_type
from trajectory.confidence import ConfidenceScorer
from trajectory.contracts import (
    CameraView,
    FailureCode,
    ReleaseState,
    SimulationResult,
    ThrowResult,
    ThrowSegments,
    TurnMetrics,
)
from trajectory.fusion import DistanceFuser
from trajectory.physics import DragTrajectorySimulator
from trajectory.segmentation import ThrowSegmenter
from trajectory.turns import TurnAnalyzer
from trajectory.velocity import VelocityEstimator

logger = get_logger(__name__)


@dataclass(frozen=True)
class ThrowAnalysis:
    result: ThrowResult
    segments: ThrowSegments
    release: ReleaseState
    turns: List[TurnMetrics]
    simulation: SimulationResult
    overlay: List[Point]
    camera_view: CameraView
    implement: ImplementSpec
    estimated_implement: ImplementType
    estimated_implement_confidence: float
    confidence: float
    failure_codes: List[FailureCode] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "result": self.result.to_dict(),
            "segments": self.segments.to_dict(),
            "release": self.release.to_dict(),
            "turns": [turn.to_dict() for turn in self.turns],
            "simulation": self.simulation.to_dict(),
            "overlay": [{"x": p.x, "y": p.y} for p in self.overlay],
            "camera_view": self.camera_view.to_dict(),
            "implement": self.implement.to_dict(),
            "estimated_implement": {
                "type": self.estimated_implement.value,
                "confidence": self.estimated_implement_confidence,
            },
            "confidence": self.confidence,
            "failure_codes": [code.value for code in self.failure_codes],
        }


class ThrowAnalyzer:
    """Runs segmentation, turn analysis, release fitting, simulation and fusion.

    Pure and synchronous: every call works on its own input snapshot, so
    analyses for different implements can run side by side.
    """

    def __init__(self, config: Optional[AppConfig] = None) -> None:
        self._config = config or AppConfig()
        self._segmenter = ThrowSegmenter(self._config.segmentation)
        self._turns = TurnAnalyzer(self._config.turns)
        self._velocity = VelocityEstimator(self._config.velocity)
        self._simulator = DragTrajectorySimulator(self._config.physics)
        self._scorer = ConfidenceScorer()
        self._fuser = DistanceFuser(self._config.fusion, self._scorer)

    def analyze(
        self,
        pixels: Sequence[Union[Tuple[float, float], Point]],
        calibration: CalibrationFrame,
        fps: float,
        frame_step: int = 1,
        implement: Optional[ImplementSpec] = None,
    ) -> ThrowAnalysis:
        """Analyze one throw.

        Raises:
            InsufficientDataError: trajectory too short to segment or fit
            MissingAnchorError: release or landing not detected
            DegenerateFitError: release window has no time variance
        """
        started = time.perf_counter()
        implement = implement or self._config.implement_spec
        points = build_tracked_trajectory(pixels, fps, frame_step)
        dt = frame_step / fps
        failure_codes: List[FailureCode] = []

        segments = self._segmenter.segment(points, dt)
        if FailureCode.INSUFFICIENT_POINTS in segments.failure_codes:
            raise InsufficientDataError(
                f"Need at least {self._config.segmentation.min_points} tracked points, got {len(points)}",
                required=self._config.segmentation.min_points,
                available=len(points),
            )
        if segments.release_index is None:
            raise MissingAnchorError("Release point was not detected", anchor="release")
        if segments.landing_index is None:
            raise MissingAnchorError("Landing point was not detected", anchor="landing")

        turns = self._turns.analyze(points, segments.release_index, calibration, fps, frame_step)
        release = self.release_state(points, segments.release_index, calibration)

        direction = 1.0 if release.velocity.vx >= 0 else -1.0
        simulation = self._simulator.simulate(
            vx0=abs(release.velocity.vx),
            vy0=release.velocity.vy,
            release_height_m=release.release_height_m,
            mass_kg=implement.mass_kg,
            diameter_mm=implement.diameter_mm,
        )
        if simulation.clamped:
            failure_codes.append(FailureCode.SIMULATION_CLAMPED)

        result = self._fuser.fuse(
            points, segments.release_index, segments.landing_index, calibration, fps, frame_step
        )
        if result.tracked_distance <= 0 or result.predicted_distance <= 0:
            failure_codes.append(FailureCode.NO_COMPARISON_BASIS)

        camera_view = classify_camera_view(points)
        estimated_type, estimated_confidence = estimate_implement_type(release.velocity.speed)
        confidence = self._scorer.overall(release.velocity.confidence, calibration.confidence)

        overlay = [
            Point(
                release.position.x + direction * sample.x * calibration.pixels_per_meter,
                release.position.y - (sample.y - release.release_height_m) * calibration.pixels_per_meter,
            )
            for sample in simulation.trajectory
        ]

        log_performance("throw analysis", (time.perf_counter() - started) * 1000.0)
        logger.info(
            f"Throw analyzed: tracked={result.tracked_distance:.2f}m "
            f"simulated={simulation.distance_m:.2f}m turns={len(turns)} view={camera_view.view_type.value}"
        )
        return ThrowAnalysis(
            result=result,
            segments=segments,
            release=release,
            turns=turns,
            simulation=simulation,
            overlay=overlay,
            camera_view=camera_view,
            implement=implement,
            estimated_implement=estimated_type,
            estimated_implement_confidence=estimated_confidence,
            confidence=confidence,
            failure_codes=failure_codes,
        )

    def release_state(
        self,
        points: Sequence[TimedPoint],
        release_index: int,
        calibration: CalibrationFrame,
    ) -> ReleaseState:
        """Robust launch velocity from the points trailing release, in meters with y up."""
        window = list(points[release_index : release_index + self._config.velocity.window_size])
        if len(window) < 2:
            raise InsufficientDataError(
                f"No trailing window after release at {release_index}",
                required=release_index + 2,
                available=len(points),
            )

        anchor = points[release_index]
        ppm = calibration.pixels_per_meter
        meters = [
            TimedPoint(x=(p.x - anchor.x) / ppm, y=(anchor.y - p.y) / ppm, t=p.t - anchor.t) for p in window
        ]
        velocity = self._velocity.estimate(meters)
        if velocity is None:
            logger.error(f"Release window at {release_index} has zero time variance")
            raise DegenerateFitError(f"Release window at {release_index} has zero time variance")

        height = (calibration.origin_pixel.y - anchor.y) / ppm
        height = max(height, self._config.calibration.min_release_height_m, 0.0)
        logger.debug(
            f"Release state: v={velocity.speed:.2f}m/s angle={velocity.angle_deg:.1f}deg "
            f"h={height:.2f}m confidence={velocity.confidence:.2f}"
        )
        return ReleaseState(
            release_index=release_index,
            position=Point(anchor.x, anchor.y),
            velocity=velocity,
            release_height_m=height,
        )
