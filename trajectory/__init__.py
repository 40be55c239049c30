"""Trajectory reconstruction and projectile estimation package."""

from trajectory.classification import classify_camera_view, estimate_implement_type
from trajectory.confidence import ConfidenceScorer
from trajectory.contracts import (
    CameraView,
    ConfidenceMode,
    FailureCode,
    FusionParams,
    ReleaseState,
    SegmentationParams,
    SimulationParams,
    SimulationResult,
    ThrowResult,
    ThrowSegments,
    TurnMetrics,
    TurnParams,
    TwoPointResult,
    VelocityEstimate,
    VelocityFitParams,
    ViewType,
)
from trajectory.fusion import DistanceFuser
from trajectory.physics import DragTrajectorySimulator, OptimalRelease, find_optimal_release_angle, vacuum_range
from trajectory.segmentation import ThrowSegmenter, segment_throw
from trajectory.turns import TurnAnalyzer, unwrap_angles
from trajectory.velocity import VelocityEstimator, fit_velocity, fit_velocity_from_pixels, reject_outliers

__all__ = [
    "CameraView",
    "ConfidenceMode",
    "ConfidenceScorer",
    "DistanceFuser",
    "DragTrajectorySimulator",
    "FailureCode",
    "FusionParams",
    "OptimalRelease",
    "ReleaseState",
    "SegmentationParams",
    "SimulationParams",
    "SimulationResult",
    "ThrowResult",
    "ThrowSegmenter",
    "ThrowSegments",
    "TurnAnalyzer",
    "TurnMetrics",
    "TurnParams",
    "TwoPointResult",
    "VelocityEstimate",
    "VelocityEstimator",
    "VelocityFitParams",
    "ViewType",
    "classify_camera_view",
    "estimate_implement_type",
    "find_optimal_release_angle",
    "fit_velocity",
    "fit_velocity_from_pixels",
    "reject_outliers",
    "segment_throw",
    "unwrap_angles",
]
